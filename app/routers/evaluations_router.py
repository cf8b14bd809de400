# /app/routers/evaluations_router.py

from fastapi import APIRouter, Depends
from typing import List, Optional

from ..services.grading_service import GradingService, get_grading_service
from ..models import assignment_model

router = APIRouter()


@router.get(
    "",
    response_model=List[assignment_model.EvaluationRecord],
    summary="List Evaluations"
)
def list_evaluations(
    submission_id: Optional[str] = None,
    grading_svc: GradingService = Depends(get_grading_service)
):
    """Newest first, optionally for a single submission."""
    return grading_svc.get_evaluations(submission_id)


@router.post(
    "/{evaluation_id}/publish",
    response_model=assignment_model.EvaluationRecord,
    summary="Publish an Evaluation to the Student"
)
def publish_evaluation(evaluation_id: str, grading_svc: GradingService = Depends(get_grading_service)):
    """Publishing is idempotent; publishing twice is not an error."""
    return grading_svc.publish_evaluation(evaluation_id)
