# /app/routers/submissions_router.py

from fastapi import APIRouter, Depends, status
from typing import List, Optional

from ..services.grading_service import GradingService, get_grading_service
from ..models import assignment_model

router = APIRouter()


@router.get(
    "",
    response_model=List[assignment_model.SubmissionRecord],
    summary="List Submissions"
)
def list_submissions(
    assignment_id: Optional[str] = None,
    grading_svc: GradingService = Depends(get_grading_service)
):
    return grading_svc.get_submissions(assignment_id)


@router.get(
    "/{submission_id}",
    response_model=assignment_model.SubmissionRecord,
    summary="Get a Submission"
)
def get_submission(submission_id: str, grading_svc: GradingService = Depends(get_grading_service)):
    return grading_svc.get_submission(submission_id)


@router.post(
    "/{submission_id}/evaluate",
    response_model=assignment_model.AIEvaluationResponse,
    summary="Evaluate a Submission with AI"
)
async def evaluate_submission_with_ai(
    submission_id: str,
    payload: Optional[assignment_model.AIEvaluationRequest] = None,
    grading_svc: GradingService = Depends(get_grading_service)
):
    """
    Extracts the submission's text, scores it with the language model, stores
    the result as an unpublished AI evaluation and marks the submission graded.
    Returns 409 if the submission is already being evaluated.
    """
    assignment_title = payload.assignment_title if payload else None
    result, evaluation_id = await grading_svc.evaluate_with_ai(submission_id, assignment_title)
    return {"submissionId": submission_id, "evaluationId": evaluation_id, "evaluation": result}


@router.post(
    "/{submission_id}/manual-evaluation",
    response_model=assignment_model.EvaluationRecord,
    status_code=status.HTTP_201_CREATED,
    summary="Record a Manual Grade"
)
def create_manual_evaluation(
    submission_id: str,
    payload: assignment_model.ManualEvaluationCreate,
    grading_svc: GradingService = Depends(get_grading_service)
):
    """Stores a faculty grade (0 <= score <= max score) and then marks the submission graded."""
    evaluation = grading_svc.create_manual_evaluation(
        submission_id=submission_id,
        score=payload.score,
        max_score=payload.max_score,
        remarks=payload.remarks,
        evaluator_id=payload.evaluator_id,
    )
    grading_svc.sync_status_after_grading(submission_id)
    return evaluation


@router.get(
    "/{submission_id}/evaluations",
    response_model=List[assignment_model.EvaluationRecord],
    summary="List Evaluations for a Submission"
)
def list_submission_evaluations(submission_id: str, grading_svc: GradingService = Depends(get_grading_service)):
    return grading_svc.get_evaluations(submission_id)


@router.get(
    "/{submission_id}/current-evaluation",
    response_model=Optional[assignment_model.EvaluationRecord],
    summary="Get the Current Evaluation for a Submission"
)
def get_current_evaluation(
    submission_id: str,
    published_only: bool = False,
    grading_svc: GradingService = Depends(get_grading_service)
):
    """Pass `published_only=true` for the student-facing view."""
    return grading_svc.get_current_evaluation(submission_id, published_only=published_only)
