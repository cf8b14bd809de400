# /app/routers/assessments_router.py

"""
Endpoints for generating assessments with AI, saving them as templates and
promoting templates into assignments.
"""

from fastapi import APIRouter, Depends, status
from typing import Optional

from ..services.assessment_service import AssessmentService, get_assessment_service
from ..models import assessment_model, assignment_model

router = APIRouter()


@router.post(
    "/generate",
    response_model=assessment_model.GeneratedAssessment,
    summary="Generate an Assessment with AI"
)
async def generate_assessment(
    request: assessment_model.GenerateAssessmentRequest,
    assessment_svc: AssessmentService = Depends(get_assessment_service)
):
    """
    Returns a generated question set. When the model's reply cannot be used, a
    generic question set is returned with `is_fallback` set to true.
    """
    return await assessment_svc.generate(request)


@router.post(
    "/templates",
    response_model=assessment_model.TemplateDetail,
    status_code=status.HTTP_201_CREATED,
    summary="Save an Assessment as a Template"
)
def save_template(
    payload: assessment_model.TemplateCreate,
    assessment_svc: AssessmentService = Depends(get_assessment_service)
):
    return assessment_svc.save_template(
        payload.assessment,
        topic=payload.topic,
        difficulty_level=payload.difficultyLevel,
        created_by=payload.created_by,
        is_published=payload.is_published,
    )


@router.get(
    "/templates",
    response_model=assessment_model.TemplateListResponse,
    summary="List Assessment Templates"
)
def list_templates(assessment_svc: AssessmentService = Depends(get_assessment_service)):
    return assessment_svc.list_templates()


@router.get(
    "/templates/{template_id}",
    response_model=assessment_model.TemplateDetail,
    summary="Get an Assessment Template with its Questions"
)
def get_template(template_id: str, assessment_svc: AssessmentService = Depends(get_assessment_service)):
    return assessment_svc.get_template_detail(template_id)


@router.post(
    "/templates/{template_id}/promote",
    response_model=assignment_model.AssignmentRecord,
    status_code=status.HTTP_201_CREATED,
    summary="Create an Assignment from a Template"
)
def promote_template(
    template_id: str,
    payload: Optional[assessment_model.PromoteTemplateRequest] = None,
    assessment_svc: AssessmentService = Depends(get_assessment_service)
):
    return assessment_svc.promote_template(template_id, created_by=payload.created_by if payload else None)


@router.post(
    "/publish",
    response_model=assignment_model.AssignmentRecord,
    status_code=status.HTTP_201_CREATED,
    summary="Publish a Generated Assessment as an Assignment"
)
def publish_generated_assessment(
    payload: assessment_model.TemplateCreate,
    assessment_svc: AssessmentService = Depends(get_assessment_service)
):
    """Saves the assessment as a published template and creates its assignment in one step."""
    return assessment_svc.publish_generated_assessment(payload)
