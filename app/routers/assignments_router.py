# /app/routers/assignments_router.py

"""
Endpoints for assignments and for receiving student submissions against them.
"""

from fastapi import APIRouter, Depends, UploadFile, File, Form, status
from typing import List, Optional

from ..services.grading_service import GradingService, get_grading_service
from ..models import assignment_model

router = APIRouter()


@router.post(
    "",
    response_model=assignment_model.AssignmentRecord,
    status_code=status.HTTP_201_CREATED,
    summary="Create an Assignment"
)
def create_assignment(
    payload: assignment_model.AssignmentCreate,
    grading_svc: GradingService = Depends(get_grading_service)
):
    return grading_svc.create_assignment(payload)


@router.get(
    "",
    response_model=assignment_model.AssignmentListResponse,
    summary="List Assignments with Grading Progress"
)
def list_assignments(grading_svc: GradingService = Depends(get_grading_service)):
    """Newest first, each with its total / graded / ungraded submission counts."""
    return grading_svc.get_assignment_summaries()


@router.get(
    "/{assignment_id}",
    response_model=assignment_model.AssignmentRecord,
    summary="Get an Assignment"
)
def get_assignment(assignment_id: str, grading_svc: GradingService = Depends(get_grading_service)):
    return grading_svc.get_assignment(assignment_id)


@router.get(
    "/{assignment_id}/submissions",
    response_model=List[assignment_model.SubmissionRecord],
    summary="List Submissions for an Assignment"
)
def list_assignment_submissions(assignment_id: str, grading_svc: GradingService = Depends(get_grading_service)):
    grading_svc.get_assignment(assignment_id)
    return grading_svc.get_submissions(assignment_id)


@router.post(
    "/{assignment_id}/submissions",
    response_model=assignment_model.SubmissionRecord,
    status_code=status.HTTP_201_CREATED,
    summary="Submit Work for an Assignment"
)
async def submit_assignment(
    assignment_id: str,
    student_name: str = Form(...),
    file: UploadFile = File(..., description="The student's work (image, PDF, .docx or text)."),
    student_id: Optional[str] = Form(None),
    grading_svc: GradingService = Depends(get_grading_service)
):
    """
    Uploads the file to object storage and records a Submission with status
    `submitted`. Nothing is recorded if the upload fails.
    """
    file_bytes = await file.read()
    return grading_svc.submit(
        assignment_id=assignment_id,
        student_name=student_name,
        file_name=file.filename,
        file_type=file.content_type,
        file_bytes=file_bytes,
        student_id=student_id,
    )
