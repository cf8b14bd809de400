# /app/routers/functions_router.py

"""
Function-style endpoints that mirror the three remote calls the pipeline is
built from: text extraction, scoring and assessment generation.

Each one answers with an envelope, `{"success": true, ...}` on success and
`{"success": false, "error": "..."}` on failure, instead of an HTTP error body.
"""

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from ..core.exceptions import GradingError
from ..services import text_extraction_service
from ..services.grading_service import GradingService, get_grading_service
from ..services.assessment_service import AssessmentService, get_assessment_service
from ..models import assignment_model, assessment_model

router = APIRouter()


def _error_envelope(e: Exception, function_name: str) -> JSONResponse:
    print(f"Error in {function_name} function: {e}")
    if isinstance(e, GradingError):
        return JSONResponse(status_code=e.status_code, content={"success": False, "error": e.message})
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"success": False, "error": str(e) or "An unexpected error occurred."},
    )


@router.post(
    "/extract-text",
    response_model=assignment_model.ExtractTextResponse,
    summary="Extract Text from a File URL"
)
async def extract_text(request: assignment_model.ExtractTextRequest):
    try:
        extracted_text = await text_extraction_service.extract_text(request.fileUrl, request.fileType)
    except Exception as e:
        return _error_envelope(e, "extract-text")
    return {"success": True, "extractedText": extracted_text, "fileType": request.fileType}


@router.post(
    "/evaluate-assignment",
    response_model=assignment_model.EvaluateAssignmentResponse,
    summary="Score Extracted Text for a Submission"
)
async def evaluate_assignment(
    request: assignment_model.EvaluateAssignmentRequest,
    grading_svc: GradingService = Depends(get_grading_service)
):
    try:
        result, evaluation_id = await grading_svc.evaluate_extracted_text(
            request.submissionId, request.extractedText, request.assignmentTitle
        )
    except Exception as e:
        return _error_envelope(e, "evaluate-assignment")
    return {"success": True, "evaluation": result, "evaluationId": evaluation_id}


@router.post(
    "/generate-assessment",
    response_model=assessment_model.GenerateAssessmentResponse,
    summary="Generate an Assessment"
)
async def generate_assessment(
    request: assessment_model.GenerateAssessmentRequest,
    assessment_svc: AssessmentService = Depends(get_assessment_service)
):
    try:
        assessment = await assessment_svc.generate(request)
    except Exception as e:
        return _error_envelope(e, "generate-assessment")
    return {"success": True, "assessment": assessment}
