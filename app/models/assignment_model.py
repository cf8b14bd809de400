# /app/models/assignment_model.py

from pydantic import BaseModel, Field, ConfigDict, field_validator
from typing import Optional, List, Dict, Any
from datetime import datetime
from enum import Enum


# --- Core Enumerations ---
class SubmissionStatus(str, Enum):
    SUBMITTED = "submitted"
    EVALUATING = "evaluating"
    GRADED = "graded"
    EVALUATION_FAILED = "evaluation_failed"

class EvaluationType(str, Enum):
    AI = "ai"
    MANUAL = "manual"


# --- AI Scoring Contracts ---

class ScoringResult(BaseModel):
    """
    The structured evaluation returned by the scoring service.

    `is_fallback` is True when the model's output could not be used and the
    generic fallback evaluation was substituted; `fallback_reason` then says why.
    """
    model_config = ConfigDict(from_attributes=True)
    score: float = Field(..., allow_inf_nan=False)
    percentage: Optional[float] = Field(None, allow_inf_nan=False)
    strengths: List[str] = Field(default_factory=list)
    improvements: List[str] = Field(default_factory=list)
    detailed_feedback: str = ""
    recommendations: List[str] = Field(default_factory=list)
    overall_comments: str = ""
    is_fallback: bool = False
    fallback_reason: Optional[str] = None

class AIEvaluationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    submissionId: str
    evaluationId: str
    evaluation: ScoringResult


# --- Assignment Contracts ---

class AssignmentCreate(BaseModel):
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    max_score: int = Field(default=100, gt=0)
    created_by: Optional[str] = None

    @field_validator('title')
    @classmethod
    def title_must_not_be_blank(cls, v):
        if not v.strip(): raise ValueError('Assignment title must not be blank.')
        return v.strip()

class AssignmentRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: str
    title: str
    description: Optional[str] = None
    max_score: int
    total_marks: Optional[int] = None
    template_id: Optional[str] = None
    created_by: str
    created_at: datetime
    updated_at: datetime

class AssignmentProgress(BaseModel):
    total: int = 0
    graded: int = 0
    ungraded: int = 0

class AssignmentSummary(AssignmentRecord):
    progress: AssignmentProgress

class AssignmentListResponse(BaseModel):
    assignments: List[AssignmentSummary]


# --- Submission Contracts ---

class SubmissionRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: str
    assignment_id: str
    student_id: str
    student_name: str
    file_path: Optional[str] = None
    file_name: Optional[str] = None
    file_type: Optional[str] = None
    submission_date: datetime
    status: SubmissionStatus
    current_evaluation_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime

class AIEvaluationRequest(BaseModel):
    """The assignment title is optional; the owning assignment's title is used when omitted."""
    assignment_title: Optional[str] = None


# --- Evaluation Contracts ---

class EvaluationRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: str
    submission_id: str
    score: float
    max_score: int
    evaluation_type: EvaluationType
    ai_feedback: Optional[Dict[str, Any]] = None
    manual_remarks: Optional[str] = None
    evaluator_id: Optional[str] = None
    is_published: bool
    is_fallback: bool = False
    created_at: datetime
    updated_at: datetime

class ManualEvaluationCreate(BaseModel):
    score: float = Field(..., allow_inf_nan=False)
    max_score: Optional[int] = Field(None, gt=0, description="Defaults to the assignment's maximum score.")
    remarks: str = ""
    evaluator_id: Optional[str] = None


# --- Function-style envelopes ---

class ExtractTextRequest(BaseModel):
    fileUrl: str = Field(..., min_length=1)
    fileType: Optional[str] = None

class ExtractTextResponse(BaseModel):
    success: bool
    extractedText: str = ""
    fileType: Optional[str] = None
    error: Optional[str] = None

class EvaluateAssignmentRequest(BaseModel):
    submissionId: str = Field(..., min_length=1)
    assignmentTitle: Optional[str] = None
    extractedText: str = Field(..., min_length=1)

class EvaluateAssignmentResponse(BaseModel):
    success: bool
    evaluation: Optional[ScoringResult] = None
    evaluationId: Optional[str] = None
    error: Optional[str] = None


class SignatureUploadResponse(BaseModel):
    url: str
    path: str
