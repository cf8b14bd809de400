# /app/models/assessment_model.py

from pydantic import BaseModel, Field, ConfigDict, field_validator
from typing import Optional, List
from datetime import datetime
from enum import Enum


# --- Core Enumerations ---
class DifficultyLevel(str, Enum):
    EASY = "easy"; MEDIUM = "medium"; HARD = "hard"

class QuestionType(str, Enum):
    ESSAY = "essay"; SHORT_ANSWER = "short_answer"; MULTIPLE_CHOICE = "multiple_choice"


# --- Generation Contracts ---

class GenerateAssessmentRequest(BaseModel):
    topic: str
    totalQuestions: int
    difficultyLevel: DifficultyLevel = DifficultyLevel.MEDIUM
    title: Optional[str] = None
    description: Optional[str] = None

class GeneratedQuestion(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    question_text: str = Field(..., min_length=1)
    question_type: QuestionType = QuestionType.ESSAY
    marks: int = Field(..., gt=0)
    order_index: int = Field(..., ge=1)
    sample_answer: Optional[str] = None
    difficulty: DifficultyLevel = DifficultyLevel.MEDIUM

class GeneratedAssessment(BaseModel):
    """
    An assessment as produced by the generation service.
    `total_marks` is recomputed from the questions when the model omits it.
    """
    title: str
    description: Optional[str] = None
    questions: List[GeneratedQuestion] = Field(..., min_length=1)
    total_marks: Optional[int] = None
    estimated_duration: Optional[str] = None
    learning_objectives: List[str] = Field(default_factory=list)
    is_fallback: bool = False
    fallback_reason: Optional[str] = None

    @field_validator('questions')
    @classmethod
    def questions_must_not_be_empty(cls, v):
        if not v: raise ValueError('Assessment must have at least one question.')
        return v

class GenerateAssessmentResponse(BaseModel):
    success: bool
    assessment: Optional[GeneratedAssessment] = None
    error: Optional[str] = None


# --- Template Contracts ---

class TemplateCreate(BaseModel):
    assessment: GeneratedAssessment
    topic: Optional[str] = None
    difficultyLevel: DifficultyLevel = DifficultyLevel.MEDIUM
    created_by: Optional[str] = None
    is_published: bool = False

class PromoteTemplateRequest(BaseModel):
    created_by: Optional[str] = None

class QuestionRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: str
    assessment_template_id: Optional[str] = None
    question_text: str
    question_type: QuestionType
    marks: int
    order_index: int
    sample_answer: Optional[str] = None

class TemplateRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: str
    title: str
    description: Optional[str] = None
    topic: str
    difficulty_level: DifficultyLevel
    total_questions: int
    is_published: bool
    created_by: str
    created_at: datetime
    updated_at: datetime

class TemplateDetail(TemplateRecord):
    questions: List[QuestionRecord] = Field(default_factory=list)

class TemplateListResponse(BaseModel):
    templates: List[TemplateRecord]
