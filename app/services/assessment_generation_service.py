# /app/services/assessment_generation_service.py

import json
from typing import Optional

from pydantic import ValidationError

from app.core.exceptions import GradingValidationError
from ..models.assessment_model import (
    DifficultyLevel, GeneratedAssessment, GeneratedQuestion, QuestionType
)
from . import gemini_service, prompt_library
from .scoring_service import parse_ai_json_response

GENERATION_TEMPERATURE = 0.7
FALLBACK_MARKS_PER_QUESTION = 10
MAX_QUESTIONS = 50


def _default_title(topic: str) -> str:
    return f"Assessment on {topic}"


def _default_description(topic: str) -> str:
    return f"Comprehensive assessment covering {topic}"


def build_fallback_assessment(
    topic: str,
    total_questions: int,
    difficulty_level: DifficultyLevel,
    title: Optional[str],
    description: Optional[str],
    reason: str,
) -> GeneratedAssessment:
    """A deterministic set of generic essay questions, used when the model's output is unusable."""
    questions = [
        GeneratedQuestion(
            question_text=f"Question {i + 1}: Write a comprehensive answer about {topic}.",
            question_type=QuestionType.ESSAY,
            marks=FALLBACK_MARKS_PER_QUESTION,
            order_index=i + 1,
            sample_answer=f"Students should demonstrate understanding of key concepts in {topic}",
            difficulty=difficulty_level,
        )
        for i in range(total_questions)
    ]
    return GeneratedAssessment(
        title=title or _default_title(topic),
        description=description or _default_description(topic),
        questions=questions,
        total_marks=total_questions * FALLBACK_MARKS_PER_QUESTION,
        estimated_duration=f"{max(30, total_questions * 15)} minutes",
        learning_objectives=[
            f"Understand key concepts in {topic}",
            f"Apply knowledge of {topic} to practical scenarios",
        ],
        is_fallback=True,
        fallback_reason=reason,
    )


def _validate_request(topic: Optional[str], total_questions: Optional[int]) -> str:
    clean_topic = (topic or "").strip()
    if not clean_topic:
        raise GradingValidationError("Please enter a topic for the assessment.")
    if not isinstance(total_questions, int) or isinstance(total_questions, bool) or total_questions <= 0:
        raise GradingValidationError("The number of questions must be a positive integer.")
    if total_questions > MAX_QUESTIONS:
        raise GradingValidationError(f"At most {MAX_QUESTIONS} questions can be generated at once.")
    return clean_topic


async def generate_assessment(
    topic: str,
    total_questions: int,
    difficulty_level: DifficultyLevel = DifficultyLevel.MEDIUM,
    title: Optional[str] = None,
    description: Optional[str] = None,
) -> GeneratedAssessment:
    """
    Generates a question set for a topic.

    Validation happens before the model is called. If the model's reply
    cannot be parsed into a `GeneratedAssessment`, a tagged fallback
    assessment is returned instead of raising.
    """
    clean_topic = _validate_request(topic, total_questions)
    difficulty_level = DifficultyLevel(difficulty_level or DifficultyLevel.MEDIUM)
    title = (title or "").strip() or None
    description = (description or "").strip() or None

    prompt = prompt_library.ASSESSMENT_GENERATION_PROMPT.format(
        topic=clean_topic,
        difficulty_level=difficulty_level.value,
        total_questions=total_questions,
        title=title or _default_title(clean_topic),
        description=description or _default_description(clean_topic),
    )

    ai_response_str = await gemini_service.generate_text(
        prompt,
        temperature=GENERATION_TEMPERATURE,
        system_instruction=prompt_library.GENERATION_SYSTEM_INSTRUCTION,
        json_mode=True,
        max_output_tokens=3000,
        log_context="GENERATE-ASSESSMENT",
    )

    try:
        assessment = GeneratedAssessment.model_validate(parse_ai_json_response(ai_response_str))
    except json.JSONDecodeError as e:
        print(f"Failed to parse AI assessment response, using fallback assessment: {e}")
        return build_fallback_assessment(
            clean_topic, total_questions, difficulty_level, title, description,
            reason=f"Model response was not valid JSON: {e.msg}",
        )
    except ValidationError as e:
        print(f"AI assessment response had an unexpected shape, using fallback assessment: {e}")
        return build_fallback_assessment(
            clean_topic, total_questions, difficulty_level, title, description,
            reason=f"Model response did not match the assessment format ({e.error_count()} errors).",
        )

    # The sum of the question marks is authoritative over the model's own total.
    computed_total = sum(q.marks for q in assessment.questions)
    if assessment.total_marks != computed_total:
        if assessment.total_marks is not None:
            print(f"[WARNING] AI total_marks {assessment.total_marks} did not match question marks, using {computed_total}.")
        assessment = assessment.model_copy(update={"total_marks": computed_total})

    return assessment.model_copy(update={"is_fallback": False, "fallback_reason": None})
