# /app/services/scoring_service.py

"""
Scores extracted submission text with the language model.

Malformed model output never raises: it is replaced by a generic fallback
evaluation that is explicitly tagged with `is_fallback=True` and the reason.
Transport and provider failures still raise `UpstreamError`.
"""

import json
import math
from typing import Dict, Optional

from pydantic import ValidationError

from ..models.assignment_model import ScoringResult
from . import gemini_service, prompt_library

SCORING_TEMPERATURE = 0.3
FALLBACK_SCORE_RATIO = 0.7
DEFAULT_ASSIGNMENT_TITLE = "Assignment Evaluation"
DEFAULT_ASSIGNMENT_DESCRIPTION = "General assignment evaluation"


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def parse_ai_json_response(ai_response_str: str) -> Dict:
    """
    Defensively finds and parses the JSON object in the model's raw response,
    tolerating surrounding prose or markdown fences.
    """
    start_index = ai_response_str.find('{')
    end_index = ai_response_str.rfind('}') + 1
    if start_index == -1 or end_index == 0:
        raise json.JSONDecodeError("No JSON object found in AI response", ai_response_str, 0)
    return json.loads(ai_response_str[start_index:end_index])


def build_fallback_result(max_score: int, reason: str) -> ScoringResult:
    """The generic evaluation used when the model's output cannot be used."""
    return ScoringResult(
        score=_round_half_up(max_score * FALLBACK_SCORE_RATIO),
        percentage=70,
        strengths=["Good effort demonstrated", "Shows understanding of basic concepts"],
        improvements=["Could elaborate more on key points", "Consider adding more examples"],
        detailed_feedback=(
            "The submission shows a good understanding of the subject matter. There is room for "
            "improvement in elaboration and providing more concrete examples."
        ),
        recommendations=["Review course materials", "Practice with more examples"],
        overall_comments="Keep up the good work and continue learning!",
        is_fallback=True,
        fallback_reason=reason,
    )


def _normalise_result(result: ScoringResult, max_score: int) -> ScoringResult:
    """
    Clamps the score into [0, max_score]. The percentage is recomputed when
    it is missing or when the score had to be clamped.
    """
    clamped_score = min(max(result.score, 0), max_score)
    percentage = result.percentage
    if clamped_score != result.score:
        print(f"[WARNING] AI score {result.score} outside 0-{max_score}, clamped to {clamped_score}.")
        percentage = None
    if percentage is None:
        percentage = round(clamped_score / max_score * 100, 1) if max_score else 0
    return result.model_copy(update={"score": clamped_score, "percentage": percentage})


async def score_submission(
    extracted_text: str,
    assignment_title: Optional[str],
    assignment_description: Optional[str],
    max_score: int,
) -> ScoringResult:
    """
    Asks the model to grade a submission against the five rubric dimensions.

    Returns:
        A `ScoringResult`. When the model's reply is not valid JSON of the
        expected shape, the tagged fallback result is returned instead.
    """
    prompt = prompt_library.SUBMISSION_SCORING_PROMPT.format(
        assignment_title=assignment_title or DEFAULT_ASSIGNMENT_TITLE,
        assignment_description=assignment_description or DEFAULT_ASSIGNMENT_DESCRIPTION,
        max_score=max_score,
        extracted_text=extracted_text,
    )

    ai_response_str = await gemini_service.generate_text(
        prompt,
        temperature=SCORING_TEMPERATURE,
        system_instruction=prompt_library.SCORING_SYSTEM_INSTRUCTION,
        json_mode=True,
        max_output_tokens=2000,
        log_context="SCORE-SUBMISSION",
    )

    try:
        parsed = parse_ai_json_response(ai_response_str)
        result = ScoringResult.model_validate(parsed)
    except json.JSONDecodeError as e:
        print(f"Failed to parse AI scoring response, using fallback evaluation: {e}")
        return build_fallback_result(max_score, f"Model response was not valid JSON: {e.msg}")
    except ValidationError as e:
        print(f"AI scoring response had an unexpected shape, using fallback evaluation: {e}")
        return build_fallback_result(max_score, f"Model response did not match the evaluation format ({e.error_count()} errors).")

    # A model reply must never masquerade as a fallback, or vice versa.
    result = result.model_copy(update={"is_fallback": False, "fallback_reason": None})
    return _normalise_result(result, max_score)
