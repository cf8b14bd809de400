# /tests/test_assessment_generation_service.py

import json

import pytest

from app.core.exceptions import GradingValidationError
from app.models.assessment_model import DifficultyLevel, QuestionType
from app.services import assessment_generation_service


def _model_reply(total_marks=None):
    return json.dumps({
        "title": "Photosynthesis Quiz",
        "description": "Light and dark reactions",
        "questions": [
            {"question_text": "Define photosynthesis.", "question_type": "short_answer",
             "marks": 5, "order_index": 1, "sample_answer": "...", "difficulty": "easy"},
            {"question_text": "Explain the Calvin cycle.", "question_type": "essay",
             "marks": 15, "order_index": 2, "sample_answer": "...", "difficulty": "hard"},
        ],
        "total_marks": total_marks,
        "estimated_duration": "40 minutes",
        "learning_objectives": ["Explain photosynthesis"],
    })


@pytest.mark.asyncio
async def test_generate_assessment_returns_model_questions(mock_generate_text):
    mock_generate_text.return_value = _model_reply(total_marks=20)

    assessment = await assessment_generation_service.generate_assessment("Photosynthesis", 2, DifficultyLevel.HARD)

    assert assessment.is_fallback is False
    assert len(assessment.questions) == 2
    assert assessment.questions[1].question_type == QuestionType.ESSAY
    assert assessment.total_marks == 20

    _, kwargs = mock_generate_text.call_args
    assert kwargs["temperature"] == 0.7
    assert kwargs["json_mode"] is True
    prompt = mock_generate_text.call_args.args[0]
    assert "Photosynthesis" in prompt and "hard" in prompt


@pytest.mark.asyncio
async def test_total_marks_is_recomputed_from_questions(mock_generate_text):
    mock_generate_text.return_value = _model_reply(total_marks=99)
    assessment = await assessment_generation_service.generate_assessment("Photosynthesis", 2)
    assert assessment.total_marks == 20


@pytest.mark.asyncio
async def test_malformed_reply_returns_tagged_fallback(mock_generate_text):
    """
    GIVEN: The model replies with something that is not JSON.
    WHEN:  Three questions are requested.
    THEN:  Three generic essay questions worth 10 marks each are returned, tagged as a fallback.
    """
    mock_generate_text.return_value = "Sorry, I cannot help with that."

    assessment = await assessment_generation_service.generate_assessment("World War I", 3)

    assert assessment.is_fallback is True
    assert assessment.fallback_reason
    assert len(assessment.questions) == 3
    assert all(q.question_type == QuestionType.ESSAY and q.marks == 10 for q in assessment.questions)
    assert [q.order_index for q in assessment.questions] == [1, 2, 3]
    assert assessment.total_marks == 30
    assert assessment.estimated_duration == "45 minutes"
    assert assessment.title == "Assessment on World War I"
    assert len(assessment.learning_objectives) == 2


@pytest.mark.asyncio
async def test_reply_with_no_questions_returns_fallback(mock_generate_text):
    mock_generate_text.return_value = json.dumps({"title": "Empty", "questions": []})
    assessment = await assessment_generation_service.generate_assessment("Optics", 1, title="My Quiz")
    assert assessment.is_fallback is True
    assert assessment.title == "My Quiz"
    assert assessment.estimated_duration == "30 minutes"


@pytest.mark.asyncio
@pytest.mark.parametrize("topic, total_questions", [
    ("", 3),
    ("   ", 3),
    ("Optics", 0),
    ("Optics", -2),
    ("Optics", 51),
])
async def test_invalid_requests_are_rejected_before_the_model_call(mock_generate_text, topic, total_questions):
    with pytest.raises(GradingValidationError):
        await assessment_generation_service.generate_assessment(topic, total_questions)
    mock_generate_text.assert_not_called()
