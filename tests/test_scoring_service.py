# /tests/test_scoring_service.py

import json

import pytest

from app.core.exceptions import UpstreamError
from app.services import scoring_service


def _model_reply(**overrides):
    reply = {
        "score": 62,
        "percentage": 88.6,
        "strengths": ["Clear thesis"],
        "improvements": ["Cite more sources"],
        "detailed_feedback": "A well structured essay.",
        "recommendations": ["Read chapter 4"],
        "overall_comments": "Solid work.",
    }
    reply.update(overrides)
    return json.dumps(reply)


@pytest.mark.asyncio
async def test_valid_model_json_is_returned_untagged(mock_generate_text):
    mock_generate_text.return_value = _model_reply()

    result = await scoring_service.score_submission("Essay text", "Essay 1", "Describe X", 70)

    assert result.score == 62
    assert result.percentage == 88.6
    assert result.strengths == ["Clear thesis"]
    assert result.is_fallback is False
    assert result.fallback_reason is None

    # The call is made with the scoring temperature in JSON mode
    _, kwargs = mock_generate_text.call_args
    assert kwargs["temperature"] == 0.3
    assert kwargs["json_mode"] is True
    prompt = mock_generate_text.call_args.args[0]
    assert "Essay 1" in prompt and "Describe X" in prompt and "70" in prompt and "Essay text" in prompt


@pytest.mark.asyncio
async def test_json_inside_markdown_fences_is_parsed(mock_generate_text):
    mock_generate_text.return_value = "```json\n" + _model_reply(score=40) + "\n```"
    result = await scoring_service.score_submission("text", "T", None, 70)
    assert result.score == 40
    assert result.is_fallback is False


@pytest.mark.asyncio
async def test_non_json_reply_returns_tagged_fallback(mock_generate_text):
    """
    GIVEN: The model replies with prose instead of JSON.
    WHEN:  The submission is scored with max_score 70.
    THEN:  The fallback evaluation is returned with score round(70 * 0.7) = 49 and is tagged.
    """
    mock_generate_text.return_value = "I think this essay deserves a good grade."

    result = await scoring_service.score_submission("text", "Essay 1", None, 70)

    assert result.score == 49
    assert result.percentage == 70
    assert result.is_fallback is True
    assert "not valid JSON" in result.fallback_reason


@pytest.mark.asyncio
async def test_json_of_the_wrong_shape_returns_tagged_fallback(mock_generate_text):
    mock_generate_text.return_value = json.dumps({"grade": "A"})
    result = await scoring_service.score_submission("text", "Essay 1", None, 100)
    assert result.is_fallback is True
    assert result.score == 70
    assert "evaluation format" in result.fallback_reason


@pytest.mark.asyncio
async def test_model_cannot_claim_to_be_a_fallback(mock_generate_text):
    mock_generate_text.return_value = _model_reply(is_fallback=True, fallback_reason="made up")
    result = await scoring_service.score_submission("text", "Essay 1", None, 70)
    assert result.is_fallback is False
    assert result.fallback_reason is None


@pytest.mark.asyncio
@pytest.mark.parametrize("model_score, expected", [(95, 70), (-5, 0), (70, 70)])
async def test_score_is_clamped_to_range(mock_generate_text, model_score, expected):
    mock_generate_text.return_value = _model_reply(score=model_score)
    result = await scoring_service.score_submission("text", "Essay 1", None, 70)
    assert result.score == expected


@pytest.mark.asyncio
async def test_clamped_score_gets_a_matching_percentage(mock_generate_text):
    mock_generate_text.return_value = _model_reply(score=500, percentage=714)
    result = await scoring_service.score_submission("text", "Essay 1", None, 70)
    assert result.score == 70
    assert result.percentage == 100.0


@pytest.mark.asyncio
@pytest.mark.parametrize("reply", ['{"score": NaN}', '{"score": Infinity}', '{"score": 50, "percentage": NaN}'])
async def test_non_finite_numbers_return_tagged_fallback(mock_generate_text, reply):
    mock_generate_text.return_value = reply
    result = await scoring_service.score_submission("text", "Essay 1", None, 70)
    assert result.is_fallback is True
    assert result.score == 49


@pytest.mark.asyncio
async def test_missing_percentage_is_computed(mock_generate_text):
    reply = json.loads(_model_reply(score=35))
    del reply["percentage"]
    mock_generate_text.return_value = json.dumps(reply)

    result = await scoring_service.score_submission("text", "Essay 1", None, 70)

    assert result.percentage == 50.0


@pytest.mark.asyncio
async def test_defaults_are_used_for_missing_title_and_description(mock_generate_text):
    mock_generate_text.return_value = _model_reply()
    await scoring_service.score_submission("text", None, None, 100)
    prompt = mock_generate_text.call_args.args[0]
    assert "Assignment Evaluation" in prompt
    assert "General assignment evaluation" in prompt


@pytest.mark.asyncio
async def test_upstream_failure_is_raised_not_masked(mock_generate_text):
    mock_generate_text.side_effect = UpstreamError("AI model request failed: 503")
    with pytest.raises(UpstreamError):
        await scoring_service.score_submission("text", "Essay 1", None, 70)


@pytest.mark.parametrize("max_score, expected", [(70, 49), (100, 70), (5, 4), (10, 7)])
def test_fallback_score_rounds_half_up(max_score, expected):
    result = scoring_service.build_fallback_result(max_score, "reason")
    assert result.score == expected
    assert result.is_fallback is True
    assert result.fallback_reason == "reason"


def test_parse_ai_json_response_without_object_raises():
    with pytest.raises(json.JSONDecodeError):
        scoring_service.parse_ai_json_response("no braces here")
