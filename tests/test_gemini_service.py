# /tests/test_gemini_service.py

from types import SimpleNamespace

import pytest
from PIL import Image

from app.core.exceptions import ConfigurationError, UpstreamError
from app.services import gemini_service


@pytest.fixture
def mock_genai(mocker):
    """Replaces the Gemini SDK module; the model's reply is set per test."""
    genai = mocker.patch("app.services.gemini_service.genai")
    model = genai.GenerativeModel.return_value
    model.generate_content_async = mocker.AsyncMock()
    return genai, model


def _response(text):
    usage = SimpleNamespace(prompt_token_count=10, candidates_token_count=5, total_token_count=15)
    return SimpleNamespace(text=text, usage_metadata=usage)


@pytest.mark.asyncio
async def test_generate_text_in_json_mode(mock_genai, monkeypatch):
    monkeypatch.setenv("GEMINI_MODEL", "gemini-test")
    genai, model = mock_genai
    model.generate_content_async.return_value = _response('{"score": 1}')

    text = await gemini_service.generate_text("prompt", temperature=0.3, system_instruction="be strict", json_mode=True)

    assert text == '{"score": 1}'
    genai.configure.assert_called_once_with(api_key="test-key")
    genai.GenerativeModel.assert_called_once_with("gemini-test", system_instruction="be strict")
    generation_config = model.generate_content_async.call_args.kwargs["generation_config"]
    assert generation_config.temperature == 0.3
    assert generation_config.response_mime_type == "application/json"


@pytest.mark.asyncio
async def test_missing_api_key_raises_configuration_error(mock_genai, monkeypatch):
    monkeypatch.setenv("GOOGLE_API_KEY", "")
    with pytest.raises(ConfigurationError):
        await gemini_service.generate_text("prompt")
    mock_genai[1].generate_content_async.assert_not_called()


@pytest.mark.asyncio
async def test_provider_failure_raises_upstream_error(mock_genai):
    mock_genai[1].generate_content_async.side_effect = RuntimeError("503 Service Unavailable")
    with pytest.raises(UpstreamError):
        await gemini_service.generate_text("prompt")


@pytest.mark.asyncio
async def test_empty_reply_raises_upstream_error(mock_genai):
    mock_genai[1].generate_content_async.return_value = _response("")
    with pytest.raises(UpstreamError):
        await gemini_service.generate_text("prompt")


@pytest.mark.asyncio
async def test_multimodal_sends_prompt_then_images(mock_genai):
    model = mock_genai[1]
    model.generate_content_async.return_value = _response("transcribed")
    images = [Image.new("RGB", (4, 4)), Image.new("RGB", (4, 4))]

    text = await gemini_service.generate_multimodal_response("read this", images)

    assert text == "transcribed"
    contents = model.generate_content_async.call_args.args[0]
    assert contents[0] == "read this"
    assert contents[1:] == images
