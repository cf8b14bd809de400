# /app/services/gemini_service.py

from typing import List, Optional
import google.generativeai as genai
from google.generativeai.types import GenerationConfig
from PIL import Image

from app.core import config
from app.core.exceptions import ConfigurationError, UpstreamError


# --- CONFIGURATION ---

def _get_model(system_instruction: Optional[str] = None) -> genai.GenerativeModel:
    """
    Configures the client from the environment and returns a model handle.
    The API key is read on every call, so a missing key only fails the AI
    operation that needed it.
    """
    api_key = config.get_google_api_key()
    if not api_key:
        raise ConfigurationError("GOOGLE_API_KEY environment variable is not set.")
    genai.configure(api_key=api_key)
    return genai.GenerativeModel(config.get_gemini_model(), system_instruction=system_instruction)


def _log_token_usage(response, log_context: str):
    usage = getattr(response, 'usage_metadata', None)
    if usage and log_context:
        print(
            f"[TOKEN-USAGE] {log_context} - Prompt: {getattr(usage, 'prompt_token_count', 0)}, "
            f"Completion: {getattr(usage, 'candidates_token_count', 0)}, "
            f"Total: {getattr(usage, 'total_token_count', 0)}"
        )


def _response_text(response) -> str:
    # `response.text` raises ValueError when the candidate was blocked or empty.
    try:
        text = response.text
    except ValueError as e:
        raise UpstreamError(f"AI model returned no usable content: {e}")
    if not text:
        raise UpstreamError("AI model returned an empty response.")
    return text


# --- CORE GENERATIVE FUNCTIONS ---

async def generate_text(
    prompt: str,
    temperature: float = 0.5,
    system_instruction: Optional[str] = None,
    json_mode: bool = False,
    max_output_tokens: Optional[int] = None,
    log_context: str = "",
) -> str:
    """
    The workhorse for text-only, non-streaming tasks.

    With `json_mode` the model is asked for `application/json` output, but the
    raw string is returned unparsed: deciding what to do with malformed JSON is
    the caller's job. Transport and provider failures raise `UpstreamError`.
    """
    model = _get_model(system_instruction)
    generation_config = GenerationConfig(
        temperature=temperature,
        max_output_tokens=max_output_tokens,
        response_mime_type="application/json" if json_mode else None,
    )
    try:
        response = await model.generate_content_async(prompt, generation_config=generation_config)
    except Exception as e:
        print(f"ERROR in generate_text with Gemini API: {e}")
        raise UpstreamError(f"AI model request failed: {e}")

    _log_token_usage(response, log_context)
    return _response_text(response)


async def generate_multimodal_response(
    prompt: str,
    images: List[Image.Image],
    temperature: float = 0.1,
    max_output_tokens: Optional[int] = None,
    log_context: str = "",
) -> str:
    """
    The specialist for multi-modal requests. It accepts a LIST of Pillow Image objects
    and returns the model's text output verbatim.
    """
    model = _get_model()
    generation_config = GenerationConfig(temperature=temperature, max_output_tokens=max_output_tokens)
    try:
        response = await model.generate_content_async([prompt, *images], generation_config=generation_config)
    except Exception as e:
        print(f"ERROR in generate_multimodal_response with Gemini API ({len(images)} images): {e}")
        raise UpstreamError(f"AI vision request failed: {e}")

    _log_token_usage(response, log_context)
    return _response_text(response)
