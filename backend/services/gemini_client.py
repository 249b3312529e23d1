"""Google Gemini API wrapper with error handling.

Every call returns None instead of raising when the model is unconfigured,
unreachable, slow or returns something unparseable; callers decide how to
degrade.
"""

import asyncio
import json
import logging

from google import genai
from google.genai import types

from config import settings

logger = logging.getLogger(__name__)

_client: genai.Client | None = None


def get_client() -> genai.Client | None:
    global _client
    if not settings.gemini_api_key:
        logger.warning("No GEMINI_API_KEY set - AI features disabled")
        return None
    if _client is None:
        _client = genai.Client(api_key=settings.gemini_api_key)
    return _client


def is_configured() -> bool:
    return bool(settings.gemini_api_key)


def strip_code_fences(text: str) -> str:
    """Strip markdown code fences if present."""
    text = text.strip()
    if text.startswith("```"):
        text = text.split("\n", 1)[1] if "\n" in text else text[3:]
        if text.endswith("```"):
            text = text[:-3]
        text = text.strip()
    return text


async def _generate(prompt: str, temperature: float, max_output_tokens: int) -> str | None:
    client = get_client()
    if client is None:
        return None

    try:
        response = await asyncio.wait_for(
            client.aio.models.generate_content(
                model=settings.gemini_model,
                contents=prompt,
                config=types.GenerateContentConfig(
                    temperature=temperature,
                    max_output_tokens=max_output_tokens,
                ),
            ),
            timeout=settings.model_timeout_seconds,
        )
    except asyncio.TimeoutError:
        logger.error("Gemini call timed out after %.1fs", settings.model_timeout_seconds)
        return None
    except Exception as e:
        logger.error("Gemini API error: %s", e)
        return None

    if not response.text:
        logger.error("Gemini returned an empty response")
        return None
    return response.text


async def generate_json(prompt: str) -> dict | None:
    """Send a prompt to Gemini and parse the JSON response."""
    text = await _generate(prompt, temperature=0.3, max_output_tokens=4096)
    if text is None:
        return None

    try:
        data = json.loads(strip_code_fences(text))
    except json.JSONDecodeError as e:
        logger.error("Failed to parse Gemini response as JSON: %s", e)
        return None

    if not isinstance(data, dict):
        logger.error("Gemini JSON response is not an object")
        return None
    return data


async def generate_text(prompt: str, temperature: float = 0.7) -> str | None:
    """Send a prompt to Gemini and return plain text."""
    text = await _generate(prompt, temperature=temperature, max_output_tokens=2048)
    return strip_code_fences(text) if text is not None else None
