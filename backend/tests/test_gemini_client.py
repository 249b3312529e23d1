"""Tests for the Gemini wrapper's degradation paths, run against a fake client."""

import asyncio
from types import SimpleNamespace
from unittest.mock import AsyncMock, patch

import pytest

from config import settings
from services import gemini_client
from services.ats import orchestrator


def fake_client(generate_content) -> SimpleNamespace:
    return SimpleNamespace(aio=SimpleNamespace(models=SimpleNamespace(generate_content=generate_content)))


async def slow_generate_content(**kwargs):
    await asyncio.sleep(1)
    return SimpleNamespace(text='{"overall_score": 90}')


@pytest.fixture
def short_timeout():
    with patch.object(settings, "model_timeout_seconds", 0.01):
        yield


@pytest.mark.asyncio
async def test_generate_json_times_out_to_none(short_timeout):
    with patch("services.gemini_client.get_client", return_value=fake_client(slow_generate_content)):
        assert await gemini_client.generate_json("prompt") is None


@pytest.mark.asyncio
async def test_hybrid_analysis_falls_back_when_model_hangs(sample_cv, sample_jd, short_timeout):
    with patch("services.gemini_client.get_client", return_value=fake_client(slow_generate_content)):
        result = await orchestrator.analyze(sample_cv, sample_jd, mode="hybrid")
    assert result.status == "local_fallback"
    assert result.degraded


@pytest.mark.asyncio
async def test_api_error_returns_none():
    failing = AsyncMock(side_effect=RuntimeError("quota exceeded"))
    with patch("services.gemini_client.get_client", return_value=fake_client(failing)):
        assert await gemini_client.generate_text("prompt") is None
    failing.assert_awaited_once()


@pytest.mark.asyncio
async def test_unconfigured_client_returns_none():
    with patch("services.gemini_client.get_client", return_value=None):
        assert await gemini_client.generate_json("prompt") is None


@pytest.mark.asyncio
@pytest.mark.parametrize("text, expected", [
    ('```json\n{"overall_score": 72}\n```', {"overall_score": 72}),
    ("not json at all", None),
    ("[1, 2, 3]", None),
    ("", None),
])
async def test_generate_json_parses_reply(text, expected):
    reply = AsyncMock(return_value=SimpleNamespace(text=text))
    with patch("services.gemini_client.get_client", return_value=fake_client(reply)):
        assert await gemini_client.generate_json("prompt") == expected


@pytest.mark.asyncio
async def test_generate_text_strips_fences():
    reply = AsyncMock(return_value=SimpleNamespace(text="```\nA crisp summary.\n```"))
    with patch("services.gemini_client.get_client", return_value=fake_client(reply)):
        assert await gemini_client.generate_text("prompt") == "A crisp summary."
