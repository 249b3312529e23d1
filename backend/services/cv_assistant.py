"""AI writing actions for the CV builder.

Text-generation actions need the model and raise CollaboratorUnavailable
when it is down or its reply is malformed. `ats-analyze` and `extract-keywords` always answer,
falling back to the local heuristics.
"""

import logging
import re

from pydantic import ValidationError

from models.cv import CVDocument
from models.requests import AIActionRequest
from models.responses import AIActionResponse
from models.schemas import BulletsPayload, KeywordsPayload, TailorPayload
from services import gemini_client, prompt_builder
from services.ats import keywords as ats_keywords
from services.ats import orchestrator
from services.errors import CollaboratorUnavailable, ValidationFailure

logger = logging.getLogger(__name__)

ACTIONS = ("summary", "improve", "bullets", "tailor", "ats-analyze", "extract-keywords")

_BULLET_PREFIX_RE = re.compile(r"^\s*(?:[-*•●▪‣◦]|\d+[.)])\s*")

MODEL_DOWN_MESSAGE = "AI assistant is temporarily unavailable. Please try again later."
MALFORMED_MESSAGE = "AI assistant returned an unusable reply. Please try again."


def _require_cv(request: AIActionRequest) -> CVDocument:
    if request.cv is None:
        raise ValidationFailure(f"Action '{request.action}' requires a CV")
    return request.cv


def _require(value: str | None, message: str) -> str:
    if value is None or not value.strip():
        raise ValidationFailure(message)
    return value


def _split_bullets(text: str) -> list[str]:
    bullets = []
    for line in text.splitlines():
        cleaned = _BULLET_PREFIX_RE.sub("", line).strip()
        if cleaned:
            bullets.append(cleaned)
    return bullets


async def _summary(request: AIActionRequest) -> AIActionResponse:
    cv = _require_cv(request)
    text = await gemini_client.generate_text(prompt_builder.build_summary_prompt(cv, request.job_title))
    if text is None:
        raise CollaboratorUnavailable(MODEL_DOWN_MESSAGE)
    return AIActionResponse(action=request.action, text=text.strip())


async def _improve(request: AIActionRequest) -> AIActionResponse:
    fragment = _require(request.text, "Text to improve is required")
    keywords = None
    if request.job_description.strip():
        keywords = ats_keywords.extract_reference_terms(request.job_description, top_n=10)
    text = await gemini_client.generate_text(
        prompt_builder.build_improve_prompt(fragment, keywords=keywords), temperature=0.5,
    )
    if text is None:
        raise CollaboratorUnavailable(MODEL_DOWN_MESSAGE)
    return AIActionResponse(action=request.action, text=text.strip())


async def _bullets(request: AIActionRequest) -> AIActionResponse:
    _require(request.job_title, "Job title is required to generate bullet points")
    skills = request.cv.skills.technical if request.cv is not None else []
    prompt = prompt_builder.build_bullets_prompt(request.job_title, request.company, request.description, skills)
    data = await gemini_client.generate_json(prompt)
    if data is None:
        raise CollaboratorUnavailable(MODEL_DOWN_MESSAGE)
    try:
        raw = BulletsPayload.model_validate(data).bullets
    except ValidationError as e:
        logger.warning("Discarding malformed bullet reply: %s", e.error_count())
        raise CollaboratorUnavailable(MALFORMED_MESSAGE) from e
    if isinstance(raw, list):
        bullets = [b.strip() for b in raw if b.strip()]
    else:
        bullets = _split_bullets(raw)
    if not bullets:
        raise CollaboratorUnavailable("AI assistant returned no bullet points. Please try again.")
    return AIActionResponse(action=request.action, bullets=bullets, text="\n".join(bullets))


async def _tailor(request: AIActionRequest) -> AIActionResponse:
    cv = _require_cv(request)
    job_description = _require(request.job_description, "A job description is required to tailor a CV")
    data = await gemini_client.generate_json(prompt_builder.build_tailor_prompt(cv, job_description))
    if data is None:
        raise CollaboratorUnavailable(MODEL_DOWN_MESSAGE)
    try:
        payload = TailorPayload.model_validate(data)
    except ValidationError as e:
        logger.warning("Discarding malformed tailoring reply: %s", e.error_count())
        raise CollaboratorUnavailable(MALFORMED_MESSAGE) from e
    return AIActionResponse(
        action=request.action,
        text=(payload.summary_revision or "").strip(),
        keywords=[k.strip() for k in payload.keywords_to_add if k.strip()],
        data=payload.model_dump(),
    )


async def _ats_analyze(request: AIActionRequest) -> AIActionResponse:
    cv = _require_cv(request)
    result = await orchestrator.analyze(cv, request.job_description, mode="hybrid")
    return AIActionResponse(action=request.action, analysis=result, degraded=result.degraded)


def _keyword_groups(data: dict | None) -> dict[str, list[str]] | None:
    if data is None:
        return None
    try:
        payload = KeywordsPayload.model_validate(data)
    except ValidationError as e:
        logger.warning("Discarding malformed keyword reply: %s", e.error_count())
        return None
    return {name: [v.strip() for v in values if v.strip()] for name, values in payload.model_dump().items()}


async def _extract_keywords(request: AIActionRequest) -> AIActionResponse:
    job_description = _require(request.job_description, "A job description is required to extract keywords")
    data = await gemini_client.generate_json(prompt_builder.build_keywords_prompt(job_description))
    groups = _keyword_groups(data)
    if groups is not None:
        flat = list(dict.fromkeys(term for values in groups.values() for term in values))
        if flat:
            return AIActionResponse(action=request.action, keywords=flat, data=groups)

    logger.warning("Model keyword extraction unavailable, using local extraction")
    terms = ats_keywords.extract_reference_terms(job_description)
    technical, soft = ats_keywords.split_by_category(terms)
    return AIActionResponse(
        action=request.action,
        keywords=terms,
        data={"technical_skills": technical, "soft_skills": soft},
        degraded=True,
    )


_HANDLERS = {
    "summary": _summary,
    "improve": _improve,
    "bullets": _bullets,
    "tailor": _tailor,
    "ats-analyze": _ats_analyze,
    "extract-keywords": _extract_keywords,
}


async def run_action(request: AIActionRequest) -> AIActionResponse:
    handler = _HANDLERS.get(request.action)
    if handler is None:
        raise ValidationFailure(f"Unknown action '{request.action}', expected one of {', '.join(ACTIONS)}")
    return await handler(request)
