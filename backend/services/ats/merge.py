"""Blend a local heuristic result with a model-generated assessment."""

import logging

from pydantic import ValidationError

from config import AtsPolicy
from models.responses import AnalysisResult, ScoreBreakdown
from models.schemas.model_assessment import ModelAssessment
from services.ats.scorer import ATS_READY_THRESHOLD, grade_for

logger = logging.getLogger(__name__)

_SUB_SCORES = ("structure", "keywords", "action_verbs", "metrics", "formatting")


def parse_assessment(payload: dict | None) -> ModelAssessment | None:
    """Validate a raw model payload; None means the model call is treated as failed."""
    if not payload:
        return None
    try:
        return ModelAssessment.model_validate(payload)
    except ValidationError as e:
        logger.warning("Discarding malformed model assessment: %s", e.error_count())
        return None


def union_capped(first: list[str], second: list[str], cap: int | None = None) -> list[str]:
    """Case-insensitive ordered union; the first spelling seen wins."""
    seen: set[str] = set()
    merged: list[str] = []
    for item in [*first, *second]:
        cleaned = item.strip()
        key = cleaned.lower()
        if cleaned and key not in seen:
            seen.add(key)
            merged.append(cleaned)
    return merged if cap is None else merged[:cap]


def local_fallback(local: AnalysisResult) -> AnalysisResult:
    """The local result, flagged as a degraded hybrid run."""
    return local.model_copy(update={
        "mode": "hybrid",
        "status": "local_fallback",
        "degraded": True,
        "scoring_method": "local_only",
    })


def merge_results(
    local: AnalysisResult,
    assessment: ModelAssessment,
    policy: AtsPolicy,
) -> AnalysisResult:
    """Weighted overall score, averaged sub-scores, capped list unions."""
    total = policy.hybrid_local_weight + policy.hybrid_model_weight
    w_local = policy.hybrid_local_weight / total if total else 0.5
    w_model = 1.0 - w_local
    overall = round(w_local * local.overall_score + w_model * assessment.overall_score)
    overall = min(100, max(0, overall))

    sub_scores = {}
    for name in _SUB_SCORES:
        local_value = getattr(local.breakdown, name)
        model_value = getattr(assessment.breakdown, name)
        sub_scores[name] = local_value if model_value is None else round((local_value + model_value) / 2)

    matched = union_capped(local.matched_keywords, assessment.matched_keywords)
    matched_keys = {m.lower() for m in matched}
    missing = [
        m for m in union_capped(local.missing_keywords, assessment.missing_keywords)
        if m.lower() not in matched_keys
    ]

    return local.model_copy(update={
        "overall_score": overall,
        "breakdown": ScoreBreakdown(**sub_scores),
        "matched_keywords": matched[: policy.max_matched_keywords],
        "missing_keywords": missing[: policy.max_missing_keywords],
        "suggestions": union_capped(local.suggestions, assessment.suggestions, policy.max_suggestions),
        "strengths": union_capped(local.strengths, assessment.strengths, policy.max_strengths),
        "mode": "hybrid",
        "status": "complete",
        "degraded": False,
        "scoring_method": "hybrid",
        "model_summary": assessment.summary,
        "grade": grade_for(overall),
        "ats_ready": overall >= ATS_READY_THRESHOLD,
    })
