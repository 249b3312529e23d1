"""Pydantic contracts for sub-scorer results and validated model replies."""

from models.schemas.sub_scores import (
    FormattingResult,
    KeywordResult,
    MetricsResult,
    StructureResult,
    VerbResult,
)
from models.schemas.model_assessment import ModelAssessment, ModelBreakdown
from models.schemas.assistant_payloads import BulletsPayload, KeywordsPayload, TailorPayload

__all__ = [
    "StructureResult",
    "KeywordResult",
    "VerbResult",
    "MetricsResult",
    "FormattingResult",
    "ModelAssessment",
    "ModelBreakdown",
    "BulletsPayload",
    "TailorPayload",
    "KeywordsPayload",
]
