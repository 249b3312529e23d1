"""Validated shape of the model-generated ATS assessment."""

from pydantic import BaseModel, Field, field_validator


def reject_bool(value):
    # bool is an int subclass; a true/false score is a malformed reply
    if isinstance(value, bool):
        raise ValueError("score must be a number, not a boolean")
    return value


class ModelBreakdown(BaseModel):
    structure: int | None = Field(None, ge=0, le=100)
    keywords: int | None = Field(None, ge=0, le=100)
    action_verbs: int | None = Field(None, ge=0, le=100)
    metrics: int | None = Field(None, ge=0, le=100)
    formatting: int | None = Field(None, ge=0, le=100)

    @field_validator("*", mode="before")
    @classmethod
    def scores_not_bool(cls, value):
        return reject_bool(value)


class ModelAssessment(BaseModel):
    """Anything failing validation here is treated as a failed model call."""
    overall_score: int = Field(..., ge=0, le=100)
    breakdown: ModelBreakdown = ModelBreakdown()
    matched_keywords: list[str] = []
    missing_keywords: list[str] = []
    suggestions: list[str] = []
    strengths: list[str] = []
    summary: str = ""

    @field_validator("overall_score", mode="before")
    @classmethod
    def overall_not_bool(cls, value):
        return reject_bool(value)
