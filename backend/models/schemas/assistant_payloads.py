"""Validated shapes of the model replies behind the AI writing actions."""

from pydantic import BaseModel, Field, field_validator

from models.schemas.model_assessment import reject_bool


def _none_to_empty(value):
    return [] if value is None else value


class BulletsPayload(BaseModel):
    # Either a list of bullets or one text block with a bullet per line
    bullets: list[str] | str = []

    @field_validator("bullets", mode="before")
    @classmethod
    def bullets_default(cls, value):
        return _none_to_empty(value)


class ExperienceEnhancement(BaseModel):
    position: str = ""
    suggestions: list[str] = []


class TailorPayload(BaseModel):
    match_score: int | None = Field(None, ge=0, le=100)
    summary_revision: str | None = None
    skills_to_highlight: list[str] = []
    skills_to_add: list[str] = []
    experience_enhancements: list[ExperienceEnhancement] = []
    keywords_to_add: list[str] = []
    overall_feedback: str | None = None

    @field_validator("match_score", mode="before")
    @classmethod
    def match_score_not_bool(cls, value):
        return reject_bool(value)

    @field_validator(
        "skills_to_highlight", "skills_to_add", "experience_enhancements", "keywords_to_add", mode="before"
    )
    @classmethod
    def lists_default(cls, value):
        return _none_to_empty(value)


class KeywordsPayload(BaseModel):
    technical_skills: list[str] = []
    soft_skills: list[str] = []
    tools: list[str] = []
    certifications: list[str] = []
    industry_terms: list[str] = []

    @field_validator("*", mode="before")
    @classmethod
    def lists_default(cls, value):
        return _none_to_empty(value)
