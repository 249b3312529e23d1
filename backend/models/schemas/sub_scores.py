"""Per-heuristic outputs of the local ATS scorer."""

from pydantic import BaseModel


class StructureResult(BaseModel):
    """Section presence and per-entry completeness."""
    score: int = 0
    missing_sections: list[str] = []
    section_scores: dict[str, float] = {}  # section -> 0.0-1.0 completeness
    issues: list[str] = []


class KeywordResult(BaseModel):
    """Overlap between CV vocabulary and the reference term set.

    The reference set is the job description's significant terms, or the
    built-in generic vocabulary when no job description is given.
    """
    score: int = 0
    matched: list[str] = []
    missing: list[str] = []  # ordered by relevance, already truncated
    reference_size: int = 0
    used_generic_vocabulary: bool = False


class VerbResult(BaseModel):
    score: int = 0
    strong_verbs: list[str] = []
    weak_phrases: list[str] = []
    statement_count: int = 0
    strong_count: int = 0


class MetricsResult(BaseModel):
    score: int = 0
    metrics: list[str] = []  # literal matched substrings, distinct
    opportunities: list[str] = []  # achievement-like statements without a number


class FormattingResult(BaseModel):
    score: int = 100
    issues: list[str] = []
