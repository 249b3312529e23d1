"""Metrics sub-score: quantified achievements in experience statements."""

import re

from config import AtsPolicy
from models.schemas.sub_scores import MetricsResult
from services.ats.vocabulary import ACHIEVEMENT_WORDS

# Alternation order matters: the most specific form wins at each position
_METRIC_RE = re.compile(
    r"(?P<currency>[$€£]\s?\d[\d,]*(?:\.\d+)?(?:\s?(?:k|m|b|bn|million|billion)\b)?\+?)"
    r"|(?P<percent>\b\d+(?:\.\d+)?\s?%)"
    r"|(?P<multiplier>\b\d+(?:\.\d+)?x\b)"
    r"|(?P<magnitude>\b\d+(?:\.\d+)?\s?(?:k|bn|million|billion)\b\+?)"
    r"|(?P<count>\b\d[\d,]*(?:\.\d+)?\+?)",
    re.IGNORECASE,
)
_YEAR_RE = re.compile(r"(?:19|20)\d{2}")

MAX_OPPORTUNITIES = 5


def find_metrics(statement: str) -> list[str]:
    """Literal metric substrings in a statement, skipping calendar years."""
    found = []
    for match in _METRIC_RE.finditer(statement):
        value = match.group().strip()
        if match.lastgroup == "count" and _YEAR_RE.fullmatch(value.rstrip("+")):
            continue
        found.append(value)
    return found


def _looks_like_achievement(statement: str) -> bool:
    words = re.findall(r"[a-z]+", statement.lower())
    return any(w in ACHIEVEMENT_WORDS for w in words)


def metric_points(count: int, policy: AtsPolicy) -> int:
    """Full rate up to the threshold, reduced rate after it, capped at 100."""
    threshold = policy.metric_full_rate_threshold
    full = min(count, threshold)
    extra = max(0, count - threshold)
    return min(100, full * policy.metric_points_full_rate + extra * policy.metric_points_diminished)


def score_metrics(statements: list[str], policy: AtsPolicy) -> MetricsResult:
    metrics: list[str] = []
    opportunities: list[str] = []
    for statement in statements:
        found = find_metrics(statement)
        for value in found:
            if value.lower() not in (m.lower() for m in metrics):
                metrics.append(value)
        if not found and _looks_like_achievement(statement) and len(opportunities) < MAX_OPPORTUNITIES:
            opportunities.append(statement)

    return MetricsResult(
        score=metric_points(len(metrics), policy),
        metrics=metrics,
        opportunities=opportunities,
    )
