"""Action-verb sub-score: strong leading verbs versus weak filler phrases."""

import re

from config import AtsPolicy
from models.schemas.sub_scores import VerbResult
from services.ats.text import leading_word, stem
from services.ats.vocabulary import STRONG_VERBS, WEAK_PHRASES

_STRONG_STEMS = frozenset(stem(v) for v in STRONG_VERBS)
# Leading words that share a stem with a verb but read as nouns ("Manager", "Development")
_NOUN_SUFFIXES = ("er", "or", "ment", "ion", "ist", "ship")

_WEAK_RES = [
    (phrase, re.compile(rf"\b{re.escape(phrase)}\b", re.IGNORECASE))
    for phrase in sorted(WEAK_PHRASES, key=len, reverse=True)
]


def is_strong_verb(word: str) -> bool:
    word = word.lower()
    if word in STRONG_VERBS:
        return True
    if word.endswith(_NOUN_SUFFIXES):
        return False
    return stem(word) in _STRONG_STEMS


def find_weak_phrases(statement: str) -> list[str]:
    """Weak phrases in a statement; longer phrases shadow their prefixes ("helped with" over "helped")."""
    found = []
    consumed: list[tuple[int, int]] = []
    for phrase, pattern in _WEAK_RES:
        for match in pattern.finditer(statement):
            span = match.span()
            if any(start <= span[0] < end for start, end in consumed):
                continue
            consumed.append(span)
            found.append(phrase)
    return found


def score_action_verbs(statements: list[str], policy: AtsPolicy) -> VerbResult:
    if not statements:
        return VerbResult(score=0)

    strong_verbs: list[str] = []
    strong_count = 0
    weak_phrases: list[str] = []
    for statement in statements:
        verb = leading_word(statement)
        if verb and is_strong_verb(verb):
            strong_count += 1
            if verb not in strong_verbs:
                strong_verbs.append(verb)
        weak_phrases.extend(find_weak_phrases(statement))

    ratio = strong_count / len(statements)
    target = policy.strong_verb_target_ratio or 1.0
    raw = min(1.0, ratio / target) * 100 - policy.weak_phrase_penalty * len(weak_phrases)

    return VerbResult(
        score=max(0, min(100, round(raw))),
        strong_verbs=strong_verbs,
        weak_phrases=list(dict.fromkeys(weak_phrases)),
        statement_count=len(statements),
        strong_count=strong_count,
    )
