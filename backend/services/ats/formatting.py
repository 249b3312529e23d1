"""Formatting sub-score: patterns known to break ATS parsers.

Starts at 100 and deducts a fixed penalty per detected issue, floor 0.
"""

import re

from config import AtsPolicy
from models.cv import CVDocument
from models.schemas.sub_scores import FormattingResult
from services.ats.text import BULLET_MARKERS

STANDARD_BULLETS = frozenset("•-*")

_IMAGE_MARKUP_RE = re.compile(r"<img\b|!\[[^\]]*\]\(|data:image/|\.(?:png|jpe?g|gif|svg)\b", re.IGNORECASE)
_PICTOGRAPH_RE = re.compile("[\U0001F300-\U0001FAFF\U00002600-\U000027BF\U0001F000-\U0001F2FF]")
_COLUMN_GAP_RE = re.compile(r"\S {3,}\S")
_LEADING_GLYPH_RE = re.compile(r"^\s*([^\w\s(\"'$€£])\s")


def _single_line_fields(cv: CVDocument) -> list[tuple[str, str]]:
    info = cv.personal_info
    fields = [
        ("name", info.full_name),
        ("job title", info.title),
        ("email", info.email),
        ("phone", info.phone),
        ("location", info.location),
    ]
    for exp in cv.experience:
        fields += [("experience title", exp.title), ("company", exp.company), ("experience location", exp.location)]
    for edu in cv.education:
        fields += [("degree", edu.degree), ("school", edu.school)]
    fields += [("skill", s) for s in cv.skills.all()]
    fields += [("certification", c.name) for c in cv.certifications]
    fields += [("project name", p.name) for p in cv.projects]
    return [(label, value) for label, value in fields if value]


def _multiline_fields(cv: CVDocument) -> list[str]:
    texts = [cv.summary]
    for exp in cv.experience:
        texts.append(exp.description)
        texts.extend(exp.bullets)
    texts.extend(p.description for p in cv.projects)
    return [t for t in texts if t]


def _bullet_glyphs(cv: CVDocument) -> list[str]:
    glyphs = []
    for exp in cv.experience:
        for bullet in exp.bullets:
            stripped = bullet.strip()
            if stripped and not stripped[0].isalnum() and stripped[0] not in "(\"'$€£":
                glyphs.append(stripped[0])
        for line in exp.description.splitlines():
            match = _LEADING_GLYPH_RE.match(line)
            if match:
                glyphs.append(match.group(1))
    return glyphs


def _has_bullets(cv: CVDocument) -> bool:
    for exp in cv.experience:
        if any(b.strip() for b in exp.bullets):
            return True
        if any(line.strip()[:1] in BULLET_MARKERS for line in exp.description.splitlines() if line.strip()):
            return True
    return False


def score_formatting(cv: CVDocument, policy: AtsPolicy) -> FormattingResult:
    issues: list[tuple[str, int]] = []
    all_text = [value for _, value in _single_line_fields(cv)] + _multiline_fields(cv)

    # Images and icons in text fields
    if any(_IMAGE_MARKUP_RE.search(t) for t in all_text):
        issues.append(("Remove embedded images from text fields; ATS parsers cannot read them", policy.penalty_image))
    if any(_PICTOGRAPH_RE.search(t.replace("✓", "")) for t in all_text):
        issues.append(("Replace emoji and icon characters with plain text", policy.penalty_image))

    # Multi-column layout markers
    if any("\t" in t or _COLUMN_GAP_RE.search(t) or t.count("|") >= 2 for t in _multiline_fields(cv)):
        issues.append(("Avoid tabs, pipes and column spacing; use a single-column layout", policy.penalty_multi_column))

    # Bullet glyph consistency
    glyphs = _bullet_glyphs(cv)
    if len(set(glyphs)) > 1:
        issues.append(("Use one bullet style consistently", policy.penalty_bullet_inconsistency))
    if any(g not in STANDARD_BULLETS for g in glyphs):
        issues.append(("Replace decorative bullet characters with standard bullets", policy.penalty_bullet_inconsistency))

    # Overlong fields
    for label, value in _single_line_fields(cv):
        if len(value) > policy.max_field_length:
            issues.append((f"Shorten the {label} field (over {policy.max_field_length} characters)", policy.penalty_overlong_field))
    for text in _multiline_fields(cv):
        if any(len(line) > policy.max_description_line_length for line in text.splitlines()):
            issues.append(("Break long paragraphs into shorter bullet points", policy.penalty_overlong_field))
            break

    if cv.experience and not _has_bullets(cv):
        issues.append(("Use bullet points to describe your experience", policy.penalty_no_bullets))

    score = 100 - sum(penalty for _, penalty in issues)
    return FormattingResult(
        score=max(0, score),
        issues=list(dict.fromkeys(message for message, _ in issues)),
    )
