"""Turn extracted CV text into a CVDocument.

The heuristic parser works offline from section headers, date ranges and
bullet markers. When the model is configured it structures the text
instead, and anything it leaves empty in the contact block is filled from
the heuristic result.
"""

import logging
import re

from pydantic import ValidationError

from models.cv import (
    Certification,
    CVDocument,
    EducationEntry,
    ExperienceEntry,
    PersonalInfo,
    Project,
    Skills,
)
from services import gemini_client, prompt_builder
from services.ats.text import strip_bullet
from services.ats.vocabulary import SOFT_SKILLS
from services.pdf_parser import is_bullet_line
from services.section_parser import DATE_RANGE_RE, extract_contact_info, parse_sections

logger = logging.getLogger(__name__)

_ENTRY_SEPARATORS = re.compile(r"\s+(?:at|@|\||-|–|—)\s+|,\s+")
_LIST_SPLIT_RE = re.compile(r"[,;|•·\n]")
_DEGREE_RE = re.compile(
    r"\b(?:ph\.?d|doctor(?:ate)?|master'?s?|m\.?sc|m\.s\.|mba|bachelor'?s?|b\.?sc|b\.s\.|b\.a\.|associate|diploma|degree|licence)(?!\w)",
    re.IGNORECASE,
)
_YEAR_RE = re.compile(r"\b(?:19|20)\d{2}\b")
_CURRENT_RE = re.compile(r"^(?:present|current|now)$", re.IGNORECASE)

MAX_TEXT_FOR_MODEL = 15000


def _lines(text: str) -> list[str]:
    return [line.strip() for line in text.split("\n") if line.strip()]


def _split_heading(line: str) -> tuple[str, str]:
    """'Engineer at Acme' -> ('Engineer', 'Acme')."""
    parts = [p.strip() for p in _ENTRY_SEPARATORS.split(line, maxsplit=1) if p.strip()]
    if len(parts) == 2:
        return parts[0], parts[1]
    return line.strip(), ""


def _parse_personal_info(header: str, full_text: str) -> PersonalInfo:
    contact = extract_contact_info(header or full_text)
    if not any(contact.values()):
        contact = extract_contact_info(full_text)

    info = PersonalInfo(
        email=contact["email"] or "",
        phone=contact["phone"] or "",
        linkedin=contact["linkedin"] or "",
        website=contact["website"] or "",
    )
    contact_values = {v for v in contact.values() if v}
    candidates = [
        line for line in _lines(header)
        if not any(v in line for v in contact_values) and not re.search(r"[@\d]", line)
    ]
    if candidates:
        names = candidates[0].split()
        info.first_name = names[0]
        info.last_name = " ".join(names[1:])
    if len(candidates) > 1:
        info.title = candidates[1]
    if len(candidates) > 2 and "," in candidates[2]:
        info.location = candidates[2]
    return info


def _parse_experience(text: str) -> list[ExperienceEntry]:
    entries: list[ExperienceEntry] = []
    pending: str | None = None
    for line in _lines(text):
        if is_bullet_line(line):
            if entries:
                entries[-1].bullets.append(strip_bullet(line))
            continue

        dates = DATE_RANGE_RE.search(line)
        if dates:
            heading = (line[:dates.start()] + line[dates.end():]).strip(" ,|-–—()")
            if not heading and pending:
                heading = pending
            title, company = _split_heading(heading)
            end = dates.group(2)
            entries.append(ExperienceEntry(
                title=title,
                company=company,
                start_date=dates.group(1),
                end_date="" if _CURRENT_RE.match(end) else end,
                current=bool(_CURRENT_RE.match(end)),
            ))
            pending = None
            continue

        last = entries[-1] if entries else None
        if last is not None and not last.bullets and not last.description and not last.company:
            last.company = line
        elif last is not None and not last.bullets:
            last.description = f"{last.description} {line}".strip()
        else:
            pending = pending or line

    if pending and not entries:
        title, company = _split_heading(pending)
        entries.append(ExperienceEntry(title=title, company=company))
    return entries


def _parse_education(text: str) -> list[EducationEntry]:
    entries: list[EducationEntry] = []
    for line in _lines(text):
        cleaned = strip_bullet(line)
        body = cleaned
        start = end = ""
        dates = DATE_RANGE_RE.search(cleaned)
        if dates:
            start, end = dates.group(1), dates.group(2)
            body = (cleaned[:dates.start()] + cleaned[dates.end():]).strip(" ,|-–—()")
        else:
            year = _YEAR_RE.search(cleaned)
            if year:
                end = year.group()
                body = (cleaned[:year.start()] + cleaned[year.end():]).strip(" ,|-–—()")

        if _DEGREE_RE.search(body) or not entries:
            degree, school = _split_heading(body)
            field = ""
            if " in " in degree:
                degree, field = (p.strip() for p in degree.split(" in ", 1))
            entries.append(EducationEntry(degree=degree, field=field, school=school, start_date=start, end_date=end))
        elif body and not entries[-1].school:
            entries[-1].school = body
            entries[-1].start_date = entries[-1].start_date or start
            entries[-1].end_date = entries[-1].end_date or end
        elif end and not entries[-1].end_date:
            entries[-1].start_date, entries[-1].end_date = start, end
    return entries


def _split_list(text: str) -> list[str]:
    items = []
    for raw in _LIST_SPLIT_RE.split(text):
        item = strip_bullet(raw)
        if ":" in item:
            item = item.split(":", 1)[1].strip()
        if item and len(item) <= 60 and item.lower() not in {i.lower() for i in items}:
            items.append(item)
    return items


def _parse_skills(text: str) -> tuple[list[str], list[str]]:
    soft_vocab = set(SOFT_SKILLS)
    technical, soft = [], []
    for item in _split_list(text):
        (soft if item.lower() in soft_vocab else technical).append(item)
    return technical, soft


def _parse_projects(text: str) -> list[Project]:
    projects: list[Project] = []
    for line in _lines(text):
        if is_bullet_line(line) and projects:
            projects[-1].description = f"{projects[-1].description} {strip_bullet(line)}".strip()
        elif not projects or projects[-1].description:
            name, rest = _split_heading(strip_bullet(line))
            projects.append(Project(name=name, description=rest))
        else:
            projects[-1].description = line
    return projects


def _parse_certifications(text: str) -> list[Certification]:
    certs = []
    for line in _lines(text):
        name, issuer = _split_heading(strip_bullet(line))
        year = re.search(r"\b(19|20)\d{2}\b", issuer)
        date = year.group() if year else ""
        if year:
            issuer = issuer.replace(date, "").strip(" ,()-")
        certs.append(Certification(name=name, issuer=issuer, date=date))
    return certs


def parse_cv_text(text: str) -> CVDocument:
    """Heuristic CVDocument from plain CV text."""
    sections = parse_sections(text)
    technical, soft = _parse_skills(sections.get("skills", ""))
    certifications = _parse_certifications(sections.get("certifications", ""))

    return CVDocument(
        personal_info=_parse_personal_info(sections.get("header", ""), text),
        summary=" ".join(_lines(sections.get("summary", ""))),
        experience=_parse_experience(sections.get("experience", "")),
        education=_parse_education(sections.get("education", "")),
        skills=Skills(
            technical=technical,
            soft=soft,
            languages=_split_list(sections.get("languages", "")),
            certifications=[c.name for c in certifications],
        ),
        certifications=certifications,
        projects=_parse_projects(sections.get("projects", "")),
    )


def _fill_contact(model_cv: CVDocument, heuristic: CVDocument) -> CVDocument:
    info = model_cv.personal_info
    updates = {
        name: value
        for name, value in heuristic.personal_info.model_dump().items()
        if value and not getattr(info, name)
    }
    if updates:
        model_cv.personal_info = info.model_copy(update=updates)
    return model_cv


async def import_cv(text: str, use_model: bool = True) -> CVDocument:
    """Structure CV text, preferring the model and falling back to heuristics."""
    heuristic = parse_cv_text(text)
    if not use_model or not gemini_client.is_configured():
        return heuristic

    data = await gemini_client.generate_json(prompt_builder.build_parse_cv_prompt(text[:MAX_TEXT_FOR_MODEL]))
    if data is None:
        logger.warning("Model CV parsing unavailable, using heuristic parser")
        return heuristic

    try:
        structured = CVDocument.model_validate(data)
    except ValidationError as e:
        logger.warning("Model CV parse did not validate (%d errors), using heuristic parser", e.error_count())
        return heuristic

    if not structured.experience and not structured.education and not structured.personal_info.full_name:
        logger.warning("Model CV parse came back empty, using heuristic parser")
        return heuristic
    return _fill_contact(structured, heuristic)
