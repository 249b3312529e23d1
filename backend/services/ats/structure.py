"""Structure sub-score: expected sections present and minimally complete."""

from config import AtsPolicy
from models.cv import CVDocument, EducationEntry, ExperienceEntry
from models.schemas.sub_scores import StructureResult

# Field weights inside a section; each tuple sums to 1.0
_CONTACT_FIELDS = (("name", 0.30), ("email", 0.35), ("phone", 0.20), ("location", 0.10), ("linkedin", 0.05))
_EXPERIENCE_FIELDS = (("title", 0.30), ("company", 0.30), ("dates", 0.20), ("content", 0.20))
_EDUCATION_FIELDS = (("degree", 0.40), ("school", 0.40), ("dates", 0.20))

SUMMARY_MIN_CHARS = 50
SUMMARY_MAX_CHARS = 500


def _weighted(filled: dict[str, bool], fields: tuple[tuple[str, float], ...]) -> float:
    return sum(weight for name, weight in fields if filled.get(name))


def _contact_completeness(cv: CVDocument) -> tuple[float, list[str]]:
    info = cv.personal_info
    filled = {
        "name": bool(info.full_name),
        "email": bool(info.email.strip()),
        "phone": bool(info.phone.strip()),
        "location": bool(info.location.strip()),
        "linkedin": bool(info.linkedin.strip()),
    }
    issues = []
    if not filled["name"]:
        issues.append("Add your full name to the header")
    if not filled["email"]:
        issues.append("Add an email address so recruiters can reach you")
    if not filled["phone"]:
        issues.append("Add a phone number")
    if not filled["linkedin"]:
        issues.append("Consider adding a LinkedIn profile URL")
    return _weighted(filled, _CONTACT_FIELDS), issues


def _summary_completeness(summary: str) -> tuple[float, list[str]]:
    length = len(summary.strip())
    if length == 0:
        return 0.0, ["Add a professional summary"]
    if length < SUMMARY_MIN_CHARS:
        return 0.5, ["Expand your summary to at least 2-3 sentences"]
    if length > SUMMARY_MAX_CHARS:
        return 0.8, ["Shorten your summary; ATS parsers favour concise profiles"]
    return 1.0, []


def _experience_entry(entry: ExperienceEntry) -> float:
    filled = {
        "title": bool(entry.title.strip()),
        "company": bool(entry.company.strip()),
        "dates": bool(entry.start_date.strip()) and (entry.current or bool(entry.end_date.strip())),
        "content": bool(entry.description.strip()) or any(b.strip() for b in entry.bullets),
    }
    return _weighted(filled, _EXPERIENCE_FIELDS)


def _education_entry(entry: EducationEntry) -> float:
    filled = {
        "degree": bool(entry.degree.strip()),
        "school": bool(entry.school.strip()),
        "dates": bool(entry.end_date.strip() or entry.start_date.strip()),
    }
    return _weighted(filled, _EDUCATION_FIELDS)


def _skills_completeness(cv: CVDocument) -> tuple[float, list[str]]:
    skills = cv.skills
    all_skills = [s for s in skills.all() if s.strip()]
    if not all_skills:
        return 0.0, ["Add a skills section"]
    score = 0.0
    issues = []
    if skills.technical:
        score += 0.6
    else:
        issues.append("List your technical skills explicitly")
    if skills.soft or skills.languages:
        score += 0.2
    if len(all_skills) >= 5:
        score += 0.2
    return score, issues


def score_structure(cv: CVDocument, policy: AtsPolicy) -> StructureResult:
    """Score 0-100 from fixed section shares scaled by completeness."""
    issues: list[str] = []
    section_scores: dict[str, float] = {}

    section_scores["contact"], contact_issues = _contact_completeness(cv)
    issues.extend(contact_issues)

    section_scores["summary"], summary_issues = _summary_completeness(cv.summary)
    issues.extend(summary_issues)

    if cv.experience:
        entry_scores = [_experience_entry(e) for e in cv.experience]
        section_scores["experience"] = sum(entry_scores) / len(entry_scores)
        if any(s < 1.0 for s in entry_scores):
            issues.append("Complete every experience entry with title, company, dates and achievements")
    else:
        section_scores["experience"] = 0.0
        issues.append("Add at least one work experience entry")

    if cv.education:
        entry_scores = [_education_entry(e) for e in cv.education]
        section_scores["education"] = sum(entry_scores) / len(entry_scores)
    else:
        section_scores["education"] = 0.0
        issues.append("Add your education")

    section_scores["skills"], skill_issues = _skills_completeness(cv)
    issues.extend(skill_issues)

    shares = {
        "contact": policy.share_contact,
        "summary": policy.share_summary,
        "experience": policy.share_experience,
        "education": policy.share_education,
        "skills": policy.share_skills,
    }
    total_share = sum(shares.values()) or 1
    raw = sum(shares[name] * section_scores[name] for name in shares)
    score = round(raw * 100 / total_share)

    return StructureResult(
        score=min(100, max(0, score)),
        missing_sections=[name for name in shares if section_scores[name] == 0.0],
        section_scores={k: round(v, 3) for k, v in section_scores.items()},
        issues=issues,
    )
