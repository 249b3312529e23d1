"""How well a user's CV fits one job posting, cached per user and job.

The match reuses the ATS pipeline: the posting's text stands in for the job
description, `scorer.compare_to_job` supplies the category breakdown and
`orchestrator.analyze` the overall score.
"""

import logging
import re
from datetime import datetime, timezone

from models.jobs import JobPosting
from models.records import ExperienceAnalysis, JobMatchRecord
from services import section_parser
from services.ats import orchestrator, scorer
from services.cv_store import CVStore
from services.jobs.aggregator import JobSearchService

logger = logging.getLogger(__name__)

MAX_REQUIRED_YEARS = 20

_NO_EXPERIENCE_RE = re.compile(
    r"no\s*(?:prior\s*)?experience\s*(?:needed|required|necessary)?"
    r"|experience\s*not\s*(?:needed|required|necessary)"
    r"|without\s*experience"
    r"|beginners?\s*welcome"
    r"|freshers?\s*(?:welcome|encouraged)"
    r"|open\s*to\s*(?:all|beginners?|freshers?)"
    r"|anyone\s*can\s*apply"
    r"|will\s*train|training\s*provided"
    r"|\b(?:0|zero)\s*(?:years?\s*)?(?:of\s*)?experience",
    re.IGNORECASE,
)
_ENTRY_TITLE_RE = re.compile(
    r"\b(?:entry[\s-]?level|junior|jr\.?|intern|trainee|graduate|fresher|beginner|apprentice|azubi)\b",
    re.IGNORECASE,
)

# "mid" is the normalizer's default for unlabelled postings, so it maps to nothing
_LEVEL_YEARS = {"entry": 0, "intern": 0, "senior": 5, "executive": 10}


def job_text(job: JobPosting) -> str:
    parts = [job.title, job.description]
    if job.skills:
        parts.append("Required skills: " + ", ".join(job.skills))
    return "\n".join(p for p in parts if p)


def required_experience(job: JobPosting) -> tuple[float, bool]:
    """(required years, entry level) for a posting.

    Explicit year counts in the text win over entry-level wording, which
    wins over the posting's experience level.
    """
    years = section_parser.extract_required_years(f"{job.title}\n{job.description}")
    if 0 < years <= MAX_REQUIRED_YEARS:
        return years, False

    if job.is_ausbildung or _NO_EXPERIENCE_RE.search(job.description) or _ENTRY_TITLE_RE.search(job.title):
        return 0.0, True

    level_years = _LEVEL_YEARS.get((job.experience_level or "").lower())
    if level_years is not None:
        return float(level_years), level_years == 0
    return 0.0, False


def analyze_experience(cv_years: float, job: JobPosting) -> ExperienceAnalysis:
    required, entry_level = required_experience(job)
    return ExperienceAnalysis(
        user_years=cv_years,
        required_years=required,
        meets_requirement=entry_level or cv_years >= required,
        experience_gap=round(cv_years - required, 1),
        is_entry_level=entry_level,
    )


async def calculate_match(
    store: CVStore,
    jobs: JobSearchService,
    user_id: str,
    job_id: str,
    cv_id: str | None = None,
    mode: str = "hybrid",
    refresh: bool = False,
) -> JobMatchRecord:
    """Return the cached match for (user, job) or compute and cache a new one."""
    if not refresh:
        cached = store.get_job_match(user_id, job_id)
        if cached is not None and (cv_id is None or cached.cv_id == cv_id):
            return cached

    job = await jobs.get_job(job_id)
    cv_record = store.get(user_id, cv_id) if cv_id else store.get_primary(user_id)
    text = job_text(job)

    comparison = scorer.compare_to_job(cv_record.data, text)
    analysis = await orchestrator.analyze(cv_record.data, text, mode=mode)

    record = JobMatchRecord(
        user_id=user_id,
        job_id=job_id,
        cv_id=cv_record.id,
        job_title=job.title,
        company=job.company,
        match_score=analysis.overall_score,
        comparison=comparison,
        experience=analyze_experience(comparison.cv_years, job),
        analysis=analysis,
        calculated_at=datetime.now(timezone.utc).isoformat(),
    )
    logger.info("Matched CV %s against job %s for user %s: %d", cv_record.id, job_id, user_id, record.match_score)
    return store.save_job_match(record)
