from pydantic import BaseModel

from models.cv import CVDocument
from models.jobs import JobPosting
from models.responses import AnalysisResult, JobMatch

APPLICATION_STATUSES = ("saved", "applied", "interviewing", "offer", "rejected")


class CVRecord(BaseModel):
    id: str
    user_id: str
    title: str
    template_id: str = "modern"
    data: CVDocument = CVDocument()
    ats_score: int | None = None
    is_primary: bool = False
    created_at: str
    updated_at: str


class SavedJob(BaseModel):
    id: str
    user_id: str
    job_id: str
    job: JobPosting | None = None
    created_at: str


class Application(BaseModel):
    id: str
    user_id: str
    job_id: str
    cv_id: str | None = None
    company: str = ""
    title: str = ""
    status: str = "applied"
    notes: str = ""
    applied_at: str
    updated_at: str


class ApplicationStats(BaseModel):
    total: int = 0
    by_status: dict[str, int] = {}


class ExperienceAnalysis(BaseModel):
    user_years: float = 0.0
    required_years: float = 0.0
    meets_requirement: bool = True
    experience_gap: float = 0.0  # positive when the CV exceeds the requirement
    is_entry_level: bool = False


class JobMatchRecord(BaseModel):
    user_id: str
    job_id: str
    cv_id: str
    job_title: str = ""
    company: str = ""
    match_score: int = 0
    comparison: JobMatch = JobMatch()
    experience: ExperienceAnalysis = ExperienceAnalysis()
    analysis: AnalysisResult = AnalysisResult()
    cached: bool = False
    calculated_at: str
