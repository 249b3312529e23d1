from pydantic import BaseModel


class ScoreBreakdown(BaseModel):
    structure: int = 0
    keywords: int = 0
    action_verbs: int = 0
    metrics: int = 0
    formatting: int = 0


class AnalysisDetails(BaseModel):
    missing_sections: list[str] = []
    strong_verbs: list[str] = []
    weak_phrases: list[str] = []
    metrics_found: list[str] = []
    metric_opportunities: list[str] = []
    formatting_issues: list[str] = []
    used_generic_vocabulary: bool = False


class AnalysisResult(BaseModel):
    overall_score: int = 0
    breakdown: ScoreBreakdown = ScoreBreakdown()
    matched_keywords: list[str] = []
    missing_keywords: list[str] = []
    suggestions: list[str] = []
    strengths: list[str] = []
    details: AnalysisDetails = AnalysisDetails()
    mode: str = "local"  # "local" | "hybrid"
    status: str = "complete"  # "complete" | "local_fallback"
    degraded: bool = False
    scoring_method: str = "local_only"  # "local_only" | "hybrid"
    model_summary: str = ""
    grade: str = "F"
    ats_ready: bool = False


class AnalysisEnvelope(AnalysisResult):
    """AnalysisResult as returned over HTTP, tagged when superseded."""

    stale: bool = False


class AtsReport(BaseModel):
    score: int
    grade: str
    status: str
    top_strengths: list[str] = []
    top_improvements: list[str] = []
    keyword_gaps: list[str] = []


class KeywordDensityEntry(BaseModel):
    count: int = 0
    density: float = 0.0
    recommendation: str = ""


class JobMatch(BaseModel):
    technical_match: int = 0
    soft_skills_match: int = 0
    education_match: bool = True
    required_years: float = 0.0
    cv_years: float = 0.0
    experience_match: bool = True
    matched_technical: list[str] = []
    missing_technical: list[str] = []
    text_similarity: float = 0.0


class AIActionResponse(BaseModel):
    action: str
    text: str = ""
    bullets: list[str] = []
    keywords: list[str] = []
    data: dict = {}
    analysis: AnalysisResult | None = None
    degraded: bool = False


class ReportResponse(BaseModel):
    report: AtsReport
    keyword_density: dict[str, KeywordDensityEntry] = {}
    job_match: JobMatch | None = None
