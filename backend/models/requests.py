from pydantic import BaseModel, Field

from models.cv import CVDocument


class AnalyzeRequest(BaseModel):
    cv: CVDocument
    job_description: str = Field("", max_length=10000, description="Target job description text")
    mode: str = Field("local", pattern="^(local|hybrid)$")
    session_id: str | None = Field(None, max_length=128)


class AIActionRequest(BaseModel):
    action: str = Field(..., max_length=32)
    cv: CVDocument | None = None
    job_description: str = Field("", max_length=10000)
    text: str = Field("", max_length=5000, description="Fragment to improve")
    job_title: str = Field("", max_length=200)
    company: str = Field("", max_length=200)
    description: str = Field("", max_length=5000)


class ExportRequest(BaseModel):
    cv: CVDocument
    template_id: str = "modern"
    paper: str = Field("letter", pattern="^(letter|a4)$")


class CVCreateRequest(BaseModel):
    title: str = Field("", max_length=200)
    template_id: str = "modern"
    data: CVDocument = CVDocument()


class CVUpdateRequest(BaseModel):
    title: str | None = Field(None, max_length=200)
    template_id: str | None = None
    data: CVDocument | None = None


class SaveAnalysisRequest(BaseModel):
    ats_score: int = Field(..., ge=0, le=100)


class SaveJobRequest(BaseModel):
    job_id: str = Field(..., max_length=256)


class ApplicationCreateRequest(BaseModel):
    job_id: str = Field(..., max_length=256)
    cv_id: str | None = None
    company: str = ""
    title: str = ""
    status: str = "applied"
    notes: str = Field("", max_length=5000)


class ApplicationUpdateRequest(BaseModel):
    status: str
    notes: str | None = Field(None, max_length=5000)


class JobMatchRequest(BaseModel):
    mode: str = Field("hybrid", pattern="^(local|hybrid)$")
    cv_id: str | None = Field(None, description="Defaults to the user's primary CV")
    refresh: bool = Field(False, description="Recalculate even when a cached match exists")
