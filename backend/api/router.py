from fastapi import APIRouter, Depends, File, Request, UploadFile
from fastapi.responses import Response

from api.dependencies import get_job_service, limiter
from config import settings
from models.cv import CVDocument
from models.requests import AIActionRequest, AnalyzeRequest, ExportRequest
from models.responses import AIActionResponse, AnalysisEnvelope, AnalysisResult, ReportResponse
from services import cv_assistant, cv_importer, cv_templates, gemini_client, pdf_export, pdf_parser
from services.analysis_session import sessions
from services.ats import keywords as ats_keywords
from services.ats import orchestrator, scorer
from services.errors import NotFoundError, ValidationFailure
from services.jobs.aggregator import JobSearchService

router = APIRouter()


def pdf_response(content: bytes, filename: str) -> Response:
    return Response(
        content=content,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


def export_filename(cv: CVDocument) -> str:
    name = "_".join(cv.personal_info.full_name.split()) or "cv"
    return f"{name}_CV.pdf"


@router.get("/health")
async def health(jobs: JobSearchService = Depends(get_job_service)):
    return {
        "status": "ok",
        "gemini_configured": gemini_client.is_configured(),
        "job_providers": [p["name"] for p in jobs.available_providers()],
    }


@router.post("/cv/analyze", response_model=AnalysisEnvelope)
@limiter.limit("20/minute")
async def analyze(request: Request, body: AnalyzeRequest):
    if body.session_id is None:
        result = await orchestrator.analyze(body.cv, body.job_description, mode=body.mode)
        return AnalysisEnvelope(**result.model_dump())

    ticket = sessions.begin(body.session_id)
    result = await orchestrator.analyze(body.cv, body.job_description, mode=body.mode)
    if sessions.publish(body.session_id, ticket, result):
        return AnalysisEnvelope(**result.model_dump())
    return AnalysisEnvelope(**result.model_dump(), stale=True)


@router.get("/cv/analyze/{session_id}", response_model=AnalysisResult)
async def latest_analysis(session_id: str):
    result = sessions.latest(session_id)
    if result is None:
        raise NotFoundError(f"No analysis recorded for session '{session_id}'")
    return result


@router.post("/cv/report", response_model=ReportResponse)
@limiter.limit("20/minute")
async def report(request: Request, body: AnalyzeRequest):
    """Local analysis condensed into a report, with keyword density and a job comparison when a JD is given."""
    result = scorer.analyze_local(body.cv, body.job_description)
    keywords = result.matched_keywords + result.missing_keywords
    job_match = scorer.compare_to_job(body.cv, body.job_description) if body.job_description.strip() else None
    return ReportResponse(
        report=scorer.generate_report(result),
        keyword_density=ats_keywords.keyword_density(body.cv, keywords),
        job_match=job_match,
    )


@router.post("/cv/ai", response_model=AIActionResponse)
@limiter.limit("10/minute")
async def ai_action(request: Request, body: AIActionRequest):
    return await cv_assistant.run_action(body)


@router.get("/cv/templates")
async def templates():
    return {"templates": [t.model_dump() for t in cv_templates.list_templates()]}


@router.get("/cv/templates/{template_id}")
async def template(template_id: str):
    return cv_templates.get_template(template_id).model_dump()


@router.post("/cv/export")
async def export(body: ExportRequest):
    content = pdf_export.render_cv_pdf(body.cv, body.template_id, body.paper)
    return pdf_response(content, export_filename(body.cv))


@router.post("/cv/parse", response_model=CVDocument)
@limiter.limit("10/minute")
async def parse_cv(request: Request, file: UploadFile = File(...), use_model: bool = True):
    content = await file.read()
    max_bytes = settings.max_upload_size_mb * 1024 * 1024
    if len(content) > max_bytes:
        raise ValidationFailure(f"File too large. Max size: {settings.max_upload_size_mb}MB")

    text = pdf_parser.extract_document(file.filename or "", content)
    return await cv_importer.import_cv(text, use_model=use_model)
