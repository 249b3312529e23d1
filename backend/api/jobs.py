"""Job search, job details, CV-to-job matches and saved jobs."""

from fastapi import APIRouter, Depends, Query, Request

from api.dependencies import get_cv_store, get_job_service, get_user_id, limiter
from models.jobs import JobDetailResponse, JobSearchFilters, JobSearchPage
from models.records import JobMatchRecord, SavedJob
from models.requests import JobMatchRequest, SaveJobRequest
from services import job_match
from services.cv_store import CVStore
from services.errors import NotFoundError
from services.jobs.aggregator import JobSearchService

router = APIRouter(prefix="/jobs", tags=["Jobs"])


def _csv(value: str) -> list[str]:
    return [v.strip() for v in value.split(",") if v.strip()]


@router.get("/search", response_model=JobSearchPage)
async def search_jobs(
    query: str = "",
    location: str = "",
    country: str = "",
    city: str = "",
    remote: bool = False,
    job_type: str = "",
    experience_level: str = "",
    salary_min: float | None = None,
    salary_max: float | None = None,
    sources: str = Query("", description="Comma-separated provider names"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=50),
    is_ausbildung: bool = False,
    ausbildung_field: str = "",
    start_year: str = "",
    is_morocco: bool = False,
    morocco_sources: str = Query("", description="Comma-separated Moroccan board ids"),
    sector: str = "",
    cache: bool = Query(True, description="Set false to bypass the page cache"),
    service: JobSearchService = Depends(get_job_service),
):
    filters = JobSearchFilters(
        query=query,
        location=location,
        country=country,
        city=city,
        remote=remote,
        job_type=job_type,
        experience_level=experience_level,
        salary_min=salary_min,
        salary_max=salary_max,
        sources=_csv(sources),
        page=page,
        limit=limit,
        is_ausbildung=is_ausbildung,
        ausbildung_field=ausbildung_field,
        start_year=start_year,
        is_morocco=is_morocco,
        morocco_sources=_csv(morocco_sources),
        sector=sector,
    )
    return await service.search(filters, use_cache=cache)


@router.get("/providers")
async def providers(service: JobSearchService = Depends(get_job_service)):
    return {"providers": service.available_providers(), "cache": service.cache_stats()}


@router.delete("/cache")
async def clear_cache(service: JobSearchService = Depends(get_job_service)):
    service.clear_cache()
    return {"cleared": True}


@router.get("/saved", response_model=list[SavedJob])
async def list_saved(user_id: str = Depends(get_user_id), store: CVStore = Depends(get_cv_store)):
    return store.list_saved_jobs(user_id)


@router.post("/saved", response_model=SavedJob, status_code=201)
async def save_job(
    body: SaveJobRequest,
    user_id: str = Depends(get_user_id),
    store: CVStore = Depends(get_cv_store),
    service: JobSearchService = Depends(get_job_service),
):
    try:
        snapshot = await service.get_job(body.job_id)
    except NotFoundError:
        # Saved without a snapshot once the job has left the caches
        snapshot = None
    return store.save_job(user_id, body.job_id, snapshot)


@router.delete("/saved/{job_id}", status_code=204)
async def unsave_job(job_id: str, user_id: str = Depends(get_user_id), store: CVStore = Depends(get_cv_store)):
    store.unsave_job(user_id, job_id)


@router.get("/{job_id}/match", response_model=JobMatchRecord)
async def cached_match(job_id: str, user_id: str = Depends(get_user_id), store: CVStore = Depends(get_cv_store)):
    record = store.get_job_match(user_id, job_id)
    if record is None:
        raise NotFoundError(f"No match calculated for job {job_id}")
    return record


@router.post("/{job_id}/match", response_model=JobMatchRecord)
@limiter.limit("20/minute")
async def match_job(
    request: Request,
    job_id: str,
    body: JobMatchRequest | None = None,
    user_id: str = Depends(get_user_id),
    store: CVStore = Depends(get_cv_store),
    service: JobSearchService = Depends(get_job_service),
):
    body = body or JobMatchRequest()
    return await job_match.calculate_match(
        store, service, user_id, job_id, cv_id=body.cv_id, mode=body.mode, refresh=body.refresh,
    )


@router.get("/{job_id}", response_model=JobDetailResponse)
async def job_details(job_id: str, service: JobSearchService = Depends(get_job_service)):
    return await service.get_job_details(job_id)
