"""Fan-out job search across providers with a page cache.

Providers are queried concurrently, each under its own timeout. A failing
provider contributes an entry to `errors` instead of failing the search.
Results are de-duplicated on title+company, filtered, sorted newest first
and cached per canonical (query, filters, page) key.
"""

import asyncio
import logging
import math
from typing import Callable, Sequence

import httpx

from config import settings
from models.jobs import JobDetailResponse, JobPosting, JobSearchFilters, JobSearchPage, Pagination
from services.errors import CollaboratorUnavailable, NotFoundError
from services.jobs import smart_tips
from services.jobs.cache import JobDetailsCache, PageCache
from services.jobs.providers import (
    AusbildungProvider,
    JobProvider,
    ProviderResult,
    global_providers,
    morocco_providers,
)

logger = logging.getLogger(__name__)

MOROCCO_COUNTRY_CODES = {"ma", "morocco", "maroc"}


def dedupe(jobs: Sequence[JobPosting]) -> list[JobPosting]:
    """First posting wins for each case-insensitive title+company pair."""
    seen: set[tuple[str, str]] = set()
    unique = []
    for job in jobs:
        key = (job.title.strip().lower(), job.company.strip().lower())
        if key in seen:
            continue
        seen.add(key)
        unique.append(job)
    return unique


def apply_filters(jobs: Sequence[JobPosting], filters: JobSearchFilters, morocco: bool = False) -> list[JobPosting]:
    result = list(jobs)
    if filters.remote:
        result = [j for j in result if j.location_type == "remote"]
    if filters.job_type and not filters.is_ausbildung:
        result = [j for j in result if j.job_type == filters.job_type]
    if filters.salary_min:
        # Unknown salaries are kept; most postings omit them
        result = [j for j in result if (j.salary_max or j.salary_min) is None
                  or (j.salary_max or j.salary_min) >= filters.salary_min]
    if filters.city.strip():
        city = filters.city.strip().lower()
        if morocco:
            result = [
                j for j in result
                if not j.location or city in j.location.lower() or "maroc" in j.location.lower()
            ]
        else:
            result = [j for j in result if city in f"{j.location} {j.city or ''}".lower()]
    return result


def sort_newest_first(jobs: Sequence[JobPosting]) -> list[JobPosting]:
    """Undated postings sort last; ISO 8601 UTC strings compare chronologically."""
    return sorted(jobs, key=lambda j: j.posted_at or "", reverse=True)


class JobSearchService:
    def __init__(
        self,
        providers: Sequence[JobProvider] | None = None,
        ausbildung_provider: JobProvider | None = None,
        morocco: Sequence[JobProvider] | None = None,
        client_factory: Callable[[], httpx.AsyncClient] | None = None,
        page_cache: PageCache | None = None,
        details_cache: JobDetailsCache | None = None,
        provider_timeout: float | None = None,
    ):
        self.providers = list(providers) if providers is not None else global_providers()
        self.ausbildung_provider = ausbildung_provider or AusbildungProvider()
        self.morocco = list(morocco) if morocco is not None else morocco_providers()
        self._client_factory = client_factory or self._default_client
        self.page_cache = page_cache if page_cache is not None else PageCache(
            max_entries=settings.job_cache_max_entries, ttl_seconds=settings.job_cache_ttl_seconds,
        )
        self.details_cache = details_cache if details_cache is not None else JobDetailsCache(
            max_entries=settings.job_details_cache_size, ttl_seconds=settings.job_details_ttl_seconds,
        )
        self.provider_timeout = provider_timeout or settings.provider_timeout_seconds

    @staticmethod
    def _default_client() -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=settings.http_timeout_seconds, follow_redirects=True)

    def is_morocco_search(self, filters: JobSearchFilters) -> bool:
        return filters.is_morocco or filters.country.strip().lower() in MOROCCO_COUNTRY_CODES

    def route(self, filters: JobSearchFilters) -> list[JobProvider]:
        """Providers that serve this request, in priority order."""
        if filters.is_ausbildung:
            selected = [self.ausbildung_provider]
        elif self.is_morocco_search(filters):
            wanted = {s.lower() for s in filters.morocco_sources}
            selected = [
                p for p in self.morocco
                if not wanted or p.name.lower() in wanted or p.name.lower().removeprefix("morocco_") in wanted
            ]
        else:
            wanted = {s.lower() for s in filters.sources}
            selected = [p for p in self.providers if not wanted or p.name.lower() in wanted]
        return sorted((p for p in selected if p.is_enabled()), key=lambda p: p.priority)

    def available_providers(self) -> list[dict]:
        every = [*self.providers, self.ausbildung_provider, *self.morocco]
        return [p.describe() for p in sorted(every, key=lambda p: p.priority) if p.is_enabled()]

    async def _run_provider(
        self, provider: JobProvider, filters: JobSearchFilters, client: httpx.AsyncClient
    ) -> ProviderResult:
        try:
            return await asyncio.wait_for(provider.search(filters, client), timeout=self.provider_timeout)
        except asyncio.TimeoutError as e:
            logger.warning("Provider %s timed out after %.1fs", provider.name, self.provider_timeout)
            raise CollaboratorUnavailable(f"{provider.display_name or provider.name} timed out") from e

    async def _fan_out(
        self, providers: Sequence[JobProvider], filters: JobSearchFilters
    ) -> tuple[list[JobPosting], int, list[str], dict[str, str]]:
        async with self._client_factory() as client:
            outcomes = await asyncio.gather(
                *(self._run_provider(p, filters, client) for p in providers),
                return_exceptions=True,
            )

        jobs: list[JobPosting] = []
        total = 0
        sources: list[str] = []
        errors: dict[str, str] = {}
        for provider, outcome in zip(providers, outcomes):
            if isinstance(outcome, CollaboratorUnavailable):
                errors[provider.name] = outcome.message
            elif isinstance(outcome, Exception):
                logger.error("Provider %s failed: %s", provider.name, outcome, exc_info=outcome)
                errors[provider.name] = f"{provider.display_name or provider.name} failed"
            else:
                jobs.extend(outcome.jobs)
                total += outcome.total
                sources.append(provider.name)
        return jobs, total, sources, errors

    async def search(self, filters: JobSearchFilters, use_cache: bool = True) -> JobSearchPage:
        key = filters.cache_key()
        if use_cache:
            cached = self.page_cache.get(key)
            if cached is not None:
                logger.debug("Job search cache hit")
                return cached.model_copy(update={"cached": True})

        providers = self.route(filters)
        if not providers:
            return JobSearchPage(
                pagination=Pagination(page=filters.page, limit=filters.limit),
                errors={"providers": "No job providers are configured for this search"},
            )

        raw, total, sources, errors = await self._fan_out(providers, filters)

        if not sources:
            stale = self.page_cache.get_stale(key)
            if stale is not None:
                logger.warning("All providers failed, serving stale cached page")
                return stale.model_copy(update={"cached": True, "errors": errors})

        morocco = self.is_morocco_search(filters) and not filters.is_ausbildung
        deduped = dedupe(raw)
        filtered = apply_filters(deduped, filters, morocco=morocco)
        jobs = sort_newest_first(filtered)[: filters.limit]

        removed = len(raw) - len(filtered)
        total = max(total - removed, (filters.page - 1) * filters.limit + len(jobs))
        page = JobSearchPage(
            jobs=jobs,
            pagination=Pagination(
                page=filters.page,
                limit=filters.limit,
                total=total,
                total_pages=math.ceil(total / filters.limit) if total else 0,
            ),
            sources=sources,
            errors=errors,
        )

        for job in jobs:
            self.details_cache.put(job.id, job)
        if sources:
            self.page_cache.set(key, page)
        logger.info(
            "Job search returned %d jobs from %d providers (%d errors)", len(jobs), len(sources), len(errors)
        )
        return page

    def _find_in_pages(self, job_id: str) -> JobPosting | None:
        for page in self.page_cache.values():
            for job in page.jobs:
                if job.id == job_id:
                    return job
        return None

    async def get_job(self, job_id: str) -> JobPosting:
        job = self.details_cache.get(job_id) or self._find_in_pages(job_id)
        if job is None and job_id.startswith("jsearch_"):
            job = await self._fetch_jsearch(job_id.removeprefix("jsearch_"))
        if job is None:
            raise NotFoundError(f"Job {job_id} not found")
        self.details_cache.put(job_id, job)
        return job

    async def _fetch_jsearch(self, external_id: str) -> JobPosting | None:
        provider = next((p for p in self.providers if p.name == "jsearch" and p.is_enabled()), None)
        if provider is None:
            return None
        async with self._client_factory() as client:
            return await provider.get_job(external_id, client)

    async def get_job_details(self, job_id: str) -> JobDetailResponse:
        job = await self.get_job(job_id)
        return JobDetailResponse(job=job, smart_tips=smart_tips.detect_smart_tips(job.description))

    def clear_cache(self) -> None:
        self.page_cache.clear()

    def cache_stats(self) -> dict:
        return {"pages": self.page_cache.stats(), "details": self.details_cache.stats()}
