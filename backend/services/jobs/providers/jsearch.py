"""JSearch via RapidAPI (Google for Jobs aggregation)."""

import httpx

from config import settings
from models.jobs import JobPosting, JobSearchFilters
from services.jobs.normalizer import normalize_jsearch
from services.jobs.providers.base import JobProvider, ProviderResult

BASE_URL = "https://jsearch.p.rapidapi.com"
API_HOST = "jsearch.p.rapidapi.com"

EMPLOYMENT_TYPES = {
    "full-time": "FULLTIME",
    "part-time": "PARTTIME",
    "contract": "CONTRACTOR",
    "internship": "INTERN",
}

EXPERIENCE_REQUIREMENTS = {
    "entry": "no_experience",
    "intern": "no_experience",
    "mid": "under_3_years_experience",
    "senior": "more_than_3_years_experience",
    "executive": "more_than_3_years_experience",
}


class JSearchProvider(JobProvider):
    name = "jsearch"
    display_name = "JSearch"
    priority = 3

    def __init__(self, api_key: str | None = None):
        self.api_key = api_key if api_key is not None else settings.jsearch_api_key

    def is_enabled(self) -> bool:
        return bool(self.api_key)

    def _headers(self) -> dict:
        return {"X-RapidAPI-Key": self.api_key, "X-RapidAPI-Host": API_HOST}

    def build_params(self, filters: JobSearchFilters) -> dict:
        query = filters.query.strip() or "jobs"
        where = filters.city or filters.location
        if where.strip():
            query += f" in {where.strip()}"
        if filters.country.strip():
            query += f" {filters.country.strip()}"
        params = {"query": query, "page": filters.page, "num_pages": 1}
        if filters.remote:
            params["remote_jobs_only"] = "true"
        if filters.job_type in EMPLOYMENT_TYPES:
            params["employment_types"] = EMPLOYMENT_TYPES[filters.job_type]
        if filters.experience_level in EXPERIENCE_REQUIREMENTS:
            params["job_requirements"] = EXPERIENCE_REQUIREMENTS[filters.experience_level]
        return params

    async def search(self, filters: JobSearchFilters, client: httpx.AsyncClient) -> ProviderResult:
        data = await self.get_json(client, f"{BASE_URL}/search", params=self.build_params(filters), headers=self._headers())
        jobs = [normalize_jsearch(j) for j in data.get("data") or []]
        # JSearch reports no total; assume another page exists while pages come back full
        total = (filters.page - 1) * filters.limit + len(jobs)
        if len(jobs) >= filters.limit:
            total += filters.limit
        return ProviderResult(jobs=jobs, total=total)

    async def get_job(self, external_id: str, client: httpx.AsyncClient) -> JobPosting | None:
        data = await self.get_json(
            client, f"{BASE_URL}/job-details", params={"job_id": external_id}, headers=self._headers(),
        )
        items = data.get("data") or []
        return normalize_jsearch(items[0]) if items else None
