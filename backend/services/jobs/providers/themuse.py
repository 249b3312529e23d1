"""The Muse public jobs API. No key, 0-based pages, no text search."""

import httpx

from models.jobs import JobSearchFilters
from services.jobs.normalizer import normalize_themuse
from services.jobs.providers.base import JobProvider, ProviderResult

API_URL = "https://www.themuse.com/api/public/jobs"

LEVELS = {
    "entry": "Entry Level",
    "intern": "Internship",
    "mid": "Mid Level",
    "senior": "Senior Level",
    "executive": "Management",
}


def _matches(job: dict, query: str) -> bool:
    needle = query.lower()
    return any(
        needle in (value or "").lower()
        for value in (job.get("name"), (job.get("company") or {}).get("name"), job.get("contents"))
    )


class TheMuseProvider(JobProvider):
    name = "themuse"
    display_name = "The Muse"
    priority = 4

    async def search(self, filters: JobSearchFilters, client: httpx.AsyncClient) -> ProviderResult:
        params = {"page": filters.page - 1}
        if filters.experience_level in LEVELS:
            params["level"] = LEVELS[filters.experience_level]
        where = filters.city or filters.location
        if where.strip():
            params["location"] = where.strip()

        data = await self.get_json(client, API_URL, params=params)
        raw = data.get("results") or []
        total = int(data.get("total") or len(raw))
        if filters.query.strip():
            raw = [j for j in raw if _matches(j, filters.query.strip())]
            total = len(raw)
        return ProviderResult(jobs=[normalize_themuse(j) for j in raw[: filters.limit]], total=total)
