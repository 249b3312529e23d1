"""RemoteOK public feed. No key; the whole feed comes back in one response."""

import httpx

from models.jobs import JobSearchFilters
from services.jobs.normalizer import normalize_remoteok
from services.jobs.providers.base import JobProvider, ProviderResult

API_URL = "https://remoteok.com/api"


def _matches(job: dict, query: str) -> bool:
    needle = query.lower()
    haystacks = [job.get("position"), job.get("company"), job.get("description")]
    if any(needle in (h or "").lower() for h in haystacks):
        return True
    return any(needle in (t or "").lower() for t in job.get("tags") or [])


class RemoteOKProvider(JobProvider):
    name = "remoteok"
    display_name = "RemoteOK"
    priority = 1

    async def search(self, filters: JobSearchFilters, client: httpx.AsyncClient) -> ProviderResult:
        data = await self.get_json(
            client, API_URL, params={"api": 1},
            headers={"User-Agent": "CareerForge/1.0 (job-search-aggregator)"},
        )
        # First element is the legal notice
        raw = [j for j in (data or [])[1:] if isinstance(j, dict) and j.get("id")]
        if filters.query.strip():
            raw = [j for j in raw if _matches(j, filters.query.strip())]

        start = (filters.page - 1) * filters.limit
        page = raw[start:start + filters.limit]
        return ProviderResult(jobs=[normalize_remoteok(j) for j in page], total=len(raw))
