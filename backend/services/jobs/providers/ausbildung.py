"""German apprenticeships, searched through Adzuna's /de/ endpoint."""

import httpx

from models.jobs import JobSearchFilters
from services.jobs import ausbildung
from services.jobs.normalizer import normalize_adzuna
from services.jobs.providers.adzuna import BASE_URL, AdzunaProvider
from services.jobs.providers.base import ProviderResult

_COUNTRY_NAMES = {"germany", "deutschland", "de"}


class AusbildungProvider(AdzunaProvider):
    name = "ausbildung"
    display_name = "Ausbildung (Adzuna DE)"
    priority = 5

    def build_params(self, filters: JobSearchFilters) -> dict:
        params = {
            "app_id": self.app_id,
            "app_key": self.app_key,
            "results_per_page": filters.limit,
            "sort_by": "date",
            "what": ausbildung.build_query(filters.query, filters.ausbildung_field, filters.start_year),
        }
        where = (filters.city or filters.location).strip()
        # Already searching /de/, a country name here only narrows results to nothing
        if where and where.lower() not in _COUNTRY_NAMES:
            params["where"] = where
        return params

    async def search(self, filters: JobSearchFilters, client: httpx.AsyncClient) -> ProviderResult:
        url = f"{BASE_URL}/de/search/{filters.page}"
        data = await self.get_json(client, url, params=self.build_params(filters))
        jobs = []
        for raw in data.get("results") or []:
            job = normalize_adzuna(raw, currency="EUR", source=self.name)
            job.is_ausbildung = True
            job.job_type = "apprenticeship"
            job.ausbildung_details = ausbildung.extract_details(job)
            jobs.append(job)
        return ProviderResult(jobs=jobs, total=int(data.get("count") or 0))
