"""Adzuna search API (app id + key)."""

import httpx

from config import settings
from models.jobs import JobSearchFilters
from services.jobs.normalizer import normalize_adzuna
from services.jobs.providers.base import JobProvider, ProviderResult

BASE_URL = "https://api.adzuna.com/v1/api/jobs"

COUNTRY_CODES = {
    "united states": "us", "usa": "us", "us": "us",
    "united kingdom": "gb", "uk": "gb", "gb": "gb",
    "australia": "au", "au": "au",
    "germany": "de", "deutschland": "de", "de": "de",
    "france": "fr", "fr": "fr",
    "canada": "ca", "ca": "ca",
    "netherlands": "nl", "nl": "nl",
    "india": "in", "in": "in",
    "brazil": "br", "br": "br",
}

COUNTRY_CURRENCIES = {
    "us": "USD", "gb": "GBP", "au": "AUD", "de": "EUR", "fr": "EUR",
    "ca": "CAD", "nl": "EUR", "in": "INR", "br": "BRL",
}

# job type -> (query parameter, value)
JOB_TYPE_PARAMS = {
    "full-time": ("full_time", "1"),
    "part-time": ("part_time", "1"),
    "contract": ("contract", "1"),
    "permanent": ("permanent", "1"),
}


def country_code(country: str) -> str:
    return COUNTRY_CODES.get(country.strip().lower(), "us")


class AdzunaProvider(JobProvider):
    name = "adzuna"
    display_name = "Adzuna"
    priority = 2

    def __init__(self, app_id: str | None = None, app_key: str | None = None):
        self.app_id = app_id if app_id is not None else settings.adzuna_app_id
        self.app_key = app_key if app_key is not None else settings.adzuna_app_key

    def is_enabled(self) -> bool:
        return bool(self.app_id and self.app_key)

    def build_params(self, filters: JobSearchFilters) -> dict:
        params = {
            "app_id": self.app_id,
            "app_key": self.app_key,
            "results_per_page": filters.limit,
            "sort_by": "date",
        }
        if filters.query.strip():
            params["what"] = filters.query.strip()
        where = filters.city or filters.location
        if where.strip():
            params["where"] = where.strip()
        if filters.job_type in JOB_TYPE_PARAMS:
            key, value = JOB_TYPE_PARAMS[filters.job_type]
            params[key] = value
        if filters.salary_min:
            params["salary_min"] = int(filters.salary_min)
        if filters.salary_max:
            params["salary_max"] = int(filters.salary_max)
        return params

    async def search(self, filters: JobSearchFilters, client: httpx.AsyncClient) -> ProviderResult:
        cc = country_code(filters.country or "us")
        url = f"{BASE_URL}/{cc}/search/{filters.page}"
        data = await self.get_json(client, url, params=self.build_params(filters))
        currency = COUNTRY_CURRENCIES.get(cc, "USD")
        jobs = [normalize_adzuna(j, currency=currency) for j in data.get("results") or []]
        return ProviderResult(jobs=jobs, total=int(data.get("count") or 0))
