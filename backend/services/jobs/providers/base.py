"""Abstract base class for job providers."""

import json
import logging
from abc import ABC, abstractmethod
from typing import Any

import httpx
from pydantic import BaseModel

from models.jobs import JobPosting, JobSearchFilters
from services.errors import CollaboratorUnavailable

logger = logging.getLogger(__name__)

JSON_HEADERS = {"Accept": "application/json"}


class ProviderResult(BaseModel):
    jobs: list[JobPosting] = []
    total: int = 0


class JobProvider(ABC):
    """Base class for job sources.

    Subclasses must implement:
        - name: identifier used in `sources` allowlists and error reports
        - search(filters, client): fetch one page and return normalized jobs

    Providers raise CollaboratorUnavailable on network or API failure; the
    aggregator records the message per source and carries on.
    """

    name: str = ""
    display_name: str = ""
    priority: int = 100

    def is_enabled(self) -> bool:
        return True

    @abstractmethod
    async def search(self, filters: JobSearchFilters, client: httpx.AsyncClient) -> ProviderResult:
        """Fetch page `filters.page` of results for `filters`."""

    def describe(self) -> dict:
        return {
            "id": self.name,
            "name": self.display_name or self.name,
            "priority": self.priority,
            "enabled": self.is_enabled(),
        }

    async def get_text(
        self,
        client: httpx.AsyncClient,
        url: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> str:
        try:
            response = await client.get(url, params=params, headers=headers)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error("%s HTTP error: %s", self.name, e.response.status_code)
            raise CollaboratorUnavailable(
                f"{self.display_name or self.name} returned {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            logger.error("%s request failed: %s", self.name, e)
            raise CollaboratorUnavailable(f"{self.display_name or self.name} is unreachable") from e
        return response.text

    async def get_json(
        self,
        client: httpx.AsyncClient,
        url: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        text = await self.get_text(client, url, params=params, headers={**JSON_HEADERS, **(headers or {})})
        # Some APIs answer errors with an HTML page and a 200
        head = text.lstrip()[:200].lower()
        if head.startswith("<!doctype") or "<html" in head:
            logger.error("%s returned HTML instead of JSON", self.name)
            raise CollaboratorUnavailable(f"{self.display_name or self.name} returned an invalid response")
        try:
            return json.loads(text)
        except ValueError as e:
            logger.error("%s JSON parse error: %s", self.name, e)
            raise CollaboratorUnavailable(f"{self.display_name or self.name} returned an invalid response") from e
