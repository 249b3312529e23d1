"""One provider per Moroccan job board."""

import httpx

from models.jobs import JobSearchFilters
from services.jobs.morocco import MOROCCO_BOARDS, MoroccoBoard, parse_listing
from services.jobs.normalizer import normalize_morocco
from services.jobs.providers.base import JobProvider, ProviderResult

HTML_HEADERS = {
    "User-Agent": "Mozilla/5.0 (compatible; CareerForgeBot/1.0)",
    "Accept": "text/html,application/xhtml+xml",
    "Accept-Language": "fr-FR,fr;q=0.9,en;q=0.8,ar;q=0.7",
}


class MoroccoBoardProvider(JobProvider):
    def __init__(self, board: MoroccoBoard):
        self.board = board
        self.name = f"morocco_{board.id}"
        self.display_name = board.name
        self.priority = 10 + board.priority

    async def search(self, filters: JobSearchFilters, client: httpx.AsyncClient) -> ProviderResult:
        params = self.board.build_params(
            query=filters.query.strip(),
            city=filters.city.strip(),
            sector=filters.sector.strip(),
            job_type=filters.job_type,
            page=filters.page,
        )
        html = await self.get_text(client, self.board.search_url(), params=params, headers=HTML_HEADERS)
        raw = parse_listing(html, self.board.base_url)
        jobs = [normalize_morocco(r, self.board.id, self.board.name) for r in raw[: filters.limit]]
        # Boards do not expose totals; a full page means there may be more
        total = (filters.page - 1) * filters.limit + len(jobs)
        if len(raw) >= filters.limit:
            total += filters.limit
        return ProviderResult(jobs=jobs, total=total)


def morocco_providers() -> list[MoroccoBoardProvider]:
    return [MoroccoBoardProvider(board) for board in sorted(MOROCCO_BOARDS, key=lambda b: b.priority)]
