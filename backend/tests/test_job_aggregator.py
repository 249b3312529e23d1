"""Tests for the job search fan-out, caching and routing."""

import asyncio

import httpx
import pytest

from models.jobs import JobPosting, JobSearchFilters
from services.errors import CollaboratorUnavailable, NotFoundError
from services.jobs.aggregator import JobSearchService, apply_filters, dedupe, sort_newest_first
from services.jobs.cache import PageCache
from services.jobs.providers import JobProvider, ProviderResult


def make_job(job_id: str, title: str = "Engineer", company: str = "Acme", **fields) -> JobPosting:
    return JobPosting(id=job_id, external_id=job_id, source="fake", title=title, company=company, **fields)


class FakeProvider(JobProvider):
    def __init__(self, name, jobs=(), error=None, total=None, priority=100, enabled=True, delay=0.0):
        self.name = name
        self.display_name = name.title()
        self.priority = priority
        self.jobs = list(jobs)
        self.error = error
        self.total = total
        self.enabled = enabled
        self.delay = delay
        self.calls = 0

    def is_enabled(self):
        return self.enabled

    async def search(self, filters, client):
        self.calls += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        total = self.total if self.total is not None else len(self.jobs)
        return ProviderResult(jobs=list(self.jobs), total=total)


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


def offline_client() -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(404)))


def make_service(providers, ausbildung=None, morocco=(), **kwargs) -> JobSearchService:
    return JobSearchService(
        providers=providers,
        ausbildung_provider=ausbildung or FakeProvider("ausbildung"),
        morocco=list(morocco),
        client_factory=offline_client,
        **kwargs,
    )


class TestHelpers:
    def test_dedupe_first_wins(self):
        jobs = [make_job("a", "Engineer", "Acme"), make_job("b", " engineer ", "ACME"), make_job("c", "Engineer", "Globex")]
        assert [j.id for j in dedupe(jobs)] == ["a", "c"]

    def test_sort_newest_first_undated_last(self):
        jobs = [
            make_job("old", posted_at="2024-01-01T00:00:00+00:00"),
            make_job("none"),
            make_job("new", posted_at="2024-06-01T00:00:00+00:00"),
        ]
        assert [j.id for j in sort_newest_first(jobs)] == ["new", "old", "none"]

    def test_remote_filter(self):
        jobs = [make_job("r", location_type="remote"), make_job("o")]
        assert [j.id for j in apply_filters(jobs, JobSearchFilters(remote=True))] == ["r"]

    def test_salary_floor_keeps_unknown_salaries(self):
        jobs = [make_job("low", salary_max=30000), make_job("high", salary_min=90000), make_job("unknown")]
        kept = apply_filters(jobs, JobSearchFilters(salary_min=50000))
        assert [j.id for j in kept] == ["high", "unknown"]

    def test_city_filter(self):
        jobs = [make_job("b", location="Berlin, Germany"), make_job("m", location="Munich")]
        assert [j.id for j in apply_filters(jobs, JobSearchFilters(city="berlin"))] == ["b"]

    def test_morocco_city_filter_keeps_country_wide_postings(self):
        jobs = [make_job("c", location="Casablanca, Maroc"), make_job("r", location="Rabat"), make_job("m", location="Maroc")]
        kept = apply_filters(jobs, JobSearchFilters(city="Casablanca"), morocco=True)
        assert [j.id for j in kept] == ["c", "m"]


class TestSearch:
    @pytest.mark.asyncio
    async def test_merges_providers_newest_first(self):
        a = FakeProvider("a", [make_job("a1", "Dev", posted_at="2024-01-01T00:00:00+00:00")], priority=1)
        b = FakeProvider("b", [make_job("b1", "Ops", posted_at="2024-02-01T00:00:00+00:00")], priority=2)
        page = await make_service([a, b]).search(JobSearchFilters(query="dev"))
        assert [j.id for j in page.jobs] == ["b1", "a1"]
        assert page.sources == ["a", "b"]
        assert page.errors == {}
        assert not page.cached
        assert page.pagination.total == 2
        assert page.pagination.total_pages == 1

    @pytest.mark.asyncio
    async def test_second_search_served_from_cache(self):
        provider = FakeProvider("a", [make_job("a1")])
        service = make_service([provider])
        await service.search(JobSearchFilters(query="python"))
        page = await service.search(JobSearchFilters(query=" Python "))
        assert provider.calls == 1
        assert page.cached
        assert [j.id for j in page.jobs] == ["a1"]

    @pytest.mark.asyncio
    async def test_cache_bypass_and_clear(self):
        provider = FakeProvider("a", [make_job("a1")])
        service = make_service([provider])
        filters = JobSearchFilters(query="python")
        await service.search(filters)
        await service.search(filters, use_cache=False)
        assert provider.calls == 2

        service.clear_cache()
        await service.search(filters)
        assert provider.calls == 3

    @pytest.mark.asyncio
    async def test_failing_provider_reported_per_source(self):
        ok = FakeProvider("a", [make_job("a1")])
        down = FakeProvider("b", error=CollaboratorUnavailable("B returned 500"))
        broken = FakeProvider("c", error=RuntimeError("boom"))
        page = await make_service([ok, down, broken]).search(JobSearchFilters())
        assert [j.id for j in page.jobs] == ["a1"]
        assert page.sources == ["a"]
        assert page.errors == {"b": "B returned 500", "c": "C failed"}

    @pytest.mark.asyncio
    async def test_slow_provider_times_out(self):
        slow = FakeProvider("slow", [make_job("s1")], delay=0.5)
        fast = FakeProvider("fast", [make_job("f1", "Other")])
        page = await make_service([slow, fast], provider_timeout=0.01).search(JobSearchFilters())
        assert [j.id for j in page.jobs] == ["f1"]
        assert "timed out" in page.errors["slow"]

    @pytest.mark.asyncio
    async def test_all_failed_without_cache_is_not_cached(self):
        provider = FakeProvider("a", error=CollaboratorUnavailable("A is unreachable"))
        service = make_service([provider])
        page = await service.search(JobSearchFilters())
        assert page.jobs == []
        assert page.errors == {"a": "A is unreachable"}
        await service.search(JobSearchFilters())
        assert provider.calls == 2

    @pytest.mark.asyncio
    async def test_stale_page_served_when_all_providers_fail(self):
        clock = FakeClock()
        provider = FakeProvider("a", [make_job("a1")])
        service = make_service([provider], page_cache=PageCache(max_entries=10, ttl_seconds=60, clock=clock))
        await service.search(JobSearchFilters(query="python"))

        clock.now = 120
        provider.error = CollaboratorUnavailable("A is unreachable")
        page = await service.search(JobSearchFilters(query="python"))
        assert provider.calls == 2
        assert page.cached
        assert [j.id for j in page.jobs] == ["a1"]
        assert page.errors == {"a": "A is unreachable"}

    @pytest.mark.asyncio
    async def test_sources_allowlist(self):
        a = FakeProvider("a", [make_job("a1")])
        b = FakeProvider("b", [make_job("b1", "Other")])
        page = await make_service([a, b]).search(JobSearchFilters(sources=["B"]))
        assert a.calls == 0
        assert page.sources == ["b"]

    @pytest.mark.asyncio
    async def test_disabled_providers_skipped(self):
        a = FakeProvider("a", [make_job("a1")], enabled=False)
        page = await make_service([a]).search(JobSearchFilters())
        assert a.calls == 0
        assert "providers" in page.errors

    @pytest.mark.asyncio
    async def test_duplicates_reduce_total(self):
        provider = FakeProvider("a", [make_job("a1"), make_job("a2"), make_job("a3", "Other")], total=3)
        page = await make_service([provider]).search(JobSearchFilters())
        assert [j.id for j in page.jobs] == ["a1", "a3"]
        assert page.pagination.total == 2

    @pytest.mark.asyncio
    async def test_total_pages_from_provider_totals(self):
        jobs = [make_job(f"j{i}", f"Role {i}") for i in range(5)]
        provider = FakeProvider("a", jobs, total=95)
        page = await make_service([provider]).search(JobSearchFilters(limit=5))
        assert page.pagination.total == 95
        assert page.pagination.total_pages == 19


class TestRouting:
    @pytest.mark.asyncio
    async def test_ausbildung_goes_to_apprenticeship_provider_only(self):
        general = FakeProvider("a", [make_job("a1")])
        apprenticeships = FakeProvider("ausbildung", [make_job("ausbildung_1", is_ausbildung=True)])
        service = make_service([general], ausbildung=apprenticeships)
        page = await service.search(JobSearchFilters(query="koch", is_ausbildung=True, job_type="full-time"))
        assert general.calls == 0
        assert page.sources == ["ausbildung"]
        assert page.jobs[0].is_ausbildung

    @pytest.mark.asyncio
    async def test_morocco_by_country_code(self):
        general = FakeProvider("a", [make_job("a1")])
        rekrute = FakeProvider("morocco_rekrute", [make_job("m1", location="Rabat, Maroc")], priority=13)
        emploi = FakeProvider("morocco_emploi", [make_job("m2", "Other", location="Casablanca, Maroc")], priority=11)
        service = make_service([general], morocco=[rekrute, emploi])
        page = await service.search(JobSearchFilters(country="MA"))
        assert general.calls == 0
        assert page.sources == ["morocco_emploi", "morocco_rekrute"]

    @pytest.mark.asyncio
    async def test_morocco_sources_accept_board_ids(self):
        rekrute = FakeProvider("morocco_rekrute", [make_job("m1")])
        emploi = FakeProvider("morocco_emploi", [make_job("m2", "Other")])
        service = make_service([], morocco=[rekrute, emploi])
        page = await service.search(JobSearchFilters(is_morocco=True, morocco_sources=["rekrute"]))
        assert emploi.calls == 0
        assert page.sources == ["morocco_rekrute"]

    def test_available_providers_sorted_by_priority(self):
        service = make_service(
            [FakeProvider("b", priority=2), FakeProvider("a", priority=1), FakeProvider("off", enabled=False)],
            ausbildung=FakeProvider("ausbildung", priority=5),
        )
        assert [p["id"] for p in service.available_providers()] == ["a", "b", "ausbildung"]


class TestGetJob:
    @pytest.mark.asyncio
    async def test_job_listed_by_search_is_retrievable(self):
        service = make_service([FakeProvider("a", [make_job("a1", description="Mention the word ZEBRA to prove you read it.")])])
        await service.search(JobSearchFilters())
        details = await service.get_job_details("a1")
        assert details.job.id == "a1"
        assert [t.keyword for t in details.smart_tips] == ["ZEBRA"]

    @pytest.mark.asyncio
    async def test_found_in_cached_pages_after_details_eviction(self):
        service = make_service([FakeProvider("a", [make_job("a1")])])
        await service.search(JobSearchFilters())
        service.details_cache.clear()
        job = await service.get_job("a1")
        assert job.id == "a1"

    @pytest.mark.asyncio
    async def test_unknown_job(self):
        with pytest.raises(NotFoundError):
            await make_service([]).get_job("remoteok_404")

    @pytest.mark.asyncio
    async def test_jsearch_fetch_when_not_cached(self):
        class FakeJSearch(FakeProvider):
            async def get_job(self, external_id, client):
                return make_job(f"jsearch_{external_id}")

        service = make_service([FakeJSearch("jsearch")])
        job = await service.get_job("jsearch_xyz")
        assert job.id == "jsearch_xyz"
        assert service.details_cache.get("jsearch_xyz") is not None

    def test_cache_stats(self):
        stats = make_service([]).cache_stats()
        assert set(stats) == {"pages", "details"}
