import io

import httpx
import pytest
from docx import Document
from fastapi.testclient import TestClient

from api.dependencies import get_cv_store, get_job_service, limiter
from main import app
from models.jobs import JobPosting
from services.cv_store import CVStore
from services.jobs.aggregator import JobSearchService
from services.jobs.providers import JobProvider, ProviderResult

USER = {"X-User-Id": "user-1"}
OTHER_USER = {"X-User-Id": "user-2"}


class StaticProvider(JobProvider):
    def __init__(self, name="fake"):
        self.name = name
        self.calls = 0

    async def search(self, filters, client):
        self.calls += 1
        return ProviderResult(jobs=[JobPosting(
            id=f"{self.name}_1",
            external_id="1",
            source=self.name,
            title="Python Developer",
            company="Acme",
            description="Please mention the word OTTER to show you're human.",
            posted_at="2024-05-01T00:00:00+00:00",
        )], total=1)


@pytest.fixture
def client(tmp_path):
    store = CVStore(str(tmp_path / "api.db"))
    service = JobSearchService(
        providers=[StaticProvider()],
        ausbildung_provider=StaticProvider("ausbildung"),
        morocco=[],
        client_factory=lambda: httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(404))),
    )
    app.dependency_overrides[get_cv_store] = lambda: store
    app.dependency_overrides[get_job_service] = lambda: service
    limiter.enabled = False
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
    limiter.enabled = True
    store.close()


@pytest.fixture
def cv_json(sample_cv):
    return sample_cv.model_dump(mode="json")


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert "gemini_configured" in data
    assert set(data["job_providers"]) == {"ausbildung", "fake"}


# --- analysis ---

def test_analyze_local(client, cv_json, sample_jd):
    response = client.post("/cv/analyze", json={"cv": cv_json, "job_description": sample_jd})
    assert response.status_code == 200
    data = response.json()
    assert 0 <= data["overall_score"] <= 100
    assert set(data["breakdown"]) == {"structure", "keywords", "action_verbs", "metrics", "formatting"}
    assert data["scoring_method"] == "local_only"
    assert data["stale"] is False


def test_analyze_with_session(client, cv_json):
    response = client.post("/cv/analyze", json={"cv": cv_json, "session_id": "editor-1"})
    assert response.status_code == 200
    assert response.json()["stale"] is False

    latest = client.get("/cv/analyze/editor-1")
    assert latest.status_code == 200
    assert latest.json()["overall_score"] == response.json()["overall_score"]


def test_latest_analysis_unknown_session(client):
    assert client.get("/cv/analyze/never-seen").status_code == 404


def test_analyze_rejects_unknown_mode(client, cv_json):
    response = client.post("/cv/analyze", json={"cv": cv_json, "mode": "magic"})
    assert response.status_code == 422


def test_report(client, cv_json, sample_jd):
    response = client.post("/cv/report", json={"cv": cv_json, "job_description": sample_jd})
    assert response.status_code == 200
    data = response.json()
    assert data["report"]["grade"] in {"A", "B", "C", "D", "F"}
    assert isinstance(data["keyword_density"], dict)
    assert data["job_match"]["required_years"] == 5


def test_report_without_job_description(client, cv_json):
    data = client.post("/cv/report", json={"cv": cv_json}).json()
    assert data["job_match"] is None


def test_ai_unknown_action(client):
    response = client.post("/cv/ai", json={"action": "translate"})
    assert response.status_code == 400
    assert "Unknown action" in response.json()["detail"]


# --- templates and export ---

def test_templates(client):
    templates = client.get("/cv/templates").json()["templates"]
    assert len(templates) == 8
    assert client.get("/cv/templates/onyx").json()["id"] == "onyx"
    assert client.get("/cv/templates/neon").json()["id"] == "modern"


def test_export(client, cv_json):
    response = client.post("/cv/export", json={"cv": cv_json, "template_id": "tech", "paper": "a4"})
    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert 'filename="Jane_Doe_CV.pdf"' in response.headers["content-disposition"]
    assert response.content.startswith(b"%PDF")


def test_export_rejects_unknown_paper(client, cv_json):
    response = client.post("/cv/export", json={"cv": cv_json, "paper": "legal"})
    assert response.status_code == 422


# --- import ---

def test_parse_rejects_unsupported_file(client):
    response = client.post("/cv/parse", files={"file": ("cv.txt", b"not a pdf", "text/plain")})
    assert response.status_code == 400


def test_parse_docx(client):
    doc = Document()
    for line in ["Jane Doe", "jane@example.com", "Experience", "Engineer at Acme | 2019 - Present", "• Built APIs"]:
        doc.add_paragraph(line)
    buffer = io.BytesIO()
    doc.save(buffer)
    response = client.post(
        "/cv/parse?use_model=false",
        files={"file": ("cv.docx", buffer.getvalue(), "application/octet-stream")},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["personal_info"]["first_name"] == "Jane"
    assert data["personal_info"]["email"] == "jane@example.com"
    assert data["experience"][0]["company"] == "Acme"
    assert data["experience"][0]["bullets"] == ["Built APIs"]


# --- saved CVs ---

def test_cvs_require_user_header(client):
    response = client.get("/cvs")
    assert response.status_code == 400
    assert "X-User-Id" in response.json()["detail"]


def test_cv_lifecycle(client, cv_json):
    created = client.post("/cvs", json={"title": "Main", "data": cv_json}, headers=USER)
    assert created.status_code == 201
    cv = created.json()
    assert cv["is_primary"] is True

    assert client.get(f"/cvs/{cv['id']}", headers=OTHER_USER).status_code == 404

    updated = client.put(f"/cvs/{cv['id']}", json={"title": "Backend", "template_id": "onyx"}, headers=USER).json()
    assert updated["title"] == "Backend"
    assert updated["data"]["personal_info"]["first_name"] == "Jane"

    copy = client.post(f"/cvs/{cv['id']}/duplicate", headers=USER)
    assert copy.status_code == 201
    assert copy.json()["title"] == "Backend (Copy)"

    primary = client.post(f"/cvs/{copy.json()['id']}/primary", headers=USER).json()
    assert primary["is_primary"] is True

    scored = client.post(f"/cvs/{cv['id']}/analysis", json={"ats_score": 88}, headers=USER).json()
    assert scored["ats_score"] == 88

    pdf = client.get(f"/cvs/{cv['id']}/export?paper=a4", headers=USER)
    assert pdf.content.startswith(b"%PDF")
    assert client.get(f"/cvs/{cv['id']}/export?paper=legal", headers=USER).status_code == 400

    assert len(client.get("/cvs", headers=USER).json()) == 2
    assert client.delete(f"/cvs/{cv['id']}", headers=USER).status_code == 204
    assert client.get(f"/cvs/{cv['id']}", headers=USER).status_code == 404


def test_create_cv_requires_title(client):
    assert client.post("/cvs", json={"title": " "}, headers=USER).status_code == 400


# --- jobs ---

def test_job_search_cached(client):
    first = client.get("/jobs/search?query=python")
    assert first.status_code == 200
    data = first.json()
    assert data["jobs"][0]["id"] == "fake_1"
    assert data["cached"] is False
    assert client.get("/jobs/search?query=python").json()["cached"] is True
    assert client.get("/jobs/search?query=python&cache=false").json()["cached"] is False


def test_job_search_ausbildung_route(client):
    data = client.get("/jobs/search?query=koch&is_ausbildung=true").json()
    assert data["sources"] == ["ausbildung"]


def test_providers_and_cache_clear(client):
    client.get("/jobs/search?query=python")
    data = client.get("/jobs/providers").json()
    assert {p["id"] for p in data["providers"]} == {"fake", "ausbildung"}
    assert data["cache"]["pages"]["entries"] == 1
    assert client.delete("/jobs/cache").json() == {"cleared": True}
    assert client.get("/jobs/providers").json()["cache"]["pages"]["entries"] == 0


def test_job_details_with_tips(client):
    client.get("/jobs/search?query=python")
    response = client.get("/jobs/fake_1")
    assert response.status_code == 200
    data = response.json()
    assert data["job"]["title"] == "Python Developer"
    assert data["smart_tips"][0]["keyword"] == "OTTER"


def test_unknown_job(client):
    assert client.get("/jobs/remoteok_missing").status_code == 404


def test_saved_jobs(client):
    client.get("/jobs/search?query=python")
    saved = client.post("/jobs/saved", json={"job_id": "fake_1"}, headers=USER)
    assert saved.status_code == 201
    assert saved.json()["job"]["company"] == "Acme"

    unknown = client.post("/jobs/saved", json={"job_id": "adzuna_gone"}, headers=USER).json()
    assert unknown["job"] is None

    assert len(client.get("/jobs/saved", headers=USER).json()) == 2
    assert client.get("/jobs/saved", headers=OTHER_USER).json() == []
    assert client.delete("/jobs/saved/fake_1", headers=USER).status_code == 204
    assert client.delete("/jobs/saved/fake_1", headers=USER).status_code == 404



def test_job_match_is_calculated_then_cached(client, cv_json):
    client.get("/jobs/search?query=python")
    assert client.post("/jobs/fake_1/match", json={"mode": "local"}, headers=USER).status_code == 400
    assert client.get("/jobs/fake_1/match", headers=USER).status_code == 404

    cv = client.post("/cvs", json={"title": "Main", "data": cv_json}, headers=USER).json()
    first = client.post("/jobs/fake_1/match", json={"mode": "local"}, headers=USER)
    assert first.status_code == 200
    data = first.json()
    assert data["cv_id"] == cv["id"]
    assert data["job_title"] == "Python Developer"
    assert data["cached"] is False
    assert set(data["experience"]) >= {"user_years", "required_years", "meets_requirement", "is_entry_level"}

    again = client.post("/jobs/fake_1/match", json={"mode": "local"}, headers=USER).json()
    assert again["cached"] is True
    assert again["match_score"] == data["match_score"]

    cached = client.get("/jobs/fake_1/match", headers=USER).json()
    assert cached["calculated_at"] == data["calculated_at"]
    assert client.get("/jobs/fake_1/match", headers=OTHER_USER).status_code == 404


def test_job_match_unknown_job(client, cv_json):
    client.post("/cvs", json={"title": "Main", "data": cv_json}, headers=USER)
    assert client.post("/jobs/remoteok_missing/match", json={"mode": "local"}, headers=USER).status_code == 404

# --- applications ---

def test_application_tracking(client):
    created = client.post("/applications", json={"job_id": "fake_1", "company": "Acme"}, headers=USER)
    assert created.status_code == 201
    app_id = created.json()["id"]

    moved = client.patch(f"/applications/{app_id}", json={"status": "interviewing"}, headers=USER)
    assert moved.json()["status"] == "interviewing"
    bad = client.patch(f"/applications/{app_id}", json={"status": "hired"}, headers=USER)
    assert bad.status_code == 400

    stats = client.get("/applications/stats", headers=USER).json()
    assert stats["total"] == 1
    assert stats["by_status"]["interviewing"] == 1

    listed = client.get("/applications?status=interviewing", headers=USER).json()
    assert [a["id"] for a in listed] == [app_id]

    assert client.delete(f"/applications/{app_id}", headers=USER).status_code == 204
    assert client.get("/applications", headers=USER).json() == []


# --- locations ---

def test_countries(client):
    data = client.get("/locations/countries?q=germ").json()
    assert [c["code"] for c in data["countries"]] == ["DE"]
    assert "Europe" in data["regions"]


def test_countries_by_region(client):
    data = client.get("/locations/countries?region=north africa").json()
    assert "MA" in [c["code"] for c in data["countries"]]


def test_cities(client):
    data = client.get("/locations/countries/ma/cities?q=casa").json()
    assert data["cities"] == ["Casablanca"]
    assert client.get("/locations/countries/zz/cities").status_code == 404


def test_morocco_reference(client):
    data = client.get("/locations/morocco").json()
    assert "Casablanca" in data["cities"]
    assert {"id", "name", "name_en"} <= set(data["sectors"][0])
