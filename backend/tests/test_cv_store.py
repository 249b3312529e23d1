"""Tests for SQLite persistence of CVs, saved jobs and applications."""

import pytest

from models.cv import CVDocument
from models.jobs import JobPosting
from services.cv_store import CVStore
from services.errors import NotFoundError, ValidationFailure


@pytest.fixture
def store(tmp_path):
    s = CVStore(str(tmp_path / "data" / "careerforge.db"))
    yield s
    s.close()


class TestCVs:
    def test_first_cv_is_primary(self, store):
        first = store.create("u1", "Backend CV")
        second = store.create("u1", "Data CV")
        assert first.is_primary
        assert not second.is_primary

    def test_create_requires_title(self, store):
        with pytest.raises(ValidationFailure):
            store.create("u1", "   ")

    def test_document_round_trips(self, store, sample_cv):
        record = store.create("u1", "Main", data=sample_cv, template_id="onyx")
        loaded = store.get("u1", record.id)
        assert loaded.data == sample_cv
        assert loaded.template_id == "onyx"

    def test_rows_are_scoped_by_user(self, store):
        record = store.create("u1", "Mine")
        with pytest.raises(NotFoundError):
            store.get("u2", record.id)
        with pytest.raises(NotFoundError):
            store.delete("u2", record.id)
        assert store.list_by_user("u2") == []

    def test_update_keeps_unspecified_fields(self, store, sample_cv):
        record = store.create("u1", "Main", data=sample_cv)
        updated = store.update("u1", record.id, title="Renamed")
        assert updated.title == "Renamed"
        assert updated.data == sample_cv
        assert updated.template_id == "modern"

    def test_set_primary_is_exclusive(self, store):
        a = store.create("u1", "A")
        b = store.create("u1", "B")
        store.set_primary("u1", b.id)
        records = {r.id: r for r in store.list_by_user("u1")}
        assert records[b.id].is_primary
        assert not records[a.id].is_primary
        assert store.list_by_user("u1")[0].id == b.id

    def test_deleting_primary_promotes_another(self, store):
        a = store.create("u1", "A")
        b = store.create("u1", "B")
        store.delete("u1", a.id)
        assert store.get("u1", b.id).is_primary

    def test_duplicate(self, store, sample_cv):
        original = store.create("u1", "Main", data=sample_cv)
        store.save_analysis("u1", original.id, 82)
        copy = store.duplicate("u1", original.id)
        assert copy.id != original.id
        assert copy.title == "Main (Copy)"
        assert copy.data == sample_cv
        assert copy.ats_score == 82
        assert not copy.is_primary

    def test_save_analysis_bounds(self, store):
        record = store.create("u1", "Main")
        with pytest.raises(ValidationFailure):
            store.save_analysis("u1", record.id, 101)
        assert store.save_analysis("u1", record.id, 75).ats_score == 75


class TestSavedJobs:
    def test_save_is_idempotent_and_keeps_snapshot(self, store):
        job = JobPosting(id="remoteok_1", external_id="1", source="remoteok", title="Dev")
        store.save_job("u1", "remoteok_1", job)
        again = store.save_job("u1", "remoteok_1")
        assert again.job.title == "Dev"
        assert len(store.list_saved_jobs("u1")) == 1

    def test_unsave(self, store):
        store.save_job("u1", "adzuna_9")
        store.unsave_job("u1", "adzuna_9")
        assert store.list_saved_jobs("u1") == []
        with pytest.raises(NotFoundError):
            store.unsave_job("u1", "adzuna_9")


class TestApplications:
    def test_create_and_update_status(self, store):
        app = store.create_application("u1", "remoteok_1", company="Acme", title="Dev")
        assert app.status == "applied"
        updated = store.update_application_status("u1", app.id, "interviewing", notes="Call on Monday")
        assert updated.status == "interviewing"
        assert updated.notes == "Call on Monday"
        kept = store.update_application_status("u1", app.id, "offer")
        assert kept.notes == "Call on Monday"

    def test_unknown_status_rejected(self, store):
        with pytest.raises(ValidationFailure):
            store.create_application("u1", "remoteok_1", status="ghosted")
        app = store.create_application("u1", "remoteok_1")
        with pytest.raises(ValidationFailure):
            store.update_application_status("u1", app.id, "hired")

    def test_cv_must_belong_to_user(self, store):
        cv = store.create("u1", "Main")
        with pytest.raises(NotFoundError):
            store.create_application("u2", "remoteok_1", cv_id=cv.id)
        assert store.create_application("u1", "remoteok_1", cv_id=cv.id).cv_id == cv.id

    def test_list_filter_and_stats(self, store):
        store.create_application("u1", "a")
        store.create_application("u1", "b")
        rejected = store.create_application("u1", "c")
        store.update_application_status("u1", rejected.id, "rejected")
        store.create_application("u2", "d")

        assert len(store.list_applications("u1")) == 3
        assert [a.job_id for a in store.list_applications("u1", status="rejected")] == ["c"]

        stats = store.application_stats("u1")
        assert stats.total == 3
        assert stats.by_status["applied"] == 2
        assert stats.by_status["rejected"] == 1
        assert stats.by_status["offer"] == 0

    def test_delete(self, store):
        app = store.create_application("u1", "a")
        store.delete_application("u1", app.id)
        with pytest.raises(NotFoundError):
            store.delete_application("u1", app.id)
