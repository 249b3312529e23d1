"""SQLite-backed persistence for CVs, saved jobs, job applications and job matches.

CV content is stored as an opaque JSON document. Every query is scoped by
the caller's user id, so one user can never read or change another's rows.
"""

import json
import logging
import os
import sqlite3
import threading
import uuid
from datetime import datetime, timezone

from config import settings
from models.cv import CVDocument
from models.jobs import JobPosting
from models.records import APPLICATION_STATUSES, Application, ApplicationStats, CVRecord, JobMatchRecord, SavedJob
from services.errors import NotFoundError, ValidationFailure

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS cvs (
    id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL,
    title TEXT NOT NULL,
    template_id TEXT NOT NULL,
    data_json TEXT NOT NULL,
    ats_score INTEGER,
    is_primary INTEGER NOT NULL DEFAULT 0,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_cvs_user ON cvs (user_id);

CREATE TABLE IF NOT EXISTS saved_jobs (
    id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL,
    job_id TEXT NOT NULL,
    job_json TEXT,
    created_at TEXT NOT NULL,
    UNIQUE (user_id, job_id)
);

CREATE TABLE IF NOT EXISTS applications (
    id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL,
    job_id TEXT NOT NULL,
    cv_id TEXT,
    company TEXT NOT NULL DEFAULT '',
    title TEXT NOT NULL DEFAULT '',
    status TEXT NOT NULL,
    notes TEXT NOT NULL DEFAULT '',
    applied_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_applications_user ON applications (user_id);

CREATE TABLE IF NOT EXISTS job_matches (
    user_id TEXT NOT NULL,
    job_id TEXT NOT NULL,
    cv_id TEXT NOT NULL,
    match_json TEXT NOT NULL,
    calculated_at TEXT NOT NULL,
    PRIMARY KEY (user_id, job_id)
);
"""


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _new_id() -> str:
    return uuid.uuid4().hex


class CVStore:
    def __init__(self, db_path: str):
        directory = os.path.dirname(db_path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        self._conn = sqlite3.connect(db_path, check_same_thread=False, timeout=5, isolation_level=None)
        self._conn.row_factory = sqlite3.Row
        self._lock = threading.Lock()
        with self._lock:
            if db_path != ":memory:":
                self._conn.execute("PRAGMA journal_mode=WAL;")
            self._conn.execute("PRAGMA busy_timeout=5000;")
            self._conn.executescript(_SCHEMA)

    def close(self) -> None:
        with self._lock:
            self._conn.close()

    # -- CVs ------------------------------------------------------------------

    @staticmethod
    def _to_cv(row: sqlite3.Row) -> CVRecord:
        return CVRecord(
            id=row["id"],
            user_id=row["user_id"],
            title=row["title"],
            template_id=row["template_id"],
            data=CVDocument.model_validate(json.loads(row["data_json"])),
            ats_score=row["ats_score"],
            is_primary=bool(row["is_primary"]),
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

    def _fetch_cv_row(self, user_id: str, cv_id: str) -> sqlite3.Row:
        row = self._conn.execute(
            "SELECT * FROM cvs WHERE id = ? AND user_id = ?", (cv_id, user_id)
        ).fetchone()
        if row is None:
            raise NotFoundError(f"CV {cv_id} not found")
        return row

    def create(self, user_id: str, title: str, data: CVDocument | None = None, template_id: str = "modern") -> CVRecord:
        if not title or not title.strip():
            raise ValidationFailure("CV title is required")
        cv_id = _new_id()
        now = _utc_now()
        payload = (data or CVDocument()).model_dump_json()
        with self._lock:
            has_cvs = self._conn.execute(
                "SELECT 1 FROM cvs WHERE user_id = ? LIMIT 1", (user_id,)
            ).fetchone() is not None
            self._conn.execute(
                """
                INSERT INTO cvs (id, user_id, title, template_id, data_json, is_primary, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (cv_id, user_id, title.strip(), template_id, payload, 0 if has_cvs else 1, now, now),
            )
            row = self._fetch_cv_row(user_id, cv_id)
        logger.info("Created CV %s for user %s", cv_id, user_id)
        return self._to_cv(row)

    def get(self, user_id: str, cv_id: str) -> CVRecord:
        with self._lock:
            return self._to_cv(self._fetch_cv_row(user_id, cv_id))

    def list_by_user(self, user_id: str) -> list[CVRecord]:
        with self._lock:
            rows = self._conn.execute(
                "SELECT * FROM cvs WHERE user_id = ? ORDER BY is_primary DESC, updated_at DESC, created_at DESC",
                (user_id,),
            ).fetchall()
        return [self._to_cv(r) for r in rows]

    def update(
        self,
        user_id: str,
        cv_id: str,
        title: str | None = None,
        data: CVDocument | None = None,
        template_id: str | None = None,
    ) -> CVRecord:
        if title is not None and not title.strip():
            raise ValidationFailure("CV title is required")
        with self._lock:
            row = self._fetch_cv_row(user_id, cv_id)
            self._conn.execute(
                "UPDATE cvs SET title = ?, template_id = ?, data_json = ?, updated_at = ? WHERE id = ? AND user_id = ?",
                (
                    title.strip() if title is not None else row["title"],
                    template_id or row["template_id"],
                    data.model_dump_json() if data is not None else row["data_json"],
                    _utc_now(),
                    cv_id,
                    user_id,
                ),
            )
            return self._to_cv(self._fetch_cv_row(user_id, cv_id))

    def delete(self, user_id: str, cv_id: str) -> None:
        with self._lock:
            row = self._fetch_cv_row(user_id, cv_id)
            self._conn.execute("DELETE FROM cvs WHERE id = ? AND user_id = ?", (cv_id, user_id))
            if row["is_primary"]:
                # Promote the most recently updated remaining CV
                self._conn.execute(
                    """
                    UPDATE cvs SET is_primary = 1 WHERE id = (
                        SELECT id FROM cvs WHERE user_id = ? ORDER BY updated_at DESC LIMIT 1
                    )
                    """,
                    (user_id,),
                )
        logger.info("Deleted CV %s for user %s", cv_id, user_id)

    def set_primary(self, user_id: str, cv_id: str) -> CVRecord:
        with self._lock:
            self._fetch_cv_row(user_id, cv_id)
            self._conn.execute("BEGIN")
            try:
                self._conn.execute("UPDATE cvs SET is_primary = 0 WHERE user_id = ?", (user_id,))
                self._conn.execute("UPDATE cvs SET is_primary = 1 WHERE id = ? AND user_id = ?", (cv_id, user_id))
                self._conn.execute("COMMIT")
            except sqlite3.Error:
                self._conn.execute("ROLLBACK")
                raise
            return self._to_cv(self._fetch_cv_row(user_id, cv_id))

    def duplicate(self, user_id: str, cv_id: str) -> CVRecord:
        with self._lock:
            row = self._fetch_cv_row(user_id, cv_id)
            new_id = _new_id()
            now = _utc_now()
            self._conn.execute(
                """
                INSERT INTO cvs (id, user_id, title, template_id, data_json, ats_score, is_primary, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, 0, ?, ?)
                """,
                (new_id, user_id, f"{row['title']} (Copy)", row["template_id"], row["data_json"],
                 row["ats_score"], now, now),
            )
            return self._to_cv(self._fetch_cv_row(user_id, new_id))

    def get_primary(self, user_id: str) -> CVRecord:
        """The primary CV, or the newest one when none is flagged."""
        with self._lock:
            row = self._conn.execute(
                "SELECT * FROM cvs WHERE user_id = ? ORDER BY is_primary DESC, created_at DESC LIMIT 1",
                (user_id,),
            ).fetchone()
        if row is None:
            raise ValidationFailure("No CV found. Create a CV first to see how well it matches a job")
        return self._to_cv(row)

    def save_analysis(self, user_id: str, cv_id: str, ats_score: int) -> CVRecord:
        if not 0 <= ats_score <= 100:
            raise ValidationFailure("ATS score must be between 0 and 100")
        with self._lock:
            self._fetch_cv_row(user_id, cv_id)
            self._conn.execute(
                "UPDATE cvs SET ats_score = ?, updated_at = ? WHERE id = ? AND user_id = ?",
                (ats_score, _utc_now(), cv_id, user_id),
            )
            return self._to_cv(self._fetch_cv_row(user_id, cv_id))

    # -- saved jobs -----------------------------------------------------------

    @staticmethod
    def _to_saved(row: sqlite3.Row) -> SavedJob:
        job = JobPosting.model_validate_json(row["job_json"]) if row["job_json"] else None
        return SavedJob(id=row["id"], user_id=row["user_id"], job_id=row["job_id"], job=job, created_at=row["created_at"])

    def save_job(self, user_id: str, job_id: str, job: JobPosting | None = None) -> SavedJob:
        if not job_id.strip():
            raise ValidationFailure("Job id is required")
        with self._lock:
            self._conn.execute(
                """
                INSERT INTO saved_jobs (id, user_id, job_id, job_json, created_at) VALUES (?, ?, ?, ?, ?)
                ON CONFLICT (user_id, job_id) DO UPDATE SET job_json = COALESCE(excluded.job_json, job_json)
                """,
                (_new_id(), user_id, job_id, job.model_dump_json() if job else None, _utc_now()),
            )
            row = self._conn.execute(
                "SELECT * FROM saved_jobs WHERE user_id = ? AND job_id = ?", (user_id, job_id)
            ).fetchone()
        return self._to_saved(row)

    def unsave_job(self, user_id: str, job_id: str) -> None:
        with self._lock:
            cur = self._conn.execute(
                "DELETE FROM saved_jobs WHERE user_id = ? AND job_id = ?", (user_id, job_id)
            )
        if cur.rowcount == 0:
            raise NotFoundError(f"Saved job {job_id} not found")

    def list_saved_jobs(self, user_id: str) -> list[SavedJob]:
        with self._lock:
            rows = self._conn.execute(
                "SELECT * FROM saved_jobs WHERE user_id = ? ORDER BY created_at DESC", (user_id,)
            ).fetchall()
        return [self._to_saved(r) for r in rows]

    # -- applications ---------------------------------------------------------

    @staticmethod
    def _check_status(status: str) -> None:
        if status not in APPLICATION_STATUSES:
            raise ValidationFailure(
                f"Unknown application status '{status}', expected one of {', '.join(APPLICATION_STATUSES)}"
            )

    def _fetch_application_row(self, user_id: str, application_id: str) -> sqlite3.Row:
        row = self._conn.execute(
            "SELECT * FROM applications WHERE id = ? AND user_id = ?", (application_id, user_id)
        ).fetchone()
        if row is None:
            raise NotFoundError(f"Application {application_id} not found")
        return row

    def create_application(
        self,
        user_id: str,
        job_id: str,
        cv_id: str | None = None,
        company: str = "",
        title: str = "",
        status: str = "applied",
        notes: str = "",
    ) -> Application:
        if not job_id.strip():
            raise ValidationFailure("Job id is required")
        self._check_status(status)
        application_id = _new_id()
        now = _utc_now()
        with self._lock:
            if cv_id is not None:
                self._fetch_cv_row(user_id, cv_id)
            self._conn.execute(
                """
                INSERT INTO applications (id, user_id, job_id, cv_id, company, title, status, notes, applied_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (application_id, user_id, job_id, cv_id, company, title, status, notes, now, now),
            )
            row = self._fetch_application_row(user_id, application_id)
        return Application(**dict(row))

    def update_application_status(
        self, user_id: str, application_id: str, status: str, notes: str | None = None
    ) -> Application:
        self._check_status(status)
        with self._lock:
            row = self._fetch_application_row(user_id, application_id)
            self._conn.execute(
                "UPDATE applications SET status = ?, notes = ?, updated_at = ? WHERE id = ? AND user_id = ?",
                (status, notes if notes is not None else row["notes"], _utc_now(), application_id, user_id),
            )
            return Application(**dict(self._fetch_application_row(user_id, application_id)))

    def list_applications(self, user_id: str, status: str | None = None) -> list[Application]:
        query = "SELECT * FROM applications WHERE user_id = ?"
        params: tuple = (user_id,)
        if status:
            self._check_status(status)
            query += " AND status = ?"
            params = (user_id, status)
        with self._lock:
            rows = self._conn.execute(query + " ORDER BY applied_at DESC", params).fetchall()
        return [Application(**dict(r)) for r in rows]

    def delete_application(self, user_id: str, application_id: str) -> None:
        with self._lock:
            self._fetch_application_row(user_id, application_id)
            self._conn.execute("DELETE FROM applications WHERE id = ? AND user_id = ?", (application_id, user_id))

    def application_stats(self, user_id: str) -> ApplicationStats:
        with self._lock:
            rows = self._conn.execute(
                "SELECT status, COUNT(*) AS n FROM applications WHERE user_id = ? GROUP BY status", (user_id,)
            ).fetchall()
        by_status = {s: 0 for s in APPLICATION_STATUSES}
        for row in rows:
            by_status[row["status"]] = row["n"]
        return ApplicationStats(total=sum(by_status.values()), by_status=by_status)


    # -- job matches ----------------------------------------------------------

    def save_job_match(self, record: JobMatchRecord) -> JobMatchRecord:
        payload = record.model_dump_json(exclude={"cached"})
        with self._lock:
            self._conn.execute(
                """
                INSERT INTO job_matches (user_id, job_id, cv_id, match_json, calculated_at) VALUES (?, ?, ?, ?, ?)
                ON CONFLICT (user_id, job_id) DO UPDATE SET
                    cv_id = excluded.cv_id, match_json = excluded.match_json, calculated_at = excluded.calculated_at
                """,
                (record.user_id, record.job_id, record.cv_id, payload, record.calculated_at),
            )
        return record

    def get_job_match(self, user_id: str, job_id: str) -> JobMatchRecord | None:
        with self._lock:
            row = self._conn.execute(
                "SELECT match_json FROM job_matches WHERE user_id = ? AND job_id = ?", (user_id, job_id)
            ).fetchone()
        if row is None:
            return None
        return JobMatchRecord.model_validate_json(row["match_json"]).model_copy(update={"cached": True})

_store: CVStore | None = None
_store_lock = threading.Lock()


def get_store() -> CVStore:
    global _store
    with _store_lock:
        if _store is None:
            _store = CVStore(settings.cv_db_path)
        return _store
