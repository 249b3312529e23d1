"""Shared dependencies for API routes."""

from fastapi import Header
from slowapi import Limiter
from slowapi.util import get_remote_address

from services.cv_store import CVStore, get_store
from services.errors import ValidationFailure
from services.jobs.aggregator import JobSearchService

limiter = Limiter(key_func=get_remote_address)

_job_service: JobSearchService | None = None


def get_cv_store() -> CVStore:
    return get_store()


def get_job_service() -> JobSearchService:
    global _job_service
    if _job_service is None:
        _job_service = JobSearchService()
    return _job_service


def get_user_id(x_user_id: str | None = Header(default=None, alias="X-User-Id")) -> str:
    """Records are scoped to the caller's id; authentication happens upstream."""
    if not x_user_id or not x_user_id.strip():
        raise ValidationFailure("X-User-Id header is required")
    return x_user_id.strip()
