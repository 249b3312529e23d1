"""Job application tracking."""

from fastapi import APIRouter, Depends

from api.dependencies import get_cv_store, get_user_id
from models.records import Application, ApplicationStats
from models.requests import ApplicationCreateRequest, ApplicationUpdateRequest
from services.cv_store import CVStore

router = APIRouter(prefix="/applications", tags=["Applications"])


@router.get("", response_model=list[Application])
async def list_applications(
    status: str | None = None, user_id: str = Depends(get_user_id), store: CVStore = Depends(get_cv_store)
):
    return store.list_applications(user_id, status=status)


@router.get("/stats", response_model=ApplicationStats)
async def application_stats(user_id: str = Depends(get_user_id), store: CVStore = Depends(get_cv_store)):
    return store.application_stats(user_id)


@router.post("", response_model=Application, status_code=201)
async def create_application(
    body: ApplicationCreateRequest, user_id: str = Depends(get_user_id), store: CVStore = Depends(get_cv_store)
):
    return store.create_application(user_id, **body.model_dump())


@router.patch("/{application_id}", response_model=Application)
async def update_application(
    application_id: str,
    body: ApplicationUpdateRequest,
    user_id: str = Depends(get_user_id),
    store: CVStore = Depends(get_cv_store),
):
    return store.update_application_status(user_id, application_id, body.status, notes=body.notes)


@router.delete("/{application_id}", status_code=204)
async def delete_application(
    application_id: str, user_id: str = Depends(get_user_id), store: CVStore = Depends(get_cv_store)
):
    store.delete_application(user_id, application_id)
