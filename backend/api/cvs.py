"""Saved CV records for the current user."""

from fastapi import APIRouter, Depends

from api.dependencies import get_cv_store, get_user_id
from api.router import export_filename, pdf_response
from models.records import CVRecord
from models.requests import CVCreateRequest, CVUpdateRequest, SaveAnalysisRequest
from services import pdf_export
from services.cv_store import CVStore

router = APIRouter(prefix="/cvs", tags=["CVs"])


@router.get("", response_model=list[CVRecord])
async def list_cvs(user_id: str = Depends(get_user_id), store: CVStore = Depends(get_cv_store)):
    return store.list_by_user(user_id)


@router.post("", response_model=CVRecord, status_code=201)
async def create_cv(
    body: CVCreateRequest, user_id: str = Depends(get_user_id), store: CVStore = Depends(get_cv_store)
):
    return store.create(user_id, body.title, data=body.data, template_id=body.template_id)


@router.get("/{cv_id}", response_model=CVRecord)
async def get_cv(cv_id: str, user_id: str = Depends(get_user_id), store: CVStore = Depends(get_cv_store)):
    return store.get(user_id, cv_id)


@router.put("/{cv_id}", response_model=CVRecord)
async def update_cv(
    cv_id: str,
    body: CVUpdateRequest,
    user_id: str = Depends(get_user_id),
    store: CVStore = Depends(get_cv_store),
):
    return store.update(user_id, cv_id, title=body.title, data=body.data, template_id=body.template_id)


@router.delete("/{cv_id}", status_code=204)
async def delete_cv(cv_id: str, user_id: str = Depends(get_user_id), store: CVStore = Depends(get_cv_store)):
    store.delete(user_id, cv_id)


@router.post("/{cv_id}/primary", response_model=CVRecord)
async def set_primary(cv_id: str, user_id: str = Depends(get_user_id), store: CVStore = Depends(get_cv_store)):
    return store.set_primary(user_id, cv_id)


@router.post("/{cv_id}/duplicate", response_model=CVRecord, status_code=201)
async def duplicate_cv(cv_id: str, user_id: str = Depends(get_user_id), store: CVStore = Depends(get_cv_store)):
    return store.duplicate(user_id, cv_id)


@router.post("/{cv_id}/analysis", response_model=CVRecord)
async def save_analysis(
    cv_id: str,
    body: SaveAnalysisRequest,
    user_id: str = Depends(get_user_id),
    store: CVStore = Depends(get_cv_store),
):
    return store.save_analysis(user_id, cv_id, body.ats_score)


@router.get("/{cv_id}/export")
async def export_cv(
    cv_id: str,
    paper: str = "letter",
    user_id: str = Depends(get_user_id),
    store: CVStore = Depends(get_cv_store),
):
    record = store.get(user_id, cv_id)
    content = pdf_export.render_cv_pdf(record.data, record.template_id, paper)
    return pdf_response(content, export_filename(record.data))
