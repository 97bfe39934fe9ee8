"""
Screening session endpoints: scans, history and stored settings
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile
from starlette.concurrency import run_in_threadpool

from resume_screener.models.schemas import (
    CredentialUpdate,
    Criteria,
    HistoryEntry,
    LanguageUpdate,
    SettingsView,
)
from resume_screener.services.screening import ScreeningService
from resume_screener.utils.logging_config import get_logger
from resume_screener.validators import validate_resume_file

router = APIRouter()
logger = get_logger(__name__)


def get_screening_service(request: Request) -> ScreeningService:
    return request.app.state.screening


# ==================== SCANS ====================

@router.post("/scans", response_model=HistoryEntry, response_model_exclude_unset=True)
async def scan_resume(
    resume: UploadFile = File(...),
    service: ScreeningService = Depends(get_screening_service),
):
    """Evaluate a resume with the stored credential, criteria and language"""
    document = await validate_resume_file(resume)
    return await run_in_threadpool(service.scan, document)


# ==================== HISTORY ====================

@router.get("/history", response_model=List[HistoryEntry], response_model_exclude_unset=True)
async def list_history(service: ScreeningService = Depends(get_screening_service)):
    """All past scans, newest first"""
    return service.history()


@router.get("/history/{entry_id}", response_model=HistoryEntry, response_model_exclude_unset=True)
async def get_history_entry(entry_id: str, service: ScreeningService = Depends(get_screening_service)):
    entry = service.get_history_entry(entry_id)
    if not entry:
        raise HTTPException(status_code=404, detail="History entry not found")
    return entry


@router.delete("/history")
async def clear_history(service: ScreeningService = Depends(get_screening_service)):
    service.clear_history()
    return {"message": "History cleared"}


# ==================== SETTINGS ====================

@router.get("/settings", response_model=SettingsView)
async def get_settings(service: ScreeningService = Depends(get_screening_service)):
    """Current settings; the credential itself is never returned"""
    return service.settings_view()


@router.put("/settings/credential", response_model=SettingsView)
async def update_credential(
    update: CredentialUpdate,
    service: ScreeningService = Depends(get_screening_service),
):
    service.save_credential(update.api_key)
    return service.settings_view()


@router.put("/settings/criteria", response_model=SettingsView)
async def update_criteria(
    criteria: Criteria,
    service: ScreeningService = Depends(get_screening_service),
):
    service.save_criteria(criteria)
    return service.settings_view()


@router.put("/settings/language", response_model=Optional[HistoryEntry], response_model_exclude_unset=True)
async def update_language(
    update: LanguageUpdate,
    service: ScreeningService = Depends(get_screening_service),
):
    """
    Switch the output language. If a resume was scanned earlier, it is analysed again and
    the newest history entry is returned with the new result; otherwise the body is null.
    """
    logger.info(f"Language changed to {update.language.value}")
    return await run_in_threadpool(service.change_language, update.language)
