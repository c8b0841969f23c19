"""
FastAPI routes for the studio Settings module.
"""
from typing import Any, Dict, List

from fastapi import APIRouter, Depends

from app.api.v1.dependencies import get_settings_store, raise_http
from app.api.v1.settings.schemas import StudioSettingsUpdate
from app.core.exceptions import StudioError
from app.services.studio_settings import SettingsStore, StudioSettingsData
from app.services.whatsapp import WhatsAppService

router = APIRouter(prefix="/settings", tags=["Settings"])


@router.get("", response_model=StudioSettingsData)
def get_studio_settings(store: SettingsStore = Depends(get_settings_store)):
    return store.get()


@router.put("", response_model=StudioSettingsData)
@router.patch("", response_model=StudioSettingsData)
def update_studio_settings(data: StudioSettingsUpdate, store: SettingsStore = Depends(get_settings_store)):
    """Merge the given fields into the settings and save them."""
    try:
        return store.update(data.model_dump(exclude_unset=True))
    except StudioError as e:
        raise_http(e)


@router.post("/reset", response_model=StudioSettingsData)
def reset_studio_settings(store: SettingsStore = Depends(get_settings_store)):
    return store.reset()


@router.get("/whatsapp-templates", response_model=Dict[str, Any])
def get_whatsapp_templates(store: SettingsStore = Depends(get_settings_store)):
    return store.get().whatsapp_templates


@router.get("/whatsapp-templates/{group}", response_model=List[Dict[str, Any]])
def get_template_group(group: str, store: SettingsStore = Depends(get_settings_store)):
    try:
        return WhatsAppService(store.get()).list_templates(group)
    except StudioError as e:
        raise_http(e)
