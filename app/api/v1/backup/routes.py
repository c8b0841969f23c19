"""
FastAPI routes for backup export and import.
"""
from typing import Any, Dict

from fastapi import APIRouter, Body

from app.api.v1.dependencies import RepositoryDep, raise_http
from app.core.exceptions import StudioError
from app.services.backup import BackupService

router = APIRouter(prefix="/backup", tags=["Backup"])


@router.get("/export")
def export_backup(repo: RepositoryDep) -> Dict[str, Any]:
    """Every collection plus the settings, as one JSON document."""
    return BackupService(repo).export_all()


@router.post("/import")
def import_backup(repo: RepositoryDep, data: Any = Body(...)) -> Dict[str, int]:
    """Replace the collections present in the document. Returns counts per collection."""
    try:
        return BackupService(repo).import_all(data)
    except StudioError as e:
        raise_http(e)
