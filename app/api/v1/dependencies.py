# app/api/v1/dependencies.py
"""
Shared dependencies of the v1 API.

- PaginationParams : standard pagination query parameters
- get_repository   : storage backend selected by STORAGE_BACKEND
- get_settings_store / get_studio : studio settings, loaded once per request
- raise_http       : domain error -> HTTPException
"""

from functools import lru_cache
from pathlib import Path
from typing import Annotated, Any, Generator, List, Optional, Sequence, Tuple

from fastapi import Depends, HTTPException, Query, status

from app.core.config import Settings, get_settings
from app.core.exceptions import BusinessRuleError, ConflictError, NotFoundError, StudioError
from app.database.session import SessionLocal
from app.repositories import JsonFileRepository, Repository, SqlRepository
from app.services.studio_settings import SettingsStore, StudioSettingsData


class PaginationParams:
    """
    Standard pagination parameters for every list route.

    Usage:
        @router.get("/members")
        def list_members(pagination: PaginationParams = Depends()):
            # pagination.page, pagination.size, pagination.offset
            ...
    """

    def __init__(
            self,
            page: Annotated[int, Query(ge=1, description="Page number (starts at 1)")] = 1,
            size: Annotated[int, Query(ge=1, le=100, description="Items per page")] = 20,
            sort_by: Annotated[Optional[str], Query(description="Sort field")] = None,
            sort_order: Annotated[str, Query(pattern="^(asc|desc)$", description="Sort order")] = "asc",
    ):
        self.page = page
        self.size = size
        self.sort_by = sort_by
        self.sort_order = sort_order

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.size

    @property
    def limit(self) -> int:
        return self.size

    def apply(self, items: Sequence[Any], default_sort: Optional[str] = None) -> Tuple[List[Any], int]:
        """Sort then slice an in-memory result. Returns (page items, total)."""
        items = list(items)
        sort_by = self.sort_by or default_sort
        if sort_by and items and hasattr(items[0], sort_by):
            items.sort(
                key=lambda obj: (getattr(obj, sort_by) is None, getattr(obj, sort_by)),
                reverse=self.sort_order == "desc",
            )
        return items[self.offset:self.offset + self.size], len(items)

    def pages(self, total: int) -> int:
        return (total + self.size - 1) // self.size


# =============================================================================
# STORAGE
# =============================================================================

@lru_cache()
def _local_repository(path: Path) -> JsonFileRepository:
    # One instance per file so the lock is shared by every request
    return JsonFileRepository(path)


def get_repository(settings: Settings = Depends(get_settings)) -> Generator[Repository, None, None]:
    """
    FastAPI dependency yielding the configured repository.

    - STORAGE_BACKEND=sql   : SqlRepository on a fresh session, closed after the request
    - STORAGE_BACKEND=local : shared JsonFileRepository on LOCAL_STORE_PATH
    """
    if settings.uses_local_store:
        yield _local_repository(Path(settings.LOCAL_STORE_PATH))
        return

    repo = SqlRepository(SessionLocal())
    try:
        yield repo
    finally:
        repo.close()


def get_settings_store(repo: Repository = Depends(get_repository)) -> SettingsStore:
    return SettingsStore(repo)


def get_studio(store: SettingsStore = Depends(get_settings_store)) -> StudioSettingsData:
    return store.get()


# =============================================================================
# ERRORS
# =============================================================================

def raise_http(error: StudioError) -> None:
    """
    Translate a domain error into an HTTPException.

        NotFoundError     -> 404
        ConflictError     -> 409 (CapacityError included)
        BusinessRuleError -> 400
    """
    if isinstance(error, NotFoundError):
        code = status.HTTP_404_NOT_FOUND
    elif isinstance(error, ConflictError):
        code = status.HTTP_409_CONFLICT
    elif isinstance(error, BusinessRuleError):
        code = status.HTTP_400_BAD_REQUEST
    else:
        code = status.HTTP_500_INTERNAL_SERVER_ERROR
    raise HTTPException(status_code=code, detail=str(error)) from error


# =============================================================================
# TYPE ALIASES
# =============================================================================

Pagination = Annotated[PaginationParams, Depends()]
RepositoryDep = Annotated[Repository, Depends(get_repository)]
StudioDep = Annotated[StudioSettingsData, Depends(get_studio)]
