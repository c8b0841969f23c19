"""
FastAPI routes for the Slots module.
"""
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from app.api.v1.dependencies import PaginationParams, RepositoryDep, raise_http
from app.api.v1.slots.schemas import (
    CapacityCheckResponse,
    CapacityUpdate,
    SessionSlotCreate,
    SessionSlotList,
    SessionSlotResponse,
    SessionSlotUpdate,
    SlotAvailability,
)
from app.api.v1.slots.services import SlotService
from app.core.exceptions import StudioError
from app.services.subscription_lifecycle import SubscriptionLifecycleService

router = APIRouter(prefix="/slots", tags=["Slots"])


@router.get("", response_model=SessionSlotList)
def list_slots(
        repo: RepositoryDep,
        pagination: PaginationParams = Depends(),
        active_only: bool = Query(False),
):
    slots = SlotService.get_all(repo, active_only=active_only)
    items, total = pagination.apply(slots)
    return SessionSlotList(items=items, total=total, page=pagination.page, size=pagination.size, pages=pagination.pages(total))


@router.get("/active", response_model=List[SessionSlotResponse])
def list_active_slots(repo: RepositoryDep):
    return SlotService.get_active(repo)


@router.get("/availability", response_model=List[SlotAvailability])
def all_slots_availability(repo: RepositoryDep, day: date = Query(..., alias="date")):
    """Availability of every active slot on a day."""
    return SlotService.get_all_slots_availability(repo, day)


@router.get("/{slot_id}", response_model=SessionSlotResponse)
def get_slot(slot_id: str, repo: RepositoryDep):
    try:
        return SlotService.get_by_id(repo, slot_id)
    except StudioError as e:
        raise_http(e)


@router.get("/{slot_id}/availability", response_model=SlotAvailability)
def slot_availability(slot_id: str, repo: RepositoryDep, day: date = Query(..., alias="date")):
    try:
        return SlotService.get_slot_availability(repo, slot_id, day)
    except StudioError as e:
        raise_http(e)


@router.get("/{slot_id}/capacity-check", response_model=CapacityCheckResponse)
def capacity_check(
        slot_id: str,
        repo: RepositoryDep,
        start_date: date = Query(...),
        end_date: date = Query(...),
        exclude_member_id: Optional[str] = Query(None),
):
    """Membership places used in the slot over a date range."""
    try:
        check = SubscriptionLifecycleService(repo).check_slot_capacity(slot_id, start_date, end_date, exclude_member_id)
    except StudioError as e:
        raise_http(e)
    return CapacityCheckResponse(**check.__dict__)


@router.post("", response_model=SessionSlotResponse, status_code=status.HTTP_201_CREATED)
def create_slot(data: SessionSlotCreate, repo: RepositoryDep):
    return SlotService.create(repo, data)


@router.put("/{slot_id}", response_model=SessionSlotResponse)
@router.patch("/{slot_id}", response_model=SessionSlotResponse)
def update_slot(slot_id: str, data: SessionSlotUpdate, repo: RepositoryDep):
    try:
        return SlotService.update(repo, slot_id, data)
    except StudioError as e:
        raise_http(e)


@router.put("/{slot_id}/capacity", response_model=SessionSlotResponse)
def update_capacity(slot_id: str, data: CapacityUpdate, repo: RepositoryDep):
    try:
        return SlotService.update_capacity(repo, slot_id, data.capacity, data.exception_capacity)
    except StudioError as e:
        raise_http(e)


@router.delete("/{slot_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_slot(slot_id: str, repo: RepositoryDep):
    try:
        SlotService.delete(repo, slot_id)
    except StudioError as e:
        raise_http(e)
