"""
FastAPI routes for the Trials module.
"""
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from app.api.v1.dependencies import PaginationParams, RepositoryDep, StudioDep, raise_http
from app.api.v1.trials.schemas import TrialBookingCreate, TrialBookingList, TrialBookingResponse, TrialBookingUpdate
from app.api.v1.trials.services import TrialService
from app.core.exceptions import StudioError
from app.models.enums import TrialStatus

router = APIRouter(prefix="/trials", tags=["Trials"])


@router.get("", response_model=TrialBookingList)
def list_trials(
        repo: RepositoryDep,
        pagination: PaginationParams = Depends(),
        status_filter: Optional[TrialStatus] = Query(None, alias="status"),
        lead_id: Optional[str] = Query(None),
        slot_id: Optional[str] = Query(None),
        day: Optional[date] = Query(None, alias="date"),
):
    bookings = TrialService.get_all(repo, status=status_filter, lead_id=lead_id, slot_id=slot_id, day=day)
    items, total = pagination.apply(bookings)
    return TrialBookingList(items=items, total=total, page=pagination.page, size=pagination.size, pages=pagination.pages(total))


@router.get("/upcoming", response_model=List[TrialBookingResponse])
def upcoming_trials(repo: RepositoryDep):
    return TrialService.get_upcoming(repo)


@router.get("/{booking_id}", response_model=TrialBookingResponse)
def get_trial(booking_id: str, repo: RepositoryDep):
    try:
        return TrialService.get_by_id(repo, booking_id)
    except StudioError as e:
        raise_http(e)


@router.post("", response_model=TrialBookingResponse, status_code=status.HTTP_201_CREATED)
def book_trial(data: TrialBookingCreate, repo: RepositoryDep, studio: StudioDep):
    try:
        return TrialService.book_trial(
            repo, studio, data.lead_id, data.slot_id, data.date, is_exception=data.is_exception, notes=data.notes
        )
    except StudioError as e:
        raise_http(e)


@router.put("/{booking_id}", response_model=TrialBookingResponse)
@router.patch("/{booking_id}", response_model=TrialBookingResponse)
def update_trial(booking_id: str, data: TrialBookingUpdate, repo: RepositoryDep):
    try:
        return TrialService.update(repo, booking_id, data.model_dump(exclude_unset=True))
    except StudioError as e:
        raise_http(e)


@router.post("/{booking_id}/attended", response_model=TrialBookingResponse)
def mark_attended(booking_id: str, repo: RepositoryDep):
    try:
        return TrialService.mark_attended(repo, booking_id)
    except StudioError as e:
        raise_http(e)


@router.post("/{booking_id}/no-show", response_model=TrialBookingResponse)
def mark_no_show(booking_id: str, repo: RepositoryDep):
    try:
        return TrialService.mark_no_show(repo, booking_id)
    except StudioError as e:
        raise_http(e)


@router.post("/{booking_id}/cancel", response_model=TrialBookingResponse)
def cancel_trial(booking_id: str, repo: RepositoryDep):
    try:
        return TrialService.cancel(repo, booking_id)
    except StudioError as e:
        raise_http(e)


@router.delete("/{booking_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_trial(booking_id: str, repo: RepositoryDep):
    try:
        TrialService.delete(repo, booking_id)
    except StudioError as e:
        raise_http(e)
