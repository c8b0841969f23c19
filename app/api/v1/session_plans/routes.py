"""
FastAPI routes for session plans and allocations.
"""
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.api.v1.dependencies import PaginationParams, RepositoryDep, raise_http
from app.api.v1.session_plans.schemas import (
    AllocateAllRequest,
    AllocationCreate,
    AllocationList,
    AllocationResponse,
    AllocationUpdate,
    MarkExecutedRequest,
    SessionPlanCreate,
    SessionPlanList,
    SessionPlanResponse,
    SessionPlanUpdate,
)
from app.api.v1.session_plans.services import AllocationService, SessionPlanService
from app.core.exceptions import StudioError
from app.models.enums import AllocationStatus

session_plans_router = APIRouter(prefix="/session-plans", tags=["Session plans"])
allocations_router = APIRouter(prefix="/allocations", tags=["Session plan allocations"])


# =============================================================================
# SESSION PLANS
# =============================================================================

@session_plans_router.get("", response_model=SessionPlanList)
def list_session_plans(repo: RepositoryDep, pagination: PaginationParams = Depends(), active_only: bool = Query(False)):
    plans = SessionPlanService.get_all(repo, active_only=active_only)
    items, total = pagination.apply(plans)
    return SessionPlanList(items=items, total=total, page=pagination.page, size=pagination.size, pages=pagination.pages(total))


@session_plans_router.get("/{plan_id}", response_model=SessionPlanResponse)
def get_session_plan(plan_id: str, repo: RepositoryDep):
    try:
        return SessionPlanService.get_by_id(repo, plan_id)
    except StudioError as e:
        raise_http(e)


@session_plans_router.post("", response_model=SessionPlanResponse, status_code=status.HTTP_201_CREATED)
def create_session_plan(data: SessionPlanCreate, repo: RepositoryDep):
    return SessionPlanService.create(repo, data)


@session_plans_router.put("/{plan_id}", response_model=SessionPlanResponse)
@session_plans_router.patch("/{plan_id}", response_model=SessionPlanResponse)
def update_session_plan(plan_id: str, data: SessionPlanUpdate, repo: RepositoryDep):
    try:
        return SessionPlanService.update(repo, plan_id, data)
    except StudioError as e:
        raise_http(e)


@session_plans_router.delete("/{plan_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_session_plan(plan_id: str, repo: RepositoryDep):
    try:
        SessionPlanService.delete(repo, plan_id)
    except StudioError as e:
        raise_http(e)


# =============================================================================
# ALLOCATIONS
# =============================================================================

@allocations_router.get("", response_model=AllocationList)
def list_allocations(
        repo: RepositoryDep,
        pagination: PaginationParams = Depends(),
        status_filter: Optional[AllocationStatus] = Query(None, alias="status"),
        day: Optional[date] = Query(None, alias="date"),
        start_date: Optional[date] = Query(None),
        end_date: Optional[date] = Query(None),
):
    """
    Filters:
        ?date=                  one day
        ?start_date=&end_date=  inclusive range
    """
    if day:
        allocations = AllocationService.get_by_date(repo, day)
    elif start_date and end_date:
        if end_date < start_date:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="end_date must be on or after start_date")
        allocations = AllocationService.get_by_date_range(repo, start_date, end_date)
    else:
        allocations = AllocationService.get_all(repo)

    if status_filter:
        allocations = [a for a in allocations if a.status == status_filter]
    items, total = pagination.apply(allocations)
    return AllocationList(items=items, total=total, page=pagination.page, size=pagination.size, pages=pagination.pages(total))


@allocations_router.get("/pending", response_model=List[AllocationResponse])
def pending_allocations(repo: RepositoryDep):
    return AllocationService.get_pending(repo)


@allocations_router.get("/by-slot", response_model=Optional[AllocationResponse])
def allocation_for_slot_and_date(repo: RepositoryDep, slot_id: str = Query(...), day: date = Query(..., alias="date")):
    return AllocationService.get_by_slot_and_date(repo, slot_id, day)


@allocations_router.get("/{allocation_id}", response_model=AllocationResponse)
def get_allocation(allocation_id: str, repo: RepositoryDep):
    try:
        return AllocationService.get_by_id(repo, allocation_id)
    except StudioError as e:
        raise_http(e)


@allocations_router.post("", response_model=AllocationResponse, status_code=status.HTTP_201_CREATED)
def allocate(data: AllocationCreate, repo: RepositoryDep):
    """Allocate a plan; an existing allocation for the same slot and date is replaced."""
    try:
        return AllocationService.allocate(
            repo, data.session_plan_id, data.slot_id, data.date, allocated_by=data.allocated_by, notes=data.notes
        )
    except StudioError as e:
        raise_http(e)


@allocations_router.post("/allocate-to-all-slots", response_model=List[AllocationResponse], status_code=status.HTTP_201_CREATED)
def allocate_to_all_slots(data: AllocateAllRequest, repo: RepositoryDep):
    try:
        return AllocationService.allocate_to_all_slots(repo, data.session_plan_id, data.date, data.allocated_by)
    except StudioError as e:
        raise_http(e)


@allocations_router.put("/{allocation_id}", response_model=AllocationResponse)
@allocations_router.patch("/{allocation_id}", response_model=AllocationResponse)
def update_allocation(allocation_id: str, data: AllocationUpdate, repo: RepositoryDep):
    try:
        return AllocationService.update(repo, allocation_id, data.model_dump(exclude_unset=True))
    except StudioError as e:
        raise_http(e)


@allocations_router.post("/{allocation_id}/cancel", response_model=AllocationResponse)
def cancel_allocation(allocation_id: str, repo: RepositoryDep):
    try:
        return AllocationService.cancel(repo, allocation_id)
    except StudioError as e:
        raise_http(e)


@allocations_router.post("/{allocation_id}/mark-executed", response_model=AllocationResponse)
def mark_executed(allocation_id: str, repo: RepositoryDep, data: Optional[MarkExecutedRequest] = None):
    try:
        return AllocationService.mark_executed(repo, allocation_id, data.execution_id if data else None)
    except StudioError as e:
        raise_http(e)


@allocations_router.delete("/{allocation_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_allocation(allocation_id: str, repo: RepositoryDep):
    try:
        AllocationService.delete(repo, allocation_id)
    except StudioError as e:
        raise_http(e)
