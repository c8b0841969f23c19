"""
FastAPI routes for the membership Plans module.
"""
from fastapi import APIRouter, Depends, Query, status

from app.api.v1.dependencies import PaginationParams, RepositoryDep, raise_http
from app.api.v1.plans.schemas import MembershipPlanCreate, MembershipPlanList, MembershipPlanResponse, MembershipPlanUpdate
from app.api.v1.plans.services import PlanService
from app.core.exceptions import StudioError

router = APIRouter(prefix="/plans", tags=["Membership plans"])


@router.get("", response_model=MembershipPlanList)
def list_plans(
        repo: RepositoryDep,
        pagination: PaginationParams = Depends(),
        active_only: bool = Query(False),
):
    plans = PlanService.get_all(repo, active_only=active_only)
    items, total = pagination.apply(plans)
    return MembershipPlanList(items=items, total=total, page=pagination.page, size=pagination.size, pages=pagination.pages(total))


@router.get("/{plan_id}", response_model=MembershipPlanResponse)
def get_plan(plan_id: str, repo: RepositoryDep):
    try:
        return PlanService.get_by_id(repo, plan_id)
    except StudioError as e:
        raise_http(e)


@router.post("", response_model=MembershipPlanResponse, status_code=status.HTTP_201_CREATED)
def create_plan(data: MembershipPlanCreate, repo: RepositoryDep):
    return PlanService.create(repo, data)


@router.put("/{plan_id}", response_model=MembershipPlanResponse)
@router.patch("/{plan_id}", response_model=MembershipPlanResponse)
def update_plan(plan_id: str, data: MembershipPlanUpdate, repo: RepositoryDep):
    try:
        return PlanService.update(repo, plan_id, data)
    except StudioError as e:
        raise_http(e)


@router.delete("/{plan_id}", response_model=MembershipPlanResponse)
def delete_plan(plan_id: str, repo: RepositoryDep):
    try:
        return PlanService.delete(repo, plan_id)
    except StudioError as e:
        raise_http(e)
