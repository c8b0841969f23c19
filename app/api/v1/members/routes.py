"""
FastAPI routes for the Members module.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from app.api.v1.dependencies import PaginationParams, RepositoryDep, raise_http
from app.api.v1.members.schemas import MemberCreate, MemberList, MemberResponse, MemberUpdate
from app.api.v1.members.services import MemberService
from app.core.exceptions import StudioError
from app.models.enums import MemberStatus

router = APIRouter(prefix="/members", tags=["Members"])


@router.get("", response_model=MemberList)
def list_members(
        repo: RepositoryDep,
        pagination: PaginationParams = Depends(),
        status_filter: Optional[MemberStatus] = Query(None, alias="status", description="Filter by status"),
        slot_id: Optional[str] = Query(None, description="Filter by assigned slot"),
        search: Optional[str] = Query(None, description="Search in name, email or phone"),
):
    """List members."""
    members = MemberService.get_all(repo, status=status_filter, slot_id=slot_id, search=search)
    items, total = pagination.apply(members)
    return MemberList(items=items, total=total, page=pagination.page, size=pagination.size, pages=pagination.pages(total))


@router.get("/{member_id}", response_model=MemberResponse)
def get_member(member_id: str, repo: RepositoryDep):
    try:
        return MemberService.get_by_id(repo, member_id)
    except StudioError as e:
        raise_http(e)


@router.post("", response_model=MemberResponse, status_code=status.HTTP_201_CREATED)
def create_member(data: MemberCreate, repo: RepositoryDep):
    """Register a member."""
    try:
        return MemberService.create(repo, data)
    except StudioError as e:
        raise_http(e)


@router.put("/{member_id}", response_model=MemberResponse)
@router.patch("/{member_id}", response_model=MemberResponse)
def update_member(member_id: str, data: MemberUpdate, repo: RepositoryDep):
    try:
        return MemberService.update(repo, member_id, data)
    except StudioError as e:
        raise_http(e)


@router.delete("/{member_id}", response_model=MemberResponse)
def deactivate_member(member_id: str, repo: RepositoryDep):
    """Members are kept for billing history: DELETE marks them inactive."""
    try:
        return MemberService.deactivate(repo, member_id)
    except StudioError as e:
        raise_http(e)
