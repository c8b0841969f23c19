"""
FastAPI routes for the Leads module.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from app.api.v1.dependencies import PaginationParams, RepositoryDep, raise_http
from app.api.v1.leads.schemas import LeadConversionResponse, LeadCreate, LeadList, LeadResponse, LeadUpdate
from app.api.v1.leads.services import LeadService
from app.core.exceptions import StudioError
from app.models.enums import LeadStatus

router = APIRouter(prefix="/leads", tags=["Leads"])


@router.get("", response_model=LeadList)
def list_leads(
        repo: RepositoryDep,
        pagination: PaginationParams = Depends(),
        status_filter: Optional[LeadStatus] = Query(None, alias="status"),
        search: Optional[str] = Query(None, description="Search in name, email or phone"),
):
    leads = LeadService.get_all(repo, status=status_filter, search=search)
    items, total = pagination.apply(leads)
    return LeadList(items=items, total=total, page=pagination.page, size=pagination.size, pages=pagination.pages(total))


@router.get("/pending", response_model=List[LeadResponse])
def list_pending_leads(repo: RepositoryDep):
    """Leads still in the funnel."""
    return LeadService.get_pending(repo)


@router.get("/unconverted", response_model=List[LeadResponse])
def list_unconverted_leads(repo: RepositoryDep):
    return LeadService.get_unconverted(repo)


@router.get("/follow-ups", response_model=List[LeadResponse])
def list_follow_ups_due(repo: RepositoryDep):
    """Leads whose next follow-up date has arrived."""
    return LeadService.get_follow_ups_due(repo)


@router.get("/{lead_id}", response_model=LeadResponse)
def get_lead(lead_id: str, repo: RepositoryDep):
    try:
        return LeadService.get_by_id(repo, lead_id)
    except StudioError as e:
        raise_http(e)


@router.post("", response_model=LeadResponse, status_code=status.HTTP_201_CREATED)
def create_lead(data: LeadCreate, repo: RepositoryDep):
    return LeadService.create(repo, data)


@router.put("/{lead_id}", response_model=LeadResponse)
@router.patch("/{lead_id}", response_model=LeadResponse)
def update_lead(lead_id: str, data: LeadUpdate, repo: RepositoryDep):
    try:
        return LeadService.update(repo, lead_id, data)
    except StudioError as e:
        raise_http(e)


@router.delete("/{lead_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_lead(lead_id: str, repo: RepositoryDep):
    try:
        LeadService.delete(repo, lead_id)
    except StudioError as e:
        raise_http(e)


@router.post("/{lead_id}/convert", response_model=LeadConversionResponse, status_code=status.HTTP_201_CREATED)
def convert_lead(lead_id: str, repo: RepositoryDep):
    """Create a pending member from the lead."""
    try:
        member = LeadService.convert_to_member(repo, lead_id)
    except StudioError as e:
        raise_http(e)
    return LeadConversionResponse(lead_id=lead_id, member_id=member.id, member_status=member.status.value)
