"""
FastAPI routes generating WhatsApp click-to-chat links.

Nothing is sent from the server: each route returns the rendered message and
a wa.me link the front desk opens.
"""
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, HTTPException, status

from app.api.v1.dependencies import RepositoryDep, StudioDep, raise_http
from app.api.v1.messaging.schemas import (
    ClassReminderRequest,
    NotificationRequest,
    RegistrationLinkRequest,
    TemplateChoice,
    WhatsAppMessage,
)
from app.api.v1.leads.services import LeadService
from app.api.v1.members.services import MemberService
from app.api.v1.plans.services import PlanService
from app.api.v1.slots.services import SlotService
from app.core.config import Settings, get_settings
from app.core.exceptions import StudioError
from app.services.billing import BillingService
from app.services.subscription_lifecycle import SubscriptionLifecycleService
from app.services.whatsapp import WhatsAppService

router = APIRouter(prefix="/messaging", tags=["Messaging"])


def get_whatsapp(studio: StudioDep, settings: Settings = Depends(get_settings)) -> WhatsAppService:
    return WhatsAppService(studio, country_code=settings.DEFAULT_COUNTRY_CODE)


WhatsAppDep = Annotated[WhatsAppService, Depends(get_whatsapp)]


@router.post("/subscriptions/{subscription_id}/renewal-reminder", response_model=WhatsAppMessage)
def renewal_reminder(
        subscription_id: str,
        repo: RepositoryDep,
        whatsapp: WhatsAppDep,
        data: Optional[TemplateChoice] = None,
):
    try:
        subscription = SubscriptionLifecycleService(repo).get(subscription_id)
        member = MemberService.get_by_id(repo, subscription.member_id)
        plan = PlanService.get_by_id(repo, subscription.plan_id)
        return whatsapp.renewal_reminder(
            member, subscription, plan,
            template_index=data.template_index if data else 0,
            active_plans=PlanService.get_all(repo, active_only=True),
        )
    except StudioError as e:
        raise_http(e)


@router.post("/members/{member_id}/class-reminder", response_model=WhatsAppMessage)
def class_reminder(member_id: str, data: ClassReminderRequest, repo: RepositoryDep, whatsapp: WhatsAppDep):
    try:
        member = MemberService.get_by_id(repo, member_id)
        slot_id = data.slot_id or member.assigned_slot_id
        if not slot_id:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Member has no assigned slot")
        slot = SlotService.get_by_id(repo, slot_id)
        return whatsapp.class_reminder(member, slot, data.class_date)
    except StudioError as e:
        raise_http(e)


@router.post("/payments/{payment_id}/confirmation", response_model=WhatsAppMessage)
def payment_confirmation(payment_id: str, repo: RepositoryDep, studio: StudioDep, whatsapp: WhatsAppDep):
    try:
        billing = BillingService(repo, studio)
        payment = billing.get_payment(payment_id)
        invoice = billing.get_invoice(payment.invoice_id)
        member = MemberService.get_by_id(repo, payment.member_id)

        subscription = None
        plan_name = "Products"
        if invoice.subscription_id:
            subscription = SubscriptionLifecycleService(repo).get(invoice.subscription_id)
            plan_name = PlanService.get_by_id(repo, subscription.plan_id).name
        return whatsapp.payment_confirmation(member, payment, invoice, plan_name, subscription)
    except StudioError as e:
        raise_http(e)


@router.post("/invoices/{invoice_id}/payment-reminder", response_model=WhatsAppMessage)
def payment_reminder(
        invoice_id: str,
        repo: RepositoryDep,
        studio: StudioDep,
        whatsapp: WhatsAppDep,
        data: Optional[TemplateChoice] = None,
):
    try:
        invoice = BillingService(repo, studio).get_invoice(invoice_id)
        member = MemberService.get_by_id(repo, invoice.member_id)
        return whatsapp.payment_reminder(member, invoice, template_index=data.template_index if data else 0)
    except StudioError as e:
        raise_http(e)


@router.post("/leads/{lead_id}/follow-up", response_model=WhatsAppMessage)
def lead_follow_up(lead_id: str, repo: RepositoryDep, whatsapp: WhatsAppDep, data: Optional[TemplateChoice] = None):
    try:
        lead = LeadService.get_by_id(repo, lead_id)
        return whatsapp.lead_follow_up(lead, template_index=data.template_index if data else 0)
    except StudioError as e:
        raise_http(e)


@router.post("/leads/{lead_id}/registration-link", response_model=WhatsAppMessage)
def lead_registration_link(lead_id: str, data: RegistrationLinkRequest, repo: RepositoryDep, whatsapp: WhatsAppDep):
    try:
        lead = LeadService.get_by_id(repo, lead_id)
        return whatsapp.lead_registration_link(lead, data.link)
    except StudioError as e:
        raise_http(e)


@router.post("/members/{member_id}/notification", response_model=WhatsAppMessage)
def general_notification(
        member_id: str,
        repo: RepositoryDep,
        whatsapp: WhatsAppDep,
        data: Optional[NotificationRequest] = None,
):
    try:
        member = MemberService.get_by_id(repo, member_id)
        data = data or NotificationRequest()
        return whatsapp.general_notification(member, template_index=data.template_index, extra=data.extra)
    except StudioError as e:
        raise_http(e)
