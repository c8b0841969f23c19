"""
Business services for the Trials module.

A lead books a trial class in a slot. Trials only happen on working days
and consume a regular place (or an exception place when asked).
"""
import logging
from datetime import date
from typing import List, Optional

from app.core.exceptions import BusinessRuleError, CapacityError, NotFoundError
from app.models import Lead, LeadStatus, LeadTrialStatus, Member, TrialBooking, TrialStatus
from app.repositories.base import Repository
from app.services.studio_settings import StudioSettingsData
from app.services.subscription_lifecycle import SubscriptionLifecycleService
from app.utils.dates import get_holiday_name, is_weekend

from app.api.v1.leads.services import LeadService
from app.api.v1.slots.services import ACTIVE_TRIAL_STATUSES, SlotService

logger = logging.getLogger(__name__)

# Trials that count towards max_trials_per_person
USED_TRIAL_STATUSES = (TrialStatus.ATTENDED, TrialStatus.NO_SHOW)


class TrialNotFoundError(NotFoundError):
    """Trial booking not found."""
    pass


class TrialValidationError(BusinessRuleError):
    """Trial booking refused by a studio rule."""
    pass


class TrialCapacityError(CapacityError):
    """No place left for a trial in the slot."""
    pass


class TrialService:

    @staticmethod
    def get_all(
            repo: Repository,
            status: Optional[TrialStatus] = None,
            lead_id: Optional[str] = None,
            slot_id: Optional[str] = None,
            day: Optional[date] = None,
    ) -> List[TrialBooking]:
        filters = {}
        if status:
            filters["status"] = status
        if lead_id:
            filters["lead_id"] = lead_id
        if slot_id:
            filters["slot_id"] = slot_id
        if day:
            filters["date"] = day
        return repo.list(TrialBooking, order_by="date", **filters)

    @staticmethod
    def get_by_id(repo: Repository, booking_id: str) -> TrialBooking:
        booking = repo.get(TrialBooking, booking_id)
        if not booking:
            raise TrialNotFoundError(f"Trial booking {booking_id} not found")
        return booking

    @staticmethod
    def get_upcoming(repo: Repository, today: Optional[date] = None) -> List[TrialBooking]:
        today = today or date.today()
        return [
            b for b in repo.list(TrialBooking, status=ACTIVE_TRIAL_STATUSES, order_by="date")
            if b.date >= today
        ]

    @staticmethod
    def book_trial(
            repo: Repository,
            studio: StudioSettingsData,
            lead_id: str,
            slot_id: str,
            day: date,
            is_exception: bool = False,
            notes: Optional[str] = None,
    ) -> TrialBooking:
        """
        Book a confirmed trial for a lead.

        Raises:
            TrialValidationError: trials disabled, too many trials, already
                booked that day, active member, weekend or holiday
            TrialCapacityError: no place left in the slot
        """
        if not studio.trial_class_enabled:
            raise TrialValidationError("Trial classes are disabled")

        lead = LeadService.get_by_id(repo, lead_id)
        slot = SlotService.get_by_id(repo, slot_id)

        existing = repo.list(TrialBooking, lead_id=lead.id)
        if len([t for t in existing if t.status in USED_TRIAL_STATUSES]) >= studio.max_trials_per_person:
            raise TrialValidationError("Maximum trial sessions reached")

        if any(t.date == day and t.status in ACTIVE_TRIAL_STATUSES for t in existing):
            raise TrialValidationError("A trial session is already booked for this date")

        email = lead.email.strip().lower()
        member = next((m for m in repo.list(Member) if m.email.lower() == email), None)
        if member:
            active = SubscriptionLifecycleService(repo, today=day).get_active_member_subscription(member.id)
            if active:
                raise TrialValidationError("This person already has an active membership. Trial booking not allowed.")

        if not SlotService.has_capacity(repo, slot.id, day, use_exception=is_exception):
            raise TrialCapacityError("Exception capacity full" if is_exception else "Slot is full for this date")

        if is_weekend(day):
            raise TrialValidationError("Sessions only available Monday to Friday")
        holiday = get_holiday_name(day, studio.holidays)
        if holiday:
            raise TrialValidationError(f"Studio is closed on {holiday}")

        with repo.transaction():
            booking = TrialBooking(
                lead_id=lead.id,
                slot_id=slot.id,
                date=day,
                status=TrialStatus.CONFIRMED,
                is_exception=is_exception,
                notes=notes,
            )
            repo.add(booking)

            lead.status = LeadStatus.TRIAL_SCHEDULED
            lead.trial_date = day
            lead.trial_slot_id = slot.id
            lead.trial_status = LeadTrialStatus.SCHEDULED
            repo.save(lead)

        logger.info(f"🧘 Trial booked for lead {lead.id} in {slot.display_name} on {day}")
        return booking

    @staticmethod
    def _close(
            repo: Repository,
            booking_id: str,
            status: TrialStatus,
            lead_status: Optional[LeadStatus],
            lead_trial_status: LeadTrialStatus,
    ) -> TrialBooking:
        booking = TrialService.get_by_id(repo, booking_id)
        with repo.transaction():
            booking.status = status
            repo.save(booking)

            lead = repo.get(Lead, booking.lead_id)
            if lead:
                if lead_status is not None:
                    lead.status = lead_status
                lead.trial_status = lead_trial_status
                repo.save(lead)

        logger.info(f"🧘 Trial {booking.id} marked {status.value}")
        return booking

    @staticmethod
    def mark_attended(repo: Repository, booking_id: str) -> TrialBooking:
        return TrialService._close(
            repo, booking_id, TrialStatus.ATTENDED, LeadStatus.TRIAL_COMPLETED, LeadTrialStatus.ATTENDED
        )

    @staticmethod
    def mark_no_show(repo: Repository, booking_id: str) -> TrialBooking:
        return TrialService._close(
            repo, booking_id, TrialStatus.NO_SHOW, LeadStatus.FOLLOW_UP, LeadTrialStatus.NO_SHOW
        )

    @staticmethod
    def cancel(repo: Repository, booking_id: str) -> TrialBooking:
        """Cancel a trial. The lead keeps its funnel status."""
        return TrialService._close(repo, booking_id, TrialStatus.CANCELLED, None, LeadTrialStatus.CANCELLED)

    @staticmethod
    def update(repo: Repository, booking_id: str, changes: dict) -> TrialBooking:
        booking = TrialService.get_by_id(repo, booking_id)
        for field, value in changes.items():
            setattr(booking, field, value)
        repo.save(booking)
        return booking

    @staticmethod
    def delete(repo: Repository, booking_id: str) -> None:
        repo.delete(TrialService.get_by_id(repo, booking_id))
