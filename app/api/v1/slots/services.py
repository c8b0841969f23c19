"""
Business services for the Slots module.
"""
import logging
from datetime import date
from typing import List, Optional

from app.core.exceptions import BusinessRuleError, NotFoundError
from app.models import SessionSlot, SlotSubscription, TrialBooking, TrialStatus
from app.repositories.base import Repository
from app.services.subscription_lifecycle import SubscriptionLifecycleService

from app.api.v1.slots.schemas import SessionSlotCreate, SessionSlotUpdate, SlotAvailability

logger = logging.getLogger(__name__)

# Trials holding a place in the slot
ACTIVE_TRIAL_STATUSES = [TrialStatus.PENDING, TrialStatus.CONFIRMED]


class SlotNotFoundError(NotFoundError):
    """Session slot not found."""
    pass


class SlotValidationError(BusinessRuleError):
    """Invalid slot data."""
    pass


class SlotService:

    @staticmethod
    def get_all(repo: Repository, active_only: bool = False) -> List[SessionSlot]:
        filters = {"is_active": True} if active_only else {}
        return repo.list(SessionSlot, order_by="start_time", **filters)

    @staticmethod
    def get_active(repo: Repository) -> List[SessionSlot]:
        return SlotService.get_all(repo, active_only=True)

    @staticmethod
    def get_by_id(repo: Repository, slot_id: str) -> SessionSlot:
        slot = repo.get(SessionSlot, slot_id)
        if not slot:
            raise SlotNotFoundError(f"Session slot {slot_id} not found")
        return slot

    @staticmethod
    def create(repo: Repository, data: SessionSlotCreate) -> SessionSlot:
        slot = SessionSlot(**data.model_dump())
        repo.add(slot)
        logger.info(f"✅ Slot created: {slot.display_name} ({slot.start_time}-{slot.end_time})")
        return slot

    @staticmethod
    def update(repo: Repository, slot_id: str, data: SessionSlotUpdate) -> SessionSlot:
        slot = SlotService.get_by_id(repo, slot_id)
        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(slot, field, value)
        if slot.end_time <= slot.start_time:
            raise SlotValidationError("end_time must be after start_time")
        repo.save(slot)
        return slot

    @staticmethod
    def update_capacity(repo: Repository, slot_id: str, capacity: int, exception_capacity: Optional[int] = None) -> SessionSlot:
        slot = SlotService.get_by_id(repo, slot_id)
        slot.capacity = capacity
        if exception_capacity is not None:
            slot.exception_capacity = exception_capacity
        repo.save(slot)
        logger.info(f"📏 Slot {slot.display_name} capacity set to {slot.capacity}+{slot.exception_capacity}")
        return slot

    @staticmethod
    def delete(repo: Repository, slot_id: str) -> None:
        slot = SlotService.get_by_id(repo, slot_id)
        repo.delete(slot)
        logger.info(f"🗑️ Slot deleted: {slot_id}")

    # =========================================================================
    # AVAILABILITY
    # =========================================================================

    @staticmethod
    def get_slot_availability(repo: Repository, slot_id: str, day: date) -> SlotAvailability:
        """
        Places used and left in a slot on ``day``.

        Trials consume regular places only.
        """
        slot = SlotService.get_by_id(repo, slot_id)

        lifecycle = SubscriptionLifecycleService(repo, today=day)
        members = {s.member_id for s in lifecycle.get_active_for_slot_on_date(slot.id, day)}

        exception_members = {
            a.member_id
            for a in repo.list(SlotSubscription, slot_id=slot.id, is_active=True, is_exception=True)
            if a.start_date <= day and (a.end_date is None or a.end_date >= day)
        }
        regular = len(members - exception_members)
        exception = len(exception_members)

        trials = repo.count(TrialBooking, slot_id=slot.id, date=day, status=ACTIVE_TRIAL_STATUSES)

        available_regular = max(0, slot.capacity - regular - trials)
        available_exception = max(0, slot.exception_capacity - exception)

        return SlotAvailability(
            slot_id=slot.id,
            display_name=slot.display_name,
            date=day,
            regular_bookings=regular,
            exception_bookings=exception,
            trial_bookings=trials,
            total_capacity=slot.total_capacity,
            available_regular=available_regular,
            available_exception=available_exception,
            is_full=available_regular <= 0 and available_exception <= 0,
        )

    @staticmethod
    def get_all_slots_availability(repo: Repository, day: date) -> List[SlotAvailability]:
        return [SlotService.get_slot_availability(repo, slot.id, day) for slot in SlotService.get_active(repo)]

    @staticmethod
    def has_capacity(repo: Repository, slot_id: str, day: date, use_exception: bool = False) -> bool:
        availability = SlotService.get_slot_availability(repo, slot_id, day)
        if use_exception:
            return availability.available_exception > 0
        return availability.available_regular > 0
