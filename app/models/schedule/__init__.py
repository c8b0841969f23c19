from app.models.schedule.session_slot import SessionSlot
from app.models.schedule.slot_subscription import SlotSubscription
from app.models.schedule.trial_booking import TrialBooking
from app.models.schedule.session_plan import SessionPlan, SessionPlanAllocation

__all__ = [
    "SessionSlot",
    "SlotSubscription",
    "TrialBooking",
    "SessionPlan",
    "SessionPlanAllocation",
]
