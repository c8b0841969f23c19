"""
Business services for session plans and allocations.

An allocation schedules a session plan for one slot on one date. There is
at most one allocation per (slot, date): allocating again replaces the plan.
"""
import logging
from datetime import date
from typing import List, Optional

from app.core.exceptions import BusinessRuleError, NotFoundError
from app.models import AllocationStatus, SessionPlan, SessionPlanAllocation
from app.repositories.base import Repository

from app.api.v1.session_plans.schemas import SessionPlanCreate, SessionPlanUpdate
from app.api.v1.slots.services import SlotService

logger = logging.getLogger(__name__)


class SessionPlanNotFoundError(NotFoundError):
    """Session plan not found."""
    pass


class AllocationNotFoundError(NotFoundError):
    """Allocation not found."""
    pass


class AllocationValidationError(BusinessRuleError):
    """Allocation state does not allow the operation."""
    pass


# =============================================================================
# SESSION PLANS
# =============================================================================

class SessionPlanService:

    @staticmethod
    def get_all(repo: Repository, active_only: bool = False) -> List[SessionPlan]:
        filters = {"is_active": True} if active_only else {}
        return repo.list(SessionPlan, order_by="name", **filters)

    @staticmethod
    def get_by_id(repo: Repository, plan_id: str) -> SessionPlan:
        plan = repo.get(SessionPlan, plan_id)
        if not plan:
            raise SessionPlanNotFoundError(f"Session plan {plan_id} not found")
        return plan

    @staticmethod
    def create(repo: Repository, data: SessionPlanCreate) -> SessionPlan:
        plan = SessionPlan(**data.model_dump())
        repo.add(plan)
        logger.info(f"✅ Session plan created: {plan.name}")
        return plan

    @staticmethod
    def update(repo: Repository, plan_id: str, data: SessionPlanUpdate) -> SessionPlan:
        plan = SessionPlanService.get_by_id(repo, plan_id)
        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(plan, field, value)
        repo.save(plan)
        return plan

    @staticmethod
    def delete(repo: Repository, plan_id: str) -> None:
        plan = SessionPlanService.get_by_id(repo, plan_id)
        with repo.transaction():
            for allocation in repo.list(SessionPlanAllocation, session_plan_id=plan.id):
                repo.delete(allocation)
            repo.delete(plan)
        logger.info(f"🗑️ Session plan deleted: {plan.name}")


# =============================================================================
# ALLOCATIONS
# =============================================================================

class AllocationService:

    @staticmethod
    def get_by_id(repo: Repository, allocation_id: str) -> SessionPlanAllocation:
        allocation = repo.get(SessionPlanAllocation, allocation_id)
        if not allocation:
            raise AllocationNotFoundError(f"Allocation {allocation_id} not found")
        return allocation

    @staticmethod
    def get_all(repo: Repository, status: Optional[AllocationStatus] = None) -> List[SessionPlanAllocation]:
        filters = {"status": status} if status else {}
        return repo.list(SessionPlanAllocation, order_by="date", **filters)

    @staticmethod
    def get_by_date(repo: Repository, day: date) -> List[SessionPlanAllocation]:
        return repo.list(SessionPlanAllocation, date=day, order_by="slot_id")

    @staticmethod
    def get_by_date_range(repo: Repository, start_date: date, end_date: date) -> List[SessionPlanAllocation]:
        allocations = [
            a for a in repo.list(SessionPlanAllocation)
            if start_date <= a.date <= end_date
        ]
        return sorted(allocations, key=lambda a: (a.date, a.slot_id))

    @staticmethod
    def get_by_slot_and_date(repo: Repository, slot_id: str, day: date) -> Optional[SessionPlanAllocation]:
        return repo.first(SessionPlanAllocation, slot_id=slot_id, date=day)

    @staticmethod
    def get_pending(repo: Repository, today: Optional[date] = None) -> List[SessionPlanAllocation]:
        """Scheduled allocations from today on."""
        today = today or date.today()
        return [
            a for a in repo.list(SessionPlanAllocation, status=AllocationStatus.SCHEDULED, order_by="date")
            if a.date >= today
        ]

    @staticmethod
    def allocate(
            repo: Repository,
            session_plan_id: str,
            slot_id: str,
            day: date,
            allocated_by: Optional[str] = None,
            notes: Optional[str] = None,
    ) -> SessionPlanAllocation:
        """Schedule a plan in a slot on a date, replacing any plan already there."""
        plan = SessionPlanService.get_by_id(repo, session_plan_id)
        slot = SlotService.get_by_id(repo, slot_id)

        allocation = AllocationService.get_by_slot_and_date(repo, slot.id, day)
        if allocation:
            allocation.session_plan_id = plan.id
            allocation.allocated_by = allocated_by
            allocation.status = AllocationStatus.SCHEDULED
            allocation.execution_id = None
            if notes is not None:
                allocation.notes = notes
            repo.save(allocation)
            logger.info(f"📋 Allocation {allocation.id} now uses plan {plan.name}")
            return allocation

        allocation = SessionPlanAllocation(
            session_plan_id=plan.id,
            slot_id=slot.id,
            date=day,
            status=AllocationStatus.SCHEDULED,
            allocated_by=allocated_by,
            notes=notes,
        )
        repo.add(allocation)
        logger.info(f"📋 Plan {plan.name} allocated to {slot.display_name} on {day}")
        return allocation

    @staticmethod
    def allocate_to_all_slots(
            repo: Repository,
            session_plan_id: str,
            day: date,
            allocated_by: Optional[str] = None,
    ) -> List[SessionPlanAllocation]:
        SessionPlanService.get_by_id(repo, session_plan_id)
        with repo.transaction():
            return [
                AllocationService.allocate(repo, session_plan_id, slot.id, day, allocated_by)
                for slot in SlotService.get_active(repo)
            ]

    @staticmethod
    def update(repo: Repository, allocation_id: str, changes: dict) -> SessionPlanAllocation:
        allocation = AllocationService.get_by_id(repo, allocation_id)
        if changes.get("session_plan_id"):
            SessionPlanService.get_by_id(repo, changes["session_plan_id"])
        for field, value in changes.items():
            setattr(allocation, field, value)
        repo.save(allocation)
        return allocation

    @staticmethod
    def cancel(repo: Repository, allocation_id: str) -> SessionPlanAllocation:
        allocation = AllocationService.get_by_id(repo, allocation_id)
        if allocation.status == AllocationStatus.EXECUTED:
            raise AllocationValidationError("An executed allocation cannot be cancelled")
        allocation.status = AllocationStatus.CANCELLED
        repo.save(allocation)
        return allocation

    @staticmethod
    def mark_executed(repo: Repository, allocation_id: str, execution_id: Optional[str] = None) -> SessionPlanAllocation:
        allocation = AllocationService.get_by_id(repo, allocation_id)
        if allocation.status == AllocationStatus.CANCELLED:
            raise AllocationValidationError("A cancelled allocation cannot be executed")
        allocation.status = AllocationStatus.EXECUTED
        allocation.execution_id = execution_id
        repo.save(allocation)
        logger.info(f"✅ Allocation {allocation.id} executed")
        return allocation

    @staticmethod
    def delete(repo: Repository, allocation_id: str) -> None:
        repo.delete(AllocationService.get_by_id(repo, allocation_id))
