"""
Business services for the membership Plans module.
"""
import logging
from typing import List

from app.core.exceptions import NotFoundError
from app.models import MembershipPlan
from app.repositories.base import Repository

from app.api.v1.plans.schemas import MembershipPlanCreate, MembershipPlanUpdate

logger = logging.getLogger(__name__)


class PlanNotFoundError(NotFoundError):
    """Membership plan not found."""
    pass


class PlanService:

    @staticmethod
    def get_all(repo: Repository, active_only: bool = False) -> List[MembershipPlan]:
        filters = {"is_active": True} if active_only else {}
        return repo.list(MembershipPlan, order_by="duration_months", **filters)

    @staticmethod
    def get_by_id(repo: Repository, plan_id: str) -> MembershipPlan:
        plan = repo.get(MembershipPlan, plan_id)
        if not plan:
            raise PlanNotFoundError(f"Membership plan {plan_id} not found")
        return plan

    @staticmethod
    def create(repo: Repository, data: MembershipPlanCreate) -> MembershipPlan:
        plan = MembershipPlan(**data.model_dump())
        repo.add(plan)
        logger.info(f"✅ Plan created: {plan.name} ({plan.price} / {plan.duration_months} month(s))")
        return plan

    @staticmethod
    def update(repo: Repository, plan_id: str, data: MembershipPlanUpdate) -> MembershipPlan:
        plan = PlanService.get_by_id(repo, plan_id)
        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(plan, field, value)
        repo.save(plan)
        return plan

    @staticmethod
    def delete(repo: Repository, plan_id: str) -> MembershipPlan:
        """Plans referenced by subscriptions are kept: DELETE deactivates."""
        plan = PlanService.get_by_id(repo, plan_id)
        plan.is_active = False
        repo.save(plan)
        logger.info(f"🗑️ Plan deactivated: {plan.name}")
        return plan
