from app.models.membership.membership_plan import MembershipPlan
from app.models.membership.membership_subscription import MembershipSubscription

__all__ = ["MembershipPlan", "MembershipSubscription"]
