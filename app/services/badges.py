"""
Status badge shown next to a subscription (front desk lists, member card).
"""

from dataclasses import dataclass
from datetime import date

from app.models import MembershipSubscription
from app.utils.dates import days_between

EXPIRING_SOON_DAYS = 7

# (background, text)
BLUE = ("#DBEAFE", "#1E40AF")
RED = ("#FEE2E2", "#991B1B")
AMBER = ("#FEF3C7", "#92400E")
GREEN = ("#D1FAE5", "#065F46")


@dataclass(frozen=True)
class Badge:
    bg_color: str
    text_color: str
    text: str


def subscription_badge(subscription: MembershipSubscription, today: date) -> Badge:
    """
    Badge for a subscription's date range.

    Examples:
        starts in 3 days -> "Starts in 3d" (blue)
        ended 2 days ago -> "Expired 2d ago" (red)
        ends in 5 days   -> "5d left" (amber)
        ends in 40 days  -> "40d left" (green)
    """
    start_date, end_date = subscription.start_date, subscription.end_date
    if start_date > today:
        return Badge(*BLUE, text=f"Starts in {days_between(today, start_date)}d")

    days_to_end = days_between(today, end_date)
    if days_to_end < 0:
        return Badge(*RED, text=f"Expired {-days_to_end}d ago")
    if days_to_end <= EXPIRING_SOON_DAYS:
        return Badge(*AMBER, text=f"{days_to_end}d left")
    return Badge(*GREEN, text=f"{days_to_end}d left")
