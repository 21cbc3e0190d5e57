from .click_stats import ClickStats, DashboardSummary, ListingCount, ListingSummary, RecentClick
from .onboarding import ApprovalState, ApprovalStatus, OnboardingStatus

__all__ = [
    "ApprovalState",
    "ApprovalStatus",
    "ClickStats",
    "DashboardSummary",
    "ListingCount",
    "ListingSummary",
    "OnboardingStatus",
    "RecentClick",
]
