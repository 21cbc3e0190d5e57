"""Output models for analytics calculations."""

from dataclasses import dataclass
from typing import Literal


@dataclass(frozen=True)
class DailySeriesPoint:
    """Clicks on one calendar day of the chart range."""

    date: str  # YYYY-MM-DD
    display_label: str  # "1 Jan 2024"
    clicks: int


@dataclass(frozen=True)
class DerivedMetrics:
    """Cost metrics ready for display.

    cpl is None when the period has no leads; cpl_display is then an em-dash.
    """

    cpc: float
    cpl: float | None
    cpc_display: str
    cpl_display: str


@dataclass(frozen=True)
class ListingBreakdown:
    """Clicks, leads and reconstructed cost for a single listing."""

    listing_id: str | None  # None = click landed outside the agency catalog
    label: str
    clicks: int
    leads: int
    cost: float  # clicks * period CPC, not the historical per-click cost


@dataclass(frozen=True)
class PeriodComparison:
    """Current vs previous period for one dashboard metric."""

    label: str
    current: float
    previous: float
    pct_change: int
    is_up: bool  # current >= previous
    show_change: bool  # previous > 0


@dataclass(frozen=True)
class ClickTrend:
    """Fitted direction of daily clicks over the chart range."""

    direction: Literal["increasing", "decreasing", "stable"]
    clicks_per_day: float  # least-squares slope; 0.0 for short or flat series
