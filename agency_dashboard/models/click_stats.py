"""Pydantic models for click analytics payloads returned by the backend."""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ListingCount(BaseModel):
    """Click or lead count for one listing.

    listing_id is None for clicks attributed outside the agency's own catalog.
    The backend sends grouped rows as {"listingId": ..., "_count": {"id": n}};
    the flat {"listingId": ..., "count": n} shape is accepted as well.
    """

    model_config = ConfigDict(populate_by_name=True)

    listing_id: Optional[str] = Field(default=None, alias="listingId")
    count: int = Field(default=0, ge=0)

    @model_validator(mode="before")
    @classmethod
    def _flatten_grouped_count(cls, data: Any) -> Any:
        if isinstance(data, dict) and "count" not in data and "_count" in data:
            grouped = data.get("_count") or {}
            data = {**data, "count": grouped.get("id", 0) or 0}
        return data


class ClickStats(BaseModel):
    """Aggregate click/lead statistics for a date range.

    Computed entirely by the backend; clicks_by_date is sparse (absent date = 0).
    """

    model_config = ConfigDict(populate_by_name=True)

    total_clicks: int = Field(default=0, ge=0, alias="totalClicks")
    total_leads: int = Field(default=0, ge=0, alias="totalLeads")
    total_cost: float = Field(default=0.0, ge=0, alias="totalCost")
    cpc: float = Field(default=0.0, ge=0)
    cpl: float = Field(default=0.0, ge=0)
    clicks_by_date: dict[str, int] = Field(default_factory=dict, alias="clicksByDate")
    clicks_by_listing: list[ListingCount] = Field(
        default_factory=list, alias="clicksByListing"
    )
    leads_by_listing: list[ListingCount] = Field(
        default_factory=list, alias="leadsByListing"
    )
    leads_by_date: dict[str, int] = Field(default_factory=dict, alias="leadsByDate")

    @model_validator(mode="before")
    @classmethod
    def _nulls_to_defaults(cls, data: Any) -> Any:
        # Optional breakdowns and counters may arrive as explicit nulls
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


class ListingSummary(BaseModel):
    """Listing headline used in the top-listings block."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    brand: str
    model: str
    year: int
    clicks: int = 0


class RecentClick(BaseModel):
    """Single recent click with the listing it landed on, if any."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    listing_id: Optional[str] = Field(default=None, alias="listingId")
    listing: Optional[ListingSummary] = None
    created_at: str = Field(alias="createdAt")


class DashboardSummary(BaseModel):
    """Lifetime and trailing-period metrics for the dashboard landing page."""

    model_config = ConfigDict(populate_by_name=True)

    active_listings: int = Field(default=0, alias="activeListings")
    total_clicks: int = Field(default=0, alias="totalClicks")
    total_bill: float = Field(default=0.0, alias="totalBill")
    cpc: float = 0.0
    total_leads: int = Field(default=0, alias="totalLeads")
    cpl: float = 0.0

    today_leads: int = Field(default=0, alias="todayLeads")
    week_leads: int = Field(default=0, alias="weekLeads")
    month_leads: int = Field(default=0, alias="monthLeads")

    today_clicks: int = Field(default=0, alias="todayClicks")
    yesterday_clicks: int = Field(default=0, alias="yesterdayClicks")
    week_clicks: int = Field(default=0, alias="weekClicks")
    last_week_clicks: int = Field(default=0, alias="lastWeekClicks")
    month_clicks: int = Field(default=0, alias="monthClicks")
    last_month_clicks: int = Field(default=0, alias="lastMonthClicks")
    month_bill: float = Field(default=0.0, alias="monthBill")
    last_month_bill: float = Field(default=0.0, alias="lastMonthBill")

    recent_clicks: list[RecentClick] = Field(default_factory=list, alias="recentClicks")
    top_listings: list[ListingSummary] = Field(default_factory=list, alias="topListings")
