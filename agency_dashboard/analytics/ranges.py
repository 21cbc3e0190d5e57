"""Date range resolution for the analytics period picker."""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Literal, Mapping

import structlog

logger = structlog.get_logger(__name__)

RangeKind = Literal["today", "7days", "30days", "90days", "custom"]

DEFAULT_PRESETS: dict[str, int] = {"7days": 7, "30days": 30, "90days": 90}

RANGE_LABELS: dict[str, str] = {
    "today": "Today",
    "7days": "Last 7 days",
    "30days": "Last 30 days",
    "90days": "Last 90 days",
    "custom": "Custom",
}

# Custom dates are anchored at local noon so day arithmetic never crosses a DST edge
NOON = time(12, 0)


@dataclass(frozen=True)
class DateRange:
    """Inclusive calendar-day range in the viewer's local time.

    start <= end always holds for instances built by resolve_range().
    """

    kind: str
    start: datetime
    end: datetime

    @property
    def start_str(self) -> str:
        return self.start.date().isoformat()

    @property
    def end_str(self) -> str:
        return self.end.date().isoformat()

    @property
    def days(self) -> int:
        """Number of calendar days covered, both ends included."""
        return (self.end.date() - self.start.date()).days + 1

    def contains(self, day: str) -> bool:
        """True if an ISO date string falls inside the range."""
        return self.start_str <= day <= self.end_str


def parse_day(value: str | None) -> date | None:
    """Parse YYYY-MM-DD; anything else (including blanks) is None."""
    if not value:
        return None
    try:
        return date.fromisoformat(value.strip())
    except ValueError:
        return None


def resolve_range(
    kind: str,
    custom_start: str | None = None,
    custom_end: str | None = None,
    now: datetime | None = None,
    presets: Mapping[str, int] | None = None,
) -> DateRange | None:
    """Turn a period selection into a concrete DateRange.

    None means no usable range yet (custom picker incomplete or invalid);
    the caller must not fetch. This never raises.

    Args:
        kind: "today", a preset key such as "7days", or "custom"
        custom_start: YYYY-MM-DD start, required for "custom"
        custom_end: YYYY-MM-DD end, required for "custom"
        now: Current local time (defaults to datetime.now())
        presets: Days subtracted from midnight per preset kind
    """
    now = now or datetime.now()
    midnight = datetime.combine(now.date(), time.min)

    if kind == "today":
        return DateRange(kind=kind, start=midnight, end=now)

    if kind == "custom":
        start_day = parse_day(custom_start)
        end_day = parse_day(custom_end)
        if start_day is None or end_day is None:
            return None
        if start_day > end_day:
            logger.debug("custom_range_inverted", start=custom_start, end=custom_end)
            return None
        return DateRange(
            kind=kind,
            start=datetime.combine(start_day, NOON),
            end=datetime.combine(end_day, NOON),
        )

    days = (presets if presets is not None else DEFAULT_PRESETS).get(kind)
    if days is None:
        logger.debug("unknown_range_kind", kind=kind)
        return None
    return DateRange(kind=kind, start=midnight - timedelta(days=days), end=now)
