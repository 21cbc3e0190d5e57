"""Analytics module for click and lead reporting."""

from .export import (
    CSV_MIME_TYPE,
    CsvDocument,
    build_csv,
    export_filename,
    listing_breakdown,
)
from .metrics import (
    EM_DASH,
    compare_periods,
    derive_metrics,
    format_currency,
    format_number,
    format_rate,
    pct_change,
)
from .models import (
    ClickTrend,
    DailySeriesPoint,
    DerivedMetrics,
    ListingBreakdown,
    PeriodComparison,
)
from .ranges import RANGE_LABELS, DateRange, RangeKind, resolve_range
from .series import expand_daily_series
from .stats import click_trend

__all__ = [
    "CSV_MIME_TYPE",
    "ClickTrend",
    "CsvDocument",
    "DailySeriesPoint",
    "DateRange",
    "DerivedMetrics",
    "EM_DASH",
    "ListingBreakdown",
    "PeriodComparison",
    "RANGE_LABELS",
    "RangeKind",
    "build_csv",
    "click_trend",
    "compare_periods",
    "derive_metrics",
    "expand_daily_series",
    "export_filename",
    "format_currency",
    "format_number",
    "format_rate",
    "listing_breakdown",
    "pct_change",
    "resolve_range",
]
