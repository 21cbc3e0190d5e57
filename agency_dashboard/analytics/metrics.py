"""Derived cost metrics, period comparisons and display formatting."""

import math

from ..models import ClickStats, DashboardSummary
from .models import DerivedMetrics, PeriodComparison

EM_DASH = "—"


def _group_digits(digits: str, locale: str) -> str:
    """Insert thousands separators into a string of digits.

    en_IN groups the last three digits, then pairs (12,34,567);
    every other locale groups in threes (1,234,567).
    """
    if locale != "en_IN":
        return f"{int(digits):,}"
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    pairs = []
    while len(head) > 2:
        pairs.insert(0, head[-2:])
        head = head[:-2]
    if head:
        pairs.insert(0, head)
    return ",".join(pairs + [tail])


def format_number(n: int | float, decimals: int = 0, locale: str = "en_IN") -> str:
    """Format number with locale-aware digit grouping."""
    sign = "-" if n < 0 else ""
    fixed = f"{abs(n):.{decimals}f}"
    whole, _, fraction = fixed.partition(".")
    grouped = _group_digits(whole, locale)
    return f"{sign}{grouped}.{fraction}" if fraction else f"{sign}{grouped}"


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def format_currency(amount: float, symbol: str = "₹", locale: str = "en_IN") -> str:
    """Headline money value, rounded to whole units."""
    return f"{symbol}{format_number(round_half_up(amount), locale=locale)}"


def format_rate(amount: float, symbol: str = "₹") -> str:
    """Per-click / per-lead money value with two decimals."""
    return f"{symbol}{amount:.2f}"


def derive_metrics(stats: ClickStats, currency_symbol: str = "₹") -> DerivedMetrics:
    """CPC and CPL for display.

    CPL is unavailable (None, shown as an em-dash) when there are no leads,
    rather than a misleading zero. CPC is the backend rate and always shown,
    even for a period without clicks.
    """
    cpl = stats.cpl if stats.total_leads > 0 else None
    return DerivedMetrics(
        cpc=stats.cpc,
        cpl=cpl,
        cpc_display=format_rate(stats.cpc, currency_symbol),
        cpl_display=format_rate(cpl, currency_symbol) if cpl is not None else EM_DASH,
    )


def pct_change(current: float, previous: float) -> int:
    """Rounded percent change; a rise from zero counts as 100%."""
    if previous == 0:
        return 100 if current > 0 else 0
    return round_half_up((current - previous) / previous * 100)


def compare_periods(summary: DashboardSummary) -> list[PeriodComparison]:
    """Current vs previous period comparisons shown on the dashboard."""
    pairs = [
        ("Today's clicks", summary.today_clicks, summary.yesterday_clicks),
        ("This week's clicks", summary.week_clicks, summary.last_week_clicks),
        ("This month's clicks", summary.month_clicks, summary.last_month_clicks),
        ("This month's bill", summary.month_bill, summary.last_month_bill),
    ]
    return [
        PeriodComparison(
            label=label,
            current=current,
            previous=previous,
            pct_change=pct_change(current, previous),
            is_up=current >= previous,
            show_change=previous > 0,
        )
        for label, current, previous in pairs
    ]
