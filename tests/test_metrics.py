"""Tests for derived metrics and formatting."""

import math

import pytest

from agency_dashboard.analytics import (
    EM_DASH,
    compare_periods,
    derive_metrics,
    format_currency,
    format_number,
    format_rate,
    pct_change,
)
from agency_dashboard.models import ClickStats, DashboardSummary


class TestDeriveMetrics:
    """Tests for derive_metrics()."""

    def test_cpl_placeholder_without_leads(self) -> None:
        """Zero leads gives an em-dash, never 0 or NaN."""
        stats = ClickStats(total_clicks=10, total_leads=0, cpc=5.0, cpl=0.0)
        result = derive_metrics(stats)
        assert result.cpl is None
        assert result.cpl_display == EM_DASH
        assert result.cpl_display not in ("0", "₹0.00", "NaN")

    def test_numeric_cpl_with_leads(self) -> None:
        stats = ClickStats(total_clicks=10, total_leads=2, cpc=5.0, cpl=25.0)
        result = derive_metrics(stats)
        assert result.cpl == 25.0
        assert not math.isnan(result.cpl)
        assert result.cpl_display == "₹25.00"

    def test_cpc_shown_without_clicks(self) -> None:
        """CPC is the backend rate even when nothing was clicked."""
        stats = ClickStats(total_clicks=0, cpc=4.5)
        result = derive_metrics(stats)
        assert result.cpc == 4.5
        assert result.cpc_display == "₹4.50"

    def test_currency_symbol(self) -> None:
        stats = ClickStats(total_leads=1, cpc=1, cpl=2)
        assert derive_metrics(stats, currency_symbol="$").cpl_display == "$2.00"


class TestFormatting:
    """Tests for number and currency formatting."""

    @pytest.mark.parametrize(
        "value, expected",
        [(0, "0"), (999, "999"), (1000, "1,000"), (123456, "1,23,456"), (12345678, "1,23,45,678")],
    )
    def test_indian_grouping(self, value: int, expected: str) -> None:
        assert format_number(value) == expected

    def test_western_grouping(self) -> None:
        assert format_number(12345678, locale="en_US") == "12,345,678"

    def test_decimals_and_sign(self) -> None:
        assert format_number(-1234567.891, decimals=2) == "-12,34,567.89"

    def test_currency_rounds_to_whole_units(self) -> None:
        """Headline currency is rounded half up."""
        assert format_currency(1234.5) == "₹1,235"
        assert format_currency(1234.49) == "₹1,234"
        assert format_currency(2.5) == "₹3"

    def test_rate_two_decimals(self) -> None:
        assert format_rate(3) == "₹3.00"
        assert format_rate(3.456) == "₹3.46"


class TestPeriodComparison:
    """Tests for pct_change() and compare_periods()."""

    @pytest.mark.parametrize(
        "current, previous, expected",
        [(10, 0, 100), (0, 0, 0), (15, 10, 50), (5, 10, -50), (1, 3, -67)],
    )
    def test_pct_change(self, current: float, previous: float, expected: int) -> None:
        assert pct_change(current, previous) == expected

    def test_compare_periods(self) -> None:
        summary = DashboardSummary.model_validate(
            {
                "todayClicks": 12,
                "yesterdayClicks": 8,
                "weekClicks": 20,
                "lastWeekClicks": 40,
                "monthClicks": 5,
                "lastMonthClicks": 0,
                "monthBill": 100.0,
                "lastMonthBill": 80.0,
            }
        )
        today, week, month, bill = compare_periods(summary)

        assert (today.pct_change, today.is_up, today.show_change) == (50, True, True)
        assert (week.pct_change, week.is_up) == (-50, False)
        assert (month.pct_change, month.show_change) == (100, False)
        assert bill.pct_change == 25

