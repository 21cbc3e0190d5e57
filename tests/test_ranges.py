"""Tests for analytics date range resolution."""

from datetime import datetime

import pytest

from agency_dashboard.analytics import DateRange, resolve_range

NOW = datetime(2024, 3, 10, 15, 30)


class TestPresetRanges:
    """Tests for today / Ndays presets."""

    def test_today_starts_at_local_midnight(self) -> None:
        """Today runs from midnight to now."""
        result = resolve_range("today", now=NOW)
        assert result == DateRange("today", datetime(2024, 3, 10), NOW)
        assert result.days == 1

    @pytest.mark.parametrize(
        "kind, start_str",
        [("7days", "2024-03-03"), ("30days", "2024-02-09"), ("90days", "2023-12-11")],
    )
    def test_preset_subtracts_days_from_midnight(self, kind: str, start_str: str) -> None:
        """Preset start is midnight minus N days; end is now."""
        result = resolve_range(kind, now=NOW)
        assert result.start_str == start_str
        assert result.start.hour == 0
        assert result.end == NOW
        assert result.end_str == "2024-03-10"

    def test_presets_can_be_overridden(self) -> None:
        """Custom preset table is honoured."""
        result = resolve_range("14days", now=NOW, presets={"14days": 14})
        assert result.start_str == "2024-02-25"

    def test_unknown_kind_has_no_range(self) -> None:
        """Unknown kinds resolve to None instead of raising."""
        assert resolve_range("yesterday", now=NOW) is None


class TestCustomRange:
    """Tests for the custom date picker."""

    def test_custom_range_anchored_at_noon(self) -> None:
        """Both bounds are parsed as local noon."""
        result = resolve_range("custom", "2024-01-01", "2024-01-03")
        assert result.start == datetime(2024, 1, 1, 12)
        assert result.end == datetime(2024, 1, 3, 12)
        assert (result.start_str, result.end_str) == ("2024-01-01", "2024-01-03")
        assert result.days == 3

    @pytest.mark.parametrize(
        "start, end",
        [(None, "2024-01-03"), ("2024-01-01", None), ("", ""), (None, None)],
    )
    def test_incomplete_custom_range(self, start: str | None, end: str | None) -> None:
        """Missing bounds mean the user has not finished picking."""
        assert resolve_range("custom", start, end) is None

    def test_unparsable_date(self) -> None:
        """Garbage input is not a range."""
        assert resolve_range("custom", "2024-13-01", "2024-01-03") is None

    def test_inverted_custom_range(self) -> None:
        """Start after end is rejected so start <= end always holds."""
        assert resolve_range("custom", "2024-01-05", "2024-01-03") is None

    def test_single_day_custom_range(self) -> None:
        """Start equal to end is a one-day range."""
        result = resolve_range("custom", "2024-01-05", "2024-01-05")
        assert result.days == 1


class TestContains:
    """Tests for DateRange.contains()."""

    def test_bounds_are_inclusive(self) -> None:
        result = resolve_range("custom", "2024-01-01", "2024-01-03")
        assert result.contains("2024-01-01")
        assert result.contains("2024-01-03")
        assert not result.contains("2023-12-31")
        assert not result.contains("2024-01-04")
