"""Tests for the analytics CSV export."""

import csv
import io
from datetime import date

import pytest

from agency_dashboard.analytics import (
    CSV_MIME_TYPE,
    CsvDocument,
    build_csv,
    export_filename,
    listing_breakdown,
    resolve_range,
)
from agency_dashboard.models import ClickStats


def parse(document: CsvDocument) -> list[list[str]]:
    """Read the export back with standard CSV rules."""
    text = document.to_text()
    assert text.startswith("\ufeff")
    return list(csv.reader(io.StringIO(text[1:], newline="")))


class TestCsvDocument:
    """Tests for CsvDocument text output."""

    @pytest.mark.parametrize(
        "value, expected",
        [
            ("plain", "plain"),
            ("a,b", '"a,b"'),
            ('say "hi"', '"say ""hi"""'),
            ("line\nbreak", '"line\nbreak"'),
        ],
    )
    def test_quoting(self, value: str, expected: str) -> None:
        assert CsvDocument([[value, "x"]]).to_text() == "\ufeff" + expected + ",x\n"

    def test_lf_line_endings_and_blank_rows(self) -> None:
        text = CsvDocument([["a"], [], ["b", "c"]]).to_text()
        assert text == "\ufeffa\n\nb,c\n"
        assert "\r" not in text


class TestBuildCsv:
    """Tests for build_csv()."""

    def test_block_order(self, stats: ClickStats) -> None:
        """Summary, blank, per-date, blank, per-listing."""
        rows = build_csv(stats).rows
        assert rows == [
            ["Metric", "Value"],
            ["Total Clicks", "12"],
            ["Total Leads", "3"],
            ["Total Cost", "₹60.00"],
            ["CPC", "₹5.00"],
            ["CPL", "₹20.00"],
            [],
            ["Date", "Clicks"],
            ["2024-01-01", "5"],
            ["2024-01-02", "5"],
            ["2024-01-03", "2"],
            [],
            ["Listing", "Clicks", "Leads", "Cost (₹)"],
            ["a1b2c3d4…", "7", "3", "35.00"],
            ["External", "5", "0", "25.00"],
        ]

    def test_cpl_placeholder_without_leads(self) -> None:
        stats = ClickStats(total_clicks=1, total_leads=0, cpc=2.0)
        rows = build_csv(stats).rows
        assert ["CPL", "—"] in rows

    def test_cost_is_clicks_times_period_cpc(self) -> None:
        """Per-listing cost is reconstructed from the blended CPC."""
        stats = ClickStats.model_validate(
            {
                "cpc": 3.333,
                "clicksByListing": [{"listingId": "listing-0001", "count": 3}],
            }
        )
        assert build_csv(stats).rows[-1] == ["listing-…", "3", "0", "10.00"]

    def test_external_leads_match_null_listing(self) -> None:
        """Null listing id in leads matches the External clicks row."""
        stats = ClickStats.model_validate(
            {
                "cpc": 1,
                "clicksByListing": [{"listingId": None, "count": 4}],
                "leadsByListing": [{"listingId": None, "count": 2}],
            }
        )
        assert build_csv(stats).rows[-1] == ["External", "4", "2", "4.00"]

    def test_dates_limited_to_chart_range(self, stats: ClickStats) -> None:
        chart_range = resolve_range("custom", "2024-01-02", "2024-01-03")
        rows = build_csv(stats, chart_range).rows
        date_rows = rows[rows.index(["Date", "Clicks"]) + 1 : rows.index([], 7)]
        assert date_rows == [["2024-01-02", "5"], ["2024-01-03", "2"]]

    def test_round_trip_with_hostile_cells(self) -> None:
        """Commas, quotes and newlines survive a standard CSV parse."""
        stats = ClickStats.model_validate(
            {
                "totalClicks": 3,
                "cpc": 1.5,
                "clicksByDate": {"2024-01-01": 3},
                "clicksByListing": [
                    {"listingId": 'a,"b"\nc', "count": 1},
                    {"listingId": "x,y", "count": 2},
                ],
                "leadsByListing": [{"listingId": "x,y", "count": 1}],
            }
        )
        document = build_csv(stats, currency_symbol='R,"s"')
        assert parse(document) == document.rows

    def test_bytes_are_utf8_with_bom(self, stats: ClickStats) -> None:
        data = build_csv(stats).to_bytes()
        assert data.startswith(b"\xef\xbb\xbf")
        assert "₹60.00".encode("utf-8") in data


class TestListingBreakdown:
    """Tests for listing_breakdown()."""

    def test_first_lead_row_wins(self) -> None:
        stats = ClickStats.model_validate(
            {
                "clicksByListing": [{"listingId": "abc", "count": 2}],
                "leadsByListing": [
                    {"listingId": "abc", "count": 1},
                    {"listingId": "abc", "count": 9},
                ],
            }
        )
        assert listing_breakdown(stats)[0].leads == 1

    def test_short_ids_get_ellipsis(self) -> None:
        stats = ClickStats.model_validate({"clicksByListing": [{"listingId": "abc", "count": 1}]})
        assert listing_breakdown(stats)[0].label == "abc…"


class TestExportFile:
    """Tests for the download metadata."""

    def test_filename(self) -> None:
        assert export_filename(date(2024, 5, 6)) == "analytics-2024-05-06.csv"

    def test_mime_type(self) -> None:
        assert CSV_MIME_TYPE == "text/csv; charset=utf-8"
