"""CSV export of click analytics (summary, per-date and per-listing blocks)."""

import csv
import io
from dataclasses import dataclass, field
from datetime import date

from ..models import ClickStats
from .metrics import EM_DASH, format_rate
from .models import ListingBreakdown
from .ranges import DateRange

CSV_MIME_TYPE = "text/csv; charset=utf-8"

# Lets spreadsheet tools detect UTF-8 (needed for the rupee sign)
UTF8_BOM = "\ufeff"

EXTERNAL_LABEL = "External"
ELLIPSIS = "…"


@dataclass
class CsvDocument:
    """Ordered rows of cell strings. An empty row is a blank separator line."""

    rows: list[list[str]] = field(default_factory=list)

    def to_text(self) -> str:
        """BOM-prefixed, LF-terminated CSV with minimal (RFC 4180) quoting."""
        output = io.StringIO()
        writer = csv.writer(output, lineterminator="\n")
        writer.writerows(self.rows)
        return UTF8_BOM + output.getvalue()

    def to_bytes(self) -> bytes:
        return self.to_text().encode("utf-8")


def listing_label(listing_id: str | None, id_length: int = 8) -> str:
    """Short listing identifier, or "External" for off-catalog clicks."""
    if listing_id is None:
        return EXTERNAL_LABEL
    return listing_id[:id_length] + ELLIPSIS


def listing_breakdown(stats: ClickStats, id_length: int = 8) -> list[ListingBreakdown]:
    """Per-listing clicks with matched leads and reconstructed cost.

    Leads are matched by listing id (a null id matches the null-id lead row)
    and default to 0. Cost is clicks * the period's blended CPC: the backend
    does not return per-listing cost.
    """
    leads_by_id: dict[str | None, int] = {}
    for row in stats.leads_by_listing:
        leads_by_id.setdefault(row.listing_id, row.count)

    return [
        ListingBreakdown(
            listing_id=row.listing_id,
            label=listing_label(row.listing_id, id_length),
            clicks=row.count,
            leads=leads_by_id.get(row.listing_id, 0),
            cost=row.count * stats.cpc,
        )
        for row in stats.clicks_by_listing
    ]


def build_csv(
    stats: ClickStats,
    chart_range: DateRange | None = None,
    currency_symbol: str = "₹",
    listing_id_length: int = 8,
) -> CsvDocument:
    """Build the analytics spreadsheet.

    Row order: Metric/Value summary, blank, Date/Clicks rows ascending by
    date (limited to chart_range when given), blank, per-listing rows.
    """
    cpl_cell = (
        format_rate(stats.cpl, currency_symbol) if stats.total_leads > 0 else EM_DASH
    )
    rows: list[list[str]] = [
        ["Metric", "Value"],
        ["Total Clicks", str(stats.total_clicks)],
        ["Total Leads", str(stats.total_leads)],
        ["Total Cost", format_rate(stats.total_cost, currency_symbol)],
        ["CPC", format_rate(stats.cpc, currency_symbol)],
        ["CPL", cpl_cell],
        [],
        ["Date", "Clicks"],
    ]

    for day, clicks in sorted(stats.clicks_by_date.items()):
        if chart_range is not None and not chart_range.contains(day):
            continue
        rows.append([day, str(clicks)])

    rows.append([])
    rows.append(["Listing", "Clicks", "Leads", f"Cost ({currency_symbol})"])
    for item in listing_breakdown(stats, listing_id_length):
        rows.append([item.label, str(item.clicks), str(item.leads), f"{item.cost:.2f}"])

    return CsvDocument(rows=rows)


def export_filename(today: date | None = None) -> str:
    """analytics-YYYY-MM-DD.csv for the current date."""
    return f"analytics-{(today or date.today()).isoformat()}.csv"
