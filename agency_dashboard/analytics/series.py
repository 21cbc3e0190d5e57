"""Dense daily click series for charting."""

from datetime import date
from typing import Mapping

import polars as pl

from .models import DailySeriesPoint
from .ranges import parse_day


def format_day_label(day: date) -> str:
    """Short chart label, e.g. "1 Jan 2024"."""
    return f"{day.day} {day.strftime('%b %Y')}"


def _sparse_counts_frame(clicks_by_date: Mapping[str, int]) -> pl.DataFrame:
    """Backend {YYYY-MM-DD: clicks} map as a (key, clicks) frame.

    Keys stay strings: a day matches only its exact ISO key, so "2024-1-2"
    never lands on 2 Jan.
    """
    return pl.DataFrame(
        {
            "key": list(clicks_by_date.keys()),
            "clicks": [int(c) for c in clicks_by_date.values()],
        },
        schema={"key": pl.Utf8, "clicks": pl.Int64},
    )


def expand_daily_series(
    start_str: str,
    end_str: str,
    clicks_by_date: Mapping[str, int] | None,
) -> list[DailySeriesPoint]:
    """One point per calendar day from start to end inclusive.

    Days absent from clicks_by_date get 0 clicks; keys outside the range are
    ignored. Stepping is done on date values (no time of day), so daylight
    saving transitions cannot skip or repeat a day. Returns an empty list if
    either bound is unparsable or start is after end.
    """
    start = parse_day(start_str)
    end = parse_day(end_str)
    if start is None or end is None or start > end:
        return []

    days = (
        pl.date_range(start, end, interval="1d", eager=True)
        .alias("date")
        .to_frame()
        .with_columns(pl.col("date").dt.strftime("%Y-%m-%d").alias("key"))
    )
    counts = _sparse_counts_frame(clicks_by_date or {})

    dense = (
        days.join(counts, on="key", how="left")
        .with_columns(pl.col("clicks").fill_null(0))
        .sort("date")
    )

    return [
        DailySeriesPoint(
            date=row["key"],
            display_label=format_day_label(row["date"]),
            clicks=row["clicks"],
        )
        for row in dense.to_dicts()
    ]
