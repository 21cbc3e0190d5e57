"""Trend fitting on the dense daily click series."""

from typing import Sequence

import numpy as np
from scipy import stats

from .models import ClickTrend, DailySeriesPoint

STABLE = ClickTrend(direction="stable", clicks_per_day=0.0)


def click_trend(
    series: Sequence[DailySeriesPoint],
    p_threshold: float = 0.05,
    r_threshold: float = 0.3,
) -> ClickTrend:
    """Fit clicks against day index and classify the slope.

    Zero-filled days count, so a range that goes quiet trends down. The
    slope reads as clicks gained (or lost) per day and is reported even
    when it is not significant enough to call a direction.

    Args:
        series: Dense series from expand_daily_series(), oldest day first
        p_threshold: Slope p-value needed to call a direction
        r_threshold: Minimum |r| needed to call a direction

    Returns:
        STABLE for fewer than three days or a constant series.
    """
    clicks = np.array([point.clicks for point in series], dtype=float)
    if clicks.size < 3 or np.ptp(clicks) == 0:
        return STABLE

    fit = stats.linregress(np.arange(clicks.size), clicks)
    slope = round(float(fit.slope), 2)

    if fit.pvalue < p_threshold and abs(fit.rvalue) > r_threshold:
        return ClickTrend("increasing" if slope > 0 else "decreasing", slope)
    return ClickTrend("stable", slope)
