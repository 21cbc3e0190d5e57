"""Analytics view state - fetches stats per range and keeps the last good result."""

from datetime import datetime
from enum import Enum

import structlog
from pydantic import ValidationError

from ..analytics import (
    ClickTrend,
    CsvDocument,
    DailySeriesPoint,
    DateRange,
    DerivedMetrics,
    build_csv,
    click_trend,
    derive_metrics,
    expand_daily_series,
    listing_breakdown,
    resolve_range,
)
from ..analytics.models import ListingBreakdown
from ..api import BackendClient
from ..exceptions import BackendError, SessionExpiredError
from ..models import ClickStats
from ..session import SessionProvider
from ..settings import DashboardConfig

logger = structlog.get_logger(__name__)

NOT_AUTHENTICATED_MESSAGE = "You are not signed in as an agency. Please log in."
AWAITING_RANGE_MESSAGE = "Choose a start and end date to load analytics."
FETCH_FAILED_MESSAGE = "Failed to load analytics."


class ViewStatus(str, Enum):
    """What the analytics page should show next to (or instead of) its data."""

    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    NOT_AUTHENTICATED = "not_authenticated"
    AWAITING_RANGE = "awaiting_range"
    ERROR = "error"


class AnalyticsView:
    """State behind the analytics page.

    Each range selection issues at most one stats request, tagged with a
    generation number. A response whose generation has been superseded by a
    newer selection is dropped, so the last selection made wins regardless
    of the order responses arrive in. Failed fetches leave the previously
    loaded stats in place.

    Usage:
        view = AnalyticsView(client, session, config)
        await view.select_range("custom", "2024-01-01", "2024-01-31")
        points = view.series
    """

    def __init__(
        self,
        client: BackendClient,
        session: SessionProvider,
        config: DashboardConfig | None = None,
    ):
        self.client = client
        self.session = session
        self.config = config or DashboardConfig()

        self.stats: ClickStats | None = None
        self.stats_range: DateRange | None = None  # range the loaded stats belong to
        self.range: DateRange | None = None
        self.status = ViewStatus.IDLE
        self.message: str | None = None
        self._generation = 0
        self._selection: tuple[str, str | None, str | None] | None = None

    @property
    def loading(self) -> bool:
        return self.status == ViewStatus.LOADING

    async def apply_selection(
        self,
        kind: str,
        custom_start: str | None = None,
        custom_end: str | None = None,
        now: datetime | None = None,
    ) -> bool:
        """select_range() only if the picked range differs from the last pick.

        Hosts that re-run on every interaction (Streamlit) call this so reruns
        do not refetch. A view stuck on NOT_AUTHENTICATED always retries.
        Returns True if a selection was made.
        """
        selection = (kind, custom_start, custom_end)
        if selection == self._selection and self.status != ViewStatus.NOT_AUTHENTICATED:
            return False
        self._selection = selection
        await self.select_range(kind, custom_start, custom_end, now=now)
        return True

    async def select_range(
        self,
        kind: str,
        custom_start: str | None = None,
        custom_end: str | None = None,
        now: datetime | None = None,
    ) -> None:
        """Resolve the selection and load stats for it."""
        self._generation += 1
        generation = self._generation

        agency_id = self.session.agency_id
        if not agency_id:
            self._set(ViewStatus.NOT_AUTHENTICATED, NOT_AUTHENTICATED_MESSAGE)
            return

        date_range = resolve_range(
            kind,
            custom_start,
            custom_end,
            now=now,
            presets=self.config.range_presets,
        )
        if date_range is None:
            self.range = None
            self._set(ViewStatus.AWAITING_RANGE, AWAITING_RANGE_MESSAGE)
            return

        self.range = date_range
        self._set(ViewStatus.LOADING, None)
        logger.debug(
            "click_stats_fetch",
            generation=generation,
            start=date_range.start_str,
            end=date_range.end_str,
        )

        try:
            stats = await self.client.get_click_stats(
                agency_id, date_range.start_str, date_range.end_str
            )
        except SessionExpiredError:
            if generation == self._generation:
                self._set(ViewStatus.NOT_AUTHENTICATED, NOT_AUTHENTICATED_MESSAGE)
            return
        except BackendError as e:
            if generation != self._generation:
                logger.debug("stale_click_stats_error_dropped", generation=generation)
                return
            logger.warning("click_stats_fetch_failed", status_code=e.status_code)
            self._set(ViewStatus.ERROR, e.message or FETCH_FAILED_MESSAGE)
            return
        except ValidationError as e:
            if generation != self._generation:
                return
            # 200 with a body that is not click stats (proxy page, malformed JSON)
            logger.warning("click_stats_unparsable", error_count=e.error_count())
            self._set(ViewStatus.ERROR, FETCH_FAILED_MESSAGE)
            return

        if generation != self._generation:
            logger.debug("stale_click_stats_dropped", generation=generation)
            return

        self.stats = stats
        self.stats_range = date_range
        self._set(ViewStatus.READY, None)

    def dismiss_error(self) -> None:
        if self.status == ViewStatus.ERROR:
            self._set(ViewStatus.READY if self.stats else ViewStatus.IDLE, None)

    # =========================================================================
    # DERIVED DATA
    # =========================================================================

    @property
    def series(self) -> list[DailySeriesPoint]:
        """Dense daily series for the current range; zeros until stats load."""
        if self.range is None:
            return []
        clicks_by_date = self.stats.clicks_by_date if self.stats else {}
        return expand_daily_series(self.range.start_str, self.range.end_str, clicks_by_date)

    @property
    def metrics(self) -> DerivedMetrics | None:
        if self.stats is None:
            return None
        return derive_metrics(self.stats, self.config.display.currency_symbol)

    @property
    def listings(self) -> list[ListingBreakdown]:
        if self.stats is None:
            return []
        return listing_breakdown(self.stats, self.config.display.listing_id_length)

    @property
    def trend(self) -> ClickTrend:
        return click_trend(self.series)

    def export(self) -> CsvDocument | None:
        """Spreadsheet for the loaded stats, or None before the first load."""
        if self.stats is None:
            return None
        return build_csv(
            self.stats,
            self.stats_range,
            currency_symbol=self.config.display.currency_symbol,
            listing_id_length=self.config.display.listing_id_length,
        )

    def _set(self, status: ViewStatus, message: str | None) -> None:
        self.status = status
        self.message = message
