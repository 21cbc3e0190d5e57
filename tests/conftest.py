"""Shared fixtures for the agency dashboard tests."""

from typing import Any, Callable

import httpx
import pytest

from agency_dashboard.api import BackendClient
from agency_dashboard.models import ClickStats
from agency_dashboard.session import MemorySessionStore, Session, SessionProvider
from agency_dashboard.settings import DashboardConfig

BASE_URL = "http://backend.test"


@pytest.fixture
def stats_payload() -> dict[str, Any]:
    """Click stats as the backend returns them (grouped listing counts)."""
    return {
        "totalClicks": 12,
        "totalLeads": 3,
        "totalCost": 60.0,
        "cpc": 5.0,
        "cpl": 20.0,
        "clicksByDate": {"2024-01-03": 2, "2024-01-01": 5, "2024-01-02": 5},
        "clicksByListing": [
            {"listingId": "a1b2c3d4-e5f6-7890", "_count": {"id": 7}},
            {"listingId": None, "_count": {"id": 5}},
        ],
        "leadsByListing": [
            {"listingId": "a1b2c3d4-e5f6-7890", "_count": {"id": 3}},
        ],
    }


@pytest.fixture
def stats(stats_payload: dict[str, Any]) -> ClickStats:
    return ClickStats.model_validate(stats_payload)


@pytest.fixture
def session() -> SessionProvider:
    """Signed-in agency session held in memory."""
    return SessionProvider(
        MemorySessionStore(Session(token="tok-123", agency_id="agency-1", agency_name="Acme Motors"))
    )


@pytest.fixture
def anonymous_session() -> SessionProvider:
    return SessionProvider(MemorySessionStore())


@pytest.fixture
def config() -> DashboardConfig:
    return DashboardConfig()


@pytest.fixture
def make_client() -> Callable[..., BackendClient]:
    """Build a BackendClient whose requests are answered by `handler`."""

    def _make(handler: Callable[[httpx.Request], Any], session: SessionProvider) -> BackendClient:
        return BackendClient(BASE_URL, session, transport=httpx.MockTransport(handler))

    return _make
