"""Async client for the marketplace backend."""

from typing import Any

import httpx
import structlog

from ..exceptions import BackendError, SessionExpiredError
from ..models import ApprovalState, ClickStats, DashboardSummary
from ..session import Session, SessionProvider
from . import endpoints

logger = structlog.get_logger(__name__)


class BackendClient:
    """Thin typed wrapper over httpx.AsyncClient.

    Every request carries the session token as a bearer credential. A 401
    from any endpoint clears the session (listeners redirect to login) and
    raises SessionExpiredError.

    Usage:
        async with BackendClient(settings.API_BASE_URL, session) as client:
            stats = await client.get_click_stats(agency_id, "2024-01-01", "2024-01-31")
    """

    def __init__(
        self,
        base_url: str,
        session: SessionProvider,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.session = session
        self._http = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            headers={"Content-Type": "application/json"},
            transport=transport,
        )

    async def __aenter__(self) -> "BackendClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    # =========================================================================
    # AUTH / ONBOARDING
    # =========================================================================

    async def login(
        self,
        phone: str,
        password: str | None = None,
        otp: str | None = None,
    ) -> Session:
        """Log in with password or OTP and persist the returned session."""
        payload: dict[str, Any] = {"phone": phone}
        if password is not None:
            payload["password"] = password
        if otp is not None:
            payload["otp"] = otp

        data = await self._request("POST", endpoints.AUTH_LOGIN, json=payload)
        agency = data.get("agency") or {}
        session = Session(
            token=data.get("accessToken"),
            agency_id=agency.get("id"),
            agency_name=agency.get("name"),
        )
        if session.token:
            self.session.write(session)
        return session

    def logout(self) -> None:
        self.session.clear()

    async def get_onboarding_status(self) -> ApprovalState:
        data = await self._request("GET", endpoints.ONBOARDING_STATUS)
        return ApprovalState.model_validate(data)

    # =========================================================================
    # CLICK ANALYTICS
    # =========================================================================

    async def get_click_stats(
        self,
        agency_id: str,
        start_date: str | None = None,
        end_date: str | None = None,
    ) -> ClickStats:
        """Fetch click stats; date params are sent only when supplied (YYYY-MM-DD)."""
        params: dict[str, str] = {}
        if start_date:
            params["startDate"] = start_date
        if end_date:
            params["endDate"] = end_date

        data = await self._request(
            "GET", endpoints.click_stats(agency_id), params=params or None
        )
        return ClickStats.model_validate(data)

    async def get_dashboard_summary(self, agency_id: str) -> DashboardSummary:
        data = await self._request("GET", endpoints.dashboard_summary(agency_id))
        return DashboardSummary.model_validate(data)

    # =========================================================================
    # TRANSPORT
    # =========================================================================

    async def _request(self, method: str, url: str, **kwargs: Any) -> Any:
        headers = {}
        token = self.session.token
        if token:
            headers["Authorization"] = f"Bearer {token}"

        try:
            response = await self._http.request(method, url, headers=headers, **kwargs)
        except httpx.HTTPError as e:
            logger.warning("backend_transport_error", method=method, url=url, error=str(e))
            raise BackendError(None) from e

        if response.status_code == 401:
            logger.info("backend_unauthorized", method=method, url=url)
            self.session.clear()
            raise SessionExpiredError(_error_message(response), payload=_json_or_none(response))

        if response.is_error:
            message = _error_message(response)
            logger.warning(
                "backend_error",
                method=method,
                url=url,
                status_code=response.status_code,
                message=message,
            )
            raise BackendError(
                message,
                status_code=response.status_code,
                payload=_json_or_none(response),
            )

        return _json_or_none(response)


def _json_or_none(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return None


def _error_message(response: httpx.Response) -> str | None:
    """Backend errors carry {"message": ...}; message may also be a list."""
    data = _json_or_none(response)
    if not isinstance(data, dict):
        return None
    message = data.get("message")
    if isinstance(message, list):
        return "; ".join(str(m) for m in message) or None
    return str(message) if message else None
