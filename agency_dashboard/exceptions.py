"""Custom exceptions for the agency dashboard."""

from typing import Any


class DashboardError(Exception):
    """Base exception for dashboard errors."""

    pass


class ConfigLoadError(DashboardError):
    """Failed to load dashboard configuration."""

    pass


class BackendError(DashboardError):
    """Request to the backend failed.

    status_code is None for transport failures (timeout, connection refused).
    """

    def __init__(
        self,
        message: str | None,
        status_code: int | None = None,
        payload: Any = None,
    ):
        self.message = message
        self.status_code = status_code
        self.payload = payload
        super().__init__(
            f"Backend request failed (status={status_code}): {message or 'N/A'}"
        )


class SessionExpiredError(BackendError):
    """Backend answered 401; the stored session has been cleared."""

    def __init__(self, message: str | None = None, payload: Any = None):
        super().__init__(message, status_code=401, payload=payload)
