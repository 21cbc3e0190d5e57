"""Access gate states."""

from enum import Enum


class GateState(str, Enum):
    """Outcome of one navigation check. Every navigation starts at UNKNOWN."""

    UNKNOWN = "unknown"
    DENIED_NO_SESSION = "denied_no_session"
    DENIED_ONBOARDING_INCOMPLETE = "denied_onboarding_incomplete"
    DENIED_PENDING_APPROVAL = "denied_pending_approval"
    ALLOWED = "allowed"

    @property
    def denied(self) -> bool:
        return self.name.startswith("DENIED_")


class _Loading:
    """Placeholder rendered while a check is in flight."""

    def __repr__(self) -> str:
        return "LOADING"


LOADING = _Loading()
