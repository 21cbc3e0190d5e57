"""Access gate - decides on every navigation whether a page may be shown."""

import asyncio
from typing import Any, Awaitable, Protocol, TypeVar

import structlog
from pydantic import ValidationError

from ..exceptions import BackendError
from ..models import ApprovalState
from ..session import Session, SessionProvider
from ..settings import DashboardConfig
from .polling import FocusEvents, PollingTask, Sleep
from .states import LOADING, GateState

logger = structlog.get_logger(__name__)

T = TypeVar("T")


def is_auth_path(path: str, prefix: str) -> bool:
    """True for the auth prefix itself or any page under it, by path segment."""
    prefix = prefix.rstrip("/")
    return path == prefix or path.startswith(prefix + "/")


class ApprovalSource(Protocol):
    """Anything that can report the agency's onboarding/approval state."""

    def get_onboarding_status(self) -> Awaitable[ApprovalState]: ...


class Navigator(Protocol):
    """Page router the gate redirects through."""

    def replace(self, path: str) -> None: ...


class AccessGate:
    """Onboarding/approval guard around the agency pages.

    Checks run in a fixed order: session present, auth page, onboarding page,
    server approval state (fetch failure fails closed to login), onboarding
    complete, approved (the pending-approval page itself stays reachable).

    While the pending-approval page is allowed, a PollingTask re-checks
    approval every `approval_poll_interval_seconds` and on every window focus;
    the first APPROVED answer cancels it and redirects to the dashboard.
    Navigating elsewhere or close() tears both down.

    Usage:
        gate = AccessGate(session, client, navigator, config, focus)
        await gate.navigate("/agency/analytics")
        content = gate.render(page)
        ...
        gate.close()
    """

    def __init__(
        self,
        session: SessionProvider,
        approvals: ApprovalSource,
        navigator: Navigator,
        config: DashboardConfig | None = None,
        focus: FocusEvents | None = None,
        sleep: Sleep | None = None,
    ):
        self.session = session
        self.approvals = approvals
        self.navigator = navigator
        self.config = config or DashboardConfig()
        self.routes = self.config.routes
        self.focus = focus or FocusEvents()
        self._sleep = sleep or asyncio.sleep

        self.state = GateState.UNKNOWN
        self.path: str | None = None
        self.approval: ApprovalState | None = None
        self.poller: PollingTask | None = None

        self._generation = 0
        self._closed = False
        self._unsubscribe_session = session.subscribe(self._on_session_change)

    # =========================================================================
    # NAVIGATION
    # =========================================================================

    async def navigate(self, path: str) -> GateState:
        """Re-evaluate access for `path`, redirecting if denied."""
        if self._closed:
            raise RuntimeError("AccessGate is closed")

        self._stop_approval_watch()
        self._generation += 1
        generation = self._generation
        self.path = path
        self.state = GateState.UNKNOWN

        state, redirect = await self._evaluate(path)

        if generation != self._generation or self._closed:
            # A newer navigation (or teardown) owns the state now
            logger.debug("gate_check_superseded", path=path)
            return self.state

        self._settle(state, redirect)
        if state == GateState.ALLOWED and path == self.routes.pending_approval:
            self._start_approval_watch()
        return state

    def render(self, content: T) -> T | Any | None:
        """LOADING while checking, nothing when denied, `content` when allowed."""
        if self.state == GateState.UNKNOWN:
            return LOADING
        if self.state == GateState.ALLOWED:
            return content
        return None

    def close(self) -> None:
        """Unmount: stop polling, drop the focus listener and session subscription."""
        self._stop_approval_watch()
        self._unsubscribe_session()
        self._closed = True

    # =========================================================================
    # RULES
    # =========================================================================

    async def _evaluate(self, path: str) -> tuple[GateState, str | None]:
        if not self.session.token:
            return GateState.DENIED_NO_SESSION, self.routes.login

        if is_auth_path(path, self.routes.auth_prefix) or path == self.routes.onboarding:
            return GateState.ALLOWED, None

        try:
            approval = await self.approvals.get_onboarding_status()
        except (BackendError, ValidationError) as e:
            logger.info("gate_status_fetch_failed", path=path, error=str(e))
            return GateState.DENIED_NO_SESSION, self.routes.login

        self.approval = approval

        if not approval.onboarding_completed:
            return GateState.DENIED_ONBOARDING_INCOMPLETE, self.routes.onboarding

        if not approval.approved:
            if path == self.routes.pending_approval:
                return GateState.ALLOWED, None
            return GateState.DENIED_PENDING_APPROVAL, self.routes.pending_approval

        return GateState.ALLOWED, None

    def _settle(self, state: GateState, redirect: str | None) -> None:
        self.state = state
        logger.info("gate_settled", path=self.path, state=state.value, redirect=redirect)
        if redirect is not None:
            self.navigator.replace(redirect)

    # =========================================================================
    # APPROVAL WATCH
    # =========================================================================

    def _start_approval_watch(self) -> None:
        self.poller = PollingTask(
            self._check_approval,
            interval=self.config.approval_poll_interval_seconds,
            name="approval-poll",
            sleep=self._sleep,
        )
        self.poller.start()
        self.focus.add_listener(self._on_focus)

    def _stop_approval_watch(self) -> None:
        self.focus.remove_listener(self._on_focus)
        if self.poller is not None:
            self.poller.cancel()
            self.poller = None

    def _on_focus(self) -> None:
        if self.poller is not None:
            self.poller.trigger()

    async def _check_approval(self) -> None:
        try:
            approval = await self.approvals.get_onboarding_status()
        except (BackendError, ValidationError) as e:
            # One failed tick is ignored; the schedule keeps running
            logger.debug("approval_poll_failed", error=str(e))
            return

        self.approval = approval
        if approval.approved and self.poller is not None:
            logger.info("approval_granted")
            self._stop_approval_watch()
            self.navigator.replace(self.routes.dashboard)

    def _on_session_change(self, session: Session) -> None:
        if session.is_authenticated or self.state == GateState.DENIED_NO_SESSION:
            return
        # Session torn down elsewhere (logout, 401): invalidate any in-flight check
        self._generation += 1
        self._stop_approval_watch()
        self._settle(GateState.DENIED_NO_SESSION, self.routes.login)
