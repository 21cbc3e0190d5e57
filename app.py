"""Streamlit UI for the agency dashboard."""

import asyncio
from datetime import date

import plotly.graph_objects as go
import streamlit as st
import structlog

from agency_dashboard.analytics import (
    CSV_MIME_TYPE,
    RANGE_LABELS,
    DailySeriesPoint,
    compare_periods,
    export_filename,
    format_currency,
    format_number,
)
from agency_dashboard.api import BackendClient
from agency_dashboard.exceptions import BackendError, SessionExpiredError
from agency_dashboard.gate import AccessGate, GateState, is_auth_path
from agency_dashboard.logging_config import configure_logging
from agency_dashboard.services import AnalyticsView, ViewStatus
from agency_dashboard.session import FileSessionStore, SessionProvider
from agency_dashboard.settings import get_settings, load_dashboard_config

logger = structlog.get_logger(__name__)

# Page config
st.set_page_config(
    page_title="Agency Dashboard",
    page_icon="🚗",
    layout="wide",
)

settings = get_settings()
config = load_dashboard_config(settings.CONFIG_PATH)
routes = config.routes
display = config.display


class StreamlitNavigator:
    """Router backed by st.session_state; redirects take effect on the next rerun."""

    def replace(self, path: str) -> None:
        st.session_state["path"] = path
        st.session_state["redirected"] = True


def send_to_login() -> None:
    st.session_state["path"] = routes.login
    st.session_state.pop("analytics_view", None)


def get_session() -> SessionProvider:
    if "session" not in st.session_state:
        configure_logging(settings.LOG_LEVEL, settings.LOG_JSON)
        session = SessionProvider(FileSessionStore(settings.SESSION_PATH))
        # Logout or a 401 on any request lands on the login page
        session.on_cleared(send_to_login)
        st.session_state["session"] = session
    return st.session_state["session"]


def new_client(session: SessionProvider) -> BackendClient:
    return BackendClient(
        settings.API_BASE_URL,
        session,
        timeout=settings.REQUEST_TIMEOUT_SECONDS,
    )


def current_path() -> str:
    return st.session_state.setdefault("path", routes.dashboard)


def go_to(path: str) -> None:
    st.session_state["path"] = path
    st.rerun()


async def check_access(session: SessionProvider, path: str) -> AccessGate:
    async with new_client(session) as client:
        gate = AccessGate(session, client, StreamlitNavigator(), config)
        try:
            await gate.navigate(path)
        finally:
            # Background polling does not survive a script run; the pending page re-checks on a timer
            gate.close()
        return gate


def create_clicks_chart(series: list[DailySeriesPoint]) -> go.Figure:
    """Daily clicks line chart; the line is hidden when every day is zero."""
    all_zero = all(p.clicks == 0 for p in series)
    fig = go.Figure()

    fig.add_trace(go.Scatter(
        x=[p.display_label for p in series],
        y=[p.clicks for p in series],
        customdata=[p.date for p in series],
        name="Clicks",
        mode="lines" if all_zero else "lines+markers",
        line=dict(color="rgba(0,0,0,0)" if all_zero else "#667eea", width=2),
        hovertemplate="%{customdata}<br>Clicks: %{y}<extra></extra>",
    ))

    fig.update_layout(
        yaxis=dict(rangemode="tozero", tickformat="d"),
        height=320,
        margin=dict(t=12, r=12, l=0, b=0),
        plot_bgcolor="white",
    )

    return fig


# =============================================================================
# PAGES
# =============================================================================


def login_page(session: SessionProvider) -> None:
    st.title("Sign in")

    with st.form("login"):
        phone = st.text_input("Phone")
        password = st.text_input("Password", type="password")
        submitted = st.form_submit_button("Sign in", type="primary")

    if not submitted:
        return

    async def _login():
        async with new_client(session) as client:
            return await client.login(phone, password=password)

    try:
        result = asyncio.run(_login())
    except BackendError as e:
        st.error(e.message or "Login failed.")
        return

    if not result.token:
        st.error("Login failed.")
        return
    go_to(routes.dashboard)


def dashboard_page(session: SessionProvider) -> None:
    st.title("Dashboard")

    async def _load():
        async with new_client(session) as client:
            return await client.get_dashboard_summary(session.agency_id)

    try:
        summary = asyncio.run(_load())
    except SessionExpiredError:
        st.rerun()
    except BackendError:
        st.error("Failed to load dashboard. Please try again.")
        return

    col1, col2, col3, col4 = st.columns(4)
    with col1:
        st.metric("Active listings", format_number(summary.active_listings, locale=display.number_locale))
    with col2:
        st.metric("Total clicks", format_number(summary.total_clicks, locale=display.number_locale))
    with col3:
        st.metric("Total bill", format_currency(summary.total_bill, display.currency_symbol, display.number_locale))
    with col4:
        st.metric("CPL", f"{display.currency_symbol}{summary.cpl:.2f}")

    st.divider()

    for column, comparison in zip(st.columns(4), compare_periods(summary)):
        with column:
            st.metric(
                comparison.label,
                format_number(comparison.current, locale=display.number_locale),
                delta=f"{comparison.pct_change}%" if comparison.show_change else None,
            )

    if summary.top_listings:
        st.subheader("Top listings")
        for listing in summary.top_listings[:3]:
            st.write(f"{listing.brand} {listing.model} ({listing.year}) · {listing.clicks} clicks")


def analytics_page(session: SessionProvider) -> None:
    view: AnalyticsView = st.session_state.get("analytics_view")
    if view is None:
        view = AnalyticsView(None, session, config)
        st.session_state["analytics_view"] = view

    st.title("Analytics")

    kinds = list(RANGE_LABELS)
    kind = st.radio(
        "Period",
        options=kinds,
        index=kinds.index(config.default_range),
        format_func=RANGE_LABELS.get,
        horizontal=True,
    )

    custom_start = custom_end = None
    if kind == "custom":
        col1, col2 = st.columns(2)
        with col1:
            start = st.date_input("Start date", value=None, max_value=date.today())
        with col2:
            end = st.date_input("End date", value=None, max_value=date.today())
        custom_start = start.isoformat() if start else None
        custom_end = end.isoformat() if end else None

    async def _select():
        async with new_client(session) as client:
            view.client = client
            await view.apply_selection(kind, custom_start, custom_end)

    with st.spinner("Loading analytics..."):
        asyncio.run(_select())

    if session.token is None:
        st.rerun()

    if view.status == ViewStatus.NOT_AUTHENTICATED:
        st.error(view.message)
        if st.button("Go to sign in"):
            go_to(routes.login)
        return
    if view.status == ViewStatus.AWAITING_RANGE:
        st.info(view.message)
    if view.status == ViewStatus.ERROR:
        st.error(view.message)
        if st.button("Dismiss"):
            view.dismiss_error()
            st.rerun()

    if view.stats is None:
        if view.status != ViewStatus.AWAITING_RANGE:
            st.info("No analytics for the selected period. Choose a date range or try again later.")
        return

    stats = view.stats
    metrics = view.metrics
    locale = display.number_locale

    col1, col2, col3, col4, col5 = st.columns(5)
    with col1:
        st.metric("Clicks", format_number(stats.total_clicks, locale=locale))
    with col2:
        st.metric("Leads", format_number(stats.total_leads, locale=locale))
    with col3:
        st.metric("Cost", format_currency(stats.total_cost, display.currency_symbol, locale))
    with col4:
        st.metric("CPC", metrics.cpc_display)
    with col5:
        st.metric("CPL", metrics.cpl_display)

    series = view.series
    if series:
        trend = view.trend
        st.subheader(f"Clicks over time · {trend.direction} ({trend.clicks_per_day:+.2f}/day)")
        st.plotly_chart(create_clicks_chart(series), use_container_width=True)

    listings = view.listings
    if listings:
        st.subheader("Clicks & leads by listing")
        st.dataframe(
            [
                {
                    "Listing": item.label,
                    "Clicks": item.clicks,
                    "Leads": item.leads,
                    f"Cost ({display.currency_symbol})": format_number(item.cost, 2, locale),
                }
                for item in listings
            ],
            use_container_width=True,
            hide_index=True,
        )

    document = view.export()
    if document is not None:
        st.download_button(
            "Export spreadsheet",
            data=document.to_bytes(),
            file_name=export_filename(),
            mime=CSV_MIME_TYPE,
        )


def onboarding_page() -> None:
    st.title("Complete your profile")
    st.info("Finish onboarding to start listing on the marketplace.")


def pending_approval_page(session: SessionProvider) -> None:
    st.title("Pending approval")
    st.write("Your account is currently under review.")
    st.write("We will notify you as soon as your approval is complete.")

    @st.fragment(run_every=config.approval_poll_interval_seconds)
    def approval_watch() -> None:
        async def _status():
            async with new_client(session) as client:
                return await client.get_onboarding_status()

        try:
            status = asyncio.run(_status())
        except SessionExpiredError:
            st.rerun(scope="app")
        except BackendError:
            # A failed check is ignored until the next tick
            return
        if status.approved:
            logger.info("approval_granted")
            st.session_state["path"] = routes.dashboard
            st.rerun(scope="app")

    approval_watch()


# =============================================================================
# SHELL
# =============================================================================


PAGES = {
    routes.dashboard: ("Dashboard", dashboard_page),
    routes.analytics: ("Analytics", analytics_page),
}


def main():
    session = get_session()
    path = current_path()

    if is_auth_path(path, routes.auth_prefix):
        login_page(session)
        return

    with st.spinner("Checking access..."):
        gate = asyncio.run(check_access(session, path))

    if st.session_state.pop("redirected", False):
        st.rerun()

    if gate.state != GateState.ALLOWED:
        return

    if path == routes.onboarding:
        onboarding_page()
        return
    if path == routes.pending_approval:
        pending_approval_page(session)
        return

    with st.sidebar:
        st.header(session.read().agency_name or "Agency")
        for page_path, (label, _) in PAGES.items():
            if st.button(label, use_container_width=True, disabled=page_path == path):
                go_to(page_path)
        st.divider()
        if st.button("Log out", use_container_width=True):
            session.clear()
            go_to(routes.login)

    _, render = PAGES.get(path, PAGES[routes.dashboard])
    render(session)


if __name__ == "__main__":
    main()
