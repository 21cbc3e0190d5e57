"""Backend endpoint paths."""

AUTH_LOGIN = "/auth/login"
ONBOARDING_STATUS = "/onboarding"


def click_stats(agency_id: str) -> str:
    return f"/click/stats/{agency_id}"


def dashboard_summary(agency_id: str) -> str:
    return f"/click/dashboard-summary/{agency_id}"
