from .analytics_service import AnalyticsView, ViewStatus

__all__ = ["AnalyticsView", "ViewStatus"]
