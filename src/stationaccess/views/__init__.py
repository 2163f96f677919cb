"""Derived views over cached data: filtered lists, analytics, panels."""

from stationaccess.views.analytics import AnalyticsSummary, build_analytics
from stationaccess.views.derive import derive_view

__all__ = ["AnalyticsSummary", "build_analytics", "derive_view"]
