"""Reshape server aggregate statistics into chart-ready series."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from stationaccess.core.types import AggregateStats, ReportStatus

CHART_COLORS: list[str] = [
    "#f97316", "#ef4444", "#eab308", "#22c55e",
    "#3b82f6", "#8b5cf6", "#a855f7", "#6366f1",
]


class ChartPoint(BaseModel):
    name: str
    value: int


class AnalyticsSummary(BaseModel):
    """Series and headline numbers for the analytics screen."""

    category_series: list[ChartPoint] = Field(default_factory=list)
    urgency_series: list[ChartPoint] = Field(default_factory=list)
    station_series: list[ChartPoint] = Field(default_factory=list)
    city_series: list[ChartPoint] = Field(default_factory=list)
    total: int = 0
    resolved_count: int = 0
    pending_count: int = 0
    completion_rate: float = 0.0


def _series(counts: dict[str, int]) -> list[ChartPoint]:
    return [ChartPoint(name=name, value=value) for name, value in counts.items()]


def completion_rate(resolved: int, total: int) -> float:
    """Percentage of reports resolved, one decimal place. 0 when there are none."""
    if total <= 0:
        return 0.0
    return round(resolved / total * 100, 1)


def build_analytics(stats: AggregateStats | dict[str, Any] | None) -> AnalyticsSummary:
    """Build the analytics summary.

    Categories are ranked by count (ties keep server order), top stations
    keep the server's ranking, urgency and city follow mapping order.
    Missing or malformed fields give empty series and zero totals.
    """
    stats = AggregateStats.parse(stats)
    by_status = stats.by_status
    resolved = by_status.get(ReportStatus.RESOLVED, 0)
    pending = by_status.get(ReportStatus.SUBMITTED, 0) + by_status.get(ReportStatus.UNDER_REVIEW, 0)

    return AnalyticsSummary(
        category_series=sorted(_series(stats.by_category), key=lambda p: p.value, reverse=True),
        urgency_series=_series(stats.by_urgency),
        station_series=[ChartPoint(name=s.station, value=s.count) for s in stats.top_stations],
        city_series=_series(stats.by_city),
        total=stats.total,
        resolved_count=resolved,
        pending_count=pending,
        completion_rate=completion_rate(resolved, stats.total),
    )


def assign_colors(series: list[ChartPoint]) -> list[tuple[ChartPoint, str]]:
    """Pair each point with a palette color by position."""
    return [(point, CHART_COLORS[i % len(CHART_COLORS)]) for i, point in enumerate(series)]
