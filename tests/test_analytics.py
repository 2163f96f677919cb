"""Tests for the analytics summary built from aggregate stats."""

from __future__ import annotations

from stationaccess.core.types import AggregateStats
from stationaccess.views.analytics import (
    CHART_COLORS,
    ChartPoint,
    assign_colors,
    build_analytics,
    completion_rate,
)


class TestCompletionRate:
    def test_zero_total(self):
        assert completion_rate(0, 0) == 0.0

    def test_three_of_ten(self):
        assert completion_rate(3, 10) == 30.0

    def test_rounded_to_one_decimal(self):
        assert completion_rate(1, 3) == 33.3
        assert completion_rate(2, 3) == 66.7


class TestBuildAnalytics:
    def setup_method(self):
        self.stats = {
            "total": 10,
            "by_category": {"Vandalism": 2, "Broken Elevator": 5, "Lighting Issue": 2, "Other": 1},
            "by_urgency": {"Low": 1, "Critical": 4},
            "by_status": {"Submitted": 4, "Under Review": 2, "In Progress": 1, "Resolved": 3},
            "by_city": {"Edmonton": 6, "Calgary": 4},
            "top_stations": [
                {"station": "Central", "count": 3},
                {"station": "Tuscany", "count": 5},
            ],
        }

    def test_headline_numbers(self):
        summary = build_analytics(self.stats)
        assert summary.total == 10
        assert summary.resolved_count == 3
        assert summary.pending_count == 6
        assert summary.completion_rate == 30.0

    def test_categories_ranked_by_count_ties_stable(self):
        names = [p.name for p in build_analytics(self.stats).category_series]
        assert names == ["Broken Elevator", "Vandalism", "Lighting Issue", "Other"]

    def test_top_stations_keep_server_order(self):
        series = build_analytics(self.stats).station_series
        assert series == [ChartPoint(name="Central", value=3), ChartPoint(name="Tuscany", value=5)]

    def test_urgency_and_city_follow_mapping_order(self):
        summary = build_analytics(self.stats)
        assert [p.name for p in summary.urgency_series] == ["Low", "Critical"]
        assert [p.name for p in summary.city_series] == ["Edmonton", "Calgary"]

    def test_accepts_parsed_stats(self):
        summary = build_analytics(AggregateStats.parse(self.stats))
        assert summary.total == 10

    def test_none_gives_empty_summary(self):
        summary = build_analytics(None)
        assert summary.total == 0
        assert summary.category_series == []
        assert summary.station_series == []
        assert summary.completion_rate == 0.0

    def test_malformed_fields_collapse(self):
        summary = build_analytics({
            "total": "lots",
            "by_category": "oops",
            "by_status": {"Resolved": "x", "Submitted": 2},
            "top_stations": [{"station": "Central", "count": "many"}, "junk"],
        })
        assert summary.total == 0
        assert summary.category_series == []
        assert summary.resolved_count == 0
        assert summary.pending_count == 2
        assert summary.station_series == [ChartPoint(name="Central", value=0)]


class TestColors:
    def test_palette_wraps(self):
        series = [ChartPoint(name=str(i), value=i) for i in range(len(CHART_COLORS) + 1)]
        colored = assign_colors(series)
        assert colored[0][1] == CHART_COLORS[0]
        assert colored[-1][1] == CHART_COLORS[0]
