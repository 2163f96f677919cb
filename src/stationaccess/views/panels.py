"""Screen-level view state: report list, analytics and report detail."""

from __future__ import annotations

from typing import Any, Callable

from stationaccess.cache.models import QueryStatus
from stationaccess.cache.observer import QueryObserver
from stationaccess.cache.queries import ReportQueries, report_key, reports_key, stats_key
from stationaccess.core.errors import NotFoundError
from stationaccess.core.types import FilterState, Report
from stationaccess.views.analytics import AnalyticsSummary, build_analytics
from stationaccess.views.derive import derive_view


class _Panel:
    def __init__(self, queries: ReportQueries, on_change: Callable[[], None] | None = None) -> None:
        self._queries = queries
        self._observer = QueryObserver(queries.cache, on_change)

    @property
    def is_loading(self) -> bool:
        """True while there is nothing to show yet."""
        entry = self._observer.entry
        if self._observer.data is not None:
            return False
        return entry is None or entry.status in (QueryStatus.IDLE, QueryStatus.LOADING)

    @property
    def is_fetching(self) -> bool:
        entry = self._observer.entry
        return entry is not None and entry.is_loading

    @property
    def is_error(self) -> bool:
        entry = self._observer.entry
        return entry is not None and entry.is_error

    @property
    def error(self) -> BaseException | None:
        entry = self._observer.entry
        return entry.error if entry is not None else None

    def close(self) -> None:
        self._observer.close()


class ReportListPanel(_Panel):
    """The dashboard list: current filters plus the derived report sequence.

    While a new filter combination loads, the previous result stays on
    screen, filtered and sorted with the new settings.
    """

    def __init__(
        self,
        queries: ReportQueries,
        filters: FilterState | None = None,
        on_change: Callable[[], None] | None = None,
    ) -> None:
        super().__init__(queries, on_change)
        self._filters = filters or FilterState()

    @property
    def filters(self) -> FilterState:
        return self._filters

    def open(self) -> None:
        self.refresh()

    def refresh(self) -> None:
        filters = self._filters
        self._observer.observe(reports_key(filters), lambda: self._queries.list_reports(filters))

    def set_filters(self, filters: FilterState) -> None:
        self._filters = filters
        self.refresh()

    def update_filters(self, **changes: Any) -> None:
        self.set_filters(self._filters.with_changes(**changes))

    @property
    def reports(self) -> list[Report]:
        return derive_view(self._observer.data or [], self._filters)

    @property
    def is_empty(self) -> bool:
        return not self.is_loading and not self.is_error and not self.reports


class AnalyticsPanel(_Panel):
    def open(self) -> None:
        self._observer.observe(stats_key(), self._queries.stats)

    @property
    def summary(self) -> AnalyticsSummary | None:
        if self._observer.data is None:
            return None
        return build_analytics(self._observer.data)


class ReportDetailPanel(_Panel):
    """One report by id. Without an id the panel stays idle and never fetches."""

    def __init__(
        self,
        queries: ReportQueries,
        report_id: int | str | None = None,
        on_change: Callable[[], None] | None = None,
    ) -> None:
        super().__init__(queries, on_change)
        self._report_id = report_id

    @property
    def enabled(self) -> bool:
        return self._report_id is not None and self._report_id != ""

    def open(self) -> None:
        if not self.enabled:
            return
        report_id = self._report_id
        self._observer.observe(report_key(report_id), lambda: self._queries.report(report_id))

    @property
    def is_loading(self) -> bool:
        return self.enabled and super().is_loading

    @property
    def is_not_found(self) -> bool:
        return isinstance(self.error, NotFoundError)

    @property
    def report(self) -> Report | None:
        return self._observer.data
