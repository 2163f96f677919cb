"""Query keys, stale times and fetchers for the reports API."""

from __future__ import annotations

from typing import Any, Callable

from stationaccess.api.client import ReportsApiClient
from stationaccess.cache.models import CacheEntry, QueryKey
from stationaccess.cache.store import QueryCache
from stationaccess.core.config import CacheConfig
from stationaccess.core.types import AggregateStats, FilterState, Report

REPORTS = "reports"
REPORT = "report"
STATS = "stats"


def reports_key(filters: FilterState | None = None) -> QueryKey:
    return QueryKey.of(REPORTS, (filters or FilterState()).to_params())


def report_key(report_id: int | str) -> QueryKey:
    return QueryKey.of(REPORT, {"id": str(report_id)})


def stats_key() -> QueryKey:
    return QueryKey.of(STATS)


def by_resource(*resources: str) -> Callable[[QueryKey], bool]:
    """Predicate matching every key for any of *resources*."""
    wanted = set(resources)
    return lambda key: key.resource in wanted


def parse_reports(data: Any) -> list[Report]:
    if not isinstance(data, list):
        raise TypeError(f"Expected a list of reports, got {type(data).__name__}")
    return [Report.model_validate(item) for item in data]


class ReportQueries:
    """Reads reports, single records and stats through the shared cache."""

    def __init__(
        self,
        client: ReportsApiClient,
        cache: QueryCache,
        config: CacheConfig | None = None,
    ) -> None:
        self._client = client
        self._cache = cache
        self._config = config or CacheConfig()

    @property
    def cache(self) -> QueryCache:
        return self._cache

    # -- snapshot reads ------------------------------------------------------

    def list_reports(self, filters: FilterState | None = None) -> CacheEntry:
        filters = filters or FilterState()
        return self._cache.read(
            reports_key(filters), self._reports_fetcher(filters), self._config.list_stale_ms
        )

    def stats(self) -> CacheEntry:
        return self._cache.read(stats_key(), self._fetch_stats, self._config.stats_stale_ms)

    def report(self, report_id: int | str | None) -> CacheEntry | None:
        """Read one report. Returns ``None`` without fetching when no id is given."""
        if report_id is None or report_id == "":
            return None
        return self._cache.read(
            report_key(report_id), self._report_fetcher(report_id), self._config.record_stale_ms
        )

    # -- awaited reads -------------------------------------------------------

    async def fetch_reports(self, filters: FilterState | None = None) -> list[Report]:
        filters = filters or FilterState()
        entry = await self._cache.fetch(
            reports_key(filters), self._reports_fetcher(filters), self._config.list_stale_ms
        )
        return _unwrap(entry)

    async def fetch_stats(self) -> AggregateStats:
        entry = await self._cache.fetch(stats_key(), self._fetch_stats, self._config.stats_stale_ms)
        return _unwrap(entry)

    async def fetch_report(self, report_id: int | str) -> Report:
        entry = await self._cache.fetch(
            report_key(report_id), self._report_fetcher(report_id), self._config.record_stale_ms
        )
        return _unwrap(entry)

    # -- fetchers ------------------------------------------------------------

    def _reports_fetcher(self, filters: FilterState):
        async def fetch() -> list[Report]:
            return parse_reports(await self._client.list_reports(filters))
        return fetch

    def _report_fetcher(self, report_id: int | str):
        async def fetch() -> Report:
            return Report.model_validate(await self._client.get_report(report_id))
        return fetch

    async def _fetch_stats(self) -> AggregateStats:
        return AggregateStats.parse(await self._client.get_stats())


def _unwrap(entry: CacheEntry) -> Any:
    if entry.is_error and entry.error is not None:
        raise entry.error
    return entry.data
