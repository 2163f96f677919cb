"""Filter and sort cached report collections into the list a view shows.

Sorting happens here; the API returns reports unordered.
Everything here is pure. The same inputs always produce the same sequence,
and the input collection is never modified.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable

from stationaccess.core.types import FilterState, Report, SortOrder, UrgencyLevel

_EARLIEST = float("-inf")


def parse_timestamp(value: str | None) -> float | None:
    """Parse an ISO-8601 date or datetime into epoch seconds.

    Naive values are taken as UTC. Returns ``None`` when missing or invalid.
    """
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.strip())
    except (TypeError, ValueError):
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.timestamp()


def matches(report: Report, filters: FilterState) -> bool:
    """True when *report* satisfies every active constraint in *filters*."""
    if filters.status and report.status != filters.status:
        return False
    if filters.urgency and report.urgency_level != filters.urgency:
        return False
    if filters.city and report.station_city != filters.city:
        return False
    needle = (filters.search or "").strip().lower()
    if needle:
        haystacks = (report.station_name, report.station_city, report.description)
        if not any(needle in text.lower() for text in haystacks):
            return False
    return True


def filter_reports(reports: Iterable[Report], filters: FilterState) -> list[Report]:
    return [r for r in reports if matches(r, filters)]


def sort_reports(reports: Iterable[Report], order: SortOrder) -> list[Report]:
    """Stable descending sort by creation time or urgency rank."""
    if order == SortOrder.URGENCY_DESC:
        return sorted(reports, key=lambda r: UrgencyLevel.rank_of(r.urgency_level), reverse=True)

    def created(report: Report) -> float:
        ts = parse_timestamp(report.created_date)
        return _EARLIEST if ts is None else ts

    return sorted(reports, key=created, reverse=True)


def derive_view(reports: Iterable[Report], filters: FilterState | None = None) -> list[Report]:
    """Return the reports matching *filters*, in the order they ask for."""
    filters = filters or FilterState()
    return sort_reports(filter_reports(reports, filters), filters.sort)
