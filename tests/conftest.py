"""Shared test fixtures and helpers."""

from __future__ import annotations

import asyncio
from typing import Any

import pytest

from stationaccess.core.config import ApiConfig
from stationaccess.core.errors import NotFoundError
from stationaccess.core.types import FilterState

BASE_URL = "http://testserver"


class FakeClock:
    """Controllable replacement for ``time.monotonic``."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class StubReportsClient:
    """In-memory stand-in for the API client, used where HTTP is beside the point.

    ``gates`` maps a city name to an event the list call waits on, so tests
    can hold one filter's response back while another completes.
    """

    def __init__(self, reports: list[dict[str, Any]] | None = None, stats: Any = None) -> None:
        self.reports = list(reports or [])
        self.stats = stats if stats is not None else {}
        self.gates: dict[str, asyncio.Event] = {}
        self.list_calls: list[FilterState] = []
        self.report_calls: list[str] = []
        self.stats_calls = 0

    async def list_reports(self, filters: FilterState | None = None) -> list[dict[str, Any]]:
        filters = filters or FilterState()
        self.list_calls.append(filters)
        gate = self.gates.get(filters.city or "")
        if gate is not None:
            await gate.wait()
        return [r for r in self.reports if not filters.city or r.get("station_city") == filters.city]

    async def get_stats(self) -> Any:
        self.stats_calls += 1
        return self.stats

    async def get_report(self, report_id: int | str) -> dict[str, Any]:
        self.report_calls.append(str(report_id))
        for report in self.reports:
            if str(report["id"]) == str(report_id):
                return report
        raise NotFoundError()

    def resolve_photo_url(self, photo_url: str | None) -> str | None:
        if not photo_url:
            return None
        return f"{BASE_URL}/{photo_url.lstrip('/')}"


def make_report(report_id: int | str, **overrides: Any) -> dict[str, Any]:
    """Raw report payload as the API would return it."""
    data: dict[str, Any] = {
        "id": report_id,
        "station_city": "Edmonton",
        "station_name": "Central",
        "issue_category": "Broken Elevator",
        "description": "Elevator out of service",
        "urgency_level": "Medium",
        "status": "Submitted",
        "created_date": "2024-01-01T00:00:00Z",
    }
    data.update(overrides)
    return data


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def api_config() -> ApiConfig:
    return ApiConfig(base_url=BASE_URL, timeout_seconds=5.0, max_retries=0)


@pytest.fixture
def sample_reports() -> list[dict[str, Any]]:
    return [
        make_report(1, station_name="Central", urgency_level="Low",
                    created_date="2024-01-01T00:00:00Z"),
        make_report(2, station_name="Southgate", urgency_level="Critical",
                    created_date="2024-03-01T00:00:00Z"),
        make_report(3, station_city="Calgary", station_name="Tuscany", urgency_level="High",
                    status="Resolved", created_date="2024-02-01T00:00:00Z"),
    ]


@pytest.fixture
def stub_client(sample_reports) -> StubReportsClient:
    return StubReportsClient(
        reports=sample_reports,
        stats={
            "total": 3,
            "by_category": {"Broken Elevator": 3},
            "by_status": {"Submitted": 2, "Resolved": 1},
        },
    )
