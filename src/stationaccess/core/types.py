"""Core type definitions shared across all stationaccess modules."""

from __future__ import annotations

from collections.abc import Mapping
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator


class IssueCategory(StrEnum):
    """Kinds of accessibility issue a rider can report."""

    SLIPPERY_SURFACE = "Slippery Surface"
    BLOCKED_ACCESS = "Blocked Access"
    BROKEN_ELEVATOR = "Broken Elevator"
    LIGHTING_ISSUE = "Lighting Issue"
    VANDALISM = "Vandalism"
    SAFETY_CONCERN = "Safety Concern"
    OTHER = "Other"


class UrgencyLevel(StrEnum):
    """Ordered urgency scale, Low (1) through Critical (4)."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    CRITICAL = "Critical"

    @property
    def rank(self) -> int:
        return _URGENCY_RANK[self]

    @classmethod
    def rank_of(cls, value: Any) -> int:
        """Return the rank of *value*, or 0 when it is not a known level."""
        try:
            return cls(value).rank
        except ValueError:
            return 0


_URGENCY_RANK: dict[UrgencyLevel, int] = {
    UrgencyLevel.LOW: 1,
    UrgencyLevel.MEDIUM: 2,
    UrgencyLevel.HIGH: 3,
    UrgencyLevel.CRITICAL: 4,
}


class ReportStatus(StrEnum):
    """Lifecycle status of a report. Transitions are decided by staff."""

    SUBMITTED = "Submitted"
    UNDER_REVIEW = "Under Review"
    IN_PROGRESS = "In Progress"
    RESOLVED = "Resolved"
    CLOSED = "Closed"


class SortOrder(StrEnum):
    """Orderings supported by the report list view."""

    CREATED_DESC = "created_date:desc"
    URGENCY_DESC = "urgency_level:desc"


class Report(BaseModel):
    """An accessibility issue report as returned by the API.

    Enum-valued fields are kept as plain strings so an unexpected value from
    the server never fails parsing. Null values fall back to the defaults and
    numeric values in text fields are stringified.
    """

    id: int | str
    station_city: str = ""
    station_name: str = ""
    issue_category: str = ""
    description: str = ""
    urgency_level: str = UrgencyLevel.MEDIUM.value
    status: str = ReportStatus.SUBMITTED.value
    created_date: str | None = None
    created_by: str | None = None
    photo_url: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    reporter_contact: str | None = None
    inspector_notes: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        if not isinstance(data, Mapping):
            return data
        cleaned: dict[str, Any] = {}
        for name, value in data.items():
            if value is None:
                continue
            if name in _REPORT_TEXT_FIELDS and isinstance(value, (int, float)):
                value = str(value)
            cleaned[name] = value
        return cleaned


_REPORT_TEXT_FIELDS = frozenset({
    "station_city", "station_name", "issue_category", "description",
    "urgency_level", "status", "created_date", "created_by", "photo_url",
    "reporter_contact", "inspector_notes",
})


class ReportPatch(BaseModel):
    """Partial update applied by staff to an existing report."""

    status: ReportStatus | None = None
    inspector_notes: str | None = None

    @property
    def is_empty(self) -> bool:
        return self.status is None and self.inspector_notes is None

    def to_body(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


class FilterState(BaseModel):
    """Dashboard filter and sort selection. ``None`` means no constraint."""

    model_config = {"frozen": True}

    search: str | None = None
    status: str | None = None
    urgency: str | None = None
    city: str | None = None
    sort: SortOrder = SortOrder.CREATED_DESC

    def to_params(self) -> dict[str, str]:
        """Query-string parameters, with empty values omitted."""
        params = {
            "search": self.search,
            "status": self.status,
            "urgency": self.urgency,
            "city": self.city,
            "sort": str(self.sort),
        }
        return {k: v for k, v in params.items() if v is not None and v != ""}

    def with_changes(self, **changes: Any) -> FilterState:
        return FilterState.model_validate({**self.model_dump(), **changes})


def _as_count(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


class TopStation(BaseModel):
    station: str = ""
    count: int = 0


class AggregateStats(BaseModel):
    """Server-computed report statistics.

    Parsing never fails on missing or malformed fields: they collapse to
    empty mappings, empty lists, or zero.
    """

    total: int = 0
    by_category: dict[str, int] = Field(default_factory=dict)
    by_urgency: dict[str, int] = Field(default_factory=dict)
    by_status: dict[str, int] = Field(default_factory=dict)
    by_city: dict[str, int] = Field(default_factory=dict)
    top_stations: list[TopStation] = Field(default_factory=list)

    @field_validator("total", mode="before")
    @classmethod
    def _coerce_total(cls, value: Any) -> int:
        count = _as_count(value)
        return count if count is not None else 0

    @field_validator("by_category", "by_urgency", "by_status", "by_city", mode="before")
    @classmethod
    def _coerce_counts(cls, value: Any) -> dict[str, int]:
        if not isinstance(value, Mapping):
            return {}
        counts: dict[str, int] = {}
        for label, raw in value.items():
            count = _as_count(raw)
            if count is not None:
                counts[str(label)] = count
        return counts

    @field_validator("top_stations", mode="before")
    @classmethod
    def _coerce_top_stations(cls, value: Any) -> list[dict[str, Any]]:
        if not isinstance(value, (list, tuple)):
            return []
        stations: list[dict[str, Any]] = []
        for item in value:
            if not isinstance(item, Mapping):
                continue
            stations.append({
                "station": str(item.get("station") or ""),
                "count": _as_count(item.get("count")) or 0,
            })
        return stations

    @classmethod
    def parse(cls, data: Any) -> AggregateStats:
        """Build stats from a raw API payload, tolerating ``None`` and non-mappings."""
        if isinstance(data, AggregateStats):
            return data
        if not isinstance(data, Mapping):
            return cls()
        return cls.model_validate(dict(data))
