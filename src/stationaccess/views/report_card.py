"""Display-ready fields for a single report card."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel

from stationaccess.api.client import ReportsApiClient
from stationaccess.core.types import Report, ReportStatus, UrgencyLevel


class ReportCard(BaseModel):
    id: int | str
    station_name: str
    station_city: str
    issue_category: str
    description: str
    status: str
    urgency_level: str
    created_label: str | None = None
    reporter_label: str | None = None
    photo_url: str | None = None


def format_created(value: str | None) -> str | None:
    """Format an ISO date as e.g. ``Jan 1, 2024``; ``None`` if unparseable."""
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.strip())
    except ValueError:
        return None
    return f"{parsed:%b} {parsed.day}, {parsed.year}"


def reporter_label(created_by: str | None) -> str | None:
    """Show only the local part of an email address."""
    if not created_by:
        return None
    return created_by.split("@")[0] if "@" in created_by else created_by


def build_report_card(report: Report, client: ReportsApiClient) -> ReportCard:
    return ReportCard(
        id=report.id,
        station_name=report.station_name or "Unknown Station",
        station_city=report.station_city,
        issue_category=report.issue_category or "Issue",
        description=report.description,
        status=report.status or ReportStatus.SUBMITTED.value,
        urgency_level=report.urgency_level or UrgencyLevel.MEDIUM.value,
        created_label=format_created(report.created_date),
        reporter_label=reporter_label(report.created_by),
        photo_url=client.resolve_photo_url(report.photo_url),
    )
