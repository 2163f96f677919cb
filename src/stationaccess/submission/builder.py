"""Assemble and submit the multipart payload for a new report.

Steps, in order: check required fields and allowed values, check the photo
size, try to get device coordinates within a time budget, encode, and hand
the payload to the mutation pipeline. The first two steps fail before any
network traffic. The location step never fails.
"""

from __future__ import annotations

from typing import Any

from stationaccess.catalog.stations import StationCatalog
from stationaccess.core.config import SubmissionConfig
from stationaccess.core.errors import PhotoTooLargeError, ReportValidationError
from stationaccess.core.types import IssueCategory, Report, ReportStatus, UrgencyLevel
from stationaccess.mutations.pipeline import MutationPipeline
from stationaccess.submission.geolocation import GeolocationProvider, locate
from stationaccess.submission.models import (
    Coordinates,
    MultipartPayload,
    PhotoAttachment,
    ReportDraft,
)


def check_photo(photo: PhotoAttachment | None, max_bytes: int) -> None:
    """Raise :class:`PhotoTooLargeError` when *photo* is over *max_bytes*."""
    if photo is not None and photo.size > max_bytes:
        raise PhotoTooLargeError(photo.size, max_bytes)


def validate_draft(draft: ReportDraft, catalog: StationCatalog | None = None) -> None:
    """Raise :class:`ReportValidationError` if *draft* cannot be submitted.

    Blank required fields are reported first, in form order. Then the issue
    category and urgency must be known values, and with a *catalog* the
    station must be on the chosen city's line.
    """
    missing = draft.missing_required()
    if missing:
        raise ReportValidationError(
            f"Please fill in all required fields: {', '.join(missing)}",
            missing_fields=missing,
        )

    invalid: list[str] = []
    if catalog is not None and not catalog.is_valid(draft.station_city, draft.station_name):
        invalid.append("station_name")
    if draft.issue_category not in {c.value for c in IssueCategory}:
        invalid.append("issue_category")
    if draft.urgency_level not in {u.value for u in UrgencyLevel}:
        invalid.append("urgency_level")
    if invalid:
        raise ReportValidationError(
            f"Invalid value for: {', '.join(invalid)}", invalid_fields=invalid
        )


def encode_payload(
    draft: ReportDraft,
    photo: PhotoAttachment | None = None,
    coordinates: Coordinates | None = None,
) -> MultipartPayload:
    fields = draft.model_dump()
    fields["status"] = ReportStatus.SUBMITTED.value
    if coordinates is not None:
        fields["latitude"] = str(coordinates.latitude)
        fields["longitude"] = str(coordinates.longitude)
    return MultipartPayload(fields={k: str(v) for k, v in fields.items()}, photo=photo)


class SubmissionBuilder:
    """Builds geolocation-enriched report payloads and submits them."""

    def __init__(
        self,
        pipeline: MutationPipeline,
        config: SubmissionConfig | None = None,
        geolocation: GeolocationProvider | None = None,
        catalog: StationCatalog | None = None,
    ) -> None:
        self._pipeline = pipeline
        self._config = config or SubmissionConfig()
        self._geolocation = geolocation
        self._catalog = catalog

    @property
    def max_photo_bytes(self) -> int:
        return self._config.max_photo_bytes

    def validate(self, draft: ReportDraft, photo: PhotoAttachment | None = None) -> None:
        validate_draft(draft, self._catalog)
        check_photo(photo, self._config.max_photo_bytes)

    async def build(
        self, draft: ReportDraft, photo: PhotoAttachment | None = None
    ) -> MultipartPayload:
        self.validate(draft, photo)
        coordinates = await locate(self._geolocation, self._config.geolocation_timeout_seconds)
        return encode_payload(draft, photo, coordinates)

    async def submit(
        self, draft: ReportDraft, photo: PhotoAttachment | None = None
    ) -> Report | Any:
        payload = await self.build(draft, photo)
        return await self._pipeline.create(payload)
