"""Submission data models."""

from __future__ import annotations

import mimetypes
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

from stationaccess.core.errors import PhotoTooLargeError
from stationaccess.core.types import UrgencyLevel

REQUIRED_FIELDS: tuple[str, ...] = ("station_city", "station_name", "issue_category", "description")


class ReportDraft(BaseModel):
    """Fields a rider fills in before submitting a report."""

    station_city: str = ""
    station_name: str = ""
    issue_category: str = ""
    description: str = ""
    urgency_level: str = UrgencyLevel.MEDIUM.value
    reporter_contact: str = ""

    def missing_required(self) -> list[str]:
        return [name for name in REQUIRED_FIELDS if not getattr(self, name).strip()]


class PhotoAttachment(BaseModel):
    filename: str
    content: bytes
    content_type: str = "application/octet-stream"

    @property
    def size(self) -> int:
        return len(self.content)

    @classmethod
    def from_path(cls, path: str | Path, max_bytes: int | None = None) -> PhotoAttachment:
        """Load a photo from disk.

        With *max_bytes* set, an oversized file raises
        :class:`PhotoTooLargeError` before its content is read.
        """
        path = Path(path)
        if max_bytes is not None:
            size = path.stat().st_size
            if size > max_bytes:
                raise PhotoTooLargeError(size, max_bytes)
        content_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
        return cls(filename=path.name, content=path.read_bytes(), content_type=content_type)


class Coordinates(BaseModel):
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)


class MultipartPayload(BaseModel):
    """Encoded form fields plus the optional photo for ``POST /reports``."""

    fields: dict[str, str] = Field(default_factory=dict)
    photo: PhotoAttachment | None = None

    def parts(self) -> list[tuple[str, tuple[Any, ...]]]:
        """Parts in the shape httpx expects for ``files=``.

        Scalar fields get a ``None`` filename so they are sent as plain form
        fields; the request is multipart even without a photo.
        """
        parts: list[tuple[str, tuple[Any, ...]]] = [
            (name, (None, value)) for name, value in self.fields.items()
        ]
        if self.photo is not None:
            parts.append(("photo", (self.photo.filename, self.photo.content, self.photo.content_type)))
        return parts
