"""State for the new-report form."""

from __future__ import annotations

import logging
from typing import Any, Callable

from stationaccess.core.errors import PhotoTooLargeError, ReportValidationError, TransportError
from stationaccess.submission.builder import SubmissionBuilder, check_photo
from stationaccess.submission.models import PhotoAttachment, ReportDraft

REQUIRED_FIELDS_MESSAGE = "Please fill in all required fields (marked with *)."
PHOTO_TOO_LARGE_MESSAGE = "File size must be less than 10MB"

logger = logging.getLogger(__name__)


class ReportForm:
    """Holds the draft, the selected photo and the current error message.

    The photo selection and the error are independent: rejecting an
    oversized photo sets the error but keeps the previous selection, and
    picking a valid photo clears the error. The form only resets after a
    successful submission.
    """

    def __init__(
        self,
        builder: SubmissionBuilder,
        on_success: Callable[[Any], None] | None = None,
    ) -> None:
        self._builder = builder
        self._on_success = on_success
        self.draft = ReportDraft()
        self.photo: PhotoAttachment | None = None
        self.error: str | None = None
        self.is_submitting = False

    def set_city(self, city: str) -> None:
        """Choose a city; the station must be picked again."""
        self.draft = self.draft.model_copy(update={"station_city": city, "station_name": ""})

    def update(self, **fields: Any) -> None:
        self.draft = ReportDraft.model_validate({**self.draft.model_dump(), **fields})

    def select_photo(self, photo: PhotoAttachment) -> bool:
        """Attach *photo*. Returns False and sets the error if it is too large."""
        try:
            check_photo(photo, self._builder.max_photo_bytes)
        except PhotoTooLargeError:
            self.error = PHOTO_TOO_LARGE_MESSAGE
            return False
        self.photo = photo
        self.error = None
        return True

    def clear_photo(self) -> None:
        self.photo = None

    @property
    def can_submit(self) -> bool:
        return not self.is_submitting and not self.draft.missing_required()

    def reset(self) -> None:
        self.draft = ReportDraft()
        self.photo = None
        self.error = None

    async def submit(self) -> Any | None:
        """Submit the draft. Returns the created report, or None on failure."""
        self.error = None
        self.is_submitting = True
        try:
            result = await self._builder.submit(self.draft, self.photo)
        except PhotoTooLargeError:
            self.error = PHOTO_TOO_LARGE_MESSAGE
            return None
        except ReportValidationError as exc:
            self.error = REQUIRED_FIELDS_MESSAGE if exc.missing_fields else str(exc)
            return None
        except TransportError as exc:
            self.error = _failure_message(exc)
            return None
        except Exception as exc:
            logger.exception("Unexpected error while submitting report")
            self.error = _failure_message(exc)
            return None
        finally:
            self.is_submitting = False
        self.reset()
        if self._on_success is not None:
            self._on_success(result)
        return result


def _failure_message(exc: Exception) -> str:
    return f"Failed to submit report. Details: {str(exc) or 'Unknown Error'}."
