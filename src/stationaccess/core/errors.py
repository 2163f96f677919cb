"""Error types raised by the client library."""

from __future__ import annotations


class ReportValidationError(ValueError):
    """A report payload failed client-side validation.

    Raised before anything reaches the network. ``missing_fields`` lists
    required fields left blank, ``invalid_fields`` lists fields whose value
    is not one of the allowed choices.
    """

    def __init__(
        self,
        message: str,
        missing_fields: list[str] | None = None,
        invalid_fields: list[str] | None = None,
    ) -> None:
        super().__init__(message)
        self.missing_fields = list(missing_fields or [])
        self.invalid_fields = list(invalid_fields or [])


class PhotoTooLargeError(ReportValidationError):
    """An attached photo exceeds the upload size ceiling."""

    def __init__(self, size: int, limit: int) -> None:
        super().__init__(
            f"Photo is {size} bytes; the limit is {limit} bytes.",
            invalid_fields=["photo"],
        )
        self.size = size
        self.limit = limit


class TransportError(Exception):
    """The API answered with a non-2xx status or could not be reached.

    ``status_code`` is ``None`` when no response was received.
    """

    def __init__(self, status_code: int | None, body: str = "") -> None:
        if status_code is None:
            message = f"API unreachable: {body}"
        else:
            message = f"API Error: {status_code} - {body}"
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class NotFoundError(TransportError):
    """The requested record does not exist (HTTP 404)."""

    def __init__(self, body: str = "Not Found") -> None:
        super().__init__(404, body)
