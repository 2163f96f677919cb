"""Create and update reports, then invalidate the queries they affect."""

from __future__ import annotations

import logging
from typing import Any

from stationaccess.api.client import ReportsApiClient
from stationaccess.cache.queries import REPORTS, STATS, by_resource, report_key
from stationaccess.cache.store import QueryCache
from stationaccess.core.errors import ReportValidationError, TransportError
from stationaccess.core.types import Report, ReportPatch
from stationaccess.submission.models import MultipartPayload

logger = logging.getLogger(__name__)


def _as_report(value: Any) -> Report | Any:
    if isinstance(value, dict) and "id" in value:
        return Report.model_validate(value)
    return value


class MutationPipeline:
    """Runs writes against the API and keeps the cache coherent afterwards.

    The cache is never edited with predicted results. A successful write
    invalidates the affected keys, and subscribers refetch what the server
    now says. A failed write leaves the cache untouched.
    """

    def __init__(self, client: ReportsApiClient, cache: QueryCache) -> None:
        self._client = client
        self._cache = cache

    async def create(self, payload: MultipartPayload) -> Report | Any:
        """Submit a new report. Invalidates every report list and the stats."""
        try:
            result = await self._client.submit_report(payload.parts())
        except TransportError as exc:
            logger.warning("Report creation failed: %s", exc)
            raise
        invalidated = self._cache.invalidate(by_resource(REPORTS, STATS))
        logger.info("Report created; invalidated %d queries", len(invalidated))
        return _as_report(result)

    async def update(self, report_id: int | str, patch: ReportPatch) -> Report | Any:
        """Apply *patch* to one report. Invalidates it, the lists, and the stats.

        Any status may follow any other; the server decides what is allowed.
        """
        if patch.is_empty:
            raise ReportValidationError("Nothing to update.", missing_fields=["status", "inspector_notes"])
        try:
            result = await self._client.update_report(report_id, patch)
        except TransportError as exc:
            logger.warning("Update of report %s failed: %s", report_id, exc)
            raise
        record = report_key(report_id)
        invalidated = self._cache.invalidate(
            lambda key: key == record or key.resource in (REPORTS, STATS)
        )
        logger.info("Report %s updated; invalidated %d queries", report_id, len(invalidated))
        return _as_report(result)

