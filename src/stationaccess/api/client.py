"""Async client for the reports REST API."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx

from stationaccess.core.config import ApiConfig
from stationaccess.core.errors import NotFoundError, TransportError
from stationaccess.core.types import FilterState, ReportPatch

logger = logging.getLogger(__name__)


def handle_response(resp: httpx.Response) -> Any:
    """Turn an API response into a value or raise.

    Non-2xx responses raise :class:`TransportError` (:class:`NotFoundError`
    for 404) carrying the status and body text. JSON bodies are parsed;
    anything else, including a body labelled JSON that does not parse, is
    returned as text.
    """
    if not resp.is_success:
        detail = resp.text or resp.reason_phrase
        if resp.status_code == 404:
            raise NotFoundError(detail)
        raise TransportError(resp.status_code, detail)
    content_type = resp.headers.get("content-type", "")
    if "application/json" in content_type:
        try:
            return resp.json()
        except ValueError:
            logger.warning("Malformed JSON body with status %d, returning text", resp.status_code)
    return resp.text


class ReportsApiClient:
    """Talks to the accessibility reports service."""

    def __init__(self, config: ApiConfig) -> None:
        self.config = config
        self._http = httpx.AsyncClient(
            base_url=config.base_url,
            timeout=httpx.Timeout(config.timeout_seconds),
        )

    @property
    def origin(self) -> str:
        return self.config.base_url.rstrip("/")

    # -- reports -------------------------------------------------------------

    async def list_reports(self, filters: FilterState | None = None) -> Any:
        params = (filters or FilterState()).to_params()
        return await self._get("/reports", params=params)

    async def get_stats(self) -> Any:
        return await self._get("/reports/stats")

    async def get_report(self, report_id: int | str) -> Any:
        return await self._get(f"/reports/{report_id}")

    async def update_report(self, report_id: int | str, patch: ReportPatch) -> Any:
        return await self._send("PATCH", f"/reports/{report_id}", json=patch.to_body())

    async def submit_report(self, files: list[tuple[str, tuple[Any, ...]]]) -> Any:
        """POST a new report as multipart/form-data.

        *files* is a list of ``(field, (filename, content[, content_type]))``
        parts; scalar fields use a ``None`` filename.
        """
        return await self._send("POST", "/reports", files=files)

    # -- auth ----------------------------------------------------------------

    async def login(self, username: str, password: str) -> Any:
        return await self._send(
            "POST", "/auth/login", json={"username": username, "password": password}
        )

    async def register(self, username: str, password: str, role: str = "customer") -> Any:
        return await self._send(
            "POST",
            "/auth/register",
            json={"username": username, "password": password, "role": role},
        )

    # -- helpers -------------------------------------------------------------

    def resolve_photo_url(self, photo_url: str | None) -> str | None:
        """Resolve a server-relative photo path against the API origin."""
        if not photo_url:
            return None
        if photo_url.startswith(("http://", "https://")):
            return photo_url
        return f"{self.origin}/{photo_url.lstrip('/')}"

    async def close(self) -> None:
        await self._http.aclose()

    # -- internal ------------------------------------------------------------

    async def _get(self, url: str, params: dict[str, str] | None = None) -> Any:
        resp = await self._request_with_retry("GET", url, params=params)
        return handle_response(resp)

    async def _send(self, method: str, url: str, **kwargs: Any) -> Any:
        return handle_response(await self._request(method, url, **kwargs))

    async def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            return await self._http.request(method, url, **kwargs)
        except httpx.TransportError as exc:
            raise TransportError(None, str(exc)) from exc

    async def _request_with_retry(
        self,
        method: str,
        url: str,
        **kwargs: Any,
    ) -> httpx.Response:
        """Execute an idempotent request with retry on 5xx and transport errors.

        The final attempt is made without retry: its response is returned
        as is and a transport failure raises :class:`TransportError`.
        """
        max_attempts = max(1, self.config.max_retries + 1)
        for attempt in range(max_attempts - 1):
            try:
                resp = await self._http.request(method, url, **kwargs)
            except httpx.TransportError as exc:
                problem = f"transport error: {exc}"
            else:
                if resp.status_code < 500:
                    return resp
                problem = f"status {resp.status_code}"
            await self._backoff(url, problem, attempt, max_attempts)
        return await self._request(method, url, **kwargs)

    @staticmethod
    async def _backoff(url: str, problem: str, attempt: int, max_attempts: int) -> None:
        delay = 0.5 * (2 ** attempt)
        logger.warning(
            "Request to %s failed (%s), retrying in %.1fs (%d/%d)",
            url, problem, delay, attempt + 1, max_attempts,
        )
        await asyncio.sleep(delay)
