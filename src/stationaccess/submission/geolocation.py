"""Best-effort device location for report submissions.

Location is a nice-to-have: an unavailable provider, a refused or failed
lookup, or a lookup that outlives its time budget all produce ``None`` and
the report goes out without coordinates.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Protocol, runtime_checkable

import httpx

from stationaccess.core.config import GeolocationConfig
from stationaccess.submission.models import Coordinates

logger = logging.getLogger(__name__)


@runtime_checkable
class GeolocationProvider(Protocol):
    async def current_position(self) -> Coordinates: ...


class StaticGeolocationProvider:
    """Always reports the same fixed position."""

    def __init__(self, latitude: float, longitude: float) -> None:
        self._coordinates = Coordinates(latitude=latitude, longitude=longitude)

    async def current_position(self) -> Coordinates:
        return self._coordinates


class HttpGeolocationProvider:
    """Looks up the position from an HTTP endpoint returning ``latitude``/``longitude`` JSON."""

    def __init__(self, url: str, timeout_seconds: float = 5.0) -> None:
        self._url = url
        self._timeout = timeout_seconds

    async def current_position(self) -> Coordinates:
        async with httpx.AsyncClient(timeout=httpx.Timeout(self._timeout)) as client:
            resp = await client.get(self._url)
            resp.raise_for_status()
            data = resp.json()
        return Coordinates(latitude=data["latitude"], longitude=data["longitude"])


async def locate(
    provider: GeolocationProvider | None, timeout_seconds: float
) -> Coordinates | None:
    """Ask *provider* for a position, waiting at most *timeout_seconds*."""
    if provider is None:
        logger.info("Geolocation unavailable; submitting without coordinates")
        return None
    try:
        return await asyncio.wait_for(provider.current_position(), timeout=timeout_seconds)
    except asyncio.TimeoutError:
        logger.info("Geolocation timed out after %.1fs; submitting without coordinates", timeout_seconds)
    except Exception as exc:
        logger.info("Geolocation failed (%s); submitting without coordinates", exc)
    return None


PROVIDER_NAMES = ("none", "static", "http")


def create_geolocation_provider(config: GeolocationConfig) -> GeolocationProvider | None:
    """Factory: select a provider based on ``config.provider``. ``none`` gives ``None``."""
    provider = config.provider.lower()
    if provider == "none":
        return None
    if provider == "static":
        if config.latitude is None or config.longitude is None:
            raise ValueError("Static geolocation requires latitude and longitude")
        return StaticGeolocationProvider(config.latitude, config.longitude)
    if provider == "http":
        if not config.url:
            raise ValueError("HTTP geolocation requires a url")
        return HttpGeolocationProvider(config.url)
    available = ", ".join(PROVIDER_NAMES)
    raise ValueError(f"Unknown geolocation provider {config.provider!r}. Available: {available}")
