"""Follow one cache key at a time on behalf of a view."""

from __future__ import annotations

import logging
from typing import Any, Callable

from stationaccess.cache.models import CacheEntry, QueryKey
from stationaccess.cache.store import QueryCache

logger = logging.getLogger(__name__)


class QueryObserver:
    """Subscribes to the key a view currently shows.

    Switching keys drops the old subscription. Updates that still arrive for
    a superseded key are ignored, so a slow response for an old filter never
    overwrites the current view. The last data seen is kept as a placeholder
    until the new key produces its own.
    """

    def __init__(self, cache: QueryCache, on_change: Callable[[], None] | None = None) -> None:
        self._cache = cache
        self._on_change = on_change
        self._key: QueryKey | None = None
        self._dispose: Callable[[], None] | None = None
        self._entry: CacheEntry | None = None
        self._data: Any = None

    @property
    def key(self) -> QueryKey | None:
        return self._key

    @property
    def entry(self) -> CacheEntry | None:
        return self._entry

    @property
    def data(self) -> Any:
        return self._data

    def observe(self, key: QueryKey, read: Callable[[], CacheEntry]) -> CacheEntry:
        """Point the observer at *key* and read it through *read*."""
        if key != self._key:
            self._detach()
            self._key = key
            self._dispose = self._cache.subscribe(key, lambda entry: self._handle(key, entry))
        entry = read()
        if entry is not self._entry:
            self._handle(key, entry)
        return entry

    def close(self) -> None:
        self._detach()
        self._key = None

    def _detach(self) -> None:
        if self._dispose is not None:
            self._dispose()
            self._dispose = None

    def _handle(self, key: QueryKey, entry: CacheEntry) -> None:
        if key != self._key:
            logger.debug("Ignoring update for superseded key %s", key)
            return
        self._entry = entry
        if entry.data is not None:
            self._data = entry.data
        if self._on_change is not None:
            self._on_change()
