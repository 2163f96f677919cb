"""Keyed query cache with staleness, invalidation and subscriber notification.

The store is the single owner of every :class:`CacheEntry`. Entries change
only through two paths: the completion handler of a fetch started by
:meth:`QueryCache.read`, and :meth:`QueryCache.invalidate`. Callers receive
immutable snapshots.

Fetches for the same key are deduplicated: while one is in flight, further
reads attach to it instead of issuing a second request. An invalidation
that lands while a fetch is in flight leaves the entry marked invalidated
once that fetch settles, and queues one refetch if anyone is subscribed.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Awaitable, Callable

from stationaccess.cache.models import CacheEntry, QueryKey, QueryStatus

logger = logging.getLogger(__name__)

Fetcher = Callable[[], Awaitable[Any]]
Listener = Callable[[CacheEntry], None]
KeyMatcher = QueryKey | Callable[[QueryKey], bool]


class QueryCache:
    """In-memory query cache for one client instance.

    Construct one per application context and pass it to whatever needs it;
    nothing in the library relies on a process-wide instance.

    Args:
        clock: Returns the current time in seconds. Defaults to
            ``time.monotonic``; tests inject a controllable clock.
    """

    def __init__(self, clock: Callable[[], float] | None = None) -> None:
        self._clock = clock or time.monotonic
        self._entries: dict[QueryKey, CacheEntry] = {}
        self._fetchers: dict[QueryKey, Fetcher] = {}
        self._inflight: dict[QueryKey, asyncio.Task[None]] = {}
        self._generations: dict[QueryKey, int] = {}
        self._refetch_queued: set[QueryKey] = set()
        self._subscribers: dict[QueryKey, list[Listener]] = {}

    # -- inspection ----------------------------------------------------------

    def get(self, key: QueryKey) -> CacheEntry | None:
        return self._entries.get(key)

    def keys(self) -> list[QueryKey]:
        return list(self._entries)

    def subscriber_count(self, key: QueryKey) -> int:
        return len(self._subscribers.get(key, ()))

    def is_fetching(self, key: QueryKey) -> bool:
        return key in self._inflight

    # -- public API ----------------------------------------------------------

    def read(self, key: QueryKey, fetcher: Fetcher, stale_time_ms: float = 0) -> CacheEntry:
        """Return the entry for *key*, starting a background fetch if needed.

        A fetch starts when the entry is new, errored, invalidated, or older
        than *stale_time_ms*, and no fetch for the key is already running.
        Existing data stays on the returned entry while it reloads.

        Must be called from a running event loop.
        """
        if key not in self._entries:
            self._entries[key] = CacheEntry(key=key)
        self._fetchers[key] = fetcher
        if key not in self._inflight and self._needs_fetch(self._entries[key], stale_time_ms):
            self._start_fetch(key)
        return self._entries[key]

    async def fetch(self, key: QueryKey, fetcher: Fetcher, stale_time_ms: float = 0) -> CacheEntry:
        """Like :meth:`read`, but wait for any in-flight fetch to settle."""
        self.read(key, fetcher, stale_time_ms)
        task = self._inflight.get(key)
        while task is not None:
            await task
            task = self._inflight.get(key)
        return self._entries[key]

    def invalidate(self, target: KeyMatcher) -> list[QueryKey]:
        """Mark matching entries as no longer authoritative.

        *target* is a single key or a predicate over keys. Data is kept. Keys
        with active subscribers are refetched right away, or once their
        current fetch settles. Returns the keys that matched.
        """
        if isinstance(target, QueryKey):
            matched = [target] if target in self._entries else []
        else:
            matched = [key for key in self._entries if target(key)]

        for key in matched:
            self._generations[key] = self._generations.get(key, 0) + 1
            was_inflight = key in self._inflight
            self._set(key, self._entries[key].evolve(invalidated=True))
            if not self._subscribers.get(key):
                continue
            if was_inflight:
                self._refetch_queued.add(key)
            elif key not in self._inflight and key in self._fetchers:
                self._start_fetch(key)
        return matched

    def subscribe(self, key: QueryKey, callback: Listener) -> Callable[[], None]:
        """Call *callback* with the new snapshot on every change to *key*.

        Returns a disposer; calling it more than once is harmless.
        """
        if key not in self._entries:
            self._entries[key] = CacheEntry(key=key)
        listeners = self._subscribers.setdefault(key, [])
        listeners.append(callback)
        disposed = False

        def dispose() -> None:
            nonlocal disposed
            if disposed:
                return
            disposed = True
            current = self._subscribers.get(key)
            if current is not None and callback in current:
                current.remove(callback)
            if not current:
                self._subscribers.pop(key, None)
                self._refetch_queued.discard(key)

        return dispose

    def clear(self) -> None:
        """Evict every entry and cancel running fetches."""
        for task in self._inflight.values():
            task.cancel()
        self._entries.clear()
        self._fetchers.clear()
        self._inflight.clear()
        self._generations.clear()
        self._refetch_queued.clear()

    async def close(self) -> None:
        """Cancel running fetches, wait for them to unwind, and evict everything."""
        tasks = list(self._inflight.values())
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self.clear()
        self._subscribers.clear()

    # -- internal ------------------------------------------------------------

    def _needs_fetch(self, entry: CacheEntry, stale_time_ms: float) -> bool:
        if entry.status in (QueryStatus.IDLE, QueryStatus.ERROR):
            return True
        if entry.invalidated or entry.fetched_at is None:
            return True
        return (self._clock() - entry.fetched_at) * 1000 > stale_time_ms

    def _start_fetch(self, key: QueryKey) -> None:
        fetcher = self._fetchers[key]
        generation = self._generations.get(key, 0)
        loop = asyncio.get_running_loop()
        # Register before notifying so a listener that reads back is deduplicated.
        self._inflight[key] = loop.create_task(self._run_fetch(key, fetcher, generation))
        logger.debug("Fetching %s", key)
        self._set(key, self._entries[key].evolve(status=QueryStatus.LOADING))

    async def _run_fetch(self, key: QueryKey, fetcher: Fetcher, generation: int) -> None:
        task = asyncio.current_task()
        error: Exception | None = None
        data: Any = None
        try:
            data = await fetcher()
        except Exception as exc:
            error = exc
        finally:
            owned = self._inflight.get(key) is task
            if owned:
                del self._inflight[key]
        if not owned:
            return

        entry = self._entries[key]
        if error is not None:
            logger.warning("Fetch for %s failed: %s", key, error)
            self._set(key, entry.evolve(status=QueryStatus.ERROR, error=error))
        else:
            logger.debug("Fetched %s", key)
            self._set(key, entry.evolve(
                status=QueryStatus.SUCCESS,
                data=data,
                error=None,
                fetched_at=self._clock(),
                invalidated=self._generations.get(key, 0) != generation,
            ))

        if key in self._refetch_queued:
            self._refetch_queued.discard(key)
            if self._subscribers.get(key) and key not in self._inflight:
                self._start_fetch(key)

    def _set(self, key: QueryKey, entry: CacheEntry) -> None:
        self._entries[key] = entry
        for listener in list(self._subscribers.get(key, ())):
            try:
                listener(entry)
            except Exception:
                logger.exception("Cache subscriber for %s raised", key)
