"""Query cache with staleness, invalidation and subscriptions.

Holds fetched report lists, single reports and aggregate statistics,
deduplicates concurrent fetches, and notifies subscribers on change.
"""

from stationaccess.cache.models import CacheEntry, QueryKey, QueryStatus
from stationaccess.cache.store import QueryCache

__all__ = ["CacheEntry", "QueryCache", "QueryKey", "QueryStatus"]
