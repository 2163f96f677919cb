"""Query cache data models."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, replace
from enum import StrEnum
from typing import Any


class QueryStatus(StrEnum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class QueryKey:
    """Identifies one cached fetch: a resource name plus canonical parameters.

    Build keys with :meth:`of` so parameters are serialized the same way
    regardless of insertion order. ``None`` and empty-string values are
    dropped, matching how they are left out of the query string.
    """

    resource: str
    params: str = ""

    @classmethod
    def of(cls, resource: str, params: Mapping[str, Any] | None = None) -> QueryKey:
        cleaned = {
            str(k): v for k, v in (params or {}).items()
            if v is not None and v != ""
        }
        if not cleaned:
            return cls(resource=resource)
        canonical = json.dumps(cleaned, sort_keys=True, separators=(",", ":"), default=str)
        return cls(resource=resource, params=canonical)

    @property
    def param_dict(self) -> dict[str, Any]:
        return json.loads(self.params) if self.params else {}

    def __str__(self) -> str:
        return f"{self.resource}{self.params}" if self.params else self.resource


@dataclass(frozen=True)
class CacheEntry:
    """Immutable snapshot of one cache slot.

    ``fetched_at`` is in clock seconds and only moves on a successful fetch.
    ``data`` survives errors and refetches so callers can keep showing it.
    """

    key: QueryKey
    status: QueryStatus = QueryStatus.IDLE
    data: Any = None
    error: BaseException | None = None
    fetched_at: float | None = None
    invalidated: bool = False

    @property
    def is_loading(self) -> bool:
        return self.status == QueryStatus.LOADING

    @property
    def is_error(self) -> bool:
        return self.status == QueryStatus.ERROR

    @property
    def has_data(self) -> bool:
        return self.data is not None

    def evolve(self, **changes: Any) -> CacheEntry:
        return replace(self, **changes)
