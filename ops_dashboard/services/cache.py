"""Single-slot, process-local cache for the last dashboard snapshot."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from ops_dashboard.schemas import DashboardData

DEFAULT_TTL_SECONDS = 5 * 60


class CacheState(str, Enum):
    EMPTY = "empty"
    FRESH = "fresh"
    STALE = "stale"


@dataclass(frozen=True, slots=True)
class CacheEntry:
    data: DashboardData
    created_at: float


class DashboardCache:
    """Hold at most one snapshot, valid for ``ttl_seconds`` after it was written.

    Reading an entry whose age has reached the TTL drops it and reports a miss.
    ``clock`` must be monotonic; it defaults to :func:`time.monotonic`.
    """

    def __init__(
        self,
        *,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._ttl = ttl_seconds
        self._clock = clock
        self._entry: Optional[CacheEntry] = None
        self._lock = threading.Lock()

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    @property
    def state(self) -> CacheState:
        with self._lock:
            entry = self._entry
            if entry is None:
                return CacheState.EMPTY
            if self._clock() - entry.created_at >= self._ttl:
                return CacheState.STALE
            return CacheState.FRESH

    def get(self) -> Optional[DashboardData]:
        with self._lock:
            entry = self._entry
            if entry is None:
                return None
            if self._clock() - entry.created_at >= self._ttl:
                self._entry = None
                return None
            return entry.data

    def set(self, data: DashboardData) -> None:
        with self._lock:
            self._entry = CacheEntry(data=data, created_at=self._clock())

    def clear(self) -> None:
        with self._lock:
            self._entry = None

    def age(self) -> Optional[float]:
        """Seconds since the current entry was written, or ``None`` when empty."""
        with self._lock:
            if self._entry is None:
                return None
            return self._clock() - self._entry.created_at


__all__ = ["CacheEntry", "CacheState", "DashboardCache", "DEFAULT_TTL_SECONDS"]
