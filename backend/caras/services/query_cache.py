# backend/caras/services/query_cache.py
"""
Keyed read cache shared by the public site and dashboard routes.

Keys are tuples such as ("events", "public") or ("hero-content",).
`invalidate(("events",))` drops every key starting with that prefix.

Concurrent callers of the same key share one fetch. Every invalidation bumps
a generation counter; a fetch that started before an invalidation returns its
result to its own caller but does not store it, so a late response can never
overwrite newer state.
"""
from __future__ import annotations

import logging
import threading
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Hashable, Iterator, Optional, Tuple

logger = logging.getLogger(__name__)

CacheKey = Tuple[Hashable, ...]


@dataclass
class _Entry:
    value: Any
    stored_at: float


@dataclass
class _KeyLock:
    lock: threading.Lock = field(default_factory=threading.Lock)
    users: int = 0


class QueryCache:
    def __init__(self, ttl_seconds: float = 30.0, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: Dict[CacheKey, _Entry] = {}
        # only keys with a fetch in progress or waiting have a lock here
        self._key_locks: Dict[CacheKey, _KeyLock] = {}
        self._generation = 0
        self.fetch_count = 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    # ---- internals --------------------------------------------------------

    @contextmanager
    def _locked(self, key: CacheKey) -> Iterator[None]:
        with self._lock:
            slot = self._key_locks.get(key)
            if slot is None:
                slot = self._key_locks[key] = _KeyLock()
            slot.users += 1
        try:
            with slot.lock:
                yield
        finally:
            with self._lock:
                slot.users -= 1
                if slot.users == 0:
                    del self._key_locks[key]

    def _expired(self, entry: _Entry, now: float) -> bool:
        return self.ttl_seconds > 0 and now - entry.stored_at > self.ttl_seconds

    def _fresh(self, key: CacheKey) -> Optional[_Entry]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if self._expired(entry, self._clock()):
                del self._entries[key]
                return None
            return entry

    def _store(self, key: CacheKey, value: Any) -> None:
        # caller holds self._lock
        now = self._clock()
        for k in [k for k, e in self._entries.items() if self._expired(e, now)]:
            del self._entries[k]
        self._entries[key] = _Entry(value=value, stored_at=now)

    # ---- public API -------------------------------------------------------

    def get_or_fetch(self, key: CacheKey, fetch: Callable[[], Any]) -> Any:
        """
        Cached value for `key`, or the result of `fetch()`.

        A None result (nothing found) is handed back but not stored, so
        lookups of missing rows never occupy the cache.
        """
        entry = self._fresh(key)
        if entry is not None:
            return entry.value

        # One fetch per key at a time; waiters re-check after the lock is released
        with self._locked(key):
            entry = self._fresh(key)
            if entry is not None:
                return entry.value

            with self._lock:
                generation = self._generation
                self.fetch_count += 1

            value = fetch()
            if value is None:
                return None

            with self._lock:
                if generation == self._generation:
                    self._store(key, value)
                else:
                    logger.debug("query cache: dropped stale result for %s", key)
            return value

    def peek(self, key: CacheKey) -> Any:
        entry = self._fresh(key)
        return entry.value if entry is not None else None

    def invalidate(self, *prefixes: CacheKey) -> int:
        """Drop keys starting with any of `prefixes`; returns how many were dropped."""
        with self._lock:
            self._generation += 1
            doomed = [
                k for k in self._entries
                if any(k[: len(p)] == tuple(p) for p in prefixes)
            ]
            for k in doomed:
                del self._entries[k]
        if doomed:
            logger.debug("query cache: invalidated %s", doomed)
        return len(doomed)

    def clear(self) -> None:
        with self._lock:
            self._generation += 1
            self._entries.clear()


# Key prefixes used across routers
HERO_KEY: CacheKey = ("hero-content",)
EVENTS_KEY: CacheKey = ("events",)
GALLERY_KEY: CacheKey = ("gallery",)
CLERGY_KEY: CacheKey = ("parish-clergy",)
STATS_KEY: CacheKey = ("dashboard-stats",)
APPLICATIONS_KEY: CacheKey = ("applications",)
MEMBERS_KEY: CacheKey = ("members",)
PROFILE_KEY: CacheKey = ("admin-profile",)
