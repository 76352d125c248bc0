# backend/caras/services/inactivity.py
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from caras.services.clock import as_utc


class InactivityGuard:
    """Idle-timeout policy for admin sessions (30 minutes by default)."""

    def __init__(
        self,
        timeout: timedelta = timedelta(minutes=30),
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.timeout = timeout
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def now(self) -> datetime:
        return as_utc(self._clock())

    def is_expired(self, last_seen_at: datetime) -> bool:
        return self.now() - as_utc(last_seen_at) > self.timeout

    def remaining(self, last_seen_at: datetime) -> timedelta:
        left = self.timeout - (self.now() - as_utc(last_seen_at))
        return max(left, timedelta(0))
