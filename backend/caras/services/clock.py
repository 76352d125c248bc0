# backend/caras/services/clock.py
from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from caras.config import Config


def as_utc(dt: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything stored is UTC
    if dt.tzinfo is None or dt.tzinfo.utcoffset(dt) is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def local_tz(name: Optional[str] = None):
    try:
        return ZoneInfo(name or Config.TZ)
    except (ZoneInfoNotFoundError, ValueError):
        # Windows boxes without tzdata; the parish is on +08:00
        return timezone(timedelta(hours=8))


def local_today(tz_name: Optional[str] = None) -> date:
    return datetime.now(local_tz(tz_name)).date()
