# backend/caras/models/events.py
from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, Date, DateTime, Integer, String, Text, func

from caras.db import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Event(Base):
    __tablename__ = "events"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(200), nullable=False)
    date = Column(Date, nullable=False, index=True)
    summary = Column(Text, nullable=True)
    banner_url = Column(String(500), nullable=True)
    narrative_image_url = Column(String(500), nullable=True)
    narrative = Column(Text, nullable=True)
    featured = Column(Boolean, nullable=False, default=False, server_default="false")

    created_at = Column(DateTime(timezone=True), default=_utcnow, server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True), default=_utcnow, server_default=func.now(), onupdate=_utcnow, nullable=False
    )

    def __repr__(self) -> str:
        return f"<Event id={self.id} title={self.title!r} date={self.date} featured={self.featured}>"
