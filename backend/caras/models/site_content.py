# backend/caras/models/site_content.py
from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, String, Text, func

from caras.db import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class HeroContent(Base):
    """Singleton row behind the public hero section."""
    __tablename__ = "hero_content"

    id = Column(Integer, primary_key=True)
    headline = Column(String(255), nullable=False)
    subtext = Column(Text, nullable=True)
    background_url = Column(String(500), nullable=True)
    updated_at = Column(
        DateTime(timezone=True), default=_utcnow, server_default=func.now(), onupdate=_utcnow, nullable=False
    )


class ParishClergy(Base):
    __tablename__ = "parish_clergy"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(150), nullable=False)
    description = Column(Text, nullable=True)
    category = Column(String(100), nullable=True, index=True)
    photo_url = Column(String(500), nullable=True)
    display_order = Column(Integer, nullable=False, server_default="0")
