# backend/caras/models/gallery.py
from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, String, Text, func

from caras.db import Base

DEFAULT_ALBUM = "General"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class GalleryImage(Base):
    __tablename__ = "gallery"

    id = Column(Integer, primary_key=True, index=True)
    image_url = Column(String(500), nullable=False)
    # Object key inside the storage bucket; null for rows added by URL
    storage_path = Column(String(500), nullable=True)
    alt_text = Column(String(255), nullable=True)
    name = Column(String(200), nullable=True)
    album = Column(String(150), nullable=True, index=True)
    album_description = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), default=_utcnow, server_default=func.now(), nullable=False)
