# backend/caras/schemas/gallery.py
from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class GalleryImageRead(BaseModel):
    id: int
    image_url: str
    alt_text: Optional[str] = None
    name: Optional[str] = None
    album: str  # resolved: never null, "General" when unset
    album_description: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class GalleryRename(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)

    model_config = ConfigDict(str_strip_whitespace=True)


class AlbumSummary(BaseModel):
    name: str
    description: Optional[str] = None
    cover_url: str
    count: int


class GalleryPage(BaseModel):
    items: List[GalleryImageRead]
    total: int
    page: int
    page_size: int
    total_pages: int
    seed: int
