# backend/caras/schemas/site_content.py
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class HeroBase(BaseModel):
    headline: str = Field(..., min_length=1, max_length=255)
    subtext: Optional[str] = None
    background_url: Optional[str] = Field(default=None, max_length=500)

    model_config = ConfigDict(from_attributes=True)


class HeroUpdate(HeroBase):
    pass


class HeroRead(HeroBase):
    id: int


class ClergyRead(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    category: Optional[str] = None
    photo_url: Optional[str] = None
    display_order: int

    model_config = ConfigDict(from_attributes=True)
