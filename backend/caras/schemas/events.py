# backend/caras/schemas/events.py
from __future__ import annotations

from datetime import date as _date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class EventBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    date: _date
    summary: Optional[str] = None
    banner_url: Optional[str] = Field(default=None, max_length=500)
    narrative_image_url: Optional[str] = Field(default=None, max_length=500)
    narrative: Optional[str] = None
    featured: bool = False

    model_config = ConfigDict(from_attributes=True)


class EventCreate(EventBase):
    """Payload for creating an event."""
    pass


class EventUpdate(EventBase):
    """Full edit; the featured flag also has its own toggle endpoint."""
    pass


class EventRead(EventBase):
    id: int


class FeaturedToggle(BaseModel):
    # Omit to flip the current value
    featured: Optional[bool] = None


class PublicEventCard(BaseModel):
    id: int
    title: str
    date: _date
    summary: Optional[str] = None
    banner_url: Optional[str] = None
    featured: bool
    link: str


class EventNarrative(BaseModel):
    id: int
    title: str
    date: _date
    summary: Optional[str] = None
    banner_url: Optional[str] = None
    narrative_image_url: Optional[str] = None
    narrative: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)
