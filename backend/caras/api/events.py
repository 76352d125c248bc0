# backend/caras/api/events.py
from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from caras.api.notices import not_found, notice
from caras.db import get_db
from caras.dependencies import get_current_admin, get_query_cache
from caras.schemas.events import EventCreate, EventNarrative, EventRead, EventUpdate, FeaturedToggle, PublicEventCard
from caras.services import events as svc
from caras.services.query_cache import EVENTS_KEY, STATS_KEY, QueryCache

PUBLIC_EVENTS_KEY = EVENTS_KEY + ("public",)

# Public routes are included before the admin router so /events/public is
# matched ahead of /events/{event_id}.
public_router = APIRouter(tags=["Events"])
router = APIRouter(prefix="/events", tags=["Events"], dependencies=[Depends(get_current_admin)])


def public_cards(db: Session, cache: QueryCache) -> List[PublicEventCard]:
    return cache.get_or_fetch(PUBLIC_EVENTS_KEY, lambda: svc.public_events(db))


@public_router.get("/events/public", response_model=List[PublicEventCard])
def list_public_events(db: Session = Depends(get_db), cache: QueryCache = Depends(get_query_cache)):
    return public_cards(db, cache)


@public_router.get("/event/{event_id}", response_model=EventNarrative)
def event_page(event_id: int, db: Session = Depends(get_db), cache: QueryCache = Depends(get_query_cache)):
    narrative = cache.get_or_fetch(EVENTS_KEY + ("narrative", event_id), lambda: svc.event_narrative(db, event_id))
    if narrative is None:
        raise notice(status.HTTP_404_NOT_FOUND, "Event not found", "Event not found.")
    return narrative


# ---- Admin --------------------------------------------------------------------

@router.get("", response_model=List[EventRead])
def list_events(db: Session = Depends(get_db)):
    return svc.list_events(db)


@router.post("", response_model=EventRead, status_code=status.HTTP_201_CREATED)
def create_event(payload: EventCreate, db: Session = Depends(get_db), cache: QueryCache = Depends(get_query_cache)):
    event = svc.create_event(db, payload)
    cache.invalidate(EVENTS_KEY, STATS_KEY)
    return event


@router.get("/{event_id}", response_model=EventRead)
def get_event(event_id: int, db: Session = Depends(get_db)):
    event = svc.get_event(db, event_id)
    if not event:
        raise not_found("Event")
    return event


@router.put("/{event_id}", response_model=EventRead)
def update_event(
    event_id: int,
    payload: EventUpdate,
    db: Session = Depends(get_db),
    cache: QueryCache = Depends(get_query_cache),
):
    event = svc.update_event(db, event_id, payload)
    if not event:
        raise not_found("Event")
    cache.invalidate(EVENTS_KEY)
    return event


@router.patch("/{event_id}/featured", response_model=EventRead)
def toggle_featured(
    event_id: int,
    payload: Optional[FeaturedToggle] = None,
    db: Session = Depends(get_db),
    cache: QueryCache = Depends(get_query_cache),
):
    event = svc.set_featured(db, event_id, payload.featured if payload else None)
    if not event:
        raise not_found("Event")
    cache.invalidate(EVENTS_KEY)
    return event


@router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_event(event_id: int, db: Session = Depends(get_db), cache: QueryCache = Depends(get_query_cache)) -> None:
    if not svc.delete_event(db, event_id):
        raise not_found("Event")
    cache.invalidate(EVENTS_KEY, STATS_KEY)
    return None
