from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from caras.models.events import Event
from caras.schemas.events import EventCreate, EventNarrative, EventUpdate, PublicEventCard


def list_events(db: Session) -> List[Event]:
    return list(db.execute(select(Event).order_by(Event.date.desc(), Event.id.desc())).scalars().all())


def get_event(db: Session, event_id: int) -> Optional[Event]:
    return db.get(Event, event_id)


def create_event(db: Session, data: EventCreate) -> Event:
    event = Event(**data.model_dump())
    db.add(event)
    db.commit()
    db.refresh(event)
    return event


def update_event(db: Session, event_id: int, data: EventUpdate) -> Optional[Event]:
    event = db.get(Event, event_id)
    if not event:
        return None
    for field, value in data.model_dump().items():
        setattr(event, field, value)
    db.commit()
    db.refresh(event)
    return event


def set_featured(db: Session, event_id: int, featured: Optional[bool] = None) -> Optional[Event]:
    """Set the featured flag; None flips it."""
    event = db.get(Event, event_id)
    if not event:
        return None
    event.featured = (not event.featured) if featured is None else featured
    db.commit()
    db.refresh(event)
    return event


def delete_event(db: Session, event_id: int) -> bool:
    event = db.get(Event, event_id)
    if not event:
        return False
    db.delete(event)
    db.commit()
    return True


def public_events(db: Session) -> List[PublicEventCard]:
    """Featured first, then by date (earliest first)."""
    events = db.execute(select(Event)).scalars().all()
    ordered = sorted(events, key=lambda e: (not e.featured, e.date, e.id))
    return [
        PublicEventCard(
            id=e.id,
            title=e.title,
            date=e.date,
            summary=e.summary,
            banner_url=e.banner_url,
            featured=e.featured,
            link=f"/event/{e.id}",
        )
        for e in ordered
    ]


def event_narrative(db: Session, event_id: int) -> Optional[EventNarrative]:
    event = db.get(Event, event_id)
    return EventNarrative.model_validate(event) if event else None
