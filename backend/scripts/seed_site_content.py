# backend/scripts/seed_site_content.py
"""
Seed the public site's content: the hero singleton, the parish clergy list
and a few sample events. Safe to run more than once.

Usage (from backend/):
  python scripts/seed_site_content.py
  python scripts/seed_site_content.py --no-events
"""
from __future__ import annotations

import argparse
import sys
from datetime import date, timedelta
from pathlib import Path

HERE = Path(__file__).resolve()
BACKEND_ROOT = HERE.parents[1]
if str(BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(BACKEND_ROOT))

from sqlalchemy import func, select  # noqa: E402

from caras.db import SessionLocal  # noqa: E402
from caras.models import Event, HeroContent, ParishClergy  # noqa: E402

HERO = {
    "headline": "Serving at the Altar of the Lord",
    "subtext": "Confraternity of Augustinian Recollect Altar Servers",
    "background_url": None,
}

CLERGY = [
    # (name, category, display_order, description)
    ("Parish Priest", "Parish Priest", 1, "Shepherd of the parish community."),
    ("Parochial Vicar", "Parochial Vicars", 1, "Assists the parish priest in the sacraments."),
    ("CARAS Spiritual Director", "Spiritual Directors", 1, "Guides the formation of altar servers."),
]

SAMPLE_EVENTS = [
    ("Altar Servers Recollection", 14, True, "A day of prayer and reflection for all servers."),
    ("New Members Investiture", 45, False, "Welcoming this year's batch of altar servers."),
    ("Feast of St. Augustine", 90, False, "Serving at the solemn celebration of our patron."),
]


def seed_hero(db) -> str:
    count = db.execute(select(func.count(HeroContent.id))).scalar_one()
    if count:
        return f"hero: {count} row(s) present, left unchanged"
    db.add(HeroContent(**HERO))
    return "hero: created"


def seed_clergy(db) -> str:
    created = 0
    for name, category, order, description in CLERGY:
        exists = db.execute(
            select(ParishClergy.id).where(ParishClergy.name == name, ParishClergy.category == category)
        ).first()
        if exists:
            continue
        db.add(ParishClergy(name=name, category=category, display_order=order, description=description))
        created += 1
    return f"clergy: {created} created"


def seed_events(db) -> str:
    created = 0
    today = date.today()
    for title, days_ahead, featured, summary in SAMPLE_EVENTS:
        if db.execute(select(Event.id).where(Event.title == title)).first():
            continue
        db.add(Event(title=title, date=today + timedelta(days=days_ahead), featured=featured, summary=summary))
        created += 1
    return f"events: {created} created"


def main(argv=None) -> int:
    p = argparse.ArgumentParser(description="Seed CARAS site content")
    p.add_argument("--no-events", action="store_true", help="skip the sample events")
    args = p.parse_args(argv)

    with SessionLocal() as db:
        notes = [seed_hero(db), seed_clergy(db)]
        if not args.no_events:
            notes.append(seed_events(db))
        db.commit()

    for n in notes:
        print(f"✓ {n}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
