# backend/caras/services/site_content.py
from __future__ import annotations

from typing import List

from sqlalchemy import select
from sqlalchemy.orm import Session

from caras.models.site_content import HeroContent, ParishClergy
from caras.schemas.site_content import HeroUpdate


class HeroContentError(ValueError):
    """The hero table must hold exactly one row."""


def get_hero(db: Session) -> HeroContent:
    rows = db.execute(select(HeroContent).limit(2)).scalars().all()
    if len(rows) != 1:
        raise HeroContentError(
            "hero_content has no row" if not rows else "hero_content has more than one row"
        )
    return rows[0]


def update_hero(db: Session, data: HeroUpdate) -> HeroContent:
    hero = get_hero(db)
    for field, value in data.model_dump().items():
        setattr(hero, field, value)
    db.commit()
    db.refresh(hero)
    return hero


def list_clergy(db: Session) -> List[ParishClergy]:
    return list(
        db.execute(
            select(ParishClergy).order_by(
                ParishClergy.category.asc(), ParishClergy.display_order.asc(), ParishClergy.name.asc()
            )
        )
        .scalars()
        .all()
    )
