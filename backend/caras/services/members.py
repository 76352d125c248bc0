# backend/caras/services/members.py
from __future__ import annotations

import math
from typing import List, Optional

from sqlalchemy import case, func, or_, select
from sqlalchemy.orm import Session

from caras.models.members import Member
from caras.schemas.members import MemberPage, MemberRead, MemberUpdate

MAX_PAGE_SIZE = 100


def _like(q: str) -> str:
    return f"%{q}%"


def _search_clause(q: Optional[str]):
    term = (q or "").strip()
    if not term:
        return None
    like = _like(term)
    return or_(
        Member.full_name.ilike(like),
        Member.address.ilike(like),
        Member.contact_number.ilike(like),
    )


def _ordered(stmt):
    # batch first (members without a batch go last), then name
    return stmt.order_by(
        case((Member.batch.is_(None), 1), else_=0),
        Member.batch.asc(),
        Member.full_name.asc(),
        Member.id.asc(),
    )


def list_members(db: Session, q: Optional[str] = None, page: int = 1, page_size: int = 20) -> MemberPage:
    page = max(page, 1)
    page_size = min(max(page_size, 1), MAX_PAGE_SIZE)

    where = _search_clause(q)
    count_stmt = select(func.count(Member.id))
    stmt = select(Member)
    if where is not None:
        count_stmt = count_stmt.where(where)
        stmt = stmt.where(where)

    total = db.execute(count_stmt).scalar_one()
    rows = db.execute(_ordered(stmt).offset((page - 1) * page_size).limit(page_size)).scalars().all()

    return MemberPage(
        items=[MemberRead.model_validate(m) for m in rows],
        total=total,
        page=page,
        page_size=page_size,
        total_pages=max(math.ceil(total / page_size), 1),
    )


def all_matching_members(db: Session, q: Optional[str] = None) -> List[Member]:
    """Every matching row in export order, ignoring pagination."""
    stmt = select(Member)
    where = _search_clause(q)
    if where is not None:
        stmt = stmt.where(where)
    return list(db.execute(_ordered(stmt)).scalars().all())


def get_member(db: Session, member_id: int) -> Optional[Member]:
    return db.get(Member, member_id)


def update_member(db: Session, member_id: int, data: MemberUpdate) -> Optional[Member]:
    member = db.get(Member, member_id)
    if not member:
        return None
    for field, value in data.model_dump().items():
        setattr(member, field, value)
    db.commit()
    db.refresh(member)
    return member


def delete_member(db: Session, member_id: int) -> bool:
    member = db.get(Member, member_id)
    if not member:
        return False
    db.delete(member)
    db.commit()
    return True
