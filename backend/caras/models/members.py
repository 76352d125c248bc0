# backend/caras/models/members.py
from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Column, Date, DateTime, Integer, String, UniqueConstraint, func

from caras.db import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Member(Base):
    __tablename__ = "members"

    id = Column(Integer, primary_key=True, index=True)
    full_name = Column(String(150), nullable=False, index=True)
    birthday = Column(Date, nullable=True)
    age = Column(Integer, nullable=True)
    address = Column(String(255), nullable=True)
    guardian = Column(String(150), nullable=True)
    contact_number = Column(String(50), nullable=True)
    batch = Column(String(50), nullable=True, index=True)

    # Application that produced this member (copied, not a FK: both
    # application tables feed this one)
    source_kind = Column(String(10), nullable=True)
    source_application_id = Column(Integer, nullable=True)

    created_at = Column(DateTime(timezone=True), default=_utcnow, server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True), default=_utcnow, server_default=func.now(), onupdate=_utcnow, nullable=False
    )

    __table_args__ = (
        # one member per application
        UniqueConstraint("source_kind", "source_application_id", name="uq_members_source"),
    )

    def __repr__(self) -> str:
        return f"<Member id={self.id} full_name={self.full_name!r} batch={self.batch!r}>"
