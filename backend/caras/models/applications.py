# backend/caras/models/applications.py
from __future__ import annotations

import enum
from datetime import datetime, timezone

from sqlalchemy import Column, Date, DateTime, Integer, String, Text, Enum as SAEnum, func

from caras.db import Base


class ApplicationStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class ApplicationKind(str, enum.Enum):
    ADULT = "adult"
    PARENT = "parent"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# Shared by both application tables so Postgres sees a single enum type
application_status = SAEnum(
    ApplicationStatus,
    name="application_status",
    values_callable=lambda e: [m.value for m in e],
)


class AdultApplication(Base):
    __tablename__ = "adult_applications"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(150), nullable=False)
    birthday = Column(Date, nullable=False)
    age = Column(Integer, nullable=False)
    address = Column(String(255), nullable=False)
    contact = Column(String(50), nullable=False)
    guardian = Column(String(150), nullable=False)
    fb_acc = Column(String(255), nullable=False)
    message = Column(Text, nullable=True)

    status = Column(
        application_status, nullable=False, default=ApplicationStatus.PENDING,
        server_default="pending", index=True,
    )
    created_at = Column(DateTime(timezone=True), default=_utcnow, server_default=func.now(), nullable=False)


class ParentApplication(Base):
    """Application filed by a parent/guardian on behalf of a minor."""
    __tablename__ = "parent_applications"

    id = Column(Integer, primary_key=True, index=True)
    child_name = Column(String(150), nullable=False)
    birthday = Column(Date, nullable=False)
    child_age = Column(Integer, nullable=False)
    address = Column(String(255), nullable=False)
    parent_name = Column(String(150), nullable=False)
    parent_phone = Column(String(50), nullable=False)
    guardian = Column(String(150), nullable=False)
    fb_acc = Column(String(255), nullable=False)
    message = Column(Text, nullable=True)

    status = Column(
        application_status, nullable=False, default=ApplicationStatus.PENDING,
        server_default="pending", index=True,
    )
    created_at = Column(DateTime(timezone=True), default=_utcnow, server_default=func.now(), nullable=False)


MODEL_FOR_KIND = {
    ApplicationKind.ADULT: AdultApplication,
    ApplicationKind.PARENT: ParentApplication,
}
