# backend/caras/schemas/applications.py
from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict

from caras.models.applications import ApplicationKind, ApplicationStatus
from caras.schemas.members import MemberRead


class ApplicationRow(BaseModel):
    """
    One row of the merged applications table.

    Adult and parent applications have different column names; `kind` is the
    discriminant and name/age/contact are already resolved for that kind.
    """
    kind: ApplicationKind
    id: int
    name: str
    age: int
    contact: str
    message: Optional[str] = None
    status: ApplicationStatus
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ApplicationDetail(ApplicationRow):
    birthday: date
    address: str
    guardian: str
    fb_acc: str
    parent_name: Optional[str] = None  # parent applications only
    member_id: Optional[int] = None


class ApprovalResult(BaseModel):
    application: ApplicationDetail
    member: Optional[MemberRead] = None
    created: bool  # False when the application was already approved


class DashboardStats(BaseModel):
    total_members: int
    total_events: int
    pending_applications: int
