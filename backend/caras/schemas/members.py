# backend/caras/schemas/members.py
from __future__ import annotations

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class MemberBase(BaseModel):
    full_name: str = Field(..., min_length=1, max_length=150)
    birthday: Optional[date] = None
    age: Optional[int] = Field(default=None, ge=0)
    address: Optional[str] = Field(default=None, max_length=255)
    guardian: Optional[str] = Field(default=None, max_length=150)
    contact_number: Optional[str] = Field(default=None, max_length=50)
    batch: Optional[str] = Field(default=None, max_length=50)

    model_config = ConfigDict(from_attributes=True)


class MemberUpdate(MemberBase):
    """Full replace of the editable fields (inline edit sends the whole row)."""
    pass


class MemberRead(MemberBase):
    id: int
    source_kind: Optional[str] = None
    source_application_id: Optional[int] = None
    created_at: datetime


class MemberPage(BaseModel):
    items: List[MemberRead]
    total: int
    page: int
    page_size: int
    total_pages: int
