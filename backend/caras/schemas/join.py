# backend/caras/schemas/join.py
from __future__ import annotations

from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from caras.models.applications import ApplicationKind, ApplicationStatus


class JoinSubmission(BaseModel):
    """
    Membership form as posted by the public site.

    `under18` switches between the adult form and the parent/guardian form.
    Form field names with dashes (`fb-acc`, `child-name`, ...) are accepted
    too. Any age sent by the client is ignored; it is derived from birthday.
    """
    under18: bool = False
    consent: bool = False

    # shared
    birthday: Optional[str] = None
    address: Optional[str] = None
    guardian: Optional[str] = None
    fb_acc: Optional[str] = Field(default=None, validation_alias=AliasChoices("fb_acc", "fb-acc"))
    message: Optional[str] = None

    # adult form
    name: Optional[str] = None
    contact: Optional[str] = None

    # under-18 form
    child_name: Optional[str] = Field(default=None, validation_alias=AliasChoices("child_name", "child-name"))
    parent_name: Optional[str] = Field(default=None, validation_alias=AliasChoices("parent_name", "parent-name"))
    parent_phone: Optional[str] = Field(default=None, validation_alias=AliasChoices("parent_phone", "parent-phone"))

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class JoinResult(BaseModel):
    kind: ApplicationKind
    id: int
    age: int
    status: ApplicationStatus
    title: str = "Application Submitted"
    description: str = "Thank you! We will contact you soon."


class AgePreview(BaseModel):
    birthday: str
    age: Optional[int] = None
