# backend/caras/services/join.py
"""
Public membership form: derive the age, validate in the order the form shows
its fields, then insert one pending application.
"""
from __future__ import annotations

import logging
import re
from datetime import date
from typing import Optional, Union

from dateutil.relativedelta import relativedelta
from sqlalchemy.orm import Session

from caras.models.applications import AdultApplication, ApplicationKind, ApplicationStatus, ParentApplication
from caras.schemas.join import JoinResult, JoinSubmission
from caras.services.clock import local_today

logger = logging.getLogger(__name__)

PHONE_RE = re.compile(r"^[0-9\-\+\(\) ]{7,}$")

MIN_ADULT_AGE = 7
MIN_CHILD_AGE = 1


class JoinValidationError(ValueError):
    def __init__(self, title: str, description: str):
        super().__init__(f"{title}: {description}")
        self.title = title
        self.description = description


def parse_birthday(value: Optional[Union[str, date]]) -> Optional[date]:
    if isinstance(value, date):
        return value
    text = (value or "").strip()
    if len(text) < 8:
        return None
    try:
        return date.fromisoformat(text)
    except ValueError:
        return None


def compute_age(birthday: date, today: Optional[date] = None) -> int:
    """Whole years between birthday and today (local calendar)."""
    today = today or local_today()
    return relativedelta(today, birthday).years


def is_valid_phone(phone: Optional[str]) -> bool:
    return bool(PHONE_RE.match((phone or "").strip()))


def _text(value: Optional[str]) -> str:
    return (value or "").strip()


def _require(ok: bool, title: str, description: str) -> None:
    if not ok:
        raise JoinValidationError(title, description)


def validate_submission(form: JoinSubmission, today: Optional[date] = None) -> tuple[date, int]:
    """Return (birthday, age) or raise the first failing check."""
    _require(
        form.consent,
        "Consent Required",
        "Please read the privacy notice and tick the box to proceed.",
    )

    minor = form.under18
    if minor:
        _require(len(_text(form.child_name)) >= 2, "Invalid Child Name", "Enter your child's name.")
    else:
        _require(len(_text(form.name)) >= 2, "Invalid Name", "Enter your name.")

    birthday = parse_birthday(form.birthday)
    _require(
        birthday is not None,
        "Birthday Required",
        "Please specify your child's birthday." if minor else "Please specify your birthday.",
    )
    age = compute_age(birthday, today)
    if minor:
        _require(age >= MIN_CHILD_AGE, "Invalid Child Age", "Child's age must be 1 or above.")
    else:
        _require(age >= MIN_ADULT_AGE, "Invalid Age", "Applicants must be age 7 or above.")

    _require(len(_text(form.address)) >= 3, "Invalid Address", "Enter your address.")

    if minor:
        _require(len(_text(form.parent_name)) >= 2, "Invalid Parent Name", "Enter parent's name.")
        _require(is_valid_phone(form.parent_phone), "Invalid Parent Phone", "Enter a valid phone number.")
        _require(bool(_text(form.guardian)), "Guardian Name Required", "Please provide the guardian's name.")
        _require(bool(_text(form.fb_acc)), "Facebook Account Required", "Please enter FB account.")
    else:
        _require(is_valid_phone(form.contact), "Invalid Contact", "Enter a valid phone number.")
        _require(bool(_text(form.guardian)), "Guardian Name Required", "Please provide your guardian's name.")
        _require(bool(_text(form.fb_acc)), "Facebook Account Required", "Please enter your FB account.")

    return birthday, age


def submit_application(db: Session, form: JoinSubmission, today: Optional[date] = None) -> JoinResult:
    birthday, age = validate_submission(form, today)

    if form.under18:
        kind = ApplicationKind.PARENT
        row = ParentApplication(
            child_name=_text(form.child_name),
            birthday=birthday,
            child_age=age,
            address=_text(form.address),
            parent_name=_text(form.parent_name),
            parent_phone=_text(form.parent_phone),
            guardian=_text(form.guardian),
            fb_acc=_text(form.fb_acc),
            message=form.message or "",
            status=ApplicationStatus.PENDING,
        )
    else:
        kind = ApplicationKind.ADULT
        row = AdultApplication(
            name=_text(form.name),
            birthday=birthday,
            age=age,
            address=_text(form.address),
            contact=_text(form.contact),
            guardian=_text(form.guardian),
            fb_acc=_text(form.fb_acc),
            message=form.message or "",
            status=ApplicationStatus.PENDING,
        )

    db.add(row)
    db.commit()
    db.refresh(row)
    logger.info("new %s application id=%s", kind.value, row.id)
    return JoinResult(kind=kind, id=row.id, age=age, status=row.status)
