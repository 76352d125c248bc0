# backend/caras/services/applications.py
from __future__ import annotations

import logging
from typing import List, Optional, Union

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from caras.models.applications import (
    AdultApplication,
    ApplicationKind,
    ApplicationStatus,
    MODEL_FOR_KIND,
    ParentApplication,
)
from caras.models.events import Event
from caras.models.members import Member
from caras.schemas.applications import ApplicationDetail, ApplicationRow, ApprovalResult, DashboardStats
from caras.schemas.members import MemberRead
from caras.services.clock import as_utc
from caras.services.exports import rows_to_csv

logger = logging.getLogger(__name__)

AnyApplication = Union[AdultApplication, ParentApplication]

STATUS_FILTERS = {"all", "pending", "approved", "rejected"}

CSV_HEADERS = ["Name", "Type", "Age", "Contact", "Status", "Date Submitted", "Message"]


class ApplicationStateError(ValueError):
    """Raised for a status change the workflow does not allow."""


# ─────────────────────────────────────────────────────────────────────────────
# Boundary: one place that knows the two table shapes
# ─────────────────────────────────────────────────────────────────────────────

def parse_kind(kind: str) -> ApplicationKind:
    try:
        return ApplicationKind((kind or "").strip().lower())
    except ValueError:
        raise ValueError(f"Unknown application type: {kind}")


def _kind_of(app: AnyApplication) -> ApplicationKind:
    return ApplicationKind.ADULT if isinstance(app, AdultApplication) else ApplicationKind.PARENT


def to_row(app: AnyApplication) -> ApplicationRow:
    if isinstance(app, AdultApplication):
        name, age, contact = app.name, app.age, app.contact
    else:
        name, age, contact = app.child_name, app.child_age, app.parent_phone
    return ApplicationRow(
        kind=_kind_of(app),
        id=app.id,
        name=name,
        age=age,
        contact=contact,
        message=app.message,
        status=app.status,
        created_at=app.created_at,
    )


def _member_fields(app: AnyApplication) -> dict:
    row = to_row(app)
    return {
        "full_name": row.name,
        "birthday": app.birthday,
        "age": row.age,
        "address": app.address,
        "guardian": app.guardian,
        "contact_number": row.contact,
    }


def linked_member(db: Session, kind: ApplicationKind, application_id: int) -> Optional[Member]:
    return (
        db.execute(
            select(Member)
            .where(Member.source_kind == kind.value, Member.source_application_id == application_id)
            .order_by(Member.id)
        )
        .scalars()
        .first()
    )


def to_detail(db: Session, app: AnyApplication) -> ApplicationDetail:
    row = to_row(app)
    member = linked_member(db, row.kind, app.id)
    return ApplicationDetail(
        **row.model_dump(),
        birthday=app.birthday,
        address=app.address,
        guardian=app.guardian,
        fb_acc=app.fb_acc,
        parent_name=getattr(app, "parent_name", None),
        member_id=member.id if member else None,
    )


# ─────────────────────────────────────────────────────────────────────────────
# Reads
# ─────────────────────────────────────────────────────────────────────────────

def _matches(row: ApplicationRow, term: str) -> bool:
    return term in (row.name or "").lower() or term in (row.contact or "").lower()


def list_applications(
    db: Session,
    status: Optional[str] = None,
    q: Optional[str] = None,
    limit_per_kind: Optional[int] = None,
) -> List[ApplicationRow]:
    """Both kinds merged, newest first, optionally narrowed by status and search text."""
    status = (status or "all").strip().lower()
    if status not in STATUS_FILTERS:
        raise ValueError(f"Unknown status filter: {status}")

    rows: List[ApplicationRow] = []
    for model in (AdultApplication, ParentApplication):
        stmt = select(model).order_by(model.created_at.desc(), model.id.desc())
        if status != "all":
            stmt = stmt.where(model.status == ApplicationStatus(status))
        if limit_per_kind:
            stmt = stmt.limit(limit_per_kind)
        rows.extend(to_row(a) for a in db.execute(stmt).scalars().all())

    rows.sort(key=lambda r: as_utc(r.created_at), reverse=True)

    term = (q or "").strip().lower()
    if term:
        rows = [r for r in rows if _matches(r, term)]
    return rows


def pending_applications(db: Session, limit: int = 5) -> List[ApplicationRow]:
    return list_applications(db, status="pending", limit_per_kind=limit)


def get_application(db: Session, kind: ApplicationKind, application_id: int) -> Optional[AnyApplication]:
    return db.get(MODEL_FOR_KIND[kind], application_id)


def get_application_detail(db: Session, kind: ApplicationKind, application_id: int) -> Optional[ApplicationDetail]:
    app = get_application(db, kind, application_id)
    return to_detail(db, app) if app else None


def count_pending(db: Session) -> int:
    total = 0
    for model in (AdultApplication, ParentApplication):
        total += db.execute(
            select(func.count(model.id)).where(model.status == ApplicationStatus.PENDING)
        ).scalar_one()
    return total


def dashboard_stats(db: Session) -> DashboardStats:
    return DashboardStats(
        total_members=db.execute(select(func.count(Member.id))).scalar_one(),
        total_events=db.execute(select(func.count(Event.id))).scalar_one(),
        pending_applications=count_pending(db),
    )


# ─────────────────────────────────────────────────────────────────────────────
# Status changes
# ─────────────────────────────────────────────────────────────────────────────

def _settled(db: Session, kind: ApplicationKind, app: AnyApplication) -> ApprovalResult:
    """Result for an application that is no longer pending."""
    if app.status != ApplicationStatus.APPROVED:
        raise ApplicationStateError(f"Application is already {app.status.value}")
    member = linked_member(db, kind, app.id)
    return ApprovalResult(
        application=to_detail(db, app),
        member=MemberRead.model_validate(member) if member else None,
        created=False,
    )


def approve_application(
    db: Session, kind: ApplicationKind, application_id: int, batch: Optional[str] = None
) -> Optional[ApprovalResult]:
    """
    pending -> approved plus the new Member row, committed together.
    Approving an approved application again changes nothing.

    The status flip is a conditional UPDATE, so of two overlapping approvals
    only one gets a row back and inserts the member; the other sees the
    settled application. The unique (source_kind, source_application_id)
    constraint on members backs this up.
    """
    app = get_application(db, kind, application_id)
    if not app:
        return None
    if app.status != ApplicationStatus.PENDING:
        return _settled(db, kind, app)

    model = MODEL_FOR_KIND[kind]
    fields = _member_fields(app)
    claimed = db.execute(
        update(model)
        .where(model.id == application_id, model.status == ApplicationStatus.PENDING)
        .values(status=ApplicationStatus.APPROVED)
        .execution_options(synchronize_session=False)
    ).rowcount
    if claimed != 1:
        db.rollback()
        logger.info("%s application id=%s was settled by another request", kind.value, application_id)
        return _settled(db, kind, get_application(db, kind, application_id))

    member = Member(
        **fields,
        batch=batch,
        source_kind=kind.value,
        source_application_id=application_id,
    )
    db.add(member)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.info("%s application id=%s already has a member", kind.value, application_id)
        return _settled(db, kind, get_application(db, kind, application_id))
    except SQLAlchemyError:
        db.rollback()
        logger.exception("approve %s application id=%s failed; rolled back", kind.value, application_id)
        raise
    db.refresh(app)
    db.refresh(member)
    logger.info("approved %s application id=%s -> member id=%s", kind.value, app.id, member.id)
    return ApprovalResult(
        application=to_detail(db, app),
        member=MemberRead.model_validate(member),
        created=True,
    )


def reject_application(db: Session, kind: ApplicationKind, application_id: int) -> Optional[ApplicationDetail]:
    app = get_application(db, kind, application_id)
    if not app:
        return None
    if app.status == ApplicationStatus.PENDING:
        model = MODEL_FOR_KIND[kind]
        claimed = db.execute(
            update(model)
            .where(model.id == application_id, model.status == ApplicationStatus.PENDING)
            .values(status=ApplicationStatus.REJECTED)
            .execution_options(synchronize_session=False)
        ).rowcount
        db.commit()
        db.refresh(app)
        if claimed == 1:
            logger.info("rejected %s application id=%s", kind.value, app.id)
    if app.status == ApplicationStatus.APPROVED:
        raise ApplicationStateError("Application is already approved")
    return to_detail(db, app)


def remove_linked_member(db: Session, kind: ApplicationKind, application_id: int) -> Optional[bool]:
    """
    Delete the member created from this application; the application keeps
    its status. Returns None when the application does not exist and False
    when it has no member.
    """
    app = get_application(db, kind, application_id)
    if not app:
        return None
    member = linked_member(db, kind, app.id)
    if not member:
        return False
    db.delete(member)
    db.commit()
    logger.info("removed member id=%s linked to %s application id=%s", member.id, kind.value, app.id)
    return True


# ─────────────────────────────────────────────────────────────────────────────
# Export
# ─────────────────────────────────────────────────────────────────────────────

def applications_csv(rows: List[ApplicationRow]) -> str:
    return rows_to_csv(
        CSV_HEADERS,
        (
            [r.name, r.kind.value, r.age, r.contact, r.status.value, r.created_at, r.message or ""]
            for r in rows
        ),
    )
