# backend/caras/api/applications.py
from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from caras.api.notices import conflict, invalid, not_found
from caras.db import get_db
from caras.dependencies import get_current_admin, get_query_cache
from caras.models.applications import ApplicationKind
from caras.schemas.applications import ApplicationDetail, ApplicationRow, ApprovalResult
from caras.services import applications as svc
from caras.services.clock import local_today
from caras.services.exports import CSV_MEDIA_TYPE, attachment_headers
from caras.services.query_cache import APPLICATIONS_KEY, MEMBERS_KEY, STATS_KEY, QueryCache

router = APIRouter(prefix="/applications", tags=["Applications"], dependencies=[Depends(get_current_admin)])


def _kind(kind: str) -> ApplicationKind:
    try:
        return svc.parse_kind(kind)
    except ValueError as err:
        raise invalid("Invalid application type", err)


def _rows(db: Session, cache: QueryCache, status_filter: Optional[str], q: Optional[str]) -> List[ApplicationRow]:
    key = APPLICATIONS_KEY + ((status_filter or "all").lower(), (q or "").strip().lower())
    try:
        return cache.get_or_fetch(key, lambda: svc.list_applications(db, status=status_filter, q=q))
    except ValueError as err:
        raise invalid("Invalid filter", err)


def _invalidate(cache: QueryCache) -> None:
    cache.invalidate(APPLICATIONS_KEY, MEMBERS_KEY, STATS_KEY)


@router.get("", response_model=List[ApplicationRow])
def list_applications(
    status_filter: Optional[str] = Query(None, alias="status", description="all, pending, approved or rejected"),
    q: Optional[str] = Query(None, description="Search name or contact"),
    db: Session = Depends(get_db),
    cache: QueryCache = Depends(get_query_cache),
) -> List[ApplicationRow]:
    return _rows(db, cache, status_filter, q)


@router.get("/pending", response_model=List[ApplicationRow])
def pending_widget(
    limit: int = Query(5, ge=1, le=50),
    db: Session = Depends(get_db),
    cache: QueryCache = Depends(get_query_cache),
) -> List[ApplicationRow]:
    return cache.get_or_fetch(APPLICATIONS_KEY + ("pending-widget", limit), lambda: svc.pending_applications(db, limit))


@router.get("/export.csv")
def export_csv(
    status_filter: Optional[str] = Query(None, alias="status"),
    q: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    cache: QueryCache = Depends(get_query_cache),
) -> Response:
    body = svc.applications_csv(_rows(db, cache, status_filter, q))
    return Response(content=body, media_type=CSV_MEDIA_TYPE, headers=attachment_headers("applications.csv"))


@router.get("/{kind}/{application_id}", response_model=ApplicationDetail)
def get_application(kind: str, application_id: int, db: Session = Depends(get_db)) -> ApplicationDetail:
    detail = svc.get_application_detail(db, _kind(kind), application_id)
    if not detail:
        raise not_found("Application")
    return detail


@router.post("/{kind}/{application_id}/approve", response_model=ApprovalResult)
def approve(
    kind: str,
    application_id: int,
    db: Session = Depends(get_db),
    cache: QueryCache = Depends(get_query_cache),
) -> ApprovalResult:
    try:
        result = svc.approve_application(db, _kind(kind), application_id, batch=str(local_today().year))
    except svc.ApplicationStateError as err:
        raise conflict("Cannot approve", err)
    if not result:
        raise not_found("Application")
    _invalidate(cache)
    return result


@router.post("/{kind}/{application_id}/reject", response_model=ApplicationDetail)
def reject(
    kind: str,
    application_id: int,
    db: Session = Depends(get_db),
    cache: QueryCache = Depends(get_query_cache),
) -> ApplicationDetail:
    try:
        detail = svc.reject_application(db, _kind(kind), application_id)
    except svc.ApplicationStateError as err:
        raise conflict("Cannot reject", err)
    if not detail:
        raise not_found("Application")
    _invalidate(cache)
    return detail


@router.delete("/{kind}/{application_id}/member", status_code=status.HTTP_204_NO_CONTENT)
def remove_member(
    kind: str,
    application_id: int,
    db: Session = Depends(get_db),
    cache: QueryCache = Depends(get_query_cache),
) -> None:
    removed = svc.remove_linked_member(db, _kind(kind), application_id)
    if removed is None:
        raise not_found("Application")
    if not removed:
        raise not_found("Member")
    _invalidate(cache)
    return None
