# backend/caras/api/members.py
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from caras.api.notices import not_found
from caras.config import Config
from caras.db import get_db
from caras.dependencies import get_current_admin, get_query_cache
from caras.schemas.members import MemberPage, MemberRead, MemberUpdate
from caras.services import members as svc
from caras.services.exports import (
    CSV_MEDIA_TYPE,
    MEMBER_CSV_HEADERS,
    XLSX_MEDIA_TYPE,
    attachment_headers,
    member_csv_rows,
    members_workbook,
    rows_to_csv,
)
from caras.services.query_cache import MEMBERS_KEY, STATS_KEY, QueryCache

router = APIRouter(prefix="/members", tags=["Members"], dependencies=[Depends(get_current_admin)])


def _page(db: Session, cache: QueryCache, q: Optional[str], page: int, page_size: int) -> MemberPage:
    key = MEMBERS_KEY + ((q or "").strip().lower(), page, page_size)
    return cache.get_or_fetch(key, lambda: svc.list_members(db, q=q, page=page, page_size=page_size))


@router.get("", response_model=MemberPage)
def list_members(
    q: Optional[str] = Query(None, description="Search name, address or contact"),
    page: int = Query(1, ge=1),
    page_size: int = Query(Config.MEMBERS_PAGE_SIZE, ge=1, le=svc.MAX_PAGE_SIZE),
    db: Session = Depends(get_db),
    cache: QueryCache = Depends(get_query_cache),
) -> MemberPage:
    return _page(db, cache, q, page, page_size)


@router.get("/export.csv")
def export_csv(
    q: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    page_size: int = Query(Config.MEMBERS_PAGE_SIZE, ge=1, le=svc.MAX_PAGE_SIZE),
    db: Session = Depends(get_db),
    cache: QueryCache = Depends(get_query_cache),
) -> Response:
    """The page currently on screen."""
    result = _page(db, cache, q, page, page_size)
    body = rows_to_csv(MEMBER_CSV_HEADERS, member_csv_rows(result.items))
    return Response(content=body, media_type=CSV_MEDIA_TYPE, headers=attachment_headers("members.csv"))


@router.get("/export.xlsx")
def export_xlsx(q: Optional[str] = Query(None), db: Session = Depends(get_db)) -> Response:
    """Every matching member, written into the members template."""
    data = members_workbook(
        svc.all_matching_members(db, q=q),
        template_path=Config.MEMBERS_TEMPLATE_PATH,
        start_row=Config.MEMBERS_TEMPLATE_START_ROW,
        font_name=Config.MEMBERS_TEMPLATE_FONT,
    )
    return Response(content=data, media_type=XLSX_MEDIA_TYPE, headers=attachment_headers("members.xlsx"))


@router.get("/{member_id}", response_model=MemberRead)
def get_member(member_id: int, db: Session = Depends(get_db)):
    member = svc.get_member(db, member_id)
    if not member:
        raise not_found("Member")
    return member


@router.put("/{member_id}", response_model=MemberRead)
def update_member(
    member_id: int,
    payload: MemberUpdate,
    db: Session = Depends(get_db),
    cache: QueryCache = Depends(get_query_cache),
):
    member = svc.update_member(db, member_id, payload)
    if not member:
        raise not_found("Member")
    cache.invalidate(MEMBERS_KEY)
    return member


@router.delete("/{member_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_member(
    member_id: int,
    db: Session = Depends(get_db),
    cache: QueryCache = Depends(get_query_cache),
) -> None:
    if not svc.delete_member(db, member_id):
        raise not_found("Member")
    cache.invalidate(MEMBERS_KEY, STATS_KEY)
    return None
