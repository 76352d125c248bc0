# backend/caras/api/site.py
"""
Page-level payloads: the public landing page, the dashboard shell and the
not-found fallback. Included last so the catch-all never shadows a real route.
"""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from caras.api.events import public_cards
from caras.api.gallery import album_list
from caras.api.notices import notice
from caras.api.site_content import clergy_list, hero_read
from caras.config import Config
from caras.db import get_db
from caras.dependencies import get_current_admin, get_query_cache
from caras.schemas.applications import DashboardStats
from caras.schemas.events import EventRead
from caras.schemas.identity import ProfileRead
from caras.services import admin_profile, applications, events, gallery, members
from caras.services.identity import AdminContext
from caras.services.query_cache import APPLICATIONS_KEY, STATS_KEY, QueryCache

router = APIRouter(tags=["Site"])
fallback_router = APIRouter(include_in_schema=False)

DASHBOARD_VIEWS = {"applications", "members", "events", "gallery", "hero", "profile"}


@router.get("/")
def landing(db: Session = Depends(get_db), cache: QueryCache = Depends(get_query_cache)):
    return {
        "hero": hero_read(db, cache),
        "events": public_cards(db, cache),
        "albums": album_list(db, cache),
        "clergy": clergy_list(db, cache),
    }


def _overview(db: Session, cache: QueryCache, ctx: AdminContext) -> dict:
    stats: DashboardStats = cache.get_or_fetch(STATS_KEY, lambda: applications.dashboard_stats(db))
    pending = cache.get_or_fetch(
        APPLICATIONS_KEY + ("pending-widget", 5), lambda: applications.pending_applications(db, 5)
    )
    return {"view": "overview", "email": ctx.email, "stats": stats, "pending": pending}


@router.get("/dashboard")
def dashboard(
    view: Optional[str] = Query(None),
    ctx: AdminContext = Depends(get_current_admin),
    db: Session = Depends(get_db),
    cache: QueryCache = Depends(get_query_cache),
):
    """One admin view's data; unknown or missing views fall back to the overview."""
    view = (view or "").strip().lower()
    if view not in DASHBOARD_VIEWS:
        return _overview(db, cache, ctx)

    if view == "applications":
        data = applications.list_applications(db)
    elif view == "members":
        data = members.list_members(db, page_size=Config.MEMBERS_PAGE_SIZE)
    elif view == "events":
        data = [EventRead.model_validate(e) for e in events.list_events(db)]
    elif view == "gallery":
        data = {
            "albums": gallery.list_albums(db),
            "images": [gallery.to_read(i) for i in gallery.list_images(db)],
        }
    elif view == "hero":
        data = hero_read(db, cache)
    else:
        data = ProfileRead.model_validate(admin_profile.get_or_create_profile(db, ctx))
    return {"view": view, "email": ctx.email, "data": data}


@fallback_router.get("/{path:path}")
def page_not_found(path: str):
    raise notice(
        status.HTTP_404_NOT_FOUND,
        "Page not found",
        f"Oops! The page /{path} does not exist.",
    )
