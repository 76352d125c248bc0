# backend/caras/api/site_content.py
from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from caras.api.notices import from_auth_error, invalid, notice
from caras.db import get_db
from caras.dependencies import get_auth_events, get_current_admin, get_identity_provider, get_query_cache
from caras.schemas.identity import ProfileRead, ProfileUpdate
from caras.schemas.site_content import ClergyRead, HeroRead, HeroUpdate
from caras.services import admin_profile, site_content
from caras.services.identity import AdminContext, AuthError, AuthEvents
from caras.services.query_cache import CLERGY_KEY, HERO_KEY, PROFILE_KEY, QueryCache

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Site content"])


def hero_read(db: Session, cache: QueryCache) -> HeroRead:
    try:
        return cache.get_or_fetch(HERO_KEY, lambda: HeroRead.model_validate(site_content.get_hero(db)))
    except site_content.HeroContentError as err:
        logger.error("hero content unavailable: %s", err)
        raise notice(status.HTTP_503_SERVICE_UNAVAILABLE, "Failed to load hero content", str(err))


def clergy_list(db: Session, cache: QueryCache) -> List[ClergyRead]:
    return cache.get_or_fetch(
        CLERGY_KEY, lambda: [ClergyRead.model_validate(c) for c in site_content.list_clergy(db)]
    )


@router.get("/hero", response_model=HeroRead)
def get_hero(db: Session = Depends(get_db), cache: QueryCache = Depends(get_query_cache)):
    return hero_read(db, cache)


@router.put("/hero", response_model=HeroRead)
def update_hero(
    payload: HeroUpdate,
    _: AdminContext = Depends(get_current_admin),
    db: Session = Depends(get_db),
    cache: QueryCache = Depends(get_query_cache),
):
    try:
        hero = site_content.update_hero(db, payload)
    except site_content.HeroContentError as err:
        raise notice(status.HTTP_503_SERVICE_UNAVAILABLE, "Failed to load hero content", str(err))
    cache.invalidate(HERO_KEY)
    return hero


@router.get("/clergy", response_model=List[ClergyRead])
def list_clergy(db: Session = Depends(get_db), cache: QueryCache = Depends(get_query_cache)):
    return clergy_list(db, cache)


# ---- Admin profile ------------------------------------------------------------

@router.get("/profile", response_model=ProfileRead)
def get_profile(
    ctx: AdminContext = Depends(get_current_admin),
    db: Session = Depends(get_db),
    cache: QueryCache = Depends(get_query_cache),
):
    return cache.get_or_fetch(
        PROFILE_KEY + (ctx.user_id,),
        lambda: ProfileRead.model_validate(admin_profile.get_or_create_profile(db, ctx)),
    )


@router.put("/profile", response_model=ProfileRead)
def update_profile(
    payload: ProfileUpdate,
    ctx: AdminContext = Depends(get_current_admin),
    db: Session = Depends(get_db),
    provider=Depends(get_identity_provider),
    events: AuthEvents = Depends(get_auth_events),
    cache: QueryCache = Depends(get_query_cache),
):
    try:
        profile, _changed = admin_profile.update_profile(db, provider, events, ctx, payload)
    except admin_profile.PasswordChangeError as err:
        raise invalid("Update failed", err)
    except AuthError as err:
        raise from_auth_error(err)
    finally:
        cache.invalidate(PROFILE_KEY + (ctx.user_id,))
    return profile
