# backend/caras/services/admin_profile.py
from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from caras.models.identity import AdminProfile
from caras.schemas.identity import ProfileUpdate
from caras.services import identity
from caras.services.identity import AdminContext, AuthEvents

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


class PasswordChangeError(ValueError):
    pass


def get_or_create_profile(db: Session, ctx: AdminContext) -> AdminProfile:
    profile = db.get(AdminProfile, ctx.user_id)
    if profile:
        return profile
    profile = AdminProfile(id=ctx.user_id, email=ctx.email, full_name="", avatar_url="", bio="")
    db.add(profile)
    db.commit()
    db.refresh(profile)
    logger.info("created admin profile for %s", ctx.email)
    return profile


def check_password_change(new_password: str, confirm_password: str) -> bool:
    """False when no change was asked for; raises when the pair is unusable."""
    if not new_password and not confirm_password:
        return False
    if len(new_password) < MIN_PASSWORD_LENGTH:
        raise PasswordChangeError("Password must be at least 6 characters.")
    if new_password != confirm_password:
        raise PasswordChangeError("Passwords do not match.")
    return True


def update_profile(
    db: Session,
    provider,
    events: AuthEvents,
    ctx: AdminContext,
    data: ProfileUpdate,
) -> tuple[AdminProfile, bool]:
    """
    Save the profile fields, then change the password when either password
    field is filled. Returns (profile, password_changed).
    """
    profile = get_or_create_profile(db, ctx)
    profile.full_name = data.full_name
    profile.avatar_url = data.avatar_url
    profile.bio = data.bio
    db.commit()
    db.refresh(profile)

    changed = check_password_change(data.new_password, data.confirm_password)
    if changed:
        identity.update_password(db, provider, events, ctx, data.new_password)
    return profile, changed
