# backend/caras/api/auth.py
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from caras.api.notices import from_auth_error
from caras.config import Config
from caras.db import get_db
from caras.dependencies import get_auth_events, get_current_admin, get_identity_provider
from caras.schemas.identity import LoginRequest, LoginResponse, SessionRead
from caras.services import identity
from caras.services.identity import AdminContext, AuthError, AuthEvents

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Auth"])


@router.post("/login", response_model=LoginResponse)
def login(
    payload: LoginRequest,
    db: Session = Depends(get_db),
    provider=Depends(get_identity_provider),
    events: AuthEvents = Depends(get_auth_events),
) -> LoginResponse:
    try:
        token, ctx = identity.login(
            db, provider, events, payload.email, payload.password, required_role=Config.ADMIN_ROLE
        )
    except AuthError as err:
        raise from_auth_error(err)
    return LoginResponse(
        access_token=token,
        user_id=ctx.user_id,
        email=ctx.email,
        role=ctx.role,
        idle_timeout_minutes=Config.IDLE_TIMEOUT_MINUTES,
    )


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
def logout(
    ctx: AdminContext = Depends(get_current_admin),
    db: Session = Depends(get_db),
    provider=Depends(get_identity_provider),
    events: AuthEvents = Depends(get_auth_events),
) -> None:
    identity.logout(db, provider, events, ctx)
    return None


@router.get("/auth/session", response_model=SessionRead)
def current_session(ctx: AdminContext = Depends(get_current_admin)) -> SessionRead:
    return SessionRead(user_id=ctx.user_id, email=ctx.email, role=ctx.role)
