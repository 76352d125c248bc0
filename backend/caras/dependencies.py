"""
Shared FastAPI dependency helpers.

`get_db` hands each request its own SQLAlchemy session. The long-lived
collaborators (query cache, identity provider, object store, auth event
stream, inactivity guard) are created once in `main.py`, kept on `app.state`
and handed to routers from here so tests can swap them.
"""
from typing import Optional

from fastapi import Depends, Header, Request
from sqlalchemy.orm import Session

from caras.api.notices import from_auth_error
from caras.config import Config
from caras.db import get_db  # noqa: F401  (re-exported for routers)
from caras.services import identity
from caras.services.identity import AdminContext, AuthError, AuthEvents
from caras.services.inactivity import InactivityGuard
from caras.services.query_cache import QueryCache


def get_query_cache(request: Request) -> QueryCache:
    return request.app.state.cache


def get_identity_provider(request: Request):
    return request.app.state.identity_provider


def get_object_store(request: Request):
    return request.app.state.object_store


def get_auth_events(request: Request) -> AuthEvents:
    return request.app.state.auth_events


def get_inactivity_guard(request: Request) -> InactivityGuard:
    return request.app.state.inactivity_guard


def bearer_token(authorization: Optional[str] = Header(default=None)) -> Optional[str]:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def get_current_admin(
    token: Optional[str] = Depends(bearer_token),
    db: Session = Depends(get_db),
    guard: InactivityGuard = Depends(get_inactivity_guard),
    events: AuthEvents = Depends(get_auth_events),
) -> AdminContext:
    """Resolve the admin session behind the bearer token and mark it active."""
    try:
        return identity.resolve_session(db, token, guard, events, required_role=Config.ADMIN_ROLE)
    except AuthError as err:
        raise from_auth_error(err)
