# backend/caras/services/identity.py
"""
Identity & session handling for the back office.

Sign-in is delegated to an identity provider:
- LocalIdentityProvider: `auth_users` table with werkzeug password hashes
  (development, tests, single-box deployments)
- SupabaseIdentityProvider: the hosted GoTrue REST API

After the provider accepts the credentials we look up the role in
`user_roles`, open an `admin_sessions` row and hand the client an opaque
token. Handlers receive the resolved identity as an explicit `AdminContext`.
"""
from __future__ import annotations

import hashlib
import logging
import secrets
from dataclasses import dataclass
from typing import Callable, List, Optional

import requests
from sqlalchemy import select, delete
from sqlalchemy.orm import Session
from werkzeug.security import check_password_hash, generate_password_hash

from caras.models.identity import AdminSession, AuthUser, UserRole
from caras.services.inactivity import InactivityGuard

logger = logging.getLogger(__name__)

SIGNED_IN = "SIGNED_IN"
SIGNED_OUT = "SIGNED_OUT"
PASSWORD_UPDATED = "PASSWORD_UPDATED"
SESSION_EXPIRED = "SESSION_EXPIRED"


class AuthError(ValueError):
    def __init__(self, title: str, description: str = "", status_code: int = 401):
        super().__init__(description or title)
        self.title = title
        self.description = description
        self.status_code = status_code


@dataclass
class ProviderSession:
    user_id: str
    email: str
    access_token: Optional[str] = None


@dataclass
class AdminContext:
    user_id: str
    email: str
    role: str
    session_id: int
    provider_token: Optional[str] = None


# ---- Auth-state stream --------------------------------------------------------

AuthListener = Callable[[str, AdminContext], None]


class AuthEvents:
    """Auth-state-change subscription; listeners get (event, context)."""

    def __init__(self) -> None:
        self._listeners: List[AuthListener] = []

    def subscribe(self, listener: AuthListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def publish(self, event: str, ctx: AdminContext) -> None:
        for listener in list(self._listeners):
            try:
                listener(event, ctx)
            except Exception:
                logger.exception("auth listener failed for %s", event)


# ---- Providers ----------------------------------------------------------------

class LocalIdentityProvider:
    name = "local"

    def sign_in(self, db: Session, email: str, password: str) -> ProviderSession:
        user = (
            db.execute(select(AuthUser).where(AuthUser.email == email.strip().lower()))
            .scalars()
            .first()
        )
        if not user or not user.is_active or not check_password_hash(user.password_hash, password):
            raise AuthError("Login failed", "Invalid login credentials")
        return ProviderSession(user_id=user.id, email=user.email)

    def sign_out(self, access_token: Optional[str]) -> None:
        return None

    def update_password(
        self, db: Session, user_id: str, access_token: Optional[str], new_password: str
    ) -> None:
        user = db.get(AuthUser, user_id)
        if not user:
            raise AuthError("Password update failed", "User not found", status_code=404)
        user.password_hash = generate_password_hash(new_password)
        db.commit()


class SupabaseIdentityProvider:
    """Thin client over the hosted GoTrue endpoints."""

    name = "supabase"

    def __init__(self, base_url: str, anon_key: str, timeout: int = 15, http=requests):
        self.base_url = base_url.rstrip("/")
        self.anon_key = anon_key
        self.timeout = timeout
        self.http = http

    def _headers(self, access_token: Optional[str] = None) -> dict:
        headers = {"apikey": self.anon_key, "Content-Type": "application/json"}
        if access_token:
            headers["Authorization"] = f"Bearer {access_token}"
        return headers

    @staticmethod
    def _error_message(resp) -> str:
        try:
            body = resp.json()
        except ValueError:
            return resp.text or f"HTTP {resp.status_code}"
        return body.get("error_description") or body.get("msg") or body.get("message") or str(body)

    def sign_in(self, db: Session, email: str, password: str) -> ProviderSession:
        resp = self.http.post(
            f"{self.base_url}/auth/v1/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
            headers=self._headers(),
            timeout=self.timeout,
        )
        if resp.status_code != 200:
            raise AuthError("Login failed", self._error_message(resp))
        body = resp.json()
        user = body.get("user") or {}
        return ProviderSession(
            user_id=str(user.get("id")),
            email=user.get("email") or email,
            access_token=body.get("access_token"),
        )

    def sign_out(self, access_token: Optional[str]) -> None:
        if not access_token:
            return
        resp = self.http.post(
            f"{self.base_url}/auth/v1/logout",
            headers=self._headers(access_token),
            timeout=self.timeout,
        )
        if resp.status_code >= 400:
            logger.warning("provider sign-out returned %s", resp.status_code)

    def update_password(
        self, db: Session, user_id: str, access_token: Optional[str], new_password: str
    ) -> None:
        if not access_token:
            raise AuthError("Password update failed", "Session has no provider token")
        resp = self.http.put(
            f"{self.base_url}/auth/v1/user",
            json={"password": new_password},
            headers=self._headers(access_token),
            timeout=self.timeout,
        )
        if resp.status_code >= 400:
            raise AuthError("Password update failed", self._error_message(resp), status_code=400)


def build_provider(config) -> LocalIdentityProvider | SupabaseIdentityProvider:
    if config.IDENTITY_BACKEND == "supabase":
        if not config.SUPABASE_URL or not config.SUPABASE_ANON_KEY:
            raise RuntimeError("IDENTITY_BACKEND=supabase needs SUPABASE_URL and SUPABASE_ANON_KEY")
        return SupabaseIdentityProvider(
            config.SUPABASE_URL, config.SUPABASE_ANON_KEY, timeout=config.HTTP_TIMEOUT_SECONDS
        )
    return LocalIdentityProvider()


# ---- Roles & sessions ---------------------------------------------------------

def hash_token(token: str) -> str:
    """sha256 hex; only the hash is stored."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def lookup_roles(db: Session, user_id: str) -> List[str]:
    return list(db.execute(select(UserRole.role).where(UserRole.user_id == user_id)).scalars().all())


def grant_role(db: Session, user_id: str, role: str) -> None:
    exists = db.get(UserRole, (user_id, role))
    if not exists:
        db.add(UserRole(user_id=user_id, role=role))
        db.commit()


def create_local_user(db: Session, email: str, password: str, role: Optional[str] = "admin") -> AuthUser:
    user = AuthUser(email=email.strip().lower(), password_hash=generate_password_hash(password))
    db.add(user)
    db.commit()
    db.refresh(user)
    if role:
        grant_role(db, user.id, role)
    return user


def login(
    db: Session,
    provider,
    events: AuthEvents,
    email: str,
    password: str,
    required_role: str = "admin",
) -> tuple[str, AdminContext]:
    ps = provider.sign_in(db, email, password)
    roles = lookup_roles(db, ps.user_id)
    if required_role not in roles:
        provider.sign_out(ps.access_token)
        logger.info("login refused for %s: missing role %s", ps.email, required_role)
        raise AuthError("Access denied", "This account is not an administrator.", status_code=403)

    token = secrets.token_urlsafe(32)
    sess = AdminSession(
        token_hash=hash_token(token),
        user_id=ps.user_id,
        email=ps.email,
        provider_token=ps.access_token,
    )
    db.add(sess)
    db.commit()
    db.refresh(sess)

    ctx = AdminContext(
        user_id=ps.user_id,
        email=ps.email,
        role=required_role,
        session_id=sess.id,
        provider_token=ps.access_token,
    )
    events.publish(SIGNED_IN, ctx)
    return token, ctx


def resolve_session(
    db: Session,
    token: Optional[str],
    guard: InactivityGuard,
    events: AuthEvents,
    required_role: str = "admin",
) -> AdminContext:
    if not token:
        raise AuthError("Not authenticated", "Please log in.")

    sess = (
        db.execute(select(AdminSession).where(AdminSession.token_hash == hash_token(token)))
        .scalars()
        .first()
    )
    if not sess:
        raise AuthError("Not authenticated", "Session not found or already closed.")

    ctx = AdminContext(
        user_id=sess.user_id,
        email=sess.email,
        role=required_role,
        session_id=sess.id,
        provider_token=sess.provider_token,
    )

    if guard.is_expired(sess.last_seen_at):
        db.delete(sess)
        db.commit()
        events.publish(SESSION_EXPIRED, ctx)
        raise AuthError("Session expired", "Session expired due to inactivity")

    # Role can be revoked while a session is open
    if required_role not in lookup_roles(db, sess.user_id):
        raise AuthError("Access denied", "This account is not an administrator.", status_code=403)

    sess.last_seen_at = guard.now()
    db.commit()
    return ctx


def logout(db: Session, provider, events: AuthEvents, ctx: AdminContext) -> None:
    try:
        provider.sign_out(ctx.provider_token)
    except requests.RequestException:
        logger.warning("provider sign-out failed for %s", ctx.email, exc_info=True)
    db.execute(delete(AdminSession).where(AdminSession.id == ctx.session_id))
    db.commit()
    events.publish(SIGNED_OUT, ctx)


def update_password(db: Session, provider, events: AuthEvents, ctx: AdminContext, new_password: str) -> None:
    provider.update_password(db, ctx.user_id, ctx.provider_token, new_password)
    events.publish(PASSWORD_UPDATED, ctx)
