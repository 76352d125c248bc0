# backend/caras/models/identity.py
import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    Column,
    String,
    Boolean,
    DateTime,
    Integer,
    Text,
    text,
    func,
)

from caras.db import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_user_id() -> str:
    return str(uuid.uuid4())


class AuthUser(Base):
    """
    Credentials for the local identity backend.
    With IDENTITY_BACKEND=supabase this table stays empty; users live in the
    hosted provider and only their ids appear in user_roles/admin_profiles.
    """
    __tablename__ = "auth_users"

    id = Column(String(36), primary_key=True, default=_new_user_id)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True, server_default=text("true"))
    created_at = Column(DateTime(timezone=True), default=_utcnow, server_default=func.now(), nullable=False)


class UserRole(Base):
    """
    Side table the back office consults after sign-in.
    Composite PK (user_id, role); user ids are the identity provider's ids.
    """
    __tablename__ = "user_roles"

    user_id = Column(String(36), primary_key=True)
    role = Column(String(50), primary_key=True)


class AdminSession(Base):
    __tablename__ = "admin_sessions"

    id = Column(Integer, primary_key=True)
    # sha256 hex of the opaque token handed to the client; the token itself is never stored
    token_hash = Column(String(64), nullable=False, unique=True, index=True)
    user_id = Column(String(36), nullable=False, index=True)
    email = Column(String(255), nullable=False)
    # provider access token, needed for provider-side sign-out and password updates
    provider_token = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    last_seen_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)


class AdminProfile(Base):
    __tablename__ = "admin_profiles"

    id = Column(String(36), primary_key=True)  # identity user id
    full_name = Column(String(150), nullable=True)
    email = Column(String(255), nullable=True)
    avatar_url = Column(String(500), nullable=True)
    bio = Column(Text, nullable=True)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False)
