# backend/caras/models/__init__.py
"""
Central model registry.

Import this once at startup (e.g., in main.py) so SQLAlchemy sees all mapped
classes before the first query or `create_all`.
"""
from caras.db import Base  # re-export Base

from .applications import AdultApplication, ParentApplication, ApplicationStatus, ApplicationKind  # noqa: F401
from .members import Member  # noqa: F401
from .events import Event  # noqa: F401
from .gallery import GalleryImage, DEFAULT_ALBUM  # noqa: F401
from .site_content import HeroContent, ParishClergy  # noqa: F401
from .identity import AuthUser, UserRole, AdminSession, AdminProfile  # noqa: F401

__all__ = [
    "Base",
    "AdultApplication", "ParentApplication", "ApplicationStatus", "ApplicationKind",
    "Member", "Event", "GalleryImage", "DEFAULT_ALBUM",
    "HeroContent", "ParishClergy",
    "AuthUser", "UserRole", "AdminSession", "AdminProfile",
]
