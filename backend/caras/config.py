"""
Runtime configuration.

Everything comes from environment variables (a local `.env` is loaded first),
so the same code runs against a hosted Postgres/Supabase project in
production and against SQLite + local folders in development and tests.
"""
from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

BACKEND_ROOT = Path(__file__).resolve().parents[1]


def _get_int(key: str, default: int) -> int:
    val = os.getenv(key)
    if val and val.strip().lstrip("-").isdigit():
        return int(val)
    return default


def _get_bool(key: str, default: bool) -> bool:
    val = os.getenv(key)
    if val is None:
        return default
    return val.strip().lower() in {"1", "true", "yes", "on"}


def _get_list(key: str, default: list[str]) -> list[str]:
    val = os.getenv(key)
    if not val:
        return default
    return [x.strip() for x in val.split(",") if x.strip()]


class Config:
    """Application configuration"""

    APP_NAME = "CARAS Site Backend"
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

    # Database
    DATABASE_URL = os.getenv("DATABASE_URL", f"sqlite:///{BACKEND_ROOT / 'caras.db'}")
    SQL_ECHO = _get_bool("SQL_ECHO", False)

    # Local calendar used for "today" (age derivation, member batch year)
    TZ = os.getenv("TZ", "Asia/Manila")

    # Identity: "local" (auth_users table) or "supabase" (GoTrue REST)
    IDENTITY_BACKEND = os.getenv("IDENTITY_BACKEND", "local").lower()
    SUPABASE_URL = (os.getenv("SUPABASE_URL") or "").rstrip("/")
    SUPABASE_ANON_KEY = os.getenv("SUPABASE_ANON_KEY")
    SUPABASE_SERVICE_KEY = os.getenv("SUPABASE_SERVICE_KEY")
    ADMIN_ROLE = os.getenv("ADMIN_ROLE", "admin")
    IDLE_TIMEOUT_MINUTES = _get_int("IDLE_TIMEOUT_MINUTES", 30)

    # Object storage: "local" (folder served under /media) or "supabase"
    STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "local").lower()
    STORAGE_BUCKET = os.getenv("STORAGE_BUCKET", "gallery")
    LOCAL_STORAGE_DIR = os.getenv("LOCAL_STORAGE_DIR", str(BACKEND_ROOT / "media"))
    PUBLIC_MEDIA_BASE_URL = os.getenv("PUBLIC_MEDIA_BASE_URL", "/media")
    ALLOWED_IMAGE_EXTENSIONS = {"png", "jpg", "jpeg", "gif", "webp", "jfif"}
    MAX_UPLOAD_BYTES = _get_int("MAX_UPLOAD_BYTES", 5 * 1024 * 1024)
    GALLERY_PURGE_OBJECTS = _get_bool("GALLERY_PURGE_OBJECTS", True)

    # Chat assistant (Chaindesk-style query endpoint)
    CHAT_QUERY_URL = os.getenv("CHAT_QUERY_URL")
    CHAT_API_KEY = os.getenv("CHAT_API_KEY")
    CHAT_TIMEOUT_SECONDS = _get_int("CHAT_TIMEOUT_SECONDS", 20)

    # Outbound HTTP for identity/storage
    HTTP_TIMEOUT_SECONDS = _get_int("HTTP_TIMEOUT_SECONDS", 15)

    # Members spreadsheet export; unset means the generated layout
    MEMBERS_TEMPLATE_PATH = os.getenv("MEMBERS_TEMPLATE_PATH") or None
    MEMBERS_TEMPLATE_START_ROW = _get_int("MEMBERS_TEMPLATE_START_ROW", 4)
    MEMBERS_TEMPLATE_FONT = os.getenv("MEMBERS_TEMPLATE_FONT", "Arial")

    # Query cache
    CACHE_TTL_SECONDS = _get_int("CACHE_TTL_SECONDS", 30)

    # Pagination
    MEMBERS_PAGE_SIZE = _get_int("MEMBERS_PAGE_SIZE", 20)
    GALLERY_PAGE_SIZE = _get_int("GALLERY_PAGE_SIZE", 12)

    CORS_ORIGINS = _get_list(
        "CORS_ORIGINS",
        [
            "http://localhost:3000", "http://127.0.0.1:3000",
            "http://localhost:5173", "http://127.0.0.1:5173",
            "http://localhost:8080", "http://127.0.0.1:8080",
        ],
    )
