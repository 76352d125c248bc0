# caras/api/system.py
from __future__ import annotations

import logging
from datetime import datetime

from fastapi import APIRouter
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from caras.config import Config
from caras.db import engine
from caras.services.clock import local_tz

logger = logging.getLogger(__name__)

router = APIRouter(tags=["ops"])

VERSION = "1.0.0"


def _db_driver_from_url(url: str | None) -> str | None:
    if not url or "://" not in url:
        return None
    scheme = url.split("://", 1)[0]  # e.g., "postgresql+psycopg2"
    if "+" in scheme:
        return scheme.split("+", 1)[1]  # "psycopg2"
    return scheme


@router.get("/health")
def health():
    """Liveness check with a lightweight DB probe and local time."""
    now_local = datetime.now(local_tz(Config.TZ)).isoformat()
    db = {"status": "ok", "driver": _db_driver_from_url(Config.DATABASE_URL)}
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.warning("health probe failed: %s", e)
        db["status"] = f"error: {type(e).__name__}"

    return {
        "status": "ok",
        "time": {"tz": Config.TZ, "now": now_local},
        "db": db,
    }


@router.get("/version")
def version():
    """Minimal runtime info for the UI."""
    return {
        "app": Config.APP_NAME,
        "version": VERSION,
        "db_driver": _db_driver_from_url(Config.DATABASE_URL),
        "identity": Config.IDENTITY_BACKEND,
        "storage": Config.STORAGE_BACKEND,
        "tz": Config.TZ,
    }
