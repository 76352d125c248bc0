import logging
from datetime import timedelta
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

# Ensure all SQLAlchemy models are imported so metadata is complete
import caras.models  # noqa: F401

from caras.config import Config
from caras.api import (
    applications,
    auth,
    chatbot,
    events,
    gallery,
    join,
    members,
    site,
    site_content,
)

# Ops/system endpoints (/health, /version)
from caras.api.system import router as system_router
from caras.services.identity import (
    SESSION_EXPIRED,
    SIGNED_OUT,
    AdminContext,
    AuthEvents,
    build_provider,
)
from caras.services.inactivity import InactivityGuard
from caras.services.query_cache import PROFILE_KEY, QueryCache
from caras.services.storage import LocalObjectStore, build_store

logging.basicConfig(
    level=Config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title=Config.APP_NAME)

# --- CORS for the site / dashboard dev servers ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=Config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- Shared collaborators (swapped out by tests) ---
app.state.cache = QueryCache(ttl_seconds=Config.CACHE_TTL_SECONDS)
app.state.identity_provider = build_provider(Config)
app.state.object_store = build_store(Config)
app.state.auth_events = AuthEvents()
app.state.inactivity_guard = InactivityGuard(timedelta(minutes=Config.IDLE_TIMEOUT_MINUTES))


def _log_auth_event(event: str, ctx: AdminContext) -> None:
    logger.info("auth event %s for %s", event, ctx.email)


def _drop_profile_cache(event: str, ctx: AdminContext) -> None:
    if event in (SIGNED_OUT, SESSION_EXPIRED):
        app.state.cache.invalidate(PROFILE_KEY + (ctx.user_id,))


app.state.auth_events.subscribe(_log_auth_event)
app.state.auth_events.subscribe(_drop_profile_cache)

# Local object store is served by the app itself
if isinstance(app.state.object_store, LocalObjectStore) and Config.PUBLIC_MEDIA_BASE_URL.startswith("/"):
    Path(Config.LOCAL_STORAGE_DIR).mkdir(parents=True, exist_ok=True)
    app.mount(
        Config.PUBLIC_MEDIA_BASE_URL,
        StaticFiles(directory=Config.LOCAL_STORAGE_DIR),
        name="media",
    )

# Routers
app.include_router(system_router)  # /health, /version
app.include_router(auth.router)    # /login, /logout, /auth/session

# Public routers first: /events/public and /gallery/public must win over /{id}
app.include_router(events.public_router)   # /events/public, /event/{id}
app.include_router(gallery.public_router)  # /gallery/public, /gallery/public/albums
app.include_router(join.router)            # /join
app.include_router(chatbot.router)         # /chatbot
app.include_router(site_content.router)    # /hero, /clergy, /profile

# Back office
app.include_router(applications.router)  # /applications
app.include_router(members.router)       # /members
app.include_router(events.router)        # /events
app.include_router(gallery.router)       # /gallery

# Landing page and dashboard shell
app.include_router(site.router)  # /, /dashboard

# Catch-all 404; keep last
app.include_router(site.fallback_router)
