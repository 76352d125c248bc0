import os
import tempfile
from datetime import date, datetime, timedelta, timezone

# Settle configuration before any caras module reads it
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["IDENTITY_BACKEND"] = "local"
os.environ["STORAGE_BACKEND"] = "local"
os.environ["LOCAL_STORAGE_DIR"] = tempfile.mkdtemp(prefix="caras-media-")
os.environ["TZ"] = "Asia/Manila"
os.environ.pop("CHAT_QUERY_URL", None)
os.environ.pop("MEMBERS_TEMPLATE_PATH", None)

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from caras.db import Base, get_db  # noqa: E402
from caras.main import app  # noqa: E402
from caras.models import AdultApplication, ApplicationStatus, ParentApplication  # noqa: E402
from caras.services.identity import AdminContext, LocalIdentityProvider, create_local_user  # noqa: E402
from caras.services.inactivity import InactivityGuard  # noqa: E402
from caras.services.query_cache import QueryCache  # noqa: E402
from caras.services.storage import LocalObjectStore  # noqa: E402

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)

ADMIN_EMAIL = "admin@caras.test"
ADMIN_PASSWORD = "altar-secret"


@pytest.fixture
def db_session():
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def object_store(tmp_path):
    return LocalObjectStore(str(tmp_path / "media"), "/media", "gallery")


@pytest.fixture
def client(db_session, object_store):
    def _get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = _get_db
    app.state.cache = QueryCache(ttl_seconds=30)
    app.state.identity_provider = LocalIdentityProvider()
    app.state.object_store = object_store
    app.state.inactivity_guard = InactivityGuard(timedelta(minutes=30))
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def admin_user(db_session):
    return create_local_user(db_session, ADMIN_EMAIL, ADMIN_PASSWORD, role="admin")


@pytest.fixture
def admin_headers(client, admin_user):
    r = client.post("/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
    assert r.status_code == 200, r.text
    return {"Authorization": f"Bearer {r.json()['access_token']}"}


@pytest.fixture
def admin_ctx(admin_user):
    return AdminContext(user_id=admin_user.id, email=admin_user.email, role="admin", session_id=0)


def make_adult(db, name="Juan Dela Cruz", status=ApplicationStatus.PENDING, created_at=None, **kw):
    row = AdultApplication(
        name=name,
        birthday=kw.pop("birthday", date(2000, 5, 17)),
        age=kw.pop("age", 24),
        address=kw.pop("address", "Brgy. San Roque, Cebu"),
        contact=kw.pop("contact", "0917 123 4567"),
        guardian=kw.pop("guardian", "Maria Dela Cruz"),
        fb_acc=kw.pop("fb_acc", "fb.com/juan"),
        message=kw.pop("message", ""),
        status=status,
        created_at=created_at or datetime.now(timezone.utc),
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


def make_parent(db, child_name="Pedro Santos", status=ApplicationStatus.PENDING, created_at=None, **kw):
    row = ParentApplication(
        child_name=child_name,
        birthday=kw.pop("birthday", date(2015, 3, 2)),
        child_age=kw.pop("child_age", 9),
        address=kw.pop("address", "Lahug, Cebu City"),
        parent_name=kw.pop("parent_name", "Rosa Santos"),
        parent_phone=kw.pop("parent_phone", "(032) 555-0101"),
        guardian=kw.pop("guardian", "Rosa Santos"),
        fb_acc=kw.pop("fb_acc", "fb.com/rosa"),
        message=kw.pop("message", ""),
        status=status,
        created_at=created_at or datetime.now(timezone.utc),
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    return row
