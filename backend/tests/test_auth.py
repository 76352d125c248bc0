from datetime import datetime, timedelta, timezone

import pytest

from conftest import ADMIN_EMAIL, ADMIN_PASSWORD

from caras.models import AdminSession
from caras.services.identity import (
    SESSION_EXPIRED,
    SIGNED_IN,
    SIGNED_OUT,
    AuthError,
    AuthEvents,
    SupabaseIdentityProvider,
    create_local_user,
    hash_token,
)
from caras.services.inactivity import InactivityGuard


class FakeResponse:
    def __init__(self, status_code, payload=None, text=""):
        self.status_code = status_code
        self._payload = payload
        self.text = text

    def json(self):
        if self._payload is None:
            raise ValueError("no json")
        return self._payload


class FakeHttp:
    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def _next(self, method, url, **kw):
        self.calls.append((method, url, kw))
        return self.responses.pop(0)

    def post(self, url, **kw):
        return self._next("POST", url, **kw)

    def put(self, url, **kw):
        return self._next("PUT", url, **kw)


@pytest.fixture
def recorded_events(client):
    seen = []
    events = client.app.state.auth_events
    unsubscribe = events.subscribe(lambda event, ctx: seen.append((event, ctx.email)))
    yield seen
    unsubscribe()


def test_login_returns_token_and_stores_only_its_hash(client, admin_user, db_session, recorded_events):
    r = client.post("/login", json={"email": ADMIN_EMAIL.upper(), "password": ADMIN_PASSWORD})
    assert r.status_code == 200
    body = r.json()
    assert body["role"] == "admin"
    assert body["idle_timeout_minutes"] == 30

    sess = db_session.query(AdminSession).one()
    assert sess.token_hash == hash_token(body["access_token"])
    assert body["access_token"] not in (sess.token_hash, sess.provider_token)
    assert recorded_events == [(SIGNED_IN, ADMIN_EMAIL)]


def test_bad_credentials(client, admin_user):
    r = client.post("/login", json={"email": ADMIN_EMAIL, "password": "wrong"})
    assert r.status_code == 401
    assert r.json()["detail"]["description"] == "Invalid login credentials"


def test_users_without_admin_role_are_refused(client, db_session):
    create_local_user(db_session, "server@caras.test", "serve-123", role=None)
    r = client.post("/login", json={"email": "server@caras.test", "password": "serve-123"})
    assert r.status_code == 403
    assert r.json()["detail"]["title"] == "Access denied"
    assert db_session.query(AdminSession).count() == 0


def test_session_and_logout(client, admin_headers, recorded_events):
    r = client.get("/auth/session", headers=admin_headers)
    assert r.status_code == 200
    assert r.json()["email"] == ADMIN_EMAIL

    assert client.post("/logout", headers=admin_headers).status_code == 204
    assert recorded_events[-1] == (SIGNED_OUT, ADMIN_EMAIL)
    assert client.get("/auth/session", headers=admin_headers).status_code == 401


def test_malformed_authorization_header(client, admin_user):
    r = client.get("/auth/session", headers={"Authorization": "Token abc"})
    assert r.status_code == 401
    assert r.headers["www-authenticate"] == "Bearer"


def test_idle_session_expires(client, admin_headers, db_session, recorded_events):
    later = datetime.now(timezone.utc) + timedelta(minutes=31)
    client.app.state.inactivity_guard = InactivityGuard(timedelta(minutes=30), clock=lambda: later)

    r = client.get("/members", headers=admin_headers)
    assert r.status_code == 401
    assert r.json()["detail"]["description"] == "Session expired due to inactivity"
    assert recorded_events[-1] == (SESSION_EXPIRED, ADMIN_EMAIL)
    assert db_session.query(AdminSession).count() == 0


def test_activity_keeps_the_session_alive(client, admin_headers, db_session):
    start = datetime.now(timezone.utc)
    for minutes in (29, 58, 87):
        moment = start + timedelta(minutes=minutes)
        client.app.state.inactivity_guard = InactivityGuard(timedelta(minutes=30), clock=lambda m=moment: m)
        assert client.get("/auth/session", headers=admin_headers).status_code == 200


def test_inactivity_guard_bounds():
    now = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)
    guard = InactivityGuard(timedelta(minutes=30), clock=lambda: now)
    assert not guard.is_expired(now - timedelta(minutes=30))
    assert guard.is_expired(now - timedelta(minutes=30, seconds=1))
    # naive values from SQLite are read as UTC
    assert guard.remaining(datetime(2024, 6, 1, 11, 50)) == timedelta(minutes=20)


def test_auth_events_isolate_listener_failures():
    events = AuthEvents()
    seen = []

    def broken(event, ctx):
        raise RuntimeError("listener bug")

    events.subscribe(broken)
    off = events.subscribe(lambda e, c: seen.append(e))
    events.publish(SIGNED_IN, object())
    off()
    events.publish(SIGNED_OUT, object())
    assert seen == [SIGNED_IN]


def test_supabase_provider_sign_in_and_password_update(db_session):
    http = FakeHttp(
        FakeResponse(200, {"access_token": "gotrue-token", "user": {"id": "u-1", "email": "a@b.c"}}),
        FakeResponse(200, {}),
        FakeResponse(422, {"msg": "Password should be at least 6 characters"}),
    )
    provider = SupabaseIdentityProvider("https://proj.supabase.co/", "anon", http=http)

    ps = provider.sign_in(db_session, "a@b.c", "pw")
    assert (ps.user_id, ps.access_token) == ("u-1", "gotrue-token")
    method, url, kw = http.calls[0]
    assert url == "https://proj.supabase.co/auth/v1/token"
    assert kw["params"] == {"grant_type": "password"}
    assert kw["headers"]["apikey"] == "anon"

    provider.update_password(db_session, "u-1", "gotrue-token", "long-enough")
    assert http.calls[1][0] == "PUT"
    assert http.calls[1][2]["headers"]["Authorization"] == "Bearer gotrue-token"

    with pytest.raises(AuthError) as exc:
        provider.update_password(db_session, "u-1", "gotrue-token", "x")
    assert exc.value.description == "Password should be at least 6 characters"
