from conftest import ADMIN_EMAIL

from caras.models import HeroContent, ParishClergy


def _hero(db, headline="Serve with joy"):
    db.add(HeroContent(headline=headline, subtext="CARAS", background_url="/media/hero.jpg"))
    db.commit()


def test_hero_needs_exactly_one_row(client, db_session):
    r = client.get("/hero")
    assert r.status_code == 503
    assert r.json()["detail"]["title"] == "Failed to load hero content"

    _hero(db_session)
    client.app.state.cache.clear()
    r = client.get("/hero")
    assert r.status_code == 200
    assert r.json()["headline"] == "Serve with joy"

    _hero(db_session, headline="Duplicate")
    client.app.state.cache.clear()
    assert client.get("/hero").status_code == 503


def test_hero_update_is_visible_immediately(client, admin_headers, db_session):
    _hero(db_session)
    assert client.get("/hero").json()["headline"] == "Serve with joy"

    r = client.put(
        "/hero",
        json={"headline": "Come and serve", "subtext": None, "background_url": None},
        headers=admin_headers,
    )
    assert r.status_code == 200
    assert client.get("/hero").json()["headline"] == "Come and serve"

    assert client.put("/hero", json={"headline": "x"}).status_code == 401


def test_clergy_ordered_by_category_then_order(client, db_session):
    db_session.add_all([
        ParishClergy(name="Fr. B", category="Parochial Vicars", display_order=2),
        ParishClergy(name="Fr. A", category="Parochial Vicars", display_order=1),
        ParishClergy(name="Fr. P", category="Parish Priest", display_order=1),
    ])
    db_session.commit()
    names = [c["name"] for c in client.get("/clergy").json()]
    assert names == ["Fr. P", "Fr. A", "Fr. B"]


def test_landing_payload(client, db_session):
    _hero(db_session)
    body = client.get("/").json()
    assert set(body) == {"hero", "events", "albums", "clergy"}
    assert body["hero"]["headline"] == "Serve with joy"


def test_unknown_pages_get_a_notice(client):
    r = client.get("/about-us/old-page")
    assert r.status_code == 404
    assert r.json()["detail"]["title"] == "Page not found"
    assert "/about-us/old-page" in r.json()["detail"]["description"]


def test_profile_is_created_on_first_visit(client, admin_headers):
    r = client.get("/profile", headers=admin_headers)
    assert r.status_code == 200
    body = r.json()
    assert body["email"] == ADMIN_EMAIL
    assert body["full_name"] == ""


def test_profile_update_without_password(client, admin_headers):
    r = client.put(
        "/profile",
        json={"full_name": "Bro. Admin", "avatar_url": "", "bio": "Coordinator"},
        headers=admin_headers,
    )
    assert r.status_code == 200
    assert r.json()["full_name"] == "Bro. Admin"
    assert client.get("/profile", headers=admin_headers).json()["bio"] == "Coordinator"


def test_password_rules(client, admin_headers):
    r = client.put("/profile", json={"new_password": "abc", "confirm_password": "abc"}, headers=admin_headers)
    assert r.status_code == 422
    assert r.json()["detail"] == {
        "title": "Update failed",
        "description": "Password must be at least 6 characters.",
    }

    r = client.put(
        "/profile", json={"new_password": "abcdef", "confirm_password": "abcdeg"}, headers=admin_headers
    )
    assert r.status_code == 422
    assert r.json()["detail"]["description"] == "Passwords do not match."

    # confirm alone still counts as a change request
    r = client.put("/profile", json={"confirm_password": "abcdef"}, headers=admin_headers)
    assert r.status_code == 422


def test_password_change_takes_effect(client, admin_headers):
    r = client.put(
        "/profile",
        json={"full_name": "Admin", "new_password": "new-secret", "confirm_password": "new-secret"},
        headers=admin_headers,
    )
    assert r.status_code == 200

    assert client.post("/login", json={"email": ADMIN_EMAIL, "password": "altar-secret"}).status_code == 401
    assert client.post("/login", json={"email": ADMIN_EMAIL, "password": "new-secret"}).status_code == 200


def test_dashboard_views(client, admin_headers, db_session):
    _hero(db_session)
    members = client.get("/dashboard", params={"view": "members"}, headers=admin_headers).json()
    assert members["view"] == "members"
    assert members["data"]["items"] == []

    hero = client.get("/dashboard", params={"view": "hero"}, headers=admin_headers).json()
    assert hero["data"]["headline"] == "Serve with joy"

    fallback = client.get("/dashboard", params={"view": "nonsense"}, headers=admin_headers).json()
    assert fallback["view"] == "overview"
