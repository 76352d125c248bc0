def _event(title, day, featured=False, **extra):
    body = {
        "title": title,
        "date": day,
        "summary": f"{title} summary",
        "banner_url": None,
        "narrative_image_url": None,
        "narrative": f"The story of {title}.",
        "featured": featured,
    }
    body.update(extra)
    return body


def test_crud_and_admin_order(client, admin_headers):
    a = client.post("/events", json=_event("Recollection", "2024-03-01"), headers=admin_headers)
    assert a.status_code == 201, a.text
    b = client.post("/events", json=_event("Investiture", "2024-08-15"), headers=admin_headers).json()

    listed = client.get("/events", headers=admin_headers).json()
    assert [e["title"] for e in listed] == ["Investiture", "Recollection"]

    r = client.put(
        f"/events/{b['id']}",
        json=_event("Investiture Mass", "2024-08-16", summary=None),
        headers=admin_headers,
    )
    assert r.status_code == 200
    assert r.json()["title"] == "Investiture Mass"
    assert r.json()["summary"] is None

    assert client.delete(f"/events/{b['id']}", headers=admin_headers).status_code == 204
    assert client.get(f"/events/{b['id']}", headers=admin_headers).status_code == 404


def test_featured_flag_flips_independently(client, admin_headers):
    ev = client.post("/events", json=_event("Feast", "2024-08-28"), headers=admin_headers).json()

    r = client.patch(f"/events/{ev['id']}/featured", headers=admin_headers)
    assert r.json()["featured"] is True
    r = client.patch(f"/events/{ev['id']}/featured", headers=admin_headers)
    assert r.json()["featured"] is False

    r = client.patch(f"/events/{ev['id']}/featured", json={"featured": True}, headers=admin_headers)
    assert r.json()["featured"] is True
    assert r.json()["title"] == "Feast"

    assert client.patch("/events/999/featured", headers=admin_headers).status_code == 404


def test_public_cards_featured_first_then_soonest(client, admin_headers):
    client.post("/events", json=_event("Late", "2024-12-24"), headers=admin_headers)
    client.post("/events", json=_event("Early", "2024-01-10"), headers=admin_headers)
    star = client.post("/events", json=_event("Star", "2024-06-01", featured=True), headers=admin_headers).json()

    cards = client.get("/events/public").json()
    assert [c["title"] for c in cards] == ["Star", "Early", "Late"]
    assert cards[0]["link"] == f"/event/{star['id']}"
    assert "narrative" not in cards[0]


def test_public_list_sees_new_events(client, admin_headers):
    assert client.get("/events/public").json() == []
    client.post("/events", json=_event("Fresh", "2024-05-05"), headers=admin_headers)
    assert [c["title"] for c in client.get("/events/public").json()] == ["Fresh"]


def test_narrative_page(client, admin_headers):
    ev = client.post("/events", json=_event("Retreat", "2024-04-04"), headers=admin_headers).json()
    r = client.get(f"/event/{ev['id']}")
    assert r.status_code == 200
    assert r.json()["narrative"] == "The story of Retreat."

    r = client.get("/event/4242")
    assert r.status_code == 404
    assert r.json()["detail"]["description"] == "Event not found."


def test_unknown_event_ids_leave_the_cache_empty(client):
    cache = client.app.state.cache
    for event_id in range(1000, 1200):
        assert client.get(f"/event/{event_id}").status_code == 404
    assert len(cache) == 0
    assert cache._key_locks == {}


def test_admin_event_routes_require_login(client):
    assert client.post("/events", json=_event("Nope", "2024-01-01")).status_code == 401
