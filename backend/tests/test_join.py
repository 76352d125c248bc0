from datetime import date

import pytest

from caras.models import AdultApplication, ApplicationStatus, ParentApplication
from caras.schemas.join import JoinSubmission
from caras.services.clock import local_today
from caras.services.join import JoinValidationError, compute_age, is_valid_phone, validate_submission


def _adult(**overrides):
    payload = {
        "under18": False,
        "consent": True,
        "name": "Juan Dela Cruz",
        "birthday": "2000-05-17",
        "address": "Brgy. San Roque, Cebu",
        "contact": "0917 123 4567",
        "guardian": "Maria Dela Cruz",
        "fb_acc": "fb.com/juan",
        "message": "I want to serve.",
    }
    payload.update(overrides)
    return payload


def _minor(**overrides):
    payload = {
        "under18": True,
        "consent": True,
        "child-name": "Pedro Santos",
        "birthday": "2015-03-02",
        "address": "Lahug, Cebu City",
        "parent-name": "Rosa Santos",
        "parent-phone": "(032) 555-0101",
        "guardian": "Rosa Santos",
        "fb-acc": "fb.com/rosa",
    }
    payload.update(overrides)
    return payload


def test_age_counts_whole_years():
    assert compute_age(date(2015, 6, 1), date(2024, 6, 1)) == 9
    assert compute_age(date(2015, 6, 2), date(2024, 6, 1)) == 8
    assert compute_age(date(2016, 2, 29), date(2024, 2, 28)) == 7


def test_phone_pattern():
    assert is_valid_phone("0917 123 4567")
    assert is_valid_phone("+63 (32) 555-0101")
    assert not is_valid_phone("12345")
    assert not is_valid_phone("0917-abc-4567")


def test_validation_stops_at_first_failure():
    # name and birthday are both bad; name is checked first
    form = JoinSubmission(**_adult(name="J", birthday=""))
    with pytest.raises(JoinValidationError) as exc:
        validate_submission(form)
    assert exc.value.title == "Invalid Name"


def test_consent_checked_before_anything_else():
    form = JoinSubmission(**_adult(consent=False, name=""))
    with pytest.raises(JoinValidationError) as exc:
        validate_submission(form)
    assert exc.value.title == "Consent Required"


def test_adult_minimum_age():
    form = JoinSubmission(**_adult(birthday="2018-01-01"))
    with pytest.raises(JoinValidationError) as exc:
        validate_submission(form, today=date(2024, 6, 1))
    assert exc.value.title == "Invalid Age"
    assert exc.value.description == "Applicants must be age 7 or above."


def test_client_age_is_ignored(client, db_session):
    r = client.post("/join", json=_adult(age=99))
    assert r.status_code == 201, r.text
    body = r.json()
    assert body["kind"] == "adult"
    assert body["age"] == compute_age(date(2000, 5, 17), local_today())

    row = db_session.get(AdultApplication, body["id"])
    assert row.age == body["age"]
    assert row.status == ApplicationStatus.PENDING


def test_minor_form_goes_to_parent_table(client, db_session):
    r = client.post("/join", json=_minor())
    assert r.status_code == 201, r.text
    body = r.json()
    assert body["kind"] == "parent"
    assert body["title"] == "Application Submitted"

    row = db_session.get(ParentApplication, body["id"])
    assert row.child_name == "Pedro Santos"
    assert row.parent_phone == "(032) 555-0101"
    assert row.fb_acc == "fb.com/rosa"
    assert db_session.query(AdultApplication).count() == 0


@pytest.mark.parametrize(
    "overrides,title",
    [
        ({"consent": False}, "Consent Required"),
        ({"child-name": "P"}, "Invalid Child Name"),
        ({"birthday": "not-a-date"}, "Birthday Required"),
        ({"address": "x"}, "Invalid Address"),
        ({"parent-name": ""}, "Invalid Parent Name"),
        ({"parent-phone": "call me"}, "Invalid Parent Phone"),
        ({"guardian": "  "}, "Guardian Name Required"),
        ({"fb-acc": ""}, "Facebook Account Required"),
    ],
)
def test_minor_rejections_insert_nothing(client, db_session, overrides, title):
    r = client.post("/join", json=_minor(**overrides))
    assert r.status_code == 422
    assert r.json()["detail"]["title"] == title
    assert db_session.query(ParentApplication).count() == 0


def test_minor_birthday_in_future_is_rejected(client):
    future = date(local_today().year + 1, 1, 1).isoformat()
    r = client.post("/join", json=_minor(birthday=future))
    assert r.status_code == 422
    assert r.json()["detail"] == {"title": "Invalid Child Age", "description": "Child's age must be 1 or above."}


def test_adult_bad_contact(client):
    r = client.post("/join", json=_adult(contact="12"))
    assert r.status_code == 422
    assert r.json()["detail"]["title"] == "Invalid Contact"


def test_age_preview(client):
    r = client.get("/join/age", params={"birthday": "2000-05-17"})
    assert r.status_code == 200
    assert r.json()["age"] == compute_age(date(2000, 5, 17), local_today())

    r = client.get("/join/age", params={"birthday": "garbage"})
    assert r.status_code == 200
    assert r.json()["age"] is None


def test_submission_shows_up_for_admins(client, admin_headers):
    assert client.get("/applications", headers=admin_headers).json() == []
    client.post("/join", json=_adult())
    rows = client.get("/applications", headers=admin_headers).json()
    assert [r["name"] for r in rows] == ["Juan Dela Cruz"]
