# Minimal live-server smoke test for the public site and back office
# Run:  python scripts/smoke_site.py
# Env:  BASE_URL, SMOKE_ADMIN_EMAIL, SMOKE_ADMIN_PASSWORD (admin part is skipped without them)

import os
import sys

import requests

BASE = os.getenv("BASE_URL", "http://127.0.0.1:8000")
EMAIL = os.getenv("SMOKE_ADMIN_EMAIL")
PASSWORD = os.getenv("SMOKE_ADMIN_PASSWORD")
TIMEOUT = 15


def check(r, expect=200):
    if r.status_code != expect:
        print(f"✗ {r.request.method} {r.url} -> {r.status_code}: {r.text[:300]}")
        sys.exit(1)
    print(f"✓ {r.request.method} {r.url} -> {r.status_code}")
    return r


def public_checks():
    check(requests.get(f"{BASE}/health", timeout=TIMEOUT))
    check(requests.get(f"{BASE}/version", timeout=TIMEOUT))
    check(requests.get(f"{BASE}/events/public", timeout=TIMEOUT))
    check(requests.get(f"{BASE}/gallery/public/albums", timeout=TIMEOUT))
    check(requests.get(f"{BASE}/clergy", timeout=TIMEOUT))
    check(requests.get(f"{BASE}/chatbot", timeout=TIMEOUT))
    check(requests.get(f"{BASE}/join/age", params={"birthday": "2010-01-01"}, timeout=TIMEOUT))
    r = check(requests.get(f"{BASE}/no-such-page", timeout=TIMEOUT), expect=404)
    assert r.json()["detail"]["title"] == "Page not found"

    # invalid submissions are refused before anything is stored
    r = check(requests.post(f"{BASE}/join", json={"consent": False}, timeout=TIMEOUT), expect=422)
    assert r.json()["detail"]["title"] == "Consent Required"


def admin_checks():
    r = check(requests.post(f"{BASE}/login", json={"email": EMAIL, "password": PASSWORD}, timeout=TIMEOUT))
    headers = {"Authorization": f"Bearer {r.json()['access_token']}"}
    try:
        check(requests.get(f"{BASE}/auth/session", headers=headers, timeout=TIMEOUT))
        r = check(requests.get(f"{BASE}/dashboard", headers=headers, timeout=TIMEOUT))
        print(f"  stats: {r.json()['stats']}")
        check(requests.get(f"{BASE}/applications", params={"status": "pending"}, headers=headers, timeout=TIMEOUT))
        check(requests.get(f"{BASE}/members", headers=headers, timeout=TIMEOUT))
        r = check(requests.get(f"{BASE}/members/export.xlsx", headers=headers, timeout=TIMEOUT))
        print(f"  members.xlsx: {len(r.content)} bytes")
        check(requests.get(f"{BASE}/gallery/albums", headers=headers, timeout=TIMEOUT))
        check(requests.get(f"{BASE}/profile", headers=headers, timeout=TIMEOUT))
    finally:
        check(requests.post(f"{BASE}/logout", headers=headers, timeout=TIMEOUT), expect=204)


def main():
    print(f"→ Using API {BASE}")
    public_checks()
    if EMAIL and PASSWORD:
        admin_checks()
    else:
        print("… admin checks skipped (SMOKE_ADMIN_EMAIL / SMOKE_ADMIN_PASSWORD not set)")
    print("SMOKE_OK")


if __name__ == "__main__":
    main()
