"""
End-to-end tests for the calendar HTTP API
"""
import pytest
from fastapi.testclient import TestClient

from advent.calendar.main import app
from advent.calendar.models import Calendar
from conftest import taipei_time


def create(client, slug="xmas", access_code=None, total_days=25, **extra):
    payload = {
        "slug": slug,
        "recipient_name": "Amy",
        "admin_code": "admin-pass",
        "start_date": "2025-12-01",
        "total_days": total_days,
        **extra,
    }
    if access_code is not None:
        payload["access_code"] = access_code
    return client.post("/calendar/calendars", json=payload)


@pytest.fixture
def guest(clock):
    with TestClient(app) as guest_client:
        yield guest_client


def test_health(client):
    response = client.get("/calendar/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "service": "calendar", "database": "connected"}


def test_security_headers(client):
    response = client.get("/calendar/health")
    assert response.headers["X-Frame-Options"] == "DENY"
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert "no-store" in response.headers["Cache-Control"]
    assert "Content-Security-Policy" in response.headers


def test_create_calendar(client):
    response = create(client, total_days=10)
    assert response.status_code == 201

    profile = response.json()
    assert profile["slug"] == "xmas"
    assert profile["recipient_name"] == "Amy"
    assert profile["total_days"] == 10
    assert profile["has_password"] is False
    assert profile["role"] == "admin"
    assert profile["background"]["start_color"] == "#450a0a"
    assert profile["card_style"]["color"] == "#7f1d1d"
    assert "admin-xmas" in response.cookies

    # creator is admin and sees the default content
    days = client.get("/calendar/xmas/days").json()
    assert len(days) == 10
    assert days[9] == {
        "day": 10,
        "locked": False,
        "type": "text",
        "title": "Day 10",
        "content": "No surprise here yet!",
    }


def test_create_calendar_with_custom_style(client):
    response = create(
        client,
        background={"start_color": "#FDF6E3", "end_color": "#5997D9", "pattern": "❄️"},
        card_style={"color": "#FFCB5C"},
    )
    profile = response.json()
    assert profile["background"]["pattern"] == "❄️"
    assert profile["background"]["end_color"] == "#5997D9"
    assert profile["card_style"]["color"] == "#FFCB5C"


def test_passwords_are_not_stored_in_plain_text(client, db):
    create(client, access_code="guest-pass")
    calendar = db.query(Calendar).filter(Calendar.slug == "xmas").one()
    assert "admin-pass" not in calendar.admin_code_hash
    assert "guest-pass" not in calendar.access_code_hash


@pytest.mark.parametrize("total_days", [1, 31])
def test_day_count_bounds(client, total_days):
    assert create(client, total_days=total_days).status_code == 422


def test_invalid_slug(client):
    assert create(client, slug="Not A Slug").status_code == 422


def test_duplicate_and_reserved_slugs(client):
    assert create(client).status_code == 201
    response = create(client)
    assert response.status_code == 400
    assert response.json() == {"error": "Slug already exists", "category": "client_error"}
    assert create(client, slug="health").status_code == 400


def test_unknown_calendar(client):
    response = client.get("/calendar/nope/days")
    assert response.status_code == 404
    assert response.json()["error"] == "Calendar not found"


def test_guest_sees_only_open_days(client, guest, clock):
    create(client)
    client.put("/calendar/xmas/days/7", json={"title": "Spoiler", "content": "a bike", "content_type": "text"})

    clock.now = taipei_time(2025, 12, 5)
    days = guest.get("/calendar/xmas/days").json()
    assert len(days) == 25
    assert [d["locked"] for d in days[:6]] == [False] * 5 + [True]
    assert days[6] == {"day": 7, "locked": True, "type": "text", "title": None, "content": None}

    clock.now = taipei_time(2025, 12, 7, 0, 0)
    day7 = guest.get("/calendar/xmas/days").json()[6]
    assert day7["locked"] is False
    assert day7["content"] == "a bike"


def test_guest_before_start_sees_nothing(client, guest, clock):
    create(client)
    clock.now = taipei_time(2025, 11, 30, 23, 59)
    days = guest.get("/calendar/xmas/days").json()
    assert all(d["locked"] for d in days)


def test_admin_sees_future_days(client, clock):
    create(client)
    clock.now = taipei_time(2025, 11, 1)
    days = client.get("/calendar/xmas/days").json()
    assert not any(d["locked"] for d in days)


def test_protected_calendar_requires_guest_password(client, guest):
    create(client, access_code="guest-pass")

    profile = guest.get("/calendar/xmas").json()
    assert profile["has_password"] is True
    assert profile["role"] == "locked"

    response = guest.get("/calendar/xmas/days")
    assert response.status_code == 401
    assert response.json()["category"] == "security"

    wrong = guest.post("/calendar/xmas/access", json={"password": "nope"})
    assert wrong.status_code == 401

    right = guest.post("/calendar/xmas/access", json={"password": "guest-pass"})
    assert right.status_code == 200
    assert right.json() == {"success": True, "role": "guest"}

    assert guest.get("/calendar/xmas").json()["role"] == "guest"
    assert guest.get("/calendar/xmas/days").status_code == 200


def test_access_on_public_calendar_always_succeeds(client, guest):
    create(client)
    response = guest.post("/calendar/xmas/access", json={"password": "anything"})
    assert response.status_code == 200
    assert "access-xmas" not in response.cookies


def test_guest_cookie_does_not_grant_admin(client, guest):
    create(client, access_code="guest-pass")
    guest.post("/calendar/xmas/access", json={"password": "guest-pass"})

    response = guest.put("/calendar/xmas/days/1", json={"content": "hack", "content_type": "text"})
    assert response.status_code == 403
    assert response.json()["category"] == "security"


def test_forged_cookie_is_ignored(client, guest):
    create(client, access_code="guest-pass")
    guest.cookies.set("admin-xmas", "granted")
    assert guest.get("/calendar/xmas").json()["role"] == "locked"


def test_admin_login_and_logout(client, guest):
    create(client)

    assert guest.post("/calendar/xmas/admin", json={"password": "wrong"}).status_code == 401

    response = guest.post("/calendar/xmas/admin", json={"password": "admin-pass"})
    assert response.status_code == 200
    assert response.json()["role"] == "admin"
    assert guest.get("/calendar/xmas").json()["role"] == "admin"

    guest.post("/calendar/xmas/logout")
    assert guest.get("/calendar/xmas").json()["role"] == "guest"


def test_update_day(client, clock):
    create(client, total_days=5)
    response = client.put(
        "/calendar/xmas/days/3",
        json={"title": "Quiz time", "content": '{"question": "?"}', "content_type": "quiz"},
    )
    assert response.status_code == 200
    assert response.json()["type"] == "quiz"

    day3 = client.get("/calendar/xmas/days").json()[2]
    assert day3["title"] == "Quiz time"
    assert day3["type"] == "quiz"


def test_update_day_validation(client):
    create(client, total_days=5)
    assert client.put("/calendar/xmas/days/6", json={"content_type": "text"}).status_code == 404
    assert client.put("/calendar/xmas/days/0", json={"content_type": "text"}).status_code == 404
    assert client.put("/calendar/xmas/days/1", json={"content_type": "hologram"}).status_code == 422


def test_update_settings(client):
    create(client)
    response = client.patch(
        "/calendar/xmas/settings",
        json={
            "recipient_name": "Amy & Ben",
            "start_date": "2025-12-02",
            "background": {"start_color": "#000000", "pattern": "🎁", "quantity": 5},
        },
    )
    assert response.status_code == 200
    profile = response.json()
    assert profile["recipient_name"] == "Amy & Ben"
    assert profile["start_date"] == "2025-12-02"
    assert profile["background"]["end_color"] == "#000000"
    assert profile["background"]["quantity"] == 5
    # untouched
    assert profile["card_style"]["color"] == "#7f1d1d"


def test_settings_require_admin(client, guest):
    create(client)
    assert guest.patch("/calendar/xmas/settings", json={"recipient_name": "x"}).status_code == 403


def test_update_passwords(client, guest):
    create(client)

    # enabling protection needs a password
    response = client.put("/calendar/xmas/passwords", json={"use_guest_password": True})
    assert response.status_code == 400

    response = client.put(
        "/calendar/xmas/passwords",
        json={"use_guest_password": True, "access_code": "new-guest", "admin_code": "new-admin"},
    )
    assert response.json() == {"success": True, "has_password": True}
    assert guest.get("/calendar/xmas/days").status_code == 401
    assert guest.post("/calendar/xmas/admin", json={"password": "admin-pass"}).status_code == 401
    assert guest.post("/calendar/xmas/admin", json={"password": "new-admin"}).status_code == 200

    # blank keeps the current guest password
    client.put("/calendar/xmas/passwords", json={"use_guest_password": True, "access_code": ""})
    guest.post("/calendar/xmas/logout")
    assert guest.post("/calendar/xmas/access", json={"password": "new-guest"}).status_code == 200

    response = client.put("/calendar/xmas/passwords", json={"use_guest_password": False})
    assert response.json()["has_password"] is False


def test_broken_start_date_is_reported(client, guest, db):
    create(client)
    calendar = db.query(Calendar).filter(Calendar.slug == "xmas").one()
    calendar.start_date = "sometime in december"
    db.commit()

    response = guest.get("/calendar/xmas/days")
    assert response.status_code == 500
    assert response.json()["category"] == "configuration"

    # admins can still open the editor view
    assert client.get("/calendar/xmas/days").status_code == 200
