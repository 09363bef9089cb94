from datetime import datetime, timedelta

import pytest

from elibrary.errors import ValidationError
from elibrary.services.user_service import UserService
from tests.factories import auth_headers, make_book, make_borrow


def test_deactivation_blocked_while_borrowing(client, admin, reader, book):
    b = make_borrow(reader, book, datetime.utcnow() + timedelta(days=7))

    res = client.put(f"/api/users/{reader.id}/toggle-status", headers=auth_headers(admin))
    assert res.status_code == 400
    assert "active book borrows" in res.get_json()["message"]
    assert reader.is_active is True

    res = client.post(f"/api/borrow/return/{b.id}", headers=auth_headers(reader))
    assert res.status_code == 200

    res = client.put(f"/api/users/{reader.id}/toggle-status", headers=auth_headers(admin))
    assert res.status_code == 200
    assert res.get_json()["data"]["is_active"] is False

    # tekrar açmak her zaman serbest
    res = client.put(f"/api/users/{reader.id}/toggle-status", headers=auth_headers(admin))
    assert res.get_json()["data"]["is_active"] is True


def test_overdue_borrow_also_blocks_deactivation(client, admin, reader, book):
    make_borrow(reader, book, datetime.utcnow() - timedelta(days=3), status="overdue")
    res = client.put(f"/api/users/{reader.id}/toggle-status", headers=auth_headers(admin))
    assert res.status_code == 400


def test_toggle_requires_admin(client, reader, other_reader):
    res = client.put(f"/api/users/{other_reader.id}/toggle-status", headers=auth_headers(reader))
    assert res.status_code == 403


def test_update_profile(client, reader):
    res = client.put(
        "/api/users/profile",
        json={"name": "Reader Renamed", "phone": "5551234567", "role": "admin"},
        headers=auth_headers(reader),
    )
    data = res.get_json()["data"]
    assert res.status_code == 200
    assert data["name"] == "Reader Renamed"
    assert data["phone"] == "5551234567"
    assert data["role"] == "user"

    res = client.put("/api/users/profile", json={"phone": "12ab"}, headers=auth_headers(reader))
    assert res.status_code == 400


def test_admin_user_listing_and_detail(client, admin, reader, other_reader):
    book = make_book(isbn="978-0-13-235088-4")
    make_borrow(reader, book, datetime.utcnow() + timedelta(days=5))

    res = client.get("/api/users?role=user&limit=1", headers=auth_headers(admin))
    body = res.get_json()
    assert body["pagination"] == {"page": 1, "limit": 1, "total": 2, "pages": 2}

    res = client.get(f"/api/users/{reader.id}", headers=auth_headers(admin))
    data = res.get_json()["data"]
    assert len(data["borrow_history"]) == 1
    assert data["borrowed_books"] == [book.id]


def test_dashboard_stats(client, admin, reader):
    book = make_book()
    make_borrow(reader, book, datetime.utcnow() - timedelta(days=1), status="overdue")

    data = client.get("/api/users/stats/dashboard", headers=auth_headers(admin)).get_json()["data"]
    assert data == {
        "total_users": 1,
        "active_users": 1,
        "total_borrows": 1,
        "active_borrows": 1,
        "overdue_borrows": 1,
    }


def test_admin_update_cannot_deactivate_borrower(client, admin, reader, book):
    b = make_borrow(reader, book, datetime.utcnow() + timedelta(days=7))
    headers = auth_headers(admin)

    for value in (False, 0, "false", None):
        res = client.put(f"/api/users/{reader.id}", json={"is_active": value}, headers=headers)
        assert res.status_code == 400
        assert reader.is_active is True

    client.post(f"/api/borrow/return/{b.id}", headers=auth_headers(reader))
    res = client.put(f"/api/users/{reader.id}", json={"is_active": False}, headers=headers)
    assert res.status_code == 200
    assert res.get_json()["data"]["is_active"] is False


def test_admin_update_rejects_non_bool_active_flag(client, admin, reader):
    res = client.put(f"/api/users/{reader.id}", json={"is_active": "yes"}, headers=auth_headers(admin))
    assert res.status_code == 400
    assert res.get_json()["message"] == "is_active must be true or false"


def test_admin_update_ignores_password(client, admin, reader):
    res = client.put(
        f"/api/users/{reader.id}",
        json={"name": "Renamed Reader", "password": "changed999"},
        headers=auth_headers(admin),
    )
    assert res.status_code == 200
    assert res.get_json()["data"]["name"] == "Renamed Reader"

    res = client.post("/api/auth/login", json={"username": "reader", "password": "secret123"})
    assert res.status_code == 200
    res = client.post("/api/auth/login", json={"username": "reader", "password": "changed999"})
    assert res.status_code == 401


def test_admin_update_rejects_taken_email(client, admin, reader, other_reader):
    res = client.put(
        f"/api/users/{reader.id}", json={"email": other_reader.email}, headers=auth_headers(admin)
    )
    assert res.status_code == 400
    assert res.get_json()["message"] == "Email already registered"
    assert reader.email == "reader@example.com"


def test_admin_update_invalid_role(admin, reader):
    with pytest.raises(ValidationError, match="Invalid role"):
        UserService.admin_update(reader.id, {"role": "librarian"})
