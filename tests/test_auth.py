from elibrary.models.notification_log import NotificationLog

SIGNUP = {"username": "newbie", "name": "New Reader", "email": "New@Example.com", "password": "hunter22"}


def test_register_issues_token_and_welcome_mail(client, outbox):
    res = client.post("/api/auth/register", json=SIGNUP)
    body = res.get_json()
    assert res.status_code == 201
    assert body["access_token"]
    assert body["data"]["email"] == "new@example.com"
    assert body["data"]["role"] == "user"

    assert [m.recipients for m in outbox] == [["new@example.com"]]
    assert NotificationLog.query.filter_by(type="welcome", success=True).count() == 1

    res = client.get("/api/auth/me", headers={"Authorization": f"Bearer {body['access_token']}"})
    assert res.get_json()["data"]["username"] == "newbie"


def test_register_ignores_requested_role(client):
    res = client.post("/api/auth/register", json=dict(SIGNUP, role="admin"))
    assert res.get_json()["data"]["role"] == "user"


def test_register_rejects_duplicates_and_short_passwords(client, reader):
    res = client.post("/api/auth/register", json=dict(SIGNUP, username="reader"))
    assert res.status_code == 400
    res = client.post("/api/auth/register", json=dict(SIGNUP, password="abc"))
    assert res.status_code == 400
    assert "at least 6" in res.get_json()["message"]


def test_login_with_username_or_email(client, reader):
    for login in ("reader", "reader@example.com"):
        res = client.post("/api/auth/login", json={"username": login, "password": "secret123"})
        assert res.status_code == 200
        assert res.get_json()["data"]["id"] == reader.id

    res = client.post("/api/auth/login", json={"username": "reader", "password": "wrong"})
    assert res.status_code == 401


def test_deactivated_user_cannot_login(client, reader):
    reader.is_active = False
    res = client.post("/api/auth/login", json={"username": "reader", "password": "secret123"})
    assert res.status_code == 403
