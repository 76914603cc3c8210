"""Login, logout and current-user endpoints."""

from techasset.models import ActivityLog

from conftest import auth_headers, get_auth_token


def test_login_returns_token_and_user(client, global_admin):
    resp = client.post("/api/auth/login", json={"username": "globaladmin", "password": "password"})
    assert resp.status_code == 200
    assert resp.json["token"]
    assert resp.json["user"]["username"] == "globaladmin"
    assert resp.json["user"]["role"] == "global-admin"
    assert "passwordHash" not in resp.json["user"]
    assert "password_hash" not in resp.json["user"]


def test_login_requires_both_fields(client, db_session):
    resp = client.post("/api/auth/login", json={"username": "globaladmin"})
    assert resp.status_code == 400
    assert resp.json["error"] == "Username and password are required"


def test_wrong_password_and_unknown_user_look_the_same(client, global_admin):
    wrong = client.post("/api/auth/login", json={"username": "globaladmin", "password": "nope"})
    unknown = client.post("/api/auth/login", json={"username": "nobody", "password": "nope"})
    assert wrong.status_code == unknown.status_code == 401
    assert wrong.json == unknown.json


def test_login_and_logout_are_audited(client, db_session, global_admin):
    token = get_auth_token(client, "globaladmin")
    resp = client.post("/api/auth/logout", headers=auth_headers(token))
    assert resp.status_code == 200

    actions = [a for (a,) in db_session.query(ActivityLog.action).filter_by(user_id=global_admin.id)]
    assert "login" in actions
    assert "logout" in actions


def test_me_reflects_stored_user(client, module_admin):
    token = get_auth_token(client, "moduleadmin")
    resp = client.get("/api/auth/me", headers=auth_headers(token))
    assert resp.status_code == 200
    assert resp.json["user"]["modulePermissions"] == ["chapmancg-log", "internal-log", "software-licenses"]


def test_health(client, db_session):
    resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.json["status"] == "OK"
    assert resp.json["timestamp"].endswith("Z")
    assert resp.json["database"]["status"] == "healthy"


def test_unknown_route_is_json_404(client, db_session):
    resp = client.get("/api/does-not-exist")
    assert resp.status_code == 404
    assert resp.json["error"] == "Not found"
