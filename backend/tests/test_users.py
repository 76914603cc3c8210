"""Account administration."""

from techasset.models import ActivityLog, User
from techasset.roles import ADMIN, MODULE_ADMIN

from conftest import get_auth_token


def _create(client, headers, **overrides):
    body = {"username": "newhire", "name": "New Hire", "role": MODULE_ADMIN,
            "modulePermissions": ["chapmancg-log"]}
    body.update(overrides)
    return client.post("/api/users", json=body, headers=headers)


def test_create_user_with_default_password(client, db_session, global_admin_headers):
    resp = _create(client, global_admin_headers)
    assert resp.status_code == 201
    assert resp.json["message"] == "User created successfully"

    user = db_session.get(User, resp.json["id"])
    assert user.permissions == ["chapmancg-log"]
    assert user.password_hash != "password"

    assert get_auth_token(client, "newhire")
    assert db_session.query(ActivityLog).filter_by(action="add_user", target_id=user.id).count() == 1


def test_module_list_dropped_for_unscoped_roles(client, db_session, global_admin_headers):
    resp = _create(client, global_admin_headers, role=ADMIN)
    user = db_session.get(User, resp.json["id"])
    assert user.module_permissions is None


def test_list_never_exposes_hashes(client, db_session, admin_headers):
    resp = client.get("/api/users", headers=admin_headers)
    assert resp.status_code == 200
    assert all("passwordHash" not in u and "password_hash" not in u for u in resp.json)
    assert "createdAt" in resp.json[0]


def test_duplicate_username_rejected(client, db_session, global_admin_headers, editor_user):
    resp = _create(client, global_admin_headers, username=editor_user.username)
    assert resp.status_code == 400
    assert resp.json["error"] == "Username already exists"


def test_unknown_role_rejected(client, db_session, global_admin_headers):
    resp = _create(client, global_admin_headers, role="overlord")
    assert resp.status_code == 400
    assert db_session.query(User).filter_by(username="newhire").count() == 0


def test_update_user_and_password(client, db_session, global_admin_headers, editor_user):
    resp = client.put(
        f"/api/users/{editor_user.id}",
        json={"username": "editor", "name": "Renamed", "role": ADMIN, "password": "n3w-secret"},
        headers=global_admin_headers,
    )
    assert resp.status_code == 200
    assert resp.json["message"] == "User updated successfully"

    user = db_session.get(User, editor_user.id)
    assert user.name == "Renamed"
    assert user.role == ADMIN
    assert get_auth_token(client, "editor", "n3w-secret")
    assert db_session.query(ActivityLog).filter_by(action="update_user").count() == 1


def test_update_missing_user(client, db_session, global_admin_headers):
    resp = client.put(
        "/api/users/user-nobody",
        json={"username": "nobody", "name": "Nobody", "role": ADMIN},
        headers=global_admin_headers,
    )
    assert resp.status_code == 404


def test_cannot_delete_self(client, db_session, global_admin, global_admin_headers):
    resp = client.delete(f"/api/users/{global_admin.id}", headers=global_admin_headers)
    assert resp.status_code == 400
    assert db_session.get(User, global_admin.id) is not None


def test_delete_user(client, db_session, global_admin_headers, standard_user):
    resp = client.delete(f"/api/users/{standard_user.id}", headers=global_admin_headers)
    assert resp.status_code == 200
    assert resp.json["message"] == "User deleted successfully"
    assert db_session.get(User, standard_user.id) is None

    audit = db_session.query(ActivityLog).filter_by(action="delete_user").one()
    assert audit.target_name == "Standard User"


def test_admin_cannot_create(client, db_session, admin_headers):
    assert _create(client, admin_headers).status_code == 403


def test_password_longer_than_bcrypt_limit(client, db_session, global_admin_headers):
    resp = _create(client, global_admin_headers, password="x" * 100)
    assert resp.status_code == 400
    assert resp.json["error"] == "Password must be at most 72 bytes"
    assert db_session.query(User).filter_by(username="newhire").count() == 0


def test_password_limit_counts_bytes(client, db_session, global_admin_headers, editor_user):
    # 36 characters, 72 bytes: accepted. One more character crosses the limit.
    accepted = client.put(
        f"/api/users/{editor_user.id}",
        json={"username": "editor", "name": "Desk Editor", "role": ADMIN, "password": "é" * 36},
        headers=global_admin_headers,
    )
    assert accepted.status_code == 200
    assert get_auth_token(client, "editor", "é" * 36)

    rejected = client.put(
        f"/api/users/{editor_user.id}",
        json={"username": "editor", "name": "Desk Editor", "role": ADMIN, "password": "é" * 37},
        headers=global_admin_headers,
    )
    assert rejected.status_code == 400


def test_list_body_is_rejected(client, db_session, global_admin_headers):
    resp = client.post("/api/users", json=[{"username": "newhire"}], headers=global_admin_headers)
    assert resp.status_code == 400
    assert resp.json["error"] == "Request body must be a JSON object"
