"""Password vault: encryption at rest, categories, notes and health figures."""

import pytest

from techasset.models import ActivityLog, PasswordCustomField, PasswordEntry, SecureNote
from techasset.services import password_strength, vault_crypto


STRONG = "Tr0ub4dor&3xyzQ!"


def _entry(**overrides):
    body = {
        "title": "Router admin",
        "website": "https://192.168.1.1",
        "username": "root",
        "password": STRONG,
        "categoryId": "work",
        "tags": ["network"],
        "customFields": [
            {"label": "Recovery PIN", "value": "4821", "type": "password", "isHidden": True},
            {"value": "plain note"},
        ],
    }
    body.update(overrides)
    return body


def test_categories_are_seeded(client, categories, standard_headers):
    resp = client.get("/api/passwords/categories", headers=standard_headers)
    assert resp.status_code == 200
    assert {c["id"] for c in resp.json} == {
        "work", "personal", "social", "finance", "shopping", "entertainment", "other",
    }


def test_secrets_are_encrypted_at_rest(app, client, db_session, categories, standard_headers):
    resp = client.post("/api/passwords", json=_entry(), headers=standard_headers)
    assert resp.status_code == 201
    entry_id = resp.json["id"]

    stored = db_session.get(PasswordEntry, entry_id)
    assert stored.password_encrypted != STRONG
    assert STRONG not in stored.password_encrypted
    assert vault_crypto.decrypt(stored.password_encrypted) == STRONG

    fields = db_session.query(PasswordCustomField).order_by(PasswordCustomField.position).all()
    assert fields[0].value_encrypted != "4821"
    assert vault_crypto.decrypt(fields[0].value_encrypted) == "4821"


def test_list_returns_decrypted_values(client, db_session, categories, standard_headers):
    client.post("/api/passwords", json=_entry(), headers=standard_headers)

    [entry] = client.get("/api/passwords", headers=standard_headers).json
    assert entry["password"] == STRONG
    assert entry["category"]["id"] == "work"
    assert entry["createdBy"] == "Standard User"
    assert entry["tags"] == ["network"]
    assert entry["customFields"][0]["value"] == "4821"
    assert entry["customFields"][0]["isHidden"] is True
    assert entry["customFields"][1]["label"] == "Untitled Field"
    assert entry["customFields"][1]["type"] == "text"


def test_unknown_category_is_rejected(client, db_session, categories, standard_headers):
    resp = client.post("/api/passwords", json=_entry(categoryId="nope"), headers=standard_headers)
    assert resp.status_code == 400
    assert db_session.query(PasswordEntry).count() == 0


def test_title_and_password_required(client, db_session, categories, standard_headers):
    resp = client.post("/api/passwords", json={"title": "x"}, headers=standard_headers)
    assert resp.status_code == 400
    assert resp.json["error"] == "Title and password are required"


def test_update_and_delete_entry(client, db_session, categories, standard_headers):
    entry_id = client.post("/api/passwords", json=_entry(), headers=standard_headers).json["id"]

    resp = client.put(
        f"/api/passwords/{entry_id}",
        json=_entry(password="N3w-Secret-Value!", customFields=[]),
        headers=standard_headers,
    )
    assert resp.status_code == 200
    stored = db_session.get(PasswordEntry, entry_id)
    assert vault_crypto.decrypt(stored.password_encrypted) == "N3w-Secret-Value!"
    assert db_session.query(PasswordCustomField).count() == 0

    assert client.delete(f"/api/passwords/{entry_id}", headers=standard_headers).status_code == 200
    assert client.delete(f"/api/passwords/{entry_id}", headers=standard_headers).status_code == 404
    assert db_session.query(ActivityLog).filter_by(target_id=entry_id).count() == 3


def test_secure_notes_crud(client, db_session, standard_headers):
    resp = client.post(
        "/api/passwords/notes",
        json={"title": "Wifi", "content": "guest / hunter2", "isFavorite": True},
        headers=standard_headers,
    )
    assert resp.status_code == 201
    note_id = resp.json["id"]

    stored = db_session.get(SecureNote, note_id)
    assert "hunter2" not in stored.content_encrypted

    [note] = client.get("/api/passwords/notes", headers=standard_headers).json
    assert note["content"] == "guest / hunter2"
    assert note["isFavorite"] is True

    resp = client.put(
        f"/api/passwords/notes/{note_id}",
        json={"title": "Wifi", "content": "rotated"},
        headers=standard_headers,
    )
    assert resp.status_code == 200
    assert client.get("/api/passwords/notes", headers=standard_headers).json[0]["content"] == "rotated"

    assert client.delete(f"/api/passwords/notes/{note_id}", headers=standard_headers).status_code == 200
    assert db_session.query(SecureNote).count() == 0


def test_note_requires_content(client, db_session, standard_headers):
    resp = client.post("/api/passwords/notes", json={"title": "Empty"}, headers=standard_headers)
    assert resp.status_code == 400
    assert resp.json["error"] == "Title and content are required"


def test_vault_stats(client, db_session, categories, standard_headers):
    for password, favorite in (
        ("password", False),
        (STRONG, True),
        (STRONG, False),
        ("Zebra!Kite9Lamp#Q", False),
        ("M0untain$Rivers!!", False),
    ):
        client.post(
            "/api/passwords",
            json=_entry(password=password, isFavorite=favorite, customFields=[]),
            headers=standard_headers,
        )
    client.post("/api/passwords/notes", json={"title": "n", "content": "c"}, headers=standard_headers)

    stats = client.get("/api/passwords/stats", headers=standard_headers).json
    assert stats == {
        "totalPasswords": 5,
        "weakPasswords": 1,
        "reusedPasswords": 2,
        "compromisedPasswords": 1,
        "favoritePasswords": 1,
        "secureNotes": 1,
        "vaultHealth": 20,
    }


def test_empty_vault_is_healthy(client, db_session, standard_headers):
    stats = client.get("/api/passwords/stats", headers=standard_headers).json
    assert stats["totalPasswords"] == 0
    assert stats["vaultHealth"] == 100


def test_analyze_endpoint(client, db_session, standard_headers):
    resp = client.post("/api/passwords/analyze", json={"password": STRONG}, headers=standard_headers)
    assert resp.status_code == 200
    assert resp.json["score"] == 4
    assert resp.json["hasSymbols"] is True
    assert resp.json["length"] == len(STRONG)

    assert client.post("/api/passwords/analyze", json={}, headers=standard_headers).status_code == 400


def test_generate_endpoint(client, db_session, standard_headers):
    resp = client.post(
        "/api/passwords/generate",
        json={"length": 24, "includeSymbols": False, "excludeSimilar": True},
        headers=standard_headers,
    )
    assert resp.status_code == 200
    password = resp.json["password"]
    assert len(password) == 24
    assert password.isalnum()
    assert not set(password) & set(password_strength.SIMILAR)
    assert "score" in resp.json["strength"]


def test_generate_rejects_bad_options(client, db_session, standard_headers):
    assert client.post(
        "/api/passwords/generate", json={"length": 2}, headers=standard_headers,
    ).status_code == 400
    assert client.post(
        "/api/passwords/generate",
        json={
            "includeUppercase": False,
            "includeLowercase": False,
            "includeNumbers": False,
            "includeSymbols": False,
        },
        headers=standard_headers,
    ).status_code == 400


@pytest.mark.parametrize(
    "password,expected",
    [
        ("password", 0),
        ("abcdefgh", 0),
        ("sunny2024", 3),
        (STRONG, 4),
    ],
)
def test_strength_scores(password, expected):
    assert password_strength.analyze(password).score == expected


def test_reused_flags():
    assert password_strength.reused_flags(["a", "b", "a"]) == [True, False, True]
