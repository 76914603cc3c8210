"""IT check entries: root plus speed tests and installed apps."""

from techasset.models import ActivityLog, InstalledApp, ITCheckEntry, SpeedTest


def _entry_payload(**overrides):
    payload = {
        "name": "Jane Smith",
        "department": "Finance",
        "batchNumber": "B-07",
        "computerType": "Laptop",
        "ipAddress": "10.0.0.12",
        "processor": {"brand": "Intel", "series": "i7", "generation": "12th", "macProcessor": None},
        "speedTests": [
            {"url": "https://fast.com", "downloadSpeed": "95.5", "uploadSpeed": 20, "ping": 11},
            {"url": "https://speedtest.net", "downloadSpeed": 90, "uploadSpeed": 18, "ping": 14},
            {"url": "https://example.org", "downloadSpeed": 80, "uploadSpeed": 15, "ping": 20},
        ],
        "installedApps": [
            {"name": "Office", "version": "2021"},
            {"name": "Zoom", "version": "5.17", "notes": "Pinned"},
        ],
    }
    payload.update(overrides)
    return payload


def test_create_returns_id_and_writes_dependents(client, db_session, editor_headers, editor_user):
    resp = client.post("/api/itcheck", json=_entry_payload(), headers=editor_headers)
    assert resp.status_code == 201
    assert resp.json["message"] == "IT check entry created successfully"
    entry_id = resp.json["id"]
    assert entry_id.startswith("entry-")

    assert db_session.query(ITCheckEntry).count() == 1
    assert db_session.query(SpeedTest).filter_by(it_check_entry_id=entry_id).count() == 3
    assert db_session.query(InstalledApp).filter_by(it_check_entry_id=entry_id).count() == 2

    audit = db_session.query(ActivityLog).filter_by(action="add_entry", target_id=entry_id).all()
    assert len(audit) == 1
    assert audit[0].user_id == editor_user.id


def test_list_shapes_nested_processor_and_dependents(client, db_session, editor_headers):
    client.post("/api/itcheck", json=_entry_payload(), headers=editor_headers)

    resp = client.get("/api/itcheck", headers=editor_headers)
    assert resp.status_code == 200
    [entry] = resp.json
    assert entry["processor"]["brand"] == "Intel"
    assert entry["addedBy"] == "Desk Editor"
    assert entry["timestamp"].endswith("Z")
    assert [t["url"] for t in entry["speedTests"]] == [
        "https://fast.com", "https://speedtest.net", "https://example.org",
    ]
    assert entry["speedTests"][0]["downloadSpeed"] == 95.5
    assert [a["name"] for a in entry["installedApps"]] == ["Office", "Zoom"]
    assert entry["installedApps"][0]["notes"] == ""


def test_update_replaces_dependents(client, db_session, editor_headers):
    entry_id = client.post("/api/itcheck", json=_entry_payload(), headers=editor_headers).json["id"]

    payload = _entry_payload(speedTests=[{"url": "https://only.one", "downloadSpeed": 50, "uploadSpeed": 5, "ping": 30}])
    resp = client.put(f"/api/itcheck/{entry_id}", json=payload, headers=editor_headers)
    assert resp.status_code == 200

    tests = db_session.query(SpeedTest).filter_by(it_check_entry_id=entry_id).all()
    assert len(tests) == 1
    assert tests[0].url == "https://only.one"


def test_repeated_update_is_idempotent(client, db_session, editor_headers):
    entry_id = client.post("/api/itcheck", json=_entry_payload(), headers=editor_headers).json["id"]
    payload = _entry_payload(department="Operations")

    client.put(f"/api/itcheck/{entry_id}", json=payload, headers=editor_headers)
    first = client.get("/api/itcheck", headers=editor_headers).json
    client.put(f"/api/itcheck/{entry_id}", json=payload, headers=editor_headers)
    second = client.get("/api/itcheck", headers=editor_headers).json

    assert first == second
    assert db_session.query(SpeedTest).count() == 3
    assert db_session.query(InstalledApp).count() == 2


def test_missing_required_fields_touch_nothing(client, db_session, editor_headers):
    resp = client.post("/api/itcheck", json={"name": "Only name"}, headers=editor_headers)
    assert resp.status_code == 400
    assert resp.json["error"] == "Name and department are required"
    assert db_session.query(ITCheckEntry).count() == 0
    assert db_session.query(ActivityLog).filter_by(action="add_entry").count() == 0


def test_malformed_number_is_rejected(client, db_session, editor_headers):
    payload = _entry_payload(speedTests=[{"url": "x", "downloadSpeed": "fast"}])
    resp = client.post("/api/itcheck", json=payload, headers=editor_headers)
    assert resp.status_code == 400
    assert db_session.query(ITCheckEntry).count() == 0


def test_update_unknown_entry_is_404(client, db_session, editor_headers):
    resp = client.put("/api/itcheck/entry-missing", json=_entry_payload(), headers=editor_headers)
    assert resp.status_code == 404


def test_delete_cascades(client, db_session, editor_headers, global_admin_headers):
    entry_id = client.post("/api/itcheck", json=_entry_payload(), headers=editor_headers).json["id"]

    resp = client.delete(f"/api/itcheck/{entry_id}", headers=global_admin_headers)
    assert resp.status_code == 200
    assert db_session.query(ITCheckEntry).count() == 0
    assert db_session.query(SpeedTest).count() == 0
    assert db_session.query(InstalledApp).count() == 0
    assert db_session.query(ActivityLog).filter_by(action="delete_entry", target_id=entry_id).count() == 1

    assert client.delete(f"/api/itcheck/{entry_id}", headers=global_admin_headers).status_code == 404
