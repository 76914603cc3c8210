"""Bulk import of browser-stored entries and activity logs."""

from datetime import datetime

import pytest

from techasset.models import ActivityLog, ITCheckEntry, SpeedTest


def _entry(entry_id, **overrides):
    record = {
        "id": entry_id,
        "name": "Migrated User",
        "department": "Ops",
        "timestamp": "2024-03-05T08:30:00.000Z",
        "speedTests": [{"url": "https://fast.com", "downloadSpeed": 50, "uploadSpeed": 10, "ping": 9}],
        "installedApps": [{"name": "Teams", "version": "1.6"}],
    }
    record.update(overrides)
    return record


def _log(log_id, **overrides):
    record = {
        "id": log_id,
        "userId": "user-ghost",
        "action": "add_entry",
        "targetId": "entry-old-1",
        "targetName": "Migrated User",
        "details": "Imported",
        "timestamp": "2024-03-05T08:31:00Z",
    }
    record.update(overrides)
    return record


def test_imports_entries_and_logs(client, db_session, global_admin, global_admin_headers):
    resp = client.post(
        "/api/migrate",
        json={"entries": [_entry("entry-old-1"), _entry("entry-old-2")], "activityLogs": [_log("log-old-1")]},
        headers=global_admin_headers,
    )
    assert resp.status_code == 200
    assert resp.json["message"] == "Data migration completed successfully"
    assert resp.json["migratedEntries"] == 2
    assert resp.json["migratedLogs"] == 1
    assert resp.json["failed"] == []

    entry = db_session.get(ITCheckEntry, "entry-old-1")
    assert entry.created_at == datetime(2024, 3, 5, 8, 30)
    assert entry.added_by_id == global_admin.id
    assert db_session.query(SpeedTest).filter_by(it_check_entry_id="entry-old-1").count() == 1

    # unknown account ids are dropped, the text survives
    log = db_session.get(ActivityLog, "log-old-1")
    assert log.user_id is None
    assert log.target_name == "Migrated User"

    assert db_session.query(ActivityLog).filter_by(action="migrate_data").count() == 1


def test_existing_ids_are_skipped(client, db_session, global_admin_headers):
    body = {"entries": [_entry("entry-old-1")], "activityLogs": [_log("log-old-1")]}
    client.post("/api/migrate", json=body, headers=global_admin_headers)

    again = client.post("/api/migrate", json=body, headers=global_admin_headers)
    assert again.json["migratedEntries"] == 0
    assert again.json["migratedLogs"] == 0
    assert again.json["failed"] == []
    assert db_session.query(ITCheckEntry).count() == 1


def test_bad_records_fail_alone(client, db_session, global_admin_headers):
    resp = client.post(
        "/api/migrate",
        json={
            "entries": [
                _entry("entry-good"),
                _entry("entry-no-name", name=""),
                _entry("entry-bad-time", timestamp="not a date"),
            ],
            "activityLogs": [_log("log-good"), _log("log-no-action", action=None)],
        },
        headers=global_admin_headers,
    )
    assert resp.status_code == 200
    assert resp.json["migratedEntries"] == 1
    assert resp.json["migratedLogs"] == 1
    failed_ids = {f["id"] for f in resp.json["failed"]}
    assert failed_ids == {"entry-no-name", "entry-bad-time", "log-no-action"}

    assert db_session.get(ITCheckEntry, "entry-good") is not None
    assert db_session.get(ITCheckEntry, "entry-no-name") is None


def test_known_user_link_is_kept(client, db_session, global_admin, global_admin_headers):
    client.post(
        "/api/migrate",
        json={"entries": [], "activityLogs": [_log("log-mine", userId=global_admin.id)]},
        headers=global_admin_headers,
    )
    assert db_session.get(ActivityLog, "log-mine").user_id == global_admin.id


@pytest.mark.parametrize("body", [
    {"entries": {}},
    {"entries": "", "activityLogs": []},
    {"entries": [], "activityLogs": 0},
    {"entries": False},
    {"activityLogs": None},
])
def test_body_must_hold_lists(client, db_session, global_admin_headers, body):
    resp = client.post("/api/migrate", json=body, headers=global_admin_headers)
    assert resp.status_code == 400
    assert resp.json["error"] == "entries and activityLogs must be lists"
    assert db_session.query(ActivityLog).filter_by(action="migrate_data").count() == 0


def test_missing_keys_import_nothing(client, db_session, global_admin_headers):
    resp = client.post("/api/migrate", json={}, headers=global_admin_headers)
    assert resp.status_code == 200
    assert resp.json["migratedEntries"] == 0
    assert resp.json["migratedLogs"] == 0


def test_list_body_is_rejected(client, db_session, global_admin_headers):
    resp = client.post("/api/migrate", json=[_entry("entry-old-1")], headers=global_admin_headers)
    assert resp.status_code == 400
    assert resp.json["error"] == "Request body must be a JSON object"
    assert db_session.query(ITCheckEntry).count() == 0


def test_global_admin_only(client, db_session, admin_headers):
    resp = client.post("/api/migrate", json={"entries": [], "activityLogs": []}, headers=admin_headers)
    assert resp.status_code == 403
