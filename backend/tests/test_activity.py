"""Activity report ordering and bound."""

from datetime import timedelta

from techasset.models import ActivityLog
from techasset.time_utils import utcnow


def _seed_logs(session, count, user_id=None):
    base = utcnow() - timedelta(days=1)
    for i in range(count):
        session.add(ActivityLog(
            id=f"log-{i:04d}",
            user_id=user_id,
            action="add_entry",
            target_name=f"Item {i}",
            created_at=base + timedelta(seconds=i),
        ))
    session.commit()


def test_newest_first_with_actor_name(client, db_session, global_admin, global_admin_headers):
    _seed_logs(db_session, 3, user_id=global_admin.id)

    logs = client.get("/api/activity", headers=global_admin_headers).json
    # the login row is the newest
    assert logs[0]["action"] == "login"
    assert [l["targetName"] for l in logs[1:4]] == ["Item 2", "Item 1", "Item 0"]
    assert logs[1]["userName"] == "Global Administrator"


def test_missing_actor_shows_unknown(client, db_session, global_admin_headers):
    _seed_logs(db_session, 1)
    logs = client.get("/api/activity", headers=global_admin_headers).json
    assert logs[-1]["userName"] == "Unknown"


def test_report_is_bounded(app, client, db_session, global_admin_headers, monkeypatch):
    monkeypatch.setitem(app.config, "ACTIVITY_LOG_LIMIT", 5)
    _seed_logs(db_session, 12)

    logs = client.get("/api/activity", headers=global_admin_headers).json
    assert len(logs) == 5


def test_deleting_user_keeps_their_history(client, db_session, global_admin_headers, editor_user):
    _seed_logs(db_session, 2, user_id=editor_user.id)

    assert client.delete(f"/api/users/{editor_user.id}", headers=global_admin_headers).status_code == 200

    orphaned = db_session.query(ActivityLog).filter(ActivityLog.id.in_(["log-0000", "log-0001"])).all()
    assert len(orphaned) == 2
    assert all(log.user_id is None for log in orphaned)
