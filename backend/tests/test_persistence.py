"""
Scoped transactions.

A writer either lands completely (root, dependents, audit row) or not at all.
"""

import pytest
from sqlalchemy import insert, select
from sqlalchemy.exc import OperationalError

from techasset.extensions import db
from techasset.models import ActivityLog, InstalledApp, ITCheckEntry, PasswordCategory, SpeedTest
from techasset.services import activity_service, persistence


def test_transaction_commits_on_success(app, db_session):
    with persistence.transaction() as session:
        session.add(PasswordCategory(id="c1", name="One"))

    assert db.session.get(PasswordCategory, "c1") is not None


def test_transaction_rolls_back_and_reraises(app, db_session):
    with pytest.raises(RuntimeError):
        with persistence.transaction() as session:
            session.add(PasswordCategory(id="c1", name="One"))
            session.flush()
            raise RuntimeError("boom")

    assert db.session.query(PasswordCategory).count() == 0


def test_execute_commits_mutations(app, db_session):
    persistence.execute(insert(PasswordCategory).values(id="c2", name="Two"))
    db.session.close()

    names = db.session.execute(select(PasswordCategory.name)).scalars().all()
    assert names == ["Two"]


def test_mint_id_shape():
    ident = persistence.mint_id("entry")
    prefix, millis, suffix = ident.split("-")
    assert prefix == "entry"
    assert millis.isdigit()
    assert len(suffix) == 9


def test_child_id_is_positional():
    assert persistence.child_id("entry-1-abc", "speed", 2) == "entry-1-abc-speed-2"


def test_run_with_retry_retries_lock_errors(app, db_session):
    calls = []

    def flaky():
        calls.append(1)
        if len(calls) < 3:
            raise OperationalError("UPDATE", {}, Exception("database is locked"))
        return "ok"

    assert persistence.run_with_retry(flaky, attempts=3, backoff_base=0) == "ok"
    assert len(calls) == 3


def test_run_with_retry_gives_up(app, db_session):
    def always_locked():
        raise OperationalError("UPDATE", {}, Exception("database is locked"))

    with pytest.raises(OperationalError):
        persistence.run_with_retry(always_locked, attempts=2, backoff_base=0)


def test_failed_audit_rolls_back_whole_writer(client, db_session, editor_headers, monkeypatch):
    """A failure after the dependents are written leaves no partial entry."""
    def broken_record(**kwargs):
        raise OperationalError("INSERT", {}, Exception("disk I/O error"))

    monkeypatch.setattr(activity_service, "record", broken_record)

    resp = client.post(
        "/api/itcheck",
        json={
            "name": "PC-9",
            "department": "Ops",
            "speedTests": [{"url": "a"}, {"url": "b"}],
            "installedApps": [{"name": "Chrome"}],
        },
        headers=editor_headers,
    )
    assert resp.status_code == 500
    assert resp.json == {"error": "Internal server error"}

    assert db_session.query(ITCheckEntry).count() == 0
    assert db_session.query(SpeedTest).count() == 0
    assert db_session.query(InstalledApp).count() == 0
    assert db_session.query(ActivityLog).filter_by(action="add_entry").count() == 0
