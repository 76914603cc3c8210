# Overview: Service-layer operations for IT check entries; root + dependents written as one unit.

"""
IT Check Service

Writer shape shared by every multi-table entity:
1. payload validated by the caller (nothing is opened for bad input)
2. transaction opened
3. root inserted / updated
4. dependents deleted and re-inserted in payload order
5. one activity row
6. commit; any failure rolls the whole unit back
"""

from __future__ import annotations

from sqlalchemy import delete, insert

from ..extensions import db
from ..models import InstalledApp, ITCheckEntry, SpeedTest, User
from ..schemas import ITCheckPayload
from ..shaping import group_by
from ..validation import NotFoundError
from . import activity_service
from .persistence import child_id, mint_id, transaction


def list_entries() -> list[dict]:
    rows = (
        db.session.query(ITCheckEntry, User.name)
        .outerjoin(User, ITCheckEntry.added_by_id == User.id)
        .order_by(ITCheckEntry.created_at.desc(), ITCheckEntry.id.desc())
        .all()
    )
    entry_ids = [entry.id for entry, _ in rows]
    if not entry_ids:
        return []

    tests = group_by(
        db.session.query(SpeedTest)
        .filter(SpeedTest.it_check_entry_id.in_(entry_ids))
        .order_by(SpeedTest.test_order)
        .all(),
        "it_check_entry_id",
    )
    apps = group_by(
        db.session.query(InstalledApp)
        .filter(InstalledApp.it_check_entry_id.in_(entry_ids))
        .order_by(InstalledApp.position)
        .all(),
        "it_check_entry_id",
    )
    return [
        entry.to_dict(
            added_by_name=name,
            speed_tests=tests.get(entry.id, []),
            installed_apps=apps.get(entry.id, []),
        )
        for entry, name in rows
    ]


def replace_dependents(session, entry_id: str, payload: ITCheckPayload) -> None:
    """
    Delete-all then re-insert, so N submitted dependents leave exactly N rows.

    Ids are positional, which makes applying the same payload twice idempotent.
    """
    session.execute(delete(SpeedTest).where(SpeedTest.it_check_entry_id == entry_id))
    session.execute(delete(InstalledApp).where(InstalledApp.it_check_entry_id == entry_id))

    if payload.speed_tests:
        session.execute(
            insert(SpeedTest),
            [
                {
                    "id": child_id(entry_id, "speed", position),
                    "it_check_entry_id": entry_id,
                    "url": test.url,
                    "download_speed": test.download_speed,
                    "upload_speed": test.upload_speed,
                    "ping": test.ping,
                    "test_order": position,
                }
                for position, test in enumerate(payload.speed_tests, start=1)
            ],
        )
    if payload.installed_apps:
        session.execute(
            insert(InstalledApp),
            [
                {
                    "id": child_id(entry_id, "app", position),
                    "it_check_entry_id": entry_id,
                    "name": app.name,
                    "version": app.version,
                    "notes": app.notes,
                    "position": position,
                }
                for position, app in enumerate(payload.installed_apps, start=1)
            ],
        )


def create_entry(payload: ITCheckPayload, *, actor_id: str) -> str:
    with transaction() as session:
        entry = ITCheckEntry(id=mint_id("entry"), added_by_id=actor_id, **payload.root_values())
        session.add(entry)
        session.flush()

        replace_dependents(session, entry.id, payload)

        activity_service.record(
            actor_id=actor_id,
            action="add_entry",
            target_id=entry.id,
            target_name=entry.name,
            details=f"Added IT check entry for {entry.name} ({entry.department})",
        )
        return entry.id


def update_entry(entry_id: str, payload: ITCheckPayload, *, actor_id: str) -> None:
    with transaction() as session:
        entry = session.get(ITCheckEntry, entry_id)
        if not entry:
            raise NotFoundError("Entry not found")

        for column, value in payload.root_values().items():
            setattr(entry, column, value)
        session.flush()

        replace_dependents(session, entry.id, payload)

        activity_service.record(
            actor_id=actor_id,
            action="update_entry",
            target_id=entry.id,
            target_name=entry.name,
            details=f"Updated IT check entry for {entry.name} ({entry.department})",
        )


def delete_entry(entry_id: str, *, actor_id: str) -> None:
    with transaction() as session:
        entry = session.get(ITCheckEntry, entry_id)
        if not entry:
            raise NotFoundError("Entry not found")

        name, department = entry.name, entry.department
        session.delete(entry)
        session.flush()

        activity_service.record(
            actor_id=actor_id,
            action="delete_entry",
            target_id=entry_id,
            target_name=name,
            details=f"Deleted IT check entry for {name} ({department})",
        )
