# Overview: Batch import of device checks and activity rows exported from browser storage.

"""
Migration Service

Best-effort by design of the import: one outer transaction, one SAVEPOINT
per record. A record that fails is rolled back to its savepoint, logged,
and counted; the rest of the batch still commits. Records whose id already
exists are skipped, so re-running an import is harmless.
"""

from __future__ import annotations

from typing import Any

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from ..models import ActivityLog, ITCheckEntry, User
from ..schemas import ActivityLogImport, ITCheckPayload
from ..validation import ValidationError
from . import activity_service
from .itcheck_service import replace_dependents
from .persistence import transaction


def _import_entry(session, raw: dict[str, Any], actor_id: str) -> bool:
    payload = ITCheckPayload.from_payload(raw)
    payload.validate()
    if not payload.id:
        raise ValidationError("Entry id is required")

    if session.get(ITCheckEntry, payload.id):
        return False

    values = payload.root_values()
    if payload.created_at is not None:
        values["created_at"] = payload.created_at
    session.add(ITCheckEntry(id=payload.id, added_by_id=actor_id, **values))
    session.flush()
    replace_dependents(session, payload.id, payload)
    return True


def _import_activity(session, raw: dict[str, Any]) -> bool:
    record = ActivityLogImport.from_payload(raw)
    record.validate()

    if session.get(ActivityLog, record.id):
        return False

    # Rows from deleted or unknown accounts keep their text but lose the link
    user_id = record.user_id if record.user_id and session.get(User, record.user_id) else None

    log = ActivityLog(
        id=record.id,
        user_id=user_id,
        action=record.action,
        target_id=record.target_id,
        target_name=record.target_name,
        details=record.details,
    )
    if record.created_at is not None:
        log.created_at = record.created_at
    session.add(log)
    session.flush()
    return True


def migrate(entries: list, activity_logs: list, *, actor_id: str) -> dict:
    migrated_entries = 0
    migrated_logs = 0
    failed: list[dict] = []

    with transaction() as session:
        for raw in entries:
            ref = raw.get("id") if isinstance(raw, dict) else None
            try:
                if not isinstance(raw, dict):
                    raise ValidationError("Entry must be an object")
                with session.begin_nested():
                    if _import_entry(session, raw, actor_id):
                        migrated_entries += 1
            except (SQLAlchemyError, ValidationError) as exc:
                current_app.logger.exception("Failed to migrate entry %s", ref)
                failed.append({"type": "entry", "id": ref, "error": exc.__class__.__name__})

        for raw in activity_logs:
            ref = raw.get("id") if isinstance(raw, dict) else None
            try:
                if not isinstance(raw, dict):
                    raise ValidationError("Activity log must be an object")
                with session.begin_nested():
                    if _import_activity(session, raw):
                        migrated_logs += 1
            except (SQLAlchemyError, ValidationError) as exc:
                current_app.logger.exception("Failed to migrate activity log %s", ref)
                failed.append({"type": "activityLog", "id": ref, "error": exc.__class__.__name__})

        activity_service.record(
            actor_id=actor_id,
            action="migrate_data",
            details=(
                f"Migrated {migrated_entries} entries and {migrated_logs} activity logs"
                f" ({len(failed)} failed)"
            ),
        )

    return {
        "message": "Data migration completed successfully",
        "migratedEntries": migrated_entries,
        "migratedLogs": migrated_logs,
        "failed": failed,
    }
