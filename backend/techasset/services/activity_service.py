# Overview: Service-layer operations for the audit trail; append-only activity rows.

"""
Activity Service

IMMUTABLE: Activity rows are only ever inserted.

Two write modes:
- record(): adds the row to the caller's open unit of work. Used by every
  multi-statement writer so the audit row commits or rolls back with the
  change it describes.
- record_detached(): commits the row on its own. Used for events with no
  accompanying change (login, logout). A failure is logged, never raised.
"""

from __future__ import annotations

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from ..extensions import db
from ..models import ActivityLog, User
from .persistence import mint_id


def record(
    *,
    actor_id: str | None,
    action: str,
    target_id: str | None = None,
    target_name: str | None = None,
    details: str | None = None,
) -> ActivityLog:
    """
    Append an activity row inside the current transaction.

    WHY: flush() assigns the row to the transaction immediately so a later
    failure in the same unit of work rolls it back too.
    """
    entry = ActivityLog(
        id=mint_id("log"),
        user_id=actor_id,
        action=action,
        target_id=target_id,
        target_name=target_name,
        details=details,
    )
    db.session.add(entry)
    db.session.flush()

    current_app.logger.info(
        "activity action=%s target=%s user=%s", action, target_id, actor_id
    )
    return entry


def record_detached(
    *,
    actor_id: str | None,
    action: str,
    target_id: str | None = None,
    target_name: str | None = None,
    details: str | None = None,
) -> bool:
    try:
        record(
            actor_id=actor_id,
            action=action,
            target_id=target_id,
            target_name=target_name,
            details=details,
        )
        db.session.commit()
        return True
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception("Failed to record activity action=%s", action)
        return False


def list_recent(limit: int | None = None) -> list[dict]:
    """Newest first, joined with the actor's display name."""
    if limit is None:
        limit = current_app.config.get("ACTIVITY_LOG_LIMIT", 1000)

    rows = (
        db.session.query(ActivityLog, User.name)
        .outerjoin(User, ActivityLog.user_id == User.id)
        .order_by(ActivityLog.created_at.desc(), ActivityLog.id.desc())
        .limit(limit)
        .all()
    )
    return [log.to_dict(user_name=name) for log, name in rows]
