# Overview: Service-layer operations for ticket numbering; per-day atomic counters.

from __future__ import annotations

from datetime import date

from flask import current_app
from sqlalchemy import select, update
from sqlalchemy.dialects import mysql, postgresql, sqlite
from sqlalchemy.exc import IntegrityError

from ..extensions import db
from ..models import TicketSequence
from techasset.time_utils import utctoday


class SequenceConflictError(Exception):
    """Raised when an allocated ticket number collides with an existing ticket."""
    pass


def _upsert_statement(dialect_name: str, seq_date: date):
    table = TicketSequence.__table__
    if dialect_name in ("sqlite", "postgresql"):
        insert = sqlite.insert if dialect_name == "sqlite" else postgresql.insert
        stmt = insert(table).values(seq_date=seq_date, last_number=1)
        return stmt.on_conflict_do_update(
            index_elements=[table.c.seq_date],
            set_={"last_number": table.c.last_number + 1},
        )
    if dialect_name in ("mysql", "mariadb"):
        stmt = mysql.insert(table).values(seq_date=seq_date, last_number=1)
        return stmt.on_duplicate_key_update(last_number=table.c.last_number + 1)
    return None


def _bump_portable(seq_date: date) -> None:
    """
    Update-then-insert for dialects without a native upsert.

    A concurrent first writer of the day makes our insert fail; the savepoint
    keeps the caller's transaction alive and the update is retried.
    """
    stmt = (
        update(TicketSequence)
        .where(TicketSequence.seq_date == seq_date)
        .values(last_number=TicketSequence.last_number + 1)
    )
    if db.session.execute(stmt).rowcount:
        return
    try:
        with db.session.begin_nested():
            db.session.add(TicketSequence(seq_date=seq_date, last_number=1))
    except IntegrityError:
        if not db.session.execute(stmt).rowcount:
            raise


def next_sequence_value(seq_date: date | None = None) -> int:
    """
    Atomically advance the counter for `seq_date` and return the new value.

    Must run inside the caller's transaction: the read observes the row the
    upsert just locked, so no other writer can interleave between the two.
    """
    seq_date = seq_date or utctoday()
    stmt = _upsert_statement(db.engine.dialect.name, seq_date)
    if stmt is not None:
        db.session.execute(stmt)
    else:
        _bump_portable(seq_date)

    return db.session.execute(
        select(TicketSequence.last_number).where(TicketSequence.seq_date == seq_date)
    ).scalar_one()


def format_ticket_number(seq_date: date, value: int, prefix: str | None = None) -> str:
    prefix = prefix or current_app.config.get("TICKET_PREFIX", "TICKET")
    return f"{prefix}-{seq_date:%Y%m%d}-{value:03d}"


def next_ticket_number(seq_date: date | None = None) -> str:
    """Allocate the next PREFIX-YYYYMMDD-NNN number. Gaps are allowed; duplicates are not."""
    seq_date = seq_date or utctoday()
    return format_ticket_number(seq_date, next_sequence_value(seq_date))
