# Overview: Service-layer operations for the consultancy and internal work logs.

from __future__ import annotations

from dataclasses import dataclass

from ..extensions import db
from ..models import ConsultancyLogEntry, InternalLogEntry, User
from ..schemas import WorkLogPayload
from ..validation import NotFoundError
from . import activity_service
from .persistence import mint_id, transaction


@dataclass(frozen=True)
class WorkLogKind:
    """Static description of one log table."""
    model: type
    id_prefix: str
    label: str
    with_credits: bool
    sheet_title: str
    file_stem: str


CONSULTANCY = WorkLogKind(
    model=ConsultancyLogEntry,
    id_prefix="cg",
    label="ChapmanCG log entry",
    with_credits=True,
    sheet_title="ChapmanCG Log",
    file_stem="ChapmanCG_Log",
)

INTERNAL = WorkLogKind(
    model=InternalLogEntry,
    id_prefix="int",
    label="internal log entry",
    with_credits=False,
    sheet_title="Internal Log",
    file_stem="Internal_Log",
)


def list_entries(
    kind: WorkLogKind,
    *,
    client: str | None = None,
    category: str | None = None,
    technician: str | None = None,
) -> list[tuple]:
    """(entry, added_by_name) rows, newest first, optionally filtered."""
    model = kind.model
    query = (
        db.session.query(model, User.name)
        .outerjoin(User, model.added_by_id == User.id)
    )
    if client:
        query = query.filter(model.client_name == client)
    if category:
        query = query.filter(model.category == category)
    if technician:
        query = query.filter(model.technician_name == technician)
    return query.order_by(model.created_at.desc(), model.id.desc()).all()


def list_entry_dicts(kind: WorkLogKind, **filters) -> list[dict]:
    return [entry.to_dict(added_by_name=name) for entry, name in list_entries(kind, **filters)]


def create_entry(kind: WorkLogKind, payload: WorkLogPayload, *, actor_id: str) -> str:
    with transaction() as session:
        entry = kind.model(
            id=mint_id(kind.id_prefix),
            added_by_id=actor_id,
            **payload.column_values(kind.with_credits),
        )
        session.add(entry)
        session.flush()

        activity_service.record(
            actor_id=actor_id,
            action="add_entry",
            target_id=entry.id,
            target_name=entry.client_name,
            details=f"Added {kind.label}: {entry.id_code}",
        )
        return entry.id


def update_entry(kind: WorkLogKind, entry_id: str, payload: WorkLogPayload, *, actor_id: str) -> None:
    with transaction() as session:
        entry = session.get(kind.model, entry_id)
        if not entry:
            raise NotFoundError("Entry not found")

        for column, value in payload.column_values(kind.with_credits).items():
            setattr(entry, column, value)
        session.flush()

        activity_service.record(
            actor_id=actor_id,
            action="update_entry",
            target_id=entry.id,
            target_name=entry.client_name,
            details=f"Updated {kind.label}: {entry.id_code}",
        )


def delete_entry(kind: WorkLogKind, entry_id: str, *, actor_id: str) -> None:
    with transaction() as session:
        entry = session.get(kind.model, entry_id)
        if not entry:
            raise NotFoundError("Entry not found")

        id_code, client_name = entry.id_code, entry.client_name
        session.delete(entry)
        session.flush()

        activity_service.record(
            actor_id=actor_id,
            action="delete_entry",
            target_id=entry_id,
            target_name=client_name,
            details=f"Deleted {kind.label}: {id_code}",
        )
