# Overview: Service-layer operations for helpdesk tickets and their comments.

"""
Ticket Service

WHY: Ticket creation is the one writer that contends on a shared row (the
per-day sequence). The sequence bump, the ticket insert and the activity
row commit together; if the ticket insert fails, the bump is rolled back
with it, and lock timeouts are retried with backoff.
"""

from __future__ import annotations

from datetime import date

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import aliased

from ..extensions import db
from ..models import Ticket, TicketComment, User
from ..schemas import CommentPayload, TicketCreatePayload, TicketUpdatePayload
from ..shaping import dump_json_list, group_by
from ..validation import NotFoundError, ValidationError
from . import activity_service, sequence_service
from .persistence import mint_id, run_with_retry, transaction
from .sequence_service import SequenceConflictError
from techasset.time_utils import utcnow


CLOSING_STATUSES = ("resolved", "closed")


def _check_references(assigned_to: str | None, parent_ticket_id: str | None, ticket_id: str | None = None) -> None:
    if assigned_to is not None and not db.session.get(User, assigned_to):
        raise ValidationError(f"Unknown assignee: {assigned_to}")
    if parent_ticket_id is not None:
        if parent_ticket_id == ticket_id:
            raise ValidationError("A ticket cannot be its own parent")
        if not db.session.get(Ticket, parent_ticket_id):
            raise ValidationError(f"Unknown parent ticket: {parent_ticket_id}")


def _ticket_rows(*filters):
    creator = aliased(User)
    assignee = aliased(User)
    return (
        db.session.query(Ticket, creator.name, assignee.name)
        .outerjoin(creator, Ticket.created_by_id == creator.id)
        .outerjoin(assignee, Ticket.assigned_to_id == assignee.id)
        .filter(*filters)
        .order_by(Ticket.created_at.desc(), Ticket.id.desc())
        .all()
    )


def _child_ids(parent_ids: list[str]) -> dict[str, list]:
    if not parent_ids:
        return {}
    children = (
        db.session.query(Ticket.id, Ticket.parent_ticket_id)
        .filter(Ticket.parent_ticket_id.in_(parent_ids))
        .order_by(Ticket.created_at, Ticket.id)
        .all()
    )
    return {
        parent: [row.id for row in rows]
        for parent, rows in group_by(children, "parent_ticket_id").items()
    }


def list_tickets() -> list[dict]:
    rows = _ticket_rows()
    children = _child_ids([ticket.id for ticket, _, _ in rows])
    return [
        ticket.to_dict(
            created_by_name=created_by,
            assigned_to_name=assigned_to,
            child_ticket_ids=children.get(ticket.id, []),
        )
        for ticket, created_by, assigned_to in rows
    ]


def get_ticket(ticket_id: str) -> dict:
    rows = _ticket_rows(Ticket.id == ticket_id)
    if not rows:
        raise NotFoundError("Ticket not found")
    ticket, created_by, assigned_to = rows[0]
    children = _child_ids([ticket.id])
    return ticket.to_dict(
        created_by_name=created_by,
        assigned_to_name=assigned_to,
        child_ticket_ids=children.get(ticket.id, []),
    )


def create_ticket(payload: TicketCreatePayload, *, actor_id: str, today: date | None = None) -> tuple[str, str]:
    """
    Create a ticket with a freshly allocated number.

    Returns (ticket id, ticket number).

    Raises:
        SequenceConflictError: the allocated number already exists
    """
    _check_references(payload.assigned_to, payload.parent_ticket_id)

    def _op() -> tuple[str, str]:
        with transaction() as session:
            number = sequence_service.next_ticket_number(today)

            ticket = Ticket(
                id=mint_id("ticket"),
                ticket_number=number,
                title=payload.title,
                description=payload.description,
                status="open",
                priority=payload.priority,
                category=payload.category,
                assigned_to_id=payload.assigned_to,
                created_by_id=actor_id,
                due_date=payload.due_date,
                parent_ticket_id=payload.parent_ticket_id,
                labels=dump_json_list(payload.labels),
            )
            session.add(ticket)
            try:
                session.flush()
            except IntegrityError as exc:
                raise SequenceConflictError(
                    "Failed to generate unique ticket number. Please try again."
                ) from exc

            activity_service.record(
                actor_id=actor_id,
                action="add_entry",
                target_id=ticket.id,
                target_name=number,
                details=f"Created ticket: {number}",
            )
            return ticket.id, number

    return run_with_retry(_op)


def update_ticket(ticket_id: str, payload: TicketUpdatePayload, *, actor_id: str) -> None:
    fields = dict(payload.fields)
    _check_references(fields.get("assigned_to_id"), fields.get("parent_ticket_id"), ticket_id)

    with transaction() as session:
        ticket = session.get(Ticket, ticket_id)
        if not ticket:
            raise NotFoundError("Ticket not found")

        for column in ("labels", "viewed_by"):
            if column in fields:
                fields[column] = dump_json_list(fields[column])

        for column, value in fields.items():
            setattr(ticket, column, value)

        # Stamp resolution time once, unless the client supplied one
        if (
            fields.get("status") in CLOSING_STATUSES
            and "resolved_at" not in fields
            and ticket.resolved_at is None
        ):
            ticket.resolved_at = utcnow()
        session.flush()

        activity_service.record(
            actor_id=actor_id,
            action="update_entry",
            target_id=ticket.id,
            target_name=ticket.ticket_number,
            details=f"Updated ticket: {ticket.ticket_number}",
        )


def delete_ticket(ticket_id: str, *, actor_id: str) -> None:
    with transaction() as session:
        ticket = session.get(Ticket, ticket_id)
        if not ticket:
            raise NotFoundError("Ticket not found")

        number = ticket.ticket_number
        session.delete(ticket)
        session.flush()

        activity_service.record(
            actor_id=actor_id,
            action="delete_entry",
            target_id=ticket_id,
            target_name=number,
            details=f"Deleted ticket: {number}",
        )


# =============================================================================
# Comments
# =============================================================================

def list_comments(ticket_id: str) -> list[dict]:
    if not db.session.get(Ticket, ticket_id):
        raise NotFoundError("Ticket not found")

    rows = (
        db.session.query(TicketComment, User.name)
        .outerjoin(User, TicketComment.created_by_id == User.id)
        .filter(TicketComment.ticket_id == ticket_id)
        .order_by(TicketComment.created_at.asc(), TicketComment.id.asc())
        .all()
    )
    return [comment.to_dict(created_by_name=name) for comment, name in rows]


def add_comment(ticket_id: str, payload: CommentPayload, *, actor_id: str) -> str:
    with transaction() as session:
        ticket = session.get(Ticket, ticket_id)
        if not ticket:
            raise NotFoundError("Ticket not found")

        comment = TicketComment(
            id=mint_id("comment"),
            ticket_id=ticket.id,
            content=payload.content,
            is_private=payload.is_private,
            created_by_id=actor_id,
        )
        session.add(comment)
        session.flush()

        activity_service.record(
            actor_id=actor_id,
            action="add_comment",
            target_id=ticket.id,
            target_name=ticket.ticket_number,
            details=f"Commented on ticket: {ticket.ticket_number}",
        )
        return comment.id
