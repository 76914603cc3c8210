from __future__ import annotations

from ..extensions import db
from ..shaping import load_json_list
from techasset.time_utils import to_iso_date, to_utc_z, utcnow


class TicketSequence(db.Model):
    """
    Per-day ticket counter.

    WHY: Ticket numbers are human-facing (PREFIX-YYYYMMDD-NNN). A single row
    per calendar day, bumped with one atomic upsert, gives concurrent
    creators distinct numbers without any in-process lock.
    """
    __tablename__ = "ticket_sequence"

    seq_date = db.Column(db.Date, primary_key=True)
    last_number = db.Column(db.Integer, nullable=False, default=0)


class Ticket(db.Model):
    __tablename__ = "tickets"
    __table_args__ = (
        db.UniqueConstraint("ticket_number", name="uq_tickets_ticket_number"),
        db.Index("ix_tickets_created", "created_at"),
        db.Index("ix_tickets_parent", "parent_ticket_id"),
    )

    id = db.Column(db.String(64), primary_key=True)
    ticket_number = db.Column(db.String(64), nullable=False)
    title = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=False)
    status = db.Column(db.String(32), nullable=False, default="open")
    priority = db.Column(db.String(32), nullable=False, default="medium")
    category = db.Column(db.String(64), nullable=False)

    assigned_to_id = db.Column(db.String(64), db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_by_id = db.Column(db.String(64), db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    due_date = db.Column(db.Date, nullable=True)
    resolved_at = db.Column(db.DateTime, nullable=True)
    parent_ticket_id = db.Column(db.String(64), db.ForeignKey("tickets.id", ondelete="SET NULL"), nullable=True)

    labels = db.Column(db.Text, nullable=True)
    sla_breached = db.Column(db.Boolean, nullable=False, default=False)
    response_time_minutes = db.Column(db.Integer, nullable=True)
    resolution_time_minutes = db.Column(db.Integer, nullable=True)

    # Presence tracking; written by clients viewing the ticket
    is_being_viewed = db.Column(db.Boolean, nullable=False, default=False)
    viewed_by = db.Column(db.Text, nullable=True)
    last_viewed_at = db.Column(db.DateTime, nullable=True)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    comments = db.relationship(
        "TicketComment",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy=True,
    )

    def to_dict(
        self,
        created_by_name: str | None = None,
        assigned_to_name: str | None = None,
        child_ticket_ids: list[str] | None = None,
    ) -> dict:
        return {
            "id": self.id,
            "ticketNumber": self.ticket_number,
            "title": self.title,
            "description": self.description,
            "status": self.status,
            "priority": self.priority,
            "category": self.category,
            "assignedTo": self.assigned_to_id,
            "assignedToName": assigned_to_name,
            "createdBy": self.created_by_id,
            "createdByName": created_by_name or "Unknown",
            "dueDate": to_iso_date(self.due_date),
            "resolvedAt": to_utc_z(self.resolved_at),
            "parentTicketId": self.parent_ticket_id,
            "labels": load_json_list(self.labels),
            "slaBreached": bool(self.sla_breached),
            "responseTime": self.response_time_minutes,
            "resolutionTime": self.resolution_time_minutes,
            "isBeingViewed": bool(self.is_being_viewed),
            "viewedBy": load_json_list(self.viewed_by),
            "lastViewedAt": to_utc_z(self.last_viewed_at),
            "createdAt": to_utc_z(self.created_at),
            "updatedAt": to_utc_z(self.updated_at),
            "childTicketIds": list(child_ticket_ids or []),
        }


class TicketComment(db.Model):
    __tablename__ = "ticket_comments"

    id = db.Column(db.String(64), primary_key=True)
    ticket_id = db.Column(
        db.String(64),
        db.ForeignKey("tickets.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    content = db.Column(db.Text, nullable=False)
    is_private = db.Column(db.Boolean, nullable=False, default=False)
    created_by_id = db.Column(db.String(64), db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    def to_dict(self, created_by_name: str | None = None) -> dict:
        return {
            "id": self.id,
            "ticketId": self.ticket_id,
            "content": self.content,
            "isPrivate": bool(self.is_private),
            "createdBy": self.created_by_id,
            "createdByName": created_by_name or "Unknown",
            "createdAt": to_utc_z(self.created_at),
            "updatedAt": to_utc_z(self.updated_at),
        }
