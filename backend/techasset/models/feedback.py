from __future__ import annotations

from ..extensions import db
from ..shaping import as_float
from techasset.time_utils import to_utc_z, utcnow


class FeedbackLink(db.Model):
    """
    Customer feedback invitation.

    link_id is the public identifier embedded in generated_link; id is the
    internal key used by staff-facing routes.
    """
    __tablename__ = "feedback_links"

    id = db.Column(db.String(64), primary_key=True)
    link_id = db.Column(db.String(128), nullable=False, unique=True, index=True)
    staff_name = db.Column(db.String(255), nullable=True)
    customer_name = db.Column(db.String(255), nullable=False)
    client = db.Column(db.String(255), nullable=True)
    task_name = db.Column(db.String(255), nullable=True)
    generated_link = db.Column(db.String(1024), nullable=False)
    is_used = db.Column(db.Boolean, nullable=False, default=False)
    used_at = db.Column(db.DateTime, nullable=True)

    created_by_id = db.Column(db.String(64), db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    responses = db.relationship(
        "FeedbackResponse",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy=True,
    )

    def to_dict(self, created_by_name: str | None = None, response_count: int = 0, average_rating=None) -> dict:
        return {
            "id": self.id,
            "linkId": self.link_id,
            "staffName": self.staff_name,
            "customerName": self.customer_name,
            "client": self.client,
            "taskName": self.task_name,
            "generatedLink": self.generated_link,
            "isUsed": bool(self.is_used),
            "usedAt": to_utc_z(self.used_at),
            "createdBy": created_by_name or "Unknown",
            "createdAt": to_utc_z(self.created_at),
            "responses": int(response_count or 0),
            "averageRating": as_float(average_rating),
        }

    def to_public_dict(self) -> dict:
        return {
            "id": self.id,
            "staffName": self.staff_name,
            "customerName": self.customer_name,
            "client": self.client,
            "taskName": self.task_name,
            "isUsed": bool(self.is_used),
        }


class FeedbackResponse(db.Model):
    __tablename__ = "feedback_responses"

    id = db.Column(db.String(64), primary_key=True)
    feedback_link_id = db.Column(
        db.String(64),
        db.ForeignKey("feedback_links.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    rating = db.Column(db.Integer, nullable=True)
    comments = db.Column(db.Text, nullable=True)
    client_name = db.Column(db.String(255), nullable=True)
    client_email = db.Column(db.String(255), nullable=True)
    client_company = db.Column(db.String(255), nullable=True)
    submitted_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "linkId": self.feedback_link_id,
            "rating": self.rating,
            "comments": self.comments,
            "clientInfo": {
                "name": self.client_name,
                "email": self.client_email,
                "company": self.client_company,
            },
            "submittedAt": to_utc_z(self.submitted_at),
        }
