from __future__ import annotations

from ..extensions import db
from techasset.time_utils import to_utc_z, utcnow


class ActivityLog(db.Model):
    """
    Append-only audit trail.

    IMMUTABLE: Never update or delete from application code.
    user_id is a nullable back-reference; removing a user keeps their rows.
    """
    __tablename__ = "activity_logs"
    __table_args__ = (
        db.Index("ix_activity_logs_created", "created_at"),
    )

    id = db.Column(db.String(64), primary_key=True)
    user_id = db.Column(
        db.String(64),
        db.ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    action = db.Column(db.String(64), nullable=False, index=True)
    target_id = db.Column(db.String(128), nullable=True)
    target_name = db.Column(db.String(255), nullable=True)
    details = db.Column(db.Text, nullable=True)

    # Python-side default keeps sub-second ordering stable for the report
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    user = db.relationship("User", passive_deletes=True)

    def to_dict(self, user_name: str | None = None) -> dict:
        return {
            "id": self.id,
            "userId": self.user_id,
            "userName": user_name or "Unknown",
            "action": self.action,
            "targetId": self.target_id,
            "targetName": self.target_name,
            "details": self.details,
            "timestamp": to_utc_z(self.created_at),
        }
