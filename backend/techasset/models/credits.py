from __future__ import annotations

from ..extensions import db
from ..shaping import as_float
from techasset.time_utils import to_iso_date, to_utc_z, utcnow


class CreditBlock(db.Model):
    """
    Purchased block of consultancy credits.

    NOTE: Consumption is recorded on consultancy log entries without a
    reference back to a block; the balance is a computed aggregate.
    """
    __tablename__ = "credit_blocks"

    id = db.Column(db.String(64), primary_key=True)
    block_number = db.Column(db.Integer, nullable=False, index=True)
    purchase_date = db.Column(db.Date, nullable=True)
    total_credits = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    is_active = db.Column(db.Boolean, nullable=False, default=True)

    added_by_id = db.Column(db.String(64), db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    def to_dict(self, added_by_name: str | None = None) -> dict:
        return {
            "id": self.id,
            "blockNumber": self.block_number,
            "purchaseDate": to_iso_date(self.purchase_date),
            "totalCredits": as_float(self.total_credits),
            "isActive": bool(self.is_active),
            "addedBy": added_by_name or "Unknown",
            "timestamp": to_utc_z(self.created_at),
        }
