from __future__ import annotations

from sqlalchemy.orm import declared_attr

from ..extensions import db
from ..shaping import as_float
from techasset.time_utils import to_iso_date, to_utc_z, utcnow


class WorkLogColumns:
    """Columns shared by the consultancy log and the internal log."""

    id = db.Column(db.String(64), primary_key=True)
    id_code = db.Column(db.String(64), nullable=False, index=True)
    client_name = db.Column(db.String(255), nullable=False)
    subject_issue = db.Column(db.Text, nullable=True)
    category = db.Column(db.String(128), nullable=True)

    date_started = db.Column(db.Date, nullable=True)
    time_started = db.Column(db.String(16), nullable=True)
    date_finished = db.Column(db.Date, nullable=True)
    time_finished = db.Column(db.String(16), nullable=True)

    technician_name = db.Column(db.String(255), nullable=True)
    resolution_details = db.Column(db.Text, nullable=True)
    remarks = db.Column(db.Text, nullable=True)
    status = db.Column(db.String(32), nullable=True)

    time_consumed_minutes = db.Column(db.Integer, nullable=True)
    total_time_charge_minutes = db.Column(db.Integer, nullable=True)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    @declared_attr
    def added_by_id(cls):
        return db.Column(db.String(64), db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    def _base_dict(self, added_by_name: str | None) -> dict:
        return {
            "id": self.id,
            "idCode": self.id_code,
            "clientName": self.client_name,
            "subjectIssue": self.subject_issue,
            "category": self.category,
            "dateStarted": to_iso_date(self.date_started),
            "timeStarted": self.time_started,
            "dateFinished": to_iso_date(self.date_finished),
            "timeFinished": self.time_finished,
            "technicianName": self.technician_name,
            "resolutionDetails": self.resolution_details,
            "remarks": self.remarks,
            "status": self.status,
            "timeConsumedMinutes": self.time_consumed_minutes,
            "totalTimeChargeMinutes": self.total_time_charge_minutes,
            "addedBy": added_by_name or "Unknown",
            "timestamp": to_utc_z(self.created_at),
        }


class ConsultancyLogEntry(WorkLogColumns, db.Model):
    """Billable consultancy work; each entry draws down purchased credits."""
    __tablename__ = "chapmancg_log_entries"

    credit_consumed = db.Column(db.Numeric(12, 2), nullable=True)
    total_credit_consumed = db.Column(db.Numeric(12, 2), nullable=True)

    def to_dict(self, added_by_name: str | None = None) -> dict:
        data = self._base_dict(added_by_name)
        data["creditConsumed"] = as_float(self.credit_consumed)
        data["totalCreditConsumed"] = as_float(self.total_credit_consumed)
        return data


class InternalLogEntry(WorkLogColumns, db.Model):
    __tablename__ = "internal_log_entries"

    def to_dict(self, added_by_name: str | None = None) -> dict:
        return self._base_dict(added_by_name)
