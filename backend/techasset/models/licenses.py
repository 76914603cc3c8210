from __future__ import annotations

from ..extensions import db
from ..shaping import as_float, load_json_list
from techasset.time_utils import to_iso_date, to_utc_z, utcnow


class SoftwareLicense(db.Model):
    """
    Purchased software license with optional add-ons.

    assigned_users is a JSON list of display names stored as text so the
    table stays portable across SQLite, MySQL and PostgreSQL.
    """
    __tablename__ = "software_licenses"
    __table_args__ = (
        db.Index("ix_software_licenses_created", "created_at"),
    )

    id = db.Column(db.String(64), primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    vendor = db.Column(db.String(255), nullable=True)
    version = db.Column(db.String(64), nullable=True)
    license_type = db.Column(db.String(64), nullable=True)
    total_licenses = db.Column(db.Integer, nullable=True)
    used_licenses = db.Column(db.Integer, nullable=True, default=0)
    purchase_date = db.Column(db.Date, nullable=True)
    expiry_date = db.Column(db.Date, nullable=True)
    cost = db.Column(db.Numeric(12, 2), nullable=True)
    license_key = db.Column(db.Text, nullable=False)
    assigned_users = db.Column(db.Text, nullable=True)
    status = db.Column(db.String(32), nullable=False, default="active")
    notes = db.Column(db.Text, nullable=True)
    entity = db.Column(db.String(255), nullable=True)
    department = db.Column(db.String(255), nullable=True)

    added_by_id = db.Column(db.String(64), db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    addins = db.relationship(
        "SoftwareAddIn",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="SoftwareAddIn.position",
        lazy=True,
    )

    def to_dict(self, added_by_name: str | None = None, addins=None) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "vendor": self.vendor,
            "version": self.version,
            "licenseType": self.license_type,
            "totalLicenses": self.total_licenses,
            "usedLicenses": self.used_licenses,
            "purchaseDate": to_iso_date(self.purchase_date),
            "expiryDate": to_iso_date(self.expiry_date),
            "cost": as_float(self.cost),
            "licenseKey": self.license_key,
            "assignedUsers": load_json_list(self.assigned_users),
            "status": self.status,
            "notes": self.notes,
            "entity": self.entity,
            "department": self.department,
            "addedBy": added_by_name or "Unknown",
            "timestamp": to_utc_z(self.created_at),
            "addIns": [a.to_dict() for a in (addins or [])],
        }


class SoftwareAddIn(db.Model):
    __tablename__ = "software_addins"

    id = db.Column(db.String(128), primary_key=True)
    license_id = db.Column(
        db.String(64),
        db.ForeignKey("software_licenses.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name = db.Column(db.String(255), nullable=True)
    cost = db.Column(db.Numeric(12, 2), nullable=True)
    total_licenses = db.Column(db.Integer, nullable=True)
    used_licenses = db.Column(db.Integer, nullable=True)
    purchase_date = db.Column(db.Date, nullable=True)
    expiry_date = db.Column(db.Date, nullable=True)
    notes = db.Column(db.Text, nullable=True)
    position = db.Column(db.Integer, nullable=False)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "cost": as_float(self.cost),
            "totalLicenses": self.total_licenses,
            "usedLicenses": self.used_licenses,
            "purchaseDate": to_iso_date(self.purchase_date),
            "expiryDate": to_iso_date(self.expiry_date),
            "notes": self.notes,
        }
