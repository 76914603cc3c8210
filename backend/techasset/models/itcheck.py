from __future__ import annotations

from ..extensions import db
from ..shaping import as_float
from techasset.time_utils import to_utc_z, utcnow


class ITCheckEntry(db.Model):
    """
    Device check record for one workstation.

    Dependents (speed tests, installed apps) are owned by the entry:
    they are replaced wholesale on update and removed with the entry.
    """
    __tablename__ = "it_check_entries"
    __table_args__ = (
        db.Index("ix_it_check_entries_created", "created_at"),
    )

    id = db.Column(db.String(64), primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    department = db.Column(db.String(255), nullable=False)
    batch_number = db.Column(db.String(64), nullable=True)
    computer_type = db.Column(db.String(64), nullable=True)
    it_check_completed = db.Column(db.String(64), nullable=True)

    # Network
    ip_address = db.Column(db.String(64), nullable=True)
    isp = db.Column(db.String(255), nullable=True)
    connection_type = db.Column(db.String(64), nullable=True)

    # Hardware
    operating_system = db.Column(db.String(255), nullable=True)
    processor_brand = db.Column(db.String(64), nullable=True)
    processor_series = db.Column(db.String(64), nullable=True)
    processor_generation = db.Column(db.String(64), nullable=True)
    processor_mac = db.Column(db.String(64), nullable=True)
    memory = db.Column(db.String(64), nullable=True)
    graphics = db.Column(db.String(255), nullable=True)
    storage = db.Column(db.String(255), nullable=True)
    pc_model = db.Column(db.String(255), nullable=True)

    status = db.Column(db.String(32), nullable=True)

    added_by_id = db.Column(db.String(64), db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    speed_tests = db.relationship(
        "SpeedTest",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="SpeedTest.test_order",
        lazy=True,
    )
    installed_apps = db.relationship(
        "InstalledApp",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="InstalledApp.position",
        lazy=True,
    )

    def to_dict(self, added_by_name: str | None = None, speed_tests=None, installed_apps=None) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "department": self.department,
            "batchNumber": self.batch_number,
            "computerType": self.computer_type,
            "itCheckCompleted": self.it_check_completed,
            "ipAddress": self.ip_address,
            "isp": self.isp,
            "connectionType": self.connection_type,
            "operatingSystem": self.operating_system,
            "processor": {
                "brand": self.processor_brand,
                "series": self.processor_series,
                "generation": self.processor_generation,
                "macProcessor": self.processor_mac,
            },
            "memory": self.memory,
            "graphics": self.graphics,
            "storage": self.storage,
            "pcModel": self.pc_model,
            "status": self.status,
            "addedBy": added_by_name or "Unknown",
            "timestamp": to_utc_z(self.created_at),
            "speedTests": [t.to_dict() for t in (speed_tests or [])],
            "installedApps": [a.to_dict() for a in (installed_apps or [])],
        }


class SpeedTest(db.Model):
    __tablename__ = "speed_tests"

    id = db.Column(db.String(128), primary_key=True)
    it_check_entry_id = db.Column(
        db.String(64),
        db.ForeignKey("it_check_entries.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    url = db.Column(db.String(512), nullable=True)
    download_speed = db.Column(db.Float, nullable=True)
    upload_speed = db.Column(db.Float, nullable=True)
    ping = db.Column(db.Float, nullable=True)

    # 1-based position in the submitted list
    test_order = db.Column(db.Integer, nullable=False)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "url": self.url,
            "downloadSpeed": as_float(self.download_speed, None),
            "uploadSpeed": as_float(self.upload_speed, None),
            "ping": as_float(self.ping, None),
            "testOrder": self.test_order,
        }


class InstalledApp(db.Model):
    __tablename__ = "installed_apps"

    id = db.Column(db.String(128), primary_key=True)
    it_check_entry_id = db.Column(
        db.String(64),
        db.ForeignKey("it_check_entries.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name = db.Column(db.String(255), nullable=True)
    version = db.Column(db.String(64), nullable=True)
    notes = db.Column(db.Text, nullable=True)
    position = db.Column(db.Integer, nullable=False)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "version": self.version,
            "notes": self.notes or "",
        }
