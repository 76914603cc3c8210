from __future__ import annotations

from ..extensions import db
from ..shaping import load_json_list
from techasset.time_utils import to_utc_z, utcnow


class User(db.Model):
    """
    Application accounts.

    Role and module permissions are read from this table on every request,
    so changing them takes effect without reissuing tokens.
    """
    __tablename__ = "users"

    id = db.Column(db.String(64), primary_key=True)
    username = db.Column(db.String(64), nullable=False, unique=True, index=True)

    # Bcrypt hashed password
    password_hash = db.Column(db.String(255), nullable=False)

    name = db.Column(db.String(255), nullable=False)
    role = db.Column(db.String(32), nullable=False, index=True)

    # JSON list of module keys; only stored for module-admin and standard-user
    module_permissions = db.Column(db.Text, nullable=True)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    @property
    def permissions(self) -> list[str]:
        return load_json_list(self.module_permissions)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "username": self.username,
            "name": self.name,
            "role": self.role,
            "modulePermissions": self.permissions,
            "createdAt": to_utc_z(self.created_at),
            "updatedAt": to_utc_z(self.updated_at),
        }
