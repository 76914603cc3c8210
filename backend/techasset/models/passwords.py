from __future__ import annotations

from ..extensions import db
from ..shaping import load_json_list
from techasset.time_utils import to_utc_z, utcnow


class PasswordCategory(db.Model):
    __tablename__ = "password_categories"

    id = db.Column(db.String(64), primary_key=True)
    name = db.Column(db.String(128), nullable=False)
    icon = db.Column(db.String(64), nullable=True)
    color = db.Column(db.String(32), nullable=True)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "icon": self.icon,
            "color": self.color,
        }


class PasswordEntry(db.Model):
    """
    Shared credential vault entry.

    SECURITY: password_encrypted and custom field values hold Fernet tokens.
    Plaintext only exists in request/response bodies, never at rest.
    """
    __tablename__ = "password_entries"
    __table_args__ = (
        db.Index("ix_password_entries_created", "created_at"),
    )

    id = db.Column(db.String(64), primary_key=True)
    title = db.Column(db.String(255), nullable=False)
    website = db.Column(db.String(512), nullable=True)
    username = db.Column(db.String(255), nullable=True)
    email = db.Column(db.String(255), nullable=True)
    password_encrypted = db.Column(db.Text, nullable=False)
    notes = db.Column(db.Text, nullable=True)
    category_id = db.Column(
        db.String(64),
        db.ForeignKey("password_categories.id", ondelete="SET NULL"),
        nullable=True,
    )
    is_favorite = db.Column(db.Boolean, nullable=False, default=False)
    is_compromised = db.Column(db.Boolean, nullable=False, default=False)
    last_used = db.Column(db.DateTime, nullable=True)
    tags = db.Column(db.Text, nullable=True)

    created_by_id = db.Column(db.String(64), db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    category = db.relationship("PasswordCategory", lazy="joined")
    custom_fields = db.relationship(
        "PasswordCustomField",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="PasswordCustomField.position",
        lazy=True,
    )

    def to_dict(self, decrypt, created_by_name: str | None = None, custom_fields=None) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "website": self.website,
            "username": self.username,
            "email": self.email,
            "password": decrypt(self.password_encrypted),
            "notes": self.notes,
            "category": self.category.to_dict() if self.category else None,
            "isFavorite": bool(self.is_favorite),
            "isCompromised": bool(self.is_compromised),
            "lastUsed": to_utc_z(self.last_used),
            "tags": load_json_list(self.tags),
            "createdBy": created_by_name or "Unknown",
            "createdAt": to_utc_z(self.created_at),
            "updatedAt": to_utc_z(self.updated_at),
            "customFields": [f.to_dict(decrypt) for f in (custom_fields or [])],
        }


class PasswordCustomField(db.Model):
    __tablename__ = "password_custom_fields"

    id = db.Column(db.String(128), primary_key=True)
    password_entry_id = db.Column(
        db.String(64),
        db.ForeignKey("password_entries.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    label = db.Column(db.String(255), nullable=False, default="Untitled Field")
    value_encrypted = db.Column(db.Text, nullable=False)
    field_type = db.Column(db.String(32), nullable=False, default="text")
    is_hidden = db.Column(db.Boolean, nullable=False, default=False)
    position = db.Column(db.Integer, nullable=False)

    def to_dict(self, decrypt) -> dict:
        return {
            "id": self.id,
            "label": self.label,
            "value": decrypt(self.value_encrypted),
            "type": self.field_type,
            "isHidden": bool(self.is_hidden),
        }


class SecureNote(db.Model):
    __tablename__ = "secure_notes"

    id = db.Column(db.String(64), primary_key=True)
    title = db.Column(db.String(255), nullable=False)
    content_encrypted = db.Column(db.Text, nullable=False)
    category = db.Column(db.String(64), nullable=True)
    is_favorite = db.Column(db.Boolean, nullable=False, default=False)
    tags = db.Column(db.Text, nullable=True)

    created_by_id = db.Column(db.String(64), db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    def to_dict(self, decrypt, created_by_name: str | None = None) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "content": decrypt(self.content_encrypted),
            "category": self.category,
            "isFavorite": bool(self.is_favorite),
            "tags": load_json_list(self.tags),
            "createdBy": created_by_name or "Unknown",
            "createdAt": to_utc_z(self.created_at),
            "updatedAt": to_utc_z(self.updated_at),
        }
