# Overview: Service-layer operations for the shared password vault and secure notes.

"""
Password Service

SECURITY: Secrets are encrypted by vault_crypto before they reach the
session and decrypted only while shaping a response.
"""

from __future__ import annotations

from sqlalchemy import delete, insert

from ..extensions import db
from ..models import PasswordCategory, PasswordCustomField, PasswordEntry, SecureNote, User
from ..schemas import PasswordEntryPayload, SecureNotePayload
from ..shaping import dump_json_list, group_by
from ..validation import NotFoundError, ValidationError
from . import activity_service, password_strength, vault_crypto
from .persistence import child_id, mint_id, transaction


DEFAULT_CATEGORIES = (
    ("work", "Work", "Briefcase", "bg-blue-500"),
    ("personal", "Personal", "User", "bg-green-500"),
    ("social", "Social Media", "Share2", "bg-purple-500"),
    ("finance", "Finance", "CreditCard", "bg-orange-500"),
    ("shopping", "Shopping", "ShoppingCart", "bg-pink-500"),
    ("entertainment", "Entertainment", "Play", "bg-red-500"),
    ("other", "Other", "Folder", "bg-gray-500"),
)


# =============================================================================
# Categories
# =============================================================================

def seed_default_categories() -> int:
    """Insert any missing default category. Returns the number inserted."""
    existing = {row[0] for row in db.session.query(PasswordCategory.id).all()}
    created = 0
    with transaction() as session:
        for category_id, name, icon, color in DEFAULT_CATEGORIES:
            if category_id in existing:
                continue
            session.add(PasswordCategory(id=category_id, name=name, icon=icon, color=color))
            created += 1
    return created


def list_categories() -> list[dict]:
    categories = db.session.query(PasswordCategory).order_by(PasswordCategory.name).all()
    return [c.to_dict() for c in categories]


def _check_category(category_id: str | None) -> None:
    if category_id is None:
        return
    if not db.session.get(PasswordCategory, category_id):
        raise ValidationError(f"Unknown category: {category_id}")


# =============================================================================
# Entries
# =============================================================================

def _root_values(payload: PasswordEntryPayload) -> dict:
    return {
        "title": payload.title,
        "website": payload.website,
        "username": payload.username,
        "email": payload.email,
        "password_encrypted": vault_crypto.encrypt(payload.password),
        "notes": payload.notes,
        "category_id": payload.category_id,
        "is_favorite": payload.is_favorite,
        "is_compromised": payload.is_compromised,
        "last_used": payload.last_used,
        "tags": dump_json_list(payload.tags),
    }


def _replace_custom_fields(session, entry_id: str, payload: PasswordEntryPayload) -> None:
    session.execute(delete(PasswordCustomField).where(PasswordCustomField.password_entry_id == entry_id))
    if not payload.custom_fields:
        return
    session.execute(
        insert(PasswordCustomField),
        [
            {
                "id": child_id(entry_id, "field", position),
                "password_entry_id": entry_id,
                "label": custom.label,
                "value_encrypted": vault_crypto.encrypt(custom.value),
                "field_type": custom.field_type,
                "is_hidden": custom.is_hidden,
                "position": position,
            }
            for position, custom in enumerate(payload.custom_fields, start=1)
        ],
    )


def _load_entries():
    return (
        db.session.query(PasswordEntry, User.name)
        .outerjoin(User, PasswordEntry.created_by_id == User.id)
        .order_by(PasswordEntry.created_at.desc(), PasswordEntry.id.desc())
        .all()
    )


def list_entries() -> list[dict]:
    rows = _load_entries()
    entry_ids = [entry.id for entry, _ in rows]
    if not entry_ids:
        return []

    fields = group_by(
        db.session.query(PasswordCustomField)
        .filter(PasswordCustomField.password_entry_id.in_(entry_ids))
        .order_by(PasswordCustomField.position)
        .all(),
        "password_entry_id",
    )
    return [
        entry.to_dict(
            vault_crypto.decrypt,
            created_by_name=name,
            custom_fields=fields.get(entry.id, []),
        )
        for entry, name in rows
    ]


def create_entry(payload: PasswordEntryPayload, *, actor_id: str) -> str:
    _check_category(payload.category_id)

    with transaction() as session:
        entry = PasswordEntry(id=mint_id("pwd"), created_by_id=actor_id, **_root_values(payload))
        session.add(entry)
        session.flush()

        _replace_custom_fields(session, entry.id, payload)

        activity_service.record(
            actor_id=actor_id,
            action="add_entry",
            target_id=entry.id,
            target_name=entry.title,
            details=f"Added password entry: {entry.title}",
        )
        return entry.id


def update_entry(entry_id: str, payload: PasswordEntryPayload, *, actor_id: str) -> None:
    _check_category(payload.category_id)

    with transaction() as session:
        entry = session.get(PasswordEntry, entry_id)
        if not entry:
            raise NotFoundError("Password entry not found")

        for column, value in _root_values(payload).items():
            setattr(entry, column, value)
        session.flush()

        _replace_custom_fields(session, entry.id, payload)

        activity_service.record(
            actor_id=actor_id,
            action="update_entry",
            target_id=entry.id,
            target_name=entry.title,
            details=f"Updated password entry: {entry.title}",
        )


def delete_entry(entry_id: str, *, actor_id: str) -> None:
    with transaction() as session:
        entry = session.get(PasswordEntry, entry_id)
        if not entry:
            raise NotFoundError("Password entry not found")

        title = entry.title
        session.delete(entry)
        session.flush()

        activity_service.record(
            actor_id=actor_id,
            action="delete_entry",
            target_id=entry_id,
            target_name=title,
            details=f"Deleted password entry: {title}",
        )


# =============================================================================
# Secure notes
# =============================================================================

def list_notes() -> list[dict]:
    rows = (
        db.session.query(SecureNote, User.name)
        .outerjoin(User, SecureNote.created_by_id == User.id)
        .order_by(SecureNote.created_at.desc(), SecureNote.id.desc())
        .all()
    )
    return [note.to_dict(vault_crypto.decrypt, created_by_name=name) for note, name in rows]


def _note_values(payload: SecureNotePayload) -> dict:
    return {
        "title": payload.title,
        "content_encrypted": vault_crypto.encrypt(payload.content),
        "category": payload.category,
        "is_favorite": payload.is_favorite,
        "tags": dump_json_list(payload.tags),
    }


def create_note(payload: SecureNotePayload, *, actor_id: str) -> str:
    with transaction() as session:
        note = SecureNote(id=mint_id("note"), created_by_id=actor_id, **_note_values(payload))
        session.add(note)
        session.flush()

        activity_service.record(
            actor_id=actor_id,
            action="add_entry",
            target_id=note.id,
            target_name=note.title,
            details=f"Added secure note: {note.title}",
        )
        return note.id


def update_note(note_id: str, payload: SecureNotePayload, *, actor_id: str) -> None:
    with transaction() as session:
        note = session.get(SecureNote, note_id)
        if not note:
            raise NotFoundError("Secure note not found")

        for column, value in _note_values(payload).items():
            setattr(note, column, value)
        session.flush()

        activity_service.record(
            actor_id=actor_id,
            action="update_entry",
            target_id=note.id,
            target_name=note.title,
            details=f"Updated secure note: {note.title}",
        )


def delete_note(note_id: str, *, actor_id: str) -> None:
    with transaction() as session:
        note = session.get(SecureNote, note_id)
        if not note:
            raise NotFoundError("Secure note not found")

        title = note.title
        session.delete(note)
        session.flush()

        activity_service.record(
            actor_id=actor_id,
            action="delete_entry",
            target_id=note_id,
            target_name=title,
            details=f"Deleted secure note: {title}",
        )


# =============================================================================
# Vault health
# =============================================================================

def vault_stats() -> dict:
    """
    Aggregate health figures over every stored password.

    A password counts as compromised when flagged by a user or when it is
    on the common-password list.
    """
    entries = db.session.query(PasswordEntry).all()
    plaintexts = [vault_crypto.decrypt(e.password_encrypted) for e in entries]

    weak = sum(
        1 for value in plaintexts
        if password_strength.analyze(value).score < password_strength.WEAK_SCORE_THRESHOLD
    )
    reused = sum(password_strength.reused_flags(plaintexts))
    compromised = sum(
        1 for entry, value in zip(entries, plaintexts)
        if entry.is_compromised or password_strength.is_common(value)
    )
    favorites = sum(1 for e in entries if e.is_favorite)
    notes = db.session.query(SecureNote).count()

    total = len(entries)
    issues = weak + reused + compromised
    health = max(0.0, 100 - (issues / total) * 100) if total else 100.0

    return {
        "totalPasswords": total,
        "weakPasswords": weak,
        "reusedPasswords": reused,
        "compromisedPasswords": compromised,
        "favoritePasswords": favorites,
        "secureNotes": notes,
        "vaultHealth": round(health),
    }
