# Overview: Service-layer operations for account management.

from __future__ import annotations

from ..extensions import db
from ..models import User
from ..roles import MODULE_SCOPED_ROLES
from ..schemas import UserPayload
from ..shaping import dump_json_list
from ..validation import NotFoundError, ValidationError
from . import activity_service, auth_service
from .persistence import mint_id, transaction


DEFAULT_PASSWORD = "password"


def _permissions_column(role: str, permissions: list[str]) -> str | None:
    """Module lists are only meaningful for module-scoped roles."""
    if role in MODULE_SCOPED_ROLES:
        return dump_json_list(permissions)
    return None


def _check_username_free(username: str, exclude_id: str | None = None) -> None:
    query = db.session.query(User.id).filter(User.username == username)
    if exclude_id is not None:
        query = query.filter(User.id != exclude_id)
    if query.first():
        raise ValidationError("Username already exists")


def list_users() -> list[dict]:
    users = db.session.query(User).order_by(User.created_at.desc(), User.id.desc()).all()
    return [u.to_dict() for u in users]


def create_user(payload: UserPayload, *, actor_id: str | None) -> str:
    _check_username_free(payload.username)

    with transaction() as session:
        user = User(
            id=mint_id("user"),
            username=payload.username,
            password_hash=auth_service.hash_password(payload.password or DEFAULT_PASSWORD),
            name=payload.name,
            role=payload.role,
            module_permissions=_permissions_column(payload.role, payload.module_permissions),
        )
        session.add(user)
        session.flush()

        activity_service.record(
            actor_id=actor_id,
            action="add_user",
            target_id=user.id,
            target_name=user.name,
            details=f"Added new user: {user.name} ({user.role})",
        )
        return user.id


def update_user(user_id: str, payload: UserPayload, *, actor_id: str) -> None:
    _check_username_free(payload.username, exclude_id=user_id)

    with transaction() as session:
        user = session.get(User, user_id)
        if not user:
            raise NotFoundError("User not found")

        user.username = payload.username
        user.name = payload.name
        user.role = payload.role
        user.module_permissions = _permissions_column(payload.role, payload.module_permissions)
        if payload.password:
            user.password_hash = auth_service.hash_password(payload.password)
        session.flush()

        activity_service.record(
            actor_id=actor_id,
            action="update_user",
            target_id=user.id,
            target_name=user.name,
            details=f"Updated user: {user.name} ({user.role})",
        )


def delete_user(user_id: str, *, actor_id: str) -> None:
    if user_id == actor_id:
        raise ValidationError("Cannot delete your own account")

    with transaction() as session:
        user = session.get(User, user_id)
        if not user:
            raise NotFoundError("User not found")

        name, role = user.name, user.role
        session.delete(user)
        session.flush()

        activity_service.record(
            actor_id=actor_id,
            action="delete_user",
            target_id=user_id,
            target_name=name,
            details=f"Deleted user: {name} ({role})",
        )
