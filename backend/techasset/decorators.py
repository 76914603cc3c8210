# Overview: Request and role decorators for API routes.

from __future__ import annotations

from dataclasses import dataclass, field
from functools import wraps

from flask import g, jsonify, request

from .services import auth_service, token_service
from .services.token_service import InvalidTokenError


@dataclass(frozen=True)
class Identity:
    """Authenticated caller, loaded fresh from the users table per request."""
    id: str
    username: str
    name: str
    role: str
    permissions: list[str] = field(default_factory=list)


def _current_identity() -> Identity | None:
    return getattr(g, "current_user", None)


def require_auth(f):
    """
    Require a valid bearer token.

    Sets g.current_user to an Identity whose role and module permissions
    come from the database, not from the token.

    SECURITY: Returns 401 if:
    - No Authorization header, or not a Bearer credential
    - Token undecodable, badly signed or expired (one message for all)
    - Token subject no longer exists
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        auth_header = request.headers.get("Authorization")

        if not auth_header or not auth_header.startswith("Bearer "):
            return jsonify({"error": "Access token required"}), 401

        token = auth_header.split(" ", 1)[1].strip()
        if not token:
            return jsonify({"error": "Access token required"}), 401

        try:
            user_id = token_service.decode_token(token)
        except InvalidTokenError:
            return jsonify({"error": "Invalid token"}), 401

        user = auth_service.get_user(user_id)
        if not user:
            return jsonify({"error": "User not found"}), 401

        g.current_user = Identity(
            id=user.id,
            username=user.username,
            name=user.name,
            role=user.role,
            permissions=user.permissions,
        )

        return f(*args, **kwargs)

    return decorated_function


def require_role(*roles: str):
    """
    Require the caller's role to be in `roles`. Must run after @require_auth.

    401 when no identity is established, 403 when the role is not allowed.
    """
    allowed = frozenset(roles)

    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            identity = _current_identity()
            if identity is None:
                return jsonify({"error": "Authentication required"}), 401

            if identity.role not in allowed:
                return jsonify({"error": "Insufficient permissions"}), 403

            return f(*args, **kwargs)

        return decorated_function

    return decorator
