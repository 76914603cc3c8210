# Overview: Service-layer operations for bearer tokens; signs and verifies JWTs.

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import jwt
from flask import current_app


class InvalidTokenError(Exception):
    """Token is malformed, has a bad signature, or has expired."""
    pass


def issue_token(user_id: str) -> str:
    now = datetime.now(timezone.utc)
    ttl = current_app.config.get("TOKEN_TTL_SECONDS", 24 * 60 * 60)
    payload = {
        "sub": user_id,
        "iat": now,
        "exp": now + timedelta(seconds=ttl),
    }
    return jwt.encode(
        payload,
        current_app.config["SECRET_KEY"],
        algorithm=current_app.config.get("TOKEN_ALGORITHM", "HS256"),
    )


def decode_token(token: str) -> str:
    """
    Return the subject (user id) of a valid token.

    SECURITY: every decode failure maps to one error so callers cannot
    tell an expired token from a forged one.
    """
    try:
        payload = jwt.decode(
            token,
            current_app.config["SECRET_KEY"],
            algorithms=[current_app.config.get("TOKEN_ALGORITHM", "HS256")],
            options={"require": ["sub", "exp"]},
        )
    except jwt.PyJWTError as exc:
        raise InvalidTokenError("Invalid token") from exc

    subject = payload.get("sub")
    if not subject or not isinstance(subject, str):
        raise InvalidTokenError("Invalid token")
    return subject
