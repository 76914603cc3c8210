# Overview: Flask API routes for auth operations; parses input and returns JSON responses.

"""
Authentication API routes

SECURITY:
- Tokens are stateless and signed; logout is recorded for the audit trail
  but the client is responsible for discarding the token
- Unknown usernames and wrong passwords share one response
"""

from flask import Blueprint, request, jsonify, current_app, g

from ..decorators import require_auth
from ..schemas import LoginRequest
from ..services import activity_service, auth_service, token_service
from ..validation import ValidationError, to_body


auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")


@auth_bp.post("/login")
def login_route():
    """
    Authenticate user and issue a bearer token.

    Returns {token, user}. Token must be included in the Authorization
    header for protected routes.
    """
    try:
        data = to_body(request.get_json(silent=True))
        credentials = LoginRequest.from_payload(data)
        credentials.validate()

        user = auth_service.authenticate(credentials.username, credentials.password)
        if not user:
            return jsonify({"error": "Invalid credentials"}), 401

        token = token_service.issue_token(user.id)
        activity_service.record_detached(
            actor_id=user.id,
            action="login",
            target_id=user.id,
            target_name=user.name,
            details=f"User logged in: {user.username}",
        )

        return jsonify({"token": token, "user": user.to_dict()}), 200

    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except Exception:
        current_app.logger.exception("Failed to login user")
        return jsonify({"error": "Internal server error"}), 500


@auth_bp.post("/logout")
@require_auth
def logout_route():
    identity = g.current_user
    activity_service.record_detached(
        actor_id=identity.id,
        action="logout",
        target_id=identity.id,
        target_name=identity.name,
        details=f"User logged out: {identity.username}",
    )
    return jsonify({"message": "Logout successful"}), 200


@auth_bp.get("/me")
@require_auth
def me_route():
    """Current user as stored now, not as it was when the token was issued."""
    user = auth_service.get_user(g.current_user.id)
    return jsonify({"user": user.to_dict()})
