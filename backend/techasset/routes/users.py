# Overview: Flask API routes for user administration; parses input and returns JSON responses.

"""
User Routes

SECURITY:
- Listing is open to admin and global-admin
- Create/update/delete are global-admin only
- Password hashes never leave the service layer
"""

from flask import Blueprint, request, jsonify, current_app, g

from ..decorators import require_auth, require_role
from ..roles import SUPERUSER_ONLY, USER_VIEWERS
from ..schemas import UserPayload
from ..services import user_service
from ..validation import NotFoundError, ValidationError, to_body


users_bp = Blueprint("users", __name__, url_prefix="/api/users")


@users_bp.get("")
@require_auth
@require_role(*USER_VIEWERS)
def list_users_route():
    try:
        return jsonify(user_service.list_users())
    except Exception:
        current_app.logger.exception("Failed to list users")
        return jsonify({"error": "Internal server error"}), 500


@users_bp.post("")
@require_auth
@require_role(*SUPERUSER_ONLY)
def create_user_route():
    """
    Create an account. Omitted password falls back to the default one.

    Returns 201 {message, id}; 400 for missing fields, unknown role or a
    username already taken.
    """
    try:
        data = to_body(request.get_json(silent=True))
        payload = UserPayload.from_payload(data)
        payload.validate()

        user_id = user_service.create_user(payload, actor_id=g.current_user.id)
        return jsonify({"message": "User created successfully", "id": user_id}), 201

    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except Exception:
        current_app.logger.exception("Failed to create user")
        return jsonify({"error": "Internal server error"}), 500


@users_bp.put("/<user_id>")
@require_auth
@require_role(*SUPERUSER_ONLY)
def update_user_route(user_id: str):
    try:
        data = to_body(request.get_json(silent=True))
        payload = UserPayload.from_payload(data)
        payload.validate()

        user_service.update_user(user_id, payload, actor_id=g.current_user.id)
        return jsonify({"message": "User updated successfully"})

    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except Exception:
        current_app.logger.exception("Failed to update user")
        return jsonify({"error": "Internal server error"}), 500


@users_bp.delete("/<user_id>")
@require_auth
@require_role(*SUPERUSER_ONLY)
def delete_user_route(user_id: str):
    try:
        user_service.delete_user(user_id, actor_id=g.current_user.id)
        return jsonify({"message": "User deleted successfully"})

    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except Exception:
        current_app.logger.exception("Failed to delete user")
        return jsonify({"error": "Internal server error"}), 500
