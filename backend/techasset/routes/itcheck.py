# Overview: Flask API routes for IT check entries; parses input and returns JSON responses.

"""
IT Check Routes

SECURITY: All routes require authentication.
- Create/update allow admin, global-admin and editor
- Delete is global-admin only

Each entry carries speed tests and installed applications; an update
replaces both lists wholesale.
"""

from flask import Blueprint, request, jsonify, current_app, g

from ..decorators import require_auth, require_role
from ..roles import DEVICE_CHECK_WRITERS, SUPERUSER_ONLY
from ..schemas import ITCheckPayload
from ..services import itcheck_service
from ..validation import NotFoundError, ValidationError, to_body


itcheck_bp = Blueprint("itcheck", __name__, url_prefix="/api/itcheck")


@itcheck_bp.get("")
@require_auth
def list_entries_route():
    try:
        return jsonify(itcheck_service.list_entries())
    except Exception:
        current_app.logger.exception("Failed to list IT check entries")
        return jsonify({"error": "Internal server error"}), 500


@itcheck_bp.post("")
@require_auth
@require_role(*DEVICE_CHECK_WRITERS)
def create_entry_route():
    """
    Create an entry with its speed tests and installed apps.

    Request body (camelCase):
    {
        "name": "...",            // required
        "department": "...",      // required
        "processor": {"brand", "series", "generation", "isMac"},
        "speedTests": [{"url", "download", "upload", "ping"}],
        "installedApps": [{"name", "version", "notes"}],
        ...
    }

    Returns 201 {message, id}.
    """
    try:
        data = to_body(request.get_json(silent=True))
        payload = ITCheckPayload.from_payload(data)
        payload.validate()

        entry_id = itcheck_service.create_entry(payload, actor_id=g.current_user.id)
        return jsonify({"message": "IT check entry created successfully", "id": entry_id}), 201

    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except Exception:
        current_app.logger.exception("Failed to create IT check entry")
        return jsonify({"error": "Internal server error"}), 500


@itcheck_bp.put("/<entry_id>")
@require_auth
@require_role(*DEVICE_CHECK_WRITERS)
def update_entry_route(entry_id: str):
    try:
        data = to_body(request.get_json(silent=True))
        payload = ITCheckPayload.from_payload(data)
        payload.validate()

        itcheck_service.update_entry(entry_id, payload, actor_id=g.current_user.id)
        return jsonify({"message": "IT check entry updated successfully"})

    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except Exception:
        current_app.logger.exception("Failed to update IT check entry")
        return jsonify({"error": "Internal server error"}), 500


@itcheck_bp.delete("/<entry_id>")
@require_auth
@require_role(*SUPERUSER_ONLY)
def delete_entry_route(entry_id: str):
    try:
        itcheck_service.delete_entry(entry_id, actor_id=g.current_user.id)
        return jsonify({"message": "IT check entry deleted successfully"})

    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except Exception:
        current_app.logger.exception("Failed to delete IT check entry")
        return jsonify({"error": "Internal server error"}), 500
