# Overview: Flask API routes for software licenses and their add-ons.

from flask import Blueprint, request, jsonify, current_app, g

from ..decorators import require_auth, require_role
from ..roles import SUPERUSER_ONLY
from ..schemas import LicensePayload
from ..services import license_service
from ..validation import NotFoundError, ValidationError, to_body


licenses_bp = Blueprint("licenses", __name__, url_prefix="/api/licenses")


@licenses_bp.get("")
@require_auth
def list_licenses_route():
    try:
        return jsonify(license_service.list_licenses())
    except Exception:
        current_app.logger.exception("Failed to list software licenses")
        return jsonify({"error": "Internal server error"}), 500


@licenses_bp.get("/<license_id>")
@require_auth
def get_license_route(license_id: str):
    try:
        return jsonify(license_service.get_license(license_id))
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except Exception:
        current_app.logger.exception("Failed to load software license")
        return jsonify({"error": "Internal server error"}), 500


@licenses_bp.post("")
@require_auth
def create_license_route():
    """
    Create a license together with its add-ons.

    Required: name, licenseKey. Returns 201 {message, id}.
    """
    try:
        data = to_body(request.get_json(silent=True))
        payload = LicensePayload.from_payload(data)
        payload.validate()

        license_id = license_service.create_license(payload, actor_id=g.current_user.id)
        return jsonify({"message": "Software license created successfully", "id": license_id}), 201

    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except Exception:
        current_app.logger.exception("Failed to create software license")
        return jsonify({"error": "Internal server error"}), 500


@licenses_bp.put("/<license_id>")
@require_auth
def update_license_route(license_id: str):
    try:
        data = to_body(request.get_json(silent=True))
        payload = LicensePayload.from_payload(data)
        payload.validate()

        license_service.update_license(license_id, payload, actor_id=g.current_user.id)
        return jsonify({"message": "Software license updated successfully"})

    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except Exception:
        current_app.logger.exception("Failed to update software license")
        return jsonify({"error": "Internal server error"}), 500


@licenses_bp.delete("/<license_id>")
@require_auth
@require_role(*SUPERUSER_ONLY)
def delete_license_route(license_id: str):
    try:
        license_service.delete_license(license_id, actor_id=g.current_user.id)
        return jsonify({"message": "Software license deleted successfully"})

    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except Exception:
        current_app.logger.exception("Failed to delete software license")
        return jsonify({"error": "Internal server error"}), 500
