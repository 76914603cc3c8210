# Overview: Flask API routes for the consultancy credit ledger.

"""
Credit Routes

SECURITY: Reads require authentication; block writes are global-admin only.

The summary compares purchased blocks with credits consumed by the
consultancy log. Overdrawing is reported, never prevented.
"""

from flask import Blueprint, request, jsonify, current_app, g

from ..decorators import require_auth, require_role
from ..roles import SUPERUSER_ONLY
from ..schemas import CreditBlockPayload
from ..services import credit_service
from ..validation import NotFoundError, ValidationError, to_body


credits_bp = Blueprint("credits", __name__, url_prefix="/api/credits")


@credits_bp.get("")
@require_auth
def list_blocks_route():
    try:
        return jsonify(credit_service.list_blocks())
    except Exception:
        current_app.logger.exception("Failed to list credit blocks")
        return jsonify({"error": "Internal server error"}), 500


@credits_bp.get("/active")
@require_auth
def active_block_route():
    """Latest active block, or null."""
    try:
        return jsonify(credit_service.get_active_block())
    except Exception:
        current_app.logger.exception("Failed to load active credit block")
        return jsonify({"error": "Internal server error"}), 500


@credits_bp.get("/summary")
@require_auth
def summary_route():
    try:
        return jsonify(credit_service.summary())
    except Exception:
        current_app.logger.exception("Failed to compute credit summary")
        return jsonify({"error": "Internal server error"}), 500


@credits_bp.post("")
@require_auth
@require_role(*SUPERUSER_ONLY)
def create_block_route():
    try:
        data = to_body(request.get_json(silent=True))
        payload = CreditBlockPayload.from_payload(data)
        payload.validate()

        block_id = credit_service.create_block(payload, actor_id=g.current_user.id)
        return jsonify({"message": "Credit block created successfully", "id": block_id}), 201

    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except Exception:
        current_app.logger.exception("Failed to create credit block")
        return jsonify({"error": "Internal server error"}), 500


@credits_bp.put("/<block_id>")
@require_auth
@require_role(*SUPERUSER_ONLY)
def update_block_route(block_id: str):
    try:
        data = to_body(request.get_json(silent=True))
        payload = CreditBlockPayload.from_payload(data)
        payload.validate()

        credit_service.update_block(block_id, payload, actor_id=g.current_user.id)
        return jsonify({"message": "Credit block updated successfully"})

    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except Exception:
        current_app.logger.exception("Failed to update credit block")
        return jsonify({"error": "Internal server error"}), 500


@credits_bp.delete("/<block_id>")
@require_auth
@require_role(*SUPERUSER_ONLY)
def delete_block_route(block_id: str):
    try:
        credit_service.delete_block(block_id, actor_id=g.current_user.id)
        return jsonify({"message": "Credit block deleted successfully"})

    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except Exception:
        current_app.logger.exception("Failed to delete credit block")
        return jsonify({"error": "Internal server error"}), 500
