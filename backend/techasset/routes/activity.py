# Overview: Flask API route for the activity report.

from flask import Blueprint, jsonify, current_app

from ..decorators import require_auth, require_role
from ..roles import SUPERUSER_ONLY
from ..services import activity_service


activity_bp = Blueprint("activity", __name__, url_prefix="/api/activity")


@activity_bp.get("")
@require_auth
@require_role(*SUPERUSER_ONLY)
def list_activity_route():
    """Newest first, bounded by ACTIVITY_LOG_LIMIT."""
    try:
        return jsonify(activity_service.list_recent())
    except Exception:
        current_app.logger.exception("Failed to list activity logs")
        return jsonify({"error": "Internal server error"}), 500
