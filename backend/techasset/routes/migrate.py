# Overview: Flask API route for importing records exported from browser storage.

from flask import Blueprint, request, jsonify, current_app, g

from ..decorators import require_auth, require_role
from ..roles import SUPERUSER_ONLY
from ..services import migration_service
from ..validation import ValidationError, to_body


migrate_bp = Blueprint("migrate", __name__, url_prefix="/api/migrate")


@migrate_bp.post("")
@require_auth
@require_role(*SUPERUSER_ONLY)
def migrate_route():
    """
    Body: {entries: [...], activityLogs: [...]}.

    Best-effort: records that fail are reported in `failed` and the rest
    are kept. Records whose id already exists are skipped.
    """
    try:
        data = to_body(request.get_json(silent=True))
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400

    # Absent keys import nothing
    entries = data.get("entries", [])
    activity_logs = data.get("activityLogs", [])
    if not isinstance(entries, list) or not isinstance(activity_logs, list):
        return jsonify({"error": "entries and activityLogs must be lists"}), 400

    try:
        result = migration_service.migrate(entries, activity_logs, actor_id=g.current_user.id)
        return jsonify(result)
    except Exception:
        current_app.logger.exception("Failed to migrate data")
        return jsonify({"error": "Internal server error"}), 500
