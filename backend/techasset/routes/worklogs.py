# Overview: Flask API routes for the consultancy and internal work logs.

"""
Work Log Routes

Two logs share one shape: the consultancy log (/api/chapmancg) also tracks
credits consumed; the internal log (/api/internallog) does not. Both get
the same endpoints, built from their WorkLogKind.

SECURITY: All routes require authentication. Delete is global-admin only.
"""

import io

from flask import Blueprint, request, jsonify, current_app, g, send_file

from ..decorators import require_auth, require_role
from ..roles import SUPERUSER_ONLY
from ..schemas import WorkLogPayload
from ..services import export_service, worklog_service
from ..services.worklog_service import CONSULTANCY, INTERNAL, WorkLogKind
from ..validation import NotFoundError, ValidationError, to_body


def _filters() -> dict:
    return {
        "client": request.args.get("client") or None,
        "category": request.args.get("category") or None,
        "technician": request.args.get("technician") or None,
    }


def build_worklog_blueprint(name: str, url_prefix: str, kind: WorkLogKind) -> Blueprint:
    bp = Blueprint(name, __name__, url_prefix=url_prefix)
    label = kind.label[0].upper() + kind.label[1:]

    @bp.get("")
    @require_auth
    def list_entries_route():
        """Optional filters: ?client=&category=&technician= (exact match)."""
        try:
            return jsonify(worklog_service.list_entry_dicts(kind, **_filters()))
        except Exception:
            current_app.logger.exception("Failed to list %s entries", name)
            return jsonify({"error": "Internal server error"}), 500

    @bp.get("/export")
    @require_auth
    def export_route():
        """Spreadsheet download of the (optionally filtered) log."""
        try:
            content, filename = export_service.export_worklog(kind, **_filters())
            return send_file(
                io.BytesIO(content),
                mimetype=export_service.XLSX_MIMETYPE,
                as_attachment=True,
                download_name=filename,
            )
        except Exception:
            current_app.logger.exception("Failed to export %s entries", name)
            return jsonify({"error": "Internal server error"}), 500

    @bp.post("")
    @require_auth
    def create_entry_route():
        try:
            data = to_body(request.get_json(silent=True))
            payload = WorkLogPayload.from_payload(data)
            payload.validate()

            entry_id = worklog_service.create_entry(kind, payload, actor_id=g.current_user.id)
            return jsonify({"message": f"{label} created successfully", "id": entry_id}), 201

        except ValidationError as e:
            return jsonify({"error": str(e)}), 400
        except Exception:
            current_app.logger.exception("Failed to create %s entry", name)
            return jsonify({"error": "Internal server error"}), 500

    @bp.put("/<entry_id>")
    @require_auth
    def update_entry_route(entry_id: str):
        try:
            data = to_body(request.get_json(silent=True))
            payload = WorkLogPayload.from_payload(data)
            payload.validate()

            worklog_service.update_entry(kind, entry_id, payload, actor_id=g.current_user.id)
            return jsonify({"message": f"{label} updated successfully"})

        except ValidationError as e:
            return jsonify({"error": str(e)}), 400
        except NotFoundError as e:
            return jsonify({"error": str(e)}), 404
        except Exception:
            current_app.logger.exception("Failed to update %s entry", name)
            return jsonify({"error": "Internal server error"}), 500

    @bp.delete("/<entry_id>")
    @require_auth
    @require_role(*SUPERUSER_ONLY)
    def delete_entry_route(entry_id: str):
        try:
            worklog_service.delete_entry(kind, entry_id, actor_id=g.current_user.id)
            return jsonify({"message": f"{label} deleted successfully"})

        except NotFoundError as e:
            return jsonify({"error": str(e)}), 404
        except Exception:
            current_app.logger.exception("Failed to delete %s entry", name)
            return jsonify({"error": "Internal server error"}), 500

    return bp


chapmancg_bp = build_worklog_blueprint("chapmancg", "/api/chapmancg", CONSULTANCY)
internallog_bp = build_worklog_blueprint("internallog", "/api/internallog", INTERNAL)
