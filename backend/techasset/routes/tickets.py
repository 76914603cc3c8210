# Overview: Flask API routes for helpdesk tickets and comments; parses input and returns JSON responses.

"""
Ticket Routes

SECURITY: All routes require authentication. Delete is global-admin only.

Ticket numbers come from the per-day sequence (TICKET-YYYYMMDD-NNN). A
number collision surfaces as a 500 with a retry message so the client
can tell it apart from other server errors.
"""

from flask import Blueprint, request, jsonify, current_app, g

from ..decorators import require_auth, require_role
from ..roles import SUPERUSER_ONLY
from ..schemas import CommentPayload, TicketCreatePayload, TicketUpdatePayload
from ..services import ticket_service
from ..services.sequence_service import SequenceConflictError
from ..validation import NotFoundError, ValidationError, to_body


tickets_bp = Blueprint("tickets", __name__, url_prefix="/api/tickets")


@tickets_bp.get("")
@require_auth
def list_tickets_route():
    try:
        return jsonify(ticket_service.list_tickets())
    except Exception:
        current_app.logger.exception("Failed to list tickets")
        return jsonify({"error": "Internal server error"}), 500


@tickets_bp.get("/<ticket_id>")
@require_auth
def get_ticket_route(ticket_id: str):
    try:
        return jsonify(ticket_service.get_ticket(ticket_id))
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except Exception:
        current_app.logger.exception("Failed to load ticket")
        return jsonify({"error": "Internal server error"}), 500


@tickets_bp.post("")
@require_auth
def create_ticket_route():
    """
    Create a ticket.

    Required: title, description, category. Priority defaults to medium.
    Returns 201 {message, id, ticketNumber}.
    """
    try:
        data = to_body(request.get_json(silent=True))
        payload = TicketCreatePayload.from_payload(data)
        payload.validate()

        ticket_id, number = ticket_service.create_ticket(payload, actor_id=g.current_user.id)
        return jsonify({
            "message": "Ticket created successfully!",
            "id": ticket_id,
            "ticketNumber": number,
        }), 201

    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except SequenceConflictError as e:
        current_app.logger.warning("Ticket number collision: %s", e)
        return jsonify({"error": str(e)}), 500
    except Exception:
        current_app.logger.exception("Failed to create ticket")
        return jsonify({"error": "Failed to create ticket"}), 500


@tickets_bp.put("/<ticket_id>")
@require_auth
def update_ticket_route(ticket_id: str):
    """Partial update: only keys present in the body change."""
    try:
        data = to_body(request.get_json(silent=True))
        payload = TicketUpdatePayload.from_payload(data)
        payload.validate()

        ticket_service.update_ticket(ticket_id, payload, actor_id=g.current_user.id)
        return jsonify({"message": "Ticket updated successfully"})

    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except Exception:
        current_app.logger.exception("Failed to update ticket")
        return jsonify({"error": "Internal server error"}), 500


@tickets_bp.delete("/<ticket_id>")
@require_auth
@require_role(*SUPERUSER_ONLY)
def delete_ticket_route(ticket_id: str):
    try:
        ticket_service.delete_ticket(ticket_id, actor_id=g.current_user.id)
        return jsonify({"message": "Ticket deleted successfully"})

    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except Exception:
        current_app.logger.exception("Failed to delete ticket")
        return jsonify({"error": "Internal server error"}), 500


@tickets_bp.get("/<ticket_id>/comments")
@require_auth
def list_comments_route(ticket_id: str):
    try:
        return jsonify(ticket_service.list_comments(ticket_id))
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except Exception:
        current_app.logger.exception("Failed to list ticket comments")
        return jsonify({"error": "Internal server error"}), 500


@tickets_bp.post("/<ticket_id>/comments")
@require_auth
def add_comment_route(ticket_id: str):
    try:
        data = to_body(request.get_json(silent=True))
        payload = CommentPayload.from_payload(data)
        payload.validate()

        comment_id = ticket_service.add_comment(ticket_id, payload, actor_id=g.current_user.id)
        return jsonify({"message": "Comment added successfully", "id": comment_id}), 201

    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except Exception:
        current_app.logger.exception("Failed to add ticket comment")
        return jsonify({"error": "Internal server error"}), 500
