# Overview: Flask API routes for customer feedback links and public submissions.

"""
Feedback Routes

SECURITY:
- Link management and response listing require authentication
- GET /links/<linkId> and POST /submit/<linkId> are public; the random
  public link id is the only capability a customer holds
- A link accepts one submission
"""

from flask import Blueprint, request, jsonify, current_app, g

from ..decorators import require_auth
from ..schemas import FeedbackLinkPayload, FeedbackSubmission
from ..services import feedback_service
from ..validation import ConflictError, NotFoundError, ValidationError, to_body


feedback_bp = Blueprint("feedback", __name__, url_prefix="/api/feedback")


@feedback_bp.get("/links")
@require_auth
def list_links_route():
    """Links with responseCount and averageRating."""
    try:
        return jsonify(feedback_service.list_links())
    except Exception:
        current_app.logger.exception("Failed to list feedback links")
        return jsonify({"error": "Internal server error"}), 500


@feedback_bp.post("/links")
@require_auth
def create_link_route():
    """Required: customerName. Returns 201 {message, id, linkId, link}."""
    try:
        data = to_body(request.get_json(silent=True))
        payload = FeedbackLinkPayload.from_payload(data)
        payload.validate()

        created = feedback_service.create_link(payload, actor_id=g.current_user.id)
        return jsonify({"message": "Feedback link created successfully", **created}), 201

    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except Exception:
        current_app.logger.exception("Failed to create feedback link")
        return jsonify({"error": "Internal server error"}), 500


@feedback_bp.delete("/links/<link_pk>")
@require_auth
def delete_link_route(link_pk: str):
    try:
        feedback_service.delete_link(link_pk, actor_id=g.current_user.id)
        return jsonify({"message": "Feedback link deleted successfully"})

    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except Exception:
        current_app.logger.exception("Failed to delete feedback link")
        return jsonify({"error": "Internal server error"}), 500


@feedback_bp.get("/responses/<link_pk>")
@require_auth
def list_responses_route(link_pk: str):
    try:
        return jsonify(feedback_service.list_responses(link_pk))
    except Exception:
        current_app.logger.exception("Failed to list feedback responses")
        return jsonify({"error": "Internal server error"}), 500


@feedback_bp.get("/links/<link_id>")
def public_link_route(link_id: str):
    """Public view of a link; exposes no staff-only fields."""
    try:
        return jsonify(feedback_service.get_public_link(link_id))
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except Exception:
        current_app.logger.exception("Failed to load feedback link")
        return jsonify({"error": "Internal server error"}), 500


@feedback_bp.post("/submit/<link_id>")
def submit_feedback_route(link_id: str):
    """
    Public submission. Body: {rating (1-5), comments, clientName,
    clientEmail, clientCompany}.

    Returns:
    - 201 on success
    - 400 invalid rating
    - 404 unknown link (nothing written)
    - 409 link already used
    """
    try:
        data = to_body(request.get_json(silent=True))
        payload = FeedbackSubmission.from_payload(data)
        payload.validate()

        feedback_service.submit_response(link_id, payload)
        return jsonify({"message": "Thank you! Your feedback has been submitted."}), 201

    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except ConflictError as e:
        return jsonify({"error": str(e)}), 409
    except Exception:
        current_app.logger.exception("Failed to submit feedback")
        return jsonify({"error": "Internal server error"}), 500
