# Overview: Flask API routes for the password vault, secure notes and strength tools.

"""
Password Vault Routes

SECURITY: All routes require authentication. Secrets are returned
decrypted only in responses to authenticated callers; the database holds
ciphertext.

Static paths (/categories, /stats, /analyze, /generate, /notes) sit beside
the /<entry_id> routes; Flask matches static segments first.
"""

from flask import Blueprint, request, jsonify, current_app, g

from ..decorators import require_auth
from ..schemas import PasswordEntryPayload, PasswordGenerateRequest, SecureNotePayload
from ..services import password_service, password_strength
from ..validation import NotFoundError, ValidationError, to_body, to_raw_text


passwords_bp = Blueprint("passwords", __name__, url_prefix="/api/passwords")


# =============================================================================
# Categories and vault health
# =============================================================================

@passwords_bp.get("/categories")
@require_auth
def list_categories_route():
    try:
        return jsonify(password_service.list_categories())
    except Exception:
        current_app.logger.exception("Failed to list password categories")
        return jsonify({"error": "Internal server error"}), 500


@passwords_bp.get("/stats")
@require_auth
def vault_stats_route():
    try:
        return jsonify(password_service.vault_stats())
    except Exception:
        current_app.logger.exception("Failed to compute vault stats")
        return jsonify({"error": "Internal server error"}), 500


@passwords_bp.post("/analyze")
@require_auth
def analyze_password_route():
    """Body {password}. Nothing is stored."""
    try:
        data = to_body(request.get_json(silent=True))
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    password = to_raw_text(data.get("password"))
    if not password:
        return jsonify({"error": "Password is required"}), 400
    return jsonify(password_strength.analyze(password).to_dict())


@passwords_bp.post("/generate")
@require_auth
def generate_password_route():
    """
    Body: {length, includeUppercase, includeLowercase, includeNumbers,
    includeSymbols, excludeSimilar, excludeAmbiguous}.

    Returns {password, strength}.
    """
    try:
        data = to_body(request.get_json(silent=True))
        options = PasswordGenerateRequest.from_payload(data)
        options.validate()

        password = password_strength.generate(
            options.length,
            uppercase=options.uppercase,
            lowercase=options.lowercase,
            numbers=options.numbers,
            symbols=options.symbols,
            exclude_similar=options.exclude_similar,
            exclude_ambiguous=options.exclude_ambiguous,
        )
        return jsonify({
            "password": password,
            "strength": password_strength.analyze(password).to_dict(),
        })

    except ValueError as e:
        return jsonify({"error": str(e)}), 400


# =============================================================================
# Secure notes
# =============================================================================

@passwords_bp.get("/notes")
@require_auth
def list_notes_route():
    try:
        return jsonify(password_service.list_notes())
    except Exception:
        current_app.logger.exception("Failed to list secure notes")
        return jsonify({"error": "Internal server error"}), 500


@passwords_bp.post("/notes")
@require_auth
def create_note_route():
    try:
        data = to_body(request.get_json(silent=True))
        payload = SecureNotePayload.from_payload(data)
        payload.validate()

        note_id = password_service.create_note(payload, actor_id=g.current_user.id)
        return jsonify({"message": "Secure note created successfully", "id": note_id}), 201

    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except Exception:
        current_app.logger.exception("Failed to create secure note")
        return jsonify({"error": "Internal server error"}), 500


@passwords_bp.put("/notes/<note_id>")
@require_auth
def update_note_route(note_id: str):
    try:
        data = to_body(request.get_json(silent=True))
        payload = SecureNotePayload.from_payload(data)
        payload.validate()

        password_service.update_note(note_id, payload, actor_id=g.current_user.id)
        return jsonify({"message": "Secure note updated successfully"})

    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except Exception:
        current_app.logger.exception("Failed to update secure note")
        return jsonify({"error": "Internal server error"}), 500


@passwords_bp.delete("/notes/<note_id>")
@require_auth
def delete_note_route(note_id: str):
    try:
        password_service.delete_note(note_id, actor_id=g.current_user.id)
        return jsonify({"message": "Secure note deleted successfully"})

    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except Exception:
        current_app.logger.exception("Failed to delete secure note")
        return jsonify({"error": "Internal server error"}), 500


# =============================================================================
# Password entries
# =============================================================================

@passwords_bp.get("")
@require_auth
def list_entries_route():
    try:
        return jsonify(password_service.list_entries())
    except Exception:
        current_app.logger.exception("Failed to list password entries")
        return jsonify({"error": "Internal server error"}), 500


@passwords_bp.post("")
@require_auth
def create_entry_route():
    """
    Required: title, password. categoryId must name an existing category.

    Returns 201 {message, id}.
    """
    try:
        data = to_body(request.get_json(silent=True))
        payload = PasswordEntryPayload.from_payload(data)
        payload.validate()

        entry_id = password_service.create_entry(payload, actor_id=g.current_user.id)
        return jsonify({"message": "Password entry created successfully", "id": entry_id}), 201

    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except Exception:
        current_app.logger.exception("Failed to create password entry")
        return jsonify({"error": "Internal server error"}), 500


@passwords_bp.put("/<entry_id>")
@require_auth
def update_entry_route(entry_id: str):
    try:
        data = to_body(request.get_json(silent=True))
        payload = PasswordEntryPayload.from_payload(data)
        payload.validate()

        password_service.update_entry(entry_id, payload, actor_id=g.current_user.id)
        return jsonify({"message": "Password entry updated successfully"})

    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except Exception:
        current_app.logger.exception("Failed to update password entry")
        return jsonify({"error": "Internal server error"}), 500


@passwords_bp.delete("/<entry_id>")
@require_auth
def delete_entry_route(entry_id: str):
    try:
        password_service.delete_entry(entry_id, actor_id=g.current_user.id)
        return jsonify({"message": "Password entry deleted successfully"})

    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except Exception:
        current_app.logger.exception("Failed to delete password entry")
        return jsonify({"error": "Internal server error"}), 500
