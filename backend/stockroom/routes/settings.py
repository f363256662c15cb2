# Overview: Flask API routes for store settings.

from flask import Blueprint, current_app, g, jsonify, request

from ..decorators import require_auth, require_permission
from ..services import settings_service
from ..services.settings_service import SettingsValidationError

settings_bp = Blueprint("settings", __name__, url_prefix="/api/settings")


@settings_bp.get("")
@require_auth
@require_permission("VIEW_SETTINGS")
def get_settings_route():
    return jsonify({"settings": settings_service.get_settings()}), 200


@settings_bp.put("")
@require_auth
@require_permission("MANAGE_SETTINGS")
def update_settings_route():
    """
    Update one or more settings.

    Body: {"settings": {"<key>": <value>, ...}}. Nothing is written if any
    key is unknown or any value is invalid.
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({"error": "Invalid JSON payload"}), 400
    try:
        updated = settings_service.update_settings(data.get("settings"), user_id=g.current_user.id)
    except SettingsValidationError as e:
        return jsonify({"error": str(e)}), 400
    except Exception:
        current_app.logger.exception("Failed to update settings")
        return jsonify({"error": "Internal server error"}), 500

    return jsonify({"settings": updated}), 200
