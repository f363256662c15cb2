# Overview: Flask API routes for the category catalog.

from flask import Blueprint, current_app, jsonify, request

from ..decorators import require_auth, require_permission
from ..models import Category
from ..services import category_service
from ..validation import ConflictError, ModelValidationPolicy, ValidationError, validate_payload

CATEGORY_POLICY = ModelValidationPolicy(
    writable_fields={"name", "description"},
    required_on_create={"name"},
)

categories_bp = Blueprint("categories", __name__, url_prefix="/api/categories")


@categories_bp.get("")
@require_auth
@require_permission("VIEW_INVENTORY")
def list_categories():
    return jsonify([c.to_dict() for c in category_service.list_categories()])


@categories_bp.post("")
@require_auth
@require_permission("MANAGE_CATEGORIES")
def create_category_route():
    payload = request.get_json(silent=True)
    try:
        patch = validate_payload(model=Category, payload=payload, policy=CATEGORY_POLICY, partial=False)
        if len(patch["name"]) < 2:
            raise ValidationError("name must be at least 2 characters")
        category = category_service.create_category(patch=patch)
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except ConflictError as e:
        return jsonify({"error": str(e)}), 409
    except Exception:
        current_app.logger.exception("Failed to create category")
        return jsonify({"error": "Internal server error"}), 500

    return jsonify(category.to_dict()), 201


@categories_bp.delete("/<int:category_id>")
@require_auth
@require_permission("MANAGE_CATEGORIES")
def delete_category_route(category_id: int):
    if not category_service.delete_category(category_id=category_id):
        return jsonify({"error": "Category not found"}), 404
    return "", 204
