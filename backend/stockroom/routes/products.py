# Overview: Flask API routes for products operations; parses input and returns JSON responses.

# backend/stockroom/routes/products.py
"""
Product management routes.

SECURITY: All routes require authentication.
- Read operations require VIEW_INVENTORY permission
- Write operations require MANAGE_PRODUCTS permission (admin)
"""
from flask import Blueprint, current_app, jsonify, request

from ..decorators import require_auth, require_permission
from ..models import Product
from ..services import products_service
from ..validation import (
    ConflictError,
    ModelValidationPolicy,
    ValidationError,
    enforce_rules_product,
    validate_payload,
)

PRODUCT_POLICY = ModelValidationPolicy(
    writable_fields={"sku", "name", "category", "price", "cost", "stock", "description"},
    required_on_create={"sku", "name", "category", "price", "cost"},
)

products_bp = Blueprint("products", __name__, url_prefix="/api/products")


@products_bp.get("")
@require_auth
@require_permission("VIEW_INVENTORY")
def list_products():
    """List all products (sorted by name; the UI applies its own filters)."""
    return jsonify([p.to_dict() for p in products_service.list_products()])


@products_bp.get("/<int:product_id>")
@require_auth
@require_permission("VIEW_INVENTORY")
def get_product(product_id: int):
    product = products_service.get_product(product_id)
    if not product:
        return jsonify({"error": "Product not found"}), 404
    return jsonify(product.to_dict())


@products_bp.post("")
@require_auth
@require_permission("MANAGE_PRODUCTS")
def create_product_route():
    """
    Create a new product.

    Unknown fields are rejected; stock defaults to 0.
    """
    payload = request.get_json(silent=True)

    try:
        patch = validate_payload(model=Product, payload=payload, policy=PRODUCT_POLICY, partial=False)
        enforce_rules_product(patch)
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400

    try:
        created = products_service.create_product(patch=patch)
    except ConflictError as e:
        return jsonify({"error": str(e)}), 409
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except Exception:
        current_app.logger.exception("Failed to create product")
        return jsonify({"error": "Internal server error"}), 500

    return jsonify(created.to_dict()), 201


@products_bp.patch("/<int:product_id>")
@require_auth
@require_permission("MANAGE_PRODUCTS")
def update_product_route(product_id: int):
    """
    Partially update a product.

    Only the provided fields change; unknown fields are ignored.
    """
    payload = request.get_json(silent=True)

    try:
        patch = validate_payload(
            model=Product,
            payload=payload,
            policy=PRODUCT_POLICY,
            partial=True,
            ignore_unknown=True,
        )
        enforce_rules_product(patch)
        updated = products_service.update_product(product_id=product_id, patch=patch)
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except Exception:
        current_app.logger.exception("Failed to update product")
        return jsonify({"error": "Internal server error"}), 500

    if not updated:
        return jsonify({"error": "Product not found"}), 404

    return jsonify(updated.to_dict()), 200


@products_bp.delete("/<int:product_id>")
@require_auth
@require_permission("MANAGE_PRODUCTS")
def delete_product_route(product_id: int):
    """
    Delete a product.

    Existing sales keep their product_id; see reporting_service for the
    effect on profit.
    """
    deleted = products_service.delete_product(product_id=product_id)

    if not deleted:
        return jsonify({"error": "Product not found"}), 404

    return "", 204
