# Overview: Flask API routes for sales operations; parses input and returns JSON responses.

# backend/stockroom/routes/sales.py
"""Sales API routes with permission enforcement"""

from flask import Blueprint, current_app, g, jsonify, request

from ..decorators import require_auth, require_permission
from ..services import sales_service
from ..services.sales_service import (
    InsufficientStockError,
    ProductNotFoundError,
    SaleError,
    TransactionFailure,
)
from ..validation import ValidationError, parse_int, parse_money


sales_bp = Blueprint("sales", __name__, url_prefix="/api/sales")


@sales_bp.get("")
@require_auth
@require_permission("VIEW_SALES")
def list_sales_route():
    """All sales, newest first."""
    return jsonify([sale.to_dict() for sale in sales_service.list_sales()])


@sales_bp.get("/<int:sale_id>")
@require_auth
@require_permission("VIEW_SALES")
def get_sale_route(sale_id: int):
    sale = sales_service.get_sale(sale_id)
    if not sale:
        return jsonify({"error": "Sale not found"}), 404
    return jsonify(sale.to_dict())


@sales_bp.post("")
@require_auth
@require_permission("CREATE_SALE")
def record_sale_route():
    """
    Record a sale and decrement stock.

    Body: product_id (or productId), quantity, optional price, optional total.

    Requires: CREATE_SALE permission
    Available to: admin, staff
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({"error": "Invalid JSON payload"}), 400

    product_id = data.get("product_id", data.get("productId"))
    quantity = data.get("quantity")
    if product_id is None or quantity is None:
        return jsonify({"error": "product_id and quantity required"}), 400

    try:
        product_id = parse_int(product_id, "product_id")
        quantity = parse_int(quantity, "quantity")
        price = parse_money(data["price"], "price") if data.get("price") is not None else None
        total = parse_money(data["total"], "total") if data.get("total") is not None else None

        sale = sales_service.record_sale(
            product_id=product_id,
            quantity=quantity,
            unit_price=price,
            total=total,
            user_id=g.current_user.id,
        )
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except ProductNotFoundError as e:
        return jsonify({"error": str(e), "details": e.details}), 404
    except InsufficientStockError as e:
        return jsonify({"error": str(e), "details": e.details}), 400
    except TransactionFailure as e:
        return jsonify({"error": str(e), "details": e.details}), 500
    except SaleError as e:
        return jsonify({"error": str(e), "details": e.details}), 400
    except Exception:
        current_app.logger.exception("Failed to record sale")
        return jsonify({"error": "Internal server error"}), 500

    return jsonify(sale.to_dict()), 201
