from flask import Blueprint, g, jsonify, request

from stockroom.decorators import require_auth, require_permission
from stockroom.formatting import money_str
from stockroom.permissions import has_permission
from stockroom.services import products_service, reporting_service, settings_service
from stockroom.validation import ValidationError, parse_int


reports_bp = Blueprint("reports", __name__, url_prefix="/api/reports")


@reports_bp.get("/dashboard")
@require_auth
@require_permission("VIEW_REPORTS")
def dashboard_report():
    """
    Dashboard bundle. The low-stock product list is an admin widget; other
    roles still get the count.
    """
    threshold = settings_service.get_low_stock_threshold()
    try:
        summary = reporting_service.dashboard_summary(threshold=threshold)
    except reporting_service.ReportError as exc:
        return jsonify({"error": str(exc)}), 400

    if not has_permission(g.current_user, "VIEW_LOW_STOCK"):
        summary.pop("low_stock_products")
    return jsonify(summary), 200


@reports_bp.get("/low-stock")
@require_auth
@require_permission("VIEW_LOW_STOCK")
def low_stock_report():
    raw = request.args.get("threshold")
    if raw is None or raw == "":
        threshold = settings_service.get_low_stock_threshold()
    else:
        try:
            threshold = parse_int(raw, "threshold")
        except ValidationError as exc:
            return jsonify({"error": str(exc)}), 400

    products = products_service.low_stock_products(threshold)
    return jsonify([p.to_dict() for p in products]), 200


@reports_bp.get("/sales")
@require_auth
@require_permission("VIEW_REPORTS")
def total_sales_report():
    return jsonify({"total_sales": money_str(reporting_service.total_sales())}), 200


@reports_bp.get("/profit")
@require_auth
@require_permission("VIEW_REPORTS")
def total_profit_report():
    return jsonify({"total_profit": money_str(reporting_service.total_profit())}), 200


@reports_bp.get("/inventory-value")
@require_auth
@require_permission("VIEW_REPORTS")
def inventory_value_report():
    return jsonify({"inventory_value": money_str(reporting_service.inventory_value())}), 200
