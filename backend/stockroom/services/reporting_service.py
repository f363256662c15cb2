# Overview: Service-layer operations for reporting; encapsulates business logic and database work.

"""
Reporting is recomputed from products and sales on every call; nothing is
cached or stored.

Money is summed as Decimal in Python rather than with SQL SUM, since SQLite
would hand back floats for NUMERIC columns.

Profit uses each product's *current* cost, not a snapshot taken at sale
time, so editing a product's cost re-prices its historical profit. Sales
whose product has since been deleted have no cost to subtract and are
left out of profit entirely (they still count toward total sales).
"""
from __future__ import annotations

from decimal import Decimal

from ..extensions import db
from ..formatting import money_str
from ..models import Product, Sale
from .products_service import low_stock_products

ZERO = Decimal("0.00")
RECENT_SALES_LIMIT = 5


class ReportError(Exception):
    """Raised when report generation fails."""
    pass


def total_sales() -> Decimal:
    """Sum of total over every recorded sale."""
    totals = db.session.query(Sale.total).all()
    return sum((Decimal(row.total) for row in totals), ZERO)


def total_profit() -> Decimal:
    """
    Sum of (sale.total - product.cost * sale.quantity).

    The inner join drops sales whose product no longer exists.
    """
    rows = (
        db.session.query(Sale.total, Sale.quantity, Product.cost)
        .join(Product, Product.id == Sale.product_id)
        .all()
    )
    return sum(
        (Decimal(row.total) - Decimal(row.cost) * row.quantity for row in rows),
        ZERO,
    )


def inventory_value() -> Decimal:
    """Sum of cost * stock over all products."""
    rows = db.session.query(Product.cost, Product.stock).all()
    return sum((Decimal(row.cost) * row.stock for row in rows), ZERO)


def recent_sales(limit: int = RECENT_SALES_LIMIT) -> list[Sale]:
    return (
        db.session.query(Sale)
        .order_by(Sale.created_at.desc(), Sale.id.desc())
        .limit(limit)
        .all()
    )


def dashboard_summary(*, threshold: int) -> dict:
    if threshold is None or isinstance(threshold, bool) or not isinstance(threshold, int):
        raise ReportError("threshold must be an integer")

    low_stock = low_stock_products(threshold)
    return {
        "total_sales": money_str(total_sales()),
        "inventory_value": money_str(inventory_value()),
        "total_profit": money_str(total_profit()),
        "low_stock_threshold": threshold,
        "low_stock_count": len(low_stock),
        "recent_sales": [sale.to_dict() for sale in recent_sales()],
        "low_stock_products": [p.to_dict() for p in low_stock],
    }
