"""
Sales Service - records a sale and takes the sold quantity out of stock.

The sale row and the stock decrement are one unit of work: both commit
together or neither is visible. The read-check-decrement sequence is
serialized per product:

- SQLite: BEGIN IMMEDIATE takes the write lock before the stock is read
- Other dialects: SELECT ... FOR UPDATE on the product row
- Everywhere: the decrement itself is conditional (stock >= quantity), so
  even without a lock a stale read cannot drive stock negative

Price is a snapshot. The caller may pass the unit price it showed the
customer; when omitted, the product's current price is captured. The line
total is always computed here, and a caller-supplied total must agree.
"""
from __future__ import annotations

from decimal import Decimal

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from ..extensions import db
from ..models import Product, Sale
from ..validation import CENT, MAX_MONEY, ValidationError, enforce_rules_sale, id_in_range
from .concurrency import begin_write_transaction, lock_for_update, run_with_retry


class SaleError(Exception):
    """Raised for sale operation errors."""
    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.details = details or {}


class ProductNotFoundError(SaleError):
    pass


class InsufficientStockError(SaleError):
    pass


class TransactionFailure(SaleError):
    """The store could not apply the sale; nothing was committed."""


def _insufficient(product_id: int, requested: int, available: int) -> InsufficientStockError:
    return InsufficientStockError(
        "Not enough stock",
        details={
            "product_id": product_id,
            "requested_quantity": requested,
            "available": available,
        },
    )


def record_sale(
    product_id: int,
    quantity: int,
    unit_price: Decimal | None = None,
    total: Decimal | None = None,
    user_id: int | None = None,
) -> Sale:
    """
    Record a sale of `quantity` units of a product.

    Validation order: the product must exist (ProductNotFoundError), then it
    must have at least `quantity` in stock (InsufficientStockError).

    Raises:
        ValidationError: bad quantity/price, or total != price * quantity
        ProductNotFoundError, InsufficientStockError
        TransactionFailure: the database refused the write
    """
    enforce_rules_sale(quantity, unit_price, total)
    if not id_in_range(product_id):
        raise ProductNotFoundError("Product not found", details={"product_id": product_id})

    def _op():
        begin_write_transaction()

        product = lock_for_update(db.session.query(Product).filter_by(id=product_id)).first()
        if not product:
            raise ProductNotFoundError("Product not found", details={"product_id": product_id})

        if product.stock < quantity:
            raise _insufficient(product.id, quantity, product.stock)

        price = unit_price if unit_price is not None else Decimal(product.price)
        line_total = (price * quantity).quantize(CENT)
        if line_total > MAX_MONEY:
            raise ValidationError(f"total cannot exceed {MAX_MONEY}")
        if total is not None and total != line_total:
            raise ValidationError(
                f"total {total:.2f} does not match price x quantity ({line_total:.2f})"
            )

        # Compare-and-set: only decrement while enough stock remains
        updated = (
            db.session.query(Product)
            .filter(Product.id == product.id, Product.stock >= quantity)
            .update({Product.stock: Product.stock - quantity}, synchronize_session="fetch")
        )
        if updated != 1:
            db.session.refresh(product)
            raise _insufficient(product.id, quantity, product.stock)

        sale = Sale(
            product_id=product.id,
            quantity=quantity,
            price=price,
            total=line_total,
            created_by_user_id=user_id,
        )
        db.session.add(sale)
        db.session.commit()
        return sale

    try:
        sale = run_with_retry(_op)
    except (SaleError, ValidationError):
        db.session.rollback()
        raise
    except SQLAlchemyError as exc:
        db.session.rollback()
        current_app.logger.exception("Sale for product %s could not be committed", product_id)
        raise TransactionFailure(
            "Sale could not be recorded; no changes were applied",
            details={"product_id": product_id},
        ) from exc
    except Exception:
        db.session.rollback()
        raise

    current_app.logger.info(
        "Recorded sale id=%s product_id=%s quantity=%s total=%s",
        sale.id, sale.product_id, sale.quantity, sale.total,
    )
    return sale


def list_sales() -> list[Sale]:
    """All sales, newest first."""
    return (
        db.session.query(Sale)
        .order_by(Sale.created_at.desc(), Sale.id.desc())
        .all()
    )


def get_sale(sale_id: int) -> Sale | None:
    if not id_in_range(sale_id):
        return None
    return db.session.query(Sale).filter(Sale.id == sale_id).first()
