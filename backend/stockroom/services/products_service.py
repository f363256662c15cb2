# backend/stockroom/services/products_service.py
"""
Products Service

CRUD over the product catalog. Routes hand in patches that already went
through validation.validate_payload; this layer owns uniqueness, the
immutable SKU rule, and persistence.

Deletes are hard deletes with no check against existing sales: a sale keeps
its product_id and simply stops resolving (see reporting_service for how
that affects profit).
"""
from __future__ import annotations

from flask import current_app
from sqlalchemy.exc import IntegrityError

from ..extensions import db
from ..models import Product
from ..validation import ConflictError, ValidationError, id_in_range

PRODUCT_MUTABLE_FIELDS = {"name", "category", "price", "cost", "stock", "description"}


def apply_product_patch(p: Product, patch: dict) -> None:
    for k, v in patch.items():
        if k not in PRODUCT_MUTABLE_FIELDS:
            continue
        setattr(p, k, v)


def list_products() -> list[Product]:
    return (
        db.session.query(Product)
        .order_by(Product.name.asc(), Product.id.asc())
        .all()
    )


def get_product(product_id: int) -> Product | None:
    if not id_in_range(product_id):
        return None
    return db.session.query(Product).filter(Product.id == product_id).first()


def create_product(*, patch: dict) -> Product:
    """
    Create product using a validated patch dict.

    Raises:
        ValidationError: If sku is missing
        ConflictError: If SKU already exists
    """
    sku = patch.get("sku")
    if not sku:
        raise ValidationError("sku is required")

    existing = db.session.query(Product).filter(Product.sku == sku).first()
    if existing:
        raise ConflictError("SKU already exists.")

    p = Product(sku=sku, stock=0)
    apply_product_patch(p, patch)

    db.session.add(p)
    try:
        db.session.commit()
    except IntegrityError:
        # Concurrent insert of the same SKU slipped past the pre-check
        db.session.rollback()
        raise ConflictError("SKU already exists.")

    current_app.logger.info("Created product id=%s sku=%s", p.id, p.sku)
    return p


def update_product(*, product_id: int, patch: dict) -> Product | None:
    """
    Merge a partial patch into a product.

    Returns the updated product, or None if not found.

    Raises:
        ValidationError: If the patch tries to change the SKU
    """
    p = get_product(product_id)
    if not p:
        return None

    if "sku" in patch and patch["sku"] != p.sku:
        raise ValidationError("sku cannot be changed once a product exists")

    apply_product_patch(p, patch)
    db.session.commit()

    current_app.logger.info(
        "Updated product id=%s fields=%s", p.id, ", ".join(sorted(patch.keys())) or "-",
    )
    return p


def delete_product(*, product_id: int) -> bool:
    """
    Hard-delete a product.

    Returns:
        True if deleted, False if not found
    """
    p = get_product(product_id)
    if not p:
        return False

    sku = p.sku
    db.session.delete(p)
    db.session.commit()

    current_app.logger.info("Deleted product id=%s sku=%s", product_id, sku)
    return True


def low_stock_products(threshold: int) -> list[Product]:
    """Products at or below the threshold (inclusive), lowest stock first."""
    return (
        db.session.query(Product)
        .filter(Product.stock <= threshold)
        .order_by(Product.stock.asc(), Product.name.asc(), Product.id.asc())
        .all()
    )
