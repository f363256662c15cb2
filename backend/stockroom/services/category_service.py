# Overview: Service-layer operations for the category catalog.

from __future__ import annotations

from sqlalchemy.exc import IntegrityError

from ..extensions import db
from ..models import Category
from ..validation import ConflictError, id_in_range


def list_categories() -> list[Category]:
    return db.session.query(Category).order_by(Category.name.asc()).all()


def create_category(*, patch: dict) -> Category:
    """
    Add a name to the catalog.

    Raises ConflictError if the name is already present.
    """
    name = patch["name"]
    existing = db.session.query(Category).filter(Category.name == name).first()
    if existing:
        raise ConflictError("Category already exists.")

    category = Category(name=name, description=patch.get("description"))
    db.session.add(category)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ConflictError("Category already exists.")
    return category


def delete_category(*, category_id: int) -> bool:
    """
    Remove a catalog entry.

    Returns False for an unknown id instead of raising. Products carrying
    the same category label are left as they are.
    """
    if not id_in_range(category_id):
        return False
    category = db.session.query(Category).filter(Category.id == category_id).first()
    if not category:
        return False

    db.session.delete(category)
    db.session.commit()
    return True
