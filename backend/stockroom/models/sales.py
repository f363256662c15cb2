from __future__ import annotations

from ..extensions import db
from ..formatting import money_str, to_utc_z, utcnow


class Sale(db.Model):
    """
    A recorded sale of one product.

    IMMUTABLE: Sales are append-only. Never update or delete.

    product_id is a plain indexed integer, not a foreign key: products can be
    hard-deleted while their sales remain as history. price and total are
    snapshots taken when the sale was recorded, so later price edits do not
    rewrite revenue.
    """
    __tablename__ = "sales"
    __table_args__ = (
        db.CheckConstraint("quantity > 0", name="ck_sales_quantity_positive"),
        db.Index("ix_sales_created_at", "created_at"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)

    product_id = db.Column(db.Integer, nullable=False, index=True)
    quantity = db.Column(db.Integer, nullable=False)

    price = db.Column(db.Numeric(10, 2), nullable=False)
    total = db.Column(db.Numeric(10, 2), nullable=False)

    created_by_user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=True)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)

    def __repr__(self) -> str:
        return f"<Sale id={self.id} product_id={self.product_id} quantity={self.quantity} total={self.total}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "product_id": self.product_id,
            "quantity": self.quantity,
            "price": money_str(self.price),
            "total": money_str(self.total),
            "created_by_user_id": self.created_by_user_id,
            "created_at": to_utc_z(self.created_at),
        }
