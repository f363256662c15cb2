from __future__ import annotations

from ..extensions import db
from ..formatting import utcnow


class StoreSetting(db.Model):
    """
    Key-value store configuration.

    Only keys listed in services/settings_service.SETTINGS_CATALOG are
    accepted. Values are JSON-encoded text.
    """
    __tablename__ = "store_settings"
    __table_args__ = (
        db.UniqueConstraint("key", name="uq_store_settings_key"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)

    key = db.Column(db.String(128), nullable=False)
    value = db.Column(db.Text, nullable=True)

    updated_by_user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=True)
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)
