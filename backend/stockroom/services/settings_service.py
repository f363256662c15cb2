"""
Store settings: a small fixed catalog of keys with typed values.

Values are stored JSON-encoded in store_settings; keys with no row fall
back to their catalog default. The low-stock threshold default comes from
the LOW_STOCK_THRESHOLD config value so deployments can change it without
touching the database.
"""
from __future__ import annotations

import json
import re
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Callable

from flask import current_app

from ..extensions import db
from ..models import StoreSetting
from ..validation import ValidationError, parse_int, parse_money

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
CURRENCIES = ("USD", "EUR", "GBP")

LOW_STOCK_THRESHOLD_KEY = "inventory.low_stock_threshold"


class SettingsValidationError(ValidationError):
    pass


@dataclass(frozen=True)
class SettingDefinition:
    description: str
    coerce: Callable[[Any], Any]
    default: Callable[[], Any]


def _coerce_text(max_length: int):
    def _coerce(value: Any) -> str:
        if not isinstance(value, str):
            raise SettingsValidationError("must be a string")
        value = value.strip()
        if len(value) > max_length:
            raise SettingsValidationError(f"exceeds max length {max_length}")
        return value
    return _coerce


def _coerce_email(value: Any) -> str:
    value = _coerce_text(255)(value)
    if value and not EMAIL_RE.match(value):
        raise SettingsValidationError("must be an email address")
    return value


def _coerce_threshold(value: Any) -> int:
    try:
        threshold = parse_int(value, "value")
    except ValidationError as exc:
        raise SettingsValidationError(str(exc))
    if threshold < 0:
        raise SettingsValidationError("must be >= 0")
    return threshold


def _coerce_tax_rate(value: Any) -> str:
    try:
        rate = parse_money(value, "value")
    except ValidationError as exc:
        raise SettingsValidationError(str(exc))
    if rate < 0 or rate > Decimal("100"):
        raise SettingsValidationError("must be between 0 and 100")
    return f"{rate:.2f}"


def _coerce_currency(value: Any) -> str:
    if value not in CURRENCIES:
        raise SettingsValidationError(f"must be one of: {', '.join(CURRENCIES)}")
    return value


SETTINGS_CATALOG: dict[str, SettingDefinition] = {
    "store.name": SettingDefinition(
        "Shop name shown on receipts and the sidebar",
        _coerce_text(120),
        lambda: "My Shop",
    ),
    "store.contact_email": SettingDefinition(
        "Public contact address",
        _coerce_email,
        lambda: "",
    ),
    LOW_STOCK_THRESHOLD_KEY: SettingDefinition(
        "Products at or below this stock level are flagged for restocking",
        _coerce_threshold,
        lambda: current_app.config.get("LOW_STOCK_THRESHOLD", 5),
    ),
    "sales.default_tax_rate": SettingDefinition(
        "Default tax rate in percent",
        _coerce_tax_rate,
        lambda: "7.50",
    ),
    "display.currency": SettingDefinition(
        "Currency used when formatting amounts",
        _coerce_currency,
        lambda: "USD",
    ),
}


def _stored_values() -> dict[str, Any]:
    rows = db.session.query(StoreSetting).all()
    return {row.key: json.loads(row.value) for row in rows if row.value is not None}


def get_settings() -> dict[str, Any]:
    """Every catalog key with its effective value."""
    stored = _stored_values()
    return {
        key: stored[key] if key in stored else definition.default()
        for key, definition in SETTINGS_CATALOG.items()
    }


def get_setting(key: str) -> Any:
    definition = SETTINGS_CATALOG.get(key)
    if definition is None:
        raise SettingsValidationError(f"Unknown setting: {key}")
    row = db.session.query(StoreSetting).filter_by(key=key).first()
    if row is None or row.value is None:
        return definition.default()
    return json.loads(row.value)


def get_low_stock_threshold() -> int:
    return get_setting(LOW_STOCK_THRESHOLD_KEY)


def update_settings(values: dict, user_id: int | None = None) -> dict[str, Any]:
    """
    Validate and store several settings at once.

    All values are checked before anything is written, so one bad key
    leaves every setting unchanged.
    """
    if not isinstance(values, dict) or not values:
        raise SettingsValidationError("Provide at least one setting")

    cleaned: dict[str, Any] = {}
    for key, raw in values.items():
        definition = SETTINGS_CATALOG.get(key)
        if definition is None:
            raise SettingsValidationError(f"Unknown setting: {key}")
        try:
            cleaned[key] = definition.coerce(raw)
        except SettingsValidationError as exc:
            raise SettingsValidationError(f"{key} {exc}")

    for key, value in cleaned.items():
        row = db.session.query(StoreSetting).filter_by(key=key).first()
        if row is None:
            row = StoreSetting(key=key)
            db.session.add(row)
        row.value = json.dumps(value)
        row.updated_by_user_id = user_id

    db.session.commit()
    current_app.logger.info("Updated settings: %s", ", ".join(sorted(cleaned)))
    return get_settings()
