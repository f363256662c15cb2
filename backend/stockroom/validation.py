from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any

from sqlalchemy import Boolean, Integer, Numeric, String, Text
from sqlalchemy.orm import DeclarativeMeta


# Numeric(10, 2) ceiling: 99,999,999.99
MAX_MONEY = Decimal("99999999.99")
CENT = Decimal("0.01")

# Largest value a 64-bit INTEGER column (SQLite, BIGINT) can hold
MAX_INT = 2**63 - 1


class ValidationError(ValueError):
    """400-level input problem."""


class ConflictError(ValueError):
    """409-level business rule conflict (e.g., duplicate SKU)."""


@dataclass(frozen=True)
class ModelValidationPolicy:
    """
    Central policy layer:
    - writable_fields: what clients are allowed to set (security boundary)
    - required_on_create: fields required for POST
    """
    writable_fields: set[str]
    required_on_create: set[str] = None  # type: ignore


def parse_money(value: Any, field: str = "amount") -> Decimal:
    """
    Coerce a JSON money value ("10.00", 10, 10.5) into a 2-place Decimal.

    Strings are preferred on the wire; floats are accepted but go through
    str() first so 0.1 stays 0.10 rather than its binary expansion.
    """
    if isinstance(value, bool) or value is None:
        raise ValidationError(f"{field} must be a decimal amount")
    if isinstance(value, float):
        value = str(value)
    try:
        amount = Decimal(str(value).strip()) if isinstance(value, str) else Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError(f"{field} must be a decimal amount")
    if not amount.is_finite():
        raise ValidationError(f"{field} must be a decimal amount")
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def id_in_range(value: int) -> bool:
    """Whether an id can name a stored row; larger values cannot be bound as a parameter."""
    return 0 < value <= MAX_INT


def parse_int(value: Any, field: str) -> int:
    # Already an int (but not bool which is a subclass of int)
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str):
        stripped = value.strip()
        # Reject scientific notation and decimal points ("1e3", "12.5")
        if not stripped or "e" in stripped.lower() or "." in stripped:
            raise ValidationError(f"{field} must be an integer")
        try:
            return int(stripped)
        except ValueError:
            raise ValidationError(f"{field} must be an integer")
    raise ValidationError(f"{field} must be an integer")


def _columns_by_key(model: DeclarativeMeta) -> dict[str, Any]:
    mapper = model.__mapper__
    return {c.key: c for c in mapper.columns}


def _coerce_value(col, value: Any):
    coltype = col.type

    if value is None:
        return None

    # Numeric before Integer: money columns
    if isinstance(coltype, Numeric):
        return parse_money(value, col.key)

    if isinstance(coltype, Integer):
        return parse_int(value, col.key)

    if isinstance(coltype, Boolean):
        if isinstance(value, bool):
            return value
        raise ValidationError(f"{col.key} must be a boolean")

    # Strings / Text
    if isinstance(coltype, (String, Text)):
        if isinstance(value, (dict, list)):
            raise ValidationError(f"{col.key} must be a string")
        return str(value).strip()

    return value


def validate_payload(
    *,
    model: DeclarativeMeta,
    payload: dict,
    policy: ModelValidationPolicy,
    partial: bool,
    ignore_unknown: bool = False,
) -> dict:
    """
    Validates + normalizes incoming JSON against:
    - SQLAlchemy column metadata (nullable, type, String length)
    - a policy allowlist (writable_fields)
    - required_on_create (if partial=False)
    Returns a cleaned patch dict with only writable fields.

    partial=False: create semantics (enforce required_on_create)
    partial=True: patch semantics (validate only provided keys)
    ignore_unknown=True drops non-writable keys instead of rejecting them.
    """
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise ValidationError("Invalid JSON payload")

    required = policy.required_on_create or set()
    if not partial:
        missing = sorted(f for f in required if f not in payload)
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")

    cols = _columns_by_key(model)

    patch: dict = {}

    for k, raw in payload.items():
        if k not in policy.writable_fields or k not in cols:
            if ignore_unknown:
                continue
            raise ValidationError(f"Field not allowed: {k}")

        col = cols[k]

        # NULL handling
        if raw is None:
            if not col.nullable:
                raise ValidationError(f"{k} cannot be null")
            patch[k] = None
            continue

        val = _coerce_value(col, raw)

        # Blank string check for non-nullable text fields
        if isinstance(col.type, (String, Text)) and not col.nullable:
            if isinstance(val, str) and val == "":
                raise ValidationError(f"{k} cannot be blank")

        # Max length check for String(n)
        if isinstance(col.type, String) and col.type.length and isinstance(val, str):
            if len(val) > col.type.length:
                raise ValidationError(f"{k} exceeds max length {col.type.length}")

        patch[k] = val

    return patch


def enforce_rules_product(patch: dict) -> None:
    """
    Business rules that are not captured by SQLAlchemy metadata alone.
    Keep these small and centralized.
    """
    for field in ("price", "cost"):
        if field in patch and patch[field] is not None:
            amount = patch[field]
            if amount < 0:
                raise ValidationError(f"{field} must be >= 0")
            if amount > MAX_MONEY:
                raise ValidationError(f"{field} cannot exceed {MAX_MONEY}")

    if "stock" in patch and patch["stock"] is not None:
        if patch["stock"] < 0:
            raise ValidationError("stock must be >= 0")
        if patch["stock"] > MAX_INT:
            raise ValidationError(f"stock cannot exceed {MAX_INT}")


def enforce_rules_sale(quantity: int, price: Decimal | None, total: Decimal | None) -> None:
    # Sale quantity is always positive; returns are not recorded as sales
    if quantity <= 0:
        raise ValidationError("quantity must be > 0")
    if quantity > MAX_INT:
        raise ValidationError(f"quantity cannot exceed {MAX_INT}")

    for field, amount in (("price", price), ("total", total)):
        if amount is None:
            continue
        if amount < 0:
            raise ValidationError(f"{field} must be >= 0")
        if amount > MAX_MONEY:
            raise ValidationError(f"{field} cannot exceed {MAX_MONEY}")
