from __future__ import annotations
from datetime import datetime
from barflow.time_utils import parse_iso_datetime

from dataclasses import dataclass
from typing import Any

from sqlalchemy import Boolean, Integer, String, Text, DateTime
from sqlalchemy.orm import DeclarativeMeta


# Maximum amount: 9,999,999.99 (999,999,999 cents)
MAX_AMOUNT_CENTS = 999_999_999

# Largest single replenish or order line quantity accepted at the boundary
MAX_QUANTITY = 100_000


class ValidationError(ValueError):
    """400-level input problem."""


class NotFoundError(ValueError):
    """404-level missing entity."""


class ConflictError(ValueError):
    """409-level business rule conflict (e.g., duplicate table name)."""


@dataclass(frozen=True)
class ModelValidationPolicy:
    """
    Central policy layer:
    - writable_fields: what callers are allowed to set
    - required_on_create: fields required for POST
    """
    writable_fields: set[str]
    required_on_create: set[str] = None  # type: ignore


def _columns_by_key(model: DeclarativeMeta) -> dict[str, Any]:
    mapper = model.__mapper__
    return {c.key: c for c in mapper.columns}


def coerce_int(value: Any, field: str) -> int:
    """Strict integer coercion: rejects bools, floats, decimals and scientific notation."""
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            raise ValidationError(f"{field} must be an integer")
        if 'e' in stripped.lower():
            raise ValidationError(f"{field} must be a plain integer (scientific notation not allowed)")
        if '.' in stripped:
            raise ValidationError(f"{field} must be an integer (no decimals)")
        try:
            return int(stripped)
        except ValueError:
            raise ValidationError(f"{field} must be an integer")
    if isinstance(value, float):
        raise ValidationError(f"{field} must be an integer, not a decimal")
    raise ValidationError(f"{field} must be an integer")


def _coerce_value(col, value: Any):
    coltype = col.type

    if value is None:
        return None

    if isinstance(coltype, Integer):
        return coerce_int(value, col.key)

    if isinstance(coltype, Boolean):
        if isinstance(value, bool):
            return value
        # fallback: truthiness
        return bool(value)

    # Datetimes (accept ISO-8601 strings; normalize to UTC)
    if isinstance(coltype, DateTime):
        if isinstance(value, datetime):
            return value
        if isinstance(value, str):
            try:
                dt = parse_iso_datetime(value)
            except ValueError:
                raise ValidationError(f"{col.key} must be an ISO-8601 datetime")
            if dt is None:
                raise ValidationError(f"{col.key} must be an ISO-8601 datetime")
            return dt
        raise ValidationError(f"{col.key} must be a datetime")

    if isinstance(coltype, (String, Text)):
        return str(value).strip()

    return value


def validate_payload(
    *,
    model: DeclarativeMeta,
    payload: dict,
    policy: ModelValidationPolicy,
    partial: bool,
) -> dict:
    """
    Validates + normalizes incoming JSON against:
    - SQLAlchemy column metadata (nullable, type, String length)
    - a policy allowlist (writable_fields)
    - required_on_create (if partial=False)
    Returns a cleaned patch dict with only writable fields.

    partial=False: create semantics (enforce required_on_create)
    partial=True: patch semantics (validate only provided keys)
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

    # Reject unknown / non-writable fields
    for k in payload.keys():
        if k not in policy.writable_fields:
            raise ValidationError(f"Field not allowed: {k}")
        if k not in cols:
            raise ValidationError(f"Unknown field: {k}")

    patch: dict = {}

    for k, raw in payload.items():
        col = cols[k]

        if raw is None:
            if not col.nullable:
                raise ValidationError(f"{k} cannot be null")
            patch[k] = None
            continue

        val = _coerce_value(col, raw)

        # Blank string check for required text fields
        if isinstance(col.type, (String, Text)) and k in required:
            if isinstance(val, str) and val == "":
                raise ValidationError(f"{k} cannot be blank")

        if isinstance(col.type, String) and col.type.length and isinstance(val, str):
            if len(val) > col.type.length:
                raise ValidationError(f"{k} exceeds max length {col.type.length}")

        patch[k] = val

    return patch


def _check_amount(patch: dict, field: str) -> None:
    if field in patch and patch[field] is not None:
        value = patch[field]
        if value < 0:
            raise ValidationError(f"{field} must be >= 0")
        if value > MAX_AMOUNT_CENTS:
            raise ValidationError(f"{field} cannot exceed {MAX_AMOUNT_CENTS}")


def enforce_rules_product(patch: dict) -> None:
    """
    Business rules that are not captured by SQLAlchemy metadata alone.
    Keep these small and centralized.
    """
    _check_amount(patch, "price_cents")
    _check_amount(patch, "cost_price_cents")
    if patch.get("alert_threshold") is not None and patch["alert_threshold"] < 0:
        raise ValidationError("alert_threshold must be >= 0")


def enforce_rules_replenish(payload: dict) -> tuple[int, str | None]:
    """Replenish requires a non-zero integer quantity; zero or unparsable input never reaches the ledger."""
    if not isinstance(payload, dict):
        raise ValidationError("Invalid JSON payload")
    if "quantity" not in payload or payload["quantity"] is None:
        raise ValidationError("quantity is required")
    quantity = coerce_int(payload["quantity"], "quantity")
    if quantity == 0:
        raise ValidationError("quantity must be non-zero")
    if abs(quantity) > MAX_QUANTITY:
        raise ValidationError(f"quantity cannot exceed {MAX_QUANTITY}")

    note = payload.get("note")
    if note is not None:
        note = str(note).strip() or None
    return quantity, note


def parse_amount_cents(value: Any, field: str, *, allow_negative: bool = False, allow_zero: bool = True) -> int:
    if value is None:
        raise ValidationError(f"{field} is required")
    amount = coerce_int(value, field)
    if not allow_negative and amount < 0:
        raise ValidationError(f"{field} must be >= 0")
    if not allow_zero and amount == 0:
        raise ValidationError(f"{field} must be non-zero")
    if abs(amount) > MAX_AMOUNT_CENTS:
        raise ValidationError(f"{field} cannot exceed {MAX_AMOUNT_CENTS}")
    return amount


def parse_cart_items(raw_items: Any) -> list[dict]:
    """
    Validate a cart before it becomes an order.

    Each line needs a name and a positive integer quantity; price_cents,
    cost_price_cents and product_id are optional integers.
    """
    if not isinstance(raw_items, list) or not raw_items:
        raise ValidationError("Cart is empty")

    items = []
    for idx, raw in enumerate(raw_items):
        if not isinstance(raw, dict):
            raise ValidationError(f"items[{idx}] must be an object")
        name = str(raw.get("name") or "").strip()
        if not name:
            raise ValidationError(f"items[{idx}].name is required")
        if raw.get("quantity") is None:
            raise ValidationError(f"items[{idx}].quantity is required")
        quantity = coerce_int(raw["quantity"], f"items[{idx}].quantity")
        if quantity <= 0:
            raise ValidationError(f"items[{idx}].quantity must be > 0")
        if quantity > MAX_QUANTITY:
            raise ValidationError(f"items[{idx}].quantity cannot exceed {MAX_QUANTITY}")

        item = {"name": name, "quantity": quantity}
        for key in ("price_cents", "cost_price_cents"):
            if raw.get(key) is not None:
                item[key] = parse_amount_cents(raw[key], f"items[{idx}].{key}")
        if raw.get("product_id") is not None:
            item["product_id"] = coerce_int(raw["product_id"], f"items[{idx}].product_id")
        items.append(item)
    return items
