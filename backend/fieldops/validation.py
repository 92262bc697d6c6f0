from __future__ import annotations

import math
from typing import Any


class FieldOpsError(Exception):
    """Base class for errors reported back to API callers."""

    status_code = 500

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ValidationError(FieldOpsError, ValueError):
    """400-level input problem. Nothing has been written."""

    status_code = 400


class AuthenticationError(FieldOpsError):
    """401-level: credentials missing, wrong, or expired."""

    status_code = 401


class AuthorizationError(FieldOpsError):
    """403-level: caller is known but not allowed to do this."""

    status_code = 403


class NotFoundError(FieldOpsError):
    """404-level: unknown plan, user, product or location id."""

    status_code = 404


class ConflictError(FieldOpsError, ValueError):
    """409-level business rule conflict (e.g., duplicate email)."""

    status_code = 409


class StoreError(FieldOpsError):
    """The record store failed; fatal to the enclosing operation."""

    status_code = 500


def require_fields(payload: dict, fields: list[str], message: str | None = None) -> None:
    """Raise ValidationError unless every field is present and non-blank."""
    missing = [f for f in fields if _is_blank(payload.get(f))]
    if missing:
        raise ValidationError(message or f"Missing required fields: {', '.join(missing)}")


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str) and value.strip() == "":
        return True
    return False


def parse_positive_number(value: Any, field: str) -> float:
    """
    Parse a strictly positive, finite number.

    Accepts ints, floats and numeric strings; rejects booleans,
    blanks, NaN and infinities.
    """
    if isinstance(value, bool) or value is None:
        raise ValidationError(f"{field} must be a number > 0")
    if isinstance(value, str):
        value = value.strip()
        if not value:
            raise ValidationError(f"{field} must be a number > 0")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be a number > 0")
    if not math.isfinite(number) or number <= 0:
        raise ValidationError(f"{field} must be a number > 0")
    return number


def parse_optional_float(value: Any) -> float | None:
    """Lenient float coercion for display attributes (lat/lng, weights)."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str) and not value.strip():
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def clamp_limit(raw: Any, default: int, ceiling: int) -> int:
    """Resolve a requested result-count cap against configured default/ceiling."""
    if raw is None or raw == "":
        return min(default, ceiling)
    try:
        limit = int(raw)
    except (TypeError, ValueError):
        raise ValidationError("limit must be an integer")
    if limit <= 0:
        raise ValidationError("limit must be > 0")
    return min(limit, ceiling)
