"""Validation helpers shared across ledger services."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Iterable, Optional, Tuple

from .exceptions import ValidationError
from .models import TRANSACTION_TYPES, parse_date


def parse_amount(raw: object, field: str) -> int:
    """Convert raw input to a positive whole-yen integer."""
    if isinstance(raw, bool) or raw is None:
        raise ValidationError(f"{field} must be a numeric value", field)
    try:
        amount = Decimal(str(raw).strip())
    except (InvalidOperation, TypeError) as exc:
        raise ValidationError(f"{field} must be a numeric value", field) from exc

    if not amount.is_finite():
        raise ValidationError(f"{field} must be a numeric value", field)
    if amount <= 0:
        raise ValidationError(f"{field} must be greater than zero", field)
    if amount != amount.to_integral_value():
        raise ValidationError(f"{field} must be a whole number", field)
    return int(amount)


def validate_required_str(value: object, field: str, max_length: int) -> str:
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be a string", field)
    trimmed = value.strip()
    if not trimmed:
        raise ValidationError(f"{field} cannot be empty", field)
    if len(trimmed) > max_length:
        raise ValidationError(f"{field} must be at most {max_length} characters", field)
    return trimmed


def validate_optional_str(value: object, field: str, max_length: int) -> Optional[str]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return validate_required_str(value, field, max_length)


def validate_enum(value: object, field: str, allowed: Iterable[str]) -> str:
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be a string", field)
    canonical = value.strip().lower()
    if canonical not in allowed:
        raise ValidationError(f"{field} must be one of: {', '.join(sorted(allowed))}", field)
    return canonical


def validate_date(value: object, field: str) -> date:
    # datetime is a date subclass; keep only the calendar fields.
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value.strip():
        try:
            return parse_date(value)
        except ValueError as exc:
            raise ValidationError(f"{field} must be a YYYY-MM-DD date", field) from exc
    raise ValidationError(f"{field} is required", field)


def validate_year_month(year: object, month: object) -> Tuple[int, int]:
    try:
        year_value = int(year)  # type: ignore[arg-type]
        month_value = int(month)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        raise ValidationError("year and month must be integers", "month") from exc
    if not 1 <= month_value <= 12:
        raise ValidationError("month must be between 1 and 12", "month")
    if not 1 <= year_value <= 9999:
        raise ValidationError("year must be between 1 and 9999", "year")
    return year_value, month_value


def parse_year_month(value: str) -> Tuple[int, int]:
    """Parse ``YYYY-MM`` into a validated (year, month) pair."""
    parts = value.strip().split("-")
    if len(parts) != 2:
        raise ValidationError(f"Invalid month '{value}'. Expected format YYYY-MM.", "month")
    return validate_year_month(parts[0], parts[1])
