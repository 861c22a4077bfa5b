"""Validation helpers shared by the expense store and its adapters."""

from __future__ import annotations

from datetime import date, datetime
from decimal import DefaultContext, Decimal, InvalidOperation
from typing import Dict, Mapping

from .exceptions import InvalidInputError
from .models import parse_date

NAME_MAX_LENGTH = 100

EDITABLE_FIELDS = {"name", "date", "value"}
IMMUTABLE_FIELDS = {"id", "sequence"}


def validate_name(value: object, field: str = "name") -> str:
    if not isinstance(value, str):
        raise InvalidInputError(f"{field} must be a string")
    trimmed = value.strip()
    if not trimmed:
        raise InvalidInputError(f"{field} cannot be empty")
    if len(trimmed) > NAME_MAX_LENGTH:
        raise InvalidInputError(f"{field} must be at most {NAME_MAX_LENGTH} characters")
    return trimmed


def parse_value(raw: object, field: str = "value") -> Decimal:
    """Convert raw input to a finite, signed Decimal."""
    # bool is an int subclass; True is not an amount.
    if isinstance(raw, bool) or raw is None:
        raise InvalidInputError(f"{field} must be a numeric value")
    try:
        amount = raw if isinstance(raw, Decimal) else Decimal(str(raw).strip())
    except (InvalidOperation, TypeError, ValueError) as exc:
        raise InvalidInputError(f"{field} must be a numeric value") from exc

    if not amount.is_finite():
        raise InvalidInputError(f"{field} must be a finite number")
    # Exponent must fit the default decimal context.
    if amount and not DefaultContext.Emin <= amount.adjusted() <= DefaultContext.Emax:
        raise InvalidInputError(f"{field} is outside the supported range")
    return amount


def validate_date(value: object, field: str = "date") -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return parse_date(value)
        except ValueError as exc:
            raise InvalidInputError(f"{field} must be an ISO 8601 date (YYYY-MM-DD)") from exc
    raise InvalidInputError(f"{field} must be a date or ISO 8601 string")


def validate_changes(changes: Mapping[str, object]) -> Dict[str, object]:
    """Normalise a partial update, rejecting unknown or immutable fields."""
    if not isinstance(changes, Mapping):
        raise InvalidInputError("changes must be a mapping of field names to values")

    frozen = IMMUTABLE_FIELDS.intersection(changes)
    if frozen:
        raise InvalidInputError(f"cannot change immutable field(s): {', '.join(sorted(frozen))}")
    unknown = set(changes) - EDITABLE_FIELDS
    if unknown:
        raise InvalidInputError(
            f"unknown field(s): {', '.join(sorted(unknown))}; "
            f"editable fields are {', '.join(sorted(EDITABLE_FIELDS))}"
        )

    cleaned: Dict[str, object] = {}
    if "name" in changes:
        cleaned["name"] = validate_name(changes["name"])
    if "date" in changes:
        cleaned["date"] = validate_date(changes["date"])
    if "value" in changes:
        cleaned["value"] = parse_value(changes["value"])
    return cleaned
