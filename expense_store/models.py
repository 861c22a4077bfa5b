"""Data models for the expense store domain."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, Tuple

__all__ = ["Expense", "format_value", "parse_date", "sort_key"]


def parse_date(value: str) -> date:
    """Parse an ISO 8601 date or datetime string into a calendar date."""
    value = value.strip()
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    if "T" in value or " " in value:
        # Keep the calendar date as written; no timezone shift for date-only fields.
        return datetime.fromisoformat(value).date()
    return date.fromisoformat(value)


def format_value(value: Decimal) -> str:
    """Render a decimal amount without exponent notation."""
    return format(value, "f")


@dataclass(frozen=True)
class Expense:
    id: str
    name: str
    date: date
    value: Decimal
    sequence: int

    def to_dict(self) -> Dict[str, Any]:
        """Serialise the expense to JSON-friendly natives."""
        return {
            "id": self.id,
            "name": self.name,
            "date": self.date.isoformat(),
            "value": format_value(self.value),
            "sequence": self.sequence,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Expense":
        """Hydrate an Expense from JSON-native data."""
        return cls(
            id=data["id"],
            name=data["name"],
            date=parse_date(data["date"]),
            value=Decimal(str(data["value"])),
            sequence=int(data["sequence"]),
        )


def sort_key(expense: Expense) -> Tuple[date, int]:
    """Ascending by date; equal dates keep insertion order."""
    return (expense.date, expense.sequence)
