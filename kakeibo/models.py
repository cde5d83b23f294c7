"""Data models for the household ledger domain."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Dict, Optional

__all__ = ["Category", "Transaction", "TRANSACTION_TYPES", "format_date", "parse_date"]

TRANSACTION_TYPES = frozenset({"income", "expense"})
DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def format_date(day: date) -> str:
    """Return the ``YYYY-MM-DD`` form used in storage and on the wire."""
    return day.isoformat()


def parse_date(value: str) -> date:
    """Parse a ``YYYY-MM-DD`` string straight into a calendar date.

    No timestamp is involved, so the result never shifts with the local
    time zone. Other ISO 8601 spellings are rejected on every interpreter.
    """
    value = value.strip()
    if not DATE_PATTERN.fullmatch(value):
        raise ValueError(f"Expected YYYY-MM-DD, got {value!r}")
    return datetime.strptime(value, "%Y-%m-%d").date()


def _stored_type(value: Any) -> str:
    if value not in TRANSACTION_TYPES:
        raise ValueError(f"Unknown type {value!r}")
    return value


def _stored_amount(value: Any) -> int:
    # Stored amounts are JSON integers; anything else is not what add() wrote.
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValueError(f"Invalid stored amount {value!r}")
    return value


@dataclass(frozen=True)
class Category:
    id: str
    name: str
    type: str
    color: str

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "type": self.type, "color": self.color}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Category":
        return cls(
            id=str(data["id"]),
            name=str(data["name"]),
            type=_stored_type(data["type"]),
            color=str(data["color"]),
        )


@dataclass(frozen=True)
class Transaction:
    id: str
    type: str
    amount: int
    date: date
    category_id: str
    memo: Optional[str] = None

    @property
    def year(self) -> int:
        return self.date.year

    @property
    def month(self) -> int:
        return self.date.month

    def to_dict(self) -> Dict[str, Any]:
        """Serialise the transaction to JSON-friendly natives."""
        return {
            "id": self.id,
            "type": self.type,
            "amount": self.amount,
            "date": format_date(self.date),
            "categoryId": self.category_id,
            "memo": self.memo,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Transaction":
        """Hydrate a Transaction from JSON-native data.

        Raises ``ValueError`` for records that break the add-time rules
        (non-positive or fractional amount, unknown type).
        """
        return cls(
            id=str(data["id"]),
            type=_stored_type(data["type"]),
            amount=_stored_amount(data["amount"]),
            date=parse_date(data["date"]),
            category_id=str(data["categoryId"]),
            memo=data.get("memo"),
        )
