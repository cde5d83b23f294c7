"""Framework-agnostic business services for the household ledger."""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Type, TypeVar
from uuid import uuid4

from . import aggregation, calendar_grid
from .defaults import (
    UNKNOWN_CATEGORY_COLOR,
    UNKNOWN_CATEGORY_NAME,
    default_category_records,
    palette_color,
)
from .exceptions import RecordNotFoundError, ValidationError
from .models import Category, Transaction
from .storage import CATEGORIES_KEY, TRANSACTIONS_KEY, JSONStorage
from .validators import (
    TRANSACTION_TYPES,
    parse_amount,
    validate_date,
    validate_enum,
    validate_optional_str,
    validate_required_str,
    validate_year_month,
)

logger = logging.getLogger(__name__)

IdFactory = Callable[[], str]
Record = TypeVar("Record", Category, Transaction)


def _uuid() -> str:
    return str(uuid4())


def _hydrate(
    model: Type[Record], raw_records: Iterable[Dict[str, Any]], key: str
) -> Optional[Dict[str, Record]]:
    """Build an id-keyed dict, or ``None`` if any record is malformed.

    Duplicate ids count as malformed; keeping only one of them would drop
    the others on the next write.
    """
    hydrated: Dict[str, Record] = {}
    try:
        for payload in raw_records:
            record = model.from_dict(payload)
            if record.id in hydrated:
                raise ValueError(f"duplicate id {record.id!r}")
            hydrated[record.id] = record
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        logger.warning("Stored %s are malformed (%s); using defaults", key, exc)
        return None
    return hydrated


class CategoryService:
    """Manages categories and persistence."""

    def __init__(
        self,
        storage: JSONStorage,
        key: str = CATEGORIES_KEY,
        id_factory: IdFactory = _uuid,
    ) -> None:
        self._storage = storage
        self._key = key
        self._new_id = id_factory
        self._categories: Dict[str, Category] = {}
        self.load()

    def add(self, name: object, type: object) -> Category:
        category = Category(
            id=_fresh_id(self._new_id, self._categories),
            name=validate_required_str(name, "name", 50),
            type=validate_enum(type, "type", TRANSACTION_TYPES),
            color=palette_color(len(self._categories)),
        )
        self._categories[category.id] = category
        self._persist()
        logger.info("Added %s category %s (%s)", category.type, category.id, category.name)
        return category

    def remove(self, category_id: str) -> None:
        """Delete a category; transactions that reference it are left alone."""
        if self._categories.pop(category_id, None) is None:
            return
        self._persist()
        logger.info("Removed category %s", category_id)

    def get(self, category_id: str) -> Category:
        try:
            return self._categories[category_id]
        except KeyError as exc:
            raise RecordNotFoundError(f"Category {category_id} not found") from exc

    def find(self, category_id: str) -> Optional[Category]:
        return self._categories.get(category_id)

    def list(self, type: Optional[str] = None) -> List[Category]:
        if type is None:
            return list(self._categories.values())
        canonical = validate_enum(type, "type", TRANSACTION_TYPES)
        return [category for category in self._categories.values() if category.type == canonical]

    def load(self) -> None:
        raw_records = self._storage.load(self._key, default=default_category_records())
        categories = _hydrate(Category, raw_records, self._key)
        if categories is None:
            categories = _hydrate(Category, default_category_records(), self._key) or {}
        self._categories = categories

    def _persist(self) -> None:
        self._storage.save(self._key, [category.to_dict() for category in self._categories.values()])


class TransactionService:
    """Manages transaction records and mediates persistence."""

    def __init__(
        self,
        storage: JSONStorage,
        key: str = TRANSACTIONS_KEY,
        id_factory: IdFactory = _uuid,
    ) -> None:
        self._storage = storage
        self._key = key
        self._new_id = id_factory
        self._transactions: Dict[str, Transaction] = {}
        self.load()  # Hydrate in-memory cache from persistence on construction.

    # Public API -----------------------------------------------------------
    def add(self, payload: Dict[str, object]) -> Transaction:
        data = self._validate_payload(payload)
        transaction = Transaction(id=_fresh_id(self._new_id, self._transactions), **data)
        self._transactions[transaction.id] = transaction
        self._persist()
        logger.info(
            "Added %s %s of %d on %s",
            transaction.type,
            transaction.id,
            transaction.amount,
            transaction.date,
        )
        return transaction

    def remove(self, transaction_id: str) -> None:
        if self._transactions.pop(transaction_id, None) is None:
            return
        self._persist()
        logger.info("Removed transaction %s", transaction_id)

    def get(self, transaction_id: str) -> Transaction:
        """Return a transaction or raise if it does not exist."""
        try:
            return self._transactions[transaction_id]
        except KeyError as exc:
            raise RecordNotFoundError(f"Transaction {transaction_id} not found") from exc

    def list(self, year: Optional[int] = None, month: Optional[int] = None) -> List[Transaction]:
        """Transactions in insertion order, optionally limited to one month."""
        if year is None and month is None:
            return list(self._transactions.values())
        if year is None or month is None:
            raise ValidationError("year and month must be given together", "month")
        year, month = validate_year_month(year, month)
        return [
            tx for tx in self._transactions.values() if tx.year == year and tx.month == month
        ]

    def for_day(self, day: date) -> List[Transaction]:
        return [tx for tx in self._transactions.values() if tx.date == day]

    def load(self) -> None:
        """Load existing transactions from persistence."""
        raw_records = self._storage.load(self._key, default=[])
        self._transactions = _hydrate(Transaction, raw_records, self._key) or {}

    # Internal helpers -----------------------------------------------------
    def _persist(self) -> None:
        self._storage.save(self._key, [tx.to_dict() for tx in self._transactions.values()])

    def _validate_payload(self, payload: Dict[str, object]) -> Dict[str, object]:
        # Category existence is not checked; dangling references are allowed.
        return {
            "type": validate_enum(payload.get("type"), "type", TRANSACTION_TYPES),
            "amount": parse_amount(payload.get("amount"), "amount"),
            "date": validate_date(payload.get("date"), "date"),
            "category_id": validate_required_str(payload.get("categoryId"), "categoryId", 100),
            "memo": validate_optional_str(payload.get("memo"), "memo", 200),
        }


class LedgerService:
    """Combines both collections into the views the presentation layer shows."""

    def __init__(self, transactions: TransactionService, categories: CategoryService) -> None:
        self._transactions = transactions
        self._categories = categories

    def describe_category(self, category_id: str) -> Dict[str, object]:
        category = self._categories.find(category_id)
        if category is None:
            return {
                "id": category_id,
                "name": UNKNOWN_CATEGORY_NAME,
                "color": UNKNOWN_CATEGORY_COLOR,
                "known": False,
            }
        return {"id": category.id, "name": category.name, "color": category.color, "known": True}

    def summary(self, year: int, month: int) -> aggregation.MonthlySummary:
        return aggregation.monthly_summary(self._transactions.list(year, month))

    def calendar(self, year: int, month: int) -> List[Dict[str, object]]:
        """Grid cells paired with the daily totals of their date."""
        by_day = aggregation.totals_by_day(self._transactions.list(year, month))
        empty = aggregation.DailyTotals()
        cells: List[Dict[str, object]] = []
        for cell in calendar_grid.build(year, month):
            if cell is None:
                cells.append({"date": None, "day": None, "totals": None})
                continue
            totals = by_day.get(cell, empty)
            cells.append({"date": cell.isoformat(), "day": cell.day, "totals": totals.to_dict()})
        return cells

    def describe(self, transactions: Sequence[Transaction]) -> List[Dict[str, object]]:
        return [
            {**tx.to_dict(), "category": self.describe_category(tx.category_id)}
            for tx in transactions
        ]

    def month_view(self, year: int, month: int) -> Dict[str, object]:
        year, month = validate_year_month(year, month)
        records = self._transactions.list(year, month)
        return {
            "year": year,
            "month": month,
            "summary": aggregation.monthly_summary(records).to_dict(),
            "weekdays": list(calendar_grid.WEEKDAY_LABELS),
            "calendar": self.calendar(year, month),
            "items": self.describe(aggregation.sort_by_date_desc(records)),
        }

    def refresh(self) -> None:
        """Reload data from persistence for both services."""
        self._transactions.load()
        self._categories.load()


def _fresh_id(new_id: IdFactory, existing: Dict[str, Any]) -> str:
    candidate = new_id()
    while candidate in existing:
        candidate = new_id()
    return candidate
