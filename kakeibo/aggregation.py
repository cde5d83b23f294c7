"""Pure derivations over transaction snapshots.

Nothing here looks categories up, so transactions whose category has been
deleted are summed like any other.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Dict, Iterable, List, Optional

from .models import Transaction


@dataclass(frozen=True)
class MonthlySummary:
    income: int = 0
    expense: int = 0

    @property
    def total(self) -> int:
        return self.income - self.expense

    def to_dict(self) -> Dict[str, int]:
        return {"income": self.income, "expense": self.expense, "total": self.total}


@dataclass(frozen=True)
class DailyTotals:
    income: int = 0
    expense: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {"income": self.income, "expense": self.expense}


def _split(transactions: Iterable[Transaction]) -> Dict[str, int]:
    sums = {"income": 0, "expense": 0}
    for tx in transactions:
        if tx.type in sums:
            sums[tx.type] += tx.amount
    return sums


def monthly_summary(transactions: Iterable[Transaction]) -> MonthlySummary:
    """Income, expense and their difference for an already month-filtered list."""
    sums = _split(transactions)
    return MonthlySummary(income=sums["income"], expense=sums["expense"])


def daily_totals(transactions: Iterable[Transaction], day: date) -> DailyTotals:
    sums = _split(tx for tx in transactions if tx.date == day)
    return DailyTotals(income=sums["income"], expense=sums["expense"])


def totals_by_day(transactions: Iterable[Transaction]) -> Dict[date, DailyTotals]:
    """Group once for callers that annotate a whole calendar."""
    grouped: Dict[date, List[Transaction]] = {}
    for tx in transactions:
        grouped.setdefault(tx.date, []).append(tx)
    return {day: daily_totals(items, day) for day, items in grouped.items()}


def category_totals(
    transactions: Iterable[Transaction], type: Optional[str] = None
) -> Dict[str, int]:
    """Per-category sums in first-seen order, dangling ids included."""
    totals: Dict[str, int] = {}
    for tx in transactions:
        if type is not None and tx.type != type:
            continue
        totals[tx.category_id] = totals.get(tx.category_id, 0) + tx.amount
    return totals


def sort_by_date_desc(transactions: Iterable[Transaction]) -> List[Transaction]:
    # sorted() is stable, so same-day entries keep insertion order.
    return sorted(transactions, key=lambda tx: tx.date, reverse=True)


def format_yen(amount: int) -> str:
    sign = "-" if amount < 0 else ""
    return f"{sign}¥{abs(amount):,}"
