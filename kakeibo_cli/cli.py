"""Console interface for the household ledger."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from datetime import date
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from kakeibo import calendar_grid
from kakeibo.aggregation import format_yen, sort_by_date_desc
from kakeibo.exceptions import RecordNotFoundError, ValidationError
from kakeibo.models import parse_date
from kakeibo.services import CategoryService, LedgerService, TransactionService
from kakeibo.storage import JSONStorage
from kakeibo.validators import parse_year_month

CELL_WIDTH = 10


def _parse_month(value: str) -> Tuple[int, int]:
    try:
        return parse_year_month(value)
    except ValidationError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def _parse_day(value: str) -> date:
    try:
        return parse_date(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(
            f"Invalid date '{value}'. Expected format YYYY-MM-DD."
        ) from exc


def _current_month() -> Tuple[int, int]:
    today = date.today()
    return today.year, today.month


def _load_services(data_dir: Path) -> Tuple[LedgerService, TransactionService, CategoryService]:
    storage = JSONStorage(data_dir)
    transactions = TransactionService(storage)
    categories = CategoryService(storage)
    return LedgerService(transactions, categories), transactions, categories


def _format_transaction(row: Dict[str, object]) -> str:
    category = row["category"]
    sign = "+" if row["type"] == "income" else "-"
    memo = row.get("memo") or "-"
    return (
        f"[{row['id']}] {row['date']} {sign}{format_yen(row['amount'])}\n"  # type: ignore[arg-type]
        f"  Category: {category['name']} | Memo: {memo}\n"  # type: ignore[index]
    )


def _format_cell(cell: Dict[str, object]) -> List[str]:
    if cell["day"] is None:
        return ["", "", ""]
    totals = cell["totals"]
    income = totals["income"]  # type: ignore[index]
    expense = totals["expense"]  # type: ignore[index]
    return [
        str(cell["day"]),
        f"+{income:,}" if income else "",
        f"-{expense:,}" if expense else "",
    ]


def render_calendar(view: Dict[str, object]) -> str:
    lines = [f"{view['year']}-{view['month']:02d}"]
    lines.append("".join(label.rjust(CELL_WIDTH) for label in view["weekdays"]))  # type: ignore[attr-defined]
    for week in calendar_grid.weeks(view["calendar"]):  # type: ignore[arg-type]
        rendered = [_format_cell(cell) for cell in week]
        for row in range(3):
            line = "".join(cell[row].rjust(CELL_WIDTH) for cell in rendered)
            if line.strip():
                lines.append(line)
        lines.append("")
    return "\n".join(lines)


def _print_summary(summary: Dict[str, int]) -> None:
    print(
        f"Income: {format_yen(summary['income'])} | "
        f"Expense: {format_yen(summary['expense'])} | "
        f"Total: {format_yen(summary['total'])}"
    )


def handle_category(args: argparse.Namespace, service: CategoryService) -> None:
    if args.command == "add":
        category = service.add(args.name, args.type)
        print(f"Category added: [{category.id}] {category.name} ({category.type}, {category.color})")
    elif args.command == "list":
        categories = service.list(args.type)
        if not categories:
            print("No categories found.")
            return
        for category in categories:
            print(f"[{category.id}] {category.name} ({category.type}, {category.color})")
    elif args.command == "delete":
        service.remove(args.id)
        print(f"Category {args.id} deleted.")


def handle_transaction(
    args: argparse.Namespace, service: TransactionService, ledger: LedgerService
) -> None:
    if args.command == "add":
        payload = {
            "type": args.type,
            "amount": args.amount,
            "date": args.date,
            "categoryId": args.category_id,
            "memo": args.memo,
        }
        transaction = service.add(payload)
        print("Transaction added:\n" + _format_transaction(ledger.describe([transaction])[0]))
    elif args.command == "list":
        year, month = args.month or _current_month()
        records = sort_by_date_desc(service.list(year, month))
        if not records:
            print("No transactions found.")
            return
        print(f"Found {len(records)} transactions in {year}-{month:02d}:")
        for row in ledger.describe(records):
            print(_format_transaction(row))
    elif args.command == "delete":
        service.remove(args.id)
        print(f"Transaction {args.id} deleted.")


def handle_summary(args: argparse.Namespace, ledger: LedgerService) -> None:
    year, month = args.month or _current_month()
    _print_summary(ledger.summary(year, month).to_dict())


def handle_calendar(args: argparse.Namespace, ledger: LedgerService) -> None:
    year, month = args.month or _current_month()
    view = ledger.month_view(year, month)
    print(render_calendar(view))
    _print_summary(view["summary"])  # type: ignore[arg-type]


def handle_day(args: argparse.Namespace, service: TransactionService, ledger: LedgerService) -> None:
    records = service.for_day(args.date)
    print(f"{args.date.isoformat()}: {len(records)} records")
    for row in ledger.describe(records):
        print(_format_transaction(row))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Household ledger CLI")
    parser.add_argument(
        "--data-dir",
        default=os.getenv("KAKEIBO_DATA_DIR", "data"),
        type=Path,
        help="Directory to store JSON data (default: $KAKEIBO_DATA_DIR or ./data)",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="entity", required=True)

    category_parser = subparsers.add_parser("category", help="Manage categories")
    category_sub = category_parser.add_subparsers(dest="command", required=True)

    category_add = category_sub.add_parser("add", help="Add a new category")
    category_add.add_argument("name")
    category_add.add_argument("type", choices=["income", "expense"])

    category_list = category_sub.add_parser("list", help="List categories")
    category_list.add_argument("--type", choices=["income", "expense"])

    category_delete = category_sub.add_parser("delete", help="Delete a category")
    category_delete.add_argument("id")

    tx_parser = subparsers.add_parser("tx", help="Manage transactions")
    tx_sub = tx_parser.add_subparsers(dest="command", required=True)

    tx_add = tx_sub.add_parser("add", help="Record a new transaction")
    tx_add.add_argument("type", choices=["income", "expense"])
    tx_add.add_argument("amount")
    tx_add.add_argument("date", type=_parse_day)
    tx_add.add_argument("category_id")
    tx_add.add_argument("--memo")

    tx_list = tx_sub.add_parser("list", help="List a month's transactions, newest first")
    tx_list.add_argument("--month", type=_parse_month, help="YYYY-MM (default: current month)")

    tx_delete = tx_sub.add_parser("delete", help="Delete a transaction")
    tx_delete.add_argument("id")

    summary_parser = subparsers.add_parser("summary", help="Show a month's income and expense")
    summary_parser.add_argument("--month", type=_parse_month)

    calendar_parser = subparsers.add_parser("calendar", help="Show a month calendar with daily totals")
    calendar_parser.add_argument("--month", type=_parse_month)

    day_parser = subparsers.add_parser("day", help="List the transactions of one day")
    day_parser.add_argument("date", type=_parse_day)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    ledger, transaction_service, category_service = _load_services(args.data_dir)

    try:
        if args.entity == "category":
            handle_category(args, category_service)
        elif args.entity == "tx":
            handle_transaction(args, transaction_service, ledger)
        elif args.entity == "summary":
            handle_summary(args, ledger)
        elif args.entity == "calendar":
            handle_calendar(args, ledger)
        elif args.entity == "day":
            handle_day(args, transaction_service, ledger)
        else:  # pragma: no cover - argparse should prevent this
            parser.error(f"Unknown entity: {args.entity}")
            return 2
    except ValidationError as exc:
        print(f"Validation error: {exc}", file=sys.stderr)
        return 1
    except RecordNotFoundError as exc:
        print(str(exc), file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
