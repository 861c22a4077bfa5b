"""Console interface for the expense store."""

from __future__ import annotations

import argparse
import sys
from datetime import date
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import List, Optional

from expense_store.config import Settings
from expense_store.exceptions import InvalidInputError, NotFoundError, PersistenceError
from expense_store.logging_utils import configure_root_logger
from expense_store.models import Expense
from expense_store.services import ExpenseStore
from expense_store.storage import JSONExpenseRepository, JSONStorage


def _parse_date(value: str) -> str:
    try:
        date.fromisoformat(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(
            f"Invalid date '{value}'. Expected format YYYY-MM-DD."
        ) from exc
    return value


def _parse_value(value: str) -> str:
    try:
        amount = Decimal(value)
    except InvalidOperation as exc:
        raise argparse.ArgumentTypeError("Value must be a numeric value") from exc
    if not amount.is_finite():
        raise argparse.ArgumentTypeError("Value must be a finite number")
    return value


def _load_store(data_dir: Path) -> ExpenseStore:
    return ExpenseStore(JSONExpenseRepository(JSONStorage(data_dir)))


def format_expense(expense: Expense, currency: str) -> str:
    return (
        f"[{expense.id}] {expense.date.strftime('%b %d')}  {expense.name}  "
        f"{currency} {expense.value:.2f}"
    )


def handle_command(args: argparse.Namespace, store: ExpenseStore, currency: str) -> None:
    if args.command == "add":
        expense = store.add(args.name, args.date, args.value)
        print("Expense added:\n" + format_expense(expense, currency))
    elif args.command == "list":
        expenses = store.list()
        if not expenses:
            print("No expenses yet.")
            return
        print(f"{len(expenses)} expenses (total {currency} {store.total():.2f}):")
        for position, expense in enumerate(expenses):
            print(f"{position:>3}  " + format_expense(expense, currency))
    elif args.command == "edit":
        changes = {"name": args.name, "date": args.date, "value": args.value}
        cleaned = {k: v for k, v in changes.items() if v is not None}
        expense = store.update(args.id, cleaned)
        print("Expense updated:\n" + format_expense(expense, currency))
    elif args.command == "delete":
        target = args.position if args.position is not None else args.id
        expense = store.delete(target)
        print(f"Expense {expense.id} deleted.")
    elif args.command == "delete-many":
        removed = store.delete_many(args.positions)
        print(f"Deleted {len(removed)} expenses.")
    elif args.command == "total":
        print(f"Total: {currency} {store.total():.2f}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Expense Store CLI")
    parser.add_argument(
        "--data-dir",
        type=Path,
        help="Directory to store JSON data (default: $EXPENSE_STORE_DATA_DIR or ./data)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    add = subparsers.add_parser("add", help="Add a new expense")
    add.add_argument("name")
    add.add_argument("date", type=_parse_date)
    add.add_argument("value", type=_parse_value)

    subparsers.add_parser("list", help="List expenses ordered by date")

    edit = subparsers.add_parser("edit", help="Edit an existing expense")
    edit.add_argument("id")
    edit.add_argument("--name")
    edit.add_argument("--date", type=_parse_date)
    edit.add_argument("--value", type=_parse_value)

    delete = subparsers.add_parser("delete", help="Delete an expense by id or list position")
    delete_target = delete.add_mutually_exclusive_group(required=True)
    delete_target.add_argument("id", nargs="?")
    delete_target.add_argument("--position", type=int)

    delete_many = subparsers.add_parser(
        "delete-many", help="Delete the expenses at several list positions"
    )
    delete_many.add_argument("positions", type=int, nargs="+")

    subparsers.add_parser("total", help="Sum of all expense values")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    settings = Settings.from_env()
    configure_root_logger(settings.log_level)

    try:
        store = _load_store(args.data_dir or settings.data_dir)
        handle_command(args, store, settings.currency)
    except InvalidInputError as exc:
        print(f"Validation error: {exc}", file=sys.stderr)
        return 1
    except NotFoundError as exc:
        print(str(exc), file=sys.stderr)
        return 1
    except PersistenceError as exc:
        print(f"Storage error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
