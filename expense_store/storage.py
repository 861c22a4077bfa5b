"""Persistence collaborators for the expense store."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Iterable, List, Protocol

from .exceptions import PersistenceError
from .models import Expense, sort_key

__all__ = [
    "ExpenseRepository",
    "InMemoryExpenseRepository",
    "JSONExpenseRepository",
    "JSONStorage",
]


class JSONStorage:
    """Simple file-based JSON storage with crash-safe writes."""

    def __init__(self, base_path: Path) -> None:
        self._base_path = Path(base_path)
        try:
            self._base_path.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise PersistenceError(f"Unable to create data directory {self._base_path}") from exc

    def load(self, resource: str) -> List[Dict[str, Any]]:
        path = self._base_path / resource
        if not path.exists():
            return []
        try:
            with path.open("r", encoding="utf-8") as handle:
                payload = json.load(handle)
        except json.JSONDecodeError as exc:
            raise PersistenceError(f"Corrupted JSON data in {path}") from exc
        except OSError as exc:
            raise PersistenceError(f"Unable to read from {path}") from exc

        if not isinstance(payload, list):
            raise PersistenceError(f"Expected list payload in {path}")
        return payload

    def save(self, resource: str, records: Iterable[Dict[str, Any]]) -> None:
        path = self._base_path / resource
        temp_path = path.with_suffix(path.suffix + ".tmp")
        try:
            with temp_path.open("w", encoding="utf-8") as handle:
                json.dump(list(records), handle, indent=2)
                handle.flush()
            # Use replace for atomic move on POSIX; ensures crash-safe persistence.
            temp_path.replace(path)
        except OSError as exc:
            raise PersistenceError(f"Unable to write to {path}") from exc

    @property
    def base_path(self) -> Path:
        return self._base_path


class ExpenseRepository(Protocol):
    """Operations the store needs from a durable backend."""

    def insert(self, expense: Expense) -> None: ...

    def replace(self, expense: Expense) -> None: ...

    def remove(self, expense_ids: Iterable[str]) -> None: ...

    def query_sorted(self) -> List[Expense]: ...


class InMemoryExpenseRepository:
    """Dict-backed repository; contents vanish with the process."""

    def __init__(self, expenses: Iterable[Expense] = ()) -> None:
        self._records: Dict[str, Expense] = {expense.id: expense for expense in expenses}

    def insert(self, expense: Expense) -> None:
        if expense.id in self._records:
            raise PersistenceError(f"Expense {expense.id} already stored")
        self._records[expense.id] = expense

    def replace(self, expense: Expense) -> None:
        if expense.id not in self._records:
            raise PersistenceError(f"Expense {expense.id} is not stored")
        self._records[expense.id] = expense

    def remove(self, expense_ids: Iterable[str]) -> None:
        ids = list(expense_ids)
        missing = [expense_id for expense_id in ids if expense_id not in self._records]
        if missing:
            raise PersistenceError(f"Expenses not stored: {', '.join(missing)}")
        for expense_id in ids:
            del self._records[expense_id]

    def query_sorted(self) -> List[Expense]:
        return sorted(self._records.values(), key=sort_key)


class JSONExpenseRepository:
    """Stores expenses as a JSON list inside a :class:`JSONStorage` resource."""

    def __init__(self, storage: JSONStorage, resource: str = "expenses.json") -> None:
        self._storage = storage
        self._resource = resource

    @property
    def storage(self) -> JSONStorage:
        return self._storage

    def insert(self, expense: Expense) -> None:
        records = self._load_records()
        if expense.id in records:
            raise PersistenceError(f"Expense {expense.id} already stored")
        records[expense.id] = expense
        self._save_records(records)

    def replace(self, expense: Expense) -> None:
        records = self._load_records()
        if expense.id not in records:
            raise PersistenceError(f"Expense {expense.id} is not stored")
        records[expense.id] = expense
        self._save_records(records)

    def remove(self, expense_ids: Iterable[str]) -> None:
        records = self._load_records()
        ids = list(expense_ids)
        missing = [expense_id for expense_id in ids if expense_id not in records]
        if missing:
            raise PersistenceError(f"Expenses not stored: {', '.join(missing)}")
        for expense_id in ids:
            del records[expense_id]
        self._save_records(records)

    def query_sorted(self) -> List[Expense]:
        return sorted(self._load_records().values(), key=sort_key)

    def _load_records(self) -> Dict[str, Expense]:
        raw_records = self._storage.load(self._resource)
        try:
            return {payload["id"]: Expense.from_dict(payload) for payload in raw_records}
        except (KeyError, TypeError, ValueError, ArithmeticError) as exc:
            raise PersistenceError(f"Malformed expense record in {self._resource}") from exc

    def _save_records(self, records: Dict[str, Expense]) -> None:
        ordered = sorted(records.values(), key=sort_key)
        self._storage.save(self._resource, [expense.to_dict() for expense in ordered])
