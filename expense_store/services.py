"""Framework-agnostic expense store service."""

from __future__ import annotations

import threading
from dataclasses import replace
from decimal import MAX_EMAX, MAX_PREC, MIN_EMIN, Decimal, localcontext
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Union
from uuid import uuid4

from .events import ADDED, DELETED, UPDATED, EventBus, ExpenseEvent, Listener
from .exceptions import InvalidInputError, NotFoundError
from .logging_utils import get_logger
from .models import Expense, sort_key
from .storage import ExpenseRepository, InMemoryExpenseRepository
from .validators import parse_value, validate_changes, validate_date, validate_name

LOGGER = get_logger(__name__)

DeleteTarget = Union[str, int]


class ExpenseStore:
    """Owns expense records, serves date-ordered reads and persists every write."""

    def __init__(
        self,
        repository: Optional[ExpenseRepository] = None,
        events: Optional[EventBus] = None,
    ) -> None:
        self._repository = repository if repository is not None else InMemoryExpenseRepository()
        self._events = events if events is not None else EventBus()
        self._lock = threading.RLock()
        self._expenses: Dict[str, Expense] = {}
        self._next_sequence = 0
        self.reload()  # Hydrate in-memory cache from persistence on construction.

    # Public API -----------------------------------------------------------
    def add(self, name: object, date: object, value: object) -> Expense:
        expense_name = validate_name(name)
        expense_date = validate_date(date)
        expense_value = parse_value(value)
        with self._lock:
            expense = Expense(
                id=uuid4().hex,
                name=expense_name,
                date=expense_date,
                value=expense_value,
                sequence=self._next_sequence,
            )
            self._repository.insert(expense)
            self._expenses[expense.id] = expense
            self._next_sequence += 1
            LOGGER.info("Added expense %s (%s on %s)", expense.id, expense.name, expense.date)
            self._events.publish(ExpenseEvent(ADDED, (expense.id,)))
            return expense

    def list(self) -> List[Expense]:
        with self._lock:
            return self._ordered()

    def get(self, expense_id: str) -> Expense:
        """Return an expense or raise if it does not exist."""
        with self._lock:
            return self._get_or_raise(expense_id)

    def update(self, expense_id: str, changes: Mapping[str, object]) -> Expense:
        cleaned = validate_changes(changes)
        with self._lock:
            existing = self._get_or_raise(expense_id)
            updated = replace(existing, **cleaned)
            if updated.to_dict() == existing.to_dict():
                return existing
            self._repository.replace(updated)
            self._expenses[expense_id] = updated
            LOGGER.info("Updated expense %s (%s)", expense_id, ", ".join(sorted(cleaned)))
            self._events.publish(ExpenseEvent(UPDATED, (expense_id,)))
            return updated

    def delete(self, target: DeleteTarget) -> Expense:
        """Remove one expense by identity (``str``) or by position in ``list()``."""
        with self._lock:
            if isinstance(target, bool) or not isinstance(target, (str, int)):
                raise InvalidInputError("delete target must be an expense id or a list position")
            if isinstance(target, int):
                expense = self._resolve_positions([target])[0]
            else:
                expense = self._get_or_raise(target)
            self._remove([expense])
            return expense

    def delete_many(self, positions: Iterable[int]) -> List[Expense]:
        """Remove every expense at ``positions`` of the current sorted view.

        Positions are translated to identities before anything is removed, so
        earlier removals never shift later positions. Nothing is removed when
        any position fails to resolve.
        """
        with self._lock:
            unique = sorted(set(self._check_positions(positions)))
            expenses = self._resolve_positions(unique)
            if expenses:
                self._remove(expenses)
            return expenses

    def total(self) -> Decimal:
        with self._lock:
            values = [expense.value for expense in self._expenses.values()]
        # Exact sum: no rounding to the default 28 digits.
        with localcontext() as context:
            context.prec = MAX_PREC
            context.Emax = MAX_EMAX
            context.Emin = MIN_EMIN
            return sum(values, Decimal("0"))

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        return self._events.subscribe(listener)

    def reload(self) -> None:
        """Load existing expenses from persistence."""
        with self._lock:
            records = self._repository.query_sorted()
            self._expenses = {expense.id: expense for expense in records}
            self._next_sequence = max((expense.sequence for expense in records), default=-1) + 1
            LOGGER.debug("Loaded %s expenses", len(self._expenses))

    def __len__(self) -> int:
        with self._lock:
            return len(self._expenses)

    def __contains__(self, expense_id: object) -> bool:
        with self._lock:
            return expense_id in self._expenses

    # Internal helpers -----------------------------------------------------
    def _ordered(self) -> List[Expense]:
        return sorted(self._expenses.values(), key=sort_key)

    def _get_or_raise(self, expense_id: str) -> Expense:
        try:
            return self._expenses[expense_id]
        except KeyError as exc:
            raise NotFoundError(f"Expense {expense_id} not found") from exc

    @staticmethod
    def _check_positions(positions: Iterable[int]) -> List[int]:
        if isinstance(positions, (str, bytes)):
            raise InvalidInputError("positions must be a collection of integers")
        checked = list(positions)
        for position in checked:
            if isinstance(position, bool) or not isinstance(position, int):
                raise InvalidInputError(f"position {position!r} is not an integer")
        return checked

    def _resolve_positions(self, positions: List[int]) -> List[Expense]:
        view = self._ordered()
        for position in positions:
            if position < 0 or position >= len(view):
                raise NotFoundError(
                    f"No expense at position {position} (store holds {len(view)})"
                )
        return [view[position] for position in positions]

    def _remove(self, expenses: List[Expense]) -> None:
        ids = [expense.id for expense in expenses]
        self._repository.remove(ids)
        for expense_id in ids:
            del self._expenses[expense_id]
        LOGGER.info("Deleted %s expense(s): %s", len(ids), ", ".join(ids))
        self._events.publish(ExpenseEvent(DELETED, tuple(ids)))
