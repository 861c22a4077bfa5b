"""Core business logic package for the expense store."""

from .config import Settings
from .events import EventBus, ExpenseEvent
from .exceptions import InvalidInputError, NotFoundError, PersistenceError
from .models import Expense
from .services import ExpenseStore
from .storage import (
    ExpenseRepository,
    InMemoryExpenseRepository,
    JSONExpenseRepository,
    JSONStorage,
)

__all__ = [
    "Expense",
    "ExpenseStore",
    "EventBus",
    "ExpenseEvent",
    "ExpenseRepository",
    "InMemoryExpenseRepository",
    "JSONExpenseRepository",
    "JSONStorage",
    "Settings",
    "InvalidInputError",
    "NotFoundError",
    "PersistenceError",
]
