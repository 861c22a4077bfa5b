"""Change notification for expense store mutations.

Presentation layers subscribe to the store and re-query ``list()`` when an
event arrives; events only carry the affected identities, never snapshots.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Tuple

from .logging_utils import get_logger

LOGGER = get_logger(__name__)

ADDED = "added"
UPDATED = "updated"
DELETED = "deleted"


@dataclass(frozen=True)
class ExpenseEvent:
    action: str
    expense_ids: Tuple[str, ...]


Listener = Callable[[ExpenseEvent], None]


class EventBus:
    """Synchronous publish/subscribe hub, listeners called in subscription order."""

    def __init__(self) -> None:
        self._listeners: List[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        if not callable(listener):
            raise TypeError("listener must be callable")
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def publish(self, event: ExpenseEvent) -> None:
        # Copy so listeners may unsubscribe while being notified.
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                LOGGER.exception("Listener %r failed handling %s event", listener, event.action)

    def __len__(self) -> int:
        return len(self._listeners)
