"""
store.py — Observable Parameter Store

Purpose:
- Hold one editable value (a parameter dataclass or statement set) and
  notify subscribers synchronously after every change.
- Provide the process-wide DebtParameters store shared by the monthly
  forecast and the investment model: a write through either view is visible
  to every reader before its next recompute.
"""

import dataclasses
from typing import Any, Callable, Generic, List, TypeVar

from fincast.core.logging import get_logger
from fincast.services.modeling.types import DebtParameters

logger = get_logger(__name__)

T = TypeVar("T")

Subscriber = Callable[[Any], None]


class ObservableStore(Generic[T]):
    """
    Usage:
        store = ObservableStore(ProjectionParameters())
        unsubscribe = store.subscribe(lambda params: recompute())
        store.update(revenue_growth=20.0)   # recompute() runs here
        unsubscribe()
    """

    def __init__(self, value: T):
        self._value = value
        self._subscribers: List[Subscriber] = []

    def get(self) -> T:
        return self._value

    def set(self, value: T) -> None:
        self._value = value
        self._notify()

    def update(self, **changes: Any) -> T:
        """Replace fields of a dataclass value; unknown field names raise TypeError."""
        self.set(dataclasses.replace(self._value, **changes))
        return self._value

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def _notify(self) -> None:
        logger.debug("%s changed; notifying %d subscriber(s)", type(self._value).__name__, len(self._subscribers))
        # Copy: a subscriber may unsubscribe while being notified
        for callback in list(self._subscribers):
            callback(self._value)


# Process-wide shared debt terms
debt_store: ObservableStore[DebtParameters] = ObservableStore(DebtParameters())
