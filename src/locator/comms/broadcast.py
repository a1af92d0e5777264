"""BroadcastCell — replay-to-late-subscribers state slot.

A cell holds the most recently emitted value. Every new subscriber is called
with that value immediately, then with each later emission, synchronously and
in subscription order. Resolvers own the cells they publish to; the
composition root hands them to whoever needs to observe.
"""

from __future__ import annotations

import threading
from collections import deque
from typing import Callable, Generic, TypeVar

from loguru import logger

T = TypeVar("T")


class Subscription:
    """Handle returned by ``BroadcastCell.subscribe``; call or ``close()`` to stop."""

    def __init__(self, cell: "BroadcastCell", callback: Callable) -> None:
        self._cell = cell
        self._callback = callback
        self.closed = False

    def close(self) -> None:
        if not self.closed:
            self._cell.unsubscribe(self._callback)
            self.closed = True

    def __call__(self) -> None:
        self.close()


class BroadcastCell(Generic[T]):
    """Current-value multicast cell.

    ``None`` is the absent sentinel unless the cell is created with another
    initial value.
    """

    def __init__(self, initial: T | None = None, name: str = "") -> None:
        self.name = name
        self._value: T | None = initial
        self._lock = threading.RLock()
        self._subscribers: list[Callable[[T | None], None]] = []
        self._pending: deque = deque()
        self._delivering = False

    @property
    def value(self) -> T | None:
        """The last emitted value (or the initial sentinel)."""
        return self._value

    def subscribe(self, callback: Callable[[T | None], None]) -> Subscription:
        """Register ``callback`` and call it with the current value right away.

        The replay runs under the cell lock, so it is always the first value
        the callback sees; a replay must not wait on another thread emitting
        to this cell.
        """
        with self._lock:
            self._subscribers.append(callback)
            current = self._value
            self._notify(callback, current)
        return Subscription(self, callback)

    def unsubscribe(self, callback: Callable[[T | None], None]) -> None:
        with self._lock:
            try:
                self._subscribers.remove(callback)
            except ValueError:
                pass

    def emit(self, value: T | None) -> None:
        """Store ``value`` and deliver it to every current subscriber.

        An emit made from inside a subscriber callback is delivered after the
        round in progress, so each subscriber sees emissions in call order.
        The same holds for an emit from another thread while a round is
        running: it is queued and delivered by the thread already delivering.
        Callbacks run outside the lock.
        """
        with self._lock:
            self._pending.append(value)
            if self._delivering:
                return
            self._delivering = True
        try:
            while True:
                with self._lock:
                    if not self._pending:
                        self._delivering = False
                        return
                    next_value = self._pending.popleft()
                    self._value = next_value
                    subscribers = list(self._subscribers)
                for callback in subscribers:
                    self._notify(callback, next_value)
        except BaseException:
            with self._lock:
                self._delivering = False
                self._pending.clear()
            raise

    def clear(self) -> None:
        """Reset to the absent sentinel."""
        self.emit(None)

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def _notify(self, callback: Callable[[T | None], None], value: T | None) -> None:
        try:
            callback(value)
        except Exception:
            logger.exception(f"Broadcast subscriber failed on cell {self.name or id(self)}")
