"""A pool of reusable objects such as client connections."""

from __future__ import annotations

import threading
from collections import deque
from collections.abc import Callable
from typing import Any


class PoolClosedError(RuntimeError):
    """Raised when borrowing from a closed pool."""


class PoolExhaustedError(RuntimeError):
    """Raised to a waiting borrower when the pool closes before an item is returned."""


class _Waiter:
    __slots__ = ("event", "item", "cancelled")

    def __init__(self) -> None:
        self.event = threading.Event()
        self.item: Any = None
        self.cancelled = False


class Pool:
    """Keeps up to ``max_idle`` idle items and at most ``max_active`` live ones."""

    def __init__(
        self,
        factory: Callable[[], Any],
        finalizer: Callable[[Any], None],
        max_idle: int,
        max_active: int,
    ) -> None:
        self.max_idle = max_idle
        self.max_active = max_active
        self._factory = factory
        self._finalizer = finalizer
        self._idles: deque[Any] = deque()
        self._waiting: deque[_Waiter] = deque()
        self._active = 0
        self._closed = False
        self._lock = threading.Lock()

    def __enter__(self) -> Pool:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def get(self) -> Any:
        """Borrow an item: an idle one, a new one, or one returned while waiting."""
        waiter: _Waiter | None = None
        with self._lock:
            if self._closed:
                raise PoolClosedError("pool closed")
            if self._idles:
                return self._idles.popleft()
            if self._active >= self.max_active:
                waiter = _Waiter()
                self._waiting.append(waiter)
            else:
                self._active += 1  # hold a place for the new item

        if waiter is not None:
            waiter.event.wait()
            if waiter.cancelled:
                raise PoolExhaustedError("reach max connection limit")
            return waiter.item

        try:
            return self._factory()
        except BaseException:
            with self._lock:
                self._active -= 1
            raise

    def put(self, item: Any) -> None:
        """Return an item; it goes to a waiter, to the idle set, or is finalised."""
        with self._lock:
            if not self._closed:
                if self._waiting:
                    waiter = self._waiting.popleft()
                    waiter.item = item
                    waiter.event.set()
                    return
                if len(self._idles) < self.max_idle:
                    self._idles.append(item)
                    return
                self._active -= 1
        self._finalizer(item)

    def close(self) -> None:
        """Close the pool and finalise idle items; closing twice does nothing."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            idles = list(self._idles)
            self._idles.clear()
            waiters = list(self._waiting)
            self._waiting.clear()
        for waiter in waiters:
            waiter.cancelled = True
            waiter.event.set()
        for item in idles:
            self._finalizer(item)