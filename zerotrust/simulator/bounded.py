"""Newest-first capped log used for events, metrics, pulses and alerts."""

from __future__ import annotations

from collections import deque
from collections.abc import Callable, Iterator
from typing import Generic, TypeVar

T = TypeVar("T")


class BoundedLog(Generic[T]):
    """Keeps at most *capacity* items, newest at index 0.

    Pushing onto a full log evicts the oldest item, so a simulation that
    runs for hours never grows its buffers.
    """

    def __init__(self, capacity: int) -> None:
        if capacity < 1:
            raise ValueError(f"capacity must be >= 1, got {capacity}")
        self.capacity = capacity
        self._items: deque[T] = deque(maxlen=capacity)

    def push(self, item: T) -> None:
        self._items.appendleft(item)

    def extend(self, items: list[T]) -> None:
        """Push *items* in order, so the last one ends up newest."""
        for item in items:
            self.push(item)

    def remove_where(self, predicate: Callable[[T], bool]) -> int:
        """Drop every item matching *predicate*; return how many were dropped."""
        kept = [it for it in self._items if not predicate(it)]
        removed = len(self._items) - len(kept)
        if removed:
            self._items = deque(kept, maxlen=self.capacity)
        return removed

    def clear(self) -> None:
        self._items.clear()

    @property
    def latest(self) -> T | None:
        return self._items[0] if self._items else None

    def items(self) -> list[T]:
        """Snapshot copy, newest first."""
        return list(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(list(self._items))

    def __getitem__(self, idx: int) -> T:
        return self._items[idx]
