"""Query results and the bounded max-heap that ranks them."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass
class Result:
    """A scored document returned by a query."""

    doc_id: int = 0
    text: Optional[str] = None
    score: float = 0.0


class MaxHeap:
    """A binary max-heap of :class:`Result` objects ordered by score."""

    def __init__(self, capacity: int) -> None:
        if capacity < 0:
            raise ValueError(f"heap capacity must not be negative: {capacity}")
        self.capacity = capacity
        # Slot 0 is unused so that children of i sit at 2i and 2i + 1.
        self._items: list[Optional[Result]] = [None]

    def __len__(self) -> int:
        return len(self._items) - 1

    def is_empty(self) -> bool:
        return len(self) == 0

    def is_full(self) -> bool:
        return len(self) == self.capacity

    def insert(self, result: Result) -> None:
        """Add a result; raise IndexError when the heap is full."""
        if self.is_full():
            raise IndexError("priority queue is full")
        items = self._items
        items.append(result)
        i = len(items) - 1
        while i > 1 and items[i // 2].score < result.score:
            items[i] = items[i // 2]
            i //= 2
        items[i] = result

    def pop(self) -> Result:
        """Remove and return the best-scored result; raise IndexError when empty."""
        if self.is_empty():
            raise IndexError("priority queue is empty")
        items = self._items
        top = items[1]
        last = items.pop()
        size = len(items) - 1
        if size == 0:
            return top
        i = 1
        while 2 * i <= size:
            child = 2 * i
            if child != size and items[child + 1].score > items[child].score:
                child += 1
            if last.score < items[child].score:
                items[i] = items[child]
                i = child
            else:
                break
        items[i] = last
        return top