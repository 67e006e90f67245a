"""Fixed-capacity candidate list used to collect the best matches of a query.

The list keeps its entries sorted by priority at all times. Insertion finds
its position by binary search, so a query that offers ``m`` candidates to a
list of capacity ``N`` costs ``O(m log N)`` comparisons plus the element
shifts of the underlying Python lists.
"""

from __future__ import annotations

from typing import Any, Generic, Iterator, TypeVar

T = TypeVar("T")


class BoundedPriorityList(Generic[T]):
    """Sorted collection that retains only the ``capacity`` best entries.

    In ascending mode (the default) "best" means lowest priority, which is
    what nearest-neighbor search wants: priorities are distances. Descending
    mode retains the highest priorities instead.

    Entries with equal priority keep their insertion order.
    """

    def __init__(self, capacity: int, ascending: bool = True) -> None:
        if capacity < 0:
            raise ValueError(f"capacity must be >= 0, received {capacity}")
        self._capacity = int(capacity)
        self._ascending = bool(ascending)
        self._elements: list[T] = []
        self._priorities: list[Any] = []

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def ascending(self) -> bool:
        return self._ascending

    @property
    def is_full(self) -> bool:
        """Whether the list already holds ``capacity`` entries."""

        return len(self._elements) >= self._capacity

    @property
    def max_priority(self) -> Any:
        """Return the priority of the worst retained entry.

        Raises:
            IndexError: if the list is empty.
        """

        if not self._priorities:
            raise IndexError("max_priority requested from an empty BoundedPriorityList")
        return self._priorities[-1]

    @property
    def min_priority(self) -> Any:
        """Return the priority of the best retained entry."""

        if not self._priorities:
            raise IndexError("min_priority requested from an empty BoundedPriorityList")
        return self._priorities[0]

    @property
    def priorities(self) -> tuple[Any, ...]:
        return tuple(self._priorities)

    def reserve(self, capacity: int) -> None:
        """Set a new capacity, dropping the worst entries if it shrinks."""

        if capacity < 0:
            raise ValueError(f"capacity must be >= 0, received {capacity}")
        self._capacity = int(capacity)
        if len(self._elements) > self._capacity:
            del self._elements[self._capacity :]
            del self._priorities[self._capacity :]

    def clear(self) -> None:
        self._elements.clear()
        self._priorities.clear()

    def _ranks_before(self, left: Any, right: Any) -> bool:
        if self._ascending:
            return left < right
        return left > right

    def _insertion_point(self, priority: Any) -> int:
        # Rightmost position keeps equal priorities in insertion order.
        lo, hi = 0, len(self._priorities)
        while lo < hi:
            mid = (lo + hi) // 2
            if self._ranks_before(priority, self._priorities[mid]):
                hi = mid
            else:
                lo = mid + 1
        return lo

    def add(self, element: T, priority: Any) -> bool:
        """Offer ``element``; return ``True`` if it was retained.

        A full list only accepts an element whose priority is strictly
        better than the current worst, which is then evicted.
        """

        if self._capacity == 0:
            return False
        if self.is_full:
            if not self._ranks_before(priority, self._priorities[-1]):
                return False
            self._elements.pop()
            self._priorities.pop()
        position = self._insertion_point(priority)
        self._elements.insert(position, element)
        self._priorities.insert(position, priority)
        return True

    def items(self) -> Iterator[tuple[T, Any]]:
        """Iterate ``(element, priority)`` pairs from best to worst."""

        return iter(zip(self._elements, self._priorities))

    def __getitem__(self, position: int) -> T:
        return self._elements[position]

    def __iter__(self) -> Iterator[T]:
        return iter(self._elements)

    def __len__(self) -> int:
        return len(self._elements)

    def __repr__(self) -> str:
        order = "ascending" if self._ascending else "descending"
        return (
            f"BoundedPriorityList(capacity={self._capacity}, {order}, "
            f"entries={list(self.items())!r})"
        )


__all__ = ["BoundedPriorityList"]
