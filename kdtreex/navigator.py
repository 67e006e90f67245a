"""Read-only navigation over heap-ordered tree storage.

A navigator is just a ``(storage, index)`` pair. Moving to a child or the
parent computes the neighbouring index and returns a fresh navigator, so
navigators never alias or mutate one another.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Any, Iterator, Optional

from jaxtyping import Array

from .protocols import TreeStorageProtocol


def left_child_index(index: int) -> int:
    return 2 * index + 1


def right_child_index(index: int) -> int:
    return 2 * index + 2


def parent_index(index: int) -> int:
    return (index - 1) // 2


def node_depth(index: int) -> int:
    """Depth of heap slot ``index`` (the root is depth 0)."""

    return (int(index) + 1).bit_length() - 1


@dataclass(frozen=True, eq=False)
class TreeNavigator:
    """Cursor over one occupied slot of a tree's flat storage."""

    storage: TreeStorageProtocol
    index: int = 0

    def __post_init__(self) -> None:
        if not self.storage.is_occupied(self.index):
            raise IndexError(f"slot {self.index} does not hold a tree node")

    def _at(self, index: int) -> Optional["TreeNavigator"]:
        if not self.storage.is_occupied(index):
            return None
        return TreeNavigator(self.storage, index)

    @property
    def point(self) -> Array:
        return self.storage.point(self.index)

    @property
    def tag(self) -> Any:
        return self.storage.tags[self.index]

    @property
    def left(self) -> Optional["TreeNavigator"]:
        return self._at(left_child_index(self.index))

    @property
    def right(self) -> Optional["TreeNavigator"]:
        return self._at(right_child_index(self.index))

    @property
    def parent(self) -> Optional["TreeNavigator"]:
        if self.index == 0:
            return None
        return self._at(parent_index(self.index))

    @property
    def depth(self) -> int:
        return node_depth(self.index)

    @property
    def split_dimension(self) -> int:
        """Axis this node splits its subtree on."""

        return self.depth % self.storage.dimensions

    @property
    def is_leaf(self) -> bool:
        return self.left is None and self.right is None

    def iter_level_order(self) -> Iterator["TreeNavigator"]:
        """Yield this node and all of its descendants breadth-first."""

        queue = deque([self])
        while queue:
            node = queue.popleft()
            yield node
            for child in (node.left, node.right):
                if child is not None:
                    queue.append(child)

    def __repr__(self) -> str:
        return f"TreeNavigator(index={self.index}, tag={self.tag!r})"


__all__ = [
    "TreeNavigator",
    "left_child_index",
    "node_depth",
    "parent_index",
    "right_child_index",
]
