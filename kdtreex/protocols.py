"""Structural protocols for heap-ordered tree storage."""

from __future__ import annotations

from typing import Any, Protocol

from jaxtyping import Array


class TreeStorageProtocol(Protocol):
    """Parallel point/tag buffers addressed with array-heap index math."""

    points: Array
    tags: tuple[Any, ...]
    occupied: Array
    dimensions: int

    def is_occupied(self, index: int) -> bool: ...

    def point(self, index: int) -> Array: ...


class SourceIndexedStorageProtocol(TreeStorageProtocol, Protocol):
    """Adds the slot-to-input-position mapping recorded during a build."""

    source_index: Array
    slot_sources: tuple[int, ...]
    count: int


__all__ = ["SourceIndexedStorageProtocol", "TreeStorageProtocol"]
