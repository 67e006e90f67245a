"""
Median-split KD-tree construction into array-heap storage.

The tree is stored implicitly: slot ``i`` has children ``2i + 1`` and
``2i + 2``. Each level splits on the next axis in turn, and every node is
the median of its subset along that axis, so the tree stays height balanced
without any explicit rebalancing.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import jax
import jax.numpy as jnp
from jaxtyping import Array

from .dtypes import as_index
from .navigator import left_child_index, right_child_index


@jax.jit
def _take_row(points: Array, index: Array) -> Array:
    return points[index]


@jax.jit
def _argsort_subset(points: Array, subset: Array, axis: Array) -> Array:
    keys = jnp.take(points, subset, axis=0)[:, axis]
    return jnp.argsort(keys, stable=True)


def heap_capacity(count: int) -> int:
    """Smallest power of two strictly greater than ``count``."""

    return 1 << int(count).bit_length()


@dataclass(frozen=True, eq=False)
class KDTreeStorage:
    """
    Flat storage of a built KD-tree.

    Attributes:
        points: ``(capacity, dimensions)`` coordinates in heap order;
            unoccupied rows are zero.
        tags: Tag for each slot; ``None`` where the slot is unoccupied.
        occupied: Boolean mask of populated slots.
        source_index: Input position stored in each slot (``-1`` if empty).
        slot_sources: Host copy of ``source_index`` used for traversal.
        count: Number of stored points.
        dimensions: Coordinates per point.
    """

    points: Array
    tags: tuple[Any, ...]
    occupied: Array
    source_index: Array
    slot_sources: tuple[int, ...]
    count: int
    dimensions: int

    @property
    def capacity(self) -> int:
        return len(self.slot_sources)

    @property
    def height(self) -> int:
        """Number of levels holding at least one node."""

        deepest = max(
            (i for i, source in enumerate(self.slot_sources) if source >= 0),
            default=-1,
        )
        return (deepest + 1).bit_length()

    def is_occupied(self, index: int) -> bool:
        return 0 <= index < len(self.slot_sources) and self.slot_sources[index] >= 0

    def point(self, index: int) -> Array:
        return _take_row(self.points, index)

    def occupied_slots(self) -> list[int]:
        return [i for i, source in enumerate(self.slot_sources) if source >= 0]


def _partition(
    points: Array,
    subset: list[int],
    index: int,
    axis: int,
    dimensions: int,
    slot_sources: list[int],
) -> None:
    order = _argsort_subset(points, as_index(subset), axis).tolist()
    ordered = [subset[i] for i in order]

    median = len(ordered) // 2
    slot_sources[index] = ordered[median]

    next_axis = (axis + 1) % dimensions
    for child, part in (
        (left_child_index(index), ordered[:median]),
        (right_child_index(index), ordered[median + 1 :]),
    ):
        if len(part) == 1:
            slot_sources[child] = part[0]
        elif len(part) > 1:
            _partition(points, part, child, next_axis, dimensions, slot_sources)


def build_heap_storage(points: Array, tags: tuple[Any, ...]) -> KDTreeStorage:
    """Build heap-ordered storage from validated ``(n, d)`` points and tags."""

    count, dimensions = (int(s) for s in points.shape)
    if count < 1:
        raise ValueError("Need at least one point")
    if len(tags) != count:
        raise ValueError(f"expected {count} tags, received {len(tags)}")

    slot_sources = [-1] * heap_capacity(count)
    _partition(points, list(range(count)), 0, 0, dimensions, slot_sources)

    source_index = as_index(slot_sources)
    occupied = source_index >= 0
    gathered = jnp.take(points, jnp.maximum(source_index, 0), axis=0)
    heap_points = jnp.where(occupied[:, None], gathered, jnp.zeros_like(gathered))
    heap_tags = tuple(tags[s] if s >= 0 else None for s in slot_sources)

    return KDTreeStorage(
        points=heap_points,
        tags=heap_tags,
        occupied=occupied,
        source_index=source_index,
        slot_sources=tuple(slot_sources),
        count=count,
        dimensions=dimensions,
    )


__all__ = ["KDTreeStorage", "build_heap_storage", "heap_capacity"]
