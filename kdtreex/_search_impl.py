"""Branch-and-bound traversal shared by nearest-neighbor and radial queries."""

from __future__ import annotations

from dataclasses import dataclass

import jax
from jaxtyping import Array

from ._build_impl import KDTreeStorage
from .bounds import BoundingBox
from .candidates import BoundedPriorityList
from .navigator import left_child_index, right_child_index
from .types import Metric


@jax.jit
def _split_value(node: Array, target: Array, axis: Array) -> tuple[Array, Array]:
    """Return the node's coordinate on ``axis`` and whether target lies left of it."""

    split = node[axis]
    return split, target[axis] <= split


@dataclass
class _Traversal:
    storage: KDTreeStorage
    target: Array
    metric: Metric
    candidates: BoundedPriorityList[int]
    max_distance: float
    nodes_visited: int = 0
    branches_pruned: int = 0
    candidates_offered: int = 0

    def _should_descend(self, bound: float) -> bool:
        if bound > self.max_distance:
            return False
        if not self.candidates.is_full:
            return True
        return bound < self.candidates.max_priority

    def visit(self, index: int, box: BoundingBox, depth: int) -> None:
        if not self.storage.is_occupied(index):
            return
        self.nodes_visited += 1

        axis = depth % self.storage.dimensions
        node = self.storage.point(index)
        split, target_left = _split_value(node, self.target, axis)

        left_box = box.with_upper(axis, split)
        right_box = box.with_lower(axis, split)
        if bool(target_left):
            near, near_box = left_child_index(index), left_box
            far, far_box = right_child_index(index), right_box
        else:
            near, near_box = right_child_index(index), right_box
            far, far_box = left_child_index(index), left_box

        self.visit(near, near_box, depth + 1)

        if self.storage.is_occupied(far):
            bound = far_box.distance_to(self.target, self.metric)
            if self._should_descend(bound):
                self.visit(far, far_box, depth + 1)
            else:
                self.branches_pruned += 1

        distance = float(self.metric(node, self.target))
        if distance <= self.max_distance:
            self.candidates_offered += 1
            self.candidates.add(index, distance)


def search_tree(
    storage: KDTreeStorage,
    target: Array,
    box: BoundingBox,
    metric: Metric,
    candidates: BoundedPriorityList[int],
    max_distance: float,
) -> tuple[int, int, int]:
    """Fill ``candidates`` with the closest slots within ``max_distance``.

    Args:
        storage: Built tree storage.
        target: Query point with shape ``(dimensions,)``.
        box: Region covered by the root, usually an infinite box.
        metric: Distance function ``(point, target) -> scalar``.
        candidates: Ascending list whose capacity caps the result count.
            Slot indices are added with their metric values as priorities.
        max_distance: Largest admissible metric value (inclusive).

    Returns:
        ``(nodes_visited, branches_pruned, candidates_offered)``.
    """

    if candidates.capacity == 0:
        return 0, 0, 0
    traversal = _Traversal(
        storage=storage,
        target=target,
        metric=metric,
        candidates=candidates,
        max_distance=float(max_distance),
    )
    traversal.visit(0, box, 0)
    return (
        traversal.nodes_visited,
        traversal.branches_pruned,
        traversal.candidates_offered,
    )


__all__ = ["search_tree"]
