"""Result and event contracts shared by kdtreex queries."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, NamedTuple, Union

import numpy as np
from beartype.typing import Callable
from jaxtyping import Array, ArrayLike

PointsLike = Union[ArrayLike, Sequence]
TagsLike = Union[Sequence, np.ndarray, Array]
Metric = Callable[[Array, Array], Any]
ResultBuilder = Callable[[Array, Any], Any]


class Neighbor(NamedTuple):
    """Default search record: a stored point and its tag."""

    point: Array
    tag: Any


class SearchStats(NamedTuple):
    """Counters describing a single tree query."""

    kind: str
    nodes_visited: int
    branches_pruned: int
    candidates_offered: int
    results: int


@dataclass(frozen=True, eq=False)
class SearchResult(Sequence):
    """Ordered records returned by a query, closest first.

    ``records`` holds whatever the caller's result builder produced;
    ``distances`` and ``indices`` are the metric values and input
    positions of the same matches.
    """

    records: tuple[Any, ...]
    distances: tuple[float, ...]
    indices: tuple[int, ...]

    @classmethod
    def empty(cls) -> "SearchResult":
        return cls(records=(), distances=(), indices=())

    @property
    def found(self) -> bool:
        """Whether at least one match was found."""

        return len(self.records) > 0

    def __getitem__(self, position):
        return self.records[position]

    def __len__(self) -> int:
        return len(self.records)

    def __repr__(self) -> str:
        return f"SearchResult(records={self.records!r}, distances={self.distances!r})"


__all__ = [
    "Metric",
    "Neighbor",
    "PointsLike",
    "ResultBuilder",
    "SearchResult",
    "SearchStats",
    "TagsLike",
]
