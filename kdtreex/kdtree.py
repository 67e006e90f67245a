"""Public KD-tree API: tagged points, exact k-NN and radial queries."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Optional

import jax.numpy as jnp
import numpy as np
from beartype import beartype
from beartype.typing import Callable
from jaxtyping import Array, ArrayLike, Real, jaxtyped

from ._build_impl import KDTreeStorage, build_heap_storage
from ._search_impl import search_tree
from .bounds import BoundingBox
from .candidates import BoundedPriorityList
from .dtypes import box_dtype_for
from .metrics import squared_euclidean
from .navigator import TreeNavigator
from .protocols import SourceIndexedStorageProtocol
from .types import (
    Metric,
    Neighbor,
    PointsLike,
    ResultBuilder,
    SearchResult,
    SearchStats,
    TagsLike,
)

logger = logging.getLogger(__name__)

StatsLogger = Callable[[SearchStats], None]
CountLike = int | np.integer
RadiusLike = float | int | np.floating | np.integer | Real[ArrayLike, ""]


@dataclass(frozen=True)
class KDTreeConfig:
    """Resolved construction options for a :class:`KDTree`.

    ``min_value``/``max_value`` bound the search window on every axis. The
    defaults are the natural bounds of real-valued coordinates; pass finite
    sentinels when coordinates live in a known range.
    """

    dimensions: int
    min_value: float | int = -math.inf
    max_value: float | int = math.inf

    def __post_init__(self) -> None:
        if self.dimensions < 1:
            raise ValueError(f"dimensions must be >= 1, received {self.dimensions}")
        if self.min_value > self.max_value:
            raise ValueError(
                "min_value must not exceed max_value; "
                f"received {self.min_value} and {self.max_value}"
            )


def log_search_stats(
    stats: SearchStats,
    *,
    level: int = logging.DEBUG,
    logger: Optional[logging.Logger] = None,
) -> None:
    """Log query counters using the provided (or module) logger."""

    target_logger = logger or logging.getLogger(__name__)
    target_logger.log(
        level,
        "KD-tree %s query: visited=%d, pruned=%d, offered=%d, results=%d",
        stats.kind,
        stats.nodes_visited,
        stats.branches_pruned,
        stats.candidates_offered,
        stats.results,
    )


def _validate_points(points: PointsLike, dimensions: int) -> Array:
    if not hasattr(points, "shape"):
        for position, point in enumerate(points):
            try:
                length = len(point)
            except TypeError:
                raise ValueError(f"point {position} is not a coordinate sequence") from None
            if length != dimensions:
                raise ValueError(
                    f"every point must have {dimensions} coordinates; "
                    f"point {position} has {length}"
                )
    points_arr = jnp.asarray(points)
    if points_arr.ndim != 2:
        raise ValueError(
            "points must have shape (n_points, dim); "
            f"received ndim={points_arr.ndim}"
        )
    if points_arr.shape[0] < 1:
        raise ValueError("points must contain at least one row")
    if points_arr.shape[1] != dimensions:
        raise ValueError(
            f"points must have {dimensions} coordinates; "
            f"received {points_arr.shape[1]}"
        )
    if not (
        jnp.issubdtype(points_arr.dtype, jnp.integer)
        or jnp.issubdtype(points_arr.dtype, jnp.floating)
    ):
        raise ValueError(
            f"points must have real coordinates; received dtype={points_arr.dtype}"
        )
    if jnp.issubdtype(points_arr.dtype, jnp.floating) and bool(jnp.any(jnp.isnan(points_arr))):
        raise ValueError("points must not contain NaN coordinates")
    return points_arr


def _validate_tags(tags: TagsLike, count: int) -> tuple[Any, ...]:
    tags_tuple = tuple(tags)
    if len(tags_tuple) != count:
        raise ValueError(
            "points and tags must have the same length; "
            f"received {count} and {len(tags_tuple)}"
        )
    return tags_tuple


def _materialize(
    storage: SourceIndexedStorageProtocol,
    candidates: BoundedPriorityList[int],
    result_builder: ResultBuilder,
) -> SearchResult:
    records = []
    distances = []
    indices = []
    for slot, distance in candidates.items():
        records.append(result_builder(storage.point(slot), storage.tags[slot]))
        distances.append(distance)
        indices.append(int(storage.slot_sources[slot]))
    return SearchResult(
        records=tuple(records),
        distances=tuple(distances),
        indices=tuple(indices),
    )


class KDTree:
    """Balanced KD-tree over tagged points stored in flat heap order.

    The tree is built once with :meth:`build` and is read-only afterwards;
    each query allocates its own candidate list and boxes, so any number of
    queries may run against a built tree. Calling :meth:`build` again
    replaces the contents.

    Args:
        dimensions: Coordinates per point.
        metric: Distance function ``(a, b) -> scalar``. Box pruning assumes
            a rootless Minkowski-style metric such as
            :func:`kdtreex.metrics.squared_euclidean`.
        min_value: Lower search-window sentinel on every axis.
        max_value: Upper search-window sentinel on every axis.
    """

    @jaxtyped(typechecker=beartype)
    def __init__(
        self,
        dimensions: int,
        metric: Metric,
        min_value: Optional[float | int] = None,
        max_value: Optional[float | int] = None,
    ) -> None:
        self._config = KDTreeConfig(
            dimensions=dimensions,
            min_value=-math.inf if min_value is None else min_value,
            max_value=math.inf if max_value is None else max_value,
        )
        self._metric = metric
        self._storage: Optional[KDTreeStorage] = None

    @property
    def config(self) -> KDTreeConfig:
        return self._config

    @property
    def dimensions(self) -> int:
        return self._config.dimensions

    @property
    def metric(self) -> Metric:
        return self._metric

    @property
    def is_built(self) -> bool:
        return self._storage is not None

    @property
    def count(self) -> int:
        """Number of stored points (0 before the first build)."""

        return 0 if self._storage is None else self._storage.count

    def __len__(self) -> int:
        return self.count

    @property
    def storage(self) -> KDTreeStorage:
        """Raw flat storage of the built tree."""

        if self._storage is None:
            raise RuntimeError("KDTree has not been built")
        return self._storage

    @property
    def capacity(self) -> int:
        return self.storage.capacity

    @property
    def points(self) -> Array:
        return self.storage.points

    @property
    def tags(self) -> tuple[Any, ...]:
        return self.storage.tags

    @property
    def height(self) -> int:
        return self.storage.height

    @property
    def navigator(self) -> TreeNavigator:
        """Return a navigator positioned at the root."""

        return TreeNavigator(self.storage, 0)

    @jaxtyped(typechecker=beartype)
    def build(self, points: PointsLike, tags: TagsLike) -> "KDTree":
        """Build the tree from ``points`` and the parallel ``tags``.

        Raises:
            ValueError: if the input is empty, a point has the wrong number
                of coordinates, or ``points`` and ``tags`` differ in length.
        """

        points_arr = _validate_points(points, self.dimensions)
        tags_tuple = _validate_tags(tags, int(points_arr.shape[0]))
        storage = build_heap_storage(points_arr, tags_tuple)
        self._storage = storage
        logger.debug(
            "Built KD-tree: points=%d, capacity=%d, height=%d",
            storage.count,
            storage.capacity,
            storage.height,
        )
        return self

    def _validate_target(self, target: PointsLike) -> Array:
        target_arr = jnp.asarray(target)
        if target_arr.shape != (self.dimensions,):
            raise ValueError(
                f"query point must have shape ({self.dimensions},); "
                f"received {target_arr.shape}"
            )
        if not (
            jnp.issubdtype(target_arr.dtype, jnp.integer)
            or jnp.issubdtype(target_arr.dtype, jnp.floating)
        ):
            raise ValueError(
                f"query point must have real coordinates; received dtype={target_arr.dtype}"
            )
        if jnp.issubdtype(target_arr.dtype, jnp.floating) and bool(jnp.any(jnp.isnan(target_arr))):
            raise ValueError("query point must not contain NaN coordinates")
        return target_arr

    def _search(
        self,
        kind: str,
        target: PointsLike,
        capacity: int,
        max_distance: float,
        result_builder: ResultBuilder,
        stats_logger: Optional[StatsLogger],
    ) -> SearchResult:
        target_arr = self._validate_target(target)
        storage = self._storage
        counters = (0, 0, 0)
        if storage is None or capacity == 0:
            result = SearchResult.empty()
        else:
            candidates: BoundedPriorityList[int] = BoundedPriorityList(capacity)
            box = BoundingBox.infinite(
                self.dimensions,
                self._config.min_value,
                self._config.max_value,
                dtype=box_dtype_for(storage.points.dtype),
            )
            counters = search_tree(
                storage, target_arr, box, self._metric, candidates, max_distance
            )
            result = _materialize(storage, candidates, result_builder)

        if stats_logger is not None:
            stats_logger(
                SearchStats(
                    kind=kind,
                    nodes_visited=counters[0],
                    branches_pruned=counters[1],
                    candidates_offered=counters[2],
                    results=len(result),
                )
            )
        return result

    def _capacity_for(self, k: int) -> int:
        # Negative k is capped at the dimensionality; zero yields no results.
        if k < 0:
            return self.dimensions
        return k

    @jaxtyped(typechecker=beartype)
    def nearest_neighbors(
        self,
        target: PointsLike,
        k: CountLike,
        result_builder: ResultBuilder = Neighbor,
        *,
        stats_logger: Optional[StatsLogger] = None,
    ) -> SearchResult:
        """Return the ``k`` stored points closest to ``target``, closest first.

        Args:
            target: Query point with ``dimensions`` coordinates.
            k: Number of neighbors. ``0`` yields an empty result; a negative
                value caps the result at ``dimensions`` neighbors.
            result_builder: Called as ``result_builder(point, tag)`` for each
                match; defaults to :class:`~kdtreex.types.Neighbor`.
            stats_logger: Optional callback receiving :class:`SearchStats`.
        """

        return self._search(
            "nearest",
            target,
            self._capacity_for(int(k)),
            math.inf,
            result_builder,
            stats_logger,
        )

    @jaxtyped(typechecker=beartype)
    def radial_search(
        self,
        center: PointsLike,
        radius: RadiusLike,
        k: Optional[CountLike] = None,
        result_builder: ResultBuilder = Neighbor,
        *,
        stats_logger: Optional[StatsLogger] = None,
    ) -> SearchResult:
        """Return stored points whose metric value from ``center`` is <= ``radius``.

        ``radius`` is compared with the metric output directly, so with
        :func:`~kdtreex.metrics.squared_euclidean` it is a squared radius.
        ``k=None`` returns every match; otherwise at most ``k`` of the
        closest matches are returned, with the same ``k`` rules as
        :meth:`nearest_neighbors`.
        """

        max_distance = float(radius)
        if max_distance < 0:
            raise ValueError(f"radius must be >= 0, received {max_distance}")
        capacity = self.count if k is None else self._capacity_for(int(k))
        return self._search(
            "radial",
            center,
            capacity,
            max_distance,
            result_builder,
            stats_logger,
        )

    @jaxtyped(typechecker=beartype)
    def count_neighbors(self, center: PointsLike, radius: RadiusLike) -> int:
        """Count stored points within ``radius`` of ``center``."""

        return len(self.radial_search(center, radius))

    def __repr__(self) -> str:
        return (
            f"KDTree(dimensions={self.dimensions}, count={self.count}, "
            f"metric={getattr(self._metric, '__name__', self._metric)!r})"
        )


@jaxtyped(typechecker=beartype)
def build_kdtree(
    points: PointsLike,
    tags: Optional[TagsLike] = None,
    *,
    metric: Metric = squared_euclidean,
    min_value: Optional[float | int] = None,
    max_value: Optional[float | int] = None,
) -> KDTree:
    """Build a :class:`KDTree` sized from ``points``.

    Dimensionality is taken from the point rows. Without ``tags`` each
    point is tagged with its input position.
    """

    points_arr = jnp.asarray(points)
    if points_arr.ndim != 2:
        raise ValueError(
            "points must have shape (n_points, dim); "
            f"received ndim={points_arr.ndim}"
        )
    if points_arr.shape[1] < 1:
        raise ValueError("points must have dim >= 1")
    resolved_tags = range(int(points_arr.shape[0])) if tags is None else tags
    tree = KDTree(
        int(points_arr.shape[1]),
        metric,
        min_value=min_value,
        max_value=max_value,
    )
    return tree.build(points_arr, resolved_tags)


@jaxtyped(typechecker=beartype)
def build_and_query(
    points: PointsLike,
    queries: PointsLike,
    *,
    tags: Optional[TagsLike] = None,
    k: CountLike = 1,
    metric: Metric = squared_euclidean,
) -> list[SearchResult]:
    """Convenience function to build a tree and run nearest-neighbor queries."""

    tree = build_kdtree(points, tags, metric=metric)
    return [tree.nearest_neighbors(query, k) for query in jnp.asarray(queries)]


__all__ = [
    "KDTree",
    "KDTreeConfig",
    "KDTreeStorage",
    "build_and_query",
    "build_kdtree",
    "log_search_stats",
]
