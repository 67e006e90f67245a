"""Axis-aligned bounding boxes used to bound distances during search."""

from __future__ import annotations

from dataclasses import dataclass

import jax
import jax.numpy as jnp
from beartype.typing import Callable
from jaxtyping import Array


@jax.jit
def _set_axis(bound: Array, axis: Array, value: Array) -> Array:
    return bound.at[axis].set(value)


@jax.jit
def _clamp(target: Array, lower: Array, upper: Array) -> Array:
    return jnp.clip(target, lower, upper)


@dataclass(frozen=True, eq=False)
class BoundingBox:
    """Per-dimension ``[lower, upper]`` region.

    JAX arrays are immutable, so every narrowing returns a new box and a
    box handed to one search branch can never be altered by its sibling.
    """

    lower: Array
    upper: Array

    @classmethod
    def infinite(
        cls,
        dimensions: int,
        min_value: float | int,
        max_value: float | int,
        dtype=jnp.float64,
    ) -> "BoundingBox":
        """Return a box spanning ``[min_value, max_value]`` on every axis."""

        if dimensions < 1:
            raise ValueError(f"dimensions must be >= 1, received {dimensions}")
        if min_value > max_value:
            raise ValueError(
                "min_value must not exceed max_value; "
                f"received {min_value} and {max_value}"
            )
        return cls(
            lower=jnp.full((dimensions,), min_value, dtype=dtype),
            upper=jnp.full((dimensions,), max_value, dtype=dtype),
        )

    @property
    def dimensions(self) -> int:
        return int(self.lower.shape[0])

    def clone(self) -> "BoundingBox":
        return BoundingBox(lower=self.lower, upper=self.upper)

    def with_upper(self, axis: int, value) -> "BoundingBox":
        """Copy of this box with its upper bound on ``axis`` set to ``value``."""

        return BoundingBox(lower=self.lower, upper=_set_axis(self.upper, axis, value))

    def with_lower(self, axis: int, value) -> "BoundingBox":
        """Copy of this box with its lower bound on ``axis`` set to ``value``."""

        return BoundingBox(lower=_set_axis(self.lower, axis, value), upper=self.upper)

    def closest_point(self, target: Array) -> Array:
        """Return the point inside the box nearest to ``target``.

        Each coordinate of ``target`` is clamped into ``[lower, upper]`` on
        its axis. The result is not a tree point; it only serves as a lower
        bound on the distance from ``target`` to anything inside the box.
        """

        return _clamp(jnp.asarray(target), self.lower, self.upper)

    def distance_to(self, target: Array, metric: Callable[[Array, Array], object]) -> float:
        """Metric value from the box's closest point to ``target``."""

        return float(metric(self.closest_point(target), target))

    def contains(self, point: Array) -> bool:
        point_arr = jnp.asarray(point)
        return bool(jnp.all((point_arr >= self.lower) & (point_arr <= self.upper)))

    def __repr__(self) -> str:
        return f"BoundingBox(lower={self.lower.tolist()}, upper={self.upper.tolist()})"


__all__ = ["BoundingBox"]
