"""Distance functions compatible with bounding-box pruning.

Box pruning compares the metric value of the box's closest point against
the worst retained candidate. That lower bound only holds for metrics that
grow monotonically with every per-axis gap, such as the Minkowski sums
below. None of them take a root, so ``squared_euclidean`` reports squared
distances and radial searches with it take a squared radius.
"""

from __future__ import annotations

import jax
import jax.numpy as jnp
from jaxtyping import Array


@jax.jit
def squared_euclidean(a: Array, b: Array) -> Array:
    delta = jnp.asarray(a) - jnp.asarray(b)
    return jnp.sum(delta * delta)


@jax.jit
def manhattan(a: Array, b: Array) -> Array:
    return jnp.sum(jnp.abs(jnp.asarray(a) - jnp.asarray(b)))


def minkowski_power(p: float):
    """Return ``sum(|a - b| ** p)``, the rootless Minkowski ``p`` metric."""

    if p < 1:
        raise ValueError(f"p must be >= 1, received {p}")
    exponent = float(p)

    @jax.jit
    def metric(a: Array, b: Array) -> Array:
        return jnp.sum(jnp.abs(jnp.asarray(a) - jnp.asarray(b)) ** exponent)

    return metric


__all__ = ["manhattan", "minkowski_power", "squared_euclidean"]
