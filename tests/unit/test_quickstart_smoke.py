"""Smoke test for the documented quick-start path."""

import jax
import jax.numpy as jnp

from kdtreex import Neighbor, build_kdtree, squared_euclidean


def test_quickstart_pipeline_smoke():
    key = jax.random.PRNGKey(0)
    positions = jax.random.uniform(
        key,
        (128, 3),
        minval=-1.0,
        maxval=1.0,
        dtype=jnp.float64,
    )
    labels = [f"p{i}" for i in range(128)]

    tree = build_kdtree(positions, labels, metric=squared_euclidean)
    nearest = tree.nearest_neighbors(positions[17], 4)
    within = tree.radial_search(jnp.zeros((3,)), 0.25)

    assert tree.count == 128
    assert tree.capacity == 256
    assert nearest.found
    assert isinstance(nearest[0], Neighbor)
    assert nearest[0].tag == "p17"
    assert nearest.distances[0] == 0.0
    assert len(within) == tree.count_neighbors(jnp.zeros((3,)), 0.25)
    assert tree.navigator.depth == 0
