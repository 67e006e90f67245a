"""Tests for the rootless distance functions."""

import jax.numpy as jnp
import numpy as np
import pytest

from kdtreex import build_kdtree, manhattan, minkowski_power, squared_euclidean
from tests.unit.reference_search import linear_nearest, sample_points


def test_squared_euclidean_has_no_root():
    assert float(squared_euclidean(jnp.array([0.0, 0.0]), jnp.array([3.0, 4.0]))) == 25.0


def test_manhattan_sums_absolute_gaps():
    assert float(manhattan(jnp.array([1.0, -2.0, 0.5]), jnp.array([0.0, 1.0, 0.5]))) == 4.0


def test_minkowski_power_matches_named_metrics():
    a = jnp.array([0.2, -0.7, 1.5])
    b = jnp.array([-0.4, 0.1, 1.0])

    np.testing.assert_allclose(minkowski_power(1)(a, b), manhattan(a, b))
    np.testing.assert_allclose(minkowski_power(2)(a, b), squared_euclidean(a, b))


def test_minkowski_power_rejects_small_exponent():
    with pytest.raises(ValueError):
        minkowski_power(0.5)


def test_minkowski_cubic_search_matches_linear_scan():
    metric = minkowski_power(3)
    points = sample_points(n=64, dim=3, seed=41)
    queries = sample_points(n=8, dim=3, seed=42)
    tree = build_kdtree(points, metric=metric)

    for query in queries:
        result = tree.nearest_neighbors(query, 3)
        expected_idx, expected_d = linear_nearest(points, query, 3, metric=metric)

        assert list(result.indices) == expected_idx.tolist()
        np.testing.assert_allclose(result.distances, expected_d, rtol=1e-12)
