"""Unit coverage for kdtreex bounding boxes."""

import jax.numpy as jnp
import numpy as np
import pytest

from kdtreex import BoundingBox, squared_euclidean


def test_infinite_box_spans_sentinels_on_every_axis():
    box = BoundingBox.infinite(3, -jnp.inf, jnp.inf)

    assert box.dimensions == 3
    assert jnp.all(jnp.isneginf(box.lower))
    assert jnp.all(jnp.isposinf(box.upper))
    assert box.contains(jnp.array([1e300, -1e300, 0.0]))


def test_narrowing_returns_new_box_and_leaves_original_untouched():
    box = BoundingBox.infinite(2, -10.0, 10.0)
    left = box.with_upper(0, 3.0)
    right = box.with_lower(0, 3.0)

    np.testing.assert_array_equal(np.asarray(box.upper), [10.0, 10.0])
    np.testing.assert_array_equal(np.asarray(left.upper), [3.0, 10.0])
    np.testing.assert_array_equal(np.asarray(left.lower), [-10.0, -10.0])
    np.testing.assert_array_equal(np.asarray(right.lower), [3.0, -10.0])
    np.testing.assert_array_equal(np.asarray(right.upper), [10.0, 10.0])


def test_clone_is_independent_of_later_narrowing():
    box = BoundingBox.infinite(2, 0.0, 1.0)
    copy = box.clone()
    narrowed = copy.with_lower(1, 0.5)

    np.testing.assert_array_equal(np.asarray(copy.lower), [0.0, 0.0])
    np.testing.assert_array_equal(np.asarray(narrowed.lower), [0.0, 0.5])


def test_closest_point_clamps_each_axis():
    box = BoundingBox(lower=jnp.array([0.0, 0.0, 0.0]), upper=jnp.array([1.0, 2.0, 3.0]))

    closest = box.closest_point(jnp.array([-1.0, 1.5, 7.0]))

    np.testing.assert_allclose(np.asarray(closest), [0.0, 1.5, 3.0])


def test_closest_point_of_inside_target_is_target():
    box = BoundingBox.infinite(2, -5.0, 5.0)
    target = jnp.array([1.25, -4.0])

    np.testing.assert_allclose(np.asarray(box.closest_point(target)), np.asarray(target))
    assert box.distance_to(target, squared_euclidean) == 0.0


def test_distance_to_lower_bounds_squared_euclidean():
    box = BoundingBox(lower=jnp.array([2.0, -1.0]), upper=jnp.array([4.0, 1.0]))

    assert box.distance_to(jnp.array([0.0, 3.0]), squared_euclidean) == pytest.approx(8.0)


def test_integer_targets_clamp_against_float_box():
    box = BoundingBox.infinite(2, -jnp.inf, jnp.inf).with_upper(0, 2.5)

    closest = box.closest_point(jnp.array([4, -3]))

    np.testing.assert_allclose(np.asarray(closest), [2.5, -3.0])


def test_invalid_infinite_box_arguments_raise():
    with pytest.raises(ValueError):
        BoundingBox.infinite(0, -1.0, 1.0)
    with pytest.raises(ValueError):
        BoundingBox.infinite(2, 1.0, -1.0)
