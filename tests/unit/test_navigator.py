"""Tests for read-only tree navigation."""

import numpy as np
import pytest

from kdtreex import (
    KDTree,
    TreeNavigator,
    left_child_index,
    node_depth,
    parent_index,
    right_child_index,
    squared_euclidean,
)
from tests.unit.reference_search import WIKIPEDIA_POINTS, WIKIPEDIA_TAGS


def _wikipedia_tree() -> KDTree:
    return KDTree(2, squared_euclidean).build(WIKIPEDIA_POINTS, WIKIPEDIA_TAGS)


def test_heap_index_math():
    assert left_child_index(0) == 1
    assert right_child_index(0) == 2
    assert left_child_index(2) == 5
    assert right_child_index(2) == 6
    assert parent_index(5) == 2
    assert parent_index(6) == 2
    assert parent_index(1) == 0
    assert [node_depth(i) for i in range(8)] == [0, 1, 1, 2, 2, 2, 2, 3]


def test_navigator_walks_wikipedia_tree():
    nav = _wikipedia_tree().navigator

    assert nav.index == 0
    assert nav.tag == "Eric"
    np.testing.assert_array_equal(np.asarray(nav.point), [7, 2])
    assert nav.left.tag == "Is"
    assert nav.left.left.tag == "A"
    assert nav.left.right.tag == "Really"
    assert nav.right.tag == "Stubborn"
    assert nav.right.left.tag == "Ferret"
    np.testing.assert_array_equal(np.asarray(nav.right.left.point), [8, 1])


def test_absent_children_and_root_parent_are_none():
    nav = _wikipedia_tree().navigator

    assert nav.parent is None
    assert nav.right.right is None
    assert nav.left.left.left is None
    assert nav.right.left.is_leaf
    assert not nav.right.is_leaf


def test_parent_links_return_to_origin():
    nav = _wikipedia_tree().navigator
    ferret = nav.right.left

    assert ferret.parent.index == nav.right.index
    assert ferret.parent.parent.index == 0
    assert ferret.depth == 2
    assert ferret.split_dimension == 0
    assert nav.left.split_dimension == 1


def test_navigators_are_independent_cursors():
    nav = _wikipedia_tree().navigator
    left = nav.left
    right = nav.right

    assert left.index == 1
    assert right.index == 2
    assert nav.left.left.index == 3
    assert left.index == 1


def test_level_order_visits_every_node_once():
    nav = _wikipedia_tree().navigator

    tags = [node.tag for node in nav.iter_level_order()]

    assert tags == ["Eric", "Is", "Stubborn", "A", "Really", "Ferret"]


def test_navigator_at_unoccupied_slot_raises():
    tree = _wikipedia_tree()

    with pytest.raises(IndexError):
        TreeNavigator(tree.storage, 6)
    with pytest.raises(IndexError):
        TreeNavigator(tree.storage, 64)


def test_navigator_requires_built_tree():
    tree = KDTree(2, squared_euclidean)

    with pytest.raises(RuntimeError):
        _ = tree.navigator
