"""kdtreex: balanced KD-tree over tagged points with exact k-NN and radial search."""

from jax import config as _jax_config

# Integer coordinates and infinite sentinels share float64 bounding boxes.
_jax_config.update("jax_enable_x64", True)

from .bounds import BoundingBox
from .candidates import BoundedPriorityList
from .dtypes import INDEX_DTYPE, as_index, box_dtype_for
from .kdtree import (
    KDTree,
    KDTreeConfig,
    KDTreeStorage,
    build_and_query,
    build_kdtree,
    log_search_stats,
)
from .metrics import manhattan, minkowski_power, squared_euclidean
from .navigator import (
    TreeNavigator,
    left_child_index,
    node_depth,
    parent_index,
    right_child_index,
)
from .protocols import SourceIndexedStorageProtocol, TreeStorageProtocol
from .types import Neighbor, SearchResult, SearchStats

__all__ = [
    "INDEX_DTYPE",
    "BoundedPriorityList",
    "BoundingBox",
    "KDTree",
    "KDTreeConfig",
    "KDTreeStorage",
    "Neighbor",
    "SearchResult",
    "SearchStats",
    "SourceIndexedStorageProtocol",
    "TreeNavigator",
    "TreeStorageProtocol",
    "as_index",
    "box_dtype_for",
    "build_and_query",
    "build_kdtree",
    "left_child_index",
    "log_search_stats",
    "manhattan",
    "minkowski_power",
    "node_depth",
    "parent_index",
    "right_child_index",
    "squared_euclidean",
]
