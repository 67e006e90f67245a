"""Parity and timing check for KD-tree queries against a linear scan.

Builds a tree over uniform random points, answers the same k-NN and radial
queries with the tree and with a brute-force scan, and reports mismatches
alongside wall-clock timings and pruning counters.

    python examples/kdtree_bruteforce_parity.py --n-points 2048 --dim 3 --k 8
"""

from __future__ import annotations

import argparse
import logging
import time

import jax
import numpy as np

from kdtreex import SearchStats, build_kdtree, squared_euclidean


def _make_problem(n: int, n_queries: int, dim: int, seed: int) -> tuple[jax.Array, jax.Array]:
    key = jax.random.PRNGKey(seed)
    k1, k2 = jax.random.split(key)
    points = jax.random.uniform(k1, (n, dim), minval=-1.0, maxval=1.0)
    queries = jax.random.uniform(k2, (n_queries, dim), minval=-1.0, maxval=1.0)
    return points, queries


@jax.jit
def _all_distances(points: jax.Array, queries: jax.Array) -> jax.Array:
    return jax.vmap(lambda q: jax.vmap(squared_euclidean, in_axes=(0, None))(points, q))(
        queries
    )


def main() -> None:
    parser = argparse.ArgumentParser()
    parser.add_argument("--n-points", type=int, default=1024)
    parser.add_argument("--n-queries", type=int, default=64)
    parser.add_argument("--dim", type=int, default=3)
    parser.add_argument("--k", type=int, default=8)
    parser.add_argument("--radius", type=float, default=0.05)
    parser.add_argument("--seed", type=int, default=0)
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    points, queries = _make_problem(args.n_points, args.n_queries, args.dim, args.seed)

    t0 = time.perf_counter()
    tree = build_kdtree(points)
    t_build = time.perf_counter() - t0

    events: list[SearchStats] = []
    t0 = time.perf_counter()
    knn = [tree.nearest_neighbors(q, args.k, stats_logger=events.append) for q in queries]
    radial = [tree.radial_search(q, args.radius) for q in queries]
    t_tree = time.perf_counter() - t0

    t0 = time.perf_counter()
    distances = np.asarray(_all_distances(points, queries))
    t_linear = time.perf_counter() - t0

    knn_mismatches = 0
    radial_mismatches = 0
    for row, knn_result, radial_result in zip(distances, knn, radial):
        expected = np.argsort(row, kind="stable")[: args.k]
        if list(knn_result.indices) != expected.tolist():
            knn_mismatches += 1
        if set(radial_result.indices) != set(np.nonzero(row <= args.radius)[0].tolist()):
            radial_mismatches += 1

    print("jax:", jax.__version__)
    print("device:", jax.devices()[0])
    print("config:", vars(args))
    print(
        "tree:",
        {"count": tree.count, "capacity": tree.capacity, "height": tree.height},
    )
    print(
        "timings_s:",
        {"build": t_build, "tree_queries": t_tree, "linear_scan": t_linear},
    )
    print(
        "pruning:",
        {
            "mean_nodes_visited": float(np.mean([e.nodes_visited for e in events])),
            "mean_branches_pruned": float(np.mean([e.branches_pruned for e in events])),
        },
    )
    print(
        "mismatches:",
        {"knn": knn_mismatches, "radial": radial_mismatches},
    )


if __name__ == "__main__":
    main()
