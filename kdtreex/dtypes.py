"""Local dtype policy for kdtreex storage and search state."""

import jax.numpy as jnp

# Slot/source-index arrays share one dtype across kdtreex artifacts.
INDEX_DTYPE = jnp.int64


def as_index(x):
    """Convert a scalar/array to kdtreex index dtype."""
    return jnp.asarray(x, dtype=INDEX_DTYPE)


def box_dtype_for(point_dtype):
    """Return the dtype bounding boxes use for points of ``point_dtype``.

    Floating coordinates keep their precision; integer and boolean
    coordinates are widened to float64 so infinite sentinels stay
    representable.
    """
    dtype = jnp.dtype(point_dtype)
    if jnp.issubdtype(dtype, jnp.floating):
        return dtype
    return jnp.dtype(jnp.float64)


__all__ = ["INDEX_DTYPE", "as_index", "box_dtype_for"]
