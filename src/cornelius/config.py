"""
Configuration & Numeric Constants
=================================
This module serves as the central registry for the tolerances and fixed sizes
used by the surface finder.

Why is this file needed?
------------------------
1. Consistency: The same epsilon must be used when lines are chained into
   polygons and when polygons are glued into polyhedra.
2. Embedding: All geometry lives in a fixed 4D space regardless of the working
   dimension, and the spacing vector has to be lifted into that space.

Exports:
    DIM (int): Dimension of the embedding space.
    STEPS (int): Number of grid points per axis of a cell.
    EPSILON (float): L1 tolerance for "these two points coincide".
    ALMOST_ZERO, ALMOST_ONE (float): Edge fractions used when a corner is
        exactly at the threshold.
"""
from __future__ import annotations

from typing import Sequence, TYPE_CHECKING

import numpy as np

from cornelius.errors import UsageError

if TYPE_CHECKING:
    import numpy.typing as npt


# Geometry
DIM: int = 4
STEPS: int = 2
SUPPORTED_DIMENSIONS: tuple[int, ...] = (2, 3, 4)

# Numerical tolerances
EPSILON: float = 1e-10
ALMOST_ZERO: float = 1e-9
ALMOST_ONE: float = 1.0 - ALMOST_ZERO

# Expected pool sizes (lists grow past these, they are not hard limits)
MAX_LINES_PER_POLYGON: int = 24
MAX_POLYGONS: int = 8
MAX_POLYHEDRA: int = 10


def embed_spacing(dimension: int, dx: Sequence[float]) -> npt.NDArray[np.float64]:
    """
    Lift a spacing vector of the working dimension into the 4D embedding.

    The leading ``DIM - dimension`` axes are unused and get unit spacing, the
    trailing axes get ``dx[0:dimension]`` in order.

    Args:
        dimension: Working dimension (2, 3 or 4).
        dx: Physical spacing per axis, at least ``dimension`` entries.

    Raises:
        UsageError: If the dimension is unsupported or the spacing is invalid.

    Returns:
        Array of shape ``(4,)``.
    """
    if dimension not in SUPPORTED_DIMENSIONS:
        raise UsageError(
            f"Unsupported dimension: {dimension}. "
            f"'dimension' must be one of {SUPPORTED_DIMENSIONS}."
        )
    spacing = np.asarray(dx, dtype=np.float64).ravel()
    if spacing.size < dimension:
        raise UsageError(
            f"Spacing needs at least {dimension} entries, got {spacing.size}."
        )
    spacing = spacing[:dimension]
    if np.any(spacing <= 0.0) or not np.all(np.isfinite(spacing)):
        raise UsageError(f"Spacing must be positive and finite, got {spacing}.")

    embedded = np.ones(DIM, dtype=np.float64)
    embedded[DIM - dimension:] = spacing
    return embedded
