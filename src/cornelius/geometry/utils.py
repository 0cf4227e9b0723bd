from __future__ import annotations

from typing import Iterable, TYPE_CHECKING

import numpy as np

from cornelius.config import DIM, EPSILON

if TYPE_CHECKING:
    import numpy.typing as npt

INV_SIX = 1.0 / 6.0


def free_axes(const_axes: Iterable[int]) -> tuple[int, ...]:
    """
    Return the axes of the 4D embedding which are not held constant.

    Args:
        const_axes: Indices of the constant axes.

    Returns:
        The remaining axis indices in ascending order.
    """
    fixed = set(const_axes)
    return tuple(i for i in range(DIM) if i not in fixed)


def points_coincide(
    a: npt.NDArray[np.float64],
    b: npt.NDArray[np.float64],
    eps: float = EPSILON
) -> bool:
    """Two points are the same if their L1 distance is below ``eps``."""
    return float(np.sum(np.abs(a - b))) < eps


def flip_normal_if_needed(
    normal: npt.NDArray[np.float64],
    v_out: npt.NDArray[np.float64]
) -> npt.NDArray[np.float64]:
    """
    Orient a normal so that it points away from the outside reference.

    Args:
        normal: Candidate normal.
        v_out: Vector from the element to its outside reference point.

    Returns:
        ``normal`` or ``-normal``, whichever has a non-positive projection on ``v_out``.
    """
    if float(np.dot(normal, v_out)) > 0.0:
        return -normal
    return normal


def cross_3(
    a: npt.NDArray[np.float64],
    b: npt.NDArray[np.float64],
    axes: tuple[int, int, int]
) -> npt.NDArray[np.float64]:
    """
    Cross product restricted to three axes of the 4D embedding.

    The result is embedded back into 4D with zero on the remaining axis.
    """
    x1, x2, x3 = axes
    n = np.zeros(DIM, dtype=np.float64)
    n[x1] = a[x2] * b[x3] - a[x3] * b[x2]
    n[x2] = -(a[x1] * b[x3] - a[x3] * b[x1])
    n[x3] = a[x1] * b[x2] - a[x2] * b[x1]
    return n


def tetrahedron_volume(
    v1: npt.NDArray[np.float64],
    v2: npt.NDArray[np.float64],
    v3: npt.NDArray[np.float64]
) -> npt.NDArray[np.float64]:
    """
    Generalized cross product of three 4-vectors.

    Component ``i`` is the signed 3x3 minor of ``(v1, v2, v3)`` with axis ``i``
    dropped, divided by six. The vector is normal to the tetrahedron spanned by
    the three edge vectors and its length is the tetrahedron's volume.

    Args:
        v1, v2, v3: Edge vectors of the tetrahedron, shape ``(4,)``.

    Returns:
        Volume vector, shape ``(4,)``.
    """
    bc01 = v2[0] * v3[1] - v2[1] * v3[0]
    bc02 = v2[0] * v3[2] - v2[2] * v3[0]
    bc03 = v2[0] * v3[3] - v2[3] * v3[0]
    bc12 = v2[1] * v3[2] - v2[2] * v3[1]
    bc13 = v2[1] * v3[3] - v2[3] * v3[1]
    bc23 = v2[2] * v3[3] - v2[3] * v3[2]
    return np.array([
        (v1[1] * bc23 - v1[2] * bc13 + v1[3] * bc12) * INV_SIX,
        -(v1[0] * bc23 - v1[2] * bc03 + v1[3] * bc02) * INV_SIX,
        (v1[0] * bc13 - v1[1] * bc03 + v1[3] * bc01) * INV_SIX,
        -(v1[0] * bc12 - v1[1] * bc02 + v1[2] * bc01) * INV_SIX,
    ], dtype=np.float64)


def frozen(vector: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
    """Return a read-only copy of ``vector``."""
    out = np.array(vector, dtype=np.float64)
    out.setflags(write=False)
    return out
