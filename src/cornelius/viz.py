"""
PyVista Utilities
Conversion of surface patches into PyVista meshes for inspection.

Requires the optional ``viz`` extra (pyvista).
"""
from __future__ import annotations

import logging
import os

import numpy as np
import numpy.typing as npt
import pyvista as pv

from cornelius.io import SurfacePatchWriter

logger = logging.getLogger(__name__)


class PatchUtils:
    @staticmethod
    def patches_to_polydata(triangles: npt.ArrayLike) -> pv.PolyData:
        """
        Convert an ``(n, 3, 3)`` array of triangles to a PolyData surface.

        Vertices are not merged; every triangle keeps its own three points.

        Args:
            triangles: Triangle, vertex, coordinate.

        Raises:
            ValueError: If the input is not of shape (n, 3, 3).
        """
        tri = np.asarray(triangles, dtype=np.float64)
        if tri.size == 0:
            return pv.PolyData()
        if tri.ndim != 3 or tri.shape[1:] != (3, 3):
            raise ValueError(f"Expected shape (n, 3, 3), got {tri.shape}.")

        n = tri.shape[0]
        points = tri.reshape(-1, 3)
        faces = np.hstack([
            np.full((n, 1), 3, dtype=np.int_),
            np.arange(3 * n, dtype=np.int_).reshape(n, 3),
        ]).ravel()
        return pv.PolyData(points, faces)

    @staticmethod
    def read_polydata(filepath: str | os.PathLike) -> pv.PolyData:
        """Read a patch file written by :class:`SurfacePatchWriter` into PolyData."""
        triangles = SurfacePatchWriter.read_patches(filepath)
        logger.debug(f"Read {len(triangles)} patches from {os.fspath(filepath)}")
        return PatchUtils.patches_to_polydata(triangles)


def patches_to_polydata(triangles: npt.ArrayLike) -> pv.PolyData:
    """Module level shortcut for :meth:`PatchUtils.patches_to_polydata`."""
    return PatchUtils.patches_to_polydata(triangles)
