"""
Surface Patch Output
Writes the triangulated surface patches of 3D cells to a plain text file
for debugging and plotting.

Every row holds one triangle as nine numbers: the start and end point of a
line and the centroid of the polygon it belongs to, each as (x1, x2, x3).
"""
from __future__ import annotations

import logging
import os
from typing import Optional, TextIO, TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    import numpy.typing as npt
    from cornelius.geometry.polygon import Polygon

# Get module logger
logger = logging.getLogger(__name__)


class SurfacePatchWriter:
    """
    Append-only text stream of surface patches.

    Writing is a no-op until :meth:`open` has been called.
    """

    def __init__(self) -> None:
        self.filepath: Optional[str] = None
        self._stream: Optional[TextIO] = None
        self.rows_written = 0

    def __enter__(self) -> SurfacePatchWriter:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def is_open(self) -> bool:
        return self._stream is not None

    def open(self, filepath: str | os.PathLike) -> None:
        """Open (and truncate) the output file."""
        self.close()
        self.filepath = os.fspath(filepath)
        self._stream = open(self.filepath, "w", encoding="utf-8")
        self.rows_written = 0
        logger.info(f"Writing surface patches to: {self.filepath}")

    def close(self) -> None:
        if self._stream is None:
            return
        self._stream.close()
        self._stream = None
        logger.info(f"Closed {self.filepath} after {self.rows_written} patches.")

    def write_polygon(self, polygon: Polygon, position: npt.NDArray[np.float64]) -> int:
        """
        Write the triangles of one polygon.

        Args:
            polygon: Polygon to write.
            position: Physical position of the cell in the 4D embedding.

        Returns:
            Number of rows written (0 while the writer is closed).
        """
        if self._stream is None:
            return 0
        patches = polygon.triangles(position)
        for triangle in patches:
            self._stream.write(" ".join(f"{v:.10g}" for v in triangle.ravel()) + "\n")
        self.rows_written += len(patches)
        return len(patches)

    @staticmethod
    def read_patches(filepath: str | os.PathLike) -> npt.NDArray[np.float64]:
        """
        Read a patch file back.

        Args:
            filepath: File written by this class.

        Raises:
            ValueError: If a row does not hold nine numbers.

        Returns:
            Array of shape ``(n, 3, 3)``: triangle, vertex, coordinate.
        """
        data = np.loadtxt(filepath, dtype=np.float64, ndmin=2)
        if data.size == 0:
            return np.empty((0, 3, 3), dtype=np.float64)
        if data.shape[1] != 9:
            raise ValueError(f"Expected 9 columns per patch, got {data.shape[1]}.")
        return data.reshape(-1, 3, 3)
