"""
Surface Finder Facade
=====================
The single entry point a grid walker needs.

Why is this file needed?
------------------------
1. Dispatch: One object is initialised for a working dimension (2, 3 or 4)
   and routes every cell to the matching marching cell.
2. Pre-screening: Cells that lie completely above or below the threshold are
   skipped without running the decomposition.
3. Output: Normals and centroids are kept in the 4D embedding internally and
   handed out in the working dimension.

Typical use::

    finder = Cornelius(3, 0.155, [dt, dx, dy])
    finder.find_surface(cell)
    for normal, centroid in finder.surface_elements():
        ...
"""
from __future__ import annotations

import logging
import os
from typing import NamedTuple, Optional, Sequence, TYPE_CHECKING

import numpy as np

from cornelius.cells import Cube, Hypercube, Square
from cornelius.config import DIM, STEPS, SUPPORTED_DIMENSIONS, embed_spacing
from cornelius.errors import UsageError
from cornelius.io import SurfacePatchWriter

if TYPE_CHECKING:
    import numpy.typing as npt
    from cornelius.geometry import GeometryElement

logger = logging.getLogger(__name__)


class SurfaceElement(NamedTuple):
    """One surface element in the working dimension."""
    normal: npt.NDArray[np.float64]
    centroid: npt.NDArray[np.float64]


class Cornelius:
    """
    Finds isosurface elements in single 2D, 3D or 4D grid cells.

    Not thread safe; use one instance per worker.
    """

    def __init__(
        self,
        dimension: Optional[int] = None,
        value: Optional[float] = None,
        dx: Optional[Sequence[float]] = None
    ) -> None:
        """
        Create a surface finder, optionally initialised right away.

        Args:
            dimension: Working dimension (2, 3 or 4).
            value: Threshold that defines the surface.
            dx: Physical spacing per axis of the working dimension.
        """
        self.dimension = 0
        self.value = 0.0
        self.dx: npt.NDArray[np.float64] = np.ones(DIM, dtype=np.float64)
        self.initialized = False

        self._square = Square()
        self._cube = Cube()
        self._hypercube = Hypercube()
        self._normals: npt.NDArray[np.float64] = np.zeros((0, DIM), dtype=np.float64)
        self._centroids: npt.NDArray[np.float64] = np.zeros((0, DIM), dtype=np.float64)
        self._writer = SurfacePatchWriter()

        if dimension is not None:
            if value is None or dx is None:
                raise UsageError("Both 'value' and 'dx' are needed to initialise Cornelius.")
            self.init_cornelius(dimension, value, dx)

    def __repr__(self) -> str:
        """String representation of the surface finder."""
        return (
            f"{self.__class__.__name__}(dimension={self.dimension}, value={self.value}, "
            f"elements={self.number_elements})"
        )

    def __enter__(self) -> Cornelius:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close_print_cornelius()

    def init_cornelius(self, dimension: int, value: float, dx: Sequence[float]) -> None:
        """
        Select the working dimension, the threshold and the spacing.

        Args:
            dimension: Working dimension (2, 3 or 4).
            value: Threshold that defines the surface.
            dx: Physical spacing, the first ``dimension`` entries are used.

        Raises:
            UsageError: If the dimension or the spacing is not valid.
        """
        self.dx = embed_spacing(dimension, dx)
        self.dimension = int(dimension)
        self.value = float(value)
        self.initialized = True
        self._store([])
        logger.info(
            f"Cornelius initialized: dimension={self.dimension}, value={self.value}, "
            f"dx={self.dx[DIM - self.dimension:].tolist()}"
        )

    # ---------------- Debug output ----------------
    def init_print_cornelius(self, filename: str | os.PathLike) -> None:
        """Open a text file for the triangulated patches written by :meth:`find_surface_3d_print`."""
        self._writer.open(filename)

    def close_print_cornelius(self) -> None:
        self._writer.close()

    @property
    def print_initialized(self) -> bool:
        return self._writer.is_open

    # ---------------- Surface finding ----------------
    def contains_surface(self, cell: npt.ArrayLike) -> bool:
        """
        Cheap test whether the threshold crosses the cell at all.

        Args:
            cell: Samples at the cell corners.

        Returns:
            False if every corner is on the same side of the threshold.
        """
        samples = self._as_cell(cell, self.dimension)
        number_above = int(np.count_nonzero(samples >= self.value))
        return 0 < number_above < samples.size

    def find_surface(self, cell: npt.ArrayLike) -> int:
        """
        Find the surface elements of one cell in the initialised dimension.

        Args:
            cell: Samples with ``2`` points per axis.

        Returns:
            Number of surface elements found.
        """
        if self.dimension == 2:
            return self.find_surface_2d(cell)
        if self.dimension == 3:
            return self.find_surface_3d(cell)
        if self.dimension == 4:
            return self.find_surface_4d(cell)
        raise UsageError("Cornelius is not initialized.")

    def find_surface_2d(self, cell: npt.ArrayLike) -> int:
        """Find the lines of a 2D cell of shape ``(2, 2)``."""
        self._check_dimension(2)
        samples = self._as_cell(cell, 2)
        self._square.init_square(samples, (0, 1), (0.0, 0.0), self.dx)
        self._store(self._square.construct_lines(self.value))
        return self.number_elements

    def find_surface_3d(self, cell: npt.ArrayLike) -> int:
        """Find the polygons of a 3D cell of shape ``(2, 2, 2)``."""
        return self._surface_3d(cell, None)

    def find_surface_3d_print(self, cell: npt.ArrayLike, position: Sequence[float]) -> int:
        """
        Find the polygons of a 3D cell and write their patches.

        Args:
            cell: Samples, shape ``(2, 2, 2)``.
            position: Physical position of the cell's first corner, either in
                the working dimension (3 values) or in the 4D embedding.

        Returns:
            Number of surface elements found.
        """
        return self._surface_3d(cell, position)

    def _surface_3d(self, cell: npt.ArrayLike, position: Optional[Sequence[float]]) -> int:
        self._check_dimension(3)
        samples = self._as_cell(cell, 3)
        if not self.contains_surface(samples):
            logger.debug("3D cell is entirely on one side of the threshold.")
            self._store([])
            return 0

        self._cube.init_cube(samples, 0, 0.0, self.dx)
        polygons = self._cube.construct_polygons(self.value)
        self._store(polygons)
        if position is not None and self._writer.is_open:
            offset = self._embed_position(position)
            for polygon in polygons:
                self._writer.write_polygon(polygon, offset)
        return self.number_elements

    def find_surface_4d(self, cell: npt.ArrayLike) -> int:
        """Find the polyhedra of a 4D cell of shape ``(2, 2, 2, 2)``."""
        self._check_dimension(4)
        samples = self._as_cell(cell, 4)
        if not self.contains_surface(samples):
            logger.debug("4D cell is entirely on one side of the threshold.")
            self._store([])
            return 0

        self._hypercube.init_hypercube(samples, self.dx)
        self._store(self._hypercube.construct_polyhedra(self.value))
        return self.number_elements

    def _check_dimension(self, dimension: int) -> None:
        if not self.initialized or self.dimension != dimension:
            logger.error(f"Cornelius called for {dimension}D but initialized for {self.dimension}D.")
            raise UsageError(f"Cornelius not initialized for {dimension}D case.")

    @staticmethod
    def _as_cell(cell: npt.ArrayLike, dimension: int) -> npt.NDArray[np.float64]:
        if dimension not in SUPPORTED_DIMENSIONS:
            raise UsageError("Cornelius is not initialized.")
        samples = np.asarray(cell, dtype=np.float64)
        if samples.shape != (STEPS,) * dimension:
            raise UsageError(
                f"Expected a cell of shape {(STEPS,) * dimension}, got {samples.shape}."
            )
        return samples

    def _embed_position(self, position: Sequence[float]) -> npt.NDArray[np.float64]:
        pos = np.asarray(position, dtype=np.float64).ravel()
        if pos.size == DIM:
            return pos
        if pos.size == self.dimension:
            embedded = np.zeros(DIM, dtype=np.float64)
            embedded[DIM - self.dimension:] = pos
            return embedded
        raise UsageError(f"Position needs {self.dimension} or {DIM} entries, got {pos.size}.")

    def _store(self, elements: Sequence[GeometryElement]) -> None:
        self._normals = np.array([e.normal for e in elements], dtype=np.float64).reshape(-1, DIM)
        self._centroids = np.array([e.centroid for e in elements], dtype=np.float64).reshape(-1, DIM)

    # ---------------- Results ----------------
    @property
    def number_elements(self) -> int:
        return len(self._normals)

    def get_number_elements(self) -> int:
        """Number of surface elements found in the last cell."""
        return self.number_elements

    def get_normals(self) -> npt.NDArray[np.float64]:
        """Normals of the last cell, shape ``(n, dimension)``."""
        return self._normals[:, DIM - self.dimension:].copy()

    def get_centroids(self) -> npt.NDArray[np.float64]:
        """Centroids of the last cell relative to its first corner, shape ``(n, dimension)``."""
        return self._centroids[:, DIM - self.dimension:].copy()

    def get_normals_4d(self) -> npt.NDArray[np.float64]:
        """Normals in the 4D embedding, shape ``(n, 4)``."""
        return self._normals.copy()

    def get_centroids_4d(self) -> npt.NDArray[np.float64]:
        """Centroids in the 4D embedding, shape ``(n, 4)``."""
        return self._centroids.copy()

    def get_normal_element(self, index_surface_element: int, element_normal: int) -> float:
        """
        One component of one normal.

        Raises:
            IndexError: If the element or the component does not exist.
        """
        self._check_range(index_surface_element, element_normal)
        return float(self._normals[index_surface_element, element_normal + DIM - self.dimension])

    def get_centroid_element(self, index_surface_element: int, element_centroid: int) -> float:
        """
        One component of one centroid.

        Raises:
            IndexError: If the element or the component does not exist.
        """
        self._check_range(index_surface_element, element_centroid)
        return float(self._centroids[index_surface_element, element_centroid + DIM - self.dimension])

    def _check_range(self, index_surface_element: int, component: int) -> None:
        if not (0 <= index_surface_element < self.number_elements and 0 <= component < self.dimension):
            raise IndexError("Cornelius error: asking for an element which does not exist.")

    def surface_elements(self) -> list[SurfaceElement]:
        """(normal, centroid) pairs of the last cell in the working dimension."""
        return [
            SurfaceElement(normal, centroid)
            for normal, centroid in zip(self.get_normals(), self.get_centroids())
        ]
