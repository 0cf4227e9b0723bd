from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import numpy as np

from cornelius.cells.cell import Cell
from cornelius.cells.cube import Cube
from cornelius.config import DIM, MAX_POLYHEDRA, STEPS
from cornelius.geometry.polyhedron import Polyhedron

if TYPE_CHECKING:
    import numpy.typing as npt
    from cornelius.geometry.polygon import Polygon

logger = logging.getLogger(__name__)

NCUBES = 8


class Hypercube(Cell):
    """
    Marching hypercubes on a full 4D cell.

    The cell is cut into eight cubes, two per axis, and the polygons found in
    the cubes are glued into polyhedra. ``points[i][j][k][l]`` follow the
    axes of the embedding in order.
    """

    dimension = 4

    def __init__(self) -> None:
        super().__init__()
        self.cubes = [Cube() for _ in range(NCUBES)]
        self.polygons: list[Polygon] = []
        self.polyhedra: list[Polyhedron] = []

    def init_hypercube(self, points: npt.ArrayLike, dx: npt.NDArray[np.float64]) -> None:
        """
        Load new samples.

        Args:
            points: Samples, shape ``(2, 2, 2, 2)``.
            dx: Spacing in the 4D embedding, shape ``(4,)``.
        """
        self._set_points(points)
        self.dx = np.asarray(dx, dtype=np.float64)
        self.ambiguous = False
        self.polygons = []
        self.polyhedra = []

    @property
    def elements(self) -> list[Polyhedron]:
        return self.polyhedra

    @property
    def number_polyhedra(self) -> int:
        return len(self.polyhedra)

    @property
    def number_lines(self) -> int:
        """Total number of lines found in the eight cubes."""
        return sum(cube.number_lines for cube in self.cubes)

    def split_to_cubes(self, value: float) -> int:
        """
        Load the eight boundary cubes into the cube engines.

        Args:
            value: Threshold.

        Returns:
            Number of corners of the hypercube below ``value``.
        """
        number_cube = 0
        for i in range(DIM):
            for j in range(STEPS):
                self.cubes[number_cube].init_cube(
                    np.take(self.points, j, axis=i),
                    i,
                    j * self.dx[i],
                    self.dx,
                )
                number_cube += 1
        return int(np.count_nonzero(self.points < value))

    def check_ambiguity(self, number_points_below_value: int) -> bool:
        """
        A hypercube is ambiguous if one of its cubes is, or in the 4D saddle
        configuration: 24 lines in total with two corners on the minority side.
        """
        if any(cube.ambiguous for cube in self.cubes):
            self.ambiguous = True
            return True
        if number_points_below_value > 8:
            number_points_below_value = 16 - number_points_below_value
        self.ambiguous = self.number_lines == 24 and number_points_below_value == 2
        return self.ambiguous

    def construct(self, value: float) -> list[Polyhedron]:
        return self.construct_polyhedra(value)

    def construct_polyhedra(self, value: float) -> list[Polyhedron]:
        """
        Find the polyhedra where the samples cross ``value``.

        Args:
            value: Threshold.

        Returns:
            The polyhedra of the hypercube (also kept in ``self.polyhedra``).
        """
        number_points_below_value = self.split_to_cubes(value)
        self.polygons = []
        self.polyhedra = []
        for cube in self.cubes:
            self.polygons.extend(cube.construct_polygons(value))

        if not self.polygons:
            self.ambiguous = False
            return self.polyhedra

        if self.check_ambiguity(number_points_below_value):
            logger.debug(
                f"Ambiguous hypercube with {len(self.polygons)} polygons and "
                f"{number_points_below_value} corner(s) below {value}."
            )
            self._connect_polygons()
        else:
            polyhedron = Polyhedron()
            for polygon in self.polygons:
                polyhedron.add_polygon(polygon, perform_no_check=True)
            self.polyhedra.append(polyhedron)
        return self.polyhedra

    def _connect_polygons(self) -> None:
        """Grow polyhedra greedily until every polygon belongs to one."""
        not_used = [True] * len(self.polygons)
        used = 0
        while used < len(self.polygons):
            if len(self.polyhedra) == MAX_POLYHEDRA:
                logger.debug(f"Hypercube grows past {MAX_POLYHEDRA} polyhedra.")
            polyhedron = Polyhedron()
            i = 0
            while i < len(self.polygons):
                if not_used[i] and polyhedron.add_polygon(self.polygons[i]):
                    not_used[i] = False
                    used += 1
                    i = 0
                    continue
                i += 1
            self.polyhedra.append(polyhedron)
