from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import numpy as np

from cornelius.cells.cell import Cell
from cornelius.cells.square import Square
from cornelius.config import DIM, MAX_POLYGONS, STEPS
from cornelius.errors import ConstructionError
from cornelius.geometry.polygon import Polygon
from cornelius.geometry.utils import free_axes

if TYPE_CHECKING:
    import numpy.typing as npt
    from cornelius.geometry.line import Line

logger = logging.getLogger(__name__)

NSQUARES = 6


class Cube(Cell):
    """
    Marching cubes on one 3D slice of the embedding.

    The cube is cut into its six faces, each face is handled by a
    :class:`Square`, and the resulting lines are joined into polygons.
    ``points[i][j][k]`` are ordered along ``x1 < x2 < x3``, the axes other
    than ``const_i``.
    """

    dimension = 3

    def __init__(self) -> None:
        super().__init__()
        self.const_i = 0
        self.const_value = 0.0
        self.x1, self.x2, self.x3 = free_axes((self.const_i,))
        self.squares = [Square() for _ in range(NSQUARES)]
        self.lines: list[Line] = []
        self.polygons: list[Polygon] = []

    def init_cube(
        self,
        points: npt.ArrayLike,
        const_i: int,
        const_value: float,
        dx: npt.NDArray[np.float64]
    ) -> None:
        """
        Load new samples and placement.

        Args:
            points: Samples, shape ``(2, 2, 2)``.
            const_i: The constant axis of the 4D embedding.
            const_value: Coordinate of the cube along the constant axis.
            dx: Spacing in the 4D embedding, shape ``(4,)``.
        """
        self._set_points(points)
        self.const_i = int(const_i)
        self.const_value = float(const_value)
        self.x1, self.x2, self.x3 = free_axes((self.const_i,))
        self.dx = np.asarray(dx, dtype=np.float64)
        self.ambiguous = False
        self.lines = []
        self.polygons = []

    @property
    def elements(self) -> list[Polygon]:
        return self.polygons

    @property
    def number_polygons(self) -> int:
        return len(self.polygons)

    @property
    def number_lines(self) -> int:
        return len(self.lines)

    def split_to_squares(self) -> None:
        """Load the six faces of the cube into the square engines."""
        number_squares = 0
        axes = (self.x1, self.x2, self.x3)
        for i in range(DIM):
            if i == self.const_i:
                continue
            local_axis = axes.index(i)
            for j in range(STEPS):
                self.squares[number_squares].init_square(
                    np.take(self.points, j, axis=local_axis),
                    (self.const_i, i),
                    (self.const_value, j * self.dx[i]),
                    self.dx,
                )
                number_squares += 1

    def check_ambiguity(self) -> bool:
        """
        A cube is ambiguous if one of its faces is, or if it has exactly six
        lines, which happens when two opposite corners are cut off.
        """
        self.ambiguous = any(square.ambiguous for square in self.squares) or len(self.lines) == 6
        return self.ambiguous

    def construct(self, value: float) -> list[Polygon]:
        return self.construct_polygons(value)

    def construct_polygons(self, value: float) -> list[Polygon]:
        """
        Find the polygons where the samples cross ``value``.

        Args:
            value: Threshold.

        Raises:
            ConstructionError: If the lines cannot be closed into polygons.

        Returns:
            The polygons of the cube (also kept in ``self.polygons``).
        """
        self.split_to_squares()
        self.lines = []
        self.polygons = []
        for square in self.squares:
            self.lines.extend(square.construct_lines(value))

        # Only possible when the cube is a slice of a 4D cell
        if not self.lines:
            self.ambiguous = False
            return self.polygons

        if self.check_ambiguity():
            logger.debug(f"Ambiguous cube with {len(self.lines)} lines.")
            self._connect_lines()
        else:
            polygon = Polygon(self.const_i)
            for line in self.lines:
                polygon.add_line(line, perform_no_check=True)
            polygon.order_lines()
            self.polygons.append(polygon)
        return self.polygons

    def _connect_lines(self) -> None:
        """Grow polygons greedily until every line belongs to one."""
        not_used = [True] * len(self.lines)
        used = 0
        while used < len(self.lines):
            if len(self.lines) - used < 3:
                logger.error(
                    f"Cube {self.points.tolist()} left {len(self.lines) - used} line(s) "
                    f"that cannot form a polygon."
                )
                raise ConstructionError(
                    f"Cannot construct a polygon from {len(self.lines) - used} lines."
                )
            if len(self.polygons) == MAX_POLYGONS:
                logger.debug(f"Cube grows past {MAX_POLYGONS} polygons.")
            polygon = Polygon(self.const_i)
            i = 0
            while i < len(self.lines):
                if not_used[i] and polygon.add_line(self.lines[i]):
                    not_used[i] = False
                    used += 1
                    # Start over so that earlier lines get another chance
                    i = 0
                    continue
                i += 1
            self.polygons.append(polygon)
