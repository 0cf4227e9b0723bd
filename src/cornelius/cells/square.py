from __future__ import annotations

import logging
from typing import Sequence, TYPE_CHECKING

import numpy as np

from cornelius.cells.cell import Cell
from cornelius.config import ALMOST_ONE, ALMOST_ZERO, DIM
from cornelius.errors import ConstructionError
from cornelius.geometry.line import Line
from cornelius.geometry.utils import free_axes

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)

# Edges of the unit square as (corner a, corner b, varying local axis).
# A cut on an edge sits at corner a, moved along the varying axis.
EDGES = (
    ((0, 0), (1, 0), 0),
    ((0, 0), (0, 1), 1),
    ((1, 0), (1, 1), 1),
    ((0, 1), (1, 1), 0),
)


class Square(Cell):
    """
    Marching squares on one 2D face.

    ``points[i][j]`` is the sample at ``i`` steps along ``x1`` and ``j`` steps
    along ``x2``, where ``x1 < x2`` are the two axes not listed in ``const_i``.
    The square yields no line, one line, or two lines in the saddle case.
    """

    dimension = 2

    def __init__(self) -> None:
        super().__init__()
        self.const_i: tuple[int, int] = (0, 1)
        self.const_value: tuple[float, float] = (0.0, 0.0)
        self.x1, self.x2 = free_axes(self.const_i)
        self.number_cuts = 0
        self.lines: list[Line] = []

    def init_square(
        self,
        points: npt.ArrayLike,
        const_i: Sequence[int],
        const_value: Sequence[float],
        dx: npt.NDArray[np.float64]
    ) -> None:
        """
        Load new samples and placement.

        Args:
            points: Samples, shape ``(2, 2)``.
            const_i: The two constant axes of the 4D embedding.
            const_value: Coordinates of the square along the constant axes.
            dx: Spacing in the 4D embedding, shape ``(4,)``.
        """
        self._set_points(points)
        self.const_i = (int(const_i[0]), int(const_i[1]))
        self.const_value = (float(const_value[0]), float(const_value[1]))
        self.x1, self.x2 = free_axes(self.const_i)
        self.dx = np.asarray(dx, dtype=np.float64)
        self.ambiguous = False
        self.number_cuts = 0
        self.lines = []

    @property
    def elements(self) -> list[Line]:
        return self.lines

    @property
    def number_lines(self) -> int:
        return len(self.lines)

    @property
    def spacing(self) -> npt.NDArray[np.float64]:
        """Edge lengths along ``x1`` and ``x2``."""
        return np.array([self.dx[self.x1], self.dx[self.x2]])

    def construct(self, value: float) -> list[Line]:
        return self.construct_lines(value)

    def construct_lines(self, value: float) -> list[Line]:
        """
        Find the lines where the samples cross ``value``.

        Args:
            value: Threshold.

        Raises:
            ConstructionError: If the number of edge cuts is not 0, 2 or 4.

        Returns:
            The lines of the square (also kept in ``self.lines``).
        """
        self.ambiguous = False
        self.lines = []
        above = self.points >= value
        if above.all() or not above.any():
            self.number_cuts = 0
            return self.lines

        cuts = self._ends_of_edge(value)
        self.number_cuts = len(cuts)
        if not cuts:
            return self.lines
        cuts, outside = self._find_outside(value, cuts)

        for k in range(0, len(cuts), 2):
            self.lines.append(Line(
                start=self._embed(cuts[k]),
                end=self._embed(cuts[k + 1]),
                outside=self._embed(outside[k // 2]),
                const_i=self.const_i,
            ))
        return self.lines

    def _embed(self, local: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
        """Place a point given in (x1, x2) into the 4D embedding."""
        point = np.empty(DIM, dtype=np.float64)
        point[self.x1] = local[0]
        point[self.x2] = local[1]
        point[self.const_i[0]] = self.const_value[0]
        point[self.const_i[1]] = self.const_value[1]
        return point

    def _ends_of_edge(self, value: float) -> list[npt.NDArray[np.float64]]:
        spacing = self.spacing
        cuts = []
        for corner_a, corner_b, axis in EDGES:
            a = self.points[corner_a]
            b = self.points[corner_b]
            if (a - value) * (b - value) < 0:
                fraction = (a - value) / (a - b)
            elif a == value and b < value:
                fraction = ALMOST_ZERO
            elif b == value and a < value:
                fraction = ALMOST_ONE
            else:
                continue
            cut = np.array(corner_a, dtype=np.float64) * spacing
            cut[axis] = fraction * spacing[axis]
            cuts.append(cut)

        if len(cuts) not in (0, 2, 4):
            logger.error(f"Square {self.points.tolist()} at value {value} has {len(cuts)} cuts.")
            raise ConstructionError(f"Invalid number of cuts in a square: {len(cuts)}")
        return cuts

    def _find_outside(
        self,
        value: float,
        cuts: list[npt.NDArray[np.float64]]
    ) -> tuple[list[npt.NDArray[np.float64]], list[npt.NDArray[np.float64]]]:
        """
        Pair the cuts into lines and find an outside point for every line.

        Returns:
            The cuts, ordered so that consecutive pairs form lines, and one
            outside point per line.
        """
        spacing = self.spacing
        p00 = self.points[0, 0]

        if len(cuts) == 4:
            self.ambiguous = True
            value_middle = float(self.points.mean())
            logger.debug(f"Ambiguous square, middle value {value_middle} against {value}.")
            # By default the cuts pair up around corners (0,0) and (1,1). If the
            # middle is on the same side as (0,0), the corners (1,0) and (0,1)
            # are cut off instead.
            if (p00 < value and value_middle < value) or (p00 > value and value_middle > value):
                cuts = [cuts[0], cuts[2], cuts[1], cuts[3]]

            if value_middle < value:
                middle = 0.5 * spacing
                return cuts, [middle, middle.copy()]
            if p00 < value:
                return cuts, [np.zeros(2), spacing.copy()]
            return cuts, [np.array([spacing[0], 0.0]), np.array([0.0, spacing[1]])]

        outside = np.zeros(2, dtype=np.float64)
        number_out = 0
        for i in range(2):
            for j in range(2):
                if self.points[i, j] < value:
                    outside += np.array([i, j]) * spacing
                    number_out += 1
        if number_out > 0:
            outside /= number_out
        return cuts, [outside]
