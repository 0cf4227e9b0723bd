from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import numpy as np

from cornelius.config import DIM, EPSILON, MAX_LINES_PER_POLYGON
from cornelius.errors import ConstructionError
from cornelius.geometry.element import GeometryElement
from cornelius.geometry.utils import cross_3, flip_normal_if_needed, free_axes, points_coincide

if TYPE_CHECKING:
    import numpy.typing as npt
    from cornelius.geometry.line import Line

logger = logging.getLogger(__name__)


class Polygon(GeometryElement):
    """
    A closed cycle of lines inside one 3D cube of a cell.

    One axis of the 4D embedding (``const_i``) is constant over the polygon.
    Normal and centroid are evaluated by splitting the polygon into triangles
    that share the mean of all line endpoints.
    """

    def __init__(self, const_i: int) -> None:
        """
        Initialize an empty polygon.

        Args:
            const_i: The constant axis of the cube the polygon lives in.
        """
        super().__init__()
        self.const_i = int(const_i)
        self.x1, self.x2, self.x3 = free_axes((self.const_i,))
        self.lines: list[Line] = []

    @property
    def size(self) -> int:
        return len(self.lines)

    @property
    def number_lines(self) -> int:
        return len(self.lines)

    @property
    def axes(self) -> tuple[int, int, int]:
        """The three varying axes."""
        return self.x1, self.x2, self.x3

    def add_line(self, line: Line, perform_no_check: bool = False) -> bool:
        """
        Append a line to the open end of the polygon.

        The first line is always accepted. Later lines are accepted if one of
        their endpoints coincides with the end of the last line; a line that
        touches with its end point is flipped before it is appended.

        Args:
            line: Line to add.
            perform_no_check: Accept the line without the connectivity test.

        Returns:
            True if the line was added.
        """
        if not self.lines or perform_no_check:
            self._append(line)
            return True

        last_end = self.lines[-1].end
        touches_start = points_coincide(line.start, last_end)
        touches_end = points_coincide(line.end, last_end)
        if not (touches_start or touches_end):
            return False
        if touches_end:
            line.flip()
        self._append(line)
        return True

    def _append(self, line: Line) -> None:
        if len(self.lines) == MAX_LINES_PER_POLYGON:
            logger.debug(f"Polygon grows past {MAX_LINES_PER_POLYGON} lines.")
        self.lines.append(line)
        self._invalidate()

    def order_lines(self) -> None:
        """
        Put the lines into cycle order, flipping them where needed.

        Used after lines were added without checks. The result does not change
        the centroid or normal, only the order in which lines are stored.
        """
        if len(self.lines) < 2:
            return
        remaining = self.lines[1:]
        ordered = [self.lines[0]]
        while remaining:
            last_end = ordered[-1].end
            for k, line in enumerate(remaining):
                if points_coincide(line.start, last_end):
                    break
                if points_coincide(line.end, last_end):
                    line.flip()
                    break
            else:
                logger.debug(
                    f"Polygon lines do not chain, {len(remaining)} line(s) left unordered."
                )
                ordered.extend(remaining)
                break
            ordered.append(remaining.pop(k))
        self.lines = ordered
        self._invalidate()

    def is_closed(self, eps: float = EPSILON) -> bool:
        """Whether consecutive lines share endpoints and the last line ends at the first start."""
        if len(self.lines) < 3:
            return False
        for previous, current in zip(self.lines, self.lines[1:] + self.lines[:1]):
            if not points_coincide(previous.end, current.start, eps):
                return False
        return True

    def _mean_point(self) -> npt.NDArray[np.float64]:
        total = np.zeros(DIM, dtype=np.float64)
        for line in self.lines:
            total += line.start + line.end
        return total / (2.0 * len(self.lines))

    def _calculate_centroid(self) -> npt.NDArray[np.float64]:
        if not self.lines:
            raise ConstructionError("Cannot calculate the centroid of an empty polygon.")
        mean_point = self._mean_point()
        # The mean of the vertices is exact for triangles
        if len(self.lines) == 3:
            return mean_point

        sum_up = np.zeros(DIM, dtype=np.float64)
        sum_down = 0.0
        for line in self.lines:
            a = line.start - mean_point
            b = line.end - mean_point
            area = 0.5 * float(np.linalg.norm(cross_3(a, b, self.axes)))
            sum_up += area * (line.start + line.end + mean_point) / 3.0
            sum_down += area
        if sum_down == 0.0:
            logger.error(f"Polygon with {len(self.lines)} lines has zero area.")
            raise ConstructionError("Polygon has zero area, centroid is undefined.")
        return sum_up / sum_down

    def _calculate_normal(self) -> npt.NDArray[np.float64]:
        centroid = self.centroid
        normal = np.zeros(DIM, dtype=np.float64)
        for line in self.lines:
            a = line.start - centroid
            b = line.end - centroid
            triangle_normal = 0.5 * cross_3(a, b, self.axes)
            triangle_normal[self.const_i] = 0.0
            normal += flip_normal_if_needed(triangle_normal, line.outside - centroid)
        return normal

    def triangles(self, position: npt.NDArray[np.float64] | None = None) -> npt.NDArray[np.float64]:
        """
        Triangulated patch of the polygon for plotting.

        Each line gives one triangle (start, end, centroid), restricted to the
        three varying axes and shifted by ``position``.

        Args:
            position: Offset in the 4D embedding, defaults to the origin.

        Returns:
            Array of shape ``(number_lines, 3, 3)``.
        """
        offset = np.zeros(DIM) if position is None else np.asarray(position, dtype=np.float64)
        axes = list(self.axes)
        centroid = self.centroid
        patches = np.empty((len(self.lines), 3, 3), dtype=np.float64)
        for i, line in enumerate(self.lines):
            patches[i, 0] = (offset + line.start)[axes]
            patches[i, 1] = (offset + line.end)[axes]
            patches[i, 2] = (offset + centroid)[axes]
        return patches
