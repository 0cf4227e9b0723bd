from __future__ import annotations

import logging
from typing import Iterator, TYPE_CHECKING

import numpy as np

from cornelius.config import DIM, EPSILON
from cornelius.errors import ConstructionError
from cornelius.geometry.element import GeometryElement
from cornelius.geometry.utils import flip_normal_if_needed, tetrahedron_volume

if TYPE_CHECKING:
    import numpy.typing as npt
    from cornelius.geometry.line import Line
    from cornelius.geometry.polygon import Polygon

logger = logging.getLogger(__name__)


def lines_are_connected(line1: Line, line2: Line, eps: float = EPSILON) -> bool:
    """
    Whether the start or end of ``line1`` coincides with the start of ``line2``.

    Only the start of ``line2`` is tested. Every polygon handed to a polyhedron
    is a closed cycle, so each of its vertices is the start of one of its
    lines and the test still finds every shared vertex.
    """
    difference1 = 0.0
    difference2 = 0.0
    for i in range(DIM):
        if difference1 <= eps:
            difference1 += abs(line1.start[i] - line2.start[i])
        if difference2 <= eps:
            difference2 += abs(line1.end[i] - line2.start[i])
        if difference1 > eps and difference2 > eps:
            return False
    return True


class Polyhedron(GeometryElement):
    """
    A connected set of polygons inside one 4D cell.

    The polyhedron is decomposed into tetrahedra, one per line of every
    polygon: the two line endpoints, the polygon's centroid and a common
    interior point.
    """

    def __init__(self) -> None:
        super().__init__()
        self.polygons: list[Polygon] = []
        self.number_tetrahedrons = 0

    @property
    def size(self) -> int:
        return len(self.polygons)

    @property
    def number_polygons(self) -> int:
        return len(self.polygons)

    def add_polygon(self, polygon: Polygon, perform_no_check: bool = False) -> bool:
        """
        Add a polygon if it shares a vertex with a polygon already in the polyhedron.

        Args:
            polygon: Polygon to add.
            perform_no_check: Accept the polygon without the connectivity test.

        Returns:
            True if the polygon was added.
        """
        if not self.polygons or perform_no_check or self._touches(polygon):
            self.polygons.append(polygon)
            self.number_tetrahedrons += polygon.number_lines
            self._invalidate()
            return True
        return False

    def _touches(self, polygon: Polygon) -> bool:
        for other in self.polygons:
            for new_line in polygon.lines:
                for line in other.lines:
                    if lines_are_connected(new_line, line):
                        return True
        return False

    def _tetrahedra(self) -> Iterator[tuple[Line, npt.NDArray[np.float64]]]:
        """Yield every line together with the centroid of the polygon it belongs to."""
        for polygon in self.polygons:
            polygon_centroid = polygon.centroid
            for line in polygon.lines:
                yield line, polygon_centroid

    def _calculate_centroid(self) -> npt.NDArray[np.float64]:
        if self.number_tetrahedrons == 0:
            raise ConstructionError("Cannot calculate the centroid of an empty polyhedron.")

        mean_point = np.zeros(DIM, dtype=np.float64)
        for line, _ in self._tetrahedra():
            mean_point += line.start + line.end
        mean_point /= 2.0 * self.number_tetrahedrons

        sum_up = np.zeros(DIM, dtype=np.float64)
        sum_down = 0.0
        for line, polygon_centroid in self._tetrahedra():
            volume = float(np.linalg.norm(tetrahedron_volume(
                line.start - mean_point,
                line.end - mean_point,
                polygon_centroid - mean_point,
            )))
            sum_up += volume * 0.25 * (line.start + line.end + polygon_centroid + mean_point)
            sum_down += volume
        if sum_down == 0.0:
            logger.error(f"Polyhedron with {self.number_polygons} polygons has zero volume.")
            raise ConstructionError("Polyhedron has zero volume, centroid is undefined.")
        return sum_up / sum_down

    def _calculate_normal(self) -> npt.NDArray[np.float64]:
        centroid = self.centroid
        normal = np.zeros(DIM, dtype=np.float64)
        for line, polygon_centroid in self._tetrahedra():
            n = tetrahedron_volume(
                line.start - centroid,
                line.end - centroid,
                polygon_centroid - centroid,
            )
            normal += flip_normal_if_needed(n, line.outside - centroid)
        return normal
