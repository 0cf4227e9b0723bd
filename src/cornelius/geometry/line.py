from __future__ import annotations

from typing import Sequence, TYPE_CHECKING

import numpy as np

from cornelius.config import DIM
from cornelius.geometry.element import GeometryElement
from cornelius.geometry.utils import flip_normal_if_needed, free_axes, frozen

if TYPE_CHECKING:
    import numpy.typing as npt


class Line(GeometryElement):
    """
    A directed segment inside one square face of a cell.

    Only two axes of the 4D embedding vary along the line; the other two are
    fixed by the square it was cut from. The outside point lies on the side of
    the surface where the field is below the threshold and orients the normal.
    """

    def __init__(
        self,
        start: Sequence[float] | npt.NDArray[np.float64],
        end: Sequence[float] | npt.NDArray[np.float64],
        outside: Sequence[float] | npt.NDArray[np.float64],
        const_i: tuple[int, int]
    ) -> None:
        """
        Initialize the line.

        Args:
            start: Start point, shape ``(4,)``.
            end: End point, shape ``(4,)``.
            outside: Outside reference point, shape ``(4,)``.
            const_i: The two constant axes.
        """
        super().__init__()
        self.start = np.array(start, dtype=np.float64).reshape(DIM)
        self.end = np.array(end, dtype=np.float64).reshape(DIM)
        self.outside = frozen(np.array(outside, dtype=np.float64).reshape(DIM))
        self.const_i = (int(const_i[0]), int(const_i[1]))
        self.x1, self.x2 = free_axes(self.const_i)

    def __repr__(self) -> str:
        """String representation of the line."""
        return f"{self.__class__.__name__}(start={self.start}, end={self.end})"

    @property
    def size(self) -> int:
        return 2

    @property
    def points(self) -> tuple[npt.NDArray[np.float64], npt.NDArray[np.float64]]:
        """Start and end point."""
        return self.start, self.end

    def flip(self) -> None:
        """Swap the start and end point in place."""
        self.start, self.end = self.end, self.start
        self._invalidate()

    @property
    def length(self) -> float:
        return float(np.linalg.norm(self.end - self.start))

    def _calculate_centroid(self) -> npt.NDArray[np.float64]:
        return 0.5 * (self.start + self.end)

    def _calculate_normal(self) -> npt.NDArray[np.float64]:
        # Perpendicular to the line in the (x1, x2) plane
        normal = np.zeros(DIM, dtype=np.float64)
        normal[self.x1] = -(self.end[self.x2] - self.start[self.x2])
        normal[self.x2] = self.end[self.x1] - self.start[self.x1]
        return flip_normal_if_needed(normal, self.outside - self.start)
