from __future__ import annotations

from abc import ABC, abstractmethod

from typing import TYPE_CHECKING

import numpy as np

from cornelius.config import DIM, STEPS
from cornelius.errors import UsageError

if TYPE_CHECKING:
    import numpy.typing as npt
    from cornelius.geometry import GeometryElement


class Cell(ABC):
    """
    Abstract base class for the marching cells (square, cube, hypercube).

    A cell holds ``STEPS`` samples per axis of its own dimension and turns
    them into surface elements of one dimension lower. Instances keep working
    state between calls and are reused; they must not be shared between threads.
    """

    dimension: int = 0

    def __init__(self) -> None:
        self.points: npt.NDArray[np.float64] = np.zeros((STEPS,) * self.dimension, dtype=np.float64)
        self.dx: npt.NDArray[np.float64] = np.ones(DIM, dtype=np.float64)
        self.ambiguous = False

    def __repr__(self) -> str:
        """String representation of the cell."""
        return (
            f"{self.__class__.__name__}(elements={self.number_elements}, "
            f"ambiguous={self.ambiguous})"
        )

    def _set_points(self, points: npt.ArrayLike) -> None:
        arr = np.array(points, dtype=np.float64)
        if arr.shape != (STEPS,) * self.dimension:
            raise UsageError(
                f"{self.__class__.__name__} expects samples of shape "
                f"{(STEPS,) * self.dimension}, got {arr.shape}."
            )
        self.points = arr

    @property
    def number_elements(self) -> int:
        """Number of surface elements produced by the last construction."""
        return len(self.elements)

    @property
    @abstractmethod
    def elements(self) -> list[GeometryElement]:
        """Surface elements produced by the last construction."""
        pass

    @abstractmethod
    def construct(self, value: float) -> list[GeometryElement]:
        """Find the surface elements where the samples cross ``value``."""
        pass
