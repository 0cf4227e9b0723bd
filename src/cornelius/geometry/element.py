from __future__ import annotations

from abc import ABC, abstractmethod

from typing import Optional, TYPE_CHECKING

import numpy as np

from cornelius.geometry.utils import frozen

if TYPE_CHECKING:
    import numpy.typing as npt


class GeometryElement(ABC):
    """
    Abstract base class for surface elements embedded in 4D.

    Subclasses build themselves up (lines, polygons, ...) and provide
    ``_calculate_centroid`` and ``_calculate_normal``. Both are evaluated once,
    on first access, and cached as read-only arrays until the element is
    modified again.
    """

    def __init__(self) -> None:
        self._normal: Optional[npt.NDArray[np.float64]] = None
        self._centroid: Optional[npt.NDArray[np.float64]] = None

    def __repr__(self) -> str:
        """String representation of the element."""
        return f"{self.__class__.__name__}(size={self.size})"

    @property
    @abstractmethod
    def size(self) -> int:
        """Number of constituents (points, lines or polygons)."""
        pass

    @property
    def normal(self) -> npt.NDArray[np.float64]:
        """Outward normal, its length is the size (length, area, volume) of the element."""
        if self._normal is None:
            self._normal = frozen(self._calculate_normal())
        return self._normal

    @property
    def centroid(self) -> npt.NDArray[np.float64]:
        """Centroid of the element in local cell coordinates."""
        if self._centroid is None:
            self._centroid = frozen(self._calculate_centroid())
        return self._centroid

    @property
    def is_calculated(self) -> bool:
        """Whether both derived quantities are currently cached."""
        return self._normal is not None and self._centroid is not None

    def _invalidate(self) -> None:
        self._normal = None
        self._centroid = None

    @abstractmethod
    def _calculate_normal(self) -> npt.NDArray[np.float64]:
        """Calculate the normal vector of the element."""
        pass

    @abstractmethod
    def _calculate_centroid(self) -> npt.NDArray[np.float64]:
        """Calculate the centroid of the element."""
        pass
