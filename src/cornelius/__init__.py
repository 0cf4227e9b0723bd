"""
cornelius - isosurface elements in single grid cells
=====================================================

Given the samples at the corners of a 2D, 3D or 4D grid cell and a threshold,
find the surface elements (lines, polygons, polyhedra) where the field
crosses the threshold, with their normals and centroids.

Layers:
    geometry/ - Line, Polygon, Polyhedron (normals and centroids)
    cells/    - Square, Cube, Hypercube (marching cells)
    cornelius - Cornelius facade used by a grid walker
"""

__version__ = "0.1.0"

from cornelius.cornelius import Cornelius, SurfaceElement
from cornelius.errors import ConstructionError, CorneliusError, UsageError
from cornelius.logging_config import setup_logging

__all__ = [
    "Cornelius",
    "SurfaceElement",
    "CorneliusError",
    "ConstructionError",
    "UsageError",
    "setup_logging",
    "__version__",
]
