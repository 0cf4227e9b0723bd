"""
The GEOMETRY layer contains the surface elements themselves.
It has NO knowledge of cells or thresholds; it only deals with points,
lines, polygons and polyhedra embedded in 4D.
"""
from cornelius.geometry.element import GeometryElement
from cornelius.geometry.line import Line
from cornelius.geometry.polygon import Polygon
from cornelius.geometry.polyhedron import Polyhedron, lines_are_connected
from cornelius.geometry.utils import flip_normal_if_needed, free_axes, tetrahedron_volume

__all__ = [
    "GeometryElement",
    "Line",
    "Polygon",
    "Polyhedron",
    "lines_are_connected",
    "flip_normal_if_needed",
    "free_axes",
    "tetrahedron_volume",
]
