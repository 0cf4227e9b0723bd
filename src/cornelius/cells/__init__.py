"""
Marching cells in 2, 3 and 4 dimensions.

Each cell splits itself into cells of one dimension lower and assembles
their surface elements:
    Square    -> lines
    Cube      -> polygons (from the lines of 6 squares)
    Hypercube -> polyhedra (from the polygons of 8 cubes)
"""
from cornelius.cells.cell import Cell
from cornelius.cells.square import Square
from cornelius.cells.cube import Cube
from cornelius.cells.hypercube import Hypercube

__all__ = ["Cell", "Square", "Cube", "Hypercube"]
