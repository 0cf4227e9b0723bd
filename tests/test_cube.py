"""
Tests for the marching cube.

Run: python -m pytest tests/test_cube.py -v
"""
import numpy as np
import pytest

from cornelius.cells import Cube
from cornelius.errors import ConstructionError
from cornelius.geometry import Line

DX = np.ones(4)


def build_cube(points, dx=DX):
    cube = Cube()
    cube.init_cube(points, 0, 0.0, dx)
    return cube


def test_split_to_squares_places_faces(linear_cell):
    cube = build_cube(linear_cell([1.0, 2.0, 4.0]))
    cube.split_to_squares()

    # Second face pair is perpendicular to embedding axis 2
    square = cube.squares[3]
    assert square.const_i == (0, 2)
    assert square.const_value == (0.0, 1.0)
    assert (square.x1, square.x2) == (1, 3)
    np.testing.assert_allclose(square.points, [[2.0, 6.0], [3.0, 7.0]])


def test_single_corner_gives_triangle(corner_cell):
    cube = build_cube(corner_cell(3, [(0, 0, 0)]))
    polygons = cube.construct_polygons(0.5)

    assert not cube.ambiguous
    assert cube.number_lines == 3
    assert len(polygons) == 1
    polygon = polygons[0]
    assert polygon.is_closed()
    np.testing.assert_allclose(polygon.centroid, [0.0] + [1.0 / 6.0] * 3)
    np.testing.assert_allclose(polygon.normal, [0.0] + [-0.125] * 3)


def test_opposite_corners_are_ambiguous(corner_cell):
    cube = build_cube(corner_cell(3, [(0, 0, 0), (1, 1, 1)]))
    polygons = cube.construct_polygons(0.5)

    assert cube.ambiguous
    assert cube.number_lines == 6
    assert [p.number_lines for p in polygons] == [3, 3]
    assert all(p.is_closed() for p in polygons)
    np.testing.assert_allclose(polygons[0].centroid[1:], [1.0 / 6.0] * 3)
    np.testing.assert_allclose(polygons[0].normal[1:], [-0.125] * 3)
    np.testing.assert_allclose(polygons[1].centroid[1:], [5.0 / 6.0] * 3)
    np.testing.assert_allclose(polygons[1].normal[1:], [0.125] * 3)


def test_face_saddle_makes_cube_ambiguous(corner_cell):
    # Diagonal corners of the face at index0 = 0
    cube = build_cube(corner_cell(3, [(0, 0, 0), (0, 1, 1)]))
    polygons = cube.construct_polygons(0.5)
    assert cube.ambiguous
    assert sum(p.number_lines for p in polygons) == cube.number_lines
    assert all(p.is_closed() for p in polygons)


def test_plane_cut_uses_spacing(linear_cell):
    dx = np.array([1.0, 2.0, 3.0, 4.0])
    cube = build_cube(linear_cell([1.0, 0.0, 0.0]), dx=dx)
    (polygon,) = cube.construct_polygons(0.5)

    assert polygon.number_lines == 4
    assert polygon.is_closed()
    np.testing.assert_allclose(polygon.centroid, [0.0, 1.0, 1.5, 2.0])
    np.testing.assert_allclose(polygon.normal, [0.0, 12.0, 0.0, 0.0], atol=1e-12)


def test_const_value_is_carried_to_the_polygon(corner_cell):
    cube = Cube()
    cube.init_cube(corner_cell(3, [(0, 0, 0)]), 2, 7.0, DX)
    (polygon,) = cube.construct_polygons(0.5)
    assert polygon.const_i == 2
    for line in polygon.lines:
        assert line.start[2] == 7.0
        assert line.end[2] == 7.0
    assert polygon.normal[2] == 0.0


def test_uniform_cube_has_no_polygons():
    cube = build_cube(np.full((2, 2, 2), 3.0))
    assert cube.construct_polygons(0.5) == []
    assert not cube.ambiguous


def test_random_cubes_give_closed_polygons(rng):
    cube = Cube()
    for _ in range(300):
        cube.init_cube(rng.random((2, 2, 2)), 0, 0.0, DX)
        polygons = cube.construct_polygons(0.5)
        assert sum(p.number_lines for p in polygons) == cube.number_lines
        for polygon in polygons:
            assert polygon.is_closed()
            assert np.isfinite(polygon.normal).all()


def test_leftover_lines_raise():
    outside = np.zeros(4)
    cube = build_cube(np.zeros((2, 2, 2)))
    cube.lines = [
        Line(np.array([0.0, 0.0, 0.0, 0.0]), np.array([0.0, 1.0, 0.0, 0.0]), outside, (0, 3)),
        Line(np.array([0.0, 5.0, 5.0, 0.0]), np.array([0.0, 6.0, 5.0, 0.0]), outside, (0, 3)),
    ]
    with pytest.raises(ConstructionError):
        cube._connect_lines()
