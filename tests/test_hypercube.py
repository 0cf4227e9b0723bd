"""
Tests for the marching hypercube.

Run: python -m pytest tests/test_hypercube.py -v
"""
import numpy as np

from cornelius.cells import Hypercube

DX = np.ones(4)


def build_hypercube(points, dx=DX):
    hypercube = Hypercube()
    hypercube.init_hypercube(points, dx)
    return hypercube


def test_split_to_cubes_counts_points_below(linear_cell):
    hypercube = build_hypercube(linear_cell([1.0, 2.0, 4.0, 8.0]))
    number_below = hypercube.split_to_cubes(5.5)
    assert number_below == 6

    cube = hypercube.cubes[3]
    assert cube.const_i == 1
    assert cube.const_value == 1.0
    np.testing.assert_allclose(cube.points, np.take(hypercube.points, 1, axis=1))


def test_split_to_cubes_uses_spacing(linear_cell):
    hypercube = build_hypercube(linear_cell([1.0, 1.0, 1.0, 1.0]), dx=np.array([1.0, 2.0, 3.0, 4.0]))
    hypercube.split_to_cubes(0.5)
    assert [cube.const_value for cube in hypercube.cubes] == [0.0, 1.0, 0.0, 2.0, 0.0, 3.0, 0.0, 4.0]


def test_hyperplane_cut(linear_cell):
    hypercube = build_hypercube(linear_cell([1.0, 0.0, 0.0, 0.0]))
    (polyhedron,) = hypercube.construct_polyhedra(0.5)

    assert not hypercube.ambiguous
    assert hypercube.number_lines == 24
    assert polyhedron.number_polygons == 6
    assert polyhedron.number_tetrahedrons == 24
    np.testing.assert_allclose(polyhedron.normal, [1.0, 0.0, 0.0, 0.0], atol=1e-12)
    np.testing.assert_allclose(polyhedron.centroid, [0.5] * 4)


def test_single_corner_gives_tetrahedron(corner_cell):
    hypercube = build_hypercube(corner_cell(4, [(0, 0, 0, 0)]))
    (polyhedron,) = hypercube.construct_polyhedra(0.5)

    assert not hypercube.ambiguous
    assert polyhedron.number_polygons == 4
    np.testing.assert_allclose(polyhedron.normal, [-1.0 / 48.0] * 4)
    np.testing.assert_allclose(polyhedron.centroid, [0.125] * 4)


def test_opposite_corners_are_ambiguous(corner_cell):
    hypercube = build_hypercube(corner_cell(4, [(0, 0, 0, 0), (1, 1, 1, 1)]))
    polyhedra = hypercube.construct_polyhedra(0.5)

    # Fourteen corners below, mirrored to two. No cube is ambiguous on its own
    assert not any(cube.ambiguous for cube in hypercube.cubes)
    assert hypercube.ambiguous
    assert hypercube.number_lines == 24
    assert [p.number_polygons for p in polyhedra] == [4, 4]
    np.testing.assert_allclose(polyhedra[0].normal, [-1.0 / 48.0] * 4)
    np.testing.assert_allclose(polyhedra[0].centroid, [0.125] * 4)
    np.testing.assert_allclose(polyhedra[1].normal, [1.0 / 48.0] * 4)
    np.testing.assert_allclose(polyhedra[1].centroid, [0.875] * 4)


def test_two_cold_corners_are_ambiguous(corner_cell):
    # Fourteen hot corners: two corners below the threshold
    hot = [
        (i, j, k, l)
        for i in (0, 1) for j in (0, 1) for k in (0, 1) for l in (0, 1)
        if (i, j, k, l) not in ((0, 0, 0, 0), (1, 1, 1, 1))
    ]
    hypercube = build_hypercube(corner_cell(4, hot))
    polyhedra = hypercube.construct_polyhedra(0.5)
    assert hypercube.ambiguous
    assert len(polyhedra) == 2


def test_uniform_hypercube_has_no_polyhedra():
    hypercube = build_hypercube(np.zeros((2, 2, 2, 2)))
    assert hypercube.construct_polyhedra(0.5) == []
    assert not hypercube.ambiguous


def test_random_hypercubes_use_every_polygon(rng):
    hypercube = Hypercube()
    for _ in range(100):
        hypercube.init_hypercube(rng.random((2, 2, 2, 2)), DX)
        polyhedra = hypercube.construct_polyhedra(0.5)
        assert sum(p.number_polygons for p in polyhedra) == len(hypercube.polygons)
        for polyhedron in polyhedra:
            assert all(polygon.is_closed() for polygon in polyhedron.polygons)
            assert np.isfinite(polyhedron.normal).all()
