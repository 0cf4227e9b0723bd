"""
Tests for the marching square.

Run: python -m pytest tests/test_square.py -v
"""
import itertools

import numpy as np
import pytest

import cornelius.cells.square as square_module
from cornelius.cells import Square
from cornelius.errors import ConstructionError, UsageError

DX = np.ones(4)


def build_square(points, dx=DX):
    square = Square()
    square.init_square(points, (0, 1), (0.0, 0.0), dx)
    return square


@pytest.mark.parametrize("pattern", list(itertools.product((0.0, 1.0), repeat=4)))
def test_line_count_for_every_sign_pattern(pattern):
    points = np.array(pattern).reshape(2, 2)
    square = build_square(points)
    lines = square.construct_lines(0.5)

    if len(set(pattern)) == 1:
        expected = 0
    elif points[0, 0] == points[1, 1] and points[0, 1] == points[1, 0]:
        expected = 2
    else:
        expected = 1
    assert len(lines) == expected
    assert square.ambiguous == (expected == 2)
    assert square.number_cuts == 2 * expected


def test_single_line_position():
    square = build_square([[1.0, 1.0], [0.0, 0.0]])
    (line,) = square.construct_lines(0.5)
    np.testing.assert_allclose(line.start, [0, 0, 0.5, 0])
    np.testing.assert_allclose(line.end, [0, 0, 0.5, 1])
    np.testing.assert_allclose(line.outside, [0, 0, 1, 0.5])


def test_interpolation_uses_spacing():
    square = build_square([[1.0, 1.0], [0.0, 0.0]], dx=np.array([1.0, 1.0, 2.0, 3.0]))
    (line,) = square.construct_lines(0.75)
    np.testing.assert_allclose(line.start, [0, 0, 0.5, 0])
    np.testing.assert_allclose(line.end, [0, 0, 0.5, 3])


def test_saddle_connects_high_corners_when_middle_is_high():
    square = build_square([[1.0, 0.0], [0.0, 1.0]])
    lines = square.construct_lines(0.4)
    assert square.ambiguous
    assert len(lines) == 2
    # Each line cuts off one of the low corners (1, 0) and (0, 1)
    np.testing.assert_allclose(lines[0].outside[2:], [1.0, 0.0])
    np.testing.assert_allclose(lines[1].outside[2:], [0.0, 1.0])
    np.testing.assert_allclose(lines[0].start[2:], [0.6, 0.0])
    np.testing.assert_allclose(lines[0].end[2:], [1.0, 0.4])


def test_saddle_connects_low_corners_when_middle_is_low():
    square = build_square([[1.0, 0.0], [0.0, 1.0]])
    lines = square.construct_lines(0.6)
    assert square.ambiguous
    assert len(lines) == 2
    # The middle is outside, lines cut off the high corners (0, 0) and (1, 1)
    for line in lines:
        np.testing.assert_allclose(line.outside[2:], [0.5, 0.5])
    np.testing.assert_allclose(lines[0].centroid[2:], [0.2, 0.2])
    np.testing.assert_allclose(lines[1].centroid[2:], [0.8, 0.8])


def test_line_normals_point_away_from_outside(rng):
    for _ in range(200):
        square = build_square(rng.random((2, 2)))
        for line in square.construct_lines(0.5):
            assert np.dot(line.normal, line.outside - line.centroid) <= 1e-12


def test_corner_exactly_at_value_is_nudged():
    square = build_square([[0.5, 0.0], [0.0, 0.0]])
    (line,) = square.construct_lines(0.5)
    assert line.length < 1e-8
    assert line.length > 0.0


def test_wrong_cut_count_raises(monkeypatch):
    monkeypatch.setattr(square_module, "EDGES", square_module.EDGES[:1])
    square = build_square([[1.0, 1.0], [0.0, 0.0]])
    with pytest.raises(ConstructionError):
        square.construct_lines(0.5)


def test_wrong_shape_raises():
    with pytest.raises(UsageError):
        build_square(np.zeros((2, 3)))


def test_reinit_resets_ambiguity():
    square = build_square([[1.0, 0.0], [0.0, 1.0]])
    square.construct_lines(0.4)
    square.init_square([[1.0, 1.0], [0.0, 0.0]], (0, 1), (0.0, 0.0), DX)
    assert not square.ambiguous
    assert len(square.construct_lines(0.5)) == 1
