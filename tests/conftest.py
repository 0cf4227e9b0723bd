"""Shared fixtures for the surface finder tests."""
import itertools
import logging

import numpy as np
import pytest

from cornelius import Cornelius


def make_linear_cell(coefficients, offset=0.0):
    """Cell with samples ``offset + sum(c_i * index_i)``, exactly linear inside."""
    dimension = len(coefficients)
    cell = np.empty((2,) * dimension)
    for index in itertools.product((0, 1), repeat=dimension):
        cell[index] = offset + float(np.dot(coefficients, index))
    return cell


def make_corner_cell(dimension, hot_corners):
    """Cell with value 1 at the listed corners and 0 everywhere else."""
    cell = np.zeros((2,) * dimension)
    for corner in hot_corners:
        cell[corner] = 1.0
    return cell


@pytest.fixture
def linear_cell():
    return make_linear_cell


@pytest.fixture
def corner_cell():
    return make_corner_cell


@pytest.fixture
def finder_2d():
    return Cornelius(2, 0.5, [1.0, 1.0])


@pytest.fixture
def finder_3d():
    with Cornelius(3, 0.5, [1.0, 1.0, 1.0]) as finder:
        yield finder


@pytest.fixture
def finder_4d():
    return Cornelius(4, 0.5, [1.0, 1.0, 1.0, 1.0])


@pytest.fixture
def rng():
    return np.random.default_rng(42)


@pytest.fixture
def clean_package_logger():
    """Remove handlers added by setup_logging after the test."""
    logger = logging.getLogger("cornelius")
    level = logger.level
    yield logger
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
    logger.setLevel(level)
