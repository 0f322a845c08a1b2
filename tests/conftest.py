"""Shared shapes for the test suite."""

import matplotlib
matplotlib.use('Agg')

import numpy as np
import pytest


SQUARE = [(0, 0), (4, 0), (4, 4), (0, 4)]
L_SHAPE = [(0, 0), (4, 0), (4, 2), (2, 2), (2, 4), (0, 4)]
COMB = [(0, 0), (6, 0), (6, 3), (5, 3), (5, 1), (4, 1), (4, 3),
        (3, 3), (3, 1), (2, 1), (2, 3), (1, 3), (1, 1), (0, 1)]


def regular_polygon(n, radius=5.0):
    angles = np.linspace(0.0, 2.0 * np.pi, n, endpoint=False)
    return [(radius * np.cos(a), radius * np.sin(a)) for a in angles]


def star_polygon(points=5, outer=5.0, inner=2.0):
    verts = []
    for i in range(2 * points):
        r = outer if i % 2 == 0 else inner
        a = np.pi / 2 + i * np.pi / points
        verts.append((r * np.cos(a), r * np.sin(a)))
    return verts


@pytest.fixture
def square():
    return list(SQUARE)


@pytest.fixture
def l_shape():
    return list(L_SHAPE)


@pytest.fixture
def comb():
    return list(COMB)
