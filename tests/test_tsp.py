import math
import random

import numpy as np
import pytest

from tspsolve import Point, TSPInstance, distance, tour_length


def test_distance_is_euclidean():
    assert distance(Point(0, 0.0, 0.0), Point(1, 3.0, 4.0)) == pytest.approx(5.0)
    assert distance(Point(0, 2.5, 2.5), Point(1, 2.5, 2.5)) == 0.0


def test_tour_length_unit_square(unit_square):
    assert unit_square.tour_length([0, 1, 2, 3]) == pytest.approx(4.0)
    assert unit_square.tour_length([0, 2, 1, 3]) == pytest.approx(2 + 2 * math.sqrt(2))


def test_tour_length_degenerate():
    inst = TSPInstance.from_coords([(4.0, 7.0)])
    assert tour_length([], inst.points) == 0.0
    assert tour_length([0], inst.points) == 0.0


def test_rotation_and_reversal_keep_length():
    inst = TSPInstance.random_euclidean(7, seed=5)
    rng = random.Random(0)
    for _ in range(20):
        tour = list(range(7))
        rng.shuffle(tour)
        L = inst.tour_length(tour)
        for r in range(len(tour)):
            assert inst.tour_length(tour[r:] + tour[:r]) == pytest.approx(L)
        assert inst.tour_length(tour[::-1]) == pytest.approx(L)


def test_random_euclidean_points():
    inst = TSPInstance.random_euclidean(12, seed=1, square_size=100.0)
    assert [p.id for p in inst.points] == list(range(12))
    assert all(0 <= p.x < 100 and 0 <= p.y < 100 for p in inst.points)
    assert inst.points[0].label == "City 1"
    assert TSPInstance.random_euclidean(12, seed=1) == inst
    assert TSPInstance.random_euclidean(12, seed=2) != inst


def test_distance_matrix_matches_pairwise(small_random):
    D = small_random.distance_matrix()
    n = small_random.n_cities()
    assert D.shape == (n, n)
    assert np.allclose(D, D.T)
    assert np.allclose(np.diag(D), 0.0)
    for i in range(n):
        for j in range(n):
            assert D[i, j] == pytest.approx(small_random.distance(i, j))
    assert small_random.distance_matrix() is D


def test_points_are_immutable(unit_square):
    with pytest.raises(AttributeError):
        unit_square.points[0].x = 3.0
