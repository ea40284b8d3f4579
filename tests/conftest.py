import pytest

from tspsolve import TSPInstance


@pytest.fixture
def unit_square():
    return TSPInstance.from_coords([(0, 0), (0, 1), (1, 1), (1, 0)], name="unit_square")


@pytest.fixture(params=[11, 23, 57])
def small_random(request):
    return TSPInstance.random_euclidean(6, seed=request.param)
