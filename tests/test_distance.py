import numpy as np
import pytest

from kmeans_flow.distance import (
    DistanceFactory,
    cosine,
    euclidean,
    manhattan,
    resolve_distance,
    squared_euclidean,
)


def test_euclidean():
    assert euclidean([0.0, 0.0], [3.0, 4.0]) == pytest.approx(5.0)
    assert euclidean(np.array([1.0, 2.0]), np.array([1.0, 2.0])) == 0.0


def test_squared_euclidean():
    assert squared_euclidean([0.0, 0.0], [3.0, 4.0]) == pytest.approx(25.0)


def test_manhattan():
    assert manhattan([0.0, 0.0], [3.0, -4.0]) == pytest.approx(7.0)


def test_cosine():
    assert cosine([1.0, 0.0], [0.0, 1.0]) == pytest.approx(1.0)
    assert cosine([1.0, 1.0], [2.0, 2.0]) == pytest.approx(0.0)
    assert cosine([0.0, 0.0], [0.0, 0.0]) == 0.0
    assert cosine([0.0, 0.0], [1.0, 0.0]) == 1.0


@pytest.mark.parametrize("func", [euclidean, squared_euclidean, manhattan, cosine])
def test_symmetric(func):
    a, b = np.array([1.0, -2.0, 3.0]), np.array([0.5, 4.0, -1.0])
    assert func(a, b) == pytest.approx(func(b, a))
    assert func(a, b) >= 0.0


def test_registry():
    assert set(DistanceFactory.names()) >= {
        "euclidean",
        "squared_euclidean",
        "manhattan",
        "cosine",
    }
    assert DistanceFactory.create("manhattan") is manhattan
    with pytest.raises(ValueError, match="not registered"):
        DistanceFactory.create("chebyshev")


def test_resolve_distance():
    assert resolve_distance(None) is euclidean
    assert resolve_distance("cosine") is cosine

    def custom(a, b):
        return 0.0

    assert resolve_distance(custom) is custom


def test_mismatched_lengths_propagate():
    with pytest.raises(ValueError):
        euclidean(np.array([1.0, 2.0]), np.array([1.0, 2.0, 3.0]))
