import numpy as np
import pytest

from kmeans_flow.clustering import kmpp, uniform_init
from kmeans_flow.distance import manhattan


def test_first_center_excludes_last_index(scripted_rng):
    points = np.arange(10, dtype=float).reshape(5, 2)
    rng = scripted_rng()
    kmpp(points, 2, rng=rng)
    assert rng.integer_calls == [4]

    for seed in range(50):
        _, idx = kmpp(points, 2, rng=np.random.default_rng(seed), index=True)
        assert idx[0] != len(points) - 1


def test_two_points_both_chosen():
    points = np.array([[0.0, 0.0], [1.0, 1.0]])
    centers, idx = kmpp(points, 2, rng=np.random.default_rng(0), index=True)
    assert sorted(idx) == [0, 1]
    np.testing.assert_array_equal(centers, points[idx])


def test_weighted_selection(two_blobs, scripted_rng):
    # weights 0, 1, 100, 101 -> cumulative 0, 1, 101, 202; threshold 50.5
    centers, idx = kmpp(two_blobs, 2, rng=scripted_rng(uniform=0.25), index=True)
    assert list(idx) == [0, 2]
    np.testing.assert_array_equal(centers, [[0.0, 0.0], [10.0, 0.0]])


def test_zero_threshold_selects_first_index(two_blobs, scripted_rng):
    _, idx = kmpp(two_blobs, 2, rng=scripted_rng(integer=1, uniform=0.0), index=True)
    assert list(idx) == [1, 0]


def test_identical_points():
    points = np.ones((4, 3))
    centers = kmpp(points, 3, rng=np.random.default_rng(1))
    np.testing.assert_array_equal(centers, np.ones((3, 3)))


def test_single_point():
    centers, idx = kmpp(np.array([[2.0, 3.0]]), 2, rng=np.random.default_rng(0), index=True)
    assert list(idx) == [0, 0]


def test_centers_are_copies(two_blobs):
    original = two_blobs.copy()
    centers = kmpp(two_blobs, 2, rng=np.random.default_rng(3))
    centers += 100.0
    np.testing.assert_array_equal(two_blobs, original)


def test_custom_distance(two_blobs, scripted_rng):
    # manhattan weights 0, 1, 100, 121 -> cumulative 0, 1, 101, 222; threshold 111
    _, idx = kmpp(two_blobs, 2, manhattan, scripted_rng(uniform=0.5), index=True)
    assert list(idx) == [0, 3]


def test_seeded_is_reproducible(blobs):
    a = kmpp(blobs, 3, rng=np.random.default_rng(11))
    b = kmpp(blobs, 3, rng=np.random.default_rng(11))
    np.testing.assert_array_equal(a, b)


def test_uniform_init_range():
    centers = uniform_init(4, 3, np.random.default_rng(0))
    assert centers.shape == (4, 3)
    assert np.all(centers >= -5.0)
    assert np.all(centers < 5.0)


def test_uniform_init_formula(scripted_rng):
    centers = uniform_init(2, 2, scripted_rng(uniform=0.75))
    np.testing.assert_array_equal(centers, np.full((2, 2), 2.5))
