import numpy as np
import pytest


class ScriptedRng:
    """Stand-in for np.random.Generator returning fixed draws."""

    def __init__(self, integer=0, uniform=0.5):
        self.integer = integer
        self.uniform = uniform
        self.integer_calls = []

    def integers(self, high):
        self.integer_calls.append(high)
        return self.integer

    def random(self, size=None):
        if size is None:
            return self.uniform
        return np.full(size, self.uniform)


@pytest.fixture
def two_blobs():
    return np.array([[0.0, 0.0], [0.0, 1.0], [10.0, 0.0], [10.0, 1.0]])


@pytest.fixture
def blobs():
    rng = np.random.default_rng(7)
    return np.vstack(
        [
            rng.normal(loc=(0.0, 0.0), scale=0.5, size=(20, 2)),
            rng.normal(loc=(6.0, 6.0), scale=0.5, size=(20, 2)),
            rng.normal(loc=(-6.0, 6.0), scale=0.5, size=(20, 2)),
        ]
    )


@pytest.fixture
def scripted_rng():
    """Factory for generators with fixed draws, e.g. ``scripted_rng(uniform=0.25)``."""
    return ScriptedRng
