"""
Distance strategies for clustering.

A distance strategy is any callable ``distance(a, b) -> float`` that is
symmetric, non-negative and zero iff both vectors are identical. Built-in
strategies are registered by name with ``DistanceFactory`` so they can be
selected with a string.
"""

from typing import Callable, Dict, Union

import numpy as np

DistanceFunc = Callable[[np.ndarray, np.ndarray], float]


class DistanceFactory:
    """
    Simple string-to-function mapping for distance strategies.
    """

    _registry: Dict[str, DistanceFunc] = {}

    @classmethod
    def register(cls, name: str) -> Callable[[DistanceFunc], DistanceFunc]:
        """
        Decorator to register a distance function with a name.

        Args:
            name (str): The name of the distance strategy.
        """

        def decorator(func: DistanceFunc) -> DistanceFunc:
            cls._registry[name] = func
            return func

        return decorator

    @classmethod
    def create(cls, name: str) -> DistanceFunc:
        """
        Look up a registered distance function.

        Args:
            name (str): The name of the distance strategy.
        """
        if name not in cls._registry:
            raise ValueError(f"Distance '{name}' is not registered.")
        return cls._registry[name]

    @classmethod
    def names(cls):
        return sorted(cls._registry)


@DistanceFactory.register("euclidean")
def euclidean(a: np.ndarray, b: np.ndarray) -> float:
    """L2 distance between two vectors."""
    return float(np.linalg.norm(np.subtract(a, b)))


@DistanceFactory.register("squared_euclidean")
def squared_euclidean(a: np.ndarray, b: np.ndarray) -> float:
    diff = np.subtract(a, b)
    return float(np.dot(diff, diff))


@DistanceFactory.register("manhattan")
def manhattan(a: np.ndarray, b: np.ndarray) -> float:
    """L1 distance, more robust to outliers than the L2 distance."""
    return float(np.sum(np.abs(np.subtract(a, b))))


@DistanceFactory.register("cosine")
def cosine(a: np.ndarray, b: np.ndarray) -> float:
    """
    Cosine distance between two vectors.

    Vectors with (near) zero norm are treated as maximally distant from
    everything but themselves.
    """
    norm_a = np.linalg.norm(a)
    norm_b = np.linalg.norm(b)
    if norm_a < 1e-10 or norm_b < 1e-10:
        return 0.0 if np.array_equal(a, b) else 1.0
    return float(1.0 - np.dot(a, b) / (norm_a * norm_b))


def resolve_distance(distance: Union[str, DistanceFunc, None]) -> DistanceFunc:
    """
    Turn a distance argument into a callable.

    Args:
        distance (str | callable | None): a registered name, a callable, or
            None for the Euclidean distance.

    Returns:
        callable: the distance function.
    """
    if distance is None:
        return euclidean
    if isinstance(distance, str):
        return DistanceFactory.create(distance)
    return distance
