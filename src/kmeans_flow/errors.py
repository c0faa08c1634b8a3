"""Exceptions raised for violated preconditions of the clustering model."""


class KMeansError(Exception):
    """Base class for all errors raised by kmeans_flow."""


class ZeroIterationsError(KMeansError, ValueError):
    def __init__(self, max_rounds: int):
        super().__init__(f"max_rounds must be at least 1, got {max_rounds}.")


class OneClusterError(KMeansError, ValueError):
    def __init__(self, n_clusters: int):
        super().__init__(f"n_clusters must be at least 2, got {n_clusters}.")


class EmptySetError(KMeansError, ValueError):
    def __init__(self):
        super().__init__("Cannot learn from an empty dataset.")


class InvalidParameterError(KMeansError, ValueError):
    pass


class NotInitializedError(KMeansError, RuntimeError):
    pass
