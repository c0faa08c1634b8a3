"""
K-means clustering with k-means++ seeding and online learning.

A ``KMeans`` model is trained either in batch, with ``learn``, or
incrementally from a stream of observations, with ``with_online`` followed by
``online``. Training takes the model's guard for writing, queries take it for
reading, so a query issued while a model is training waits for the training
to finish and never sees half-updated centroids.

Examples:
```
model = KMeans(max_rounds=10, n_clusters=2, random_state=0)
model.learn([[0, 0], [0, 1], [10, 0], [10, 1]])
model.sizes()        # array([2, 2])
model.predict([9, 0])
```
"""

import queue
import threading
from typing import Sequence, Union

import numpy as np

from kmeans_flow.clustering.clustering import compute_clustering_cost, nearest_center
from kmeans_flow.clustering.kmpp import kmpp
from kmeans_flow.clustering.lloyd import ConvergenceTracker, lloyd
from kmeans_flow.clustering.online import OnlineSession, assign_all, smooth
from kmeans_flow.clustering.uniform import uniform_init
from kmeans_flow.distance import DistanceFunc, resolve_distance
from kmeans_flow.errors import (
    EmptySetError,
    InvalidParameterError,
    NotInitializedError,
    OneClusterError,
    ZeroIterationsError,
)
from kmeans_flow.guard import ModelState, ReadWriteGuard


def check_random_state(random_state) -> np.random.Generator:
    """
    Turn a seed into a random generator.

    Args:
        random_state (None | int | np.random.Generator): None or an int seed
            create a new generator; anything else is used as is.
    """
    if random_state is None or isinstance(random_state, (int, np.integer)):
        return np.random.default_rng(random_state)
    return random_state


class KMeans:
    """
    K-means clustering model.

    Attributes:
        max_rounds (int): maximum number of Lloyd iterations per ``learn``.
        n_clusters (int): number of clusters.
        distance (callable): distance strategy.
        reset_changes (bool): count reassignments per round instead of over
            the whole run when checking for convergence.
        verbose (bool): show progress bars and convergence messages.
    """

    def __init__(
        self,
        max_rounds: int,
        n_clusters: int,
        distance: Union[str, DistanceFunc] = None,
        *,
        random_state=None,
        reset_changes: bool = False,
        verbose: bool = False,
    ):
        """
        Initialize the model.

        Args:
            max_rounds (int): maximum number of iterations; at least 1.
            n_clusters (int): number of clusters; at least 2.
            distance (str | callable, optional): distance strategy or the name
                of a registered one. Default is None, the Euclidean distance.
            random_state (None | int | np.random.Generator, optional): source
                of randomness for seeding. Default is None (unseeded).
            reset_changes (bool, optional): see ``ConvergenceTracker``.
                Default is False.
            verbose (bool, optional): Default is False.

        Raises:
            ZeroIterationsError: if ``max_rounds < 1``.
            OneClusterError: if ``n_clusters < 2``.
        """
        if max_rounds < 1:
            raise ZeroIterationsError(max_rounds)

        if n_clusters < 2:
            raise OneClusterError(n_clusters)

        self.max_rounds = max_rounds
        self.n_clusters = n_clusters
        self.distance = resolve_distance(distance)
        self.reset_changes = reset_changes
        self.verbose = verbose
        self._rng = check_random_state(random_state)

        self._guard = ReadWriteGuard()
        self._state = ModelState.IDLE

        self._alpha = None
        self._dimension = None

        self._data = np.empty((0, 0))
        self._centroids = None
        self._accumulator = None
        self._assignments = np.zeros(0, dtype=int)
        self._sizes = np.zeros(n_clusters, dtype=int)
        self._tracker = ConvergenceTracker(reset_changes=reset_changes)
        self._n_rounds = 0

    def __repr__(self):
        return (
            f"KMeans(max_rounds={self.max_rounds}, n_clusters={self.n_clusters}, "
            f"state={self._state.value})"
        )

    @property
    def is_online(self) -> bool:
        """The model supports online learning."""
        return True

    @property
    def state(self) -> ModelState:
        return self._state

    # -----------------------------------------------------------
    # Training
    # -----------------------------------------------------------
    def with_online(self, alpha: float, dimension: int, reseed: bool = True):
        """
        Prepare the model for online learning.

        Args:
            alpha (float): smoothing factor in (0, 1].
            dimension (int): dimension of the observations.
            reseed (bool, optional): draw fresh centroids uniformly from
                [-5, 5). If False, keep the centroids of a previous ``learn``.
                Default is True.

        Returns:
            KMeans: the model itself.
        """
        if not 0 < alpha <= 1:
            raise InvalidParameterError(f"alpha must be in (0, 1], got {alpha}.")
        if dimension < 1:
            raise InvalidParameterError(
                f"dimension must be at least 1, got {dimension}."
            )

        with self._guard.write():
            if not reseed and (
                self._centroids is None or self._centroids.shape[1] != dimension
            ):
                raise NotInitializedError(
                    f"No centroids of dimension {dimension} to keep; "
                    "call with reseed=True or learn() first."
                )

            self._alpha = alpha
            self._dimension = dimension
            self._data = []
            self._assignments = np.zeros(0, dtype=int)

            if reseed:
                self._centroids = uniform_init(self.n_clusters, dimension, self._rng)

        return self

    def learn(self, data: Sequence[Sequence[float]]):
        """
        Cluster ``data`` with k-means++ seeding and Lloyd's algorithm.

        Replaces the dataset, centroids, assignments and sizes. Blocks all
        queries until done.

        Args:
            data (array-like): points; shape (n_samples, n_features)

        Raises:
            EmptySetError: if ``data`` has no points.
        """
        if len(data) == 0:
            raise EmptySetError()

        points = np.asarray(data, dtype=np.float64)

        with self._guard.write():
            self._state = ModelState.TRAINING
            try:
                self._data = points
                self._assignments = np.zeros(len(points), dtype=int)
                self._sizes = np.zeros(self.n_clusters, dtype=int)
                self._tracker = ConvergenceTracker(reset_changes=self.reset_changes)

                self._centroids = kmpp(
                    points, self.n_clusters, self.distance, self._rng, self.verbose
                )
                self._accumulator = np.zeros_like(self._centroids)

                self._n_rounds = lloyd(
                    points,
                    self._centroids,
                    self._assignments,
                    self._sizes,
                    self._accumulator,
                    self._tracker,
                    distance=self.distance,
                    max_iter=self.max_rounds,
                    verbose=self.verbose,
                )
            finally:
                self._accumulator = None
                self._state = ModelState.IDLE

    def online(
        self, observations: queue.Queue, done: threading.Event
    ) -> OnlineSession:
        """
        Start learning online from a stream of observations.

        The model is locked for writing from this call until the returned
        session's ``closed`` future resolves, which happens after ``done`` is
        set and every observation received so far has been assigned.

        Args:
            observations (queue.Queue): incoming vectors.
            done (threading.Event): set by the caller once no more
                observations will be sent.

        Returns:
            OnlineSession: hands out an ``OnlineEvent`` per observation through
                ``next_event``; ``closed`` signals the end of the session.
        """
        self._guard.acquire_write()
        try:
            if self._alpha is None or self._centroids is None:
                raise NotInitializedError(
                    "Call with_online() before starting an online session."
                )

            self._state = ModelState.STREAMING
            self._sizes = np.zeros(self.n_clusters, dtype=int)
            if isinstance(self._data, np.ndarray):
                self._data = list(self._data)

            session = OnlineSession(self)
            session.start(observations, done)
        except BaseException:
            self._end_session()
            raise

        return session

    # -----------------------------------------------------------
    # Session internals, called with the guard held for writing
    # -----------------------------------------------------------
    def _nearest(self, point: np.ndarray, squared: bool = False) -> int:
        return nearest_center(point, self._centroids, self.distance, squared)

    def _absorb(self, cluster: int, observation: np.ndarray):
        smooth(self._centroids[cluster], observation, self._alpha)
        self._data.append(observation)

    def _begin_finalizing(self):
        self._state = ModelState.FINALIZING

    def _finalize_online(self) -> int:
        if self._data:
            self._data = np.vstack(self._data)
        else:
            self._data = np.empty((0, self._centroids.shape[1]))

        self._assignments, sizes = assign_all(
            self._data, self._centroids, self.distance, self.verbose
        )
        self._sizes += sizes
        return len(self._data)

    def _end_session(self):
        self._state = ModelState.IDLE
        self._guard.release_write()

    # -----------------------------------------------------------
    # Queries
    # -----------------------------------------------------------
    def assignments(self) -> np.ndarray:
        """1-based cluster of every point of the dataset, 0 if unassigned."""
        with self._guard.read():
            return self._assignments.copy()

    def sizes(self) -> np.ndarray:
        """Number of points assigned to each cluster."""
        with self._guard.read():
            return self._sizes.copy()

    def centroid(self, i: int) -> np.ndarray:
        """
        Centroid of a cluster.

        Args:
            i (int): 1-based cluster index.

        Raises:
            IndexError: if ``i`` is not in [1, n_clusters].
        """
        if not 1 <= i <= self.n_clusters:
            raise IndexError(
                f"Cluster index {i} out of range [1, {self.n_clusters}]."
            )
        with self._guard.read():
            self._check_centroids()
            return self._centroids[i - 1].copy()

    def centroids(self) -> np.ndarray:
        """All centroids; shape (n_clusters, n_features)."""
        with self._guard.read():
            self._check_centroids()
            return self._centroids.copy()

    def predict(self, p: Sequence[float]) -> int:
        """0-based index of the centroid nearest to ``p``."""
        point = np.asarray(p, dtype=np.float64)
        with self._guard.read():
            self._check_centroids()
            return self._nearest(point)

    def cost(self) -> float:
        """Sum of squared distances of the points to their assigned centroid."""
        with self._guard.read():
            self._check_centroids()
            assigned = self._assignments > 0
            return compute_clustering_cost(
                np.asarray(self._data)[assigned],
                self._centroids,
                self._assignments[assigned] - 1,
                self.distance,
            )

    @property
    def n_rounds(self) -> int:
        """Iterations run by the last ``learn``."""
        with self._guard.read():
            return self._n_rounds

    def _check_centroids(self):
        if self._centroids is None:
            raise NotInitializedError("The model has no centroids yet.")
