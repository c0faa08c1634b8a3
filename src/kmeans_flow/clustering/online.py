"""Incremental (online) k-means.

An online session consumes observations one at a time from a queue. Each
observation pulls its nearest centroid towards it by exponential smoothing::

    centroid = alpha * observation + (1 - alpha) * centroid

Once the caller signals that the stream is done, a finalization pass assigns
every observation seen during the session to its nearest centroid.

The session runs on two background threads: a consumer that handles the
stream and, after ``done`` is set, a finalizer. The model stays locked for
writing until the finalizer has finished; ``OnlineSession.closed`` resolves
at that moment.
"""

from __future__ import annotations

import queue
import threading
from concurrent.futures import Future
from dataclasses import dataclass
from typing import TYPE_CHECKING, Tuple

import numpy as np
from tqdm import tqdm

from kmeans_flow.clustering.clustering import nearest_center
from kmeans_flow.distance import DistanceFunc, euclidean

if TYPE_CHECKING:
    from kmeans_flow.model import KMeans

POLL_INTERVAL = 0.01


@dataclass
class OnlineEvent:
    """Emitted for every observation before its centroid is moved."""

    cluster: int
    observation: np.ndarray


def smooth(center: np.ndarray, observation: np.ndarray, alpha: float):
    """Move ``center`` towards ``observation`` in place."""
    center *= 1 - alpha
    center += alpha * observation


def assign_all(
    points: np.ndarray,
    centers: np.ndarray,
    distance: DistanceFunc = euclidean,
    verbose: bool = False,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Assign every point to its nearest center.

    Args:
        points (np.ndarray): points; shape (n_samples, n_features)
        centers (np.ndarray): centers; shape (k, n_features)
        distance (callable): distance strategy
        verbose (bool, optional): if True, show progress bar

    Returns:
        Tuple[np.ndarray, np.ndarray]:
            - assignments (np.ndarray): 1-based cluster per point; shape (n_samples, )
            - sizes (np.ndarray): points per cluster; shape (k, )
    """
    assignments = np.zeros(len(points), dtype=int)
    sizes = np.zeros(len(centers), dtype=int)

    iterator = tqdm(points, desc="Online finalization") if verbose else points
    for i, point in enumerate(iterator):
        n = nearest_center(point, centers, distance)
        assignments[i] = n + 1
        sizes[n] += 1

    return assignments, sizes


class OnlineSession:
    """
    Handle on a running online learning session.

    Events are handed over one at a time: after emitting an event the
    session waits until it has been taken with ``next_event`` before moving
    the centroid, so an unread event blocks the whole session.

    Attributes:
        closed (Future): resolves with the number of assigned points once
            finalization is done and the model is unlocked, or carries the
            exception that ended the session.
    """

    def __init__(self, model: KMeans, poll_interval: float = POLL_INTERVAL):
        self._model = model
        self._poll_interval = poll_interval
        self._events: queue.Queue = queue.Queue(maxsize=1)
        self.closed: Future = Future()
        self._consumer = None
        self._finalizer = None

    def start(self, observations: queue.Queue, done: threading.Event):
        self._consumer = threading.Thread(
            target=self._consume,
            args=(observations, done),
            name="kmeans-online-consumer",
            daemon=True,
        )
        self._consumer.start()

    def wait(self, timeout: float = None) -> int:
        """Block until the session is closed and return the number of points."""
        return self.closed.result(timeout)

    def next_event(self, timeout: float = None) -> OnlineEvent:
        """
        Take the next event, releasing the session to update its centroid.

        Args:
            timeout (float, optional): seconds to wait. Default is None
                (wait forever).

        Raises:
            queue.Empty: if no event arrived within ``timeout``.
        """
        event = self._events.get(timeout=timeout)
        self._events.task_done()
        return event

    @property
    def pending_events(self) -> int:
        """Number of emitted events not yet taken."""
        return self._events.qsize()

    @property
    def running(self) -> bool:
        return not self.closed.done()

    def _consume(self, observations: queue.Queue, done: threading.Event):
        model = self._model
        try:
            while True:
                try:
                    observation = observations.get(timeout=self._poll_interval)
                except queue.Empty:
                    if done.is_set():
                        break
                    continue

                observation = np.asarray(observation, dtype=np.float64)
                cluster = model._nearest(observation, squared=True)
                self._events.put(OnlineEvent(cluster=cluster, observation=observation))
                # centroids stay untouched until the event has been taken
                self._events.join()
                model._absorb(cluster, observation)

            model._begin_finalizing()
            self._finalizer = threading.Thread(
                target=self._finalize, name="kmeans-online-finalizer", daemon=True
            )
            self._finalizer.start()
        except BaseException as exc:
            self._fail(exc)

    def _finalize(self):
        try:
            n_points = self._model._finalize_online()
        except BaseException as exc:
            self._fail(exc)
            return

        self._model._end_session()
        self.closed.set_result(n_points)

    def _fail(self, exc: BaseException):
        self._model._end_session()
        self.closed.set_exception(exc)
