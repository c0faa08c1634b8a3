import warnings
from dataclasses import dataclass

import numpy as np
from tqdm import trange

from kmeans_flow.clustering.clustering import compute_distances
from kmeans_flow.distance import DistanceFunc, euclidean

CHANGES_THRESHOLD = 2


@dataclass
class ConvergenceTracker:
    """
    Counts membership changes to decide when Lloyd's algorithm is stable.

    A round is considered stable when it reports the same number of changes
    as the round before. Training stops once ``counter`` stable rounds have
    been seen (they need not be consecutive; the counter never decreases).

    By default ``changes`` accumulates over the whole run, so two equal
    values mean that no point moved in the latest round. With
    ``reset_changes`` the count restarts every round and the comparison is
    between the number of reassignments of two consecutive rounds.
    """

    threshold: int = CHANGES_THRESHOLD
    reset_changes: bool = False
    changes: int = 0
    oldchanges: int = 0
    counter: int = 0

    @property
    def stable(self) -> bool:
        return self.counter == self.threshold

    def start_round(self):
        if self.reset_changes:
            self.changes = 0

    def check(self):
        if self.changes == self.oldchanges:
            self.counter += 1

        self.oldchanges = self.changes


def assign_step(
    points: np.ndarray,
    centers: np.ndarray,
    assignments: np.ndarray,
    sizes: np.ndarray,
    accumulator: np.ndarray,
    distance: DistanceFunc = euclidean,
) -> int:
    """
    Assign every point to its nearest center and sum the points per cluster.

    Args:
        points (np.ndarray): points of the dataset; shape (n_samples, n_features)
        centers (np.ndarray): current centers; shape (k, n_features)
        assignments (np.ndarray): 1-based cluster of each point, updated in place;
            shape (n_samples, )
        sizes (np.ndarray): points per cluster, recomputed in place; shape (k, )
        accumulator (np.ndarray): per-cluster sum of points, added to in place;
            shape (k, n_features)
        distance (callable): distance strategy

    Returns:
        int: number of points whose assignment changed
    """
    k = centers.shape[0]

    # argmin keeps the first minimum, so ties go to the lowest index
    closest_centers = np.argmin(compute_distances(points, centers, distance), axis=1)
    new_assignments = closest_centers + 1

    changes = int(np.count_nonzero(assignments != new_assignments))

    assignments[:] = new_assignments
    sizes[:] = np.bincount(closest_centers, minlength=k)
    np.add.at(accumulator, closest_centers, points)

    return changes


def update_step(centers: np.ndarray, accumulator: np.ndarray, sizes: np.ndarray):
    """
    Move every center to the mean of its points and clear the accumulator.

    A cluster without points keeps its previous center.
    """
    empty = sizes == 0
    if np.any(empty):
        warnings.warn(
            f"Clusters {np.flatnonzero(empty) + 1} received no points; "
            "their centroids are left unchanged.",
            RuntimeWarning,
            stacklevel=3,
        )

    filled = ~empty
    centers[filled] = accumulator[filled] / sizes[filled, np.newaxis]
    accumulator[:] = 0.0


def lloyd(
    points: np.ndarray,
    centers: np.ndarray,
    assignments: np.ndarray,
    sizes: np.ndarray,
    accumulator: np.ndarray,
    tracker: ConvergenceTracker,
    distance: DistanceFunc = euclidean,
    max_iter: int = 100,
    verbose: bool = True,
) -> int:
    """
    Lloyd's algorithm for k-means clustering.

    All arrays are updated in place.

    Args:
        points (np.ndarray): Data points of shape (n_samples, n_features).
        centers (np.ndarray): Initial cluster centers of shape (k, n_features).
        assignments (np.ndarray): 1-based cluster of each point, 0 if unassigned.
        sizes (np.ndarray): Number of points per cluster.
        accumulator (np.ndarray): Zeroed scratch space of shape (k, n_features).
        tracker (ConvergenceTracker): Stopping condition state.
        distance (callable): Distance strategy.
        max_iter (int): Maximum number of iterations.
        verbose (bool): Whether to print progress messages.

    Returns:
        int: Number of iterations run.
    """
    iterator = (
        trange(max_iter, desc="Lloyd's Algorithm") if verbose else range(max_iter)
    )
    n_iter = 0
    for _ in iterator:
        if tracker.stable:
            break

        tracker.start_round()
        tracker.changes += assign_step(
            points, centers, assignments, sizes, accumulator, distance
        )
        update_step(centers, accumulator, sizes)
        tracker.check()
        n_iter += 1

    if verbose and tracker.stable:
        print(f"Converged after {n_iter} iterations.")

    return n_iter
