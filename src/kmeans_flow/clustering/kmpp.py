from typing import Tuple, Union

import numpy as np
from tqdm import trange

from kmeans_flow.distance import DistanceFunc, euclidean


def kmpp(
    points: np.ndarray,
    k: int,
    distance: DistanceFunc = euclidean,
    rng: np.random.Generator = None,
    verbose: bool = False,
    index: bool = False,
) -> Union[np.ndarray, Tuple[np.ndarray, np.ndarray]]:
    """
    Selects cluster centers using k-means++ initialization method.

    Args:
        points (np.ndarray): points of the dataset; shape (n_samples, n_features)
        k (int): number of clusters
        distance (callable, optional): distance strategy
            Default is the Euclidean distance.
        rng (np.random.Generator, optional): source of randomness
            Default is None, which creates a fresh unseeded generator.
        verbose (bool, optional): if True, show progress bar
            Default is False.
        index (bool, optional): if True, return indices of selected centers
            Default is False.

    Returns:
        np.ndarray: selected initial centers; shape (k, n_features)
        or
        Tuple[np.ndarray, np.ndarray]: tuple containing the selected initial centers and their indices
            - centers (np.ndarray): selected initial centers; shape (k, n_features)
            - indices (np.ndarray): indices of the selected centers; shape (k, )

    Notes:
        The first center is drawn from [0, n_samples - 1), so the last point
        is never picked first. Later centers are drawn with probability
        proportional to the squared distance to the closest chosen center.
        The returned centers are copies; the dataset is never aliased.
    """
    if rng is None:
        rng = np.random.default_rng()

    n_samples = points.shape[0]
    centers_idx = np.empty((k,), dtype=int)
    min_distances = np.full((n_samples,), np.inf)

    # Step 1: Randomly choose the first center
    centers_idx[0] = rng.integers(max(n_samples - 1, 1))

    iterator = trange(1, k, desc="k-means++") if verbose else range(1, k)
    for i in iterator:
        # Step 2: Distance of every point to the closest center chosen so far
        newest = points[centers_idx[i - 1]]
        distances = np.array([distance(newest, point) for point in points])
        min_distances = np.minimum(min_distances, distances)

        # Step 3: Walk the cumulative squared distances up to a random threshold
        weights = min_distances**2
        cumulative = np.cumsum(weights)
        threshold = rng.random() * cumulative[-1]
        next_center_index = int(np.searchsorted(cumulative, threshold, side="left"))

        centers_idx[i] = min(next_center_index, n_samples - 1)

    centers = points[centers_idx].astype(np.float64, copy=True)
    if index:
        return centers, centers_idx
    else:
        return centers
