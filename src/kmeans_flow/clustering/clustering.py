import numpy as np

from kmeans_flow.distance import DistanceFunc, euclidean


def compute_distances(
    points: np.ndarray, centers: np.ndarray, distance: DistanceFunc = euclidean
) -> np.ndarray:
    """
    Compute the distance of every point to every center.

    Args:
        points (np.ndarray): points of the dataset; shape (n_samples, n_features)
        centers (np.ndarray): centers of the clusters; shape (k, n_features)
        distance (callable): distance strategy

    Returns:
        np.ndarray: distances; shape (n_samples, k)
    """
    return np.array(
        [[distance(point, center) for center in centers] for point in points],
        dtype=np.float64,
    ).reshape(len(points), len(centers))


def nearest_center(
    point: np.ndarray,
    centers: np.ndarray,
    distance: DistanceFunc = euclidean,
    squared: bool = False,
) -> int:
    """
    Find the index of the center closest to a point.

    Ties are resolved in favour of the lowest index.

    Args:
        point (np.ndarray): the point; shape (n_features, )
        centers (np.ndarray): centers of the clusters; shape (k, n_features)
        distance (callable): distance strategy
        squared (bool, optional): compare squared distances instead
            Default is False.

    Returns:
        int: 0-based index of the nearest center
    """
    distances = np.array([distance(point, center) for center in centers])
    if squared:
        distances = distances**2
    return int(np.argmin(distances))


def compute_cost_per_point(
    points: np.ndarray,
    centers: np.ndarray,
    labels: np.ndarray = None,
    distance: DistanceFunc = euclidean,
) -> np.ndarray:
    """
    Compute the cost of each point, i.e. its squared distance to its center.

    Args:
        points (np.ndarray): points of the dataset; shape (n_samples, n_features)
        centers (np.ndarray): centers of the clusters; shape (k, n_features)
        labels (np.ndarray, optional): 0-based center index of each point;
            shape (n_samples, )
            Default is None, which uses the nearest center.
        distance (callable): distance strategy

    Returns:
        np.ndarray: cost of each point; shape (n_samples,)
    """
    if labels is None:
        return np.min(compute_distances(points, centers, distance), axis=1) ** 2

    costs = np.empty(len(points), dtype=np.float64)
    for i, (point, label) in enumerate(zip(points, labels)):
        costs[i] = distance(point, centers[label]) ** 2
    return costs


def compute_clustering_cost(
    points: np.ndarray,
    centers: np.ndarray,
    labels: np.ndarray = None,
    distance: DistanceFunc = euclidean,
) -> float:
    """
    Compute the total clustering cost.

    Args:
        points (np.ndarray): points of the dataset; shape (n_samples, n_features)
        centers (np.ndarray): centers of the clusters; shape (k, n_features)
        labels (np.ndarray, optional): 0-based center index of each point
        distance (callable): distance strategy

    Returns:
        float: total clustering cost
    """
    costs = compute_cost_per_point(points, centers, labels, distance)
    return float(np.sum(costs))
