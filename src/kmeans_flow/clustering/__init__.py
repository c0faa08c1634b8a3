from kmeans_flow.clustering.kmpp import kmpp
from kmeans_flow.clustering.uniform import uniform_init
from kmeans_flow.clustering.lloyd import ConvergenceTracker, lloyd
from kmeans_flow.clustering.online import OnlineEvent, OnlineSession
from kmeans_flow.clustering.clustering import (
    compute_cost_per_point,
    compute_clustering_cost,
    nearest_center,
)

__all__ = [
    "kmpp",
    "uniform_init",
    "ConvergenceTracker",
    "lloyd",
    "OnlineEvent",
    "OnlineSession",
    "compute_cost_per_point",
    "compute_clustering_cost",
    "nearest_center",
]
