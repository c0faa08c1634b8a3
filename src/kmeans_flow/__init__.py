from kmeans_flow.clustering import OnlineEvent, OnlineSession
from kmeans_flow.distance import DistanceFactory, euclidean
from kmeans_flow.errors import (
    EmptySetError,
    InvalidParameterError,
    KMeansError,
    NotInitializedError,
    OneClusterError,
    ZeroIterationsError,
)
from kmeans_flow.guard import ModelState
from kmeans_flow.model import KMeans

__version__ = "0.1.0"

__all__ = [
    "KMeans",
    "ModelState",
    "OnlineEvent",
    "OnlineSession",
    "DistanceFactory",
    "euclidean",
    "KMeansError",
    "ZeroIterationsError",
    "OneClusterError",
    "EmptySetError",
    "InvalidParameterError",
    "NotInitializedError",
]
