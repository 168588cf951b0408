"""
Restarted k-means clustering.

Euclidean k-means with uniform random initialization, empty-cluster
reseeding, optional z-score standardization and a minimum-error restart driver.
"""

from .models import (
    Point,
    Cluster,
    AttemptResult,
    ClusteringResult,
    UNASSIGNED,
)
from .standardize import StandardizationStage
from .algorithm import (
    squared_distance,
    distance,
    init_clusters,
    assign_points,
    recompute_centroid,
    update_clusters,
    sum_errors,
    run_attempt,
    run_restarts,
    attempt_seeds,
    keep_best,
)
from .engine import KMeansEngine
from .manager import ResultStore

__all__ = [
    # Models
    "Point",
    "Cluster",
    "AttemptResult",
    "ClusteringResult",
    "UNASSIGNED",
    # Standardization
    "StandardizationStage",
    # Algorithm
    "squared_distance",
    "distance",
    "init_clusters",
    "assign_points",
    "recompute_centroid",
    "update_clusters",
    "sum_errors",
    "run_attempt",
    "run_restarts",
    "attempt_seeds",
    "keep_best",
    # Engine
    "KMeansEngine",
    # Persistence
    "ResultStore",
]
