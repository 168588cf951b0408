"""
kmeans - restarted k-means clustering of multi-dimensional points.
"""

from .config import KMeansConfig, ConfigurationError, load_config
from .clustering import KMeansEngine, ClusteringResult, StandardizationStage

__all__ = [
    "KMeansConfig",
    "ConfigurationError",
    "load_config",
    "KMeansEngine",
    "ClusteringResult",
    "StandardizationStage",
]
