"""
Data models for k-means clustering.

Defines points, clusters and the per-attempt and per-run results.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

import numpy as np

from .standardize import StandardizationStage


# Cluster id of a point that has not been through an assign pass
UNASSIGNED = -1


@dataclass
class Point:
    """A single input point and its current cluster."""

    coordinates: np.ndarray
    cluster_id: int = UNASSIGNED

    @property
    def dimensions(self) -> int:
        return len(self.coordinates)

    def to_dict(self) -> dict:
        return {
            "coordinates": [float(x) for x in self.coordinates],
            "cluster_id": int(self.cluster_id),
        }


@dataclass
class Cluster:
    """
    A cluster centroid and the indices of its member points.

    Members index into the point array owned by the engine; a cluster never
    holds point data itself.
    """

    id: int
    centroid: np.ndarray
    members: list[int] = field(default_factory=list)

    @property
    def size(self) -> int:
        return len(self.members)

    @property
    def is_empty(self) -> bool:
        return not self.members

    def to_meta_dict(self) -> dict:
        """Convert to dict for JSON serialization (excludes centroid)."""
        return {
            "id": self.id,
            "size": self.size,
        }


@dataclass
class AttemptResult:
    """Outcome of one full assign/update run from a single initialization."""

    attempt: int
    seed: int                    # Entropy of this attempt's seed sequence
    centroids: np.ndarray        # k × dimensions
    labels: np.ndarray           # Cluster id per point
    total_error: float           # Sum of squared distances to assigned centroids
    iterations: int
    converged: bool
    error_history: list[float] = field(default_factory=list)  # After each update
    change_history: list[int] = field(default_factory=list)   # numChanges per assign pass
    reseeds: int = 0             # Degenerate clusters recovered by reseeding

    @property
    def k(self) -> int:
        return len(self.centroids)

    def to_meta_dict(self) -> dict:
        """Convert to dict for JSON serialization (excludes arrays)."""
        return {
            "attempt": self.attempt,
            "seed": self.seed,
            "total_error": self.total_error,
            "iterations": self.iterations,
            "converged": self.converged,
            "reseeds": self.reseeds,
        }


@dataclass
class ClusteringResult:
    """
    Winning attempt of a restarted run.

    Only the best attempt keeps its centroids and labels; every other attempt
    survives as its total error in attempt_errors.
    """

    best: AttemptResult
    attempt_errors: list[float]
    data: np.ndarray                      # Points in original units
    standardization: Optional[StandardizationStage] = None

    @property
    def k(self) -> int:
        return self.best.k

    @property
    def labels(self) -> np.ndarray:
        return self.best.labels

    @property
    def total_error(self) -> float:
        return self.best.total_error

    @property
    def centroids(self) -> np.ndarray:
        """Centroids in the space clustering ran in (standardized if requested)."""
        return self.best.centroids

    def original_centroids(self) -> np.ndarray:
        """Centroids mapped back to the original units of the input."""
        if self.standardization is None:
            return self.best.centroids.copy()
        return self.standardization.inverse_transform(self.best.centroids)

    def member_counts(self) -> list[int]:
        counts = np.bincount(self.labels, minlength=self.k)
        return [int(c) for c in counts]

    def points(self) -> list[Point]:
        """Input points (original units) with their final cluster ids."""
        return [
            Point(coordinates=self.data[i].copy(), cluster_id=int(label))
            for i, label in enumerate(self.labels)
        ]

    def clusters(self) -> list[Cluster]:
        """Final clusters with centroids in original units."""
        centroids = self.original_centroids()
        clusters = [Cluster(id=j, centroid=centroids[j]) for j in range(self.k)]
        for i, label in enumerate(self.labels):
            clusters[int(label)].members.append(i)
        return clusters

    def to_meta_dict(self) -> dict:
        return {
            "k": self.k,
            "num_points": int(len(self.data)),
            "dimensions": int(self.data.shape[1]),
            "total_error": self.total_error,
            "best_attempt": self.best.to_meta_dict(),
            "attempt_errors": list(self.attempt_errors),
            "member_counts": self.member_counts(),
            "standardization": (
                self.standardization.to_dict() if self.standardization is not None else None
            ),
        }
