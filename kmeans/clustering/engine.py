"""
KMeansEngine - owns the point set for a run and drives the restarts.
"""

from __future__ import annotations

from typing import Optional

import numpy as np

from ..config import KMeansConfig, ConfigurationError
from ..logger import RunLogger
from .models import Point, Cluster, ClusteringResult, AttemptResult
from .standardize import StandardizationStage
from .algorithm import assign_points, run_restarts, validate_k


def as_point_array(points) -> np.ndarray:
    """
    Convert ingested points to an n × d float array.

    Raises ConfigurationError for empty, ragged, non-numeric or non-finite input.
    """
    try:
        data = np.array(points, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Points must be a rectangular array of numbers: {e}") from e

    if data.ndim != 2:
        raise ConfigurationError(f"Points must be 2-dimensional (n × d), got shape {data.shape}")
    if data.shape[0] == 0 or data.shape[1] == 0:
        raise ConfigurationError(f"No point data (shape {data.shape})")
    if not np.isfinite(data).all():
        raise ConfigurationError("Points contain NaN or infinite coordinates")

    return data


class KMeansEngine:
    """
    Restarted k-means over a fixed point set.

    The engine keeps a read-only copy of the points for the lifetime of the
    run; clusters only ever hold indices into it.
    """

    def __init__(
        self,
        points,
        config: Optional[KMeansConfig] = None,
        logger: Optional[RunLogger] = None,
    ):
        """
        Args:
            points: n × d coordinates (array or nested sequences)
            config: Run configuration (defaults if omitted)
            logger: Optional JSONL run logger
        """
        self.config = config or KMeansConfig()
        self.logger = logger

        self.data = as_point_array(points)
        self.data.setflags(write=False)

        self.standardization: Optional[StandardizationStage] = None
        self.result: Optional[ClusteringResult] = None

    @property
    def num_points(self) -> int:
        return int(self.data.shape[0])

    @property
    def dimensions(self) -> int:
        return int(self.data.shape[1])

    def _fail(self, error: ConfigurationError) -> None:
        if self.logger is not None:
            self.logger.log_error(str(error), error_type="configuration")
        raise error

    def _prepare(self) -> np.ndarray:
        """Points in clustering space, standardized if configured."""
        if not self.config.standardize:
            self.standardization = None
            return self.data

        self.standardization = StandardizationStage()
        working = self.standardization.fit_transform(self.data)

        zero_dims = self.standardization.zero_variance_dims
        if zero_dims:
            if self.config.verbose:
                print(f"  Zero-variance dimensions left at 0: {zero_dims}")
            if self.logger is not None:
                self.logger.log_warning("zero_variance", dimensions=zero_dims)

        working.setflags(write=False)
        return working

    def _on_reseed(self, attempt: int, iteration: int, cluster_id: int) -> None:
        if self.logger is not None:
            self.logger.log_warning(
                "degenerate_cluster",
                attempt=attempt,
                iteration=iteration,
                cluster_id=cluster_id,
            )

    def _on_attempt(self, result: AttemptResult) -> None:
        if self.logger is not None:
            self.logger.log_attempt_end(
                attempt=result.attempt,
                seed=result.seed,
                total_error=result.total_error,
                iterations=result.iterations,
                converged=result.converged,
                reseeds=result.reseeds,
            )

    def cluster(self, k: int) -> ClusteringResult:
        """
        Partition the points into k clusters.

        Runs config.num_restarts attempts and keeps the one with the lowest
        total squared error.

        Raises:
            ConfigurationError: k <= 0, k > number of points, or invalid config.
                Raised before any attempt runs.
        """
        try:
            validate_k(k, self.num_points)
            self.config.validate()
        except ConfigurationError as e:
            self._fail(e)

        working = self._prepare()

        if self.logger is not None:
            self.logger.log_run_start(
                config=self.config.to_dict(),
                num_points=self.num_points,
                dimensions=self.dimensions,
                k=k,
            )

        if self.config.verbose:
            print(f"Clustering {self.num_points} points ({self.dimensions}-d) into {k} clusters, "
                  f"{self.config.num_restarts} restarts...")

        best, attempt_errors = run_restarts(
            working,
            k,
            self.config,
            on_attempt=self._on_attempt,
            on_reseed=self._on_reseed,
        )

        self.result = ClusteringResult(
            best=best,
            attempt_errors=attempt_errors,
            data=self.data,
            standardization=self.standardization,
        )

        if self.config.verbose:
            print(f"Best attempt: {best.attempt} (error={best.total_error:.6f})")

        if self.logger is not None:
            self.logger.log_run_end(
                best_attempt=best.attempt,
                total_error=best.total_error,
                attempt_errors=attempt_errors,
                member_counts=self.result.member_counts(),
            )

        return self.result

    def get_points(self):
        """Points with their cluster ids from the last run (unassigned before any run)."""
        if self.result is None:
            return [Point(coordinates=row.copy()) for row in self.data]
        return self.result.points()

    def count_changes(self, result: Optional[ClusteringResult] = None) -> int:
        """
        Run one more assign pass against a result's centroids.

        Returns the number of points that would change cluster; 0 means the
        assignment is stable.
        """
        result = result or self.result
        if result is None:
            raise RuntimeError("No clustering result. Run cluster() first.")

        working = self.data
        if result.standardization is not None:
            working = result.standardization.transform(self.data)

        clusters = [
            Cluster(id=j, centroid=centroid.copy())
            for j, centroid in enumerate(result.centroids)
        ]
        labels = result.labels.copy()
        return assign_points(working, clusters, labels)
