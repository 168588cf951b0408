"""
K-means algorithm: single attempts and the multi-restart driver.

One attempt is init → {assign, update} until the centroids stop moving or the
iteration cap is hit. The driver runs independent attempts from seeds spawned
off one base seed and keeps the attempt with the lowest total squared error.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Optional

import numpy as np

from ..config import KMeansConfig, ConfigurationError
from .models import Cluster, AttemptResult, UNASSIGNED


# Called with (attempt, iteration, cluster_id) when an empty cluster is reseeded
ReseedCallback = Callable[[int, int, int], None]


def squared_distance(point: np.ndarray, centroid: np.ndarray) -> float:
    """Sum of squared coordinate differences."""
    diff = np.asarray(point, dtype=np.float64) - np.asarray(centroid, dtype=np.float64)
    return float(np.dot(diff, diff))


def distance(point: np.ndarray, centroid: np.ndarray) -> float:
    """Euclidean distance between a point and a centroid."""
    return float(np.sqrt(squared_distance(point, centroid)))


def _centroid_matrix(clusters: list[Cluster]) -> np.ndarray:
    return np.array([c.centroid for c in clusters], dtype=np.float64)


def _squared_distances(data: np.ndarray, centroids: np.ndarray) -> np.ndarray:
    """n × k matrix of squared distances."""
    diff = data[:, None, :] - centroids[None, :, :]
    return (diff ** 2).sum(axis=2)


def init_clusters(data: np.ndarray, k: int, rng: np.random.Generator) -> list[Cluster]:
    """Seed k clusters from k distinct points chosen uniformly at random."""
    indices = rng.choice(len(data), size=k, replace=False)
    return [
        Cluster(id=j, centroid=data[i].astype(np.float64).copy())
        for j, i in enumerate(indices)
    ]


def assign_points(data: np.ndarray, clusters: list[Cluster], labels: np.ndarray) -> int:
    """
    Move every point to its nearest cluster.

    Updates labels in place and rebuilds each cluster's member list.
    Points start UNASSIGNED, so the first pass counts every point as changed.

    Returns:
        Number of points whose cluster id changed
    """
    distances = _squared_distances(data, _centroid_matrix(clusters))
    new_labels = distances.argmin(axis=1)  # first minimum = lowest index

    num_changes = int((new_labels != labels).sum())
    labels[:] = new_labels

    for cluster in clusters:
        cluster.members = np.flatnonzero(new_labels == cluster.id).tolist()

    return num_changes


def recompute_centroid(
    cluster: Cluster,
    data: np.ndarray,
    rng: np.random.Generator,
    centroids: np.ndarray,
) -> bool:
    """
    Set a cluster's centroid to the mean of its members.

    An empty cluster is reseeded from a random point that does not already sit
    on one of the given centroids. If every point coincides with a centroid,
    any point is used.

    Returns:
        True if the cluster was empty and got reseeded
    """
    if not cluster.is_empty:
        cluster.centroid = data[cluster.members].mean(axis=0)
        return False

    on_centroid = (data[:, None, :] == centroids[None, :, :]).all(axis=2).any(axis=1)
    candidates = np.flatnonzero(~on_centroid)
    if len(candidates) == 0:
        candidates = np.arange(len(data))

    chosen = candidates[rng.integers(len(candidates))]
    cluster.centroid = data[chosen].astype(np.float64).copy()
    return True


def update_clusters(
    data: np.ndarray,
    clusters: list[Cluster],
    rng: np.random.Generator,
) -> tuple[float, list[int]]:
    """
    Recompute every centroid.

    Returns:
        (largest centroid movement, ids of clusters that were reseeded)
    """
    previous = _centroid_matrix(clusters)
    reseeded = []

    for cluster in clusters:
        # Reseeding looks at the centroids as they stand, including ones moved this pass
        if recompute_centroid(cluster, data, rng, _centroid_matrix(clusters)):
            reseeded.append(cluster.id)

    movement = np.sqrt(((_centroid_matrix(clusters) - previous) ** 2).sum(axis=1))
    return float(movement.max()), reseeded


def sum_errors(data: np.ndarray, clusters: list[Cluster], labels: np.ndarray) -> float:
    """Total squared distance from each point to its assigned centroid."""
    centroids = _centroid_matrix(clusters)
    diff = data - centroids[labels]
    return float((diff ** 2).sum())


def run_attempt(
    data: np.ndarray,
    k: int,
    rng: np.random.Generator,
    max_iterations: int,
    convergence_threshold: float,
    attempt: int = 0,
    seed: int = 0,
    on_reseed: Optional[ReseedCallback] = None,
) -> AttemptResult:
    """
    Run one k-means attempt from a fresh random initialization.

    Args:
        data: n × d point array (read only)
        k: Number of clusters, 1 <= k <= n
        rng: Generator owned by this attempt
        max_iterations: Cap on assign/update passes
        convergence_threshold: Stop once no centroid moves further than this
        attempt: Attempt index (for bookkeeping)
        seed: Seed recorded on the result
        on_reseed: Optional callback for degenerate-cluster recoveries

    Returns:
        AttemptResult with final centroids, labels and total squared error
    """
    clusters = init_clusters(data, k, rng)
    labels = np.full(len(data), UNASSIGNED, dtype=np.int64)

    error_history = []
    change_history = []
    reseeds = 0
    converged = False
    iterations = 0

    while iterations < max_iterations:
        iterations += 1

        change_history.append(assign_points(data, clusters, labels))
        movement, reseeded = update_clusters(data, clusters, rng)

        for cluster_id in reseeded:
            reseeds += 1
            if on_reseed is not None:
                on_reseed(attempt, iterations, cluster_id)

        error_history.append(sum_errors(data, clusters, labels))

        if movement <= convergence_threshold:
            converged = True
            break

    return AttemptResult(
        attempt=attempt,
        seed=seed,
        centroids=_centroid_matrix(clusters),
        labels=labels,
        total_error=error_history[-1],
        iterations=iterations,
        converged=converged,
        error_history=error_history,
        change_history=change_history,
        reseeds=reseeds,
    )


def attempt_seeds(seed: int, num_restarts: int) -> list[np.random.SeedSequence]:
    """Independent, reproducible seed sequences for each attempt."""
    return np.random.SeedSequence(seed).spawn(num_restarts)


def keep_best(best: Optional[AttemptResult], candidate: AttemptResult) -> AttemptResult:
    """
    Minimum-error reduction step over attempts.

    Attempts are fed in attempt order, so a tie keeps the earlier attempt.
    """
    if best is None or candidate.total_error < best.total_error:
        return candidate
    return best


def validate_k(k: int, num_points: int) -> None:
    """Raise ConfigurationError unless 1 <= k <= num_points."""
    if k <= 0:
        raise ConfigurationError(f"Number of clusters must be positive, got k={k}")
    if k > num_points:
        raise ConfigurationError(
            f"Cannot form {k} clusters from {num_points} points"
        )


def run_restarts(
    data: np.ndarray,
    k: int,
    config: KMeansConfig,
    on_attempt: Optional[Callable[[AttemptResult], None]] = None,
    on_reseed: Optional[ReseedCallback] = None,
) -> tuple[AttemptResult, list[float]]:
    """
    Run config.num_restarts independent attempts and keep the best.

    Each attempt gets its own generator spawned from config.seed, so results
    are the same whether attempts run sequentially or on worker threads.

    Returns:
        (best attempt, total error of every attempt in attempt order)
    """
    validate_k(k, len(data))
    config.validate()

    seeds = attempt_seeds(config.seed, config.num_restarts)

    def run_one(attempt: int) -> AttemptResult:
        seed_seq = seeds[attempt]
        result = run_attempt(
            data,
            k,
            rng=np.random.default_rng(seed_seq),
            max_iterations=config.max_iterations,
            convergence_threshold=config.convergence_threshold,
            attempt=attempt,
            seed=int(seed_seq.generate_state(1)[0]),
            on_reseed=on_reseed,
        )
        if config.verbose:
            status = "converged" if result.converged else "hit iteration cap"
            print(f"  Attempt {attempt}: error={result.total_error:.6f}, "
                  f"iterations={result.iterations} ({status})")
        if on_attempt is not None:
            on_attempt(result)
        return result

    best = None
    errors = []

    if config.workers > 1 and config.num_restarts > 1:
        with ThreadPoolExecutor(max_workers=config.workers) as pool:
            for result in pool.map(run_one, range(config.num_restarts)):
                errors.append(result.total_error)
                best = keep_best(best, result)
    else:
        for attempt in range(config.num_restarts):
            result = run_one(attempt)
            errors.append(result.total_error)
            best = keep_best(best, result)

    return best, errors
