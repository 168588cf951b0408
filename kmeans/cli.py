"""
kmeans CLI - restarted k-means over a point file.

Usage:
    kmeans run points.txt 3
    kmeans run points.txt 3 --standardize --restarts 20 --seed 7 --out results/
    kmeans run points.txt 3 --config run.yaml
    kmeans run points.txt 3 --config run.yaml --no-standardize
    kmeans show results/
"""

import argparse
import sys
from pathlib import Path
from typing import Optional

from .config import KMeansConfig, ConfigurationError, load_config
from .logger import RunLogger
from .data import load_points, write_points, write_centroids
from .clustering import KMeansEngine, ResultStore


def build_config(args) -> KMeansConfig:
    """Config file values (or defaults) with command-line overrides applied."""
    config = load_config(Path(args.config)) if args.config else KMeansConfig()

    overrides = {
        "max_iterations": args.max_iterations,
        "convergence_threshold": args.threshold,
        "num_restarts": args.restarts,
        "seed": args.seed,
        "workers": args.workers,
    }
    config_dict = config.to_dict()
    config_dict.update({k: v for k, v in overrides.items() if v is not None})
    if args.standardize is not None:
        config_dict["standardize"] = args.standardize
    if args.verbose:
        config_dict["verbose"] = True

    config = KMeansConfig.from_dict(config_dict)
    config.validate()
    return config


def print_result(result) -> None:
    print(f"Total squared error: {result.total_error:.6f}")
    print(f"Best attempt: {result.best.attempt} "
          f"({result.best.iterations} iterations, "
          f"{'converged' if result.best.converged else 'hit iteration cap'})")
    for cluster in result.clusters():
        centroid = ", ".join(f"{x:.4f}" for x in cluster.centroid)
        print(f"  [{cluster.id}] {cluster.size} points, centroid ({centroid})")


def cmd_run(args):
    """Cluster a point file."""
    config = build_config(args)
    points = load_points(Path(args.points))

    out_dir = Path(args.out) if args.out else None
    logger = RunLogger(out_dir) if out_dir else None

    try:
        engine = KMeansEngine(points, config=config, logger=logger)
        result = engine.cluster(args.k)
    finally:
        if logger is not None:
            logger.close()

    print_result(result)

    if out_dir:
        write_points(result, out_dir / "points.txt")
        write_centroids(result, out_dir / "centroids.txt")
        ResultStore(out_dir).save(result, config=config.to_dict())
        print(f"Wrote: {out_dir}")

    return 0


def cmd_show(args):
    """Show a saved result."""
    store = ResultStore(Path(args.out_dir))
    if not store.exists:
        print(f"No saved result in {args.out_dir}")
        return 1

    result = store.load()
    print(f"Points: {len(result.data)} ({result.data.shape[1]}-d), k={result.k}")
    print(f"Attempt errors: {', '.join(f'{e:.4f}' for e in result.attempt_errors)}")
    print_result(result)
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Restarted k-means clustering"
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # run
    p_run = subparsers.add_parser("run", help="Cluster a point file")
    p_run.add_argument("points", help="Point file (text or .npy)")
    p_run.add_argument("k", type=int, help="Number of clusters")
    p_run.add_argument("--config", help="YAML run configuration")
    p_run.add_argument("--max-iterations", type=int, help="Iteration cap per attempt")
    p_run.add_argument("--threshold", type=float, help="Centroid movement convergence threshold")
    p_run.add_argument("--restarts", type=int, help="Number of independent attempts")
    p_run.add_argument("--seed", type=int, help="Base random seed")
    p_run.add_argument("--workers", type=int, help="Threads for running attempts")
    p_run.add_argument("--standardize", action=argparse.BooleanOptionalAction, default=None,
                       help="Z-score each dimension before clustering (overrides the config file)")
    p_run.add_argument("--out", help="Directory for points, centroids, result and run log")
    p_run.add_argument("--verbose", action="store_true", default=False)

    # show
    p_show = subparsers.add_parser("show", help="Show a saved result")
    p_show.add_argument("out_dir", help="Result directory")

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    # Dispatch
    commands = {
        "run": cmd_run,
        "show": cmd_show,
    }

    try:
        return commands[args.command](args)
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
