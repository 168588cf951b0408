#!/usr/bin/env python3
"""
Generate a synthetic point file of Gaussian blobs for trying out the CLI.

Usage:
    python scripts/make_blobs.py points.txt --clusters 4 --per-cluster 250 --dims 2
"""

import argparse
import sys

import numpy as np


def main():
    parser = argparse.ArgumentParser(description="Generate Gaussian blob point files")
    parser.add_argument("output", help="Output text file")
    parser.add_argument("--clusters", type=int, default=4, help="Number of blobs")
    parser.add_argument("--per-cluster", type=int, default=250, help="Points per blob")
    parser.add_argument("--dims", type=int, default=2, help="Dimensions")
    parser.add_argument("--spread", type=float, default=1.0, help="Blob stddev")
    parser.add_argument("--seed", type=int, default=42)
    args = parser.parse_args()

    rng = np.random.default_rng(args.seed)
    centers = rng.uniform(-10 * args.clusters, 10 * args.clusters, size=(args.clusters, args.dims))
    points = np.concatenate([
        rng.normal(center, args.spread, size=(args.per_cluster, args.dims))
        for center in centers
    ])
    rng.shuffle(points)

    np.savetxt(args.output, points, fmt="%.6f")
    print(f"Wrote {len(points)} points ({args.dims}-d, {args.clusters} blobs) to {args.output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
