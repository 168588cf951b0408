#!/usr/bin/env python3
"""
Cluster a point file with restarted k-means.

Usage:
    python scripts/cluster.py run points.txt 3 --out results/
    python scripts/cluster.py show results/
"""

import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from kmeans.cli import main


if __name__ == "__main__":
    sys.exit(main())
