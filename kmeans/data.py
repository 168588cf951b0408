"""
Point ingestion and result output.

Text point files hold one point per line with whitespace- or comma-separated
coordinates; lines starting with # are comments. Files ending in .npy are read
with numpy directly.
"""

from pathlib import Path

import numpy as np

from .config import ConfigurationError
from .clustering.engine import as_point_array
from .clustering.models import ClusteringResult


def load_points(path: Path) -> np.ndarray:
    """
    Read an n × d point array.

    Raises:
        ConfigurationError: missing file, unparseable or empty data
    """
    path = Path(path)
    if not path.exists():
        raise ConfigurationError(f"Point file not found: {path}")

    if path.suffix == ".npy":
        try:
            data = np.load(path)
        except (ValueError, OSError) as e:
            raise ConfigurationError(f"Unreadable .npy file {path}: {e}") from e
        return as_point_array(data)

    try:
        rows = _read_rows(path)
    except UnicodeDecodeError as e:
        raise ConfigurationError(f"{path}: not a text point file ({e})") from e

    if not rows:
        raise ConfigurationError(f"No points in {path}")

    return as_point_array(rows)


def _read_rows(path: Path) -> list[list[float]]:
    rows = []
    with open(path, encoding="utf-8") as f:
        for line_num, line in enumerate(f, start=1):
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            fields = line.replace(",", " ").split()
            try:
                rows.append([float(x) for x in fields])
            except ValueError as e:
                raise ConfigurationError(f"{path}:{line_num}: not a number ({e})") from e

            if len(rows[-1]) != len(rows[0]):
                raise ConfigurationError(
                    f"{path}:{line_num}: expected {len(rows[0])} coordinates, "
                    f"got {len(rows[-1])}"
                )
    return rows


def _format_row(values) -> str:
    return " ".join(f"{float(v):.6f}" for v in values)


def write_points(result: ClusteringResult, path: Path) -> None:
    """Write each point's original coordinates followed by its cluster id."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w') as f:
        for point in result.points():
            f.write(f"{_format_row(point.coordinates)} {point.cluster_id}\n")


def write_centroids(result: ClusteringResult, path: Path) -> None:
    """Write cluster id, member count and centroid (original units), one cluster per line."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w') as f:
        for cluster in result.clusters():
            f.write(f"{cluster.id} {cluster.size} {_format_row(cluster.centroid)}\n")
