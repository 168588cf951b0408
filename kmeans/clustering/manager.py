"""
Result persistence.

Saves and loads a winning clustering result with .npy storage for arrays.
"""

from __future__ import annotations

import json
import shutil
import tempfile
from pathlib import Path
from typing import Optional

import numpy as np

from .models import AttemptResult, ClusteringResult
from .standardize import StandardizationStage


class ResultStore:
    """
    Stores one clustering result in a directory.

    Storage format:
        out_dir/
        ├── centroids.npy   # k × dimensions float64 (clustering space)
        ├── labels.npy      # cluster id per point
        ├── points.npy      # input points, original units
        └── meta.json       # errors, best attempt, member counts, standardization
    """

    def __init__(self, out_dir: Path):
        self.out_dir = Path(out_dir)
        self._centroids_path = self.out_dir / "centroids.npy"
        self._labels_path = self.out_dir / "labels.npy"
        self._points_path = self.out_dir / "points.npy"
        self._meta_path = self.out_dir / "meta.json"

    @property
    def exists(self) -> bool:
        """Check if a result has been saved here."""
        return self._meta_path.exists()

    def save(self, result: ClusteringResult, config: Optional[dict] = None) -> None:
        """Save a result (overwrites any previous one)."""
        self.out_dir.mkdir(parents=True, exist_ok=True)

        np.save(self._centroids_path, result.centroids.astype(np.float64))
        np.save(self._labels_path, result.labels.astype(np.int64))
        np.save(self._points_path, np.asarray(result.data, dtype=np.float64))

        meta = result.to_meta_dict()
        meta["best_attempt"]["error_history"] = list(result.best.error_history)
        meta["best_attempt"]["change_history"] = list(result.best.change_history)
        if config is not None:
            meta["config"] = config

        # Atomic write
        with tempfile.NamedTemporaryFile(
            mode='w', dir=self.out_dir, suffix='.tmp', delete=False
        ) as f:
            temp_path = Path(f.name)
            json.dump(meta, f, indent=2)

        shutil.move(str(temp_path), str(self._meta_path))

    def load(self) -> ClusteringResult:
        """Load the saved result."""
        if not self.exists:
            raise FileNotFoundError(f"No saved result in {self.out_dir}")

        with open(self._meta_path) as f:
            meta = json.load(f)

        best_meta = meta["best_attempt"]
        best = AttemptResult(
            attempt=best_meta["attempt"],
            seed=best_meta["seed"],
            centroids=np.load(self._centroids_path),
            labels=np.load(self._labels_path),
            total_error=best_meta["total_error"],
            iterations=best_meta["iterations"],
            converged=best_meta["converged"],
            error_history=best_meta.get("error_history", []),
            change_history=best_meta.get("change_history", []),
            reseeds=best_meta.get("reseeds", 0),
        )

        standardization = None
        if meta.get("standardization"):
            standardization = StandardizationStage.from_dict(meta["standardization"])

        return ClusteringResult(
            best=best,
            attempt_errors=meta["attempt_errors"],
            data=np.load(self._points_path),
            standardization=standardization,
        )

    def load_config(self) -> Optional[dict]:
        """Config saved alongside the result, if any."""
        if not self.exists:
            return None
        with open(self._meta_path) as f:
            return json.load(f).get("config")
