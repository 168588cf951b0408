"""
Per-dimension z-score standardization.

Rescales every dimension to zero mean and unit variance before clustering and
keeps the statistics so centroids can be mapped back to original units.
"""

from __future__ import annotations

from typing import Optional

import numpy as np


class StandardizationStage:
    """
    Z-score transform with recorded per-dimension mean and stdev.

    A dimension with zero variance is centered and left at 0; its inverse maps
    back to the recorded mean.
    """

    def __init__(self, mean: Optional[np.ndarray] = None, stdev: Optional[np.ndarray] = None):
        self.mean = None if mean is None else np.asarray(mean, dtype=np.float64)
        self.stdev = None if stdev is None else np.asarray(stdev, dtype=np.float64)

    @property
    def fitted(self) -> bool:
        return self.mean is not None and self.stdev is not None

    @property
    def zero_variance_dims(self) -> list[int]:
        """Indices of dimensions guarded against division by zero."""
        self._require_fitted()
        return [int(d) for d in np.flatnonzero(self.stdev == 0.0)]

    def fit(self, data: np.ndarray) -> StandardizationStage:
        """Record population mean and stdev (ddof=0) of every dimension."""
        data = np.asarray(data, dtype=np.float64)
        self.mean = data.mean(axis=0)
        self.stdev = data.std(axis=0)
        # std() of a constant column can round to a tiny nonzero value
        self.stdev[np.ptp(data, axis=0) == 0] = 0.0
        return self

    def transform(self, data: np.ndarray) -> np.ndarray:
        """Apply (x - mean) / stdev; constant dimensions become 0."""
        self._require_fitted()
        data = np.asarray(data, dtype=np.float64)
        centered = data - self.mean

        degenerate = self.stdev == 0.0
        scale = np.where(degenerate, 1.0, self.stdev)
        standardized = centered / scale
        standardized[..., degenerate] = 0.0
        return standardized

    def fit_transform(self, data: np.ndarray) -> np.ndarray:
        return self.fit(data).transform(data)

    def inverse_transform(self, data: np.ndarray) -> np.ndarray:
        """Map standardized coordinates (e.g. centroids) back to original units."""
        self._require_fitted()
        data = np.asarray(data, dtype=np.float64)
        degenerate = self.stdev == 0.0
        scale = np.where(degenerate, 0.0, self.stdev)
        return data * scale + self.mean

    def _require_fitted(self) -> None:
        if not self.fitted:
            raise RuntimeError("StandardizationStage not fitted. Call fit() first.")

    def to_dict(self) -> dict:
        self._require_fitted()
        return {
            "mean": self.mean.tolist(),
            "stdev": self.stdev.tolist(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> StandardizationStage:
        return cls(mean=data["mean"], stdev=data["stdev"])
