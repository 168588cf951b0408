"""
Run configuration for restarted k-means.
"""

import numbers
from dataclasses import dataclass, asdict
from pathlib import Path

import yaml

__all__ = [
    "KMeansConfig",
    "ConfigurationError",
    "load_config",
    "DEFAULT_MAX_ITERATIONS",
    "DEFAULT_CONVERGENCE_THRESHOLD",
    "DEFAULT_NUM_RESTARTS",
    "DEFAULT_SEED",
]


DEFAULT_MAX_ITERATIONS = 250
DEFAULT_CONVERGENCE_THRESHOLD = 0.00001
DEFAULT_NUM_RESTARTS = 10
DEFAULT_SEED = 123454321


class ConfigurationError(ValueError):
    """Raised before any clustering runs when the requested run is not defined."""
    pass


@dataclass
class KMeansConfig:
    """Configuration for a clustering run."""

    # Loop termination
    max_iterations: int = DEFAULT_MAX_ITERATIONS
    convergence_threshold: float = DEFAULT_CONVERGENCE_THRESHOLD  # Max centroid movement

    # Restarts
    num_restarts: int = DEFAULT_NUM_RESTARTS
    seed: int = DEFAULT_SEED  # Base seed, attempt seeds are spawned from it
    workers: int = 1  # Threads used to run attempts

    # Preprocessing
    standardize: bool = False

    # Output
    verbose: bool = False

    def validate(self) -> None:
        """Raise ConfigurationError if any field has the wrong type or is out of range."""
        for name in ("max_iterations", "num_restarts", "workers", "seed"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, numbers.Integral):
                raise ConfigurationError(f"{name} must be an integer, got {value!r}")
        threshold = self.convergence_threshold
        if isinstance(threshold, bool) or not isinstance(threshold, numbers.Real):
            raise ConfigurationError(f"convergence_threshold must be a number, got {threshold!r}")
        for name in ("standardize", "verbose"):
            value = getattr(self, name)
            if not isinstance(value, bool):
                raise ConfigurationError(f"{name} must be true or false, got {value!r}")

        if self.max_iterations < 1:
            raise ConfigurationError(f"max_iterations must be >= 1, got {self.max_iterations}")
        if self.convergence_threshold < 0:
            raise ConfigurationError(
                f"convergence_threshold must be >= 0, got {self.convergence_threshold}"
            )
        if self.num_restarts < 1:
            raise ConfigurationError(f"num_restarts must be >= 1, got {self.num_restarts}")
        if self.workers < 1:
            raise ConfigurationError(f"workers must be >= 1, got {self.workers}")
        if self.seed < 0:
            raise ConfigurationError(f"seed must be non-negative, got {self.seed}")

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "KMeansConfig":
        """Create from dict, filtering out unknown keys."""
        valid_keys = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in data.items() if k in valid_keys}
        return cls(**filtered)


def load_config(path: Path) -> KMeansConfig:
    """
    Load a run configuration from a YAML file.

    Args:
        path: YAML file with top-level config keys (missing keys use defaults)

    Returns:
        Validated KMeansConfig
    """
    path = Path(path)
    if not path.exists():
        raise ConfigurationError(f"Config file not found: {path}")

    with open(path, encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f) or {}
        except (yaml.YAMLError, UnicodeDecodeError) as e:
            raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file must contain a mapping: {path}")

    config = KMeansConfig.from_dict(data)
    config.validate()
    return config
