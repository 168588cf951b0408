"""
Structured logging for clustering runs.

Single JSONL file with typed events for streaming and analysis.

Event types:
- run_start: Config, input shape, k
- attempt_end: Per-attempt outcome (error, iterations, convergence)
- warning: Locally recovered conditions (degenerate cluster, zero variance)
- error: Configuration errors that abort a run
- run_end: Winning attempt and per-attempt errors
"""

import json
import threading
from pathlib import Path
from datetime import datetime
from typing import Any, Optional


class RunLogger:
    def __init__(self, output_dir: Path):
        """
        Initialize logger for a run.

        Args:
            output_dir: Directory for the log file (created if missing)
        """
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.log_file = self.output_dir / "run.jsonl"

        # Attempts may finish on worker threads
        self._lock = threading.Lock()

        # Open file in append mode
        self.file_handle = open(self.log_file, 'a')

    def _write_event(self, event_type: str, data: dict[str, Any]) -> None:
        """Write typed event to JSONL log."""
        event = {
            "type": event_type,
            "timestamp": datetime.now().isoformat(),
            **data
        }
        line = json.dumps(event) + '\n'
        with self._lock:
            self.file_handle.write(line)
            self.file_handle.flush()  # Ensure streaming writes

    def log_run_start(self, config: dict[str, Any], num_points: int, dimensions: int, k: int) -> None:
        """
        Log run initialization.

        Args:
            config: Run configuration
            num_points: Number of input points
            dimensions: Point dimensionality
            k: Requested number of clusters
        """
        self._write_event("run_start", {
            "config": config,
            "num_points": num_points,
            "dimensions": dimensions,
            "k": k,
        })

    def log_attempt_end(
        self,
        attempt: int,
        seed: int,
        total_error: float,
        iterations: int,
        converged: bool,
        reseeds: int = 0,
    ) -> None:
        """
        Log completion of one restart attempt.

        Args:
            attempt: Attempt index
            seed: Seed drawn for this attempt
            total_error: Final total squared error
            iterations: Assign/update passes run
            converged: False if the iteration cap stopped the attempt
            reseeds: Empty clusters recovered during the attempt
        """
        self._write_event("attempt_end", {
            "attempt": attempt,
            "seed": seed,
            "total_error": total_error,
            "iterations": iterations,
            "converged": converged,
            "reseeds": reseeds,
        })

    def log_warning(self, condition: str, **details: Any) -> None:
        """
        Log a condition that was recovered without failing the run.

        Args:
            condition: e.g. degenerate_cluster, zero_variance
            details: Condition-specific fields
        """
        self._write_event("warning", {
            "condition": condition,
            **details,
        })

    def log_error(self, message: str, error_type: str = "error") -> None:
        """
        Log error event (aborts the run).

        Args:
            message: Error description
            error_type: Error category (e.g. configuration)
        """
        self._write_event("error", {
            "message": message,
            "error_type": error_type,
        })

    def log_run_end(
        self,
        best_attempt: int,
        total_error: float,
        attempt_errors: list[float],
        member_counts: Optional[list[int]] = None,
    ) -> None:
        """
        Log run completion.

        Args:
            best_attempt: Index of the retained attempt
            total_error: Its total squared error
            attempt_errors: Total error of every attempt, in attempt order
            member_counts: Points per cluster in the retained attempt
        """
        data = {
            "best_attempt": best_attempt,
            "total_error": total_error,
            "attempt_errors": attempt_errors,
        }
        if member_counts is not None:
            data["member_counts"] = member_counts

        self._write_event("run_end", data)

    def close(self) -> None:
        """Close log file."""
        if hasattr(self, 'file_handle') and self.file_handle:
            self.file_handle.close()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
