"""
Benchmarking utilities for Merkle structures.

Reproducibility:
    Proof targets are drawn with a deterministic seed by default.
    The default seed can be overridden via the BENCHMARK_SEED environment variable.

Logging:
    Benchmarks should be run with logging at INFO level or higher to avoid
    performance contamination from verbose debug output.
"""

import logging
import os
from typing import Dict, List, Sequence

import numpy as np

# Default seed for deterministic benchmarking - can be overridden via environment variable
DEFAULT_BENCHMARK_SEED = int(os.environ.get('BENCHMARK_SEED', '42'))


class BenchmarkUtils:
    """Utility class for benchmark setup and result aggregation."""

    @staticmethod
    def check_logging_level():
        """
        Check if logging level is appropriate for benchmarking.

        Raises ValueError if DEBUG or lower (more verbose) logging is enabled,
        as this can significantly contaminate benchmark results with I/O overhead.
        """
        merkle_logger = logging.getLogger("merkle_trees")
        effective_level = merkle_logger.getEffectiveLevel()
        if effective_level <= logging.DEBUG:
            raise ValueError(
                f"Logging level is set to {logging.getLevelName(effective_level)}. "
                "Benchmarks require logging to be at INFO level or higher to avoid "
                "performance contamination from verbose debug output."
            )

    @staticmethod
    def generate_items(size: int) -> List[bytes]:
        """Sequential integers rendered as decimal byte strings: b"0", b"1", ..."""
        return [str(i).encode() for i in range(size)]

    @staticmethod
    def absent_item(item: bytes) -> bytes:
        """An item guaranteed not to be among ``generate_items`` output."""
        return b"a" + item

    @staticmethod
    def choose_proof_indices(size: int, count: int, seed: int = None) -> List[int]:
        """
        Pick ``count`` distinct item positions to prove, deterministically.

        Args:
            size: Number of items in the structure
            count: Number of positions wanted (capped at ``size``)
            seed: Random seed for reproducibility. If None, uses DEFAULT_BENCHMARK_SEED.
        """
        if seed is None:
            seed = DEFAULT_BENCHMARK_SEED
        count = min(count, size)
        rng = np.random.default_rng(seed)
        return sorted(rng.choice(size, size=count, replace=False).tolist())

    @staticmethod
    def summarize_timings(timings: Sequence[float]) -> Dict[str, float]:
        """Mean, median, p95, min and max of a series of timings (seconds)."""
        if not timings:
            return {"count": 0, "mean": 0.0, "median": 0.0, "p95": 0.0, "min": 0.0, "max": 0.0}
        arr = np.asarray(timings, dtype=float)
        return {
            "count": int(arr.size),
            "mean": float(arr.mean()),
            "median": float(np.median(arr)),
            "p95": float(np.percentile(arr, 95)),
            "min": float(arr.min()),
            "max": float(arr.max()),
        }
