"""Benchmark configuration and metadata management."""

import os
import subprocess
from dataclasses import dataclass
from typing import Optional

STRUCTURES = ("merkle", "mmr", "smt")


@dataclass
class BenchmarkConfig:
    """Configuration for benchmark runs."""

    # Reproducibility
    seed: int = 42

    # Benchmark parameters
    merkle_size: int = 1_000_000
    mmr_size: int = 1_000_000
    smt_size: int = 50_000
    n_proofs: int = 100
    structures: tuple = STRUCTURES

    # Execution control
    verify_only: bool = False

    # Logging
    log_level: str = "INFO"

    def size_for(self, structure: str) -> int:
        return {
            "merkle": self.merkle_size,
            "mmr": self.mmr_size,
            "smt": self.smt_size,
        }[structure]

    @classmethod
    def from_env(cls) -> "BenchmarkConfig":
        """Create config from environment variables."""
        return cls(
            seed=int(os.environ.get("BENCHMARK_SEED", "42")),
            n_proofs=int(os.environ.get("BENCHMARK_N_PROOFS", "100")),
            verify_only=os.environ.get("BENCHMARK_VERIFY_ONLY", "").lower() == "true",
            log_level=os.environ.get("BENCHMARK_LOG_LEVEL", "INFO"),
        )


def get_git_commit_hash() -> Optional[str]:
    """Get the current git commit hash."""
    try:
        result = subprocess.run(
            ["git", "rev-parse", "HEAD"],
            capture_output=True,
            text=True,
            check=True,
            cwd=os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
        )
        return result.stdout.strip()
    except (subprocess.CalledProcessError, FileNotFoundError):
        return None


@dataclass
class BenchmarkMetadata:
    """Metadata about a benchmark run."""

    commit_hash: Optional[str]
    config: BenchmarkConfig
    structure: str
    size: int
    n_proofs: int

    def __str__(self) -> str:
        """Format metadata as string."""
        lines = [
            f"Commit: {self.commit_hash or 'unknown'}",
            f"Seed: {self.config.seed}",
            f"Structure: {self.structure}",
            f"Size (n): {self.size}",
            f"Proofs: {self.n_proofs}",
        ]
        return "\n".join(lines)
