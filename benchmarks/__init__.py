"""
Benchmarks package for Merkle trees, mountain ranges and sparse Merkle trees.

Times proof generation and verification over large, deterministic inputs:
- MerkleTree and MerkleMountainRange over 1,000,000 items
- SparseMerkleTree over 50,000 items, including non-inclusion proofs
"""

from .benchmark_utils import BenchmarkUtils
from .config import BenchmarkConfig

__all__ = ["BenchmarkConfig", "BenchmarkUtils"]
