"""Core benchmark runner for Merkle structure proof timings."""

import logging
import time
from dataclasses import dataclass, field
from typing import Dict, List

from tqdm import tqdm

from merkle_trees import (
    InvariantError,
    MerkleMountainRange,
    MerkleTree,
    SparseMerkleTree,
    assert_mmr_invariants_raise,
    assert_smt_invariants_raise,
    assert_tree_invariants_raise,
)

from .benchmark_utils import BenchmarkUtils
from .config import BenchmarkConfig, BenchmarkMetadata, get_git_commit_hash


@dataclass
class BenchmarkResult:
    """Results from benchmarking one structure."""
    metadata: BenchmarkMetadata
    build_time: float
    prove_times: List[float] = field(default_factory=list)
    verify_times: List[float] = field(default_factory=list)
    non_inclusion_times: List[float] = field(default_factory=list)
    failures: int = 0


class BenchmarkRunner:
    """
    Manages the benchmark lifecycle with proper phase separation.

    Phases:
    1. Setup (not timed): Data generation
    2. Build (timed once): Structure construction
    3. Run (timed): Proof generation and verification
    4. Verify (not timed): Structural invariant checks
    """

    def __init__(self, config: BenchmarkConfig):
        self.config = config
        self._check_logging_level()

    def _check_logging_level(self) -> None:
        """Warn if verbose logging is enabled during measurement."""
        try:
            BenchmarkUtils.check_logging_level()
        except ValueError as e:
            logging.warning("⚠️  %s", e)

    def _build(self, structure: str, items: List[bytes]):
        if structure == "merkle":
            return MerkleTree.from_items(items)
        if structure == "mmr":
            return MerkleMountainRange.from_items(items)
        if structure == "smt":
            return SparseMerkleTree.from_items(items)
        raise ValueError(f"Unknown structure: {structure}")

    def verify_structure(self, structure: str, built) -> bool:
        """
        Verify phase: check structural invariants.

        NOT TIMED.
        """
        try:
            if structure == "merkle":
                assert_tree_invariants_raise(built)
            elif structure == "mmr":
                assert_mmr_invariants_raise(built)
            else:
                assert_smt_invariants_raise(built)
        except InvariantError as e:
            logging.error("%s: %s", structure, e)
            return False
        return True

    def run_benchmark(self, structure: str) -> BenchmarkResult:
        """Build ``structure`` and time proofs for a deterministic sample of items."""
        size = self.config.size_for(structure)
        items = BenchmarkUtils.generate_items(size)
        indices = BenchmarkUtils.choose_proof_indices(size, self.config.n_proofs, self.config.seed)
        metadata = BenchmarkMetadata(
            commit_hash=get_git_commit_hash(),
            config=self.config,
            structure=structure,
            size=size,
            n_proofs=len(indices),
        )

        start = time.perf_counter()
        built = self._build(structure, items)
        result = BenchmarkResult(metadata=metadata, build_time=time.perf_counter() - start)

        if self.config.verify_only:
            if not self.verify_structure(structure, built):
                result.failures += 1
            return result

        commitment = built.peaks() if structure == "mmr" else built.root()
        verify = type(built).verify

        for i in tqdm(indices, desc=f"{structure} proofs", leave=False):
            item = items[i]

            t0 = time.perf_counter()
            proof = built.prove(item)
            t1 = time.perf_counter()
            ok = verify(proof, commitment, item)
            t2 = time.perf_counter()
            result.prove_times.append(t1 - t0)
            result.verify_times.append(t2 - t1)
            if not ok:
                result.failures += 1

            if structure == "smt":
                absent = BenchmarkUtils.absent_item(item)
                t0 = time.perf_counter()
                non_incl = built.prove_non_inclusion(absent)
                ok = SparseMerkleTree.verify_non_inclusion(non_incl, commitment, absent)
                result.non_inclusion_times.append(time.perf_counter() - t0)
                if not ok:
                    result.failures += 1

        return result

    def report(self, result: BenchmarkResult) -> Dict[str, Dict[str, float]]:
        """Log aggregated timings; returns the summaries that were logged."""
        summaries = {
            "prove": BenchmarkUtils.summarize_timings(result.prove_times),
            "verify": BenchmarkUtils.summarize_timings(result.verify_times),
        }
        if result.non_inclusion_times:
            summaries["non-inclusion"] = BenchmarkUtils.summarize_timings(result.non_inclusion_times)

        for line in str(result.metadata).splitlines():
            logging.info(line)
        logging.info(f"Build time: {result.build_time:.3f} s")
        for name, s in summaries.items():
            logging.info(
                f"{name:>14}: mean={s['mean'] * 1e6:.1f}µs median={s['median'] * 1e6:.1f}µs "
                f"p95={s['p95'] * 1e6:.1f}µs (n={s['count']})"
            )
        if result.failures:
            logging.error(f"{result.failures} proof(s) failed to verify")
        return summaries
