"""Shared invariant-checking utilities.

Structural validation usable by the test suite and the benchmark driver
alike. Each check raises :class:`InvariantError` on the first failure.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from merkle_trees.logging_config import get_logger
from merkle_trees.tree_stats import Stats, tree_stats_

logger = get_logger(__name__)

if TYPE_CHECKING:
    from merkle_trees.merkle_tree import MerkleTree
    from merkle_trees.mountain_range import MerkleMountainRange
    from merkle_trees.sparse_merkle_tree import SparseMerkleTree

MERKLE_TREE_FLAGS = (
    "children_paired",
    "digests_consistent",
    "is_balanced",
)

SPARSE_TREE_FLAGS = (
    "digests_consistent",
    "defaults_consistent",
)


class InvariantError(Exception):
    """Raised when a tree invariant is violated."""


def assert_tree_invariants_raise(tree: MerkleTree, stats: Optional[Stats] = None) -> Stats:
    """Check a Merkle tree; returns the stats it checked."""
    if stats is None:
        stats = tree_stats_(tree.node)

    for flag in MERKLE_TREE_FLAGS:
        if not getattr(stats, flag):
            raise InvariantError(f"Invariant failed: {flag} is False")

    if stats.leaf_count != tree.size():
        raise InvariantError(
            f"Invariant failed: tree.size()={tree.size()} ≠ stats.leaf_count={stats.leaf_count}"
        )
    if not tree.is_empty() and stats.height != (stats.leaf_count - 1).bit_length():
        raise InvariantError(
            f"Invariant failed: height={stats.height} for {stats.leaf_count} leaves"
        )
    return stats


def assert_mmr_invariants_raise(mmr: MerkleMountainRange) -> None:
    """Check every peak, then that no two peaks hold the same number of leaves."""
    sizes = []
    for i, peak in enumerate(mmr.trees):
        if peak.is_empty():
            raise InvariantError(f"Invariant failed: peak #{i} is empty")
        stats = assert_tree_invariants_raise(peak)
        sizes.append(stats.leaf_count)

    if len(set(sizes)) != len(sizes):
        raise InvariantError(f"Invariant failed: duplicate peak sizes {sizes}")
    if sum(sizes) != mmr.size():
        raise InvariantError(
            f"Invariant failed: peak sizes sum to {sum(sizes)} ≠ mmr.size()={mmr.size()}"
        )
    logger.debug("Mountain range ok: peak sizes %s", sizes)


def assert_smt_invariants_raise(smt: SparseMerkleTree) -> Stats:
    """Check a sparse Merkle tree; returns the stats it checked."""
    stats = tree_stats_(smt.node, height=smt.HEIGHT)

    for flag in SPARSE_TREE_FLAGS:
        if not getattr(stats, flag):
            raise InvariantError(f"Invariant failed: {flag} is False")

    if stats.leaf_count != smt.size():
        raise InvariantError(
            f"Invariant failed: smt.size()={smt.size()} ≠ stats.leaf_count={stats.leaf_count}"
        )
    if not smt.is_empty() and stats.height != smt.HEIGHT:
        raise InvariantError(
            f"Invariant failed: height={stats.height} ≠ {smt.HEIGHT}"
        )
    return stats
