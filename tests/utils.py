"""Utility functions for testing Merkle structure invariants and tampering proofs."""

from dataclasses import replace
from typing import Optional

from merkle_trees.base import MerkleProof, ProofStep
from merkle_trees.invariants import MERKLE_TREE_FLAGS, SPARSE_TREE_FLAGS
from merkle_trees.merkle_tree import MerkleTree
from merkle_trees.mountain_range import MerkleMountainRange
from merkle_trees.sparse_merkle_tree import SparseMerkleTree
from merkle_trees.tree_stats import Stats, tree_stats_


def assert_tree_invariants_tc(tc, t: MerkleTree, err_msg: Optional[str] = "") -> Stats:
    """TestCase version: use inside unittest.TestCase methods."""
    stats = tree_stats_(t.node)
    for flag in MERKLE_TREE_FLAGS:
        tc.assertTrue(
            getattr(stats, flag),
            f"Invariant failed: {flag} is False \n\n{err_msg}"
        )
    tc.assertEqual(
        stats.leaf_count, t.size(),
        f"Invariant failed: leaf_count={stats.leaf_count} ≠ size()={t.size()}\n\n{err_msg}"
    )
    if not t.is_empty():
        tc.assertEqual(
            stats.node_count, 2 * stats.leaf_count - 1,
            f"Invariant failed: node_count={stats.node_count} for {stats.leaf_count} leaves\n\n{err_msg}"
        )
    return stats


def assert_mmr_invariants_tc(tc, mmr: MerkleMountainRange, err_msg: Optional[str] = "") -> None:
    sizes = mmr.peak_sizes()
    tc.assertEqual(
        len(set(sizes)), len(sizes),
        f"Invariant failed: duplicate peak sizes {sizes}\n\n{err_msg}"
    )
    for peak in mmr.trees:
        assert_tree_invariants_tc(tc, peak, err_msg)
    tc.assertEqual(sum(sizes), mmr.size(), err_msg)


def assert_smt_invariants_tc(tc, smt: SparseMerkleTree, err_msg: Optional[str] = "") -> Stats:
    stats = tree_stats_(smt.node, height=smt.HEIGHT)
    for flag in SPARSE_TREE_FLAGS:
        tc.assertTrue(
            getattr(stats, flag),
            f"Invariant failed: {flag} is False \n\n{err_msg}"
        )
    tc.assertEqual(stats.leaf_count, smt.size(), err_msg)
    return stats


def flip_side(proof: MerkleProof, index: int) -> MerkleProof:
    """Copy of ``proof`` with the side bit of step ``index`` inverted."""
    steps = list(proof.steps)
    steps[index] = replace(steps[index], sibling_is_left=not steps[index].sibling_is_left)
    return MerkleProof(tuple(steps))


def tamper_sibling(proof: MerkleProof, index: int, byte_index: int) -> MerkleProof:
    """Copy of ``proof`` with one byte of the sibling at step ``index`` flipped."""
    steps = list(proof.steps)
    sibling = bytearray(steps[index].sibling)
    sibling[byte_index] ^= 0x01
    steps[index] = ProofStep(bytes(sibling), steps[index].sibling_is_left)
    return MerkleProof(tuple(steps))
