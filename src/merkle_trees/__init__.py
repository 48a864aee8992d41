"""
merkle_trees: Authenticated data structures over SHA-256.

Quick-start imports::

    from merkle_trees import MerkleTree, MerkleMountainRange, SparseMerkleTree

Every structure commits a list of byte strings to a root digest (the list
of peak digests for a mountain range) and produces proofs that verify
against that commitment alone.
"""

# Shared primitives
from merkle_trees.base import (
    DIGEST_SIZE,
    MerkleProof,
    Node,
    ProofStep,
    compute_root,
    hash_data,
    hash_pair,
)
from merkle_trees.display import print_pretty

# Stats & invariants
from merkle_trees.invariants import (
    InvariantError,
    assert_mmr_invariants_raise,
    assert_smt_invariants_raise,
    assert_tree_invariants_raise,
)

# Trees
from merkle_trees.merkle_tree import MerkleTree
from merkle_trees.mountain_range import MerkleMountainRange
from merkle_trees.sparse_merkle_tree import SMT_HEIGHT, SparseMerkleTree, get_default_digests
from merkle_trees.tree_stats import Stats, tree_stats_

__all__ = [
    # Primitives
    "DIGEST_SIZE",
    "InvariantError",
    # Trees
    "MerkleMountainRange",
    "MerkleProof",
    "MerkleTree",
    "Node",
    "ProofStep",
    "SMT_HEIGHT",
    "SparseMerkleTree",
    # Stats & invariants
    "Stats",
    "assert_mmr_invariants_raise",
    "assert_smt_invariants_raise",
    "assert_tree_invariants_raise",
    "compute_root",
    "get_default_digests",
    "hash_data",
    "hash_pair",
    "print_pretty",
    "tree_stats_",
]
