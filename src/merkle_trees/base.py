"""Shared vocabulary for all trees: digests, nodes and proofs."""

from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass
from typing import Iterator, Optional, Tuple, Union

from merkle_trees.logging_config import get_logger

logger = get_logger("MerkleTrees")

DIGEST_SIZE = 32

# Value held by an empty SMT leaf
DEFAULT_VALUE = b""

Digest = bytes
ItemLike = Union[bytes, bytearray, memoryview, str]


def to_bytes(item: ItemLike) -> bytes:
    """Normalize an item to bytes; strings are UTF-8 encoded."""
    if isinstance(item, bytes):
        return item
    if isinstance(item, (bytearray, memoryview)):
        return bytes(item)
    if isinstance(item, str):
        return item.encode("utf-8")
    raise TypeError(f"expected bytes or str item, got {type(item).__name__}")


def hash_data(data: ItemLike) -> Digest:
    """SHA-256 digest of a single item."""
    return hashlib.sha256(to_bytes(data)).digest()


def hash_pair(left: Digest, right: Digest) -> Digest:
    """Digest of an internal node: H(left || right)."""
    return hashlib.sha256(left + right).digest()


class Node:
    """
    A binary tree node holding a digest.

    A leaf has no children. An internal node of a Merkle tree owns exactly
    two children and its digest is ``hash_pair(left.digest, right.digest)``.
    Sparse Merkle tree nodes leave a child pointer empty where the subtree
    holds no items.
    """
    __slots__ = ("digest", "left", "right")

    def __init__(
        self,
        digest: Digest,
        left: Optional[Node] = None,
        right: Optional[Node] = None
    ) -> None:
        self.digest = digest
        self.left = left
        self.right = right

    @classmethod
    def leaf(cls, item: ItemLike) -> Node:
        return cls(hash_data(item))

    @classmethod
    def join(cls, left: Node, right: Node) -> Node:
        """Create the parent of ``left`` and ``right``, taking ownership of both."""
        return cls(hash_pair(left.digest, right.digest), left, right)

    def is_leaf(self) -> bool:
        return self.left is None and self.right is None

    def size(self) -> int:
        """Number of leaves below (and including) this node."""
        count = 0
        stack = [self]
        while stack:
            node = stack.pop()
            if node.left is None and node.right is None:
                count += 1
                continue
            if node.right is not None:
                stack.append(node.right)
            if node.left is not None:
                stack.append(node.left)
        return count

    def __repr__(self) -> str:
        kind = "leaf" if self.is_leaf() else "internal"
        return f"Node({kind}, digest={self.digest.hex()[:16]}...)"


@dataclass(frozen=True)
class ProofStep:
    """
    One step of a Merkle path.

    Attributes:
        sibling (bytes): Digest of the sibling at this level.
        sibling_is_left (bool): True when the sibling is the left operand of
            the hash at this level.
    """
    __slots__ = ("sibling", "sibling_is_left")

    sibling: Digest
    sibling_is_left: bool


@dataclass(frozen=True)
class MerkleProof:
    """
    A Merkle path, read from the leaf upward.

    Proofs are self-contained: checking one needs only the claimed root and
    the item, never the tree that produced it.
    """
    steps: Tuple[ProofStep, ...] = ()

    @classmethod
    def from_path(cls, root_to_leaf: list) -> MerkleProof:
        """Build a proof from steps collected while walking down from the root."""
        return cls(tuple(reversed(root_to_leaf)))

    @property
    def hashes(self) -> list:
        return [step.sibling for step in self.steps]

    @property
    def sides(self) -> list:
        return [step.sibling_is_left for step in self.steps]

    def __len__(self) -> int:
        return len(self.steps)

    def __iter__(self) -> Iterator[ProofStep]:
        return iter(self.steps)


def compute_root(proof: MerkleProof, leaf_digest: Digest) -> Digest:
    """Fold a proof onto a leaf digest and return the implied root."""
    acc = leaf_digest
    for step in proof.steps:
        if step.sibling_is_left:
            acc = hash_pair(step.sibling, acc)
        else:
            acc = hash_pair(acc, step.sibling)
    return acc


def debug_log(message, *args, **kwargs):
    """Log a debug message only if debug logging is enabled"""
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(message, *args, **kwargs)
