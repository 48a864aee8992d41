"""Balanced binary Merkle tree"""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from merkle_trees.base import (
    Digest,
    ItemLike,
    MerkleProof,
    Node,
    ProofStep,
    compute_root,
    debug_log,
    hash_data,
)


class MerkleTree:
    """
    A Merkle tree is either empty or contains a single root node.

    The shape is positional: items are split at their midpoint, so the root
    commits to the order of the items and not only to their membership.

    Attributes:
        node (Optional[Node]): The root node. If None, the tree is empty.
    """
    __slots__ = ("node", "_leaf_count", "_leaf_index")

    def __init__(
        self,
        node: Optional[Node] = None,
        leaf_count: int = 0,
        leaf_index: Optional[Dict[Digest, int]] = None
    ) -> None:
        self.node: Optional[Node] = node
        self._leaf_count = leaf_count
        # leaf digest -> position of its first occurrence
        self._leaf_index: Dict[Digest, int] = leaf_index if leaf_index is not None else {}

    @classmethod
    def from_items(cls, items: Iterable[ItemLike]) -> MerkleTree:
        """
        Build a balanced tree over ``items`` in order.

        Args:
            items: Byte strings (or str, UTF-8 encoded) to commit to.

        Returns:
            MerkleTree: The new tree; empty if ``items`` is empty.
        """
        digests = [hash_data(item) for item in items]
        if not digests:
            return cls()

        index: Dict[Digest, int] = {}
        for pos, digest in enumerate(digests):
            index.setdefault(digest, pos)

        root = _build(digests, 0, len(digests))
        debug_log("Built Merkle tree with %d leaves", len(digests))
        return cls(root, len(digests), index)

    @classmethod
    def merge(cls, left: MerkleTree, right: MerkleTree) -> MerkleTree:
        """
        Join two equal-sized trees under a new root, ``left`` first.

        The roots of both trees are moved under the new root, not copied.
        Leaf positions of ``right`` shift by ``left.size()``.

        Raises:
            ValueError: If either tree is empty or their leaf counts differ.
        """
        if left.is_empty() or right.is_empty():
            raise ValueError("merge(): both trees must be non-empty")
        if left._leaf_count != right._leaf_count:
            raise ValueError(
                f"merge(): leaf counts differ ({left._leaf_count} != {right._leaf_count})"
            )
        offset = left._leaf_count
        index = dict(left._leaf_index)
        for digest, pos in right._leaf_index.items():
            index.setdefault(digest, pos + offset)
        root = Node.join(left.node, right.node)
        return cls(root, offset + right._leaf_count, index)

    def is_empty(self) -> bool:
        return self.node is None

    def root(self) -> Optional[Digest]:
        """The root digest, or None for an empty tree."""
        if self.is_empty():
            return None
        return self.node.digest

    def size(self) -> int:
        """Number of leaves."""
        return self._leaf_count

    __len__ = size

    def __contains__(self, item: ItemLike) -> bool:
        return hash_data(item) in self._leaf_index

    def __str__(self):
        if self.is_empty():
            return "Empty MerkleTree"
        return f"MerkleTree(leaves={self._leaf_count}, root={self.node.digest.hex()})"

    __repr__ = __str__

    def find_leaf(self, item: ItemLike) -> Optional[int]:
        """Position of the first leaf holding ``hash(item)``, or None."""
        return self._leaf_index.get(hash_data(item))

    def prove(self, item: ItemLike) -> Optional[MerkleProof]:
        """
        Generate an inclusion proof for ``item``.

        When several leaves hold the same digest, the proof targets the first
        one in left-to-right order.

        Returns:
            Optional[MerkleProof]: The proof, or None if the item is absent.
        """
        pos = self.find_leaf(item)
        if pos is None:
            return None
        return MerkleProof.from_path(self._path_to(pos))

    def _path_to(self, pos: int) -> List[ProofStep]:
        """Sibling steps from the root down to the leaf at ``pos``."""
        steps: List[ProofStep] = []
        node = self.node
        count = self._leaf_count
        while not node.is_leaf():
            half = count // 2
            if pos < half:
                steps.append(ProofStep(node.right.digest, False))
                node = node.left
                count = half
            else:
                steps.append(ProofStep(node.left.digest, True))
                node = node.right
                pos -= half
                count -= half
        return steps

    @staticmethod
    def verify(proof: Optional[MerkleProof], root: Optional[Digest], item: ItemLike) -> bool:
        """
        Check that ``proof`` links ``item`` to ``root``.

        Pure function of its arguments; the tree is never consulted.
        """
        if proof is None or root is None:
            return False
        return compute_root(proof, hash_data(item)) == root


def _build(digests: List[Digest], lo: int, hi: int) -> Node:
    """Recursively build the subtree over ``digests[lo:hi]`` (non-empty)."""
    if hi - lo == 1:
        return Node(digests[lo])
    mid = lo + (hi - lo) // 2
    return Node.join(_build(digests, lo, mid), _build(digests, mid, hi))
