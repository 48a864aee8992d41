"""Sparse Merkle tree over the full SHA-256 digest domain.

Every possible digest has a leaf slot, ordered numerically. Only the paths
leading to inserted items are materialized; any subtree without items is a
*virtual* node: the parent's child pointer is left empty and the subtree's
digest is the precomputed default digest for its height. This allows
proving that an item is absent: its slot still holds the empty-leaf value.
"""

from __future__ import annotations

from bisect import bisect_right
from typing import Iterable, List, Optional, Tuple

from merkle_trees.base import (
    DEFAULT_VALUE,
    DIGEST_SIZE,
    Digest,
    ItemLike,
    MerkleProof,
    Node,
    ProofStep,
    compute_root,
    debug_log,
    hash_data,
    hash_pair,
)
from merkle_trees.logging_config import get_logger
from merkle_trees.utils import digest_to_int, get_bit, int_to_digest

logger = get_logger(__name__)

# One level per digest bit, minus one: the root sits at this height and
# height-0 nodes are leaves.
SMT_HEIGHT = 8 * DIGEST_SIZE - 1

_DEFAULT_DIGESTS: Optional[Tuple[Digest, ...]] = None


def get_default_digests() -> Tuple[Digest, ...]:
    """
    Digests of the all-empty subtree at each height ``0 .. SMT_HEIGHT``.

    ``default[0]`` is the hash of the empty leaf value and
    ``default[h] = H(default[h-1] || default[h-1])``. Computed once per
    process and cached.
    """
    global _DEFAULT_DIGESTS
    if _DEFAULT_DIGESTS is None:
        table = [hash_data(DEFAULT_VALUE)]
        for _ in range(SMT_HEIGHT):
            prev = table[-1]
            table.append(hash_pair(prev, prev))
        _DEFAULT_DIGESTS = tuple(table)
    return _DEFAULT_DIGESTS


def child_digest(child: Optional[Node], height: int) -> Digest:
    """Digest of a child at ``height``, falling back to the default digest."""
    if child is None:
        return get_default_digests()[height]
    return child.digest


class SparseMerkleTree:
    """
    A fixed-height tree spanning all digests; always holds a root node.

    Attributes:
        node (Node): The root node, at height ``SMT_HEIGHT``. For an empty
            tree it is a childless node carrying ``default[SMT_HEIGHT]``.
    """
    __slots__ = ("node", "_item_count")

    HEIGHT = SMT_HEIGHT

    def __init__(self, node: Optional[Node] = None, item_count: int = 0) -> None:
        if node is None:
            node = Node(get_default_digests()[SMT_HEIGHT])
        self.node: Node = node
        self._item_count = item_count

    @classmethod
    def from_items(cls, items: Iterable[ItemLike]) -> SparseMerkleTree:
        """
        Place each item at the leaf slot given by its own digest.

        Repeated items occupy a single slot. Two different items whose
        digests share their leading ``SMT_HEIGHT`` bits cannot both be
        placed; the first is kept and a warning is logged.
        """
        keys = sorted({digest_to_int(hash_data(item)) for item in items})
        if not keys:
            return cls()
        root = _build(keys, 0, len(keys), 0, SMT_HEIGHT)
        debug_log("Built sparse Merkle tree with %d items", len(keys))
        return cls(root, len(keys))

    def is_empty(self) -> bool:
        return self._item_count == 0

    def root(self) -> Digest:
        return self.node.digest

    def size(self) -> int:
        """Number of distinct items placed in the tree."""
        return self._item_count

    __len__ = size

    def __contains__(self, item: ItemLike) -> bool:
        digest = hash_data(item)
        _, reached, _ = self._walk(digest)
        return reached is not None and reached.digest == digest

    def __str__(self):
        return f"SparseMerkleTree(items={self._item_count}, root={self.node.digest.hex()})"

    __repr__ = __str__

    def _walk(self, digest: Digest) -> Tuple[List[ProofStep], Optional[Node], int]:
        """
        Follow the bits of ``digest`` from the root, most significant first.

        Returns:
            Tuple[List[ProofStep], Optional[Node], int]: The sibling steps
            collected root-first, the height-0 node reached (None if the
            walk entered a virtual node) and the height at which it stopped.
        """
        defaults = get_default_digests()
        steps: List[ProofStep] = []
        node = self.node
        for i in range(SMT_HEIGHT):
            height = SMT_HEIGHT - i - 1
            if get_bit(digest, i):
                sibling, node = node.left, node.right
                steps.append(ProofStep(defaults[height] if sibling is None else sibling.digest, True))
            else:
                sibling, node = node.right, node.left
                steps.append(ProofStep(defaults[height] if sibling is None else sibling.digest, False))
            if node is None:
                return steps, None, height
        return steps, node, 0

    def prove(self, item: ItemLike) -> Optional[MerkleProof]:
        """
        Inclusion proof for ``item``: exactly ``SMT_HEIGHT`` steps.

        Returns:
            Optional[MerkleProof]: The proof, or None if the item is absent.
        """
        digest = hash_data(item)
        steps, reached, _ = self._walk(digest)
        if reached is None or reached.digest != digest:
            return None
        return MerkleProof.from_path(steps)

    def prove_non_inclusion(self, item: ItemLike) -> Optional[MerkleProof]:
        """
        Proof that the leaf slot of ``item`` holds the empty value.

        The walk stops at the first virtual node on the item's path; the rest
        of the path below it is filled with default digests.

        Returns:
            Optional[MerkleProof]: The proof, or None if the item is present.
        """
        digest = hash_data(item)
        steps, reached, height = self._walk(digest)
        if reached is not None:
            # Landed on a real leaf: the slot is occupied
            return None

        defaults = get_default_digests()
        for i in range(SMT_HEIGHT - height, SMT_HEIGHT):
            steps.append(ProofStep(defaults[SMT_HEIGHT - i - 1], bool(get_bit(digest, i))))
        return MerkleProof.from_path(steps)

    @staticmethod
    def verify(proof: Optional[MerkleProof], root: Optional[Digest], item: ItemLike) -> bool:
        """Check an inclusion proof against ``root``."""
        if proof is None or root is None or len(proof) != SMT_HEIGHT:
            return False
        return compute_root(proof, hash_data(item)) == root

    @staticmethod
    def verify_non_inclusion(proof: Optional[MerkleProof], root: Optional[Digest], item: ItemLike) -> bool:
        """
        Check a non-inclusion proof against ``root``.

        The recomputation starts from the empty-leaf digest instead of
        ``hash(item)``: the proof claims the slot is empty.
        """
        if proof is None or root is None or len(proof) != SMT_HEIGHT:
            return False
        return compute_root(proof, get_default_digests()[0]) == root


def _build(keys: List[int], start: int, end: int, lo: int, height: int) -> Node:
    """
    Build the subtree for ``keys[start:end]`` (non-empty), all within the
    slot range ``[lo, lo + 2**(height + 1) - 1]``.
    """
    if height == 0:
        if end - start > 1:
            logger.warning(
                "Digest collision at leaf slot %s: keeping 1 of %d items",
                int_to_digest(keys[start]).hex(), end - start,
            )
        return Node(int_to_digest(keys[start]))

    mid = lo + (1 << height) - 1
    split = bisect_right(keys, mid, start, end)
    left = _build(keys, start, split, lo, height - 1) if split > start else None
    right = _build(keys, split, end, mid + 1, height - 1) if end > split else None
    digest = hash_pair(child_digest(left, height - 1), child_digest(right, height - 1))
    return Node(digest, left, right)
