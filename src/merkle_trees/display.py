"""Pretty-printing and display utilities for Merkle structures."""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional, Union

from merkle_trees.base import Node
from merkle_trees.utils import short_digest

if TYPE_CHECKING:
    from merkle_trees.merkle_tree import MerkleTree
    from merkle_trees.mountain_range import MerkleMountainRange
    from merkle_trees.sparse_merkle_tree import SparseMerkleTree

INDENT = "    "


def print_pretty(
    obj: Union[MerkleTree, MerkleMountainRange, SparseMerkleTree, Node, None],
    full_digests: bool = False,
) -> str:
    """
    Render a tree so that:
      • Nodes appear in order: left subtree, node, right subtree.
      • Each level of depth adds one indent, so the root sits at column 0.
      • Digests are elided to ``abc...xyz`` unless ``full_digests`` is set.
    Mountain ranges render one block per peak. Virtual subtrees of a sparse
    tree are not printed.
    """
    from merkle_trees.merkle_tree import MerkleTree
    from merkle_trees.mountain_range import MerkleMountainRange
    from merkle_trees.sparse_merkle_tree import SparseMerkleTree

    if obj is None:
        return "None"

    if isinstance(obj, MerkleMountainRange):
        if obj.is_empty():
            return f"{type(obj).__name__}: Empty"
        blocks = []
        for i, peak in enumerate(obj.trees):
            blocks.append(f"peak {i} ({peak.size()} leaves):\n{print_pretty(peak, full_digests)}")
        return "\n".join(blocks)

    if isinstance(obj, (MerkleTree, SparseMerkleTree)):
        if obj.is_empty():
            return f"{type(obj).__name__}: Empty"
        node = obj.node
    elif isinstance(obj, Node):
        node = obj
    else:
        raise TypeError(f"print_pretty() expects a Merkle structure or Node, got {type(obj).__name__}")

    render = (lambda d: d.hex()) if full_digests else short_digest
    lines: List[str] = []

    def collect(cur: Optional[Node], depth: int) -> None:
        if cur is None:
            return
        collect(cur.left, depth + 1)
        lines.append(f"{INDENT * depth}{render(cur.digest)}")
        collect(cur.right, depth + 1)

    collect(node, 0)
    return "\n".join(lines)
