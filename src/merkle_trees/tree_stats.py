"""Statistics and structural checks for Merkle tree nodes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from merkle_trees.base import Node, hash_pair
from merkle_trees.logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class Stats:
    """Aggregated statistics for a (sparse) Merkle tree."""

    leaf_count: int
    node_count: int
    height: int
    virtual_count: int
    children_paired: bool
    digests_consistent: bool
    is_balanced: bool
    defaults_consistent: bool


def tree_stats_(node: Optional[Node], height: Optional[int] = None) -> Stats:
    """
    Returns aggregated statistics for the tree rooted at ``node`` in **O(n)** time.

    Pass ``height`` for a sparse Merkle tree root: empty child pointers then
    count as virtual subtrees of the matching default digest, and leaves are
    expected exactly at height 0. Without ``height`` the node is treated as
    a balanced Merkle tree root.
    """
    if node is None:
        return Stats(
            leaf_count=0,
            node_count=0,
            height=0,
            virtual_count=0,
            children_paired=True,
            digests_consistent=True,
            is_balanced=True,
            defaults_consistent=True,
        )

    if height is not None:
        from merkle_trees.sparse_merkle_tree import get_default_digests

        defaults = get_default_digests()
        if node.is_leaf() and height > 0:
            # Empty sparse tree: the root itself is virtual
            return Stats(
                leaf_count=0,
                node_count=1,
                height=0,
                virtual_count=1,
                children_paired=True,
                digests_consistent=True,
                is_balanced=True,
                defaults_consistent=node.digest == defaults[height],
            )
        return _sparse_stats(node, height, defaults)

    return _merkle_stats(node)


def _merkle_stats(node: Node) -> Stats:
    if node.is_leaf():
        return Stats(
            leaf_count=1,
            node_count=1,
            height=0,
            virtual_count=0,
            children_paired=True,
            digests_consistent=True,
            is_balanced=True,
            defaults_consistent=True,
        )

    if node.left is None or node.right is None:
        logger.debug("Node %r has a single child", node)
        only = _merkle_stats(node.left or node.right)
        only.node_count += 1
        only.height += 1
        only.children_paired = False
        return only

    left = _merkle_stats(node.left)
    right = _merkle_stats(node.right)
    leaf_count = left.leaf_count + right.leaf_count
    return Stats(
        leaf_count=leaf_count,
        node_count=left.node_count + right.node_count + 1,
        height=max(left.height, right.height) + 1,
        virtual_count=0,
        children_paired=left.children_paired and right.children_paired,
        digests_consistent=(
            left.digests_consistent
            and right.digests_consistent
            and node.digest == hash_pair(node.left.digest, node.right.digest)
        ),
        is_balanced=(
            left.is_balanced
            and right.is_balanced
            and left.leaf_count == leaf_count // 2
        ),
        defaults_consistent=True,
    )


def _sparse_stats(node: Node, height: int, defaults) -> Stats:
    if height == 0:
        return Stats(
            leaf_count=1,
            node_count=1,
            height=0,
            virtual_count=0,
            children_paired=True,
            digests_consistent=True,
            is_balanced=True,
            defaults_consistent=node.is_leaf(),
        )

    if node.is_leaf():
        # Materialized but childless above height 0
        return Stats(
            leaf_count=0,
            node_count=1,
            height=0,
            virtual_count=0,
            children_paired=True,
            digests_consistent=True,
            is_balanced=True,
            defaults_consistent=False,
        )

    stats = Stats(
        leaf_count=0,
        node_count=1,
        height=0,
        virtual_count=0,
        children_paired=True,
        digests_consistent=True,
        is_balanced=True,
        defaults_consistent=True,
    )
    child_digests = []
    for child in (node.left, node.right):
        if child is None:
            stats.virtual_count += 1
            child_digests.append(defaults[height - 1])
            continue
        child_digests.append(child.digest)
        sub = _sparse_stats(child, height - 1, defaults)
        stats.leaf_count += sub.leaf_count
        stats.node_count += sub.node_count
        stats.virtual_count += sub.virtual_count
        stats.height = max(stats.height, sub.height + 1)
        stats.digests_consistent = stats.digests_consistent and sub.digests_consistent
        stats.defaults_consistent = stats.defaults_consistent and sub.defaults_consistent

    if node.digest != hash_pair(child_digests[0], child_digests[1]):
        stats.digests_consistent = False
    return stats
