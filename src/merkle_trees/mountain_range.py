"""Merkle Mountain Range built from perfectly balanced Merkle trees."""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence

from merkle_trees.base import Digest, ItemLike, MerkleProof, debug_log
from merkle_trees.merkle_tree import MerkleTree
from merkle_trees.utils import peak_sizes_for_count


class MerkleMountainRange:
    """
    A forest of Merkle trees ("peaks") over an append-only item sequence.

    At rest no two peaks hold the same number of leaves. Inserting a batch
    appends a new peak and then merges equal-sized peaks until none remain,
    the same way carries ripple through a binary counter.

    Example:
        >>> mmr = MerkleMountainRange.from_items([b"a", b"b", b"c"])
        >>> mmr.peak_sizes()
        [2, 1]
        >>> proof = mmr.prove(b"c")
        >>> MerkleMountainRange.verify(proof, mmr.peaks(), b"c")
        True
    """
    __slots__ = ("_peaks",)

    def __init__(self, peaks: Optional[List[MerkleTree]] = None) -> None:
        self._peaks: List[MerkleTree] = peaks if peaks is not None else []

    @classmethod
    def from_items(cls, items: Iterable[ItemLike]) -> MerkleMountainRange:
        """
        Split ``items`` into one peak per set bit of their count.

        Peaks are produced largest first and consume the items in order.
        """
        items = list(items)
        peaks: List[MerkleTree] = []
        start = 0
        for size in peak_sizes_for_count(len(items)):
            peaks.append(MerkleTree.from_items(items[start:start + size]))
            start += size
        debug_log("Built mountain range over %d items with %d peaks", len(items), len(peaks))
        return cls(peaks)

    def is_empty(self) -> bool:
        return not self._peaks

    def size(self) -> int:
        """Total number of leaves across all peaks."""
        return sum(peak.size() for peak in self._peaks)

    __len__ = size

    def __contains__(self, item: ItemLike) -> bool:
        return any(item in peak for peak in self._peaks)

    def __str__(self):
        if self.is_empty():
            return "Empty MerkleMountainRange"
        return f"MerkleMountainRange(peak_sizes={self.peak_sizes()})"

    __repr__ = __str__

    @property
    def trees(self) -> List[MerkleTree]:
        """The peak trees, in peak order (read-only view)."""
        return list(self._peaks)

    def peaks(self) -> List[Digest]:
        """Snapshot of the current peak roots, as needed by a verifier."""
        return [peak.root() for peak in self._peaks]

    def peak_sizes(self) -> List[int]:
        return [peak.size() for peak in self._peaks]

    def insert(self, items: Iterable[ItemLike]) -> None:
        """
        Append a batch of items as a new peak, then merge equal-sized peaks.

        An empty batch leaves the range unchanged.
        """
        tree = MerkleTree.from_items(items)
        if tree.is_empty():
            return
        self._peaks.append(tree)
        while self._merge_equal_peaks():
            pass

    def _merge_equal_peaks(self) -> bool:
        """
        Merge the first pair of peaks with equal leaf counts.

        The merged peak takes the place of the earlier one, whose leaves come
        first in the merged tree.

        Returns:
            bool: True if a merge happened.
        """
        seen = {}
        for i, peak in enumerate(self._peaks):
            size = peak.size()
            j = seen.get(size)
            if j is None:
                seen[size] = i
                continue
            merged = MerkleTree.merge(self._peaks[j], peak)
            del self._peaks[i]
            self._peaks[j] = merged
            debug_log("Merged peaks %d and %d into a peak of %d leaves", j, i, merged.size())
            return True
        return False

    def prove(self, item: ItemLike) -> Optional[MerkleProof]:
        """
        Inclusion proof for ``item`` from the first peak that contains it.

        The proof does not record which peak produced it.
        """
        for peak in self._peaks:
            proof = peak.prove(item)
            if proof is not None:
                return proof
        return None

    @staticmethod
    def verify(proof: Optional[MerkleProof], peaks: Sequence[Digest], item: ItemLike) -> bool:
        """Accept if ``proof`` verifies ``item`` against any one of ``peaks``."""
        return any(MerkleTree.verify(proof, peak, item) for peak in peaks)
