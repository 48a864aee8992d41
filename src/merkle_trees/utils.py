"""
Utility functions for digest arithmetic and mountain range sizing.
"""
from typing import List

from merkle_trees.base import DIGEST_SIZE


def get_bit(digest: bytes, index: int) -> int:
    """Return bit ``index`` of ``digest``, counting from the most significant bit."""
    return (digest[index // 8] >> (7 - index % 8)) & 1


def digest_to_int(digest: bytes) -> int:
    return int.from_bytes(digest, "big")


def int_to_digest(value: int, size: int = DIGEST_SIZE) -> bytes:
    return value.to_bytes(size, "big")


def peak_sizes_for_count(n: int) -> List[int]:
    """
    Decompose an item count into mountain range peak sizes.

    Parameters:
        n (int): Number of items, must be >= 0.

    Returns:
        List[int]: One power of two per set bit of ``n``, largest first.

    Raises:
        ValueError: If n is negative.
    """
    if n < 0:
        raise ValueError("item count must be >= 0")
    return [1 << i for i in range(n.bit_length() - 1, -1, -1) if n & (1 << i)]


def short_digest(digest: bytes) -> str:
    """Create a short hex representation of a digest for display purposes."""
    s = digest.hex()
    return s if len(s) <= 10 else f"{s[:3]}...{s[-3:]}"
