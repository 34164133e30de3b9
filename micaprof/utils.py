"""Shared helpers: block ranges, chunked block tables and cumulative distributions."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from itertools import accumulate


def block_range(address: int, size: int, shift: int) -> range:
    """Return the block indices touched by ``size`` bytes starting at ``address``.

    A block is ``1 << shift`` bytes wide. The last block is the one holding
    byte ``address + size - 1``, so a zero size yields no blocks when the
    address is block-aligned.
    """
    if address < 0:
        raise ValueError(f"address must be non-negative, got {address}")
    if size < 0:
        raise ValueError(f"size must be non-negative, got {size}")
    if shift < 0:
        raise ValueError(f"shift must be non-negative, got {shift}")
    first = address >> shift
    last = (address + size - 1) >> shift
    return range(first, last + 1)


def cumulative_at(distribution: Sequence[int], points: Iterable[int]) -> list[int]:
    """Return the running total of ``distribution`` at each index in ``points``.

    Points past the end of the distribution are skipped.
    """
    totals = list(accumulate(distribution))
    result = []
    for point in points:
        if point < 0:
            raise ValueError(f"points must be non-negative, got {point}")
        if point < len(totals):
            result.append(totals[point])
    return result


class ChunkTable:
    """Set of referenced blocks, grouped into chunks of ``1 << chunk_bits`` blocks."""

    def __init__(self, chunk_bits: int) -> None:
        if chunk_bits < 0:
            raise ValueError(f"chunk_bits must be non-negative, got {chunk_bits}")
        self.chunk_bits = chunk_bits
        self._mask = (1 << chunk_bits) - 1
        self._chunks: dict[int, set[int]] = {}

    def mark(self, block: int) -> bool:
        """Mark ``block`` as referenced; return True if it was not marked before."""
        if block < 0:
            raise ValueError(f"block must be non-negative, got {block}")
        chunk = self._chunks.setdefault(block >> self.chunk_bits, set())
        index = block & self._mask
        if index in chunk:
            return False
        chunk.add(index)
        return True

    def count(self) -> int:
        """Number of distinct blocks marked so far."""
        return sum(len(chunk) for chunk in self._chunks.values())

    def clear(self) -> None:
        """Forget every marked block."""
        self._chunks.clear()