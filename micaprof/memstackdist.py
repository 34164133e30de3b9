"""Memory reuse distance histogram, kept with an LRU stack of cache blocks."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .utils import block_range


@dataclass(eq=False)
class _Entry:
    block: int
    bucket: int = 0
    above: Optional["_Entry"] = None
    below: Optional["_Entry"] = None


class ReuseDistance:
    """Counts memory references per reuse-distance bucket.

    The reuse distance of an access is the number of distinct blocks referenced
    since the previous access to the same block. Bucket ``b`` holds distances
    in ``[2**b, 2**(b + 1))`` (bucket 0 also holds distance 0); the last bucket
    collects everything beyond. First-time accesses count as cold references.
    """

    def __init__(self, block_size_log: int, bucket_count: int) -> None:
        if block_size_log < 0:
            raise ValueError(f"block_size_log must be non-negative, got {block_size_log}")
        if bucket_count < 1:
            raise ValueError(f"bucket_count must be at least 1, got {bucket_count}")
        self.block_size_log = block_size_log
        self.bucket_count = bucket_count
        self.references = 0
        self.cold_references = 0
        self.buckets = [0] * bucket_count
        self._entries: dict[int, _Entry] = {}
        # The oldest entry of each bucket; the overflow bucket never has one.
        self._borderlines: list[Optional[_Entry]] = [None] * bucket_count
        # A placeholder entry at the bottom of the stack, never looked up.
        self._top = _Entry(block=0)
        self._stack_size = 1

    def access(self, address: int, size: int) -> None:
        """Record an access of ``size`` bytes at ``address``."""
        for block in block_range(address, size, self.block_size_log):
            entry = self._entries.get(block)
            if entry is None:
                self.cold_references += 1
                self._entries[block] = self._push_new(block)
            else:
                self.buckets[entry.bucket] += 1
                self._move_to_top(entry)
            self.references += 1

    def report(self) -> tuple[int, ...]:
        """Return (references, cold references, bucket counts...)."""
        return (self.references, self.cold_references, *self.buckets)

    def reset(self) -> None:
        """Clear the counters; the LRU stack is kept."""
        self.references = 0
        self.cold_references = 0
        self.buckets = [0] * self.bucket_count

    def _move_to_top(self, entry: _Entry) -> None:
        if entry.above is None:
            return
        if entry.below is not None:
            entry.below.above = entry.above
        entry.above.below = entry.below

        borderlines = self._borderlines
        for bucket in range(min(self.bucket_count, entry.bucket)):
            border = borderlines[bucket]
            border.bucket += 1
            borderlines[bucket] = border.above
        if borderlines[entry.bucket] is entry:
            borderlines[entry.bucket] = entry.above

        entry.below = self._top
        entry.above = None
        self._top.above = entry
        self._top = entry
        entry.bucket = 0

    def _push_new(self, block: int) -> _Entry:
        entry = _Entry(block=block, below=self._top)
        self._top.above = entry
        self._top = entry
        self._stack_size += 1

        borderlines = self._borderlines
        last = self.bucket_count - 1
        bucket = 0
        while bucket < last and borderlines[bucket] is not None:
            border = borderlines[bucket]
            border.bucket += 1
            borderlines[bucket] = border.above
            bucket += 1

        if bucket < last and self._stack_size == 2 << bucket:
            bottom = borderlines[bucket - 1] if bucket else self._top
            while bottom.below is not None:
                bottom = bottom.below
            borderlines[bucket] = bottom
        return entry