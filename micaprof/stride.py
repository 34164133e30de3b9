"""Memory access strides: local (per static instruction) and global distributions."""

from __future__ import annotations

from .utils import cumulative_at

_STRIDE_POINTS = (0, 8, 64, 512, 4096, 32768, 262144)


class _StrideStream:
    """Stride statistics for one kind of access (reads or writes)."""

    def __init__(self, max_distance: int) -> None:
        self.max_distance = max_distance
        self.analyzed = 0
        self.local = [0] * max_distance
        self.global_ = [0] * max_distance
        self.addresses: list[int] = []
        self.last_by_index: dict[int, int] = {}
        self.last_global = 0

    def find(self, address: int, nth: int) -> int:
        """Index of the ``nth`` registration of ``address``, or 0 if there is none."""
        seen = 0
        for index, registered in enumerate(self.addresses, start=1):
            if registered == address:
                seen += 1
                if seen == nth:
                    return index
        return 0

    def register(self, address: int) -> int:
        self.addresses.append(address)
        return len(self.addresses)

    def record(self, index: int, address: int, size: int) -> None:
        if not 1 <= index <= len(self.addresses):
            raise IndexError(f"no instruction registered with index {index}")
        if address < 0:
            raise ValueError(f"address must be non-negative, got {address}")
        if size < 1:
            raise ValueError(f"size must be at least 1, got {size}")
        self.analyzed += 1
        cap = self.max_distance - 1
        end = address + size - 1

        previous = self.last_by_index.get(index, 0)
        self.local[min(abs(address - previous), cap)] += 1
        self.last_by_index[index] = end

        self.global_[min(abs(address - self.last_global), cap)] += 1
        self.last_global = end

    def summary(self) -> tuple[int, ...]:
        return (
            *cumulative_at(self.local, _STRIDE_POINTS),
            *cumulative_at(self.global_, _STRIDE_POINTS),
        )

    def reset(self) -> None:
        self.analyzed = 0
        self.local = [0] * self.max_distance
        self.global_ = [0] * self.max_distance


class StrideProfiler:
    """Collects distributions of the distance between consecutive memory accesses.

    The local stride of an access is measured against the last byte touched by
    the previous access of the same static instruction; the global stride
    against the last byte touched by any access of the same kind. Strides of
    ``max_distance`` or more are counted in the last slot.
    """

    def __init__(self, max_distance: int) -> None:
        if max_distance < 1:
            raise ValueError(f"max_distance must be at least 1, got {max_distance}")
        self.max_distance = max_distance
        self._reads = _StrideStream(max_distance)
        self._writes = _StrideStream(max_distance)

    def index_read(self, address: int, nth: int = 1) -> int:
        """Index for the ``nth`` read operand of the instruction at ``address``.

        Indices start at 1; an unknown operand is registered under a new index.
        """
        if nth < 1:
            raise ValueError(f"nth must be at least 1, got {nth}")
        return self._reads.find(address, nth) or self._reads.register(address)

    def index_write(self, address: int) -> int:
        """Index for the write operand of the instruction at ``address``."""
        return self._writes.find(address, 1) or self._writes.register(address)

    def read(self, index: int, address: int, size: int) -> None:
        """Record a read of ``size`` bytes at ``address`` by operand ``index``."""
        self._reads.record(index, address, size)

    def write(self, index: int, address: int, size: int) -> None:
        """Record a write of ``size`` bytes at ``address`` by operand ``index``."""
        self._writes.record(index, address, size)

    def report(self) -> tuple[int, ...]:
        """Return (reads, local read cumulatives, global read cumulatives,
        writes, local write cumulatives, global write cumulatives).

        Cumulatives are taken at strides 0, 8, 64, 512, 4096, 32768 and 262144,
        skipping those at or beyond ``max_distance``.
        """
        return (
            self._reads.analyzed,
            *self._reads.summary(),
            self._writes.analyzed,
            *self._writes.summary(),
        )

    def reset(self) -> None:
        """Clear the distributions; registered indices and last addresses are kept."""
        self._reads.reset()
        self._writes.reset()