"""Memory footprint: distinct cache blocks and pages touched by data and instructions."""

from __future__ import annotations

from dataclasses import astuple, dataclass

from .utils import ChunkTable, block_range


@dataclass(frozen=True)
class FootprintSizes:
    """Working set sizes, in blocks and pages, for the data and instruction streams."""

    data_blocks: int
    data_pages: int
    instruction_blocks: int
    instruction_pages: int


class MemFootprint:
    """Tracks which cache blocks and pages are referenced by memory operations
    and by instruction fetches."""

    def __init__(
        self,
        block_size_log: int = 6,
        page_size_log: int = 12,
        chunk_bits: int = 12,
    ) -> None:
        if block_size_log < 0:
            raise ValueError(f"block_size_log must be non-negative, got {block_size_log}")
        if page_size_log < 0:
            raise ValueError(f"page_size_log must be non-negative, got {page_size_log}")
        self.block_size_log = block_size_log
        self.page_size_log = page_size_log
        self._data_blocks = ChunkTable(chunk_bits)
        self._data_pages = ChunkTable(chunk_bits)
        self._instr_blocks = ChunkTable(chunk_bits)
        self._instr_pages = ChunkTable(chunk_bits)

    @staticmethod
    def _touch(table: ChunkTable, address: int, size: int, shift: int) -> None:
        for block in block_range(address, size, shift):
            table.mark(block)

    def mem_op(self, address: int, size: int) -> None:
        """Record a data access of ``size`` bytes at ``address``."""
        if size <= 0:
            return
        self._touch(self._data_blocks, address, size, self.block_size_log)
        self._touch(self._data_pages, address, size, self.page_size_log)

    def instr_mem(self, address: int, size: int) -> None:
        """Record an instruction of ``size`` bytes fetched from ``address``."""
        if size <= 0:
            return
        self._touch(self._instr_blocks, address, size, self.block_size_log)
        self._touch(self._instr_pages, address, size, self.page_size_log)

    def working_set_sizes(self) -> FootprintSizes:
        """Current working set sizes."""
        return FootprintSizes(
            data_blocks=self._data_blocks.count(),
            data_pages=self._data_pages.count(),
            instruction_blocks=self._instr_blocks.count(),
            instruction_pages=self._instr_pages.count(),
        )

    def report(self) -> tuple[int, int, int, int]:
        """Return (data blocks, data pages, instruction blocks, instruction pages)."""
        return astuple(self.working_set_sizes())

    def reset(self) -> None:
        """Forget every referenced block and page."""
        for table in (self._data_blocks, self._data_pages, self._instr_blocks, self._instr_pages):
            table.clear()