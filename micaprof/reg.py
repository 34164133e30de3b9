"""Register traffic: operand counts, degree of use and dependency distances."""

from __future__ import annotations

from collections.abc import Hashable
from dataclasses import dataclass

from .utils import cumulative_at

_AGE_POINTS = (1, 2, 4, 8, 16, 32, 64)


@dataclass(frozen=True)
class InstructionRegisters:
    """Registers an instruction reads and writes, and its register operand count."""

    reads: tuple[Hashable, ...] = ()
    writes: tuple[Hashable, ...] = ()
    operand_count: int = 0


class RegisterProfiler:
    """Collects register operand, use and age distributions."""

    def __init__(self, max_operands: int, max_reg_use: int, max_comm_dist: int) -> None:
        for name, value in (
            ("max_operands", max_operands),
            ("max_reg_use", max_reg_use),
            ("max_comm_dist", max_comm_dist),
        ):
            if value < 1:
                raise ValueError(f"{name} must be at least 1, got {value}")
        self.max_operands = max_operands
        self.max_reg_use = max_reg_use
        self.max_comm_dist = max_comm_dist
        self.operand_counts = [0] * max_operands
        self.use_distribution = [0] * max_reg_use
        self.age_distribution = [0] * max_comm_dist
        self._produced_at: dict[Hashable, int] = {}
        self._use_count: dict[Hashable, int] = {}
        self._referenced: set[Hashable] = set()

    def read_register(self, reg: Hashable, instruction_count: int) -> None:
        """Record a read of ``reg`` at the given dynamic instruction count."""
        age = instruction_count - self._produced_at.get(reg, 0)
        if age < 0:
            raise ValueError(
                f"instruction count {instruction_count} precedes the last write of {reg!r}"
            )
        self.age_distribution[min(age, self.max_comm_dist - 1)] += 1
        self._use_count[reg] = self._use_count.get(reg, 0) + 1
        self._referenced.add(reg)

    def write_register(self, reg: Hashable, instruction_count: int) -> None:
        """Record a write of ``reg``, closing the life of its previous value."""
        if reg in self._referenced:
            uses = min(self._use_count.get(reg, 0), self.max_reg_use - 1)
            self.use_distribution[uses] += 1
        self._produced_at[reg] = instruction_count
        self._use_count[reg] = 0
        self._referenced.add(reg)

    def execute(self, instruction: InstructionRegisters, instruction_count: int) -> None:
        """Record one executed instruction: reads first, then writes."""
        if not 0 <= instruction.operand_count < self.max_operands:
            raise ValueError(
                f"operand count {instruction.operand_count} outside 0..{self.max_operands - 1}"
            )
        for reg in instruction.reads:
            self.read_register(reg, instruction_count)
        for reg in instruction.writes:
            self.write_register(reg, instruction_count)
        self.operand_counts[instruction.operand_count] += 1

    def report(self) -> tuple[int, ...]:
        """Return (total operands, values used, total uses, reads,
        cumulative reads at age 1, 2, 4, 8, 16, 32, 64)."""
        total_operands = sum(i * n for i, n in enumerate(self.operand_counts))
        values = sum(self.use_distribution)
        uses = sum(i * n for i, n in enumerate(self.use_distribution))
        reads = sum(self.age_distribution)
        return (
            total_operands,
            values,
            uses,
            reads,
            *cumulative_at(self.age_distribution, _AGE_POINTS),
        )

    def reset(self) -> None:
        """Clear the distributions; per-register state is kept."""
        self.operand_counts = [0] * self.max_operands
        self.use_distribution = [0] * self.max_reg_use
        self.age_distribution = [0] * self.max_comm_dist