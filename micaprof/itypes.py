"""Instruction mix: counts of executed instructions per instruction group."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from .itypes_spec import Group, IdentifierType

_FLOAT_CATEGORIES = frozenset({"X87_ALU", "LOGICAL_FP"})
_NOP_CATEGORIES = frozenset({"NOP", "WIDENOP"})
_SCALAR_CATEGORIES = frozenset(
    {"LOGICAL", "BMI1", "BMI2", "SHIFT", "BINARY", "BITBYTE", "DECIMAL"}
)


@dataclass(frozen=True)
class Instruction:
    """The static properties of an instruction that the instruction mix looks at."""

    category: str
    opcode: str = ""
    extension: str = ""
    memory_read: bool = False
    memory_write: bool = False
    control_flow: bool = False
    mov: bool = False
    register_operands_only: bool = False

    @property
    def memory_access(self) -> bool:
        """True if the instruction reads or writes memory."""
        return self.memory_read or self.memory_write

    @property
    def reg_transfer(self) -> bool:
        """True for a move whose operands are all registers."""
        return self.mov and self.register_operands_only

    @property
    def vector(self) -> bool:
        """True if the instruction belongs to an MMX, SSE or AVX extension."""
        ext = self.extension
        return ext == "MMX" or "SSE" in ext or "AVX" in ext


class InstructionMix:
    """Counts executed instructions per group of a group specification.

    An instruction is counted once in every group that one of its identifiers
    matches. A register-transfer identifier counts its group but does not mark
    the instruction as categorized. Uncategorized instructions go to an extra
    'other' group, whose categories are remembered.
    """

    def __init__(self, groups: Sequence[Group]) -> None:
        self.groups = tuple(tuple(group) for group in groups)
        self.in_region = True
        self.total = 0
        self.counts = [0] * (len(self.groups) + 1)
        self._other_categories: dict[str, None] = {}

    @property
    def other_index(self) -> int:
        """Index of the group collecting uncategorized instructions."""
        return len(self.groups)

    @property
    def other(self) -> int:
        """Number of uncategorized instructions counted."""
        return self.counts[self.other_index]

    @property
    def other_categories(self) -> list[str]:
        """Categories seen among uncategorized instructions, in order of first sight."""
        return list(self._other_categories)

    def classify(self, instruction: Instruction) -> tuple[int, ...]:
        """Group indices an execution of ``instruction`` is counted in."""
        hits: list[int] = []
        categorized = False
        for gid, members in enumerate(self.groups):
            for ident in members:
                if ident.type is IdentifierType.CATEGORY:
                    if ident.name == instruction.category:
                        hits.append(gid)
                        categorized = True
                        break
                elif ident.type is IdentifierType.OPCODE:
                    if ident.name == instruction.opcode:
                        hits.append(gid)
                        categorized = True
                        break
                elif ident.name == "mem_read" and instruction.memory_read:
                    hits.append(gid)
                    categorized = True
                    break
                elif ident.name == "mem_write" and instruction.memory_write:
                    hits.append(gid)
                    categorized = True
                    break
                elif ident.name == "reg_transfer" and instruction.mov:
                    if instruction.register_operands_only:
                        hits.append(gid)
        if not categorized:
            hits.append(self.other_index)
        return tuple(hits)

    def count(self, instruction: Instruction) -> None:
        """Record one execution of ``instruction``.

        Uncategorized categories are remembered even outside the region of
        interest; counters only change inside it.
        """
        hits = self.classify(instruction)
        if self.other_index in hits:
            self._other_categories.setdefault(instruction.category, None)
        if not self.in_region:
            return
        self.total += 1
        for gid in hits:
            self.counts[gid] += 1

    def report(self) -> tuple[int, ...]:
        """Return (instructions in region, count per specified group)."""
        return (self.total, *self.counts[: self.other_index])

    def reset(self) -> None:
        """Clear the group counts; the total is kept."""
        self.counts = [0] * (len(self.groups) + 1)


class HierarchicalMix:
    """Counts each executed instruction in exactly one of nine classes, taken
    in order of precedence."""

    GROUPS = (
        "NOP",
        "VEC-MEM",
        "MEMORY",
        "FLOAT",
        "VECTOR",
        "CTRL",
        "REGISTER",
        "SCALAR",
        "OTHER",
    )

    def __init__(self) -> None:
        self.in_region = True
        self.total = 0
        self.counts = [0] * len(self.GROUPS)
        self._other_pairs: set[str] = set()

    @property
    def other_pairs(self) -> list[str]:
        """Sorted "extension-category" pairs of instructions in the OTHER class."""
        return sorted(self._other_pairs)

    def classify(self, instruction: Instruction) -> int:
        """Index into ``GROUPS`` of the class of ``instruction``."""
        if instruction.category in _NOP_CATEGORIES:
            return 0
        if instruction.memory_access and instruction.vector:
            return 1
        if instruction.memory_access:
            return 2
        if instruction.category in _FLOAT_CATEGORIES:
            return 3
        if instruction.vector:
            return 4
        if instruction.control_flow:
            return 5
        if instruction.reg_transfer:
            return 6
        if instruction.category in _SCALAR_CATEGORIES:
            return 7
        return 8

    def count(self, instruction: Instruction) -> None:
        """Record one execution of ``instruction``."""
        gid = self.classify(instruction)
        if gid == len(self.GROUPS) - 1:
            self._other_pairs.add(f"{instruction.extension}-{instruction.category}")
        if not self.in_region:
            return
        self.total += 1
        self.counts[gid] += 1

    def report(self) -> tuple[int, ...]:
        """Return (instructions in region, count per class)."""
        return (self.total, *self.counts)

    def reset(self) -> None:
        """Clear the class counts; the total is kept."""
        self.counts = [0] * len(self.GROUPS)