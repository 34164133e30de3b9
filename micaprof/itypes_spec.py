"""Instruction group specifications for the instruction mix profiler."""

from __future__ import annotations

import os
import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import Enum

Group = tuple["Identifier", ...]

_LINE = re.compile(r"^\s*(-?\d+)\s*,\s*(-?\d+)\s*,\s*([^,]*?)\s*,\s*(.*?)\s*$")


class SpecError(ValueError):
    """Raised when an instruction group specification cannot be used."""


class IdentifierType(Enum):
    """What an identifier in a group matches against."""

    CATEGORY = 1
    OPCODE = 2
    SPECIAL = 3

    @property
    def tag(self) -> str:
        """Short label used when listing groups."""
        return {
            IdentifierType.CATEGORY: "[CAT]",
            IdentifierType.OPCODE: "[OPCODE]",
            IdentifierType.SPECIAL: "[SPECIAL]",
        }[self]

    @classmethod
    def from_name(cls, name: str) -> IdentifierType:
        """Look up a type by its specification name (CATEGORY, OPCODE, SPECIAL)."""
        try:
            return cls[name]
        except KeyError:
            raise SpecError(
                f'unknown subgroup type "{name}"; known subgroup types: '
                "{CATEGORY, OPCODE, SPECIAL}"
            ) from None


@dataclass(frozen=True)
class Identifier:
    """One member of an instruction group: a category, an opcode or a special test."""

    type: IdentifierType
    name: str


def _group(kind: IdentifierType, *names: str) -> Group:
    return tuple(Identifier(kind, name) for name in names)


def _mixed(*pairs: tuple[IdentifierType, str]) -> Group:
    return tuple(Identifier(kind, name) for kind, name in pairs)


def default_groups() -> list[Group]:
    """The built-in twelve instruction groups used when no specification is given."""
    cat = IdentifierType.CATEGORY
    op = IdentifierType.OPCODE
    special = IdentifierType.SPECIAL
    return [
        _group(special, "mem_read"),
        _group(special, "mem_write"),
        _mixed(
            (cat, "COND_BR"),
            (cat, "UNCOND_BR"),
            (op, "LEAVE"),
            (op, "RET_NEAR"),
            (op, "CALL_NEAR"),
        ),
        _group(cat, "LOGICAL", "DATAXFER", "BINARY", "FLAGOP", "BITBYTE"),
        _group(cat, "X87_ALU", "FCMOV"),
        _group(cat, "POP", "PUSH"),
        _group(cat, "SHIFT"),
        _group(cat, "STRINGOP"),
        _group(cat, "MMX", "SSE"),
        _group(
            cat,
            "INTERRUPT",
            "ROTATE",
            "SEMAPHORE",
            "CMOV",
            "SYSTEM",
            "MISC",
            "PREFETCH",
            "SYSCALL",
        ),
        _group(cat, "WIDENOP", "NOP"),
        _group(special, "reg_transfer"),
    ]


def parse_spec(lines: Iterable[str]) -> list[Group]:
    """Parse specification lines of the form ``group, subgroup, TYPE, name``.

    Group ids start at 0 and appear in order; within a group the subgroup ids
    must be exactly 0..n-1. Blank lines are ignored.
    """
    groups: list[dict[int, Identifier]] = []
    for number, raw in enumerate(lines, start=1):
        if not raw.strip():
            continue
        match = _LINE.match(raw)
        if match is None or not match.group(3) or not match.group(4):
            raise SpecError(f"line {number}: malformed specification line {raw.rstrip()!r}")
        gid, sgid = int(match.group(1)), int(match.group(2))
        kind = IdentifierType.from_name(match.group(3))
        name = match.group(4)
        if gid == len(groups):
            groups.append({})
        elif gid != len(groups) - 1:
            raise SpecError(
                f"line {number}: group {gid} out of order, expected "
                f"{max(len(groups) - 1, 0)} or {len(groups)}"
            )
        members = groups[gid]
        if sgid < 0:
            raise SpecError(f"line {number}: negative subgroup id {sgid}")
        if sgid in members:
            raise SpecError(f"line {number}: duplicate subgroup {sgid} in group {gid}")
        members[sgid] = Identifier(kind, name)

    result: list[Group] = []
    for gid, members in enumerate(groups):
        if sorted(members) != list(range(len(members))):
            raise SpecError(f"group {gid}: subgroup ids are not 0..{len(members) - 1}")
        result.append(tuple(members[sgid] for sgid in range(len(members))))
    return result


def load_spec(path: str | os.PathLike[str]) -> list[Group]:
    """Read and parse the instruction group specification file at ``path``."""
    try:
        with open(path, encoding="utf-8") as handle:
            return parse_spec(handle)
    except OSError as exc:
        raise SpecError(
            f'failed to open file "{os.fspath(path)}" containing instruction groups '
            "specification"
        ) from exc


def describe_groups(groups: Sequence[Group]) -> str:
    """Human-readable listing of the groups, one line per group."""
    lines = []
    for gid, members in enumerate(groups):
        entries = "".join(f"{ident.name} {ident.type.tag}; " for ident in members)
        lines.append(f"   group {gid} (#: {len(members)}): {entries}")
    return "".join(line + "\n" for line in lines)