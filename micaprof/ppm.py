"""Branch predictability: PPM-style GAg, PAg, GAs and PAs predictors plus
per-branch transition and taken rates."""

from __future__ import annotations

from array import array
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Optional

PREDICTORS = ("GAg", "PAg", "GAs", "PAs")

_COUNTER_LIMIT = 127

# tables[j][order] holds one saturating counter per history pattern of that order;
# zero means "not set".
_Tables = list[list[array]]


def _new_tables(lengths: tuple[int, ...], fill: int) -> _Tables:
    return [[array("b", [fill]) * (1 << order) for order in range(length + 1)] for length in lengths]


def _fold(part: int, total: int) -> int:
    """Count of the minority outcome: ``part`` or ``total - part``, whichever is
    not above half of ``total``."""
    return total - part if part > total // 2 else part


@dataclass
class _Branch:
    local_history: int = 0
    last_taken: Optional[bool] = None
    count: int = 0
    taken_count: int = 0
    transitions: int = 0
    tables: Optional[dict[str, _Tables]] = field(default=None, repr=False)


class BranchProfiler:
    """Simulates prediction-by-partial-matching branch predictors.

    Four predictor kinds are kept for each history length: global history with a
    global table (GAg), per-branch history with a global table (PAg), global
    history with per-branch tables (GAs) and per-branch history with per-branch
    tables (PAs). Each predicts from the longest matching history pattern whose
    counter is set, and only that order and longer ones are trained.
    """

    def __init__(self, history_lengths: Iterable[int]) -> None:
        lengths = tuple(history_lengths)
        if not lengths:
            raise ValueError("at least one history length is required")
        for length in lengths:
            if length < 0:
                raise ValueError(f"history lengths must be non-negative, got {length}")
        self.history_lengths = lengths
        self._history_mask = (1 << max(lengths)) - 1
        self._global_history = 0
        self._shared = {"GAg": _new_tables(lengths, 0), "PAg": _new_tables(lengths, 0)}
        count = len(lengths)
        self._order = {name: [0] * count for name in PREDICTORS}
        self._prediction = {name: [False] * count for name in PREDICTORS}
        self.incorrect = {name: [0] * count for name in PREDICTORS}
        self._ids: dict[int, int] = {}
        self._branches: dict[int, _Branch] = {}

    def register_branch(self, address: int) -> int:
        """Return the id of the conditional branch at ``address``, assigning a new
        one (starting at 1) the first time the address is seen."""
        branch_id = self._ids.get(address)
        if branch_id is None:
            branch_id = len(self._ids) + 1
            self._ids[address] = branch_id
            self._branches[branch_id] = _Branch()
        return branch_id

    def branch(self, branch_id: int, taken: bool) -> None:
        """Record one execution of branch ``branch_id`` with its outcome."""
        state = self._branches.get(branch_id)
        if state is None:
            raise ValueError(f"no branch registered with id {branch_id}")
        taken = bool(taken)
        if state.tables is None:
            state.tables = {
                "GAs": _new_tables(self.history_lengths, -1),
                "PAs": _new_tables(self.history_lengths, -1),
            }

        sources = {
            "GAg": (self._shared["GAg"], self._global_history),
            "PAg": (self._shared["PAg"], state.local_history),
            "GAs": (state.tables["GAs"], self._global_history),
            "PAs": (state.tables["PAs"], state.local_history),
        }
        for name, (tables, history) in sources.items():
            for j, length in enumerate(self.history_lengths):
                self._predict(name, j, tables[j], length, history)
                if self._prediction[name][j] != taken:
                    self.incorrect[name][j] += 1
                self._train(tables[j], self._order[name][j], length, history, taken)

        if state.last_taken is not None and state.last_taken != taken:
            state.transitions += 1
        state.last_taken = taken
        state.count += 1
        if taken:
            state.taken_count += 1

        bit = int(taken)
        self._global_history = ((self._global_history << 1) | bit) & self._history_mask
        state.local_history = ((state.local_history << 1) | bit) & self._history_mask

    def _predict(self, name: str, j: int, tables: list[array], length: int, history: int) -> None:
        for order in range(length, -1, -1):
            value = tables[order][history & ((1 << order) - 1)]
            if value:
                self._order[name][j] = order
                self._prediction[name][j] = value > 0
                return
        # Nothing set: the previous prediction for this predictor stands.

    @staticmethod
    def _train(tables: list[array], start: int, length: int, history: int, taken: bool) -> None:
        step = 1 if taken else -1
        for order in range(start, length + 1):
            table = tables[order]
            index = history & ((1 << order) - 1)
            value = table[index]
            if (taken and value < _COUNTER_LIMIT) or (not taken and value > -_COUNTER_LIMIT):
                value += step
            if value == 0:
                value += step
            table[index] = value

    def report(self) -> tuple[int, ...]:
        """Return, for each history length, the GAg, PAg, GAs and PAs
        misprediction counts, then (branches, transitions, taken), where the
        last two count the minority outcome per static branch."""
        result: list[int] = []
        for j in range(len(self.history_lengths)):
            result.extend(self.incorrect[name][j] for name in PREDICTORS)
        executed = [state for state in self._branches.values() if state.count > 0]
        total = sum(state.count for state in executed)
        transitions = sum(_fold(state.transitions, state.count) for state in executed)
        taken = sum(_fold(state.taken_count, state.count) for state in executed)
        return (*result, total, transitions, taken)

    def reset(self) -> None:
        """Clear the counters; histories and predictor tables are kept."""
        count = len(self.history_lengths)
        self.incorrect = {name: [0] * count for name in PREDICTORS}
        for state in self._branches.values():
            state.count = 0
            state.taken_count = 0
            state.transitions = 0