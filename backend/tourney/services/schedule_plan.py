"""In-memory schedule plan produced by the generators and persisted by the orchestrator."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List


@dataclass(frozen=True)
class PlannedRound:
    number: int  # 1-based, monotonic across cycles
    name: str


@dataclass(frozen=True)
class PlannedMatch:
    round_index: int  # 0-based index into SchedulePlan.rounds
    participant1_id: int
    participant2_id: int


@dataclass
class SchedulePlan:
    rounds: List[PlannedRound] = field(default_factory=list)
    matches: List[PlannedMatch] = field(default_factory=list)

    def matches_in_round(self, round_index: int) -> List[PlannedMatch]:
        return [m for m in self.matches if m.round_index == round_index]

    def pairings(self) -> List[List[tuple]]:
        """Per-round (side1, side2) tuples, mostly for inspection and tests."""
        return [
            [(m.participant1_id, m.participant2_id) for m in self.matches_in_round(i)]
            for i in range(len(self.rounds))
        ]
