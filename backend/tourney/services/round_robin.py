"""
Round-robin schedule generation (circle method).

Slot 0 stays fixed; after every round the last slot moves to position 1 and
the rest shift right. For an odd team count a bye slot (None) is appended, so
every team sits out exactly once per cycle and a cycle has n rounds instead
of n - 1. Pairings against the bye are dropped but the round still counts.

Pairing order matters: the lower slot is side 1, so for [A, B, C, D]:
- Round 1: A-D, B-C
- Round 2: A-C, D-B
- Round 3: A-B, C-D
"""

from typing import List, Optional, Sequence

from tourney.errors import InvalidArgument, PreconditionFailed
from tourney.services.schedule_plan import PlannedMatch, PlannedRound, SchedulePlan


def rounds_per_cycle(team_count: int) -> int:
    """n - 1 for even n, n for odd n (bye-padded)."""
    padded = team_count + 1 if team_count % 2 == 1 else team_count
    return padded - 1


def round_name(item_name: str, cycle: int, round_in_cycle: int, cycles: int) -> str:
    prefix = f"{item_name} - " if item_name else ""
    if cycles > 1:
        return f"{prefix}Cycle {cycle}, Round {round_in_cycle}"
    return f"{prefix}Round {round_in_cycle}"


def generate_round_robin(team_ids: Sequence[int], cycles: int = 1, item_name: str = "") -> SchedulePlan:
    """
    Build the full round/match plan for a team list.

    Args:
        team_ids: Teams in seed order; the order fully determines the schedule
        cycles: How many times every pairing is played (>= 1)
        item_name: Stage item name used as round-name prefix

    Returns:
        SchedulePlan with cycles * rounds_per_cycle(n) rounds

    Raises:
        PreconditionFailed: fewer than 2 teams
        InvalidArgument: cycles < 1
    """
    if len(team_ids) < 2:
        raise PreconditionFailed("Need at least 2 teams to generate matches", code="INSUFFICIENT_TEAMS")
    if cycles < 1:
        raise InvalidArgument(f"cycles must be >= 1, got {cycles}")

    slots: List[Optional[int]] = list(team_ids)
    if len(slots) % 2 == 1:
        slots.append(None)  # bye

    total = len(slots)
    matches_per_round = total // 2
    per_cycle = rounds_per_cycle(len(team_ids))

    plan = SchedulePlan()
    for cycle in range(cycles):
        for round_in_cycle in range(per_cycle):
            number = cycle * per_cycle + round_in_cycle + 1
            plan.rounds.append(PlannedRound(number=number, name=round_name(item_name, cycle + 1, round_in_cycle + 1, cycles)))
            round_index = len(plan.rounds) - 1

            for i in range(matches_per_round):
                home, away = slots[i], slots[total - 1 - i]
                if home is None or away is None:
                    continue
                plan.matches.append(PlannedMatch(round_index=round_index, participant1_id=home, participant2_id=away))

            # Rotate: keep slot 0, move last to second, shift others
            slots = [slots[0]] + [slots[-1]] + slots[1:-1]

    return plan
