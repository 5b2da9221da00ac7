"""
Knockout schedule generation.

Only the opening match is materialized: seed 1 vs seed 2 in a single round
named after the stage item. Seeds beyond the first two are ignored, and
winners are not advanced into later rounds. Bracket progression would plug in
here as a generator that emits further rounds whose participants come from
derived (winner/loser) stage inputs.
"""

from typing import Sequence

from tourney.errors import PreconditionFailed
from tourney.services.schedule_plan import PlannedMatch, PlannedRound, SchedulePlan


def generate_knockout(team_ids: Sequence[int], item_name: str = "") -> SchedulePlan:
    if len(team_ids) < 2:
        raise PreconditionFailed("Need at least 2 teams to generate matches", code="INSUFFICIENT_TEAMS")

    plan = SchedulePlan()
    plan.rounds.append(PlannedRound(number=1, name=item_name or "Round 1"))
    plan.matches.append(PlannedMatch(round_index=0, participant1_id=team_ids[0], participant2_id=team_ids[1]))
    return plan
