"""
Schedule Orchestrator Service

Generates the rounds and matches of one stage item:
0. Validate (stage item, stage, tournament resolve; nothing generated yet; >= 2 teams)
1. Build an in-memory plan (round-robin for league/groups, knockout otherwise)
2. Claim the stage item (insert-if-absent marker)
3. Insert rounds (flush assigns ids)
4. Back-fill round ids on matches and insert them
5. Single commit

All validation happens before the first write. Steps 2-5 share one
transaction: any storage failure rolls everything back, so a failed run
never leaves orphan rounds behind and can simply be retried.
"""

import logging
from typing import Dict, List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from tourney.errors import Conflict, EngineError, Internal, NotFound, PreconditionFailed
from tourney.models.match import MATCH_SCHEDULED, Match
from tourney.models.round import Round
from tourney.models.stage import Stage, StageType
from tourney.models.stage_input import usable_team_ids
from tourney.models.stage_item import StageItem
from tourney.models.team import Team
from tourney.repository import EntityRepository
from tourney.services.knockout import generate_knockout
from tourney.services.round_robin import generate_round_robin
from tourney.services.schedule_plan import SchedulePlan

logger = logging.getLogger(__name__)

# ============================================================================
# Response Models
# ============================================================================


class ScheduleGenerationResult:
    """Summary of one generation run"""

    def __init__(self, stage_item_id: int):
        self.stage_item_id = stage_item_id
        self.stage_type: Optional[str] = None
        self.rounds_created = 0
        self.matches_created = 0
        self.failed_step: Optional[str] = None

    def to_dict(self):
        return {
            "stage_item_id": self.stage_item_id,
            "stage_type": self.stage_type,
            "rounds_created": self.rounds_created,
            "matches_created": self.matches_created,
        }


# ============================================================================
# Helpers
# ============================================================================


def _resolve_stage_item(repo: EntityRepository, stage_item_id: int):
    stage_item = repo.get_stage_item(stage_item_id)
    if stage_item is None:
        raise NotFound("Stage item not found")

    stage = repo.get_stage(stage_item.stage_id)
    if stage is None:
        raise NotFound("Stage not found")

    tournament = repo.get_tournament(stage.tournament_id)
    if tournament is None:
        raise NotFound("Tournament not found")

    return stage_item, stage, tournament


def build_plan(stage: Stage, stage_item: StageItem, team_ids: List[int]) -> SchedulePlan:
    """Dispatch to the generator for the stage format."""
    stage_type = StageType(stage.type)
    if stage_type in (StageType.league, StageType.groups):
        return generate_round_robin(team_ids, cycles=stage.cycles, item_name=stage_item.name)
    return generate_knockout(team_ids, item_name=stage_item.name)


def _rounds_for(plan: SchedulePlan, stage: Stage, stage_item: StageItem) -> List[Round]:
    return [
        Round(
            tournament_id=stage.tournament_id,
            stage_id=stage.id,
            stage_item_id=stage_item.id,
            name=planned.name,
            number=planned.number,
        )
        for planned in plan.rounds
    ]


def _matches_for(
    plan: SchedulePlan, rounds: List[Round], stage: Stage, stage_item: StageItem, teams: Dict[int, Team]
) -> List[Match]:
    # Round ids exist only after insert; map plan indices onto them
    matches = []
    for planned in plan.matches:
        home: Team = teams[planned.participant1_id]
        away: Team = teams[planned.participant2_id]
        matches.append(
            Match(
                tournament_id=stage.tournament_id,
                stage_id=stage.id,
                stage_item_id=stage_item.id,
                round_id=rounds[planned.round_index].id,
                participant1_id=home.id,
                participant1_name=home.name,
                participant2_id=away.id,
                participant2_name=away.name,
                score_side1=0,
                score_side2=0,
                status=MATCH_SCHEDULED,
            )
        )
    return matches


# ============================================================================
# Main Orchestrator Function
# ============================================================================


def generate_schedule(repo: EntityRepository, stage_item_id: int) -> ScheduleGenerationResult:
    """
    Generate and persist rounds + matches for a stage item.

    Raises:
        NotFound: stage item, stage, tournament or a seeded team is missing
        Conflict: rounds already exist (or a concurrent run claimed the item first)
        PreconditionFailed: fewer than 2 usable team inputs
        Internal: storage failure (transaction rolled back)
    """
    result = ScheduleGenerationResult(stage_item_id)

    # ====================================================================
    # Step 0: Validate (no writes)
    # ====================================================================
    result.failed_step = "VALIDATE"

    stage_item, stage, tournament = _resolve_stage_item(repo, stage_item_id)
    result.stage_type = StageType(stage.type).value

    if repo.count_rounds(stage_item_id) > 0:
        raise Conflict("Rounds already generated for this stage item", code="SCHEDULE_ALREADY_GENERATED")

    team_ids = usable_team_ids(repo.get_stage_inputs(stage_item))
    if len(team_ids) < 2:
        raise PreconditionFailed("Need at least 2 teams to generate matches", code="INSUFFICIENT_TEAMS")

    teams = repo.get_teams(team_ids)
    for team_id in team_ids:
        team = teams.get(team_id)
        if team is None or team.tournament_id != tournament.id:
            raise NotFound(f"Team {team_id} not found in tournament {tournament.id}")

    # ====================================================================
    # Step 1: Plan
    # ====================================================================
    result.failed_step = "PLAN"
    plan = build_plan(stage, stage_item, team_ids)

    # ====================================================================
    # Steps 2-5: Persist (single transaction)
    # ====================================================================
    try:
        result.failed_step = "CLAIM"
        repo.claim_schedule(stage_item_id)

        result.failed_step = "INSERT_ROUNDS"
        rounds = repo.insert_rounds(_rounds_for(plan, stage, stage_item))

        result.failed_step = "INSERT_MATCHES"
        matches = repo.insert_matches(_matches_for(plan, rounds, stage, stage_item, teams))

        repo.commit()
    except EngineError:
        raise
    except IntegrityError as e:
        repo.rollback()
        logger.warning("Schedule generation for stage item %s raced another run", stage_item_id)
        raise Conflict("Rounds already generated for this stage item", code="SCHEDULE_ALREADY_GENERATED") from e
    except SQLAlchemyError as e:
        repo.rollback()
        logger.exception("Schedule generation failed at step %s, transaction rolled back", result.failed_step)
        raise Internal(f"Schedule generation failed at step {result.failed_step}") from e

    result.failed_step = None
    result.rounds_created = len(rounds)
    result.matches_created = len(matches)
    logger.info(
        "Generated %s rounds / %s matches for stage item %s (%s)",
        result.rounds_created,
        result.matches_created,
        stage_item_id,
        result.stage_type,
    )
    return result


# ============================================================================
# Reads
# ============================================================================


def list_rounds(repo: EntityRepository, stage_item_id: int) -> List[Round]:
    """Rounds of a stage item ordered by number."""
    if repo.get_stage_item(stage_item_id) is None:
        raise NotFound("Stage item not found")
    return repo.list_rounds(stage_item_id)


def list_round_matches(repo: EntityRepository, round_id: int) -> List[Match]:
    if repo.get_round(round_id) is None:
        raise NotFound("Round not found")
    return repo.list_round_matches(round_id)
