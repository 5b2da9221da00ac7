"""
Schedule API Routes
Generate rounds/matches for a stage item, list rounds, list round matches,
and seed stage item inputs. Caller is already authorized upstream.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends

from tourney.database import get_repository
from tourney.repository import SqlEntityRepository
from tourney.routes.schemas import (
    AssignTeamsRequest,
    MatchResponse,
    RoundResponse,
    ScheduleGenerationResponse,
    StageItemResponse,
    match_to_response,
)
from tourney.services.schedule_orchestrator import generate_schedule, list_round_matches, list_rounds
from tourney.services.stage_items import assign_teams, clear_team_assignments

router = APIRouter()


@router.post(
    "/stage-items/{stage_item_id}/schedule",
    response_model=ScheduleGenerationResponse,
    status_code=201,
)
def generate_stage_item_schedule(stage_item_id: int, repo: SqlEntityRepository = Depends(get_repository)):
    """Generate all rounds and matches for a stage item (once)."""
    result = generate_schedule(repo, stage_item_id)
    return ScheduleGenerationResponse(**result.to_dict())


@router.get("/stage-items/{stage_item_id}/rounds", response_model=List[RoundResponse])
def get_stage_item_rounds(stage_item_id: int, repo: SqlEntityRepository = Depends(get_repository)):
    return list_rounds(repo, stage_item_id)


@router.get("/rounds/{round_id}/matches", response_model=List[MatchResponse])
def get_round_matches(round_id: int, repo: SqlEntityRepository = Depends(get_repository)):
    return [match_to_response(m) for m in list_round_matches(repo, round_id)]


@router.post("/stage-items/{stage_item_id}/teams", response_model=StageItemResponse)
def assign_stage_item_teams(
    stage_item_id: int,
    payload: Optional[AssignTeamsRequest] = None,
    repo: SqlEntityRepository = Depends(get_repository),
):
    """Seed stage item inputs; no body (or no inputs) seeds every team of the tournament."""
    return assign_teams(repo, stage_item_id, payload.inputs if payload is not None else None)


@router.post("/stage-items/{stage_item_id}/teams/clear", response_model=StageItemResponse)
def clear_stage_item_teams(stage_item_id: int, repo: SqlEntityRepository = Depends(get_repository)):
    return clear_team_assignments(repo, stage_item_id)
