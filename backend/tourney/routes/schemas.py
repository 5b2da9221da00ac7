"""
Request/Response models shared by the API routers.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict

from tourney.models.score import Score


class ScoreResponse(BaseModel):
    side1: int
    side2: int


class MatchResponse(BaseModel):
    id: int
    tournament_id: int
    stage_id: int
    stage_item_id: int
    round_id: int
    participant1_id: Optional[int] = None
    participant1_name: str
    participant2_id: Optional[int] = None
    participant2_name: str
    start_time: Optional[datetime] = None
    court: Optional[str] = None
    score: ScoreResponse
    winner_id: Optional[int] = None
    status: str
    end_time: Optional[datetime] = None


def match_to_response(m) -> MatchResponse:
    return MatchResponse(
        id=m.id,
        tournament_id=m.tournament_id,
        stage_id=m.stage_id,
        stage_item_id=m.stage_item_id,
        round_id=m.round_id,
        participant1_id=m.participant1_id,
        participant1_name=m.participant1_name,
        participant2_id=m.participant2_id,
        participant2_name=m.participant2_name,
        start_time=m.start_time,
        court=m.court,
        score=ScoreResponse(side1=m.score_side1, side2=m.score_side2),
        winner_id=m.winner_id,
        status=m.status,
        end_time=m.end_time,
    )


class RoundResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    tournament_id: int
    stage_id: int
    stage_item_id: int
    name: str
    number: int


class ScheduleGenerationResponse(BaseModel):
    message: str = "Rounds and matches generated successfully"
    stage_item_id: int
    stage_type: Optional[str] = None
    rounds_created: int
    matches_created: int


class EndMatchRequest(BaseModel):
    winner_id: Optional[int] = None  # omitted / null = draw
    score: Score


class UpdateScoreRequest(BaseModel):
    score: Score


class StageItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    stage_id: int
    tournament_id: int
    name: str
    inputs_json: List[Dict[str, Any]]


class AssignTeamsRequest(BaseModel):
    # None seeds every team of the tournament
    inputs: Optional[List[Dict[str, Any]]] = None


class StandingsRow(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    position: int
    team_id: int
    name: str
    matches_played: int
    points: int
    wins: int
    draws: int
    losses: int
    goals_for: int
    goals_against: int
    goal_difference: int


class RecomputeStandingsResponse(BaseModel):
    teams_reset: int
    matches_replayed: int
    matches_skipped: int
