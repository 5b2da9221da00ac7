"""
Standings API Routes
"""

from typing import List

from fastapi import APIRouter, Depends

from tourney.database import get_repository
from tourney.repository import SqlEntityRepository
from tourney.routes.schemas import RecomputeStandingsResponse, StandingsRow
from tourney.services.standings import get_standings, recompute_standings

router = APIRouter()


@router.get("/tournaments/{tournament_id}/standings", response_model=List[StandingsRow])
def read_standings(tournament_id: int, repo: SqlEntityRepository = Depends(get_repository)):
    """Team table: points, wins, goal difference, goals for."""
    return [
        StandingsRow(
            position=position,
            team_id=team.id,
            name=team.name,
            matches_played=team.matches_played,
            points=team.points,
            wins=team.wins,
            draws=team.draws,
            losses=team.losses,
            goals_for=team.goals_for,
            goals_against=team.goals_against,
            goal_difference=team.goal_difference,
        )
        for position, team in enumerate(get_standings(repo, tournament_id), start=1)
    ]


@router.post("/tournaments/{tournament_id}/standings/recompute", response_model=RecomputeStandingsResponse)
def recompute_tournament_standings(tournament_id: int, repo: SqlEntityRepository = Depends(get_repository)):
    """Rebuild team stats from ended matches (idempotent repair)."""
    return RecomputeStandingsResponse(**recompute_standings(repo, tournament_id))
