"""
Match API Routes
Read a match, update its in-progress score, end it. Ending is terminal.
"""

from fastapi import APIRouter, Depends

from tourney.database import get_repository
from tourney.repository import SqlEntityRepository
from tourney.routes.schemas import EndMatchRequest, MatchResponse, UpdateScoreRequest, match_to_response
from tourney.services.match_results import end_match, get_match, update_score

router = APIRouter()


@router.get("/matches/{match_id}", response_model=MatchResponse)
def read_match(match_id: int, repo: SqlEntityRepository = Depends(get_repository)):
    return match_to_response(get_match(repo, match_id))


@router.patch("/matches/{match_id}", response_model=MatchResponse)
def patch_match_score(match_id: int, payload: UpdateScoreRequest, repo: SqlEntityRepository = Depends(get_repository)):
    return match_to_response(update_score(repo, match_id, payload.score))


@router.post("/matches/{match_id}/end", response_model=MatchResponse)
def end_match_route(match_id: int, payload: EndMatchRequest, repo: SqlEntityRepository = Depends(get_repository)):
    """End a match with a winner (or a draw when winner_id is null) and update standings."""
    return match_to_response(end_match(repo, match_id, payload.winner_id, payload.score))
