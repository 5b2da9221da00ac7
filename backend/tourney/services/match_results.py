"""
Match result recording.

A match moves scheduled -> ended exactly once. Ending writes the result with a
compare-and-set on end_time IS NULL and commits it on its own; only the writer
that wins that update applies the ranking deltas to the two teams, using
atomic increments. If the stats step fails the match stays ended: the match
row is the record of truth and standings can be rebuilt from it
(see tourney.services.standings.recompute_standings).
"""

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from tourney.errors import Conflict, Internal, InvalidArgument, NotFound, PreconditionFailed
from tourney.models.match import MATCH_ENDED, Match
from tourney.models.score import Score
from tourney.repository import EntityRepository
from tourney.services.ranking_policy import apply_outcome, outcome_for_match

logger = logging.getLogger(__name__)


def _validate_score(score: Score) -> Score:
    if score is None:
        raise InvalidArgument("Score is required", code="INVALID_SCORE")
    if score.side1 < 0 or score.side2 < 0:
        raise InvalidArgument("Scores must be non-negative", code="INVALID_SCORE")
    return score


def get_match(repo: EntityRepository, match_id: int) -> Match:
    match = repo.get_match(match_id)
    if match is None:
        raise NotFound("Match not found")
    return match


def end_match(repo: EntityRepository, match_id: int, winner_id: Optional[int], score: Score) -> Match:
    """
    Conclude a match and apply its result to the standings.

    Preconditions (checked in order, no writes before all pass):
    1. match exists                      -> NotFound
    2. match not already ended           -> Conflict
    3. both participants set             -> PreconditionFailed
    4. winner (if any) is a participant  -> InvalidArgument
    5. score is non-negative             -> InvalidArgument

    winner_id None records a draw.
    """
    match = get_match(repo, match_id)

    if match.is_ended:
        raise Conflict("Match already ended", code="MATCH_ALREADY_ENDED")

    if match.participant1_id is None or match.participant2_id is None:
        raise PreconditionFailed("Match participants not set", code="PARTICIPANTS_NOT_SET")

    if winner_id is not None and not match.has_participant(winner_id):
        raise InvalidArgument("Winner must be one of the match participants", code="WINNER_NOT_PARTICIPANT")

    score = _validate_score(score)

    tournament = repo.get_tournament(match.tournament_id)
    if tournament is None:
        raise NotFound("Tournament not found")
    config = tournament.ranking_config

    # Capture before the commit expires the instance
    outcome = outcome_for_match(match, winner_id, score.side1, score.side2)
    side1_id, side2_id = match.participant1_id, match.participant2_id

    now = datetime.utcnow()
    try:
        changed = repo.update_match_conditional(
            match_id,
            {
                "winner_id": winner_id,
                "end_time": now,
                "status": MATCH_ENDED,
                "score_side1": score.side1,
                "score_side2": score.side2,
                "updated_at": now,
            },
        )
        if changed == 0:
            repo.rollback()
            logger.warning("Match %s was ended concurrently; result not applied", match_id)
            raise Conflict("Match already ended", code="MATCH_ALREADY_ENDED")
        repo.commit()
    except SQLAlchemyError as e:
        repo.rollback()
        logger.exception("Failed to end match %s", match_id)
        raise Internal("Failed to end match") from e

    deltas = apply_outcome(outcome, config)
    try:
        repo.increment_team_stats(side1_id, deltas.side1.as_dict())
        repo.increment_team_stats(side2_id, deltas.side2.as_dict())
        repo.commit()
    except SQLAlchemyError as e:
        repo.rollback()
        logger.exception("Match %s ended but team stats were not applied; recompute standings", match_id)
        raise Internal(
            "Match ended but standings update failed; recompute standings to reconcile",
            code="STANDINGS_UPDATE_FAILED",
        ) from e

    logger.info(
        "Match %s ended %s-%s (%s)",
        match_id,
        score.side1,
        score.side2,
        f"winner {winner_id}" if winner_id is not None else "draw",
    )
    return get_match(repo, match_id)


def update_score(repo: EntityRepository, match_id: int, score: Score) -> Match:
    """Update the in-progress score of an unended match. No standings side effects."""
    match = get_match(repo, match_id)
    if match.is_ended:
        raise Conflict("Match already ended", code="MATCH_ALREADY_ENDED")
    score = _validate_score(score)

    try:
        changed = repo.update_match_conditional(
            match_id,
            {"score_side1": score.side1, "score_side2": score.side2, "updated_at": datetime.utcnow()},
        )
        if changed == 0:
            repo.rollback()
            raise Conflict("Match already ended", code="MATCH_ALREADY_ENDED")
        repo.commit()
    except SQLAlchemyError as e:
        repo.rollback()
        logger.exception("Failed to update score of match %s", match_id)
        raise Internal("Failed to update match") from e

    return get_match(repo, match_id)
