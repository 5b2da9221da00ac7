"""
Standings: ordered team table + rebuild from ended matches.

recompute_standings() is the reconcile path. It zeroes every team's stats and
replays each ended match of the tournament through the ranking policy, so it
is idempotent and safe to run after a partially applied result.
"""

import logging
from typing import Dict, List

from sqlalchemy.exc import SQLAlchemyError

from tourney.errors import Internal, NotFound
from tourney.models.team import STAT_FIELDS, Team
from tourney.repository import EntityRepository
from tourney.services.ranking_policy import apply_outcome, outcome_for_match

logger = logging.getLogger(__name__)


def standings_sort_key(team: Team):
    """points desc, wins desc, goal difference desc, goals for desc, name, id"""
    return (-team.points, -team.wins, -team.goal_difference, -team.goals_for, team.name, team.id)


def get_standings(repo: EntityRepository, tournament_id: int) -> List[Team]:
    if repo.get_tournament(tournament_id) is None:
        raise NotFound("Tournament not found")
    return sorted(repo.list_teams(tournament_id), key=standings_sort_key)


def recompute_standings(repo: EntityRepository, tournament_id: int) -> Dict[str, int]:
    """
    Rebuild team stats from ended matches.

    The tournament's team rows are locked before the ended matches are read,
    and the lock is held through reset and replay until commit. Increments
    from end_match calls that commit their match after the read therefore
    wait and land on top of the rebuilt totals.

    Not covered: a match whose end was committed before the read but whose
    increments had not yet been applied is replayed here and then
    incremented again once the lock is released. Run recompute while no
    match is being ended (or run it a second time afterwards).

    Returns:
        Dict with:
        - teams_reset: teams whose stats were zeroed
        - matches_replayed: ended matches applied
        - matches_skipped: ended matches missing a participant
    """
    tournament = repo.get_tournament(tournament_id)
    if tournament is None:
        raise NotFound("Tournament not found")
    config = tournament.ranking_config

    try:
        repo.lock_team_stats(tournament_id)

        totals: Dict[int, Dict[str, int]] = {}
        replayed = 0
        skipped = 0
        for match in repo.list_ended_matches(tournament_id):
            if match.participant1_id is None or match.participant2_id is None:
                skipped += 1
                continue
            outcome = outcome_for_match(match, match.winner_id, match.score_side1, match.score_side2)
            deltas = apply_outcome(outcome, config)
            for team_id, delta in ((match.participant1_id, deltas.side1), (match.participant2_id, deltas.side2)):
                acc = totals.setdefault(team_id, {field: 0 for field in STAT_FIELDS})
                for field, value in delta.as_dict().items():
                    acc[field] += value
            replayed += 1

        teams_reset = repo.reset_team_stats(tournament_id)
        for team_id in sorted(totals):
            repo.increment_team_stats(team_id, totals[team_id])
        repo.commit()
    except SQLAlchemyError as e:
        repo.rollback()
        logger.exception("Standings recompute failed for tournament %s", tournament_id)
        raise Internal("Standings recompute failed") from e

    logger.info("Recomputed standings for tournament %s from %s matches", tournament_id, replayed)
    return {"teams_reset": teams_reset, "matches_replayed": replayed, "matches_skipped": skipped}
