"""
Ranking policy: match outcome + tournament ranking config -> per-side stat deltas.

Pure functions only. Nothing here reads or writes match, round or team rows;
the result recorder and the standings rebuild apply the deltas.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Dict, Optional

from tourney.models.ranking_config import RankingConfig

SIDE_1 = 1
SIDE_2 = 2


@dataclass(frozen=True)
class MatchOutcome:
    score_side1: int
    score_side2: int
    winner_side: Optional[int] = None  # SIDE_1 | SIDE_2 | None for a draw

    @property
    def is_draw(self) -> bool:
        return self.winner_side is None


@dataclass(frozen=True)
class StatsDelta:
    matches_played: int = 0
    points: int = 0
    wins: int = 0
    draws: int = 0
    losses: int = 0
    goals_for: int = 0
    goals_against: int = 0

    def as_dict(self) -> Dict[str, int]:
        return asdict(self)


@dataclass(frozen=True)
class OutcomeDeltas:
    side1: StatsDelta
    side2: StatsDelta

    @property
    def winner_delta(self) -> Optional[StatsDelta]:
        if self.side1.wins:
            return self.side1
        if self.side2.wins:
            return self.side2
        return None

    @property
    def loser_delta(self) -> Optional[StatsDelta]:
        if self.side1.losses:
            return self.side1
        if self.side2.losses:
            return self.side2
        return None


def _side_delta(result: str, own: int, opponent: int, config: RankingConfig) -> StatsDelta:
    points = {
        "win": config.win_points,
        "draw": config.draw_points,
        "loss": config.loss_points,
    }[result]
    if config.add_score_points:
        points += own
    return StatsDelta(
        matches_played=1,
        points=points,
        wins=1 if result == "win" else 0,
        draws=1 if result == "draw" else 0,
        losses=1 if result == "loss" else 0,
        goals_for=own,
        goals_against=opponent,
    )


def apply_outcome(outcome: MatchOutcome, config: Optional[RankingConfig] = None) -> OutcomeDeltas:
    """
    Map an outcome to stat deltas for both sides.

    Decisive: winner +1 played/+1 win/+win_points, loser +1 played/+1 loss/+loss_points.
    Draw: both +1 played/+1 draw/+draw_points.
    Goals for/against always follow the recorded score, whatever the result.
    """
    config = config or RankingConfig()
    if outcome.winner_side not in (None, SIDE_1, SIDE_2):
        raise ValueError(f"winner_side must be 1, 2 or None, got {outcome.winner_side}")

    if outcome.is_draw:
        result1 = result2 = "draw"
    elif outcome.winner_side == SIDE_1:
        result1, result2 = "win", "loss"
    else:
        result1, result2 = "loss", "win"

    return OutcomeDeltas(
        side1=_side_delta(result1, outcome.score_side1, outcome.score_side2, config),
        side2=_side_delta(result2, outcome.score_side2, outcome.score_side1, config),
    )


def outcome_for_match(match, winner_id: Optional[int], score_side1: int, score_side2: int) -> MatchOutcome:
    """Translate a winner team id into the side it played on."""
    if winner_id is None:
        winner_side = None
    elif winner_id == match.participant1_id:
        winner_side = SIDE_1
    elif winner_id == match.participant2_id:
        winner_side = SIDE_2
    else:
        raise ValueError(f"Team {winner_id} did not play match {match.id}")
    return MatchOutcome(score_side1=score_side1, score_side2=score_side2, winner_side=winner_side)
