from tourney.models.match import Match
from tourney.models.ranking_config import RankingConfig
from tourney.models.round import Round
from tourney.models.schedule_claim import ScheduleClaim
from tourney.models.score import Score
from tourney.models.stage import Stage, StageType
from tourney.models.stage_item import StageItem
from tourney.models.team import Team
from tourney.models.tournament import Tournament

__all__ = [
    "Tournament",
    "Team",
    "Stage",
    "StageType",
    "StageItem",
    "Round",
    "Match",
    "ScheduleClaim",
    "RankingConfig",
    "Score",
]
