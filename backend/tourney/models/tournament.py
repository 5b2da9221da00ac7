from datetime import datetime
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from sqlalchemy import JSON
from sqlmodel import Column, Field, Relationship, SQLModel

from tourney.models.ranking_config import RankingConfig

if TYPE_CHECKING:
    from tourney.models.stage import Stage
    from tourney.models.team import Team


class Tournament(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    club_id: Optional[int] = Field(default=None, index=True)  # owned by the club service
    name: str
    notes: Optional[str] = None

    # {"winPoints": 3, "drawPoints": 1, "lossPoints": 0, "addScorePoints": false}; partial dicts allowed
    ranking_config_json: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSON, nullable=True))

    created_at: datetime = Field(default_factory=datetime.utcnow)

    # Relationships
    teams: List["Team"] = Relationship(back_populates="tournament")
    stages: List["Stage"] = Relationship(back_populates="tournament")

    @property
    def ranking_config(self) -> RankingConfig:
        return RankingConfig.from_settings(self.ranking_config_json)
