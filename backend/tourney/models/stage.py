from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from sqlalchemy import JSON, String
from sqlmodel import Column, Field, Relationship, SQLModel

from tourney.models.stage_config import StageConfig, parse_stage_config

if TYPE_CHECKING:
    from tourney.models.stage_item import StageItem
    from tourney.models.tournament import Tournament


class StageType(str, Enum):
    league = "league"
    knockout = "knockout"
    groups = "groups"


class Stage(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    tournament_id: int = Field(foreign_key="tournament.id", index=True)
    name: str
    order: int = Field(default=0)  # position among sibling stages, 0-based
    type: StageType = Field(sa_column=Column(String, nullable=False))
    config_json: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSON, nullable=True))

    # Relationships
    tournament: "Tournament" = Relationship(back_populates="stages")
    items: List["StageItem"] = Relationship(back_populates="stage")

    @property
    def config(self) -> StageConfig:
        return parse_stage_config(StageType(self.type).value, self.config_json)

    @property
    def cycles(self) -> int:
        """Round-robin cycle count; knockout stages always play a single pass."""
        return getattr(self.config, "rounds", 1)
