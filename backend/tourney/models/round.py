from datetime import datetime
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import UniqueConstraint as SAUniqueConstraint
from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from tourney.models.match import Match
    from tourney.models.stage_item import StageItem


class Round(SQLModel, table=True):
    __table_args__ = (SAUniqueConstraint("stage_item_id", "number", name="uq_stage_item_round_number"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    tournament_id: int = Field(foreign_key="tournament.id", index=True)
    stage_id: int = Field(foreign_key="stage.id")
    stage_item_id: int = Field(foreign_key="stageitem.id", index=True)
    name: str
    number: int  # 1-based, monotonic across cycles
    created_at: datetime = Field(default_factory=datetime.utcnow)

    # Relationships
    stage_item: "StageItem" = Relationship(back_populates="rounds")
    matches: List["Match"] = Relationship(back_populates="round")
