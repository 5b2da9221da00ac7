from datetime import datetime
from typing import TYPE_CHECKING, Any, List, Optional

from sqlalchemy import JSON
from sqlmodel import Column, Field, Relationship, SQLModel

if TYPE_CHECKING:
    from tourney.models.round import Round
    from tourney.models.stage import Stage


class StageItem(SQLModel, table=True):
    """One schedulable unit of a stage: a league table or a bracket."""

    id: Optional[int] = Field(default=None, primary_key=True)
    stage_id: int = Field(foreign_key="stage.id", index=True)
    tournament_id: int = Field(foreign_key="tournament.id", index=True)
    name: str
    # Ordered StageInput dicts (see tourney.models.stage_input); written only through the repository
    inputs_json: List[Any] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    created_at: datetime = Field(default_factory=datetime.utcnow)

    # Relationships
    stage: "Stage" = Relationship(back_populates="items")
    rounds: List["Round"] = Relationship(back_populates="stage_item")
