from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import UniqueConstraint as SAUniqueConstraint
from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from tourney.models.tournament import Tournament

# Stat columns touched by the result recorder; kept in one place for increments and resets
STAT_FIELDS = (
    "matches_played",
    "points",
    "wins",
    "draws",
    "losses",
    "goals_for",
    "goals_against",
)


class Team(SQLModel, table=True):
    __table_args__ = (SAUniqueConstraint("tournament_id", "name", name="uq_tournament_team_name"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    tournament_id: int = Field(foreign_key="tournament.id", index=True)
    name: str
    created_at: datetime = Field(default_factory=datetime.utcnow)

    # Standings (mutated only via atomic increments)
    matches_played: int = Field(default=0)
    points: int = Field(default=0)
    wins: int = Field(default=0)
    draws: int = Field(default=0)
    losses: int = Field(default=0)
    goals_for: int = Field(default=0)
    goals_against: int = Field(default=0)

    # Relationships
    tournament: "Tournament" = Relationship(back_populates="teams")

    @property
    def goal_difference(self) -> int:
        return self.goals_for - self.goals_against
