from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from tourney.models.round import Round

MATCH_SCHEDULED = "scheduled"
MATCH_ENDED = "ended"


class Match(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    tournament_id: int = Field(foreign_key="tournament.id", index=True)
    stage_id: int = Field(foreign_key="stage.id")
    stage_item_id: int = Field(foreign_key="stageitem.id", index=True)
    round_id: int = Field(foreign_key="round.id", index=True)

    # Participants (side 1 / side 2); byes never produce a row
    participant1_id: Optional[int] = Field(default=None, foreign_key="team.id")
    participant1_name: str = Field(default="")
    participant2_id: Optional[int] = Field(default=None, foreign_key="team.id")
    participant2_name: str = Field(default="")

    start_time: Optional[datetime] = Field(default=None)
    court: Optional[str] = Field(default=None)

    score_side1: int = Field(default=0)
    score_side2: int = Field(default=0)
    winner_id: Optional[int] = Field(default=None, foreign_key="team.id")  # null on an ended match = draw

    status: str = Field(default=MATCH_SCHEDULED)  # "scheduled" | "ended"
    end_time: Optional[datetime] = Field(default=None)  # set exactly once; terminal
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    # Relationships
    round: "Round" = Relationship(back_populates="matches")

    @property
    def is_ended(self) -> bool:
        return self.end_time is not None

    def has_participant(self, team_id: int) -> bool:
        return team_id in (self.participant1_id, self.participant2_id)
