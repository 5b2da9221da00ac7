from datetime import datetime
from typing import Optional

from sqlmodel import Field, SQLModel


class ScheduleClaim(SQLModel, table=True):
    """Insert-if-absent marker: at most one schedule generation per stage item."""

    id: Optional[int] = Field(default=None, primary_key=True)
    stage_item_id: int = Field(foreign_key="stageitem.id", unique=True)
    claimed_at: datetime = Field(default_factory=datetime.utcnow)
