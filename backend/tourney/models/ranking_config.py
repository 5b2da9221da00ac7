from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from tourney.errors import InvalidArgument


class RankingConfig(BaseModel):
    """Points awarded per outcome. Read-only to the engine."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    win_points: int = Field(default=3, alias="winPoints")
    draw_points: int = Field(default=1, alias="drawPoints")
    loss_points: int = Field(default=0, alias="lossPoints")
    add_score_points: bool = Field(default=False, alias="addScorePoints")

    @classmethod
    def from_settings(cls, raw: Optional[Dict[str, Any]]) -> "RankingConfig":
        """Build from a stored settings blob; missing keys fall back to 3/1/0/False."""
        if not raw:
            return cls()
        # Stored blobs come from older clients too; drop explicit nulls so defaults apply
        cleaned = {k: v for k, v in raw.items() if v is not None}
        try:
            return cls.model_validate(cleaned)
        except ValidationError as e:
            raise InvalidArgument(
                f"Invalid ranking config: {e.errors()[0]['msg']}", code="INVALID_RANKING_CONFIG"
            ) from e
