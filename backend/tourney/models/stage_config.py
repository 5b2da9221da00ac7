"""
Format-specific stage configuration.

Stored as a JSON blob on Stage.config_json and parsed into one of these
models according to Stage.type.
"""

from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from tourney.errors import InvalidArgument


class _StageConfigBase(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class LeagueConfig(_StageConfigBase):
    teams_count: Optional[int] = Field(default=None, ge=2, alias="teamsCount")
    rounds: int = Field(default=1, ge=1)  # full round-robin cycles


class KnockoutConfig(_StageConfigBase):
    starting_round: Optional[str] = Field(default=None, alias="startingRound")
    third_place_match: bool = Field(default=False, alias="thirdPlaceMatch")


class GroupsConfig(_StageConfigBase):
    groups_count: Optional[int] = Field(default=None, ge=1, alias="groupsCount")
    teams_per_group: Optional[int] = Field(default=None, ge=2, alias="teamsPerGroup")
    advance_per_group: Optional[int] = Field(default=None, ge=1, alias="advancePerGroup")
    rounds: int = Field(default=1, ge=1)


StageConfig = Union[LeagueConfig, KnockoutConfig, GroupsConfig]

_CONFIG_BY_TYPE = {
    "league": LeagueConfig,
    "knockout": KnockoutConfig,
    "groups": GroupsConfig,
}


def parse_stage_config(stage_type: str, raw: Optional[Dict[str, Any]]) -> StageConfig:
    """Validate a stored config blob against the model for its stage type."""
    model = _CONFIG_BY_TYPE.get(str(stage_type))
    if model is None:
        raise InvalidArgument(f"Unknown stage type: {stage_type}", code="UNKNOWN_STAGE_TYPE")
    try:
        return model.model_validate(raw or {})
    except ValidationError as e:
        raise InvalidArgument(f"Invalid {stage_type} stage config: {e.errors()[0]['msg']}", code="INVALID_STAGE_CONFIG") from e
