"""
Stage item inputs.

An input is either a direct seed (a concrete team, possibly not yet chosen)
or a derived seed that will be filled by the winner/loser of another stage
item or match. Derived seeds are stored but never resolved by the generators.
"""

from typing import Annotated, Any, List, Literal, Optional, Union

from pydantic import BaseModel, Field, TypeAdapter, ValidationError, model_validator

from tourney.errors import InvalidArgument


class DirectInput(BaseModel):
    source_type: Literal["direct"] = "direct"
    team_id: Optional[int] = None
    name: Optional[str] = None


class DerivedInput(BaseModel):
    source_type: Literal["winner", "loser"]
    source_stage_item_id: Optional[int] = None
    source_match_id: Optional[int] = None
    name: Optional[str] = None

    @model_validator(mode="after")
    def _exactly_one_source(self) -> "DerivedInput":
        if (self.source_stage_item_id is None) == (self.source_match_id is None):
            raise ValueError("derived input needs exactly one of source_stage_item_id or source_match_id")
        return self


StageInput = Annotated[Union[DirectInput, DerivedInput], Field(discriminator="source_type")]

_inputs_adapter = TypeAdapter(List[StageInput])


def parse_stage_inputs(raw: Optional[List[Any]]) -> List[Union[DirectInput, DerivedInput]]:
    """Validate a stored/incoming inputs list. Entries without source_type are direct seeds."""
    if not raw:
        return []
    normalized = []
    for entry in raw:
        if isinstance(entry, dict) and "source_type" not in entry:
            entry = {**entry, "source_type": "direct"}
        normalized.append(entry)
    try:
        inputs = _inputs_adapter.validate_python(normalized)
    except ValidationError as e:
        raise InvalidArgument(f"Invalid stage inputs: {e.errors()[0]['msg']}", code="INVALID_STAGE_INPUT") from e
    ensure_unique_seeds(inputs)
    return inputs


def ensure_unique_seeds(inputs: List[Union[DirectInput, DerivedInput]]) -> None:
    """A team may be seeded directly at most once per stage item."""
    seen = set()
    for team_id in usable_team_ids(inputs):
        if team_id in seen:
            raise InvalidArgument(
                f"Team {team_id} is seeded more than once", code="DUPLICATE_STAGE_INPUT"
            )
        seen.add(team_id)


def dump_stage_inputs(inputs: List[Union[DirectInput, DerivedInput]]) -> List[dict]:
    return [i.model_dump(exclude_none=True) for i in inputs]


def usable_team_ids(inputs: List[Union[DirectInput, DerivedInput]]) -> List[int]:
    """Team ids of direct seeds that carry a team, in seed order."""
    return [i.team_id for i in inputs if isinstance(i, DirectInput) and i.team_id is not None]
