"""
Stage item team assignment.

Seeds a stage item's inputs, either explicitly or from every team of the
tournament in registration order. Inputs are frozen once a schedule exists,
since the generated rounds were built from them.
"""

import logging
from typing import Any, List, Optional

from sqlalchemy.exc import SQLAlchemyError

from tourney.errors import Conflict, Internal, NotFound
from tourney.models.stage_input import DirectInput, parse_stage_inputs
from tourney.models.stage_item import StageItem
from tourney.repository import EntityRepository

logger = logging.getLogger(__name__)


def _get_unscheduled_stage_item(repo: EntityRepository, stage_item_id: int) -> StageItem:
    stage_item = repo.get_stage_item(stage_item_id)
    if stage_item is None:
        raise NotFound("Stage item not found")
    if repo.count_rounds(stage_item_id) > 0:
        raise Conflict("Stage item already has a schedule; inputs are frozen", code="SCHEDULE_ALREADY_GENERATED")
    return stage_item


def assign_teams(repo: EntityRepository, stage_item_id: int, inputs: Optional[List[Any]] = None) -> StageItem:
    """
    Set a stage item's inputs.

    Args:
        inputs: raw StageInput dicts/models; None seeds every tournament team as a direct input
    """
    stage_item = _get_unscheduled_stage_item(repo, stage_item_id)

    if inputs is None:
        parsed = [DirectInput(team_id=t.id, name=t.name) for t in repo.list_teams(stage_item.tournament_id)]
    else:
        parsed = parse_stage_inputs([i.model_dump() if hasattr(i, "model_dump") else i for i in inputs])

    try:
        repo.set_stage_item_inputs(stage_item, parsed)
        repo.commit()
    except SQLAlchemyError as e:
        repo.rollback()
        logger.exception("Failed to assign teams to stage item %s", stage_item_id)
        raise Internal("Failed to assign teams") from e

    logger.info("Assigned %s inputs to stage item %s", len(parsed), stage_item_id)
    return repo.get_stage_item(stage_item_id)


def clear_team_assignments(repo: EntityRepository, stage_item_id: int) -> StageItem:
    stage_item = _get_unscheduled_stage_item(repo, stage_item_id)
    try:
        repo.set_stage_item_inputs(stage_item, [])
        repo.commit()
    except SQLAlchemyError as e:
        repo.rollback()
        logger.exception("Failed to clear inputs of stage item %s", stage_item_id)
        raise Internal("Failed to clear team assignments") from e
    return repo.get_stage_item(stage_item_id)
