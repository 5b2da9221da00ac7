"""
Entity Repository

Typed read/write/atomic-increment operations over the tournament entities.
Services receive a repository instead of reaching for a global session, so
the scheduling and standings logic never depends on how rows are stored.

SqlEntityRepository is the SQLModel-backed implementation used by the API.
Writes flush but do not commit; callers own the transaction boundary through
commit()/rollback().
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Protocol, Union

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, func, select

from tourney.errors import Conflict, InvalidArgument
from tourney.models.match import MATCH_ENDED, Match
from tourney.models.round import Round
from tourney.models.schedule_claim import ScheduleClaim
from tourney.models.stage import Stage
from tourney.models.stage_input import (
    DerivedInput,
    DirectInput,
    dump_stage_inputs,
    ensure_unique_seeds,
    parse_stage_inputs,
    usable_team_ids,
)
from tourney.models.stage_item import StageItem
from tourney.models.team import STAT_FIELDS, Team
from tourney.models.tournament import Tournament

logger = logging.getLogger(__name__)

StageInputs = List[Union[DirectInput, DerivedInput]]


# ============================================================================
# Protocol
# ============================================================================


class EntityRepository(Protocol):
    """Storage capability consumed by the engine services."""

    def get_tournament(self, tournament_id: int) -> Optional[Tournament]: ...

    def get_stage(self, stage_id: int) -> Optional[Stage]: ...

    def get_stage_item(self, stage_item_id: int) -> Optional[StageItem]: ...

    def get_round(self, round_id: int) -> Optional[Round]: ...

    def get_match(self, match_id: int) -> Optional[Match]: ...

    def get_team(self, team_id: int) -> Optional[Team]: ...

    def get_teams(self, team_ids: Iterable[int]) -> Dict[int, Team]: ...

    def list_teams(self, tournament_id: int) -> List[Team]: ...

    def list_rounds(self, stage_item_id: int) -> List[Round]: ...

    def list_round_matches(self, round_id: int) -> List[Match]: ...

    def list_ended_matches(self, tournament_id: int) -> List[Match]: ...

    def count_rounds(self, stage_item_id: int) -> int: ...

    def get_stage_inputs(self, stage_item: StageItem) -> StageInputs: ...

    def set_stage_item_inputs(self, stage_item: StageItem, inputs: StageInputs) -> StageItem: ...

    def claim_schedule(self, stage_item_id: int) -> None: ...

    def insert_rounds(self, rounds: List[Round]) -> List[Round]: ...

    def insert_matches(self, matches: List[Match]) -> List[Match]: ...

    def update_match_conditional(self, match_id: int, patch: Dict[str, Any], only_if_open: bool = True) -> int: ...

    def increment_team_stats(self, team_id: int, deltas: Dict[str, int]) -> int: ...

    def lock_team_stats(self, tournament_id: int) -> int: ...

    def reset_team_stats(self, tournament_id: int) -> int: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...


# ============================================================================
# SQLModel implementation
# ============================================================================


class SqlEntityRepository:
    def __init__(self, session: Session):
        self.session = session

    # --- reads ---------------------------------------------------------------

    def get_tournament(self, tournament_id: int) -> Optional[Tournament]:
        return self.session.get(Tournament, tournament_id)

    def get_stage(self, stage_id: int) -> Optional[Stage]:
        return self.session.get(Stage, stage_id)

    def get_stage_item(self, stage_item_id: int) -> Optional[StageItem]:
        return self.session.get(StageItem, stage_item_id)

    def get_round(self, round_id: int) -> Optional[Round]:
        return self.session.get(Round, round_id)

    def get_match(self, match_id: int) -> Optional[Match]:
        return self.session.get(Match, match_id)

    def get_team(self, team_id: int) -> Optional[Team]:
        return self.session.get(Team, team_id)

    def get_teams(self, team_ids: Iterable[int]) -> Dict[int, Team]:
        ids = list(team_ids)
        if not ids:
            return {}
        teams = self.session.exec(select(Team).where(Team.id.in_(ids))).all()
        return {t.id: t for t in teams}

    def list_teams(self, tournament_id: int) -> List[Team]:
        return list(self.session.exec(select(Team).where(Team.tournament_id == tournament_id).order_by(Team.id)).all())

    def list_rounds(self, stage_item_id: int) -> List[Round]:
        return list(
            self.session.exec(select(Round).where(Round.stage_item_id == stage_item_id).order_by(Round.number)).all()
        )

    def list_round_matches(self, round_id: int) -> List[Match]:
        return list(self.session.exec(select(Match).where(Match.round_id == round_id).order_by(Match.id)).all())

    def list_ended_matches(self, tournament_id: int) -> List[Match]:
        return list(
            self.session.exec(
                select(Match)
                .where(Match.tournament_id == tournament_id, Match.end_time.is_not(None))
                .order_by(Match.end_time, Match.id)
            ).all()
        )

    def count_rounds(self, stage_item_id: int) -> int:
        return int(self.session.exec(select(func.count(Round.id)).where(Round.stage_item_id == stage_item_id)).one())

    def get_stage_inputs(self, stage_item: StageItem) -> StageInputs:
        return parse_stage_inputs(stage_item.inputs_json)

    # --- writes --------------------------------------------------------------

    def set_stage_item_inputs(self, stage_item: StageItem, inputs: StageInputs) -> StageItem:
        """Write inputs after checking direct seeds reference teams of the same tournament."""
        ensure_unique_seeds(inputs)
        team_ids = usable_team_ids(inputs)
        known = self.get_teams(team_ids)
        for team_id in team_ids:
            team = known.get(team_id)
            if team is None or team.tournament_id != stage_item.tournament_id:
                raise InvalidArgument(
                    f"Team {team_id} not found in tournament {stage_item.tournament_id}",
                    code="UNKNOWN_TEAM_INPUT",
                )

        stage_item.inputs_json = dump_stage_inputs(inputs)
        self.session.add(stage_item)
        self.session.flush()
        return stage_item

    def claim_schedule(self, stage_item_id: int) -> None:
        """Insert the generation marker; a second claim for the same item is a Conflict."""
        self.session.add(ScheduleClaim(stage_item_id=stage_item_id))
        try:
            self.session.flush()
        except IntegrityError as e:
            self.session.rollback()
            logger.warning("Schedule claim for stage item %s lost to a concurrent generation", stage_item_id)
            raise Conflict(
                "Rounds already generated for this stage item", code="SCHEDULE_ALREADY_GENERATED"
            ) from e

    def insert_rounds(self, rounds: List[Round]) -> List[Round]:
        self.session.add_all(rounds)
        self.session.flush()  # assigns ids
        return rounds

    def insert_matches(self, matches: List[Match]) -> List[Match]:
        self.session.add_all(matches)
        self.session.flush()
        return matches

    def update_match_conditional(self, match_id: int, patch: Dict[str, Any], only_if_open: bool = True) -> int:
        """
        Compare-and-set on a match row.

        With only_if_open the update applies only while end_time IS NULL, so
        of two concurrent writers ending the same match exactly one sees
        rowcount 1.
        """
        stmt = update(Match).where(Match.id == match_id)
        if only_if_open:
            stmt = stmt.where(Match.end_time.is_(None), Match.status != MATCH_ENDED)
        stmt = stmt.values(**patch).execution_options(synchronize_session=False)
        result = self.session.execute(stmt)
        return result.rowcount

    def increment_team_stats(self, team_id: int, deltas: Dict[str, int]) -> int:
        """UPDATE team SET col = col + delta; never read-modify-write."""
        values = {}
        for field, delta in deltas.items():
            if field not in STAT_FIELDS:
                raise InvalidArgument(f"Unknown team stat: {field}")
            if delta:
                values[field] = getattr(Team, field) + delta
        if not values:
            return 0
        stmt = update(Team).where(Team.id == team_id).values(**values).execution_options(synchronize_session=False)
        return self.session.execute(stmt).rowcount

    def lock_team_stats(self, tournament_id: int) -> int:
        """
        SELECT ... FOR UPDATE on the tournament's team rows.

        Held until commit/rollback, so stat increments from other transactions
        wait until then. SQLite has no row locks and renders no FOR UPDATE.
        """
        stmt = select(Team.id).where(Team.tournament_id == tournament_id).with_for_update()
        return len(self.session.exec(stmt).all())

    def reset_team_stats(self, tournament_id: int) -> int:
        stmt = (
            update(Team)
            .where(Team.tournament_id == tournament_id)
            .values(**{field: 0 for field in STAT_FIELDS})
            .execution_options(synchronize_session=False)
        )
        return self.session.execute(stmt).rowcount

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()
