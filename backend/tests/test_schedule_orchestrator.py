"""
Tests for schedule generation and persistence.

Verifies that generate_schedule:
- Persists rounds then matches with back-filled round ids
- Refuses to run twice for a stage item
- Writes nothing when preconditions fail
- Rolls back fully on storage failure
"""

import pytest
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, func, select

from tourney.errors import Conflict, Internal, NotFound, PreconditionFailed
from tourney.models.match import Match
from tourney.models.round import Round
from tourney.models.schedule_claim import ScheduleClaim
from tourney.models.team import Team
from tourney.models.tournament import Tournament
from tourney.services.schedule_orchestrator import generate_schedule, list_round_matches, list_rounds


def _count(session: Session, model) -> int:
    return session.exec(select(func.count(model.id))).one()


def test_league_four_teams(session, repo, make_stage_item):
    setup = make_stage_item()

    result = generate_schedule(repo, setup.stage_item_id)

    assert result.rounds_created == 3
    assert result.matches_created == 6
    assert result.to_dict()["stage_type"] == "league"

    rounds = list_rounds(repo, setup.stage_item_id)
    assert [r.number for r in rounds] == [1, 2, 3]
    assert rounds[0].name == "Table A - Round 1"

    for rnd in rounds:
        matches = list_round_matches(repo, rnd.id)
        assert len(matches) == 2
        for m in matches:
            assert m.round_id == rnd.id
            assert m.stage_item_id == setup.stage_item_id
            assert m.status == "scheduled"
            assert (m.score_side1, m.score_side2) == (0, 0)
            assert m.winner_id is None
            assert m.end_time is None
            assert m.participant1_name and m.participant2_name


def test_first_round_follows_seed_order(session, repo, make_stage_item):
    setup = make_stage_item()
    a, b, c, d = setup.team_ids

    generate_schedule(repo, setup.stage_item_id)

    first = list_rounds(repo, setup.stage_item_id)[0]
    pairs = [(m.participant1_id, m.participant2_id) for m in list_round_matches(repo, first.id)]
    assert pairs == [(a, d), (b, c)]


def test_league_odd_teams_byes(session, repo, make_stage_item):
    setup = make_stage_item(team_names=("A", "B", "C", "D", "E"))

    result = generate_schedule(repo, setup.stage_item_id)

    assert result.rounds_created == 5
    assert result.matches_created == 10
    assert _count(session, Match) == 10


def test_league_multiple_cycles(session, repo, make_stage_item):
    setup = make_stage_item(config={"teamsCount": 4, "rounds": 2})

    result = generate_schedule(repo, setup.stage_item_id)

    assert result.rounds_created == 6
    assert result.matches_created == 12
    names = [r.name for r in list_rounds(repo, setup.stage_item_id)]
    assert names[-1] == "Table A - Cycle 2, Round 3"


def test_groups_stage_uses_round_robin(session, repo, make_stage_item):
    setup = make_stage_item(stage_type="groups", config={"groupsCount": 2, "teamsPerGroup": 4})

    result = generate_schedule(repo, setup.stage_item_id)

    assert (result.rounds_created, result.matches_created) == (3, 6)


def test_knockout_single_match(session, repo, make_stage_item):
    setup = make_stage_item(stage_type="knockout", config={"thirdPlaceMatch": True}, item_name="Bracket")

    result = generate_schedule(repo, setup.stage_item_id)

    assert (result.rounds_created, result.matches_created) == (1, 1)
    rnd = list_rounds(repo, setup.stage_item_id)[0]
    assert rnd.name == "Bracket"
    match = list_round_matches(repo, rnd.id)[0]
    assert (match.participant1_id, match.participant2_id) == tuple(setup.team_ids[:2])


def test_generate_twice_conflicts(session, repo, make_stage_item):
    setup = make_stage_item()
    generate_schedule(repo, setup.stage_item_id)
    rounds_before, matches_before = _count(session, Round), _count(session, Match)

    with pytest.raises(Conflict):
        generate_schedule(repo, setup.stage_item_id)

    assert _count(session, Round) == rounds_before
    assert _count(session, Match) == matches_before


def test_single_team_writes_nothing(session, repo, make_stage_item):
    setup = make_stage_item(team_names=("Solo",))

    with pytest.raises(PreconditionFailed):
        generate_schedule(repo, setup.stage_item_id)

    assert _count(session, Round) == 0
    assert _count(session, Match) == 0
    assert _count(session, ScheduleClaim) == 0


def test_unassigned_stage_item_is_insufficient(session, repo, make_stage_item):
    setup = make_stage_item(seed=False)

    with pytest.raises(PreconditionFailed):
        generate_schedule(repo, setup.stage_item_id)


def test_derived_inputs_are_not_scheduled(session, repo, make_stage_item):
    setup = make_stage_item(team_names=("A", "B"))
    item = repo.get_stage_item(setup.stage_item_id)
    item.inputs_json = item.inputs_json + [{"source_type": "winner", "source_match_id": 1}]
    session.add(item)
    session.commit()

    result = generate_schedule(repo, setup.stage_item_id)

    assert result.matches_created == 1


def test_missing_stage_item(repo):
    with pytest.raises(NotFound):
        generate_schedule(repo, 999)


def test_team_from_other_tournament(session, repo, make_stage_item):
    setup = make_stage_item(team_names=("A", "B"))
    other = Tournament(name="Other Cup")
    session.add(other)
    session.commit()
    stranger = Team(tournament_id=other.id, name="Stranger")
    session.add(stranger)
    session.commit()

    item = repo.get_stage_item(setup.stage_item_id)
    item.inputs_json = item.inputs_json + [{"source_type": "direct", "team_id": stranger.id}]
    session.add(item)
    session.commit()

    with pytest.raises(NotFound):
        generate_schedule(repo, setup.stage_item_id)
    assert _count(session, Round) == 0


def test_claim_held_by_concurrent_run(session, repo, make_stage_item):
    """A claim without rounds models a concurrent run that got there first."""
    setup = make_stage_item()
    session.add(ScheduleClaim(stage_item_id=setup.stage_item_id))
    session.commit()

    with pytest.raises(Conflict):
        generate_schedule(repo, setup.stage_item_id)

    assert _count(session, Round) == 0
    assert _count(session, Match) == 0


def test_match_insert_failure_rolls_back_rounds(session, repo, make_stage_item, monkeypatch):
    setup = make_stage_item()

    def boom(matches):
        raise SQLAlchemyError("disk full")

    monkeypatch.setattr(repo, "insert_matches", boom)

    with pytest.raises(Internal):
        generate_schedule(repo, setup.stage_item_id)

    assert _count(session, Round) == 0
    assert _count(session, ScheduleClaim) == 0

    # Nothing left behind, so a retry just works
    monkeypatch.undo()
    result = generate_schedule(repo, setup.stage_item_id)
    assert result.matches_created == 6


def test_list_rounds_unknown_stage_item(repo):
    with pytest.raises(NotFound):
        list_rounds(repo, 404)


def test_list_round_matches_unknown_round(repo):
    with pytest.raises(NotFound):
        list_round_matches(repo, 404)
