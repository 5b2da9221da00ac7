"""
Tests for circle-method round-robin generation.
"""

from collections import Counter
from itertools import combinations

import pytest

from tourney.errors import InvalidArgument, PreconditionFailed
from tourney.services.round_robin import generate_round_robin, rounds_per_cycle


def _pair_counts(plan):
    return Counter(frozenset((m.participant1_id, m.participant2_id)) for m in plan.matches)


def test_four_team_pairings_match_circle_method():
    """A fixed, the rest rotate clockwise."""
    plan = generate_round_robin(["A", "B", "C", "D"])

    assert plan.pairings() == [
        [("A", "D"), ("B", "C")],
        [("A", "C"), ("D", "B")],
        [("A", "B"), ("C", "D")],
    ]


@pytest.mark.parametrize("n", [2, 4, 6, 8, 10])
def test_even_team_count_one_cycle(n):
    teams = list(range(1, n + 1))
    plan = generate_round_robin(teams)

    assert len(plan.rounds) == n - 1
    assert len(plan.matches) == n * (n - 1) // 2

    for idx in range(len(plan.rounds)):
        playing = [t for m in plan.matches_in_round(idx) for t in (m.participant1_id, m.participant2_id)]
        assert sorted(playing) == teams  # everyone exactly once per round

    appearances = Counter(t for m in plan.matches for t in (m.participant1_id, m.participant2_id))
    assert all(appearances[t] == n - 1 for t in teams)

    counts = _pair_counts(plan)
    assert set(counts) == {frozenset(p) for p in combinations(teams, 2)}
    assert set(counts.values()) == {1}


@pytest.mark.parametrize("n", [3, 5, 7, 9])
def test_odd_team_count_has_one_bye_per_round(n):
    teams = list(range(1, n + 1))
    plan = generate_round_robin(teams)

    assert len(plan.rounds) == n
    sat_out = Counter()
    for idx in range(len(plan.rounds)):
        round_matches = plan.matches_in_round(idx)
        assert len(round_matches) == n // 2
        playing = {t for m in round_matches for t in (m.participant1_id, m.participant2_id)}
        resting = set(teams) - playing
        assert len(resting) == 1
        sat_out.update(resting)

    assert all(sat_out[t] == 1 for t in teams)
    assert set(_pair_counts(plan).values()) == {1}
    assert len(plan.matches) == n * (n - 1) // 2


def test_multiple_cycles_repeat_pattern_with_monotonic_numbers():
    plan = generate_round_robin([1, 2, 3, 4], cycles=2, item_name="League")

    assert [r.number for r in plan.rounds] == [1, 2, 3, 4, 5, 6]
    assert plan.rounds[0].name == "League - Cycle 1, Round 1"
    assert plan.rounds[3].name == "League - Cycle 2, Round 1"
    assert plan.pairings()[3:] == plan.pairings()[:3]
    assert set(_pair_counts(plan).values()) == {2}


def test_single_cycle_round_names():
    plan = generate_round_robin([1, 2, 3], item_name="Table A")

    assert [r.name for r in plan.rounds] == ["Table A - Round 1", "Table A - Round 2", "Table A - Round 3"]


def test_generation_is_deterministic():
    teams = [7, 3, 11, 5, 2]
    assert generate_round_robin(teams, cycles=2) == generate_round_robin(teams, cycles=2)


def test_input_order_changes_schedule():
    assert generate_round_robin([1, 2, 3, 4]).pairings() != generate_round_robin([4, 3, 2, 1]).pairings()


@pytest.mark.parametrize("teams", [[], [1]])
def test_insufficient_teams(teams):
    with pytest.raises(PreconditionFailed):
        generate_round_robin(teams)


def test_cycles_must_be_positive():
    with pytest.raises(InvalidArgument):
        generate_round_robin([1, 2], cycles=0)


@pytest.mark.parametrize("n,expected", [(2, 1), (3, 3), (4, 3), (5, 5), (6, 5)])
def test_rounds_per_cycle(n, expected):
    assert rounds_per_cycle(n) == expected


@pytest.mark.parametrize("n", [2, 3, 6, 7])
@pytest.mark.parametrize("cycles", [1, 3])
def test_plan_size_follows_rounds_per_cycle(n, cycles):
    plan = generate_round_robin(list(range(n)), cycles=cycles)

    assert len(plan.rounds) == cycles * rounds_per_cycle(n)
    assert plan.rounds[-1].number == cycles * rounds_per_cycle(n)
