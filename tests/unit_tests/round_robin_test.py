from itertools import combinations

from stageflow.logic.scheduling.round_robin import (
    get_number_of_rounds_to_create_round_robin,
    get_round_robin_pairs_by_matchday,
)
from stageflow.utils.id_types import TeamId


def test_number_of_rounds_round_robin() -> None:
    assert get_number_of_rounds_to_create_round_robin(0) == 0
    assert get_number_of_rounds_to_create_round_robin(1) == 0
    assert get_number_of_rounds_to_create_round_robin(2) == 1
    assert get_number_of_rounds_to_create_round_robin(4) == 3
    assert get_number_of_rounds_to_create_round_robin(5) == 5


def test_four_teams_meet_once() -> None:
    team_ids = [TeamId(team_id) for team_id in (10, 20, 30, 40)]
    pairs_by_matchday = get_round_robin_pairs_by_matchday(team_ids)

    assert list(pairs_by_matchday) == [1, 2, 3]
    assert pairs_by_matchday[1] == [(10, 40), (20, 30)]
    played = [frozenset(pair) for pairs in pairs_by_matchday.values() for pair in pairs]
    assert sorted(played, key=sorted) == sorted(
        (frozenset(pair) for pair in combinations(team_ids, 2)), key=sorted
    )


def test_odd_team_count_sits_one_team_out() -> None:
    team_ids = [TeamId(team_id) for team_id in (1, 2, 3)]
    pairs_by_matchday = get_round_robin_pairs_by_matchday(team_ids)

    assert len(pairs_by_matchday) == 3
    assert all(len(pairs) == 1 for pairs in pairs_by_matchday.values())
    assert {frozenset(pairs[0]) for pairs in pairs_by_matchday.values()} == {
        frozenset((1, 2)),
        frozenset((1, 3)),
        frozenset((2, 3)),
    }


def test_repeats_offset_matchdays() -> None:
    team_ids = [TeamId(1), TeamId(2)]
    assert get_round_robin_pairs_by_matchday(team_ids, repeats=3) == {
        1: [(1, 2)],
        2: [(1, 2)],
        3: [(1, 2)],
    }


def test_too_few_teams() -> None:
    assert get_round_robin_pairs_by_matchday([TeamId(1)]) == {}
