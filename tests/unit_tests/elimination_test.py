from collections import Counter

from stageflow.logic.scheduling.elimination import (
    BracketMatchPlan,
    build_seeded_bracket,
    build_two_group_bracket,
    get_bracket_size,
    get_number_of_rounds_to_create_single_elimination,
    get_seed_order,
    get_seeded_entrants_from_groups,
)
from stageflow.models.db.stage import SemisCross
from stageflow.utils.id_types import TeamId


def _teams(*team_ids: int) -> list[TeamId]:
    return [TeamId(team_id) for team_id in team_ids]


def test_bracket_size() -> None:
    assert get_bracket_size(0) == 0
    assert get_bracket_size(1) == 1
    assert get_bracket_size(2) == 2
    assert get_bracket_size(5) == 8
    assert get_bracket_size(8) == 8
    assert get_bracket_size(9) == 16


def test_seed_order() -> None:
    assert get_seed_order(2) == [1, 2]
    assert get_seed_order(4) == [1, 4, 2, 3]
    assert get_seed_order(8) == [1, 8, 4, 5, 2, 7, 3, 6]


def test_number_of_rounds_single_elimination() -> None:
    assert get_number_of_rounds_to_create_single_elimination(0) == 0
    assert get_number_of_rounds_to_create_single_elimination(1) == 0
    assert get_number_of_rounds_to_create_single_elimination(2) == 1
    assert get_number_of_rounds_to_create_single_elimination(3) == 2
    assert get_number_of_rounds_to_create_single_elimination(8) == 3
    assert get_number_of_rounds_to_create_single_elimination(9) == 4


def test_fewer_than_two_entrants_plan_nothing() -> None:
    assert build_seeded_bracket([]) == []
    assert build_seeded_bracket(_teams(1)) == []


def test_two_entrants_play_a_final() -> None:
    assert build_seeded_bracket(_teams(1, 2)) == [
        BracketMatchPlan(round=1, bracket_pos=1, team_a_id=1, team_b_id=2)
    ]


def test_eight_entrants_make_a_full_bracket() -> None:
    plans = build_seeded_bracket(_teams(*range(1, 9)))

    assert len(plans) == 7
    first_round = [(plan.team_a_id, plan.team_b_id) for plan in plans if plan.round == 1]
    assert first_round == [(1, 8), (4, 5), (2, 7), (3, 6)]

    later_rounds = [plan for plan in plans if plan.round > 1]
    assert all(plan.team_a_id is None and plan.team_b_id is None for plan in later_rounds)
    assert [(plan.position, plan.home_source, plan.away_source) for plan in later_rounds] == [
        ((2, 1), (1, 1), (1, 2)),
        ((2, 2), (1, 3), (1, 4)),
        ((3, 1), (2, 1), (2, 2)),
    ]


def test_five_entrants_give_top_seeds_a_bye() -> None:
    plans = build_seeded_bracket(_teams(11, 12, 13, 14, 15))

    assert Counter(plan.round for plan in plans) == {1: 1, 2: 2, 3: 1}
    assert plans == [
        BracketMatchPlan(round=1, bracket_pos=2, team_a_id=14, team_b_id=15),
        BracketMatchPlan(round=2, bracket_pos=1, team_a_id=11, away_source=(1, 2)),
        BracketMatchPlan(round=2, bracket_pos=2, team_a_id=12, team_b_id=13),
        BracketMatchPlan(round=3, bracket_pos=1, home_source=(2, 1), away_source=(2, 2)),
    ]


def test_three_entrants() -> None:
    assert build_seeded_bracket(_teams(1, 2, 3)) == [
        BracketMatchPlan(round=1, bracket_pos=2, team_a_id=2, team_b_id=3),
        BracketMatchPlan(round=2, bracket_pos=1, team_a_id=1, away_source=(1, 2)),
    ]


def test_two_groups_crossed_semi_finals() -> None:
    plans = build_two_group_bracket(_teams(1, 2), _teams(4, 5))

    assert plans == [
        BracketMatchPlan(round=1, bracket_pos=1, team_a_id=1, team_b_id=5),
        BracketMatchPlan(round=1, bracket_pos=2, team_a_id=4, team_b_id=2),
        BracketMatchPlan(round=2, bracket_pos=1, home_source=(1, 1), away_source=(1, 2)),
    ]
    # Tier seeding of the same four teams produces the identical bracket.
    assert build_seeded_bracket(get_seeded_entrants_from_groups([_teams(1, 2), _teams(4, 5)])) == (
        plans
    )


def test_two_groups_winners_meet_in_semi_final() -> None:
    plans = build_two_group_bracket(_teams(1, 2), _teams(4, 5), SemisCross.A1_B1)
    assert [(plan.team_a_id, plan.team_b_id) for plan in plans if plan.round == 1] == [
        (1, 4),
        (2, 5),
    ]


def test_seeded_entrants_are_interleaved_by_tier() -> None:
    assert get_seeded_entrants_from_groups([_teams(1, 2), _teams(4, 5), _teams(7)]) == [
        1,
        4,
        7,
        2,
        5,
    ]
    assert get_seeded_entrants_from_groups([]) == []
