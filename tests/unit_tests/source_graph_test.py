import pytest

from stageflow.logic.progression.knockout import get_team_updates_for_dependent_matches
from stageflow.logic.scheduling.source_graph import SourceEdge, SourceGraph
from stageflow.models.db.match import MatchSide, Outcome
from stageflow.utils.errors import CyclicSourceError
from stageflow.utils.id_types import MatchId
from tests.unit_tests.shared import build_finished_match, build_match


def test_children_from_id_pointers_default_to_winner() -> None:
    graph = SourceGraph(
        [
            build_match(10),
            build_match(11, home_source_match_id=10),
            build_match(12, away_source_match_id=10, away_source_outcome=Outcome.LOSER),
        ]
    )

    assert graph.children_of(MatchId(10)) == [
        SourceEdge(parent_id=10, child_id=11, side=MatchSide.HOME, outcome=Outcome.WINNER),
        SourceEdge(parent_id=10, child_id=12, side=MatchSide.AWAY, outcome=Outcome.LOSER),
    ]
    assert graph.children_of(MatchId(11)) == []


def test_children_from_stable_pointers() -> None:
    graph = SourceGraph(
        [
            build_match(1, round=1, bracket_pos=1),
            build_match(2, round=1, bracket_pos=2),
            build_match(
                3,
                round=2,
                bracket_pos=1,
                home_source_round=1,
                home_source_bracket_pos=1,
                away_source_round=1,
                away_source_bracket_pos=2,
            ),
        ]
    )

    assert [(edge.child_id, edge.side) for edge in graph.children_of(MatchId(1))] == [
        (3, MatchSide.HOME)
    ]
    assert [(edge.child_id, edge.side) for edge in graph.children_of(MatchId(2))] == [
        (3, MatchSide.AWAY)
    ]


def test_both_pointers_to_the_same_parent_give_one_edge() -> None:
    graph = SourceGraph(
        [
            build_match(1, round=1, bracket_pos=1),
            build_match(
                2,
                round=2,
                bracket_pos=1,
                home_source_match_id=1,
                home_source_round=1,
                home_source_bracket_pos=1,
            ),
        ]
    )
    assert len(graph.children_of(MatchId(1))) == 1


def test_acyclic_bracket_validates() -> None:
    graph = SourceGraph(
        [
            build_match(1),
            build_match(2),
            build_match(3, home_source_match_id=1, away_source_match_id=2),
        ]
    )
    assert graph.find_cycle() is None
    graph.validate_acyclic()


def test_cycle_is_rejected() -> None:
    graph = SourceGraph(
        [
            build_match(1, round=1, bracket_pos=1, home_source_round=1, home_source_bracket_pos=2),
            build_match(2, round=1, bracket_pos=2, home_source_match_id=3),
            build_match(3, round=2, bracket_pos=1, home_source_match_id=2),
        ]
    )

    assert graph.find_cycle() == [2, 3, 2]
    with pytest.raises(CyclicSourceError, match="2 -> 3 -> 2"):
        graph.validate_acyclic()


def test_updates_fill_only_empty_sides() -> None:
    finished = build_finished_match(10, 5, 7, 2, 1)
    stage_matches = [
        finished,
        build_match(11, home_source_match_id=10, home_source_outcome=Outcome.WINNER),
        build_match(12, team_b_id=9, away_source_match_id=10, away_source_outcome=Outcome.LOSER),
        build_match(13, away_source_match_id=10, away_source_outcome=Outcome.LOSER),
    ]

    assert get_team_updates_for_dependent_matches(finished, stage_matches) == {
        11: {MatchSide.HOME: 5},
        13: {MatchSide.AWAY: 7},
    }


def test_draw_updates_nothing() -> None:
    finished = build_finished_match(10, 5, 7, 1, 1)
    stage_matches = [finished, build_match(11, home_source_match_id=10)]
    assert get_team_updates_for_dependent_matches(finished, stage_matches) == {}
