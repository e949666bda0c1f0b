from typing import Any

import pytest

from stageflow.logic.ranking.standings import recalculate_standings_for_stage
from stageflow.logic.scheduling.seeding import seed_next_knockout_if_configured
from stageflow.models.db.match import Match, MatchSide, MatchStatus, Outcome
from stageflow.models.db.stage import Stage, StageKind
from stageflow.sql.matches import get_matches_for_stage, sql_finish_match
from tests.integration_tests.sql import (
    count_rows,
    inserted_finished_match,
    inserted_groups,
    inserted_match,
    inserted_participant,
    inserted_stage,
    inserted_tournament,
)


async def _finished_groups_and_knockout(
    knockout_config: dict[str, Any] | None = None,
) -> tuple[Stage, Stage]:
    """Group A ends 1, 2, 3 and group B ends 4, 5, 6."""
    tournament = await inserted_tournament()
    groups_stage = await inserted_stage(tournament.id, StageKind.GROUPS, 1)
    knockout = await inserted_stage(
        tournament.id,
        StageKind.KNOCKOUT,
        2,
        config={"from_stage_id": groups_stage.id, **(knockout_config or {})},
    )
    group_a, group_b = await inserted_groups(groups_stage.id, 2)
    for group, (first, second, third) in ((group_a, (1, 2, 3)), (group_b, (4, 5, 6))):
        await inserted_finished_match(groups_stage, first, second, 2, 0, group_id=group.id)
        await inserted_finished_match(groups_stage, first, third, 1, 0, group_id=group.id)
        await inserted_finished_match(groups_stage, second, third, 1, 0, group_id=group.id)

    await recalculate_standings_for_stage(groups_stage.id)
    return groups_stage, knockout


def _first_round(matches: list[Match]) -> list[tuple[int | None, int | None]]:
    return [(match.team_a_id, match.team_b_id) for match in matches if match.round == 1]


@pytest.mark.asyncio(loop_scope="session")
async def test_two_groups_seed_semi_finals_and_final() -> None:
    groups_stage, knockout = await _finished_groups_and_knockout()

    created = await seed_next_knockout_if_configured(groups_stage.id)

    matches = await get_matches_for_stage(knockout.id)
    assert [match.id for match in created] == [match.id for match in matches]
    assert [match.bracket_position for match in matches] == [(1, 1), (1, 2), (2, 1)]
    assert _first_round(matches) == [(1, 5), (4, 2)]

    semi_final_1, semi_final_2, final = matches
    assert (final.team_a_id, final.team_b_id) == (None, None)
    assert final.home_source_match_id == semi_final_1.id
    assert final.away_source_match_id == semi_final_2.id
    assert final.home_source_outcome is Outcome.WINNER
    assert final.away_source_outcome is Outcome.WINNER
    assert final.get_source_position(MatchSide.HOME) == (1, 1)
    assert final.get_source_position(MatchSide.AWAY) == (1, 2)


@pytest.mark.asyncio(loop_scope="session")
async def test_seeding_happens_once() -> None:
    groups_stage, knockout = await _finished_groups_and_knockout()

    await seed_next_knockout_if_configured(groups_stage.id)
    assert await seed_next_knockout_if_configured(groups_stage.id) == []

    assert await count_rows("matches", stage_id=knockout.id) == 3


@pytest.mark.asyncio(loop_scope="session")
async def test_semis_cross_pairs_group_winners() -> None:
    groups_stage, knockout = await _finished_groups_and_knockout({"semis_cross": "A1-B1"})

    await seed_next_knockout_if_configured(groups_stage.id)

    assert _first_round(await get_matches_for_stage(knockout.id)) == [(1, 4), (2, 5)]


@pytest.mark.asyncio(loop_scope="session")
async def test_three_advancers_per_group_get_byes() -> None:
    groups_stage, knockout = await _finished_groups_and_knockout({"advancers_per_group": 3})

    await seed_next_knockout_if_configured(groups_stage.id)

    matches = await get_matches_for_stage(knockout.id)
    assert len(matches) == 5
    assert _first_round(matches) == [(5, 3), (2, 6)]
    first_round_ids = {match.bracket_pos: match.id for match in matches if match.round == 1}
    second_round = [match for match in matches if match.round == 2]
    assert [(match.team_a_id, match.away_source_match_id) for match in second_round] == [
        (1, first_round_ids[2]),
        (4, first_round_ids[4]),
    ]


@pytest.mark.asyncio(loop_scope="session")
async def test_unfinished_source_stage_is_not_seeded() -> None:
    groups_stage, knockout = await _finished_groups_and_knockout()
    await inserted_match(groups_stage, team_a_id=1, team_b_id=4)

    assert await seed_next_knockout_if_configured(groups_stage.id) == []
    assert await count_rows("matches", stage_id=knockout.id) == 0


@pytest.mark.asyncio(loop_scope="session")
async def test_unlinked_next_stage_is_not_seeded() -> None:
    tournament = await inserted_tournament()
    league = await inserted_stage(tournament.id, StageKind.LEAGUE, 1)
    await inserted_stage(tournament.id, StageKind.KNOCKOUT, 2, config={"from_stage_id": 999})
    await inserted_finished_match(league, 1, 2, 1, 0)

    assert await seed_next_knockout_if_configured(league.id) == []
    assert await count_rows("matches") == 1


@pytest.mark.asyncio(loop_scope="session")
async def test_reseed_replaces_unplayed_knockout_matches() -> None:
    groups_stage, knockout = await _finished_groups_and_knockout()
    original = await seed_next_knockout_if_configured(groups_stage.id)

    reseeded = await seed_next_knockout_if_configured(groups_stage.id, reseed=True)

    assert len(reseeded) == 3
    assert {match.id for match in reseeded}.isdisjoint(match.id for match in original)
    assert await count_rows("matches", stage_id=knockout.id) == 3


@pytest.mark.asyncio(loop_scope="session")
async def test_reseed_is_refused_once_a_knockout_match_is_played() -> None:
    groups_stage, knockout = await _finished_groups_and_knockout()
    original = await seed_next_knockout_if_configured(groups_stage.id)
    await sql_finish_match(original[0].id, 1, 0, original[0].team_a_id)

    assert await seed_next_knockout_if_configured(groups_stage.id, reseed=True) == []

    matches = await get_matches_for_stage(knockout.id)
    assert [match.id for match in matches] == [match.id for match in original]
    assert matches[0].status is MatchStatus.FINISHED


@pytest.mark.asyncio(loop_scope="session")
async def test_league_seeds_top_advancers_total() -> None:
    tournament = await inserted_tournament()
    league = await inserted_stage(tournament.id, StageKind.LEAGUE, 1)
    knockout = await inserted_stage(
        tournament.id,
        StageKind.KNOCKOUT,
        2,
        config={"fromStageId": league.id, "advancers_total": 4},
    )
    for seed, team_id in enumerate((10, 20, 30, 40, 50), start=1):
        await inserted_participant(tournament.id, team_id, seed=seed)
    await inserted_finished_match(league, 50, 10, 3, 0)

    await recalculate_standings_for_stage(league.id)
    await seed_next_knockout_if_configured(league.id)

    # Table: 50, 20, 30, 40, 10.
    assert _first_round(await get_matches_for_stage(knockout.id)) == [(50, 40), (20, 30)]


@pytest.mark.asyncio(loop_scope="session")
async def test_reseed_without_results_uses_baseline_standings() -> None:
    tournament = await inserted_tournament()
    league = await inserted_stage(tournament.id, StageKind.LEAGUE, 1)
    knockout = await inserted_stage(
        tournament.id, StageKind.KNOCKOUT, 2, config={"from_stage_id": league.id}
    )
    for seed, team_id in enumerate((10, 20, 30), start=1):
        await inserted_participant(tournament.id, team_id, seed=seed)

    created = await seed_next_knockout_if_configured(
        league.id, reseed=True, require_complete=False
    )

    assert len(created) == 2
    assert _first_round(await get_matches_for_stage(knockout.id)) == [(20, 30)]


@pytest.mark.asyncio(loop_scope="session")
async def test_reseed_with_a_team_declared_twice() -> None:
    tournament = await inserted_tournament()
    league = await inserted_stage(tournament.id, StageKind.LEAGUE, 1)
    knockout = await inserted_stage(
        tournament.id, StageKind.KNOCKOUT, 2, config={"from_stage_id": league.id}
    )
    for seed, team_id in enumerate((10, 20, 30, 10), start=1):
        await inserted_participant(tournament.id, team_id, seed=seed)

    created = await seed_next_knockout_if_configured(
        league.id, reseed=True, require_complete=False
    )

    assert len(created) == 2
    assert await count_rows("stage_standings", stage_id=league.id) == 3
    assert _first_round(await get_matches_for_stage(knockout.id)) == [(20, 30)]
