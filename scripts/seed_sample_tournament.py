#!/usr/bin/env python3
import argparse
import asyncio

from stageflow.database import database
from stageflow.logic.progression.orchestrator import finish_match
from stageflow.logic.scheduling.round_robin import get_round_robin_pairs_by_matchday
from stageflow.models.db.match import MatchCreateBody
from stageflow.models.db.stage import GroupInsertable, StageInsertable, StageKind
from stageflow.models.db.tournament import TournamentInsertable, TournamentTeamInsertable
from stageflow.sql.matches import get_matches_for_stage, sql_create_match
from stageflow.sql.participants import sql_create_tournament_team
from stageflow.sql.stages import get_stages_for_tournament, sql_create_group, sql_create_stage
from stageflow.sql.tournaments import sql_create_tournament, sql_get_tournament
from stageflow.utils.id_types import TeamId, TournamentId
from stageflow.utils.types import assert_some


def determine_score(seed1: int, seed2: int, round_index: int) -> tuple[int, int]:
    if abs(seed1 - seed2) <= 1 and round_index % 3 == 2:
        return 1, 1
    if seed1 <= seed2:
        return 2, 1
    return 1, 2


async def create_groups_and_knockout(
    name: str, group_count: int, teams_per_group: int, advancers_per_group: int
) -> tuple[TournamentId, dict[TeamId, int]]:
    tournament_id = await sql_create_tournament(TournamentInsertable(name=name))
    groups_stage = await sql_create_stage(
        StageInsertable(tournament_id=tournament_id, name="Groups", kind=StageKind.GROUPS, ordering=1)
    )
    await sql_create_stage(
        StageInsertable(
            tournament_id=tournament_id,
            name="Knockout",
            kind=StageKind.KNOCKOUT,
            ordering=2,
            config={"from_stage_id": groups_stage.id, "advancers_per_group": advancers_per_group},
        )
    )

    seeds: dict[TeamId, int] = {}
    for group_index in range(group_count):
        group = await sql_create_group(
            GroupInsertable(
                stage_id=groups_stage.id,
                name=f"Group {chr(ord('A') + group_index)}",
                ordering=group_index,
            )
        )
        team_ids = [
            TeamId(group_index * teams_per_group + i + 1) for i in range(teams_per_group)
        ]
        for seed, team_id in enumerate(team_ids, start=1):
            seeds[team_id] = seed
            await sql_create_tournament_team(
                TournamentTeamInsertable(
                    tournament_id=tournament_id,
                    team_id=team_id,
                    stage_id=groups_stage.id,
                    group_id=group.id,
                    seed=seed,
                )
            )

        for matchday, pairs in get_round_robin_pairs_by_matchday(team_ids).items():
            for team_a_id, team_b_id in pairs:
                await sql_create_match(
                    MatchCreateBody(
                        tournament_id=tournament_id,
                        stage_id=groups_stage.id,
                        group_id=group.id,
                        matchday=matchday,
                        team_a_id=team_a_id,
                        team_b_id=team_b_id,
                    )
                )

    return tournament_id, seeds


async def play_until_completed(tournament_id: TournamentId, seeds: dict[TeamId, int]) -> None:
    """Enter results stage by stage until no playable match is left."""
    while True:
        tournament = await sql_get_tournament(tournament_id)
        playable = [
            match
            for stage in await get_stages_for_tournament(tournament_id)
            for match in await get_matches_for_stage(stage.id)
            if not match.is_finished
            and match.team_a_id is not None
            and match.team_b_id is not None
        ]
        if len(playable) < 1:
            print(f"Tournament {tournament.id} is {tournament.status.value}")
            return

        for index, match in enumerate(playable):
            score_a, score_b = determine_score(
                seeds[assert_some(match.team_a_id)],
                seeds[assert_some(match.team_b_id)],
                match.matchday or index,
            )
            # Knockout matches need a winner.
            if match.round is not None and score_a == score_b:
                score_a += 1
            result = await finish_match(match.id, score_a, score_b)
            print(f"Match {match.id}: {match.team_a_id} {score_a}-{score_b} {match.team_b_id} {result}")


async def async_main() -> None:
    parser = argparse.ArgumentParser(
        description="Seed a sample groups + knockout tournament and optionally play it through."
    )
    parser.add_argument("--name", type=str, default="Sample Cup")
    parser.add_argument("--groups", type=int, default=2)
    parser.add_argument("--teams-per-group", type=int, default=4)
    parser.add_argument("--advancers-per-group", type=int, default=2)
    parser.add_argument("--play", action="store_true", help="Enter results for every match.")
    args = parser.parse_args()

    if args.teams_per_group < 2:
        raise ValueError("--teams-per-group must be at least 2")

    await database.connect()
    try:
        tournament_id, seeds = await create_groups_and_knockout(
            args.name, args.groups, args.teams_per_group, args.advancers_per_group
        )
        print(f"Created tournament {tournament_id}")
        if args.play:
            await play_until_completed(tournament_id, seeds)
    finally:
        await database.disconnect()


if __name__ == "__main__":
    asyncio.run(async_main())
