from collections.abc import Iterable

from stageflow.models.db.match import Match, MatchStatus
from stageflow.models.db.stage import StageKind
from stageflow.models.db.standing import StageStandingInsertable, TeamRecord
from stageflow.sql.matches import get_matches_for_stage
from stageflow.sql.participants import get_participants_for_stage
from stageflow.sql.stages import sql_get_stage
from stageflow.sql.standings import (
    sql_create_standings,
    sql_replace_standings_for_group,
    sql_standings_exist,
)
from stageflow.utils.id_types import StageId, TeamId
from stageflow.utils.logging import logger

POINTS_FOR_WIN = 3
POINTS_FOR_DRAW = 1
POINTS_FOR_LOSS = 0

# League stages have no group rows, their matches and participants are bucketed as group 0.
LEAGUE_GROUP_KEY = 0


def get_group_key(group_id: int | None) -> int:
    return group_id if group_id is not None else LEAGUE_GROUP_KEY


def bucket_matches_by_group(matches: Iterable[Match]) -> dict[int, list[Match]]:
    buckets: dict[int, list[Match]] = {}
    for match in matches:
        buckets.setdefault(get_group_key(match.group_id), []).append(match)
    return buckets


def _record_result(record: TeamRecord, goals_for: int, goals_against: int) -> None:
    record.played += 1
    record.gf += goals_for
    record.ga += goals_against
    if goals_for > goals_against:
        record.won += 1
        record.points += POINTS_FOR_WIN
    elif goals_for < goals_against:
        record.lost += 1
        record.points += POINTS_FOR_LOSS
    else:
        record.drawn += 1
        record.points += POINTS_FOR_DRAW


def calculate_team_records(
    matches: Iterable[Match], initial_team_ids: Iterable[TeamId] = ()
) -> list[TeamRecord]:
    """
    Accumulate the table of one group, ranked by points, goal difference and goals scored.

    Teams that are still tied after those three keys keep their first appearance order:
    `initial_team_ids` first, then teams in the order of the matches.
    """
    records: dict[TeamId, TeamRecord] = {
        team_id: TeamRecord(team_id=team_id) for team_id in initial_team_ids
    }

    for match in matches:
        if match.team_a_id is None or match.team_b_id is None:
            continue

        score_a = match.team_a_score or 0
        score_b = match.team_b_score or 0
        record_a = records.setdefault(match.team_a_id, TeamRecord(team_id=match.team_a_id))
        record_b = records.setdefault(match.team_b_id, TeamRecord(team_id=match.team_b_id))
        _record_result(record_a, score_a, score_b)
        _record_result(record_b, score_b, score_a)

    return sorted(
        records.values(), key=lambda record: (-record.points, -record.gd, -record.gf)
    )


def get_standings_rows(
    stage_id: StageId, group_key: int, records: list[TeamRecord]
) -> list[StageStandingInsertable]:
    return [
        StageStandingInsertable(
            stage_id=stage_id,
            group_id=group_key,
            team_id=record.team_id,
            played=record.played,
            won=record.won,
            drawn=record.drawn,
            lost=record.lost,
            gf=record.gf,
            ga=record.ga,
            gd=record.gd,
            points=record.points,
            rank=rank,
        )
        for rank, record in enumerate(records, start=1)
    ]


async def recalculate_standings_for_stage(stage_id: StageId) -> None:
    stage = await sql_get_stage(stage_id)
    if stage.kind is StageKind.KNOCKOUT:
        logger.debug("Stage %s is a knockout stage, it has no standings", stage_id)
        return

    finished_matches = await get_matches_for_stage(stage_id, MatchStatus.FINISHED)
    buckets = bucket_matches_by_group(finished_matches)

    participants_by_group: dict[int, list[TeamId]] = {}
    for participant in await get_participants_for_stage(stage):
        group_key = get_group_key(
            participant.group_id if stage.kind is StageKind.GROUPS else None
        )
        participants_by_group.setdefault(group_key, []).append(participant.team_id)

    for group_key in sorted(set(buckets) | set(participants_by_group)):
        records = calculate_team_records(
            buckets.get(group_key, []), participants_by_group.get(group_key, [])
        )
        await sql_replace_standings_for_group(
            stage_id, group_key, get_standings_rows(stage_id, group_key, records)
        )

    logger.info(
        "Recalculated standings for stage %s from %s finished matches",
        stage_id,
        len(finished_matches),
    )


async def ensure_baseline_standings(stage_id: StageId) -> bool:
    """
    Insert zero rows for every participant of a stage that has no standings yet.

    Participants are ranked by seed (unseeded last), then team id. Returns whether the stage
    has standings afterwards.
    """
    if await sql_standings_exist(stage_id):
        return True

    stage = await sql_get_stage(stage_id)
    if stage.kind is StageKind.KNOCKOUT:
        return False

    team_ids_by_group: dict[int, list[TeamId]] = {}
    for participant in await get_participants_for_stage(stage):
        group_key = get_group_key(
            participant.group_id if stage.kind is StageKind.GROUPS else None
        )
        team_ids = team_ids_by_group.setdefault(group_key, [])
        # A team may be declared more than once, it still gets a single row.
        if participant.team_id not in team_ids:
            team_ids.append(participant.team_id)

    rows = [
        row
        for group_key, team_ids in sorted(team_ids_by_group.items())
        for row in get_standings_rows(
            stage_id, group_key, [TeamRecord(team_id=team_id) for team_id in team_ids]
        )
    ]
    await sql_create_standings(rows)
    logger.info("Created baseline standings for stage %s with %s teams", stage_id, len(rows))
    return len(rows) > 0
