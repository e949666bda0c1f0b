from heliclockter import datetime_utc

from stageflow.database import database
from stageflow.models.db.match import Match, MatchCreateBody, MatchSide, MatchStatus
from stageflow.schema import matches
from stageflow.utils.errors import MatchNotFound
from stageflow.utils.id_types import GroupId, MatchId, StageId, TeamId, TournamentId


async def sql_get_match(match_id: MatchId) -> Match:
    query = """
        SELECT *
        FROM matches
        WHERE id = :match_id
        """
    result = await database.fetch_one(query=query, values={"match_id": match_id})
    if result is None:
        raise MatchNotFound(match_id)

    return Match.model_validate(dict(result._mapping))


async def get_matches_for_stage(
    stage_id: StageId, status: MatchStatus | None = None
) -> list[Match]:
    query = """
        SELECT *
        FROM matches
        WHERE stage_id = :stage_id
        """
    values: dict[str, object] = {"stage_id": stage_id}
    if status is not None:
        query += "AND status = :status "
        values["status"] = status.value

    query += "ORDER BY id ASC"
    result = await database.fetch_all(query=query, values=values)
    return [Match.model_validate(dict(row._mapping)) for row in result]


async def get_unfinished_matches_for_group(stage_id: StageId, group_id: GroupId) -> list[Match]:
    query = """
        SELECT *
        FROM matches
        WHERE stage_id = :stage_id
          AND group_id = :group_id
          AND status != 'finished'
        ORDER BY matchday ASC, id ASC
        """
    result = await database.fetch_all(
        query=query, values={"stage_id": stage_id, "group_id": group_id}
    )
    return [Match.model_validate(dict(row._mapping)) for row in result]


async def get_match_statuses_for_tournament(tournament_id: TournamentId) -> list[MatchStatus]:
    query = """
        SELECT status
        FROM matches
        WHERE tournament_id = :tournament_id
        """
    result = await database.fetch_all(query=query, values={"tournament_id": tournament_id})
    return [MatchStatus(row._mapping["status"]) for row in result]


async def sql_create_match(match: MatchCreateBody) -> Match:
    query = """
        INSERT INTO matches (
            tournament_id,
            stage_id,
            group_id,
            matchday,
            round,
            bracket_pos,
            team_a_id,
            team_b_id,
            team_a_score,
            team_b_score,
            winner_team_id,
            status,
            home_source_match_id,
            home_source_outcome,
            away_source_match_id,
            away_source_outcome,
            home_source_round,
            home_source_bracket_pos,
            away_source_round,
            away_source_bracket_pos
        )
        VALUES (
            :tournament_id,
            :stage_id,
            :group_id,
            :matchday,
            :round,
            :bracket_pos,
            :team_a_id,
            :team_b_id,
            :team_a_score,
            :team_b_score,
            :winner_team_id,
            :status,
            :home_source_match_id,
            :home_source_outcome,
            :away_source_match_id,
            :away_source_outcome,
            :home_source_round,
            :home_source_bracket_pos,
            :away_source_round,
            :away_source_bracket_pos
        )
        RETURNING *
        """
    result = await database.fetch_one(query=query, values=match.model_dump(mode="json"))
    if result is None:
        raise ValueError("Could not create match")

    return Match.model_validate(dict(result._mapping))


async def sql_set_team_if_empty(match_id: MatchId, side: MatchSide, team_id: TeamId) -> bool:
    """
    Fill one side of a match, but only while that side is still empty.

    The `IS NULL` guard makes the fill at-most-once, manual assignments are never overwritten.
    """
    column = side.team_column
    query = f"""
        UPDATE matches
        SET {column} = :team_id
        WHERE id = :match_id
          AND {column} IS NULL
        RETURNING id
        """
    updated_id = await database.fetch_val(
        query=query, values={"match_id": match_id, "team_id": team_id}
    )
    return updated_id is not None


async def sql_fill_empty_teams(
    match_id: MatchId, team_a_id: TeamId | None, team_b_id: TeamId | None
) -> None:
    query = """
        UPDATE matches
        SET team_a_id = COALESCE(team_a_id, :team_a_id),
            team_b_id = COALESCE(team_b_id, :team_b_id)
        WHERE id = :match_id
          AND status != 'finished'
        """
    await database.execute(
        query=query,
        values={"match_id": match_id, "team_a_id": team_a_id, "team_b_id": team_b_id},
    )


async def sql_finish_match(
    match_id: MatchId,
    team_a_score: int,
    team_b_score: int,
    winner_team_id: TeamId | None,
) -> None:
    query = (
        matches.update()
        .where(matches.c.id == match_id)
        .values(
            team_a_score=team_a_score,
            team_b_score=team_b_score,
            winner_team_id=winner_team_id,
            status=MatchStatus.FINISHED.value,
            finished_at=datetime_utc.now(),
        )
    )
    await database.execute(query)


async def sql_delete_matches_for_stage(stage_id: StageId) -> None:
    query = """
        DELETE FROM matches
        WHERE stage_id = :stage_id
        """
    await database.execute(query=query, values={"stage_id": stage_id})
