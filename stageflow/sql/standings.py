from stageflow.database import database
from stageflow.models.db.standing import StageStanding, StageStandingInsertable
from stageflow.utils.id_types import StageId

_INSERT_STANDING_QUERY = """
    INSERT INTO stage_standings (
        stage_id, group_id, team_id, played, won, drawn, lost, gf, ga, gd, points, rank
    )
    VALUES (
        :stage_id, :group_id, :team_id, :played, :won, :drawn, :lost, :gf, :ga, :gd, :points, :rank
    )
    """


async def sql_standings_exist(stage_id: StageId) -> bool:
    query = """
        SELECT stage_id
        FROM stage_standings
        WHERE stage_id = :stage_id
        LIMIT 1
        """
    result = await database.fetch_one(query=query, values={"stage_id": stage_id})
    return result is not None


async def get_standings_for_stage(
    stage_id: StageId, max_rank: int | None = None
) -> list[StageStanding]:
    query = """
        SELECT *
        FROM stage_standings
        WHERE stage_id = :stage_id
        """
    values: dict[str, object] = {"stage_id": stage_id}
    if max_rank is not None:
        query += "AND rank <= :max_rank "
        values["max_rank"] = max_rank

    query += "ORDER BY group_id ASC, rank ASC"
    result = await database.fetch_all(query=query, values=values)
    return [StageStanding.model_validate(dict(row._mapping)) for row in result]


async def sql_create_standings(rows: list[StageStandingInsertable]) -> None:
    if len(rows) < 1:
        return

    await database.execute_many(
        query=_INSERT_STANDING_QUERY, values=[row.model_dump() for row in rows]
    )


async def sql_replace_standings_for_group(
    stage_id: StageId, group_id: int, rows: list[StageStandingInsertable]
) -> None:
    async with database.transaction():
        await database.execute(
            """
            DELETE FROM stage_standings
            WHERE stage_id = :stage_id
              AND group_id = :group_id
            """,
            values={"stage_id": stage_id, "group_id": group_id},
        )
        await sql_create_standings(rows)
