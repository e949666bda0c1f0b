import json

from stageflow.database import database
from stageflow.models.db.stage import Group, GroupInsertable, Stage, StageInsertable
from stageflow.utils.errors import StageNotFound
from stageflow.utils.id_types import StageId, TournamentId


async def sql_get_stage(stage_id: StageId) -> Stage:
    query = """
        SELECT *
        FROM tournament_stages
        WHERE id = :stage_id
        """
    result = await database.fetch_one(query=query, values={"stage_id": stage_id})
    if result is None:
        raise StageNotFound(stage_id)

    return Stage.model_validate(dict(result._mapping))


async def get_stages_for_tournament(tournament_id: TournamentId) -> list[Stage]:
    query = """
        SELECT *
        FROM tournament_stages
        WHERE tournament_id = :tournament_id
        ORDER BY ordering ASC, id ASC
        """
    result = await database.fetch_all(query=query, values={"tournament_id": tournament_id})
    return [Stage.model_validate(dict(row._mapping)) for row in result]


async def get_stages_after(stage: Stage) -> list[Stage]:
    """Later stages of the same tournament, earliest first."""
    query = """
        SELECT *
        FROM tournament_stages
        WHERE tournament_id = :tournament_id
          AND ordering > :ordering
        ORDER BY ordering ASC, id ASC
        """
    result = await database.fetch_all(
        query=query,
        values={"tournament_id": stage.tournament_id, "ordering": stage.ordering},
    )
    return [Stage.model_validate(dict(row._mapping)) for row in result]


async def sql_create_stage(stage: StageInsertable) -> Stage:
    query = """
        INSERT INTO tournament_stages (tournament_id, name, kind, ordering, config)
        VALUES (:tournament_id, :name, :kind, :ordering, :config)
        RETURNING *
        """
    result = await database.fetch_one(
        query=query,
        values={
            "tournament_id": stage.tournament_id,
            "name": stage.name,
            "kind": stage.kind.value,
            "ordering": stage.ordering,
            "config": json.dumps(stage.config),
        },
    )
    if result is None:
        raise ValueError("Could not create stage")

    return Stage.model_validate(dict(result._mapping))


async def get_groups_for_stage(stage_id: StageId) -> list[Group]:
    query = """
        SELECT *
        FROM tournament_groups
        WHERE stage_id = :stage_id
        ORDER BY ordering ASC, id ASC
        """
    result = await database.fetch_all(query=query, values={"stage_id": stage_id})
    return [Group.model_validate(dict(row._mapping)) for row in result]


async def sql_create_group(group: GroupInsertable) -> Group:
    query = """
        INSERT INTO tournament_groups (stage_id, name, ordering)
        VALUES (:stage_id, :name, :ordering)
        RETURNING *
        """
    result = await database.fetch_one(query=query, values=group.model_dump())
    if result is None:
        raise ValueError("Could not create group")

    return Group.model_validate(dict(result._mapping))
