from stageflow.database import database
from stageflow.models.db.tournament import Tournament, TournamentInsertable, TournamentStatus
from stageflow.utils.errors import TournamentNotFound
from stageflow.utils.id_types import TournamentId


async def sql_get_tournament(tournament_id: TournamentId) -> Tournament:
    query = """
        SELECT *
        FROM tournaments
        WHERE id = :tournament_id
        """
    result = await database.fetch_one(query=query, values={"tournament_id": tournament_id})
    if result is None:
        raise TournamentNotFound(tournament_id)

    return Tournament.model_validate(dict(result._mapping))


async def sql_create_tournament(tournament: TournamentInsertable) -> TournamentId:
    query = """
        INSERT INTO tournaments (name, status)
        VALUES (:name, :status)
        RETURNING id
        """
    new_id = await database.fetch_val(
        query=query,
        values={"name": tournament.name, "status": tournament.status.value},
    )
    return TournamentId(new_id)


async def sql_update_tournament_status(
    tournament_id: TournamentId, status: TournamentStatus
) -> None:
    query = """
        UPDATE tournaments
        SET status = :status
        WHERE id = :tournament_id
        """
    await database.execute(
        query=query, values={"tournament_id": tournament_id, "status": status.value}
    )
