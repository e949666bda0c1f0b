from stageflow.database import database
from stageflow.models.db.stage import Stage, StageKind
from stageflow.models.db.tournament import TournamentTeam, TournamentTeamInsertable


async def get_participants_for_stage(stage: Stage) -> list[TournamentTeam]:
    """
    Teams taking part in a groups or league stage, ordered by seed (unseeded last) then team.

    Groups stages list their participants per stage, league stages use the tournament-wide
    rows that have no stage.
    """
    if stage.kind is StageKind.GROUPS:
        query = """
            SELECT *
            FROM tournament_teams
            WHERE stage_id = :stage_id
            """
        values = {"stage_id": stage.id}
    else:
        query = """
            SELECT *
            FROM tournament_teams
            WHERE tournament_id = :tournament_id
              AND stage_id IS NULL
            """
        values = {"tournament_id": stage.tournament_id}

    result = await database.fetch_all(query=query, values=values)
    participants = [TournamentTeam.model_validate(dict(row._mapping)) for row in result]
    return sorted(
        participants,
        key=lambda participant: (
            participant.seed is None,
            participant.seed or 0,
            participant.team_id,
        ),
    )


async def sql_create_tournament_team(participant: TournamentTeamInsertable) -> TournamentTeam:
    query = """
        INSERT INTO tournament_teams (tournament_id, team_id, stage_id, group_id, seed)
        VALUES (:tournament_id, :team_id, :stage_id, :group_id, :seed)
        RETURNING *
        """
    result = await database.fetch_one(query=query, values=participant.model_dump())
    if result is None:
        raise ValueError("Could not create tournament team")

    return TournamentTeam.model_validate(dict(result._mapping))
