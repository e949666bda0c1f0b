from enum import StrEnum

from stageflow.models.db.shared import BaseModelORM
from stageflow.utils.id_types import GroupId, StageId, TeamId, TournamentId, TournamentTeamId


class TournamentStatus(StrEnum):
    SCHEDULED = "scheduled"
    COMPLETED = "completed"


class TournamentInsertable(BaseModelORM):
    name: str = ""
    status: TournamentStatus = TournamentStatus.SCHEDULED


class Tournament(TournamentInsertable):
    id: TournamentId


class TournamentTeamInsertable(BaseModelORM):
    """
    Participation of a team in a tournament.

    Groups stages declare participants per stage and group, league stages declare them with
    `stage_id` left empty.
    """

    tournament_id: TournamentId
    team_id: TeamId
    stage_id: StageId | None = None
    group_id: GroupId | None = None
    seed: int | None = None


class TournamentTeam(TournamentTeamInsertable):
    id: TournamentTeamId
