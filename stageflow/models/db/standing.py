from pydantic import BaseModel

from stageflow.models.db.shared import BaseModelORM
from stageflow.utils.id_types import StageId, StageStandingId, TeamId


class TeamRecord(BaseModel):
    team_id: TeamId
    played: int = 0
    won: int = 0
    drawn: int = 0
    lost: int = 0
    gf: int = 0
    ga: int = 0
    points: int = 0

    @property
    def gd(self) -> int:
        return self.gf - self.ga


class StageStandingInsertable(BaseModelORM):
    stage_id: StageId
    group_id: int
    team_id: TeamId
    played: int
    won: int
    drawn: int
    lost: int
    gf: int
    ga: int
    gd: int
    points: int
    rank: int


class StageStanding(StageStandingInsertable):
    id: StageStandingId
