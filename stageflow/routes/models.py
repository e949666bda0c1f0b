from typing import Generic, TypeVar

from pydantic import BaseModel

from stageflow.logic.progression.orchestrator import ProgressionResult
from stageflow.models.db.match import Match
from stageflow.models.db.standing import StageStanding


class SuccessResponse(BaseModel):
    success: bool = True


DataT = TypeVar('DataT')


class DataResponse(BaseModel, Generic[DataT]):
    data: DataT


class ProgressionResponse(DataResponse[ProgressionResult]):
    pass


class StandingsResponse(DataResponse[list[StageStanding]]):
    pass


class MatchesResponse(DataResponse[list[Match]]):
    pass
