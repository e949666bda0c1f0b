from fastapi import APIRouter

from stageflow.config import config
from stageflow.logic.ranking.standings import recalculate_standings_for_stage
from stageflow.logic.scheduling.seeding import seed_next_knockout_if_configured
from stageflow.logic.scheduling.source_graph import validate_knockout_sources
from stageflow.routes.models import MatchesResponse, StandingsResponse, SuccessResponse
from stageflow.sql.stages import sql_get_stage
from stageflow.sql.standings import get_standings_for_stage
from stageflow.utils.id_types import StageId

router = APIRouter(prefix=config.api_prefix)


@router.get("/stages/{stage_id}/standings", response_model=StandingsResponse)
async def get_stage_standings(stage_id: StageId) -> StandingsResponse:
    await sql_get_stage(stage_id)
    return StandingsResponse(data=await get_standings_for_stage(stage_id))


@router.post("/stages/{stage_id}/recalculate-standings", response_model=SuccessResponse)
async def recalculate_stage_standings(stage_id: StageId) -> SuccessResponse:
    await recalculate_standings_for_stage(stage_id)
    return SuccessResponse()


@router.post("/stages/{stage_id}/reseed", response_model=MatchesResponse)
async def reseed_next_knockout(stage_id: StageId) -> MatchesResponse:
    """
    Rebuild the knockout stage fed by this stage from its current standings.

    Nothing is created when a match of the knockout stage was already played.
    """
    created = await seed_next_knockout_if_configured(
        stage_id, reseed=True, require_complete=False
    )
    return MatchesResponse(data=created)


@router.post("/stages/{stage_id}/validate-sources", response_model=SuccessResponse)
async def validate_stage_sources(stage_id: StageId) -> SuccessResponse:
    await sql_get_stage(stage_id)
    await validate_knockout_sources(stage_id)
    return SuccessResponse()
