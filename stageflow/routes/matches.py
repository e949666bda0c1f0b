from fastapi import APIRouter

from stageflow.config import config
from stageflow.logic.progression.orchestrator import finish_match, progress_after_match
from stageflow.models.db.match import MatchFinishBody
from stageflow.routes.models import ProgressionResponse
from stageflow.utils.id_types import MatchId

router = APIRouter(prefix=config.api_prefix)


@router.post("/matches/{match_id}/finish", response_model=ProgressionResponse)
async def finish_match_and_progress(
    match_id: MatchId, match_body: MatchFinishBody
) -> ProgressionResponse:
    result = await finish_match(match_id, match_body.team_a_score, match_body.team_b_score)
    return ProgressionResponse(data=result)


@router.post("/matches/{match_id}/progress", response_model=ProgressionResponse)
async def rerun_progression(match_id: MatchId) -> ProgressionResponse:
    return ProgressionResponse(data=await progress_after_match(match_id))
