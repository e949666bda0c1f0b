"""
Everything that has to happen after a match result is entered.

Steps run strictly one after another and each of them is idempotent, so re-running the whole
pipeline for the same match is the way to recover from a failure halfway through.
"""

from pydantic import BaseModel

from stageflow.logic.progression.completion import complete_tournament_if_finished
from stageflow.logic.progression.intake import (
    apply_intake_mappings,
    ensure_intake_mappings_for_match,
    hydrate_group_matches_from_slots,
)
from stageflow.logic.progression.knockout import propagate_knockout_result
from stageflow.logic.progression.outcome import get_winner_and_loser
from stageflow.logic.ranking.standings import recalculate_standings_for_stage
from stageflow.logic.scheduling.seeding import seed_next_knockout_if_configured
from stageflow.sql.matches import sql_finish_match, sql_get_match
from stageflow.utils.id_types import MatchId
from stageflow.utils.logging import logger

SKIPPED_NOT_FINISHED = "not finished"


class ProgressionResult(BaseModel):
    ok: bool = True
    skipped: str | None = None
    already_finished: bool = False


async def progress_after_match(match_id: MatchId) -> ProgressionResult:
    match = await sql_get_match(match_id)
    if not match.is_finished:
        logger.debug("Match %s is not finished, skipping progression", match_id)
        return ProgressionResult(skipped=SKIPPED_NOT_FINISHED)

    logger.info("Running progression for match %s of stage %s", match.id, match.stage_id)
    await propagate_knockout_result(match)
    await ensure_intake_mappings_for_match(match)
    for target_stage_id in await apply_intake_mappings(match):
        await hydrate_group_matches_from_slots(target_stage_id)

    await recalculate_standings_for_stage(match.stage_id)
    await seed_next_knockout_if_configured(match.stage_id)
    await complete_tournament_if_finished(match.tournament_id)
    return ProgressionResult()


async def finish_match(
    match_id: MatchId, team_a_score: int, team_b_score: int
) -> ProgressionResult:
    """
    Record the final score of a match and run progression for it.

    A match that is already finished keeps its score, progression is only run again.
    """
    match = await sql_get_match(match_id)
    if match.is_finished:
        result = await progress_after_match(match_id)
        return result.model_copy(update={"already_finished": True})

    winner, _ = get_winner_and_loser(
        match.model_copy(update={"team_a_score": team_a_score, "team_b_score": team_b_score})
    )
    await sql_finish_match(match_id, team_a_score, team_b_score, winner)
    logger.info("Finished match %s with %s-%s", match_id, team_a_score, team_b_score)
    return await progress_after_match(match_id)
