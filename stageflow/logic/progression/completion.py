from stageflow.models.db.match import MatchStatus
from stageflow.models.db.tournament import TournamentStatus
from stageflow.sql.matches import get_match_statuses_for_tournament
from stageflow.sql.tournaments import sql_update_tournament_status
from stageflow.utils.id_types import TournamentId
from stageflow.utils.logging import logger


async def complete_tournament_if_finished(tournament_id: TournamentId) -> bool:
    statuses = await get_match_statuses_for_tournament(tournament_id)
    if len(statuses) < 1 or any(status is not MatchStatus.FINISHED for status in statuses):
        return False

    await sql_update_tournament_status(tournament_id, TournamentStatus.COMPLETED)
    logger.info(
        "Tournament %s completed, all %s matches are finished", tournament_id, len(statuses)
    )
    return True
