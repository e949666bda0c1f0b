from stageflow.logic.progression.outcome import get_winner_and_loser
from stageflow.logic.scheduling.source_graph import SourceGraph
from stageflow.models.db.match import Match, MatchSide, Outcome
from stageflow.models.db.stage import StageKind
from stageflow.sql.matches import get_matches_for_stage, sql_set_team_if_empty
from stageflow.sql.stages import sql_get_stage
from stageflow.utils.id_types import MatchId, TeamId
from stageflow.utils.logging import logger


def get_team_updates_for_dependent_matches(
    finished_match: Match, stage_matches: list[Match]
) -> dict[MatchId, dict[MatchSide, TeamId]]:
    """
    Determine which empty sides of dependent knockout matches the finished match fills.

    Sides that already hold a team are left alone, and a draw fills nothing because neither
    outcome is known.
    """
    winner, loser = get_winner_and_loser(finished_match)
    graph = SourceGraph(stage_matches)
    updates: dict[MatchId, dict[MatchSide, TeamId]] = {}

    for edge in graph.children_of(finished_match.id):
        child = graph.matches[edge.child_id]
        if child.get_team_id(edge.side) is not None:
            continue

        team_id = winner if edge.outcome is Outcome.WINNER else loser
        if team_id is None:
            continue

        updates.setdefault(child.id, {}).setdefault(edge.side, team_id)

    return updates


async def propagate_knockout_result(match: Match) -> None:
    stage = await sql_get_stage(match.stage_id)
    if stage.kind is not StageKind.KNOCKOUT:
        return

    stage_matches = await get_matches_for_stage(stage.id)
    updates = get_team_updates_for_dependent_matches(match, stage_matches)

    for child_id, sides in updates.items():
        for side, team_id in sides.items():
            if await sql_set_team_if_empty(child_id, side, team_id):
                logger.info(
                    "Propagated team %s from match %s into %s side of match %s",
                    team_id,
                    match.id,
                    side.value,
                    child_id,
                )
