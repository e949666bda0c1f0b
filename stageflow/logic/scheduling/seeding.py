from stageflow.logic.ranking.standings import ensure_baseline_standings
from stageflow.logic.scheduling.elimination import (
    BracketMatchPlan,
    build_seeded_bracket,
    build_two_group_bracket,
    create_bracket_matches,
    get_seeded_entrants_from_groups,
)
from stageflow.models.db.match import Match, MatchStatus
from stageflow.models.db.stage import KnockoutConfig, Stage, StageKind
from stageflow.models.db.standing import StageStanding
from stageflow.sql.matches import get_matches_for_stage, sql_delete_matches_for_stage
from stageflow.sql.stages import get_stages_after, sql_get_stage
from stageflow.sql.standings import get_standings_for_stage
from stageflow.utils.id_types import StageId, TeamId
from stageflow.utils.logging import logger


def get_advancers_by_group(standings: list[StageStanding]) -> list[list[TeamId]]:
    advancers: dict[int, list[TeamId]] = {}
    for standing in sorted(standings, key=lambda standing: (standing.group_id, standing.rank)):
        advancers.setdefault(standing.group_id, []).append(standing.team_id)
    return list(advancers.values())


def determine_knockout_plans(
    source_kind: StageKind, config: KnockoutConfig, standings: list[StageStanding]
) -> list[BracketMatchPlan]:
    """
    Plan the knockout bracket that the top of a groups or league table advances into.

    Two groups with two advancers each get semi finals crossed per `semis_cross`. Any other
    groups layout is seeded by tier, league tables are seeded by rank.
    """
    if source_kind is StageKind.LEAGUE:
        entrants = [
            standing.team_id
            for standing in sorted(standings, key=lambda standing: standing.rank)
            if standing.rank <= config.advancers_total
        ]
        return build_seeded_bracket(entrants)

    advancers_by_group = get_advancers_by_group(
        [standing for standing in standings if standing.rank <= config.advancers_per_group]
    )
    if len(advancers_by_group) == 2 and all(len(group) == 2 for group in advancers_by_group):
        return build_two_group_bracket(
            advancers_by_group[0], advancers_by_group[1], config.semis_cross
        )

    return build_seeded_bracket(get_seeded_entrants_from_groups(advancers_by_group))


async def get_knockout_stage_fed_by(source_stage: Stage) -> Stage | None:
    later_stages = await get_stages_after(source_stage)
    if len(later_stages) < 1:
        return None

    next_stage = later_stages[0]
    if next_stage.kind is not StageKind.KNOCKOUT or next_stage.source_stage_id != source_stage.id:
        return None
    return next_stage


async def seed_next_knockout_if_configured(
    stage_id: StageId, *, reseed: bool = False, require_complete: bool = True
) -> list[Match]:
    """
    Seed the knockout stage that directly follows a finished groups or league stage.

    Seeding happens once: a knockout stage that already has matches is left alone unless
    `reseed` is set, and is never reseeded after one of its matches was played.
    """
    stage = await sql_get_stage(stage_id)
    if stage.kind not in (StageKind.GROUPS, StageKind.LEAGUE):
        return []

    if require_complete:
        source_matches = await get_matches_for_stage(stage_id)
        if len(source_matches) < 1 or not all(match.is_finished for match in source_matches):
            logger.debug("Stage %s is not finished yet, not seeding", stage_id)
            return []

    knockout_stage = await get_knockout_stage_fed_by(stage)
    if knockout_stage is None:
        logger.debug("No knockout stage is fed by stage %s", stage_id)
        return []

    existing_matches = await get_matches_for_stage(knockout_stage.id)
    if len(existing_matches) > 0:
        if not reseed:
            logger.debug("Knockout stage %s is already seeded", knockout_stage.id)
            return []
        if any(match.status is MatchStatus.FINISHED for match in existing_matches):
            logger.warning(
                "Not reseeding knockout stage %s, some of its matches are finished",
                knockout_stage.id,
            )
            return []

        await sql_delete_matches_for_stage(knockout_stage.id)
        logger.info(
            "Deleted %s matches of knockout stage %s", len(existing_matches), knockout_stage.id
        )

    await ensure_baseline_standings(stage_id)
    config = knockout_stage.config
    assert isinstance(config, KnockoutConfig)
    max_rank = (
        config.advancers_total if stage.kind is StageKind.LEAGUE else config.advancers_per_group
    )
    plans = determine_knockout_plans(
        stage.kind, config, await get_standings_for_stage(stage_id, max_rank=max_rank)
    )
    if len(plans) < 1:
        logger.info("Fewer than two teams advance from stage %s, not seeding", stage_id)
        return []

    return await create_bracket_matches(knockout_stage, plans)
