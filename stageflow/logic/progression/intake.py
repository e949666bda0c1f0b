"""
Knockout → groups intake.

A knockout stage may feed a later groups stage: the winner (and, with two or more groups, the
loser) of every knockout match is routed into a slot of the groups stage. The routing is kept
as durable intake mappings, created the first time a knockout match finishes. Applying a
mapping writes the resolved team into `stage_slots`, and the slotted teams are then hydrated
into the groups stage's skeleton fixtures.
"""

from stageflow.logic.progression.outcome import get_team_for_outcome
from stageflow.logic.scheduling.round_robin import get_round_robin_pairs_by_matchday
from stageflow.models.db.intake import IntakeMappingInsertable, StageSlot
from stageflow.models.db.match import Match, Outcome
from stageflow.models.db.stage import GroupsConfig, Stage, StageKind
from stageflow.sql.intake import (
    get_intake_mappings_for_position,
    get_stage_slots,
    sql_create_intake_mapping,
    sql_get_next_free_slot,
    sql_intake_mapping_exists,
    sql_upsert_stage_slots,
)
from stageflow.sql.matches import get_unfinished_matches_for_group, sql_fill_empty_teams
from stageflow.sql.stages import get_groups_for_stage, get_stages_after, sql_get_stage
from stageflow.utils.id_types import StageId, TeamId
from stageflow.utils.logging import logger

INTAKE_SLOT_SOURCE = "intake"


def get_intake_targets(group_count: int) -> list[tuple[Outcome, int]]:
    """
    Outcome → group index routing for one knockout match.

    The winner always goes to the first group, the loser goes to the second group when there
    is one.
    """
    targets = [(Outcome.WINNER, 0)]
    if group_count >= 2:
        targets.append((Outcome.LOSER, 1))
    return targets


def select_target_groups_stage(source_stage: Stage, later_stages: list[Stage]) -> Stage | None:
    groups_stages = [stage for stage in later_stages if stage.kind is StageKind.GROUPS]
    explicit = next(
        (stage for stage in groups_stages if stage.source_stage_id == source_stage.id), None
    )
    if explicit is not None:
        return explicit
    return groups_stages[0] if len(groups_stages) > 0 else None


async def ensure_intake_mappings_for_match(match: Match) -> None:
    if match.round is None or match.bracket_pos is None:
        return

    stage = await sql_get_stage(match.stage_id)
    if stage.kind is not StageKind.KNOCKOUT:
        return

    if await sql_intake_mapping_exists(stage.id, match.round, match.bracket_pos):
        logger.debug(
            "Intake mappings already exist for stage %s round %s position %s",
            stage.id,
            match.round,
            match.bracket_pos,
        )
        return

    target = select_target_groups_stage(stage, await get_stages_after(stage))
    if target is None:
        return

    groups = await get_groups_for_stage(target.id)
    for outcome, group_idx in get_intake_targets(len(groups)):
        # Not locked: two matches finishing concurrently can compute the same free slot.
        slot_idx = await sql_get_next_free_slot(target.id, group_idx)
        mapping = await sql_create_intake_mapping(
            IntakeMappingInsertable(
                target_stage_id=target.id,
                group_idx=group_idx,
                slot_idx=slot_idx,
                from_stage_id=stage.id,
                round=match.round,
                bracket_pos=match.bracket_pos,
                outcome=outcome,
            )
        )
        logger.info(
            "Created intake mapping %s: %s of match %s -> stage %s group %s slot %s",
            mapping.id,
            outcome.value,
            match.id,
            target.id,
            group_idx,
            slot_idx,
        )


async def apply_intake_mappings(match: Match) -> list[StageId]:
    """Write the match's resolved outcomes into their mapped slots, return the stages touched."""
    if match.round is None or match.bracket_pos is None:
        return []

    mappings = await get_intake_mappings_for_position(
        match.stage_id, match.round, match.bracket_pos
    )
    slots: list[StageSlot] = []
    for mapping in mappings:
        team_id = get_team_for_outcome(match, mapping.outcome)
        if team_id is None:
            continue

        slots.append(
            StageSlot(
                stage_id=mapping.target_stage_id,
                group_id=mapping.group_idx,
                slot_id=mapping.slot_idx,
                team_id=team_id,
                source=INTAKE_SLOT_SOURCE,
            )
        )

    await sql_upsert_stage_slots(slots)
    return list(dict.fromkeys(slot.stage_id for slot in slots))


def get_slotted_teams_by_group_idx(slots: list[StageSlot]) -> dict[int, list[TeamId]]:
    slotted: dict[int, list[TeamId]] = {}
    for slot in sorted(slots, key=lambda slot: (slot.group_id, slot.slot_id)):
        if slot.team_id is not None:
            slotted.setdefault(slot.group_id, []).append(slot.team_id)
    return slotted


async def hydrate_group_matches_from_slots(stage_id: StageId) -> None:
    """
    Fill the skeleton fixtures of a groups stage with the teams sitting in its slots.

    Only sides that are still empty are assigned and finished matches are never touched, so
    manual edits survive.
    """
    stage = await sql_get_stage(stage_id)
    if stage.kind is not StageKind.GROUPS:
        return

    assert isinstance(stage.config, GroupsConfig)
    groups = await get_groups_for_stage(stage_id)
    slotted_by_idx = get_slotted_teams_by_group_idx(await get_stage_slots(stage_id))

    for group_idx, group in enumerate(groups):
        team_ids = slotted_by_idx.get(group_idx, [])
        if len(team_ids) < 2:
            continue

        pairs_by_matchday = get_round_robin_pairs_by_matchday(
            team_ids, stage.config.get_repeats()
        )
        matches_by_matchday: dict[int, list[Match]] = {}
        for match in await get_unfinished_matches_for_group(stage_id, group.id):
            if match.matchday is not None:
                matches_by_matchday.setdefault(match.matchday, []).append(match)

        for matchday, pairs in pairs_by_matchday.items():
            skeletons = matches_by_matchday.get(matchday, [])
            for match, (team_a_id, team_b_id) in zip(skeletons, pairs):
                if match.team_a_id is not None and match.team_b_id is not None:
                    continue
                await sql_fill_empty_teams(match.id, team_a_id, team_b_id)

        logger.debug(
            "Hydrated group %s of stage %s with %s teams", group.id, stage_id, len(team_ids)
        )
