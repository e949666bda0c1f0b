from stageflow.database import database
from stageflow.models.db.intake import IntakeMapping, IntakeMappingInsertable, StageSlot
from stageflow.utils.id_types import StageId


async def sql_intake_mapping_exists(from_stage_id: StageId, round_: int, bracket_pos: int) -> bool:
    query = """
        SELECT id
        FROM intake_mappings
        WHERE from_stage_id = :from_stage_id
          AND round = :round
          AND bracket_pos = :bracket_pos
        LIMIT 1
        """
    result = await database.fetch_one(
        query=query,
        values={"from_stage_id": from_stage_id, "round": round_, "bracket_pos": bracket_pos},
    )
    return result is not None


async def get_intake_mappings_for_position(
    from_stage_id: StageId, round_: int, bracket_pos: int
) -> list[IntakeMapping]:
    query = """
        SELECT *
        FROM intake_mappings
        WHERE from_stage_id = :from_stage_id
          AND round = :round
          AND bracket_pos = :bracket_pos
        ORDER BY id ASC
        """
    result = await database.fetch_all(
        query=query,
        values={"from_stage_id": from_stage_id, "round": round_, "bracket_pos": bracket_pos},
    )
    return [IntakeMapping.model_validate(dict(row._mapping)) for row in result]


async def sql_create_intake_mapping(mapping: IntakeMappingInsertable) -> IntakeMapping:
    query = """
        INSERT INTO intake_mappings (
            target_stage_id, group_idx, slot_idx, from_stage_id, round, bracket_pos, outcome
        )
        VALUES (
            :target_stage_id, :group_idx, :slot_idx, :from_stage_id, :round, :bracket_pos, :outcome
        )
        RETURNING *
        """
    result = await database.fetch_one(query=query, values=mapping.model_dump(mode="json"))
    if result is None:
        raise ValueError("Could not create intake mapping")

    return IntakeMapping.model_validate(dict(result._mapping))


async def sql_get_next_free_slot(stage_id: StageId, group_idx: int) -> int:
    query = """
        SELECT slot_id
        FROM stage_slots
        WHERE stage_id = :stage_id
          AND group_id = :group_id
        ORDER BY slot_id DESC
        LIMIT 1
        """
    max_slot_id = await database.fetch_val(
        query=query, values={"stage_id": stage_id, "group_id": group_idx}
    )
    return (int(max_slot_id) if max_slot_id is not None else 0) + 1


async def get_stage_slots(stage_id: StageId) -> list[StageSlot]:
    query = """
        SELECT *
        FROM stage_slots
        WHERE stage_id = :stage_id
        ORDER BY group_id ASC, slot_id ASC
        """
    result = await database.fetch_all(query=query, values={"stage_id": stage_id})
    return [StageSlot.model_validate(dict(row._mapping)) for row in result]


async def sql_upsert_stage_slots(slots: list[StageSlot]) -> None:
    if len(slots) < 1:
        return

    query = """
        INSERT INTO stage_slots (stage_id, group_id, slot_id, team_id, source)
        VALUES (:stage_id, :group_id, :slot_id, :team_id, :source)
        ON CONFLICT (stage_id, group_id, slot_id)
        DO UPDATE SET team_id = EXCLUDED.team_id, source = EXCLUDED.source
        """
    await database.execute_many(query=query, values=[slot.model_dump() for slot in slots])
