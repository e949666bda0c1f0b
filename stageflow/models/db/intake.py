from stageflow.models.db.match import Outcome
from stageflow.models.db.shared import BaseModelORM
from stageflow.utils.id_types import IntakeMappingId, StageId, TeamId


class IntakeMappingInsertable(BaseModelORM):
    target_stage_id: StageId
    group_idx: int
    slot_idx: int
    from_stage_id: StageId
    round: int
    bracket_pos: int
    outcome: Outcome


class IntakeMapping(IntakeMappingInsertable):
    id: IntakeMappingId


class StageSlot(BaseModelORM):
    stage_id: StageId
    group_id: int
    slot_id: int
    team_id: TeamId | None = None
    source: str | None = None
