import json

from stageflow.models.db.stage import (
    GroupsConfig,
    KnockoutConfig,
    LeagueConfig,
    SemisCross,
    Stage,
    StageKind,
)


def _stage(kind: StageKind, config: object) -> Stage:
    return Stage.model_validate(
        {"id": 3, "tournament_id": 1, "name": "", "kind": kind.value, "ordering": 1, "config": config}
    )


def test_knockout_config_from_json_string() -> None:
    stage = _stage(
        StageKind.KNOCKOUT,
        json.dumps({"fromStageId": 2, "advancers_per_group": 0, "semis_cross": "A1-B1"}),
    )

    assert isinstance(stage.config, KnockoutConfig)
    assert stage.config.from_stage_id == 2
    assert stage.source_stage_id == 2
    assert stage.config.advancers_per_group == 1
    assert stage.config.advancers_total == 8
    assert stage.config.semis_cross is SemisCross.A1_B1


def test_knockout_config_defaults_and_fallbacks() -> None:
    stage = _stage(StageKind.KNOCKOUT, {"advancers_total": 1, "semis_cross": "X1-Y9"})

    assert isinstance(stage.config, KnockoutConfig)
    assert stage.config.from_stage_id is None
    assert stage.config.advancers_per_group == 2
    assert stage.config.advancers_total == 2
    assert stage.config.semis_cross is SemisCross.A1_B2


def test_missing_config_uses_stage_kind() -> None:
    for raw_config in (None, "", {}):
        stage = _stage(StageKind.LEAGUE, raw_config)
        assert isinstance(stage.config, LeagueConfig)
        assert stage.config.get_repeats() == 1
        assert stage.source_stage_id is None


def test_groups_config_repeats() -> None:
    stage = _stage(StageKind.GROUPS, {"from_stage_id": 1, "double_round": True, "unknown": "x"})
    assert isinstance(stage.config, GroupsConfig)
    assert stage.config.get_repeats() == 2
    assert stage.source_stage_id == 1

    stage = _stage(StageKind.GROUPS, {"double_round": True, "rounds_per_opponent": 3})
    assert stage.config.get_repeats() == 3
