import json
from enum import StrEnum
from typing import Annotated, Any, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

from stageflow.models.db.shared import BaseModelORM
from stageflow.utils.id_types import GroupId, StageId, TournamentId


class StageKind(StrEnum):
    LEAGUE = "league"
    GROUPS = "groups"
    KNOCKOUT = "knockout"


class SemisCross(StrEnum):
    A1_B2 = "A1-B2"
    A1_B1 = "A1-B1"


class StageConfigBase(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class RoundRobinConfigMixin(BaseModel):
    rounds_per_opponent: int | None = None
    double_round: bool = False

    def get_repeats(self) -> int:
        if self.rounds_per_opponent is not None:
            return max(1, self.rounds_per_opponent)
        return 2 if self.double_round else 1


class LeagueConfig(StageConfigBase, RoundRobinConfigMixin):
    kind: Literal["league"] = "league"


class GroupsConfig(StageConfigBase, RoundRobinConfigMixin):
    kind: Literal["groups"] = "groups"
    from_stage_id: StageId | None = Field(
        default=None, validation_alias=AliasChoices("from_stage_id", "fromStageId")
    )


class KnockoutConfig(StageConfigBase):
    kind: Literal["knockout"] = "knockout"
    from_stage_id: StageId | None = Field(
        default=None, validation_alias=AliasChoices("from_stage_id", "fromStageId")
    )
    advancers_per_group: int = 2
    advancers_total: int = 8
    semis_cross: SemisCross = SemisCross.A1_B2

    @field_validator("advancers_per_group", mode="after")
    @classmethod
    def at_least_one_advancer(cls, value: int) -> int:
        return max(1, value)

    @field_validator("advancers_total", mode="after")
    @classmethod
    def at_least_two_advancers(cls, value: int) -> int:
        return max(2, value)

    @field_validator("semis_cross", mode="before")
    @classmethod
    def unknown_cross_falls_back(cls, value: object) -> object:
        return value if value in {cross.value for cross in SemisCross} else SemisCross.A1_B2


StageConfig = Annotated[
    LeagueConfig | GroupsConfig | KnockoutConfig, Field(discriminator="kind")
]


class StageInsertable(BaseModelORM):
    tournament_id: TournamentId
    name: str = ""
    kind: StageKind
    ordering: int
    config: dict[str, Any] = Field(default_factory=dict)


class Stage(BaseModelORM):
    id: StageId
    tournament_id: TournamentId
    name: str = ""
    kind: StageKind
    ordering: int
    config: StageConfig

    @model_validator(mode="before")
    @classmethod
    def tag_config_with_stage_kind(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data

        raw_config = data.get("config")
        if isinstance(raw_config, str):
            raw_config = json.loads(raw_config) if raw_config.strip() != "" else {}
        if raw_config is None:
            raw_config = {}
        if isinstance(raw_config, dict):
            kind = data.get("kind")
            return {**data, "config": {**raw_config, "kind": str(kind) if kind else None}}
        return data

    @property
    def source_stage_id(self) -> StageId | None:
        if isinstance(self.config, GroupsConfig | KnockoutConfig):
            return self.config.from_stage_id
        return None


class GroupInsertable(BaseModelORM):
    stage_id: StageId
    name: str
    ordering: int | None = None


class Group(GroupInsertable):
    id: GroupId
