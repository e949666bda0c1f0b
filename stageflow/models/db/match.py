from enum import StrEnum

from pydantic import Field

from stageflow.models.db.shared import BaseModelORM
from stageflow.utils.id_types import GroupId, MatchId, StageId, TeamId, TournamentId


class MatchStatus(StrEnum):
    SCHEDULED = "scheduled"
    FINISHED = "finished"


class Outcome(StrEnum):
    WINNER = "W"
    LOSER = "L"


class MatchSide(StrEnum):
    HOME = "home"
    AWAY = "away"

    @property
    def team_column(self) -> str:
        return "team_a_id" if self is MatchSide.HOME else "team_b_id"


class MatchCreateBody(BaseModelORM):
    tournament_id: TournamentId
    stage_id: StageId
    group_id: GroupId | None = None
    matchday: int | None = None
    round: int | None = None
    bracket_pos: int | None = None
    team_a_id: TeamId | None = None
    team_b_id: TeamId | None = None
    team_a_score: int | None = None
    team_b_score: int | None = None
    winner_team_id: TeamId | None = None
    status: MatchStatus = MatchStatus.SCHEDULED
    home_source_match_id: MatchId | None = None
    home_source_outcome: Outcome | None = None
    away_source_match_id: MatchId | None = None
    away_source_outcome: Outcome | None = None
    home_source_round: int | None = None
    home_source_bracket_pos: int | None = None
    away_source_round: int | None = None
    away_source_bracket_pos: int | None = None


class Match(MatchCreateBody):
    id: MatchId

    @property
    def is_finished(self) -> bool:
        return self.status is MatchStatus.FINISHED

    @property
    def bracket_position(self) -> tuple[int, int] | None:
        if self.round is None or self.bracket_pos is None:
            return None
        return self.round, self.bracket_pos

    def get_team_id(self, side: MatchSide) -> TeamId | None:
        return self.team_a_id if side is MatchSide.HOME else self.team_b_id

    def get_source_match_id(self, side: MatchSide) -> MatchId | None:
        return self.home_source_match_id if side is MatchSide.HOME else self.away_source_match_id

    def get_source_outcome(self, side: MatchSide) -> Outcome | None:
        return self.home_source_outcome if side is MatchSide.HOME else self.away_source_outcome

    def get_source_position(self, side: MatchSide) -> tuple[int, int] | None:
        """Stable (round, bracket_pos) pointer to the feeding match, if declared."""
        if side is MatchSide.HOME:
            source_round, source_pos = self.home_source_round, self.home_source_bracket_pos
        else:
            source_round, source_pos = self.away_source_round, self.away_source_bracket_pos

        if source_round is None or source_pos is None:
            return None
        return source_round, source_pos


class MatchFinishBody(BaseModelORM):
    team_a_score: int = Field(ge=0)
    team_b_score: int = Field(ge=0)
