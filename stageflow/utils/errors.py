from stageflow.utils.id_types import MatchId, StageId, TournamentId


class ProgressionError(Exception):
    pass


class EntityNotFound(ProgressionError):
    entity = "Entity"

    def __init__(self, entity_id: int) -> None:
        self.entity_id = entity_id
        super().__init__(f"{self.entity} {entity_id} doesn't exist")


class MatchNotFound(EntityNotFound):
    entity = "Match"

    def __init__(self, match_id: MatchId) -> None:
        super().__init__(match_id)


class StageNotFound(EntityNotFound):
    entity = "Stage"

    def __init__(self, stage_id: StageId) -> None:
        super().__init__(stage_id)


class TournamentNotFound(EntityNotFound):
    entity = "Tournament"

    def __init__(self, tournament_id: TournamentId) -> None:
        super().__init__(tournament_id)


class CyclicSourceError(ProgressionError):
    """Raised when knockout source links loop back onto themselves."""

    def __init__(self, cycle: list[MatchId]) -> None:
        self.cycle = cycle
        path = " -> ".join(str(match_id) for match_id in cycle)
        super().__init__(f"Knockout source links form a cycle: {path}")
