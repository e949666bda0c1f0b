from pydantic import BaseModel

from stageflow.models.db.match import Match, MatchCreateBody, MatchSide, Outcome
from stageflow.models.db.stage import SemisCross, Stage
from stageflow.sql.matches import sql_create_match
from stageflow.utils.id_types import MatchId, TeamId
from stageflow.utils.logging import logger

BracketPosition = tuple[int, int]


class BracketMatchPlan(BaseModel):
    """
    A knockout match that has not been inserted yet.

    Feeding matches are referenced by their (round, bracket_pos) because ids only exist
    after insertion.
    """

    round: int
    bracket_pos: int
    team_a_id: TeamId | None = None
    team_b_id: TeamId | None = None
    home_source: BracketPosition | None = None
    away_source: BracketPosition | None = None

    @property
    def position(self) -> BracketPosition:
        return self.round, self.bracket_pos

    def get_source(self, side: MatchSide) -> BracketPosition | None:
        return self.home_source if side is MatchSide.HOME else self.away_source


def get_bracket_size(team_count: int) -> int:
    if team_count < 1:
        return 0
    return 1 << (team_count - 1).bit_length()


def get_seed_order(bracket_size: int) -> list[int]:
    """Standard bracket seed order, e.g. [1, 8, 4, 5, 2, 7, 3, 6] for eight positions."""
    if bracket_size == 1:
        return [1]

    previous = get_seed_order(bracket_size // 2)
    return [
        seed
        for prev_seed in previous
        for seed in (prev_seed, bracket_size + 1 - prev_seed)
    ]


def get_number_of_rounds_to_create_single_elimination(team_count: int) -> int:
    if team_count < 2:
        return 0
    return get_bracket_size(team_count).bit_length() - 1


def build_seeded_bracket(entrants: list[TeamId]) -> list[BracketMatchPlan]:
    """
    Plan a single elimination bracket for any number of entrants, best seed first.

    The bracket is padded to the next power of two. Only real pairings of the first round are
    planned, an entrant that faces a bye is placed straight into its second round match.
    Positions keep their slot in the full bracket, so the first round can have gaps.
    """
    team_count = len(entrants)
    if team_count < 2:
        return []

    bracket_size = get_bracket_size(team_count)
    rounds_count = get_number_of_rounds_to_create_single_elimination(team_count)
    seed_order = get_seed_order(bracket_size)

    def entrant_for_seed(seed: int) -> TeamId | None:
        return entrants[seed - 1] if seed <= team_count else None

    plans: list[BracketMatchPlan] = []
    # A slot of the previous round holds either a planned match or an entrant with a bye.
    previous_slots: list[BracketPosition | TeamId | None] = []
    for slot in range(bracket_size // 2):
        team_a_id = entrant_for_seed(seed_order[2 * slot])
        team_b_id = entrant_for_seed(seed_order[2 * slot + 1])
        if team_a_id is not None and team_b_id is not None:
            plan = BracketMatchPlan(
                round=1, bracket_pos=slot + 1, team_a_id=team_a_id, team_b_id=team_b_id
            )
            plans.append(plan)
            previous_slots.append(plan.position)
        else:
            previous_slots.append(team_a_id if team_a_id is not None else team_b_id)

    for round_ in range(2, rounds_count + 1):
        current_slots: list[BracketPosition | TeamId | None] = []
        for slot in range(len(previous_slots) // 2):
            home, away = previous_slots[2 * slot], previous_slots[2 * slot + 1]
            plan = BracketMatchPlan(
                round=round_,
                bracket_pos=slot + 1,
                team_a_id=home if isinstance(home, int) else None,
                team_b_id=away if isinstance(away, int) else None,
                home_source=home if isinstance(home, tuple) else None,
                away_source=away if isinstance(away, tuple) else None,
            )
            plans.append(plan)
            current_slots.append(plan.position)
        previous_slots = current_slots

    return plans


def build_two_group_bracket(
    group_a: list[TeamId], group_b: list[TeamId], semis_cross: SemisCross = SemisCross.A1_B2
) -> list[BracketMatchPlan]:
    """Semi finals and final for the top two of two groups."""
    a1, a2 = group_a[0], group_a[1]
    b1, b2 = group_b[0], group_b[1]

    if semis_cross is SemisCross.A1_B1:
        semi_finals = [(a1, b1), (a2, b2)]
    else:
        semi_finals = [(a1, b2), (b1, a2)]

    plans = [
        BracketMatchPlan(round=1, bracket_pos=i + 1, team_a_id=home, team_b_id=away)
        for i, (home, away) in enumerate(semi_finals)
    ]
    plans.append(BracketMatchPlan(round=2, bracket_pos=1, home_source=(1, 1), away_source=(1, 2)))
    return plans


def get_seeded_entrants_from_groups(advancers_by_group: list[list[TeamId]]) -> list[TeamId]:
    """Interleave group tables into seed tiers: all group winners, then all runners-up, ..."""
    tiers_count = max((len(advancers) for advancers in advancers_by_group), default=0)
    return [
        advancers[tier]
        for tier in range(tiers_count)
        for advancers in advancers_by_group
        if tier < len(advancers)
    ]


async def create_bracket_matches(stage: Stage, plans: list[BracketMatchPlan]) -> list[Match]:
    """Insert planned matches round by round, wiring each side to the id of its feeding match."""
    match_ids: dict[BracketPosition, MatchId] = {}
    created: list[Match] = []

    for plan in sorted(plans, key=lambda plan: plan.position):
        home_source = plan.get_source(MatchSide.HOME)
        away_source = plan.get_source(MatchSide.AWAY)

        match = await sql_create_match(
            MatchCreateBody(
                tournament_id=stage.tournament_id,
                stage_id=stage.id,
                round=plan.round,
                bracket_pos=plan.bracket_pos,
                team_a_id=plan.team_a_id,
                team_b_id=plan.team_b_id,
                home_source_match_id=match_ids[home_source] if home_source else None,
                home_source_outcome=Outcome.WINNER if home_source else None,
                home_source_round=home_source[0] if home_source else None,
                home_source_bracket_pos=home_source[1] if home_source else None,
                away_source_match_id=match_ids[away_source] if away_source else None,
                away_source_outcome=Outcome.WINNER if away_source else None,
                away_source_round=away_source[0] if away_source else None,
                away_source_bracket_pos=away_source[1] if away_source else None,
            )
        )
        match_ids[plan.position] = match.id
        created.append(match)

    logger.info("Created %s knockout matches in stage %s", len(created), stage.id)
    return created
