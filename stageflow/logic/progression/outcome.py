from stageflow.models.db.match import Match, Outcome
from stageflow.utils.id_types import TeamId


def get_winner_and_loser(match: Match) -> tuple[TeamId | None, TeamId | None]:
    """
    Derive (winner, loser) from the scores of a finished match.

    A draw yields (None, None). Knockout stages are expected to reject draws before a match
    is finished, that is not enforced here.
    """
    if match.team_a_score is None or match.team_b_score is None:
        return None, None

    if match.team_a_score > match.team_b_score:
        return match.team_a_id, match.team_b_id
    if match.team_b_score > match.team_a_score:
        return match.team_b_id, match.team_a_id
    return None, None


def get_team_for_outcome(match: Match, outcome: Outcome) -> TeamId | None:
    winner, loser = get_winner_and_loser(match)
    return winner if outcome is Outcome.WINNER else loser
