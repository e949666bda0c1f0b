from stageflow.utils.id_types import TeamId


def get_number_of_rounds_to_create_round_robin(team_count: int) -> int:
    if team_count < 2:
        return 0
    return team_count - 1 if team_count % 2 == 0 else team_count


def get_round_robin_pairs_by_matchday(
    team_ids: list[TeamId], repeats: int = 1
) -> dict[int, list[tuple[TeamId, TeamId]]]:
    """
    Pair every team with every other team using the circle method.

    The first position stays fixed while the others rotate. With an odd number of teams a
    phantom position is added, whoever meets it sits the matchday out. Repeated cycles reuse
    the first cycle's pairings with an offset matchday number.
    """
    team_count = len(team_ids)
    if team_count < 2:
        return {}

    has_bye = team_count % 2 == 1
    positions_count = team_count + 1 if has_bye else team_count
    bye_position = positions_count - 1
    rounds_count = get_number_of_rounds_to_create_round_robin(team_count)
    positions = list(range(positions_count))

    pairs_by_matchday: dict[int, list[tuple[TeamId, TeamId]]] = {}
    for round_index in range(rounds_count):
        pairs: list[tuple[TeamId, TeamId]] = []
        for i in range(positions_count // 2):
            home, away = positions[i], positions[positions_count - 1 - i]
            if has_bye and bye_position in (home, away):
                continue
            pairs.append((team_ids[home], team_ids[away]))

        pairs_by_matchday[round_index + 1] = pairs
        positions = [positions[0], positions[-1], *positions[1:-1]]

    for repeat in range(2, max(1, repeats) + 1):
        for matchday in range(1, rounds_count + 1):
            offset_matchday = (repeat - 1) * rounds_count + matchday
            pairs_by_matchday[offset_matchday] = list(pairs_by_matchday[matchday])

    return pairs_by_matchday
