from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass

from stageflow.models.db.match import Match, MatchSide, Outcome
from stageflow.sql.matches import get_matches_for_stage
from stageflow.utils.errors import CyclicSourceError
from stageflow.utils.id_types import MatchId, StageId


@dataclass(frozen=True)
class SourceEdge:
    parent_id: MatchId
    child_id: MatchId
    side: MatchSide
    outcome: Outcome


class SourceGraph:
    """
    Adjacency list of the knockout source links within one stage.

    A side of a match is fed either by an explicit `*_source_match_id` or by a stable
    `(*_source_round, *_source_bracket_pos)` pointer that is resolved to the match sitting at
    that bracket position. Both kinds of links produce the same edges.
    """

    def __init__(self, matches: Iterable[Match]) -> None:
        self.matches: dict[MatchId, Match] = {match.id: match for match in matches}
        self._children: dict[MatchId, list[SourceEdge]] = defaultdict(list)

        match_by_position = {
            match.bracket_position: match.id
            for match in self.matches.values()
            if match.bracket_position is not None
        }

        for child in self.matches.values():
            for side in MatchSide:
                parent_ids: list[MatchId] = []
                if (source_id := child.get_source_match_id(side)) is not None:
                    parent_ids.append(source_id)
                if (position := child.get_source_position(side)) is not None and (
                    positioned_id := match_by_position.get(position)
                ) is not None:
                    parent_ids.append(positioned_id)

                # A missing outcome means plain single elimination: the winner moves on.
                outcome = child.get_source_outcome(side) or Outcome.WINNER
                for parent_id in dict.fromkeys(parent_ids):
                    self._children[parent_id].append(
                        SourceEdge(
                            parent_id=parent_id, child_id=child.id, side=side, outcome=outcome
                        )
                    )

    def children_of(self, match_id: MatchId) -> list[SourceEdge]:
        return list(self._children.get(match_id, []))

    def find_cycle(self) -> list[MatchId] | None:
        unvisited, in_progress, done = 0, 1, 2
        state: dict[MatchId, int] = defaultdict(lambda: unvisited)

        for root in sorted(self._children):
            if state[root] != unvisited:
                continue

            path: list[MatchId] = [root]
            stack = [iter(self.children_of(root))]
            state[root] = in_progress

            while stack:
                edge = next(stack[-1], None)
                if edge is None:
                    state[path.pop()] = done
                    stack.pop()
                    continue

                if state[edge.child_id] == in_progress:
                    return path[path.index(edge.child_id) :] + [edge.child_id]
                if state[edge.child_id] == unvisited:
                    state[edge.child_id] = in_progress
                    path.append(edge.child_id)
                    stack.append(iter(self.children_of(edge.child_id)))

        return None

    def validate_acyclic(self) -> None:
        if (cycle := self.find_cycle()) is not None:
            raise CyclicSourceError(cycle)


async def validate_knockout_sources(stage_id: StageId) -> SourceGraph:
    """Check a knockout stage's source links before they are relied upon for progression."""
    graph = SourceGraph(await get_matches_for_stage(stage_id))
    graph.validate_acyclic()
    return graph
