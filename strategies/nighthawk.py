"""
NightHawk: heuristic strategy built around scoring runs.

Because occupying a node blocks both neighbours, own moves at most 3 apart
always form one uninterrupted run, as do moves whose gap holds only nodes
that were BLOCKED from the start. Runs of 3 or more score triple. The
strategy tracks its own runs and the opponent's runs as groups, updated one
move at a time, and each turn evaluates a small candidate set:

- edge: extend a group by taking a node 2 or 3 beyond one of its ends
- middle: join two groups separated by a gap of 4, 5 or 6
- fallback: the most valuable node still FREE
- blocking: take the node the opponent would use to extend or join its own
  groups, discounted by BLOCKING_RISK_FACTOR

The highest-valued candidate wins.
"""

from __future__ import annotations

import bisect
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

from models import FacilityStatus, Node, PlayerId
from scoring import BONUS_MIN_GROUP_SIZE
from state import GameView
from strategies.base import NoAvailableMoveError, Strategy

# Empirical: occupying one node of the opponent's potential run does not
# guarantee the opponent would have completed it.
BLOCKING_RISK_FACTOR = 2.5 / 3

MERGE_DISTANCE = 3
EDGE_OFFSETS = (2, 3)
MIDDLE_GAPS = (4, 5, 6)


@dataclass
class Group:
    """
    A run of one player's nodes that scoring treats as a single segment.

    blocked_left / blocked_right mean no further extension is possible on
    that side; once set they stay set for this instance.
    """
    left_idx: int
    right_idx: int
    node_count: int = 1
    accumulated_value: int = 0
    blocked_left: bool = False
    blocked_right: bool = False

    @property
    def is_bonused(self) -> bool:
        return self.node_count >= BONUS_MIN_GROUP_SIZE


@dataclass(frozen=True)
class Candidate:
    """A possible move and its estimated worth in points."""
    index: int
    value: float
    kind: str


def _is_free(statuses: Sequence[FacilityStatus], index: int) -> bool:
    return 0 <= index < len(statuses) and statuses[index] == FacilityStatus.FREE


def edge_value(group: Group, node_value: int) -> int:
    """Points gained by extending `group` with a node worth `node_value`."""
    if group.node_count == 1:
        return node_value
    if group.node_count == 2:
        # The pair becomes a bonused triplet
        return 3 * node_value + 2 * group.accumulated_value
    return 3 * node_value


def middle_value(left: Group, right: Group, node_value: int) -> int:
    """Points gained by joining two groups through a node worth `node_value`."""
    left_weight = 3 if left.is_bonused else 2
    right_weight = 3 if right.is_bonused else 2
    return left_weight * left.accumulated_value + 3 * node_value + right_weight * right.accumulated_value


def middle_positions(left: Group, right: Group) -> List[int]:
    """Interior nodes that would join two groups, empty if the gap is not 4-6."""
    gap = right.left_idx - left.right_idx
    if gap not in MIDDLE_GAPS:
        return []
    if gap == 5:
        return [left.right_idx + 2, left.right_idx + 3]
    return [left.right_idx + gap // 2]


class GroupTracker:
    """One player's groups, sorted by left_idx and pairwise non-overlapping."""

    def __init__(self, preblocked: Iterable[int] = ()) -> None:
        self.groups: List[Group] = []
        self.preblocked = frozenset(preblocked)

    def __len__(self) -> int:
        return len(self.groups)

    def joins(self, left: int, right: int) -> bool:
        """
        True if this player's nodes at `left` and `right` fall in one scoring run.

        The nodes next to each end are always BLOCKED, so nodes at most
        MERGE_DISTANCE apart always join. Farther apart they join only when
        every node between those two neighbours is pre-blocked.
        """
        if right - left <= MERGE_DISTANCE:
            return True
        return all(idx in self.preblocked for idx in range(left + 2, right - 1))

    def add(self, index: int, value: int) -> Group:
        """
        Fold a newly occupied node into the groups.

        The node joins every neighbouring group that scoring would count in
        the same run (see joins()), so it can bridge two groups into one.

        Returns:
            The group that now contains `index`
        """
        pos = bisect.bisect_left(self.groups, index, key=lambda g: g.left_idx)
        merged = Group(index, index, 1, value)
        start, end = pos, pos

        if pos > 0 and self.joins(self.groups[pos - 1].right_idx, index):
            left = self.groups[pos - 1]
            merged = Group(
                left.left_idx,
                max(left.right_idx, index),
                left.node_count + 1,
                left.accumulated_value + value,
                blocked_left=left.blocked_left,
            )
            start = pos - 1

        if pos < len(self.groups) and self.joins(index, self.groups[pos].left_idx):
            right = self.groups[pos]
            merged = Group(
                merged.left_idx,
                right.right_idx,
                merged.node_count + right.node_count,
                merged.accumulated_value + right.accumulated_value,
                blocked_left=merged.blocked_left,
                blocked_right=right.blocked_right,
            )
            end = pos + 1

        self.groups[start:end] = [merged]
        return merged

    def edge_candidates(self, statuses: Sequence[FacilityStatus], values: Sequence[int],
                        kind: str = "edge") -> List[Candidate]:
        """Extension moves at both ends of every group; marks dead ends as blocked."""
        candidates = []
        for group in self.groups:
            if not group.blocked_left:
                found = False
                for offset in EDGE_OFFSETS:
                    idx = group.left_idx - offset
                    if _is_free(statuses, idx):
                        found = True
                        candidates.append(Candidate(idx, edge_value(group, values[idx]), kind))
                if not found:
                    group.blocked_left = True

            if not group.blocked_right:
                found = False
                for offset in EDGE_OFFSETS:
                    idx = group.right_idx + offset
                    if _is_free(statuses, idx):
                        found = True
                        candidates.append(Candidate(idx, edge_value(group, values[idx]), kind))
                if not found:
                    group.blocked_right = True
        return candidates

    def middle_candidates(self, statuses: Sequence[FacilityStatus], values: Sequence[int],
                          kind: str = "middle") -> List[Candidate]:
        """Moves that would join two adjacent groups."""
        candidates = []
        for left, right in zip(self.groups, self.groups[1:]):
            for idx in middle_positions(left, right):
                if _is_free(statuses, idx):
                    candidates.append(Candidate(idx, middle_value(left, right, values[idx]), kind))
        return candidates


class NightHawk(Strategy):
    """Group-tracking heuristic player."""

    name = "NightHawk"
    version = "1.0"

    def __init__(self, player: PlayerId = PlayerId.PLAYER_A, risk_factor: float = BLOCKING_RISK_FACTOR):
        super().__init__(player)
        self.risk_factor = risk_factor
        self.values: List[int] = []
        self.own_groups = GroupTracker()
        self.opponent_groups = GroupTracker()
        self.sorted_nodes: List[Node] = []
        self.cursor = 0
        self.moves_seen = 0
        self.last_candidate: Optional[Candidate] = None

    def initialize(self, view: GameView) -> None:
        self.values = list(view.values)
        self.sorted_nodes = [
            Node(idx, value)
            for idx, value in sorted(enumerate(self.values), key=lambda iv: (-iv[1], iv[0]))
        ]
        self.cursor = 0
        # Odd COPY/COMPLEMENT boards start with the middle node BLOCKED
        preblocked = [idx for idx, status in enumerate(view.statuses) if status == FacilityStatus.BLOCKED]
        self.own_groups = GroupTracker(preblocked)
        self.opponent_groups = GroupTracker(preblocked)
        self.moves_seen = 0
        self.last_candidate = None

    def observe_opponent(self, view: GameView) -> None:
        """Fold the opponent's moves made since the last call into its groups."""
        moves = view.moves
        while self.moves_seen < len(moves):
            ply = self.moves_seen
            if (ply % 2 == 0) == (self.opponent is PlayerId.PLAYER_A):
                idx = moves[ply]
                self.opponent_groups.add(idx, self.values[idx])
            self.moves_seen += 1

    def best_free_node(self, statuses: Sequence[FacilityStatus]) -> Optional[Candidate]:
        """Most valuable FREE node. The cursor only moves forward."""
        while self.cursor < len(self.sorted_nodes):
            node = self.sorted_nodes[self.cursor]
            if statuses[node.index] == FacilityStatus.FREE:
                return Candidate(node.index, node.value, "fallback")
            self.cursor += 1
        return None

    def choose(self, statuses: Sequence[FacilityStatus]) -> Optional[Candidate]:
        """Best candidate for the current board, or None if nothing is FREE."""
        best: Optional[Candidate] = None

        offensive = (
            self.own_groups.edge_candidates(statuses, self.values)
            + self.own_groups.middle_candidates(statuses, self.values)
        )
        fallback = self.best_free_node(statuses)
        if fallback is not None:
            offensive.append(fallback)

        for candidate in offensive:
            if best is None or candidate.value > best.value:
                best = candidate

        if best is None:
            return None

        blocking = (
            self.opponent_groups.edge_candidates(statuses, self.values, kind="block_edge")
            + self.opponent_groups.middle_candidates(statuses, self.values, kind="block_middle")
        )
        for candidate in blocking:
            discounted = candidate.value * self.risk_factor
            if discounted > best.value:
                best = Candidate(candidate.index, discounted, candidate.kind)

        return best

    def next_move(self, view: GameView) -> int:
        if not self.values:
            self.initialize(view)
        self.observe_opponent(view)

        best = self.choose(view.statuses)
        if best is None:
            raise NoAvailableMoveError("No available move")

        self.own_groups.add(best.index, self.values[best.index])
        self.last_candidate = best
        return best.index
