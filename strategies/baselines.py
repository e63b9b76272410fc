"""
Baseline strategy ladder used as opponents and benchmarks.

1. FirstFreeStrategy: lowest FREE index
2. RandomWrapScanStrategy: circular scan from a random start, random direction
3. HighestFreeValueStrategy: greedy on node value
4. SlowStrategy: scans from the right after a long sleep, models a slow opponent

Any competitive strategy should beat all four on NORMAL boards.
"""

from __future__ import annotations

import random
import time
from typing import List

from models import PlayerId
from state import GameView
from strategies.base import NoAvailableMoveError, Strategy, first_free


class FirstFreeStrategy(Strategy):
    """Always takes the lowest FREE index."""

    name = "SimpleFPlayer1"
    version = "1.2"

    def next_move(self, view: GameView) -> int:
        idx = first_free(view.statuses, range(view.num_nodes))
        if idx is None:
            raise NoAvailableMoveError("No available move")
        return idx


class RandomWrapScanStrategy(Strategy):
    """Scans circularly from a random start in a random direction.

    The generator is seeded with the value of node 0, so a given board always
    produces the same start and direction.
    """

    name = "SimpleFPlayer2"
    version = "1.4"

    def __init__(self, player: PlayerId = PlayerId.PLAYER_A):
        super().__init__(player)
        self.start_node = 0
        self.left_to_right = True

    def initialize(self, view: GameView) -> None:
        rng = random.Random(view.get_value(0))
        self.start_node = rng.randint(0, view.num_nodes - 1)
        self.left_to_right = rng.randint(0, 1) == 0

    def scan_order(self, num_nodes: int) -> List[int]:
        """Indices in the order this strategy visits them."""
        if self.left_to_right:
            return [(self.start_node + i) % num_nodes for i in range(num_nodes)]
        return [(num_nodes + self.start_node - i) % num_nodes for i in range(num_nodes)]

    def next_move(self, view: GameView) -> int:
        idx = first_free(view.statuses, self.scan_order(view.num_nodes))
        if idx is None:
            raise NoAvailableMoveError("No available move")
        return idx


class HighestFreeValueStrategy(Strategy):
    """Takes the FREE node with the greatest value, lowest index on ties."""

    name = "Highest"
    version = "1.0"

    def __init__(self, player: PlayerId = PlayerId.PLAYER_A):
        super().__init__(player)
        self.sorted_indices: List[int] = []
        self.cursor = 0

    def initialize(self, view: GameView) -> None:
        values = view.values
        # sorted() is stable, so equal values keep index order
        self.sorted_indices = sorted(range(len(values)), key=lambda i: -values[i])
        self.cursor = 0

    def next_move(self, view: GameView) -> int:
        # Nodes never become FREE again, so skipped entries stay skipped
        while self.cursor < len(self.sorted_indices):
            idx = self.sorted_indices[self.cursor]
            if view.is_free(idx):
                return idx
            self.cursor += 1
        raise NoAvailableMoveError("No available move")


class SlowStrategy(Strategy):
    """Sleeps before every move, then takes the highest FREE index.

    Used to exercise the liveness monitor; the sleep only blocks the calling
    thread and never touches the game.
    """

    name = "SlowPlayer"
    version = "1.0"

    def __init__(self, player: PlayerId = PlayerId.PLAYER_A, min_sleep: float = 21, max_sleep: float = 23,
                 seed: int = 1234):
        super().__init__(player)
        self.min_sleep = min_sleep
        self.max_sleep = max_sleep
        self.rng = random.Random(seed)

    def next_move(self, view: GameView) -> int:
        time.sleep(self.rng.uniform(self.min_sleep, self.max_sleep))

        idx = first_free(view.statuses, range(view.num_nodes - 1, -1, -1))
        if idx is None:
            raise NoAvailableMoveError("No available move")
        return idx


# All baselines for easy import
BASELINE_STRATEGIES = {
    "first_free": FirstFreeStrategy,
    "random_wrap_scan": RandomWrapScanStrategy,
    "highest_free_value": HighestFreeValueStrategy,
    "slow": SlowStrategy,
}
