"""
NightHawkComplement: answers every opponent move with the complementary value.

On a COMPLEMENT board each value v has a partner worth
complement_constant - v, so the second player can always mirror the first.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Dict, List

from models import PlayerId
from state import GameView
from strategies.base import ComplementLookupError, Strategy


class NightHawkComplement(Strategy):
    name = "NightHawk_Complement"
    version = "1.0"

    def __init__(self, player: PlayerId = PlayerId.PLAYER_B):
        super().__init__(player)
        self.indices: Dict[int, List[int]] = {}
        self.complement_constant = 0

    def initialize(self, view: GameView) -> None:
        indices = defaultdict(list)
        for idx, value in enumerate(view.values):
            indices[value].append(idx)
        self.indices = dict(indices)
        self.complement_constant = view.complement_constant

    def next_move(self, view: GameView) -> int:
        if view.num_moves == 0:
            raise ComplementLookupError("No opponent move to answer yet")

        opponent_value = view.get_value(view.move_at(view.num_moves - 1))
        needed = self.complement_constant - opponent_value

        candidates = self.indices.get(needed)
        if not candidates:
            raise ComplementLookupError(
                f"No available move. No node was found with the needed value {needed}."
            )

        for idx in candidates:
            if view.is_free(idx):
                return idx
        raise ComplementLookupError(
            f"No available move. No FREE node was found with the needed value {needed}."
        )
