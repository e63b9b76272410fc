"""
Strategy interface for facility game players.

Every player implements two calls:
    strategy.initialize(view)        # once, before the first move
    index = strategy.next_move(view) # once per ply of this player

The view is a read-only state.GameView. Strategies keep their own derived
bookkeeping and never write to the game.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable, Optional, Sequence

from models import FacilityStatus, PlayerId
from state import GameView


class StrategyError(Exception):
    """Base class for strategy failures. These indicate a defect, not a game outcome."""
    pass


class NoAvailableMoveError(StrategyError):
    """Raised when next_move() finds no candidate (the board should not be full)."""
    pass


class ComplementLookupError(StrategyError):
    """Raised when no FREE node holds the complementary value a move needs."""
    pass


def first_free(statuses: Sequence[FacilityStatus], indices: Iterable[int]) -> Optional[int]:
    """First index of `indices` whose node is FREE, or None."""
    for idx in indices:
        if statuses[idx] == FacilityStatus.FREE:
            return idx
    return None


class Strategy(ABC):
    """Abstract base class for facility game strategies."""

    name: str = "base"
    version: str = "1.0"

    def __init__(self, player: PlayerId = PlayerId.PLAYER_A):
        self.player = player

    @property
    def whoami(self) -> PlayerId:
        return self.player

    @property
    def opponent(self) -> PlayerId:
        return self.player.opponent()

    @property
    def about(self) -> str:
        """Short description exchanged with the other side of a remote game."""
        return f"{self.name} v{self.version}"

    def initialize(self, view: GameView) -> None:
        """Called once before any move. Strategies may precompute here."""
        return None

    @abstractmethod
    def next_move(self, view: GameView) -> int:
        """
        Choose the next node to occupy.

        Args:
            view: Read-only game view

        Returns:
            Index of a currently FREE node

        Raises:
            NoAvailableMoveError: If no node is FREE
        """
        ...
