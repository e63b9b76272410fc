# Models for facility game elements

from dataclasses import dataclass
from enum import Enum


class PlayerId(Enum):
    """The two seats at the table. PLAYER_A always makes the first move."""
    PLAYER_A = "PLAYER_A"
    PLAYER_B = "PLAYER_B"

    def opponent(self) -> "PlayerId":
        """Return the other player."""
        return PlayerId.PLAYER_B if self is PlayerId.PLAYER_A else PlayerId.PLAYER_A


class FacilityStatus(Enum):
    """Status of a single node. Once a node leaves FREE it never returns."""
    FREE = "FREE"
    BLOCKED = "BLOCKED"
    PLAYER_A = "PLAYER_A"
    PLAYER_B = "PLAYER_B"

    @staticmethod
    def owned_by(player: PlayerId) -> "FacilityStatus":
        """Status a node takes when `player` occupies it."""
        return FacilityStatus.PLAYER_A if player is PlayerId.PLAYER_A else FacilityStatus.PLAYER_B

    def short(self) -> str:
        """One-character form used by board renderers."""
        if self is FacilityStatus.PLAYER_A:
            return "A"
        if self is FacilityStatus.PLAYER_B:
            return "B"
        return " "


class GameType(Enum):
    NORMAL = "NORMAL"          # plain random values
    COPY = "COPY"              # player B has to imitate player A
    COMPLEMENT = "COMPLEMENT"  # player B has to answer with the complementary value


class PlayerState(Enum):
    """Phases reported to the liveness monitor."""
    UNINIT = "UNINIT"
    STARTING = "STARTING"
    WAITING_FOR_ME = "WAITING_FOR_ME"
    WAITING_FOR_OPPONENT = "WAITING_FOR_OPPONENT"
    TERMINATING = "TERMINATING"


@dataclass(frozen=True)
class Node:
    """A board position and its value."""
    index: int
    value: int

    def __str__(self) -> str:
        return f"node[{self.index}] == {self.value}"


@dataclass
class GameScore:
    """
    Score of both players. Derived from statuses and values; the engine
    recomputes it after every accepted move.
    """
    player_a: int = 0
    player_b: int = 0

    def get_score(self, player: PlayerId) -> int:
        """Get the score of a player."""
        return self.player_a if player is PlayerId.PLAYER_A else self.player_b

    def set_score(self, player: PlayerId, score: int) -> None:
        """Set the score of a player, ensuring it doesn't go below 0."""
        if player is PlayerId.PLAYER_A:
            self.player_a = max(0, score)
        else:
            self.player_b = max(0, score)

    def leader(self):
        """Player with the higher score, or None on a tie."""
        if self.player_a > self.player_b:
            return PlayerId.PLAYER_A
        if self.player_b > self.player_a:
            return PlayerId.PLAYER_B
        return None

    def __str__(self) -> str:
        return f"Game score -- Player A: {self.player_a}, Player B: {self.player_b}"


class ConfigurationError(Exception):
    """Exception raised when a game or player cannot be set up as requested."""
    pass
