"""
Game state management for the facility game.
Implements the board, per-node statuses, the move log and the running score.

Board: a line of N nodes, each with an immutable integer value
Statuses: FREE, BLOCKED or owned by one of the two players
Moves: append-only log of chosen indices, PLAYER_A at even plies
"""

from __future__ import annotations
import json
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from board_gen import COMPLEMENT_CONSTANT, MAX_VALUE, MIN_VALUE, generate_values
from models import ConfigurationError, FacilityStatus, GameScore, GameType, PlayerId
from scoring import compute_score, count_owned

CONFIG_PATH = os.path.join(os.path.dirname(__file__), 'config.json')

DEFAULT_CONFIG: Dict[str, Any] = {
    'default_size': 10,
    'default_seed': 1234,
    'default_game_type': 'NORMAL',
    'default_strategy': 'FPLAYER_SIMPLE_1',
    'min_value': MIN_VALUE,
    'max_value': MAX_VALUE,
    'complement_constant': COMPLEMENT_CONSTANT,
    'blocking_risk_factor': 2.5 / 3,
    'slow_min_sleep': 21,
    'slow_max_sleep': 23,
    'slow_seed': 1234,
    'monitor_check_interval': 0.5,
    'monitor_wait_duration': 10.0,
    'monitor_warn_interval': 10.0,
    'monitor_info_interval': 8.0,
}


def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load game configuration, falling back to the built-in defaults.

    Args:
        path: Optional path to a JSON config file (default: config.json
            next to this module)

    Returns:
        Dictionary with every key of DEFAULT_CONFIG
    """
    config = dict(DEFAULT_CONFIG)
    try:
        with open(path or CONFIG_PATH, 'r') as f:
            config.update(json.load(f))
    except (FileNotFoundError, json.JSONDecodeError):
        # Use defaults if config file is missing or invalid
        pass
    return config


def parse_game_type(name: Any) -> GameType:
    """
    Parse a game type name such as 'normal' or 'COMPLEMENT'.

    Raises:
        ConfigurationError: If the name is not a known game type
    """
    if isinstance(name, GameType):
        return name
    try:
        return GameType(str(name).upper())
    except ValueError:
        raise ConfigurationError(f"Unknown game type: {name}")


@dataclass
class FacilityGame:
    """
    Complete state of one facility game.

    The engine is the single writer: statuses, moves and score only change
    through moves.apply_move().
    """
    values: List[int]
    statuses: List[FacilityStatus] = field(default_factory=list)
    moves: List[int] = field(default_factory=list)
    score: GameScore = field(default_factory=GameScore)
    seed: int = 0
    game_type: GameType = GameType.NORMAL
    complement_constant: int = COMPLEMENT_CONSTANT
    log: List[Dict[str, Any]] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.statuses:
            self.statuses = [FacilityStatus.FREE] * len(self.values)
        if len(self.statuses) != len(self.values):
            raise ConfigurationError("values and statuses must have the same length")

    @property
    def num_nodes(self) -> int:
        return len(self.values)

    @property
    def num_moves(self) -> int:
        return len(self.moves)

    @property
    def next_player(self) -> PlayerId:
        """Player whose turn it is. PLAYER_A moves at even plies."""
        return PlayerId.PLAYER_A if len(self.moves) % 2 == 0 else PlayerId.PLAYER_B

    def get_value(self, index: int) -> int:
        return self.values[index]

    def get_status(self, index: int) -> FacilityStatus:
        return self.statuses[index]

    def is_valid_index(self, index: int) -> bool:
        """Check if an index is within the board [0, N)."""
        return isinstance(index, int) and not isinstance(index, bool) and 0 <= index < len(self.values)

    def is_finished(self) -> bool:
        """True when no node is FREE."""
        return FacilityStatus.FREE not in self.statuses

    def score_for(self, player: PlayerId) -> int:
        """Recompute the score of a player from statuses and values."""
        return compute_score(self.values, self.statuses, player)

    def update_score(self, player: PlayerId) -> None:
        self.score.set_score(player, self.score_for(player))

    def player_of_ply(self, ply: int) -> PlayerId:
        """Player who made (or will make) the move at position `ply` of the log."""
        return PlayerId.PLAYER_A if ply % 2 == 0 else PlayerId.PLAYER_B

    def moves_of(self, player: PlayerId) -> List[int]:
        """Indices chosen by a player, in the order they were played."""
        start = 0 if player is PlayerId.PLAYER_A else 1
        return self.moves[start::2]


class GameView:
    """
    Read-only view of a game handed to strategies.

    Sequences are exposed as tuples so a strategy cannot modify the engine's
    state through the view.
    """

    def __init__(self, game: FacilityGame):
        self._game = game

    @property
    def num_nodes(self) -> int:
        return self._game.num_nodes

    @property
    def num_moves(self) -> int:
        return self._game.num_moves

    @property
    def seed(self) -> int:
        return self._game.seed

    @property
    def game_type(self) -> GameType:
        return self._game.game_type

    @property
    def complement_constant(self) -> int:
        return self._game.complement_constant

    @property
    def values(self) -> Tuple[int, ...]:
        return tuple(self._game.values)

    @property
    def statuses(self) -> Tuple[FacilityStatus, ...]:
        return tuple(self._game.statuses)

    @property
    def moves(self) -> Tuple[int, ...]:
        return tuple(self._game.moves)

    @property
    def score(self) -> GameScore:
        score = self._game.score
        return GameScore(score.player_a, score.player_b)

    @property
    def next_player(self) -> PlayerId:
        return self._game.next_player

    def get_value(self, index: int) -> int:
        return self._game.get_value(index)

    def get_status(self, index: int) -> FacilityStatus:
        return self._game.get_status(index)

    def is_free(self, index: int) -> bool:
        """True if `index` is on the board and FREE."""
        return 0 <= index < self._game.num_nodes and self._game.statuses[index] == FacilityStatus.FREE

    def move_at(self, ply: int) -> int:
        return self._game.moves[ply]

    def is_finished(self) -> bool:
        return self._game.is_finished()


def get_player_view(game: FacilityGame) -> GameView:
    """Read-only view of the game for a strategy."""
    return GameView(game)


def initialize_game(size: Optional[int] = None, seed: Optional[int] = None,
                    game_type: Any = None, config: Optional[Dict[str, Any]] = None) -> FacilityGame:
    """
    Initialize a new game with generated node values.

    Missing arguments are taken from config.json (default_size, default_seed,
    default_game_type).

    Args:
        size: Number of nodes (>= 8 for COPY/COMPLEMENT)
        seed: Seed for value generation
        game_type: GameType or its name
        config: Optional configuration dictionary (default: load_config())

    Returns:
        New FacilityGame with every node FREE except the pre-blocked middle
        node of odd COPY/COMPLEMENT boards

    Raises:
        ConfigurationError: If the board cannot be built
    """
    config = config or load_config()
    size = config['default_size'] if size is None else size
    seed = config['default_seed'] if seed is None else seed
    game_type = parse_game_type(config['default_game_type'] if game_type is None else game_type)

    try:
        size = int(size)
        seed = int(seed)
    except (ValueError, TypeError):
        raise ConfigurationError("Board size and seed must be integers")

    values, preblocked = generate_values(
        size,
        seed,
        game_type,
        min_value=config['min_value'],
        max_value=config['max_value'],
        complement_constant=config['complement_constant'],
    )
    statuses = [
        FacilityStatus.BLOCKED if idx in preblocked else FacilityStatus.FREE
        for idx in range(size)
    ]

    return FacilityGame(
        values=values,
        statuses=statuses,
        seed=seed,
        game_type=game_type,
        complement_constant=config['complement_constant'],
    )


def get_game_summary(game: FacilityGame) -> Dict[str, Any]:
    """
    Get a summary of the current game state for reports and API responses.

    Args:
        game: Current game state

    Returns:
        Dictionary with game summary information
    """
    owned = count_owned(game.statuses)
    return {
        'size': game.num_nodes,
        'seed': game.seed,
        'game_type': game.game_type.value,
        'values': list(game.values),
        'statuses': [status.value for status in game.statuses],
        'moves': list(game.moves),
        'next_player': None if game.is_finished() else game.next_player.value,
        'finished': game.is_finished(),
        'score': {
            PlayerId.PLAYER_A.value: game.score.player_a,
            PlayerId.PLAYER_B.value: game.score.player_b,
        },
        'nodes_owned': {player.value: count for player, count in owned.items()},
    }
