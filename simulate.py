"""
Game driver for the facility game.

Plays two strategies against each other on one board and records the
outcome. run_tournament() plays every ordered pairing of a strategy list
over several seeds.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from models import ConfigurationError, GameType, PlayerId, PlayerState
from moves import apply_move
from monitor import MonitorThread
from scoring import count_owned, verify_pairing
from state import FacilityGame, get_player_view, initialize_game, load_config
from strategies.base import Strategy
from strategies.factory import create_strategy, parse_strategy_type


@dataclass
class GameRecord:
    """Post-mortem record of a completed game."""
    player_a: str
    player_b: str
    about_a: str
    about_b: str
    size: int
    seed: int
    game_type: str
    score_a: int = 0
    score_b: int = 0
    winner: Optional[str] = None
    forfeited_by: Optional[str] = None
    moves: List[int] = field(default_factory=list)
    nodes_owned: Dict[str, int] = field(default_factory=dict)
    pairing: Dict[str, Any] = field(default_factory=dict)
    finished: bool = False

    def to_dict(self) -> dict:
        return {
            'player_a': self.player_a,
            'player_b': self.player_b,
            'size': self.size,
            'seed': self.seed,
            'game_type': self.game_type,
            'score': {'PLAYER_A': self.score_a, 'PLAYER_B': self.score_b},
            'winner': self.winner,
            'forfeited_by': self.forfeited_by,
            'moves': list(self.moves),
            'nodes_owned': dict(self.nodes_owned),
            'pairing': self.pairing,
        }


def play_game(game: FacilityGame, strategies: Dict[PlayerId, Strategy],
              monitor: Optional[MonitorThread] = None) -> Optional[PlayerId]:
    """
    Alternate next_move / apply_move until the board is full.

    Args:
        game: Fresh game
        strategies: Strategy for each seat
        monitor: Optional liveness monitor to report phases to

    Returns:
        The player whose move was rejected (and who forfeits), or None

    Raises:
        ConfigurationError: If a strategy was created for the other seat
        StrategyError: If a strategy fails to produce a move
    """
    for player, strategy in strategies.items():
        if strategy.whoami is not player:
            raise ConfigurationError(f"{strategy.name} plays {strategy.whoami.value}, not {player.value}")
        strategy.initialize(get_player_view(game))

    forfeited_by = None
    try:
        while not game.is_finished():
            player = game.next_player
            if monitor:
                monitor.set_state(game.num_moves, PlayerState.WAITING_FOR_ME)
            index = strategies[player].next_move(get_player_view(game))
            if monitor:
                monitor.set_state(game.num_moves, PlayerState.WAITING_FOR_OPPONENT)
            if not apply_move(game, player, index):
                forfeited_by = player
                break
    finally:
        if monitor:
            monitor.log(f"game over after {game.num_moves} moves")
            monitor.set_state(game.num_moves, PlayerState.TERMINATING)
            monitor.request_stop()

    return forfeited_by


def run_game(
    strategy_a: Strategy,
    strategy_b: Strategy,
    size: Optional[int] = None,
    seed: Optional[int] = None,
    game_type: Any = None,
    monitor: Optional[MonitorThread] = None,
) -> GameRecord:
    """
    Run a complete game between two strategies. Returns a GameRecord.

    A rejected move ends the game as a loss for the player who made it.
    """
    game = initialize_game(size, seed, game_type)
    forfeited_by = play_game(
        game, {PlayerId.PLAYER_A: strategy_a, PlayerId.PLAYER_B: strategy_b}, monitor
    )

    if forfeited_by is not None:
        winner = forfeited_by.opponent()
    else:
        winner = game.score.leader()

    owned = count_owned(game.statuses)
    return GameRecord(
        player_a=strategy_a.name,
        player_b=strategy_b.name,
        about_a=strategy_a.about,
        about_b=strategy_b.about,
        size=game.num_nodes,
        seed=game.seed,
        game_type=game.game_type.value,
        score_a=game.score.player_a,
        score_b=game.score.player_b,
        winner=winner.value if winner else None,
        forfeited_by=forfeited_by.value if forfeited_by else None,
        moves=list(game.moves),
        nodes_owned={player.value: count for player, count in owned.items()},
        pairing=verify_pairing(game.game_type, game.values, game.moves, game.complement_constant),
        finished=game.is_finished(),
    )


def run_tournament(
    strategy_types: Sequence[Any],
    size: int,
    seeds: Sequence[int],
    game_type: GameType = GameType.NORMAL,
) -> Dict[str, Dict[str, float]]:
    """
    Play every ordered pairing of distinct strategy types on every seed.

    Returns:
        Per strategy name: games, wins, forfeits and average score
    """
    config = load_config()
    types = [parse_strategy_type(t) for t in strategy_types]
    stats: Dict[str, Dict[str, float]] = {
        t.value: {'games': 0, 'wins': 0, 'forfeits': 0, 'total_score': 0} for t in types
    }

    for type_a, type_b in itertools.permutations(types, 2):
        for seed in seeds:
            record = run_game(
                create_strategy(PlayerId.PLAYER_A, type_a, config),
                create_strategy(PlayerId.PLAYER_B, type_b, config),
                size, seed, game_type,
            )
            for strategy_type, player, score in (
                (type_a, PlayerId.PLAYER_A, record.score_a),
                (type_b, PlayerId.PLAYER_B, record.score_b),
            ):
                entry = stats[strategy_type.value]
                entry['games'] += 1
                entry['total_score'] += score
                if record.winner == player.value:
                    entry['wins'] += 1
                if record.forfeited_by == player.value:
                    entry['forfeits'] += 1

    for entry in stats.values():
        entry['average_score'] = entry['total_score'] / entry['games'] if entry['games'] else 0.0
    return stats
