"""
CLI play mode for the facility game.

Plays two strategies against each other on one board and prints the
result: the final board, the score with its per-run breakdown, each
player's moves and, for COPY/COMPLEMENT games, whether player B kept to
the pairing rule.

Usage: python play_cli.py [PLAYER_A] [PLAYER_B] --size 20 --seed 7 --game-type COPY
"""

import argparse
import logging
import sys

from models import ConfigurationError, FacilityStatus, GameType, PlayerId
from monitor import MonitorThread
from scoring import score_breakdown, verify_pairing
from simulate import play_game
from state import FacilityGame, initialize_game, load_config
from strategies.base import StrategyError
from strategies.factory import StrategyType, create_strategy


# ---------------------------------------------------------------------------
# Board Renderer
# ---------------------------------------------------------------------------


def render_board(game: FacilityGame):
    """Print one line per node: index, value and status."""
    width = len(str(game.num_nodes - 1))
    for idx in range(game.num_nodes):
        print(f"  {idx:>{width}}: {game.get_value(idx):>5} {game.get_status(idx).value}")


def render_strip(game: FacilityGame) -> str:
    """Compact one-line board: A/B for owned nodes, '-' blocked, '.' free."""
    chars = []
    for status in game.statuses:
        short = status.short()
        if short != " ":
            chars.append(short)
        elif status == FacilityStatus.BLOCKED:
            chars.append("-")
        else:
            chars.append(".")
    return "".join(chars)


# ---------------------------------------------------------------------------
# Result Display
# ---------------------------------------------------------------------------


def show_result(game: FacilityGame, names: dict, forfeited_by, verbose: bool = False):
    """Print scores, moves and the pairing verdict."""
    if verbose:
        for entry in game.log:
            print(f"  [{entry['ply']}] {entry['event']}")
    print("\n" + "=" * 50)
    if verbose:
        render_board(game)
    print(f"  Board: {render_strip(game)}")
    print(f"  {game.score}")

    for player in PlayerId:
        moves = ", ".join(str(m) for m in game.moves_of(player))
        print(f"  MOVES {names[player]} ({player.value}): {moves}")
    for player in PlayerId:
        print(f"  SCORE {names[player]}: {score_breakdown(game.values, game.statuses, player)}")

    if game.game_type != GameType.NORMAL:
        report = verify_pairing(game.game_type, game.values, game.moves, game.complement_constant)
        verdict = "SUCCESS" if report['success'] else "FAILURE"
        print(f"  {game.game_type.value} check: {verdict} ({report['rounds']} rounds)")
        for mismatch in report['mismatches']:
            print(
                f"    round {mismatch['round']}: A took {mismatch['player_a_move']}"
                f" ({mismatch['player_a_value']}), B took {mismatch['player_b_move']}"
                f" ({mismatch['player_b_value']})"
            )

    if forfeited_by is not None:
        print(f"  RESULT: {names[forfeited_by]} forfeits with an illegal move. "
              f"{names[forfeited_by.opponent()]} wins.")
    else:
        leader = game.score.leader()
        if leader is None:
            print("  RESULT: DRAW")
        else:
            print(f"  RESULT: {names[leader]} ({leader.value}) wins.")
    print("=" * 50)


def build_parser(config: dict) -> argparse.ArgumentParser:
    choices = ", ".join(t.value for t in StrategyType)
    parser = argparse.ArgumentParser(description="Play a facility game between two strategies")
    parser.add_argument("player_a", nargs="?", default=config["default_strategy"],
                        help=f"Strategy for player A ({choices})")
    parser.add_argument("player_b", nargs="?", default=config["default_strategy"],
                        help="Strategy for player B")
    parser.add_argument("--size", type=int, default=config["default_size"], help="Number of nodes")
    parser.add_argument("--seed", type=int, default=config["default_seed"], help="Board seed")
    parser.add_argument("--game-type", default=config["default_game_type"],
                        help="NORMAL, COPY or COMPLEMENT")
    parser.add_argument("--verbose", action="store_true",
                        help="Print the game event log and every node of the final board")
    parser.add_argument("--monitor", action="store_true", help="Log stalled players")
    return parser


def main(argv=None) -> int:
    config = load_config()
    args = build_parser(config).parse_args(argv)
    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING)

    try:
        game = initialize_game(args.size, args.seed, args.game_type, config)
        strategy_a = create_strategy(PlayerId.PLAYER_A, args.player_a, config)
        strategy_b = create_strategy(PlayerId.PLAYER_B, args.player_b, config)
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    names = {PlayerId.PLAYER_A: strategy_a.name, PlayerId.PLAYER_B: strategy_b.name}
    print(f"Starting game of {strategy_a.about} VS {strategy_b.about}")
    print(f"  {game.num_nodes} nodes, seed {game.seed}, {game.game_type.value}")

    monitor = None
    if args.monitor:
        monitor = MonitorThread.from_config(config)
        monitor.start()

    try:
        forfeited_by = play_game(game, {PlayerId.PLAYER_A: strategy_a, PlayerId.PLAYER_B: strategy_b}, monitor)
    except StrategyError as e:
        print(f"Error: {game.next_player.value} could not move: {e}", file=sys.stderr)
        return 1

    show_result(game, names, forfeited_by, verbose=args.verbose)
    return 0


if __name__ == "__main__":
    sys.exit(main())
