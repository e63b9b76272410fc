#!/usr/bin/env python3
"""
Remote play client for the facility game.

Plays a local strategy against a strategy hosted by app.py. The client keeps
a local mirror of the game (same size, seed and type, same moves) so the
local strategy sees an ordinary GameView.

Usage: python client.py NIGHTHAWK --url http://127.0.0.1:5000/api --size 20
"""

import argparse
import logging
from typing import Any, Dict, Optional

import requests

from models import ConfigurationError, PlayerId, PlayerState
from monitor import MonitorThread
from moves import apply_move
from state import FacilityGame, get_player_view, initialize_game, load_config
from strategies.base import Strategy
from strategies.factory import create_strategy

logger = logging.getLogger(__name__)

DEFAULT_URL = 'http://127.0.0.1:5000/api'


class RemoteGameError(Exception):
    """Raised when the server rejects a request or the mirror diverges."""
    pass


class RemoteGameClient:
    """Client for the remote play API."""

    def __init__(self, base_url: str = DEFAULT_URL, session: Optional[Any] = None):
        self.base_url = base_url.rstrip('/')
        self.session = session or requests.Session()
        self.game_id: Optional[str] = None
        self.client_player: Optional[PlayerId] = None
        self.mirror: Optional[FacilityGame] = None

    def _post(self, path: str, data: Dict[str, Any]) -> Dict[str, Any]:
        response = self.session.post(f"{self.base_url}{path}", json=data)
        if response.status_code != 200:
            raise RemoteGameError(f"POST {path} failed: {response.status_code} - {response.text}")
        return response.json()

    def _get(self, path: str) -> Dict[str, Any]:
        response = self.session.get(f"{self.base_url}{path}")
        if response.status_code != 200:
            raise RemoteGameError(f"GET {path} failed: {response.status_code} - {response.text}")
        return response.json()

    def create_game(self, size: int, seed: int, game_type: str = 'NORMAL',
                    server_strategy: str = 'NIGHTHAWK', server_is_player_a: bool = False) -> Dict[str, Any]:
        """Create a game on the server and build the local mirror."""
        result = self._post('/game/new', {
            'size': size,
            'seed': seed,
            'game_type': game_type,
            'server_strategy': server_strategy,
            'server_is_player_a': server_is_player_a,
        })
        self.game_id = result['game_id']
        self.client_player = PlayerId(result['client_player'])
        self.mirror = initialize_game(result['size'], result['seed'], result['game_type'])
        return result

    def join(self, about: str) -> Dict[str, Any]:
        result = self._post(f'/game/{self.game_id}/join', {'about': about})
        self._mirror_server_move(result.get('server_move'))
        return result

    def submit_move(self, index: int) -> Dict[str, Any]:
        """Send a move; mirrors it and the server's answer locally when accepted."""
        result = self._post(f'/game/{self.game_id}/move', {'index': index})
        if result.get('accepted'):
            if not apply_move(self.mirror, self.client_player, index):
                raise RemoteGameError(f"Local mirror rejected move {index} accepted by the server")
            self._mirror_server_move(result.get('server_move'))
        return result

    def _mirror_server_move(self, index: Optional[int]) -> None:
        if index is None:
            return
        if not apply_move(self.mirror, self.client_player.opponent(), index):
            raise RemoteGameError(f"Local mirror rejected server move {index}")

    def get_state(self) -> Dict[str, Any]:
        return self._get(f'/game/{self.game_id}/state')

    def get_score(self) -> Dict[str, Any]:
        return self._get(f'/game/{self.game_id}/score')

    def verify(self) -> Dict[str, Any]:
        return self._get(f'/game/{self.game_id}/verify')

    def play(self, strategy: Strategy, monitor: Optional[MonitorThread] = None) -> Dict[str, Any]:
        """
        Play the client's seat until the game ends.

        The game must have been created with create_game(). Returns the final
        score report from the server.
        """
        if self.mirror is None:
            raise RemoteGameError("No game created")
        if strategy.whoami is not self.client_player:
            raise RemoteGameError(
                f"{strategy.name} plays {strategy.whoami.value}, the client seat is {self.client_player.value}"
            )

        strategy.initialize(get_player_view(self.mirror))
        if monitor:
            monitor.set_state(self.mirror.num_moves, PlayerState.STARTING)
        self.join(strategy.about)

        try:
            while not self.mirror.is_finished():
                if self.mirror.next_player != self.client_player:
                    raise RemoteGameError("Server did not answer with a move")
                if monitor:
                    monitor.set_state(self.mirror.num_moves, PlayerState.WAITING_FOR_ME)
                index = strategy.next_move(get_player_view(self.mirror))
                if monitor:
                    monitor.set_state(self.mirror.num_moves, PlayerState.WAITING_FOR_OPPONENT)
                result = self.submit_move(index)
                if not result.get('accepted'):
                    logger.warning("Move %s rejected: %s", index, result.get('errors'))
                    break
                if result['state'].get('ended') and not self.mirror.is_finished():
                    break
        finally:
            if monitor:
                monitor.log(f"remote game {self.game_id} over after {self.mirror.num_moves} moves")
                monitor.set_state(self.mirror.num_moves, PlayerState.TERMINATING)
                monitor.request_stop()

        return self.get_score()


def main(argv=None) -> int:
    config = load_config()
    parser = argparse.ArgumentParser(description="Play a facility game against a remote server")
    parser.add_argument('strategy', nargs='?', default=config['default_strategy'])
    parser.add_argument('--url', default=DEFAULT_URL)
    parser.add_argument('--size', type=int, default=config['default_size'])
    parser.add_argument('--seed', type=int, default=config['default_seed'])
    parser.add_argument('--game-type', default=config['default_game_type'])
    parser.add_argument('--server-strategy', default='NIGHTHAWK')
    parser.add_argument('--client-is-player-a', action='store_true')
    parser.add_argument('--monitor', action='store_true')
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO)
    client = RemoteGameClient(args.url)
    try:
        client.create_game(args.size, args.seed, args.game_type, args.server_strategy,
                           server_is_player_a=not args.client_is_player_a)
        strategy = create_strategy(client.client_player, args.strategy, config)
    except (ConfigurationError, RemoteGameError, requests.RequestException) as e:
        print(f"Error: {e}")
        return 1

    monitor = None
    if args.monitor:
        monitor = MonitorThread.from_config(config)
        monitor.start()

    score = client.play(strategy, monitor)
    print(f"Client ({client.client_player.value}): the game finished")
    for player, breakdown in score['breakdown'].items():
        print(f"{player}: {breakdown}")
    print(f"Winner: {score['winner'] or 'draw'}")
    return 0


if __name__ == '__main__':
    raise SystemExit(main())
