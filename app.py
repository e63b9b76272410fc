"""
Remote play server for the facility game.

The server hosts each game together with its own strategy; a remote client
plays the other seat by posting move indices. After every accepted client
move the server answers with its own move in the same response.
"""

import logging
import uuid
from dataclasses import dataclass
from typing import Dict, Optional

from flask import Flask, request, jsonify
from flask_cors import CORS

from models import ConfigurationError, PlayerId
from moves import apply_move
from scoring import count_owned, score_breakdown, verify_pairing
from state import FacilityGame, get_game_summary, get_player_view, initialize_game, load_config
from strategies.base import Strategy, StrategyError
from strategies.factory import create_strategy

logger = logging.getLogger(__name__)

app = Flask(__name__)
CORS(app)  # Enable CORS for all routes


@dataclass
class HostedGame:
    """A game in progress on the server."""
    game: FacilityGame
    server_strategy: Strategy
    server_player: PlayerId
    client_about: Optional[str] = None
    forfeited_by: Optional[PlayerId] = None

    @property
    def client_player(self) -> PlayerId:
        return self.server_player.opponent()

    @property
    def ended(self) -> bool:
        return self.forfeited_by is not None or self.game.is_finished()

    def winner(self) -> Optional[PlayerId]:
        if self.forfeited_by is not None:
            return self.forfeited_by.opponent()
        if not self.game.is_finished():
            return None
        return self.game.score.leader()


games: Dict[str, HostedGame] = {}  # In-memory storage for hosted games


def _play_server_move(hosted: HostedGame) -> Optional[int]:
    """Let the server strategy move if it is its turn. Returns the index played."""
    game = hosted.game
    if hosted.ended or game.next_player != hosted.server_player:
        return None
    index = hosted.server_strategy.next_move(get_player_view(game))
    if not apply_move(game, hosted.server_player, index):
        hosted.forfeited_by = hosted.server_player
        logger.warning("Server strategy %s played an illegal move %s", hosted.server_strategy.name, index)
        return None
    return index


def _state_json(game_id: str, hosted: HostedGame) -> Dict:
    summary = get_game_summary(hosted.game)
    winner = hosted.winner()
    summary.update({
        'game_id': game_id,
        'server_player': hosted.server_player.value,
        'client_player': hosted.client_player.value,
        'ended': hosted.ended,
        'winner': winner.value if winner else None,
        'forfeited_by': hosted.forfeited_by.value if hosted.forfeited_by else None,
    })
    return summary


@app.route('/api/game/new', methods=['POST'])
def new_game():
    """Create a new game hosted against a server-side strategy."""
    data = request.get_json(silent=True)
    if data is None:
        return jsonify({'error': 'Invalid JSON data'}), 400

    config = load_config()
    server_is_player_a = bool(data.get('server_is_player_a', False))
    server_player = PlayerId.PLAYER_A if server_is_player_a else PlayerId.PLAYER_B

    try:
        game = initialize_game(
            data.get('size', config['default_size']),
            data.get('seed', config['default_seed']),
            data.get('game_type', config['default_game_type']),
            config,
        )
        strategy = create_strategy(server_player, data.get('server_strategy', 'NIGHTHAWK'), config)
    except ConfigurationError as e:
        return jsonify({'error': str(e)}), 400

    strategy.initialize(get_player_view(game))

    game_id = str(uuid.uuid4())
    games[game_id] = HostedGame(game=game, server_strategy=strategy, server_player=server_player)
    logger.info("Created game %s: %d nodes, seed %d, %s, server plays %s as %s",
                game_id, game.num_nodes, game.seed, game.game_type.value, strategy.name, server_player.value)

    return jsonify({
        'game_id': game_id,
        'size': game.num_nodes,
        'seed': game.seed,
        'game_type': game.game_type.value,
        'server_player': server_player.value,
        'client_player': server_player.opponent().value,
        'server_about': strategy.about,
    })


@app.route('/api/game/<game_id>/join', methods=['POST'])
def join_game(game_id: str):
    """Register the client's about string; the server opens if it is player A."""
    if game_id not in games:
        return jsonify({'error': 'Game not found'}), 404

    hosted = games[game_id]
    data = request.get_json(silent=True) or {}
    hosted.client_about = str(data.get('about', 'anonymous'))

    try:
        server_move = _play_server_move(hosted)
    except StrategyError as e:
        return jsonify({'error': f'Server strategy failed: {str(e)}'}), 500

    return jsonify({
        'accepted': True,
        'server_move': server_move,
        'state': _state_json(game_id, hosted),
    })


@app.route('/api/game/<game_id>/state', methods=['GET'])
def get_game_state(game_id: str):
    """Retrieve the current game state for the given game ID."""
    if game_id not in games:
        return jsonify({'error': 'Game not found'}), 404
    return jsonify(_state_json(game_id, games[game_id]))


@app.route('/api/game/<game_id>/move', methods=['POST'])
def submit_move(game_id: str):
    """Apply the client's move, then answer with the server's move."""
    if game_id not in games:
        return jsonify({'error': 'Game not found'}), 404

    hosted = games[game_id]
    if hosted.ended:
        return jsonify({'error': 'Game has already ended'}), 400

    data = request.get_json(silent=True)
    if data is None or 'index' not in data:
        return jsonify({'error': 'Move must have an index field'}), 400

    index = data['index']
    if not apply_move(hosted.game, hosted.client_player, index):
        # An illegal move is the erring player's loss
        hosted.forfeited_by = hosted.client_player
        error = hosted.game.log[-1]['event']
        return jsonify({
            'accepted': False,
            'errors': [error],
            'server_move': None,
            'state': _state_json(game_id, hosted),
        })

    try:
        server_move = _play_server_move(hosted)
    except StrategyError as e:
        return jsonify({'error': f'Server strategy failed: {str(e)}'}), 500

    return jsonify({
        'accepted': True,
        'errors': [],
        'server_move': server_move,
        'state': _state_json(game_id, hosted),
    })


@app.route('/api/game/<game_id>/score', methods=['GET'])
def get_score(game_id: str):
    """Scores with a per-run breakdown for both players."""
    if game_id not in games:
        return jsonify({'error': 'Game not found'}), 404

    hosted = games[game_id]
    game = hosted.game
    winner = hosted.winner()
    owned = count_owned(game.statuses)
    return jsonify({
        'game_id': game_id,
        'score': {player.value: game.score.get_score(player) for player in PlayerId},
        'breakdown': {player.value: score_breakdown(game.values, game.statuses, player) for player in PlayerId},
        'nodes_owned': {player.value: count for player, count in owned.items()},
        'about': {
            hosted.server_player.value: hosted.server_strategy.about,
            hosted.client_player.value: hosted.client_about,
        },
        'winner': winner.value if winner else None,
    })


@app.route('/api/game/<game_id>/log', methods=['GET'])
def get_game_log(game_id: str):
    """Retrieve the full game log for analysis."""
    if game_id not in games:
        return jsonify({'error': 'Game not found'}), 404

    game = games[game_id].game
    return jsonify({'game_id': game_id, 'log': game.log})


@app.route('/api/game/<game_id>/verify', methods=['GET'])
def verify_game(game_id: str):
    """Check that player B answered player A as the COPY/COMPLEMENT variant demands."""
    if game_id not in games:
        return jsonify({'error': 'Game not found'}), 404

    game = games[game_id].game
    report = verify_pairing(game.game_type, game.values, game.moves, game.complement_constant)
    report['game_id'] = game_id
    report['game_type'] = game.game_type.value
    return jsonify(report)


if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO)
    app.run(debug=True)
