"""End-to-end games through the driver."""

from unittest.mock import MagicMock

import pytest

from models import ConfigurationError, GameType, PlayerId, PlayerState
from simulate import GameRecord, play_game, run_game, run_tournament
from state import initialize_game
from strategies.base import Strategy
from strategies.baselines import FirstFreeStrategy, HighestFreeValueStrategy


class RepeatStrategy(Strategy):
    """Always plays the same index; illegal from its second move on."""

    name = "Repeat"

    def next_move(self, view):
        return 0


def test_first_free_vs_highest_terminates():
    record = run_game(
        FirstFreeStrategy(PlayerId.PLAYER_A),
        HighestFreeValueStrategy(PlayerId.PLAYER_B),
        size=20, seed=1234,
    )
    assert isinstance(record, GameRecord)
    assert record.finished
    assert record.forfeited_by is None
    assert record.player_a == "SimpleFPlayer1"
    assert record.player_b == "Highest"
    assert record.nodes_owned['PLAYER_A'] + record.nodes_owned['PLAYER_B'] == len(record.moves)
    assert 0 <= len(record.moves[0::2]) - len(record.moves[1::2]) <= 1


def test_games_are_deterministic():
    records = [
        run_game(FirstFreeStrategy(PlayerId.PLAYER_A), HighestFreeValueStrategy(PlayerId.PLAYER_B), 20, 1234)
        for _ in range(2)
    ]
    assert records[0].moves == records[1].moves
    assert (records[0].score_a, records[0].score_b) == (records[1].score_a, records[1].score_b)


def test_turns_alternate():
    game = initialize_game(size=20, seed=9)
    play_game(game, {
        PlayerId.PLAYER_A: FirstFreeStrategy(PlayerId.PLAYER_A),
        PlayerId.PLAYER_B: HighestFreeValueStrategy(PlayerId.PLAYER_B),
    })
    owners = {idx: game.statuses[idx].value for idx in game.moves}
    for ply, idx in enumerate(game.moves):
        assert owners[idx] == game.player_of_ply(ply).value


def test_winner_matches_scores():
    record = run_game(FirstFreeStrategy(PlayerId.PLAYER_A), HighestFreeValueStrategy(PlayerId.PLAYER_B), 20, 77)
    if record.score_a > record.score_b:
        assert record.winner == 'PLAYER_A'
    elif record.score_b > record.score_a:
        assert record.winner == 'PLAYER_B'
    else:
        assert record.winner is None


def test_illegal_move_forfeits():
    record = run_game(FirstFreeStrategy(PlayerId.PLAYER_A), RepeatStrategy(PlayerId.PLAYER_B), 10, 1)
    assert record.forfeited_by == 'PLAYER_B'
    assert record.winner == 'PLAYER_A'
    assert record.moves == [0]
    assert not record.finished


def test_monitor_receives_states():
    monitor = MagicMock()
    game = initialize_game(size=6, seed=2)
    play_game(game, {
        PlayerId.PLAYER_A: FirstFreeStrategy(PlayerId.PLAYER_A),
        PlayerId.PLAYER_B: FirstFreeStrategy(PlayerId.PLAYER_B),
    }, monitor)

    states = [c.args[1] for c in monitor.set_state.call_args_list]
    assert states[0] is PlayerState.WAITING_FOR_ME
    assert states[1] is PlayerState.WAITING_FOR_OPPONENT
    assert states[-1] is PlayerState.TERMINATING
    monitor.request_stop.assert_called_once()
    monitor.log.assert_called_once_with(f"game over after {game.num_moves} moves")


def test_strategy_in_wrong_seat_is_rejected():
    game = initialize_game(size=6, seed=2)
    with pytest.raises(ConfigurationError):
        play_game(game, {
            PlayerId.PLAYER_A: FirstFreeStrategy(PlayerId.PLAYER_B),
            PlayerId.PLAYER_B: FirstFreeStrategy(PlayerId.PLAYER_A),
        })
    assert game.moves == []


def test_record_to_dict():
    record = run_game(FirstFreeStrategy(PlayerId.PLAYER_A), FirstFreeStrategy(PlayerId.PLAYER_B), 8, 3,
                      GameType.COPY)
    data = record.to_dict()
    assert data['game_type'] == 'COPY'
    assert data['score'] == {'PLAYER_A': record.score_a, 'PLAYER_B': record.score_b}
    assert data['pairing']['applicable'] is True


def test_tournament_stats():
    stats = run_tournament(["FPLAYER_SIMPLE_1", "fplayer_highest"], size=15, seeds=[1, 2])
    assert set(stats) == {"FPLAYER_SIMPLE_1", "FPLAYER_HIGHEST"}
    for entry in stats.values():
        assert entry['games'] == 4
        assert entry['forfeits'] == 0
        assert entry['average_score'] == pytest.approx(entry['total_score'] / 4)
    total_wins = sum(entry['wins'] for entry in stats.values())
    assert total_wins <= 4
