"""Tests for the NightHawk group-tracking strategy."""

import pytest

from models import FacilityStatus, GameType, PlayerId
from moves import apply_move
from simulate import play_game, run_game
from state import get_player_view, initialize_game
from strategies.baselines import FirstFreeStrategy, HighestFreeValueStrategy
from strategies.nighthawk import (
    BLOCKING_RISK_FACTOR,
    Group,
    GroupTracker,
    NightHawk,
    edge_value,
    middle_positions,
    middle_value,
)
from tests.conftest import A, B, F, X, make_game


# --- Group tracking ---


def test_nodes_three_apart_merge():
    tracker = GroupTracker()
    tracker.add(10, 4)
    group = tracker.add(13, 6)
    assert len(tracker) == 1
    assert (group.left_idx, group.right_idx) == (10, 13)
    assert group.node_count == 2
    assert group.accumulated_value == 10


def test_nodes_five_apart_stay_separate():
    tracker = GroupTracker()
    tracker.add(10, 4)
    tracker.add(15, 6)
    assert len(tracker) == 2
    assert [(g.left_idx, g.right_idx) for g in tracker.groups] == [(10, 10), (15, 15)]


def test_merge_to_the_left():
    tracker = GroupTracker()
    tracker.add(20, 1)
    group = tracker.add(17, 2)
    assert len(tracker) == 1
    assert (group.left_idx, group.right_idx, group.node_count) == (17, 20, 2)


def test_node_bridges_two_groups():
    tracker = GroupTracker()
    tracker.add(10, 1)
    tracker.add(16, 2)
    group = tracker.add(13, 3)
    assert len(tracker) == 1
    assert (group.left_idx, group.right_idx) == (10, 16)
    assert group.node_count == 3
    assert group.accumulated_value == 6
    assert group.is_bonused


def test_joins_across_preblocked_middle():
    tracker = GroupTracker(preblocked={4})
    assert tracker.joins(2, 6)
    assert tracker.joins(3, 5)
    assert not tracker.joins(1, 6)
    assert not GroupTracker().joins(2, 6)


def test_preblocked_middle_merges_groups():
    tracker = GroupTracker(preblocked={4})
    tracker.add(2, 3)
    group = tracker.add(6, 3)
    assert len(tracker) == 1
    assert (group.left_idx, group.right_idx, group.node_count) == (2, 6, 2)

    tracker = GroupTracker()
    tracker.add(2, 3)
    tracker.add(6, 3)
    assert len(tracker) == 2


def test_groups_stay_sorted():
    tracker = GroupTracker()
    for idx in (30, 2, 18, 9):
        tracker.add(idx, 1)
    lefts = [g.left_idx for g in tracker.groups]
    assert lefts == sorted(lefts)


# --- Candidate values ---


def test_edge_value_by_group_size():
    assert edge_value(Group(5, 5, 1, 7), 4) == 4
    assert edge_value(Group(5, 8, 2, 7), 4) == 3 * 4 + 2 * 7
    assert edge_value(Group(5, 11, 3, 30), 4) == 12


def test_middle_value_weights():
    single = Group(2, 2, 1, 5)
    triple = Group(8, 14, 3, 20)
    assert middle_value(single, Group(6, 6, 1, 5), 1) == 2 * 5 + 3 * 1 + 2 * 5
    assert middle_value(single, triple, 1) == 2 * 5 + 3 * 1 + 3 * 20


@pytest.mark.parametrize("right_left_idx, expected", [
    (6, [4]),
    (7, [4, 5]),
    (8, [5]),
    (5, []),
    (9, []),
])
def test_middle_positions(right_left_idx, expected):
    left = Group(2, 2, 1, 1)
    right = Group(right_left_idx, right_left_idx, 1, 1)
    assert middle_positions(left, right) == expected


def test_dead_ends_are_marked_blocked():
    tracker = GroupTracker()
    tracker.add(0, 1)
    statuses = [A, X, F, F, F]
    candidates = tracker.edge_candidates(statuses, [1, 1, 2, 3, 1])
    assert [c.index for c in candidates] == [2, 3]
    group = tracker.groups[0]
    assert group.blocked_left
    assert not group.blocked_right

    statuses = [A, X, B, X, F]
    assert tracker.edge_candidates(statuses, [1, 1, 2, 3, 1]) == []
    assert group.blocked_right


# --- Move choice ---


def _prepared(values, statuses, moves, own):
    """NightHawk as PLAYER_A with its own earlier moves already folded in."""
    game = make_game(values, statuses=statuses, moves=moves)
    strategy = NightHawk(PlayerId.PLAYER_A)
    strategy.initialize(get_player_view(game))
    for idx in own:
        strategy.own_groups.add(idx, values[idx])
    return game, strategy


def test_extends_pair_into_triplet():
    values = [1, 1, 5, 1, 1, 5, 1, 4, 2, 1, 1, 3, 1, 3]
    statuses = [F, X, A, X, X, A, X, F, F, F, X, B, X, B]
    game, strategy = _prepared(values, statuses, [2, 11, 5, 13], own=[2, 5])

    assert strategy.next_move(get_player_view(game)) == 7
    assert strategy.last_candidate.kind == "edge"
    assert strategy.last_candidate.value == 3 * 4 + 2 * 10
    group = strategy.own_groups.groups[0]
    assert (group.left_idx, group.right_idx, group.node_count) == (2, 7, 3)


def test_opponent_moves_are_tracked():
    values = [1, 1, 5, 1, 1, 5, 1, 4, 2, 1, 1, 3, 1, 3]
    statuses = [F, X, A, X, X, A, X, F, F, F, X, B, X, B]
    game, strategy = _prepared(values, statuses, [2, 11, 5, 13], own=[2, 5])
    strategy.next_move(get_player_view(game))

    assert strategy.moves_seen == 4
    assert len(strategy.opponent_groups) == 1
    group = strategy.opponent_groups.groups[0]
    assert (group.left_idx, group.right_idx, group.node_count) == (11, 13, 2)


def test_blocks_opponent_pair():
    values = [1, 1, 1, 2, 1, 10, 1, 1, 10, 1, 1, 1]
    statuses = [A, X, F, F, X, B, X, X, B, X, X, A]
    game, strategy = _prepared(values, statuses, [0, 5, 11, 8], own=[0, 11])

    assert strategy.next_move(get_player_view(game)) == 3
    assert strategy.last_candidate.kind == "block_edge"
    assert strategy.last_candidate.value == pytest.approx((3 * 2 + 2 * 20) * BLOCKING_RISK_FACTOR)


def test_no_blocking_when_risk_factor_is_zero():
    values = [1, 1, 1, 2, 1, 10, 1, 1, 10, 1, 1, 1]
    statuses = [A, X, F, F, X, B, X, X, B, X, X, A]
    game, strategy = _prepared(values, statuses, [0, 5, 11, 8], own=[0, 11])
    strategy.risk_factor = 0

    assert strategy.next_move(get_player_view(game)) == 3
    assert strategy.last_candidate.kind == "edge"


def test_fills_middle_between_groups():
    values = [1, 1, 5, 1, 1, 1, 5, 1, 1, 1]
    statuses = [B, X, A, X, F, X, A, X, X, B]
    game, strategy = _prepared(values, statuses, [2, 9, 6, 0], own=[2, 6])

    assert strategy.next_move(get_player_view(game)) == 4
    assert strategy.last_candidate.kind == "middle"
    assert strategy.last_candidate.value == 2 * 5 + 3 * 1 + 2 * 5
    assert len(strategy.own_groups) == 1
    assert strategy.own_groups.groups[0].node_count == 3


def test_first_move_takes_most_valuable_node():
    game = make_game([3, 9, 4, 9, 1])
    strategy = NightHawk(PlayerId.PLAYER_A)
    assert strategy.next_move(get_player_view(game)) == 1
    assert strategy.last_candidate.kind == "fallback"


def test_full_board_raises():
    from strategies.base import NoAvailableMoveError

    game = make_game([1, 2, 3], statuses=[A, X, B], moves=[0, 2])
    strategy = NightHawk(PlayerId.PLAYER_A)
    with pytest.raises(NoAvailableMoveError):
        strategy.next_move(get_player_view(game))


# --- Full games ---


@pytest.mark.parametrize("seed", [1, 7, 42, 1234])
def test_plays_legal_games_as_either_player(seed):
    record = run_game(NightHawk(PlayerId.PLAYER_A), FirstFreeStrategy(PlayerId.PLAYER_B), size=30, seed=seed)
    assert record.finished
    assert record.forfeited_by is None

    record = run_game(HighestFreeValueStrategy(PlayerId.PLAYER_A), NightHawk(PlayerId.PLAYER_B), size=31, seed=seed)
    assert record.finished
    assert record.forfeited_by is None


def _runs_of(statuses, player):
    """(left, right, node count) of each scoring run; BLOCKED nodes do not split a run."""
    owned = FacilityStatus.owned_by(player)
    runs = []
    current = None
    for idx, status in enumerate(statuses):
        if status == owned:
            current = [idx, idx, 1] if current is None else [current[0], idx, current[2] + 1]
        elif status != FacilityStatus.BLOCKED and current is not None:
            runs.append(tuple(current))
            current = None
    if current is not None:
        runs.append(tuple(current))
    return runs


def test_odd_copy_board_groups_span_middle():
    game = initialize_game(size=9, seed=14, game_type=GameType.COPY)
    strategy = NightHawk(PlayerId.PLAYER_A)
    strategy.initialize(get_player_view(game))
    assert strategy.own_groups.preblocked == {4}

    for player, idx in ((PlayerId.PLAYER_A, 2), (PlayerId.PLAYER_B, 8), (PlayerId.PLAYER_A, 6)):
        assert apply_move(game, player, idx)
    strategy.own_groups.add(2, game.values[2])
    strategy.own_groups.add(6, game.values[6])

    groups = [(g.left_idx, g.right_idx, g.node_count) for g in strategy.own_groups.groups]
    assert groups == [(2, 6, 2)]
    assert groups == _runs_of(game.statuses, PlayerId.PLAYER_A)


@pytest.mark.parametrize("game_type", [GameType.COPY, GameType.COMPLEMENT])
@pytest.mark.parametrize("size", [9, 10, 11, 12])
@pytest.mark.parametrize("seed", [3, 14, 58])
def test_paired_boards_groups_match_runs(game_type, size, seed):
    for seat, opponent_cls in ((PlayerId.PLAYER_A, FirstFreeStrategy), (PlayerId.PLAYER_B, HighestFreeValueStrategy)):
        game = initialize_game(size=size, seed=seed, game_type=game_type)
        nighthawk = NightHawk(seat)
        forfeited_by = play_game(game, {seat: nighthawk, seat.opponent(): opponent_cls(seat.opponent())})

        assert forfeited_by is None
        assert game.is_finished()
        groups = [(g.left_idx, g.right_idx, g.node_count) for g in nighthawk.own_groups.groups]
        assert groups == _runs_of(game.statuses, seat)
