"""
Scoring rules for the facility game.

A player's nodes score their value. Runs of at least BONUS_MIN_GROUP_SIZE
nodes score BONUS_FACTOR times their value. BLOCKED nodes are transparent
inside a run; FREE nodes and the opponent's nodes end it.
"""

from typing import Dict, List, Sequence, Tuple

from models import FacilityStatus, GameType, PlayerId

BONUS_MIN_GROUP_SIZE = 3
BONUS_FACTOR = 3


def iter_runs(
    values: Sequence[int], statuses: Sequence[FacilityStatus], player: PlayerId
) -> List[Tuple[List[int], bool]]:
    """
    Split a player's nodes into scoring runs.

    Args:
        values: Node values
        statuses: Node statuses
        player: Player whose runs are collected

    Returns:
        List of (run values, bonus applies) tuples, left to right
    """
    owned = FacilityStatus.owned_by(player)
    runs = []
    current: List[int] = []

    for value, status in zip(values, statuses):
        if status == owned:
            current.append(value)
        elif status == FacilityStatus.BLOCKED:
            continue
        elif current:
            runs.append((current, len(current) >= BONUS_MIN_GROUP_SIZE))
            current = []

    if current:
        runs.append((current, len(current) >= BONUS_MIN_GROUP_SIZE))
    return runs


def compute_score(values: Sequence[int], statuses: Sequence[FacilityStatus], player: PlayerId) -> int:
    """Score of `player` for the given board."""
    score = 0
    for run, bonus in iter_runs(values, statuses, player):
        run_total = sum(run)
        if bonus:
            run_total *= BONUS_FACTOR
        score += run_total
    return score


def score_breakdown(values: Sequence[int], statuses: Sequence[FacilityStatus], player: PlayerId) -> str:
    """
    Human-readable score calculation, e.g. ``(5+7)=12 (2+3+4)*3=27 === 39``.
    """
    parts = []
    score = 0
    for run, bonus in iter_runs(values, statuses, player):
        run_total = sum(run)
        text = "(" + "+".join(str(v) for v in run) + ")"
        if bonus:
            run_total *= BONUS_FACTOR
            text += f"*{BONUS_FACTOR}"
        text += f"={run_total}"
        parts.append(text)
        score += run_total
    return " ".join(parts + [f"=== {score}"])


def count_owned(statuses: Sequence[FacilityStatus]) -> Dict[PlayerId, int]:
    """Number of nodes held by each player."""
    return {
        player: sum(1 for s in statuses if s == FacilityStatus.owned_by(player))
        for player in PlayerId
    }


def verify_pairing(game_type: GameType, values: Sequence[int], moves: Sequence[int],
                   complement_constant: int) -> Dict:
    """
    Check that player B answered every move of player A as the variant demands.

    COPY games require B to take a node of the same value as A's move of the
    same round; COMPLEMENT games require the two values to add up to
    complement_constant. NORMAL games have no pairing rule.

    Args:
        game_type: Board variant
        values: Node values
        moves: Move log (A's moves at even positions)
        complement_constant: Sum required for COMPLEMENT pairs

    Returns:
        Dictionary with the pairing verdict and any mismatched rounds
    """
    if game_type == GameType.NORMAL:
        return {'applicable': False, 'success': True, 'rounds': 0, 'mismatches': []}

    mismatches = []
    rounds = 0
    for a_move, b_move in zip(moves[0::2], moves[1::2]):
        a_value = values[a_move]
        b_value = values[b_move]
        if game_type == GameType.COPY:
            matched = a_value == b_value
        else:
            matched = a_value + b_value == complement_constant
        if not matched:
            mismatches.append({
                'round': rounds,
                'player_a_move': a_move,
                'player_b_move': b_move,
                'player_a_value': a_value,
                'player_b_value': b_value,
            })
        rounds += 1

    # A's last move stays unanswered when it filled the board
    unanswered = len(moves) % 2 == 1
    return {
        'applicable': True,
        'success': not mismatches,
        'rounds': rounds,
        'unanswered': unanswered,
        'mismatches': mismatches,
    }
