from typing import Any

from models import FacilityStatus, PlayerId
from state import FacilityGame


class MoveValidationError(Exception):
    """Exception raised when a move fails validation."""
    pass


def log_event(game: FacilityGame, event: str, **kwargs: Any) -> None:
    """
    Add an event to the game log.

    Args:
        game: Current game state
        event: Description of the event
        **kwargs: Additional event data to include
    """
    log_entry = {
        'ply': game.num_moves,
        'player': game.next_player.value,
        'event': event,
        **kwargs
    }
    game.log.append(log_entry)


def validate_move(game: FacilityGame, player: PlayerId, index: Any) -> bool:
    """Validate if a move is legal: right turn, index on the board, node FREE."""
    expected = game.next_player
    if player != expected:
        raise MoveValidationError(f"{player.value} played when it was {expected.value}'s turn")

    if not game.is_valid_index(index):
        raise MoveValidationError(
            f"{player.value} tried to select location {index} which is outside the range "
            f"[0, {game.num_nodes - 1}]"
        )

    if game.statuses[index] != FacilityStatus.FREE:
        raise MoveValidationError(f"{player.value} tried to select location {index} which is not free")

    return True


def block_neighbors(game: FacilityGame, index: int) -> None:
    """Mark the FREE neighbours of an occupied node as BLOCKED."""
    for neighbor in (index - 1, index + 1):
        if 0 <= neighbor < game.num_nodes and game.statuses[neighbor] == FacilityStatus.FREE:
            game.statuses[neighbor] = FacilityStatus.BLOCKED


def apply_move(game: FacilityGame, player: PlayerId, index: Any) -> bool:
    """
    Apply one ply to the game.

    A rejected move leaves statuses, score and the move log untouched and is
    recorded in the game log with error_type 'illegal_move'.

    Args:
        game: Current game state
        player: Player making the move
        index: Chosen node

    Returns:
        True if the move was applied, False if it was rejected
    """
    try:
        validate_move(game, player, index)
    except MoveValidationError as e:
        log_event(game, f"Invalid move by {player.value}: {e}",
                  error_type='illegal_move', index=index)
        return False

    game.statuses[index] = FacilityStatus.owned_by(player)
    block_neighbors(game, index)
    log_event(game, f"{player.value} occupied node {index} (value {game.values[index]})",
              index=index, value=game.values[index])
    game.moves.append(index)
    game.update_score(player)
    return True
