"""
Board generation module for the facility game.
Assigns deterministic pseudo-random values to the nodes of a line board.
"""

from typing import List, Set, Tuple

import numpy as np

from models import ConfigurationError, GameType

MIN_VALUE = 10
MAX_VALUE = 50
COMPLEMENT_CONSTANT = 9999
MIN_PAIRED_SIZE = 8


def paired_offset(size: int) -> int:
    """
    Index where the second half of a COPY/COMPLEMENT board starts.

    Args:
        size: Number of nodes on the board

    Returns:
        size // 2 for even boards, size // 2 + 1 for odd boards (the middle
        node belongs to neither half)
    """
    return size // 2 + size % 2


def first_odd_value(min_value: int) -> int:
    """Smallest odd integer greater than min_value."""
    start = min_value + 1
    return start if start % 2 == 1 else start + 1


def check_complement_coupling(size: int, min_value: int, complement_constant: int) -> None:
    """
    Make sure every complementary value is positive and cannot collide with a
    first-half value.

    The first half of a COMPLEMENT board holds odd values starting right
    above min_value, so the largest of them grows with the board size. The
    complement constant has to stay above twice that value.

    Raises:
        ConfigurationError: If the constant is too small for this board
    """
    half = size // 2
    largest = first_odd_value(min_value) + 2 * (half - 1)
    if complement_constant <= 2 * largest:
        raise ConfigurationError(
            f"complement_constant {complement_constant} is too small for a COMPLEMENT board "
            f"of {size} nodes (largest first-half value is {largest})"
        )


def _normal_values(rng: np.random.Generator, size: int, max_value: int) -> List[int]:
    return [int(v) for v in rng.integers(1, max_value, size=size, endpoint=True)]


def _copy_values(rng: np.random.Generator, size: int, min_value: int) -> List[int]:
    half = size // 2
    first_half = [int(v) for v in rng.permutation(np.arange(min_value, min_value + half))]
    values = [0] * size
    values[:half] = first_half
    values[paired_offset(size):] = first_half
    return values


def _complement_values(
    rng: np.random.Generator, size: int, min_value: int, complement_constant: int
) -> List[int]:
    half = size // 2
    start = first_odd_value(min_value)
    odd_values = np.arange(start, start + 2 * half, 2)
    first_half = [int(v) for v in rng.permutation(odd_values)]
    values = [0] * size
    values[:half] = first_half
    values[paired_offset(size):] = [complement_constant - v for v in first_half]
    return values


def generate_values(
    size: int,
    seed: int,
    game_type: GameType = GameType.NORMAL,
    min_value: int = MIN_VALUE,
    max_value: int = MAX_VALUE,
    complement_constant: int = COMPLEMENT_CONSTANT,
) -> Tuple[List[int], Set[int]]:
    """
    Generate the node values for a new board.

    NORMAL boards draw every value uniformly from [1, max_value]. COPY boards
    fill the first half with a permutation of consecutive integers starting
    at min_value and repeat it in the second half. COMPLEMENT boards fill the
    first half with a permutation of odd integers and put
    complement_constant - value at the matching position of the second half.
    On odd COPY/COMPLEMENT boards the middle node has value 0 and starts
    out blocked.

    Args:
        size: Number of nodes
        seed: Seed for the numpy generator (non-negative)
        game_type: Board variant
        min_value: First value used by COPY/COMPLEMENT boards
        max_value: Upper bound for NORMAL boards
        complement_constant: Sum of every COMPLEMENT pair

    Returns:
        Tuple of (values, indices that start out BLOCKED)

    Raises:
        ConfigurationError: If the size or seed cannot produce a valid board
    """
    if size < 1:
        raise ConfigurationError(f"Board size must be positive, got {size}")
    if seed < 0:
        raise ConfigurationError(f"Seed must be non-negative, got {seed}")

    rng = np.random.default_rng(seed)

    if game_type is GameType.NORMAL:
        return _normal_values(rng, size, max_value), set()

    if size < MIN_PAIRED_SIZE:
        raise ConfigurationError(
            f"{game_type.value} games need at least {MIN_PAIRED_SIZE} nodes, got {size}"
        )

    preblocked = {size // 2} if size % 2 == 1 else set()

    if game_type is GameType.COPY:
        return _copy_values(rng, size, min_value), preblocked

    check_complement_coupling(size, min_value, complement_constant)
    return _complement_values(rng, size, min_value, complement_constant), preblocked
