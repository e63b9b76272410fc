"""Shared test fixtures and helpers."""

import pytest

from models import FacilityStatus, GameType
from state import FacilityGame, initialize_game

F = FacilityStatus.FREE
X = FacilityStatus.BLOCKED
A = FacilityStatus.PLAYER_A
B = FacilityStatus.PLAYER_B


# --- Fixtures ---


@pytest.fixture
def game():
    """Fresh NORMAL game with 10 nodes (seed=42)."""
    return initialize_game(size=10, seed=42, game_type=GameType.NORMAL)


@pytest.fixture
def api_client():
    """Flask test client."""
    from app import app

    app.config["TESTING"] = True
    with app.test_client() as client:
        yield client


# --- Helper functions ---


def make_game(values, statuses=None, moves=None, game_type=GameType.NORMAL, complement_constant=9999):
    """Build a game from explicit values and statuses."""
    return FacilityGame(
        values=list(values),
        statuses=list(statuses) if statuses is not None else [],
        moves=list(moves) if moves is not None else [],
        game_type=game_type,
        complement_constant=complement_constant,
    )
