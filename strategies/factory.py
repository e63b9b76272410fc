"""Maps strategy type names to strategy objects."""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional

from models import ConfigurationError, PlayerId
from state import load_config
from strategies.base import Strategy
from strategies.baselines import (
    FirstFreeStrategy,
    HighestFreeValueStrategy,
    RandomWrapScanStrategy,
    SlowStrategy,
)
from strategies.complement import NightHawkComplement
from strategies.nighthawk import NightHawk


class StrategyType(Enum):
    FPLAYER_SIMPLE_1 = "FPLAYER_SIMPLE_1"
    FPLAYER_SIMPLE_2 = "FPLAYER_SIMPLE_2"
    FPLAYER_HIGHEST = "FPLAYER_HIGHEST"
    FPLAYER_SLOW = "FPLAYER_SLOW"
    NIGHTHAWK = "NIGHTHAWK"
    NIGHTHAWK_COMPLEMENT = "NIGHTHAWK_COMPLEMENT"


STRATEGY_MAP = {
    StrategyType.FPLAYER_SIMPLE_1: FirstFreeStrategy,
    StrategyType.FPLAYER_SIMPLE_2: RandomWrapScanStrategy,
    StrategyType.FPLAYER_HIGHEST: HighestFreeValueStrategy,
    StrategyType.FPLAYER_SLOW: SlowStrategy,
    StrategyType.NIGHTHAWK: NightHawk,
    StrategyType.NIGHTHAWK_COMPLEMENT: NightHawkComplement,
}


def parse_strategy_type(name: Any) -> StrategyType:
    """
    Parse a strategy type name (case-insensitive).

    Raises:
        ConfigurationError: If the name is not a known strategy type
    """
    if isinstance(name, StrategyType):
        return name
    try:
        return StrategyType(str(name).strip().upper())
    except ValueError:
        raise ConfigurationError(f"Unknown player type {name}")


def create_strategy(player: PlayerId, strategy_type: Any,
                    config: Optional[Dict[str, Any]] = None) -> Strategy:
    """
    Create a strategy for one seat.

    Tunables (slow player sleep range, NightHawk blocking risk factor) come
    from the configuration.

    Args:
        player: Seat the strategy plays
        strategy_type: StrategyType or its name
        config: Optional configuration dictionary (default: load_config())

    Returns:
        New, uninitialized strategy
    """
    strategy_type = parse_strategy_type(strategy_type)
    config = config or load_config()

    if strategy_type == StrategyType.FPLAYER_SLOW:
        return SlowStrategy(
            player,
            min_sleep=config['slow_min_sleep'],
            max_sleep=config['slow_max_sleep'],
            seed=config['slow_seed'],
        )
    if strategy_type == StrategyType.NIGHTHAWK:
        return NightHawk(player, risk_factor=config['blocking_risk_factor'])
    return STRATEGY_MAP[strategy_type](player)
