"""
Liveness monitor for facility games.

A daemon thread that watches the phase a game driver reports through
set_state() and logs a warning when a player stays in the same phase for too
long. It only observes: it never interrupts a player or touches the game.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Any, Dict, Optional

from models import PlayerState

logger = logging.getLogger(__name__)


class MonitorThread(threading.Thread):
    """Polls the reported player state and logs progress and stalls."""

    def __init__(
        self,
        check_interval: float = 0.5,
        wait_duration: float = 10.0,
        warn_interval: float = 10.0,
        info_interval: float = 8.0,
    ) -> None:
        super().__init__(name="facility-game-monitor", daemon=True)
        self.check_interval = check_interval
        self.wait_duration = wait_duration
        self.warn_interval = warn_interval
        self.info_interval = info_interval

        self._lock = threading.Lock()
        self._player_state = PlayerState.UNINIT
        self._stop_received = False
        self._game_round = 0
        now = time.monotonic()
        self._last_change_time = now
        self._start_time = now
        self._last_info_time = now
        self._last_warn_time = now
        self.warnings_issued = 0

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "MonitorThread":
        return cls(
            check_interval=config['monitor_check_interval'],
            wait_duration=config['monitor_wait_duration'],
            warn_interval=config['monitor_warn_interval'],
            info_interval=config['monitor_info_interval'],
        )

    @property
    def player_state(self) -> PlayerState:
        with self._lock:
            return self._player_state

    @property
    def game_round(self) -> int:
        with self._lock:
            return self._game_round

    @property
    def stop_received(self) -> bool:
        with self._lock:
            return self._stop_received

    def set_state(self, game_round: int, player_state: PlayerState) -> None:
        """Report the current round and phase. Only a phase change resets the stall timer."""
        with self._lock:
            self._game_round = game_round
            if self._player_state != player_state:
                self._player_state = player_state
                self._last_change_time = time.monotonic()

    def request_stop(self) -> None:
        with self._lock:
            self._stop_received = True

    def log(self, message: str) -> None:
        with self._lock:
            elapsed = time.monotonic() - self._start_time
            logger.info("Monitor LOG: round:%d, gametime:%d sec, message:%s",
                        self._game_round, int(elapsed), message)

    def check_progress(self, now: Optional[float] = None) -> bool:
        """Warn if the state has not changed for wait_duration. Returns True if a warning was logged."""
        with self._lock:
            now = time.monotonic() if now is None else now
            since_change = now - self._last_change_time
            since_warn = now - self._last_warn_time
            if since_change > self.wait_duration and since_warn > self.warn_interval:
                logger.warning("Monitor WARN: round:%d, player in state %s for %d sec",
                               self._game_round, self._player_state.value, int(since_change))
                self._last_warn_time = now
                self.warnings_issued += 1
                return True
            return False

    def check_info(self, now: Optional[float] = None) -> bool:
        with self._lock:
            now = time.monotonic() if now is None else now
            if now - self._last_info_time > self.info_interval:
                logger.info("Monitor INFO: round:%d", self._game_round)
                self._last_info_time = now
                return True
            return False

    def run(self) -> None:
        with self._lock:
            self._start_time = time.monotonic()
            self._last_info_time = self._start_time
            self._last_warn_time = self._start_time
        while not self.stop_received and self.player_state != PlayerState.TERMINATING:
            self.check_progress()
            self.check_info()
            time.sleep(self.check_interval)
