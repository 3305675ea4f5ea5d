"""Combat configuration (single source of truth)

Every tunable combat parameter lives here and can be overridden from the
environment.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field


def _get_env_int(key: str, default: int) -> int:
    """Read an integer setting from the environment"""
    value = os.environ.get(key)
    if value is not None:
        try:
            return int(value)
        except ValueError:
            pass
    return default


def _get_env_bool(key: str, default: bool) -> bool:
    """Read a boolean setting from the environment"""
    value = os.environ.get(key, "").lower()
    if value in ("true", "1", "yes", "on"):
        return True
    elif value in ("false", "0", "no", "off"):
        return False
    return default


@dataclass(frozen=True)
class CombatConfig:
    """Combat configuration (immutable)

    Environment overrides:
    - MONSTERHUNT_HAND_SIZE: cards drawn up to at each turn start
    - MONSTERHUNT_FREE_MOVES: free moves per turn
    - MONSTERHUNT_EVENT_HISTORY: event bus history length
    - MONSTERHUNT_LOG_LEVEL: log level
    - MONSTERHUNT_DEBUG: debug mode
    """
    # ==================== Grid ====================
    position_count: int = 3
    start_position: int = 1

    # ==================== Cards ====================
    hand_size: int = field(
        default_factory=lambda: _get_env_int("MONSTERHUNT_HAND_SIZE", 5)
    )
    default_card_allowance: int = 3

    # ==================== Movement ====================
    free_moves_per_turn: int = field(
        default_factory=lambda: _get_env_int("MONSTERHUNT_FREE_MOVES", 1)
    )

    # ==================== Events ====================
    event_history: int = field(
        default_factory=lambda: _get_env_int("MONSTERHUNT_EVENT_HISTORY", 100)
    )

    # ==================== Logging & debug ====================
    log_level: str = field(
        default_factory=lambda: os.environ.get("MONSTERHUNT_LOG_LEVEL", "INFO")
    )
    debug_mode: bool = field(
        default_factory=lambda: _get_env_bool("MONSTERHUNT_DEBUG", False)
    )

    @classmethod
    def from_env(cls) -> CombatConfig:
        """Build a config from the environment"""
        return cls()

    def is_valid_position(self, position: int) -> bool:
        return 0 <= position < self.position_count


_config: CombatConfig | None = None


def get_config() -> CombatConfig:
    """Return the shared config (lazy)"""
    global _config
    if _config is None:
        _config = CombatConfig.from_env()
    return _config


def reset_config() -> None:
    """Drop the shared config (for tests)"""
    global _config
    _config = None
