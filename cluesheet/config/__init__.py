"""
Config - Sheet configuration models and environment settings.
"""

from .settings import (
    AutoRulesConfig,
    PlayerConfig,
    AppConfig,
    EnvironmentSettings,
    DEFAULT_AUTO_RULES,
    DEFAULT_CONFIG,
    MIN_PLAYERS,
    MAX_PLAYERS,
    PLAYER_COLORS,
    get_env_settings,
    configure_logging,
)

__all__ = [
    "AutoRulesConfig",
    "PlayerConfig",
    "AppConfig",
    "EnvironmentSettings",
    "DEFAULT_AUTO_RULES",
    "DEFAULT_CONFIG",
    "MIN_PLAYERS",
    "MAX_PLAYERS",
    "PLAYER_COLORS",
    "get_env_settings",
    "configure_logging",
]
