"""
Configuration Module
====================

Centralized configuration management using Pydantic Settings.
Loads from environment variables with type validation and defaults.

Usage:
    from arena_shared.config import settings

    print(settings.environment)
    print(settings.betting.fee_bps)
"""

from arena_shared.config.settings import (
    ArenaSettings,
    BettingSettings,
    ChainMode,
    ChainSettings,
    Environment,
    LogLevel,
    Settings,
    get_settings,
)


# Global settings instance (singleton)
settings = get_settings()

__all__ = [
    "Settings",
    "get_settings",
    "settings",
    "Environment",
    "LogLevel",
    "ChainMode",
    "ChainSettings",
    "BettingSettings",
    "ArenaSettings",
]
