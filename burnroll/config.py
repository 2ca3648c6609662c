"""Application configuration using pydantic-settings."""

import logging
from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Every field can be overridden with a ``BURNROLL_`` prefixed variable,
    e.g. ``BURNROLL_DATABASE_URL=sqlite:///campaign.db``.
    """

    model_config = SettingsConfigDict(
        env_prefix="BURNROLL_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Database
    database_url: str = "sqlite:///burnroll.db"

    # Debug / logging
    debug: bool = False
    log_level: LogLevel = "WARNING"

    # ==========================================================================
    # Ruleset Settings
    # ==========================================================================
    # Obstacle offered when a roll request does not name one (dialog default)
    default_obstacle: int = 3

    # Dice counts (from 1 up to this value) at which a test whose dice cover
    # the obstacle is both routine and difficult. Rulebook reading is 1.
    ambiguous_max_dice: int = 1

    # Aptitude assumed for beginner's luck when the skill has none recorded
    default_aptitude: int = 1

    # Learning tests needed when the skill has no aptitude recorded
    learning_tests_default: int = 10

    # Stat that pays for sustained spells
    tax_stat: str = "forte"

    @property
    def logging_level(self) -> int:
        """Numeric logging level, forced to DEBUG in debug mode."""
        if self.debug:
            return logging.DEBUG
        return logging.getLevelName(self.log_level)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Convenience alias
settings = get_settings()
