"""
Lucky Nine - Application Settings

Loads deployment configuration from environment variables using Pydantic
Settings. Round rules are fixed at deployment: the settings object is frozen
and converted once into an immutable RoundRules for the engine.
"""

import logging
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from luckynine.engine.base import (
    DEFAULT_MAX_ATTEMPTS,
    DEFAULT_MAX_NUMBER,
    DEFAULT_MAX_PLAYERS_PER_ROUND,
    DEFAULT_MIN_NUMBER,
    DEFAULT_REGISTRATION_FEE,
    RoundRules,
)

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Round rules
    registration_fee: int = Field(default=DEFAULT_REGISTRATION_FEE, gt=0)
    max_attempts: int = Field(default=DEFAULT_MAX_ATTEMPTS, gt=0)
    min_number: int = DEFAULT_MIN_NUMBER
    max_number: int = DEFAULT_MAX_NUMBER
    max_players_per_round: int = Field(default=DEFAULT_MAX_PLAYERS_PER_ROUND, gt=0)

    # Operator
    administrator: str = Field(default="admin", min_length=1)

    # Draw
    draw_seed: int | None = None

    # Application
    debug: bool = False
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="LUCKYNINE_",
        env_file=".env",
        env_file_encoding="utf-8",
        frozen=True,
    )

    def to_rules(self) -> RoundRules:
        """Build the immutable round rules the engine runs on."""
        return RoundRules(
            registration_fee=self.registration_fee,
            max_attempts=self.max_attempts,
            min_number=self.min_number,
            max_number=self.max_number,
            max_players_per_round=self.max_players_per_round,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Cached singleton settings instance."""
    return Settings()


def configure_logging(settings: Settings | None = None) -> None:
    """Configure root logging from settings (DEBUG forced when debug is on)."""
    settings = settings or get_settings()
    level = logging.DEBUG if settings.debug else settings.log_level.upper()
    logging.basicConfig(level=level, format=LOG_FORMAT)
