import logging
import sys
from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    DEBUG: bool = False

    # Per-player build caps
    ROAD_ALLOWANCE: int = 15
    SETTLEMENT_ALLOWANCE: int = 5
    CITY_ALLOWANCE: int = 4

    # Turn flow
    SETUP_ROUNDS: int = 2
    AUTO_END_SETUP_TURN: bool = False

    # Dice
    DICE_SEED: int | None = None

    @field_validator("ROAD_ALLOWANCE", "SETTLEMENT_ALLOWANCE", "CITY_ALLOWANCE")
    @classmethod
    def validate_allowance(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Build allowances must be at least 1")
        return v

    @field_validator("SETUP_ROUNDS")
    @classmethod
    def validate_setup_rounds(cls, v: int) -> int:
        if v < 0:
            raise ValueError("SETUP_ROUNDS cannot be negative")
        return v


def configure_logging(debug: bool = False) -> None:
    """Configure logging for the application."""
    log_level = logging.DEBUG if debug else logging.INFO
    log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=log_level,
        format=log_format,
        handlers=[logging.StreamHandler(sys.stdout)],
    )


@lru_cache
def get_settings() -> Settings:
    settings = Settings()
    configure_logging(settings.DEBUG)
    logger.info("Settings loaded successfully")
    logger.debug(
        "Allowance: roads=%d, settlements=%d, cities=%d",
        settings.ROAD_ALLOWANCE,
        settings.SETTLEMENT_ALLOWANCE,
        settings.CITY_ALLOWANCE,
    )
    return settings
