"""
Engine configuration and settings.

Loads environment variables (prefix PROMETHEUS_) and provides a typed,
cached settings object.
"""

import logging
from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class EngineSettings(BaseSettings):
    """Engine settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="PROMETHEUS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ----- Expert system -----
    think_cycle_cap: int = Field(
        default=10_000,
        description="Safety cap for think() runs without an explicit cycle count.",
    )
    rest_cycles: int = Field(
        default=1,
        description="Default number of rule composition passes for rest().",
    )

    # ----- Knowledge nodes -----
    node_max_age: float = Field(
        default=60.0,
        description="Seconds after creation before a knowledge node may be evicted.",
    )
    node_strength: int = Field(default=1, description="Default strength bias of new nodes.")
    output_weight_cutoff: float = Field(
        default=0.0,
        description="Fired outputs weighted below this are not activated.",
    )
    search_ply: int = Field(
        default=10,
        description="Depth bound of the breadth-first searcher.",
    )
    record_delimiter: str = Field(
        default=";",
        description="Token delimiter of flat-file knowledge node records.",
    )

    # ----- Logging -----
    log_level: str = Field(default="INFO")

    @field_validator("think_cycle_cap", "rest_cycles", "search_ply")
    @classmethod
    def _positive(cls, value: int) -> int:
        if value < 1:
            raise ValueError("must be >= 1")
        return value

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return value.upper()


@lru_cache
def get_settings() -> EngineSettings:
    """Get cached settings instance."""
    return EngineSettings()


def configure_logging(level: Optional[str] = None) -> logging.Logger:
    """Attach a stream handler to the package logger.

    Args:
        level: Logging level name (defaults to settings.log_level)

    Returns:
        The package logger
    """
    level = (level or get_settings().log_level).upper()
    package_logger = logging.getLogger("prometheus_reasoning")
    if not package_logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s")
        )
        package_logger.addHandler(handler)
    package_logger.setLevel(level)
    logger.debug("Logging configured at %s", level)
    return package_logger
