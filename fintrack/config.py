"""
Application configuration using Pydantic Settings.
"""

import os
import logging
from functools import lru_cache
from pydantic_settings import BaseSettings


def get_env_file() -> str:
    """Determine which env file to use based on environment."""
    env = os.getenv("APP_ENV", "development")
    if env == "production":
        return ".env.production"
    return ".env.development"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # App settings
    log_level: str = "INFO"
    app_env: str = "development"

    # XIRR solver
    xirr_max_iterations: int = 100
    xirr_tolerance: float = 1e-4
    xirr_default_guess: float = 0.1
    xirr_strict: bool = False

    class Config:
        env_file = get_env_file()
        env_file_encoding = "utf-8"
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def configure_logging(level: str = None) -> None:
    """Configure root logging from settings (or an explicit level)."""
    level_name = (level or get_settings().log_level).upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
