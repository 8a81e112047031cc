"""Configuration management."""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Library settings, read from ``PY_GEOM_*`` environment variables or ``.env``."""

    model_config = SettingsConfigDict(env_prefix="PY_GEOM_", env_file=".env", extra="ignore")

    # Logging
    log_level: str = Field(default="INFO", description="Log level")
    log_format: Literal["json", "plain"] = Field(
        default="json", description="Log renderer: JSON lines or human-readable console output"
    )

    # Batch processing
    max_workers: int = Field(default=4, ge=1, description="Worker processes for batch triangulation")


settings = Settings()
