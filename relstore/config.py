"""Configuration for the database engine and its front ends."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings read from ``RELSTORE_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="RELSTORE_",
        case_sensitive=False,
    )

    data_file: Path = Field(default=Path("database.json"), description="Database snapshot file")
    persist: bool = Field(default=True, description="Save the database after every mutation")
    strict_join: bool = Field(
        default=False, description="Require literal JOIN / ON / = keywords in join clauses"
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Log level"
    )
    log_format: Literal["json", "console"] = Field(default="console", description="Log format")
    host: str = Field(default="0.0.0.0", description="HTTP server host")
    port: int = Field(default=3030, ge=1, le=65535, description="HTTP server port")


@lru_cache
def get_settings() -> Settings:
    """Get the global settings instance."""
    return Settings()
