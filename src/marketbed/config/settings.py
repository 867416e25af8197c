"""
Application settings using Pydantic.

Provides environment-based configuration loading with MARKETBED_ prefix.
"""

from functools import lru_cache

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings

from marketbed.core.errors import ConfigurationError


class Settings(BaseSettings):
    """Application settings."""

    # Environment selection: attach to an existing fork/snapshot instead of
    # provisioning a fresh market
    fork: bool = False

    # Transport
    transport: str = "memory"  # memory, jsonrpc
    rpc_url: str = "http://localhost:8545"
    rpc_timeout: float = Field(default=30.0, gt=0)

    # Catalog and address book locations
    market_file: str | None = None
    address_book: str | None = None
    export_path: str | None = None

    # Logging
    log_level: str = "INFO"
    log_format: str = "auto"  # auto, json, console

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        env_prefix = "MARKETBED_"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    try:
        return Settings()
    except ValidationError as e:
        raise ConfigurationError(f"Invalid MARKETBED_* settings: {e}") from e
