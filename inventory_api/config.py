"""
Inventory API — Application Configuration
===========================================

What:  Centralized configuration management using Pydantic Settings.
Why:   Type-safe environment variable loading with validation on startup.
How:   Pydantic Settings reads INVENTORY_* environment variables (or a .env
       file), validates types/ranges, and the CLI overrides host, port and
       cache directory from its required flags.
Who:   Built by the CLI and passed to create_app(); tests build their own.

Example environment:
    INVENTORY_HOST=0.0.0.0
    INVENTORY_PORT=3000
    INVENTORY_CACHE_DIR=cache
    INVENTORY_LOG_LEVEL=DEBUG
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have defaults suitable for local development. The CLI
    requires --host, --port and --cache explicitly and passes them in as
    keyword arguments, which take precedence over the environment.
    """

    # ── Server ────────────────────────────────────────────────────────────
    host: str = Field(default="127.0.0.1")
    port: int = Field(default=3000, ge=1, le=65535)

    # ── Photo Cache ───────────────────────────────────────────────────────
    # What: Directory that holds uploaded photos. Its name (as given) is also
    # the URL prefix the photos are served under, e.g. cache → /cache/<file>.
    cache_dir: str = Field(default="cache")

    # What: Bytes read from an upload per await while streaming it to disk
    upload_chunk_size: int = Field(default=1024 * 1024, ge=1024)

    # ── Logging ───────────────────────────────────────────────────────────
    # Valid: DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    @field_validator("cache_dir")
    @classmethod
    def validate_cache_dir(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("cache_dir must not be empty")
        return v

    model_config = SettingsConfigDict(
        env_prefix="INVENTORY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )
