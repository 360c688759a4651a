"""Application configuration via pydantic-settings."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from content_hasher.hasher import BLOCK_SIZE


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="CONTENT_HASHER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Bytes requested per read() on a byte source; the block size is fixed.
    read_chunk_size: int = Field(default=BLOCK_SIZE, gt=0)

    # Files hashed at once by pipeline.hash_paths
    max_concurrent: int = Field(default=4, ge=1)

    log_level: str = "INFO"


def get_settings(**overrides: object) -> Settings:
    """Create a Settings instance, allowing overrides for testing."""
    return Settings(**overrides)  # type: ignore[arg-type]
