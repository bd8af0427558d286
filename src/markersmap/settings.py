"""Shared settings loaded from environment / .env file."""

from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Configuration for the ``generate-markers-map`` command.

    Values are read from ``MARKERSMAP_``-prefixed environment variables and
    from a ``.env`` file in the working directory.
    """

    model_config = SettingsConfigDict(
        env_prefix="MARKERSMAP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = "INFO"

    # Output
    out_json: str = "dist/markers.json"
    out_model: str = "dist/markers_map_model.py"

    # Schema loading
    max_schema_size: int = 5_000_000  # characters
