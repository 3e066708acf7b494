"""Shared settings loaded from environment / .env file."""

from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Configuration for the iceforge command line.

    Values are read from ``ICEFORGE_*`` environment variables and from a
    ``.env`` file in the working directory.
    """

    model_config = SettingsConfigDict(
        env_prefix="ICEFORGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = "INFO"

    # Manifest
    config_file: Path = Path("iceforge.yaml")

    # External probes
    pkg_config: str = "pkg-config"
    shell: str = "sh"  # used to resolve the compiler with `which`
