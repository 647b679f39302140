"""
Configuration for scansync (pydantic-settings).

Every value can be overridden from the environment with the SCANSYNC_ prefix:

    SCANSYNC_QUERY_PERIOD=120 scansync poll --host 10.0.0.5 --serial I2J5678

Usage:
    >>> from scansync.config import get_settings
    >>> settings = get_settings()
    >>> settings.query_period
    300.0
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ScanSyncSettings(BaseSettings):
    """Process-wide settings for the download engine."""

    model_config = SettingsConfigDict(
        env_prefix="SCANSYNC_",
        extra="ignore",
    )

    # Storage
    output_directory: Path = Path("output")

    # Scheduling (seconds)
    query_period: float = Field(default=300.0, ge=1.0, le=86400.0)
    listing_settle_delay: float = Field(default=5.0, ge=0.0, le=60.0)
    login_settle_delay: float = Field(default=0.1, ge=0.0, le=10.0)
    stale_download_interval: float = Field(default=14400.0, ge=0.0)

    # Speed estimation
    default_data_speed: float = Field(default=4.0, gt=0.0)
    min_elapsed: float = Field(default=0.001, gt=0.0, le=1.0)

    # Retries
    corrupt_retries: int = Field(default=1, ge=0, le=5)
    command_retries: int = Field(default=5, ge=1, le=20)
    command_retry_delay: float = Field(default=1.0, ge=0.0, le=60.0)

    # Remote cleanup
    strict_remote_delete: bool = False

    # Transport
    ftp_timeout: float = Field(default=30.0, ge=1.0, le=600.0)

    # Configuration snapshots
    archive_day_divisor: int = Field(default=7, ge=1, le=31)
    site_map: dict[str, int] = Field(default_factory=dict)

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_json: bool = False


_settings: ScanSyncSettings | None = None


def get_settings() -> ScanSyncSettings:
    """Return the settings singleton, loading it from the environment on first use."""
    global _settings
    if _settings is None:
        _settings = ScanSyncSettings()
    return _settings


def configure_settings(**overrides: object) -> ScanSyncSettings:
    """
    Replace the settings singleton with one built from explicit values.

    Args:
        **overrides: Field values; anything not given comes from the environment.

    Returns:
        The new settings instance.
    """
    global _settings
    _settings = ScanSyncSettings(**overrides)  # type: ignore[arg-type]
    return _settings


def reset_settings() -> None:
    """Drop the singleton so the next get_settings() reloads."""
    global _settings
    _settings = None


__all__ = [
    "ScanSyncSettings",
    "configure_settings",
    "get_settings",
    "reset_settings",
]
