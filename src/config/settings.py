# src/config/settings.py — v2
"""Typed configuration loaded from .env via pydantic-settings.

Single source of truth for deployment-specific settings: which cache and
record-store backends to wire, the site timezone used for publish dates,
status automation thresholds and logging.

Cache TTLs and invalidation fan-out are deliberately absent: they are fixed
per data kind in cache/ttl.py and invalidation/router.py.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(Exception):
    """Raised when configuration is internally inconsistent."""


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === Cache ===
    cache_enabled: bool = True
    cache_backend: Literal["memory", "sqlite", "redis"] = "memory"
    cache_root: Path = Path("~/.storykeeper/cache")
    cache_redis_url: str = ""
    cache_namespace: str = "fanfic_"

    # === Record store ===
    store_backend: Literal["memory", "sqlite"] = "memory"
    store_path: str = "~/.storykeeper/records.db"

    # === Time ===
    site_timezone: str = "UTC"

    # === Status automation ===
    hiatus_threshold_months: int = 4
    abandoned_threshold_months: int = 10
    automation_batch_size: int = 200

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "json"
    log_file: Path | None = None
    log_rotation: str = "10MB"
    log_retention: int = 30

    # --- Validators ---

    @field_validator("site_timezone")
    @classmethod
    def validate_timezone(cls, v: str) -> str:  # noqa: N805
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown timezone: {v!r}") from e
        return v

    @field_validator("automation_batch_size")
    @classmethod
    def validate_batch_size(cls, v: int) -> int:  # noqa: N805
        if v < 1:
            raise ValueError("automation_batch_size must be >= 1")
        return v

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Validate cross-field consistency rules."""
        errors: list[str] = []

        if self.cache_backend == "redis" and not self.cache_redis_url:
            errors.append("CACHE_BACKEND=redis requires CACHE_REDIS_URL")

        if self.store_backend == "sqlite" and not self.store_path.strip():
            errors.append("STORE_BACKEND=sqlite requires STORE_PATH")

        if self.abandoned_threshold_months <= self.hiatus_threshold_months:
            errors.append(
                "ABANDONED_THRESHOLD_MONTHS must be greater than "
                "HIATUS_THRESHOLD_MONTHS"
            )

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self

    # --- Helpers ---

    @property
    def tzinfo(self) -> ZoneInfo:
        """Resolved site timezone."""
        return ZoneInfo(self.site_timezone)


def load_settings(**overrides: object) -> Settings:
    """Load settings from .env with optional overrides.

    Args:
        **overrides: Field-level overrides (for testing or one-off scripts).

    Returns:
        Validated Settings instance.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    return Settings(**overrides)  # type: ignore[arg-type]
