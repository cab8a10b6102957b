from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration for the event bus.

    Values are loaded from ``EVENT_BUS_*`` environment variables (or a
    ``.env`` file in the working directory) and may be overridden by passing
    keyword arguments. Dispatchers created without ``settings=`` share the
    cached instance from :func:`get_settings`.
    """

    # Logging
    log_level: str = "INFO"
    log_format: Literal["plain", "json"] = "plain"

    # Dispatch
    # Start every dispatcher in tolerant mode, as if allow_failures() was called.
    allow_failures: bool = False
    # Raise StructuralError to the caller instead of routing it like any
    # other event failure.
    fail_fast_structural: bool = False

    model_config = SettingsConfigDict(
        env_prefix="EVENT_BUS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
