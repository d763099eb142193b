"""
Pydantic models for concinnitas configuration.

All sections have defaults, so an empty config (no file, no env vars) is
valid and matches the built-in behaviour.
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, HttpUrl

from ..registry import DEFAULT_REGISTRY_URL, DEFAULT_TIMEOUT


class LoggingConfig(BaseModel):
    """Logging system configuration."""

    level: Literal["debug", "info", "warn", "error"] = "warn"
    file: Path | None = None
    verbose: int = Field(default=0, ge=0)

    model_config = {"extra": "forbid"}


class RegistryConfig(BaseModel):
    """Package registry queried by `update`."""

    url: HttpUrl = HttpUrl(DEFAULT_REGISTRY_URL)
    timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0, le=120)

    model_config = {"extra": "forbid"}


class AppConfig(BaseModel):
    """Complete application configuration.

    Root of the configuration tree and entry point for validation.
    """

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    registry: RegistryConfig = Field(default_factory=RegistryConfig)

    model_config = {"extra": "forbid"}
