"""Runtime settings resolved from explicit overrides, the environment and defaults.

    ============  ===========================  ===================================
    Field         Environment variable         Default
    ============  ===========================  ===================================
    api_base_uri  ``BS_API_BASE_URI``          ``https://api.brawlstars.com/v1``
    api_key       ``BS_API_KEY``               ``""``
    database_url  ``BRAWL_SYNC_DATABASE_URL``  ``sqlite:///brawl_sync.db``
    log_level     ``BRAWL_SYNC_LOG_LEVEL``     ``NORMAL``
    ============  ===========================  ===================================
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Any, Self

from pydantic import BaseModel, ConfigDict, Field, field_validator

from brawl_sync.api.errors import ConfigurationError
from brawl_sync.utils.logger import LOG_LEVEL_ENV_VAR, resolve_level

ENV_VARS: dict[str, str] = {
    "api_base_uri": "BS_API_BASE_URI",
    "api_key": "BS_API_KEY",
    "database_url": "BRAWL_SYNC_DATABASE_URL",
    "log_level": LOG_LEVEL_ENV_VAR,
}


class Settings(BaseModel):
    """Immutable configuration for one sync process."""

    model_config = ConfigDict(frozen=True)

    api_base_uri: str = Field(default="https://api.brawlstars.com/v1", min_length=1)
    api_key: str = ""
    database_url: str = Field(default="sqlite:///brawl_sync.db", min_length=1)
    log_level: str = "NORMAL"

    @field_validator("api_base_uri")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        resolve_level(value)
        return value.upper()

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None, **overrides: Any) -> Self:
        """Build settings: explicit *overrides* win, then *environ*, then defaults.

        Args:
            environ: Mapping to read variables from; ``os.environ`` when ``None``.
            overrides: Field values; ``None`` values are ignored.

        Raises:
            ConfigurationError: If a value is invalid.
        """
        source = os.environ if environ is None else environ
        values: dict[str, Any] = {
            field: source[var] for field, var in ENV_VARS.items() if source.get(var)
        }
        values.update({key: value for key, value in overrides.items() if value is not None})
        try:
            return cls(**values)
        except ValueError as exc:
            raise ConfigurationError(f"Invalid settings: {exc}", original=exc) from exc

    def require_api_key(self) -> str:
        """Return the API key.

        Raises:
            ConfigurationError: If no key is configured.
        """
        if not self.api_key:
            raise ConfigurationError(f"No API key configured; set {ENV_VARS['api_key']}.")
        return self.api_key
