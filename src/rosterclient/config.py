"""Configuration loading.

Settings are loaded in priority order (highest first):
  1. Environment variables  (ROSTERCLIENT__CSRF__TOKEN_TTL_SECONDS=600)
  2. rosterclient.yaml      (searched in cwd, then platform config dir)
  3. Hardcoded defaults

The config file is optional; every field has a default.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal
from urllib.parse import urlparse

import platformdirs
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

DEFAULT_API_BASE_URL = "http://localhost:5000/api/v1"
DEFAULT_TOKEN_TTL_SECONDS = 30 * 60


def _find_config_file() -> str | None:
    """Return the path of the first rosterclient.yaml found, or None."""
    candidates = [
        Path("rosterclient.yaml"),
        Path(platformdirs.user_config_dir("rosterclient")) / "rosterclient.yaml",
    ]
    for path in candidates:
        if path.exists():
            return str(path)
    return None


class ApiSettings(BaseModel):
    base_url: str = DEFAULT_API_BASE_URL
    # Prefix of the client-side routes, e.g. "/app" -> "/app/login"
    base_path: str = ""
    timeout_seconds: float = Field(default=30.0, gt=0)

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        parsed = urlparse(v)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError(f"API base URL must be an absolute http(s) URL: {v!r}")
        return v.rstrip("/")

    @field_validator("base_path")
    @classmethod
    def validate_base_path(cls, v: str) -> str:
        return v.rstrip("/")


class CsrfSettings(BaseModel):
    token_ttl_seconds: float = Field(default=DEFAULT_TOKEN_TTL_SECONDS, gt=0)
    prefetch_on_start: bool = True


class LoggingSettings(BaseModel):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    format: Literal["json", "text"] = "json"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        # Double-underscore separates nesting: ROSTERCLIENT__API__BASE_URL=...
        env_prefix="ROSTERCLIENT__",
        env_nested_delimiter="__",
        yaml_file=_find_config_file(),
        yaml_file_encoding="utf-8",
    )

    api: ApiSettings = ApiSettings()
    csrf: CsrfSettings = CsrfSettings()
    logging: LoggingSettings = LoggingSettings()

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
        **kwargs: Any,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,  # Constructor args (highest priority)
            env_settings,  # Environment variables
            YamlConfigSettingsSource(settings_cls),  # YAML file
            # dotenv and file secrets intentionally excluded
        )

    @property
    def csrf_token_url(self) -> str:
        return f"{self.api.base_url}/auth/csrf-token"

    @property
    def login_path(self) -> str:
        return f"{self.api.base_path}/login"
