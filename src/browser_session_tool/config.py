"""Configuration models for the browser session tool."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BrowserConfig(BaseModel):
    """Settings for the browser engine and command execution."""

    engine: str = Field(
        default="chromium",
        description="chromium, firefox, webkit or one of the aliases chrome, edge, safari.",
    )
    headless: bool = False
    viewport_width: int = 1280
    viewport_height: int = 720
    default_timeout_ms: float = 30_000
    navigation_wait_until: str = "load"
    type_delay_ms: float = 50
    screenshot_dir: Path = Path(".browser-session/screenshots")
    strict_parameters: bool = Field(
        default=True,
        description="Fail steps whose required parameters are missing instead of skipping them.",
    )


class ServiceConfig(BaseModel):
    """Settings for the HTTP service."""

    host: str = Field(default="127.0.0.1")
    port: int = Field(default=8765)


class ToolConfig(BaseSettings):
    """Top-level configuration for the command engine."""

    model_config = SettingsConfigDict(
        env_prefix="BROWSER_SESSION_TOOL_",
        env_file=(".env",),
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    browser: BrowserConfig = Field(default_factory=BrowserConfig)
    service: ServiceConfig = Field(default_factory=ServiceConfig)
    base_dir: Path = Field(default_factory=Path.cwd)
    secrets_file: Optional[Path] = Field(
        default=None,
        description="Optional .env file providing values for ${{NAME}} placeholders.",
    )

    @property
    def shortcuts_dir(self) -> Path:
        return self.base_dir / ".browser-session" / "shortcuts"


def load_config(
    path: Path | None = None,
    *,
    env_file: Path | None = None,
    **overrides: object,
) -> ToolConfig:
    """Build the configuration from environment, an optional YAML file and overrides.

    Later sources win: ``BROWSER_SESSION_TOOL_*`` variables and the ``.env``
    file first, then the YAML file, then *overrides*. Nested sections merge
    key by key.
    """

    data: dict[str, Any] = {}
    if path is not None:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    _merge(data, overrides)
    if env_file is not None:
        return ToolConfig(**data, _env_file=env_file)
    return ToolConfig(**data)


def _merge(target: dict[str, Any], updates: Mapping[str, Any]) -> None:
    for key, value in updates.items():
        current = target.get(key)
        if isinstance(value, Mapping) and isinstance(current, dict):
            _merge(current, value)
        else:
            target[key] = dict(value) if isinstance(value, Mapping) else value
