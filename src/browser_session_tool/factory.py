"""Factories for constructing components from configuration."""

from __future__ import annotations

from typing import Optional

from .browser.dispatcher import CommandDispatcher
from .browser.session import PlaywrightLauncher, SessionManager
from .config import BrowserConfig, ToolConfig
from .orchestrator.engine import CommandEngine
from .orchestrator.runner import CommandRunner
from .variables import VariableStore, load_variables


def build_sessions(
    config: BrowserConfig,
    launcher: Optional[PlaywrightLauncher] = None,
) -> SessionManager:
    return SessionManager(config, launcher=launcher)


def build_variables(config: ToolConfig) -> VariableStore:
    secrets_file = config.secrets_file
    if secrets_file is None:
        default = config.base_dir / ".env"
        secrets_file = default if default.is_file() else None
    return load_variables(secrets_file)


def build_engine(
    config: ToolConfig,
    launcher: Optional[PlaywrightLauncher] = None,
    variables: Optional[VariableStore] = None,
) -> CommandEngine:
    sessions = build_sessions(config.browser, launcher=launcher)
    dispatcher = CommandDispatcher(sessions, config.browser)
    runner = CommandRunner(
        sessions,
        dispatcher,
        variables if variables is not None else build_variables(config),
    )
    return CommandEngine(sessions=sessions, dispatcher=dispatcher, runner=runner)
