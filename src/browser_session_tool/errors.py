"""Exceptions raised by the browser command engine."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

if TYPE_CHECKING:
    from .models import RunResult


class BrowserSessionToolError(RuntimeError):
    """Base class for engine errors.

    When the error interrupts a run that already executed steps, ``result``
    holds the aborted result log up to the interrupted step.
    """

    result: Optional["RunResult"] = None


class MissingVariableError(BrowserSessionToolError):
    """Raised when a ``${{NAME}}`` placeholder has no value in the variable store."""

    def __init__(self, name: str) -> None:
        super().__init__(
            f'Environment variable "{name}" is not defined. '
            "Set it in the process environment or the configured .env file"
        )
        self.name = name


class UnknownCommandError(BrowserSessionToolError):
    """Raised when a command type has no registered handler."""

    def __init__(self, command_type: str, step_index: Optional[int] = None) -> None:
        location = f" at step {step_index}" if step_index is not None else ""
        super().__init__(f"Unknown command type: {command_type!r}{location}")
        self.command_type = command_type
        self.step_index = step_index


class InvalidCommandError(BrowserSessionToolError):
    """Raised when a command record cannot be read as a command."""

    def __init__(self, step_index: int, detail: str) -> None:
        super().__init__(f"Invalid command at step {step_index}: {detail}")
        self.step_index = step_index


class MissingParameterError(BrowserSessionToolError):
    """Raised by a handler when a required command parameter is absent."""

    def __init__(self, command_type: str, parameter: str) -> None:
        super().__init__(f"{command_type} command requires '{parameter}'")
        self.command_type = command_type
        self.parameter = parameter


class SessionUnavailableError(BrowserSessionToolError):
    """Raised when the browser session cannot be created."""


def describe_failure(exc: BaseException) -> str:
    """Return the message recorded for a failed step."""

    if isinstance(exc, PlaywrightTimeoutError):
        return f"Timeout: {exc.message}"
    if isinstance(exc, PlaywrightError):
        return f"EngineError: {exc.message}"
    if isinstance(exc, MissingParameterError):
        return f"MissingParameter: {exc}"
    return f"{type(exc).__name__}: {exc}"
