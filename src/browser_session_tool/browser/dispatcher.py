"""Execute one command against the live session."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from playwright.async_api import Error

from ..config import BrowserConfig
from ..errors import MissingParameterError, UnknownCommandError, describe_failure
from ..models import Command
from .handlers import HANDLERS, CommandContext, Handler
from .session import Session, SessionManager

LOGGER = logging.getLogger(__name__)


@dataclass
class CommandOutcome:
    """Outcome of a single command before the runner assigns its index."""

    command_type: str
    success: bool
    payload: dict[str, Any] = field(default_factory=dict)
    error: Optional[str] = None


class CommandDispatcher:
    """Map a command to its handler and capture the result or failure."""

    def __init__(
        self,
        sessions: SessionManager,
        config: Optional[BrowserConfig] = None,
        handlers: Optional[dict[str, Handler]] = None,
    ) -> None:
        self._sessions = sessions
        self._config = config or sessions.config
        self._handlers = handlers if handlers is not None else HANDLERS

    def supports(self, command_type: str) -> bool:
        return command_type in self._handlers

    async def execute(self, command: Command, session: Session) -> CommandOutcome:
        handler = self._handlers.get(command.type)
        if handler is None:
            raise UnknownCommandError(command.type)
        context = CommandContext(
            command=command,
            session=session,
            sessions=self._sessions,
            config=self._config,
        )
        try:
            payload = await handler(context)
        except MissingParameterError as exc:
            if not self._config.strict_parameters:
                LOGGER.debug("Skipping %s: %s", command.type, exc)
                return CommandOutcome(command_type=command.type, success=True)
            return self._failure(command, exc)
        except (Error, OSError) as exc:
            return self._failure(command, exc)
        return CommandOutcome(command_type=command.type, success=True, payload=payload)

    @staticmethod
    def _failure(command: Command, exc: BaseException) -> CommandOutcome:
        message = describe_failure(exc)
        LOGGER.debug("Command %s failed: %s", command.type, message)
        return CommandOutcome(command_type=command.type, success=False, error=message)
