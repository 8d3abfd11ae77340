"""Run an ordered list of commands against the persistent session."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any, Optional, Union

from playwright.async_api import Error
from pydantic import ValidationError

from ..browser.dispatcher import CommandDispatcher
from ..browser.session import SessionManager
from ..errors import BrowserSessionToolError, InvalidCommandError, UnknownCommandError
from ..models import Command, RunPolicy, RunResult, RunStatus, StepOutcome
from ..variables import VariableStore, interpolate

LOGGER = logging.getLogger(__name__)

CommandInput = Union[Command, Mapping[str, Any]]


class CommandRunner:
    """Iterates commands through the dispatcher and collects the result log."""

    def __init__(
        self,
        sessions: SessionManager,
        dispatcher: CommandDispatcher,
        variables: Optional[VariableStore] = None,
    ) -> None:
        self._sessions = sessions
        self._dispatcher = dispatcher
        self._variables: VariableStore = variables if variables is not None else {}
        self._current: Optional[RunResult] = None

    @property
    def status(self) -> RunStatus:
        """State of the run holding the session, or of the last finished one."""

        return self._current.status if self._current is not None else RunStatus.PENDING

    def prepare(self, commands: Sequence[CommandInput]) -> list[Command]:
        """Validate and interpolate the whole batch before anything touches the page.

        Raises ``MissingVariableError``, ``InvalidCommandError`` or
        ``UnknownCommandError``; none of them leave side effects behind.
        """

        raw = [
            command.model_dump(by_alias=True, exclude_none=True)
            if isinstance(command, Command)
            else command
            for command in commands
        ]
        resolved = interpolate(raw, self._variables)
        prepared: list[Command] = []
        for index, item in enumerate(resolved):
            try:
                command = Command.model_validate(item)
            except ValidationError as exc:
                raise InvalidCommandError(index, str(exc)) from exc
            if not self._dispatcher.supports(command.type):
                raise UnknownCommandError(command.type, index)
            prepared.append(command)
        return prepared

    async def run(
        self,
        commands: Sequence[CommandInput],
        policy: RunPolicy = RunPolicy.ABORT_ON_FAILURE,
    ) -> RunResult:
        """Execute *commands* in order and return the result log.

        A fatal error part way through ends the run as aborted at the
        interrupted step; the partial log travels on the raised error.
        """

        prepared = self.prepare(commands)
        total = len(prepared)

        async with self._sessions.exclusive():
            result = RunResult(status=RunStatus.PENDING)
            self._current = result
            LOGGER.info("Starting browser session with %d command(s)", total)
            result.status = RunStatus.RUNNING
            try:
                await self._run_steps(prepared, policy, result)
            except BrowserSessionToolError as exc:
                result.status = RunStatus.ABORTED
                result.aborted_at = len(result.results)
                await self._describe_final_page(result)
                LOGGER.error("Run aborted at step %d: %s", result.aborted_at, exc)
                exc.result = result
                raise
            result.status = (
                RunStatus.ABORTED if result.aborted_at is not None else RunStatus.COMPLETED
            )
            await self._describe_final_page(result)

        LOGGER.info(
            "Session complete: %d/%d commands succeeded",
            result.succeeded,
            len(result.results),
        )
        return result

    async def _run_steps(
        self,
        prepared: Sequence[Command],
        policy: RunPolicy,
        result: RunResult,
    ) -> None:
        total = len(prepared)
        for index, command in enumerate(prepared):
            LOGGER.info("[%d/%d] %s", index + 1, total, command.describe())
            session = await self._sessions.acquire()
            outcome = await self._dispatcher.execute(command, session)
            result.results.append(
                StepOutcome(
                    step_index=index,
                    command_type=outcome.command_type,
                    success=outcome.success,
                    payload=outcome.payload if outcome.success else None,
                    error=outcome.error,
                )
            )
            if outcome.success:
                LOGGER.info("  Success")
                continue
            LOGGER.warning("  Error: %s", outcome.error)
            if policy == RunPolicy.ABORT_ON_FAILURE:
                result.aborted_at = index
                return

    async def _describe_final_page(self, result: RunResult) -> None:
        session = self._sessions.current
        if session is None:
            return
        try:
            result.final_url = session.page.url
            result.final_title = await session.page.title()
        except Error as exc:
            LOGGER.warning("Could not read final page state: %s", exc)
