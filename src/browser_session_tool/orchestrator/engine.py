"""Process-wide command engine bundling the session with its runner."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Optional

from ..browser.dispatcher import CommandDispatcher
from ..browser.session import SessionManager
from ..models import RunPolicy, RunResult
from .runner import CommandInput, CommandRunner


@dataclass
class CommandEngine:
    """Owns the single session; every run and every close goes through here."""

    sessions: SessionManager
    dispatcher: CommandDispatcher
    runner: CommandRunner

    async def run(
        self,
        commands: Sequence[CommandInput],
        policy: RunPolicy = RunPolicy.ABORT_ON_FAILURE,
    ) -> RunResult:
        return await self.runner.run(commands, policy)

    async def close(self) -> None:
        async with self.sessions.exclusive():
            await self.sessions.release()

    async def snapshot(self) -> Optional[dict[str, Any]]:
        async with self.sessions.exclusive():
            return await self.sessions.snapshot()

    async def debug_info(self) -> Optional[dict[str, Any]]:
        async with self.sessions.exclusive():
            return await self.sessions.debug_info()
