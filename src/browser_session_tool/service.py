"""HTTP service exposing the command engine."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException
from playwright.async_api import Error as PlaywrightError
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .browser.handlers import registered_types
from .config import ToolConfig, load_config
from .errors import (
    InvalidCommandError,
    MissingVariableError,
    SessionUnavailableError,
    UnknownCommandError,
)
from .factory import build_engine
from .models import RunPolicy
from .orchestrator.engine import CommandEngine

app = FastAPI(title="Browser Session Tool")


class CommandBatch(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    commands: List[Dict[str, Any]] = Field(default_factory=list)
    continue_on_failure: bool = False


# Service state ---------------------------------------------------------------


class ServiceState:
    def __init__(self, config: ToolConfig, engine: Optional[CommandEngine] = None) -> None:
        self.config = config
        self._engine = engine

    @property
    def engine(self) -> CommandEngine:
        if self._engine is None:
            self._engine = build_engine(self.config)
        return self._engine

    def health(self) -> Dict[str, Any]:
        active = self._engine is not None and self._engine.sessions.is_active
        return {
            "session": "active" if active else "idle",
            "browser": self.config.browser.engine,
            "commands": registered_types(),
        }


state = ServiceState(load_config())


# API routes -----------------------------------------------------------------


@app.get("/health")
def get_health() -> Dict[str, Any]:
    return state.health()


@app.post("/commands")
async def run_commands(batch: CommandBatch) -> Dict[str, Any]:
    policy = (
        RunPolicy.CONTINUE_ON_FAILURE if batch.continue_on_failure else RunPolicy.ABORT_ON_FAILURE
    )
    try:
        result = await state.engine.run(batch.commands, policy)
    except (MissingVariableError, UnknownCommandError, InvalidCommandError) as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except SessionUnavailableError as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc
    return result.to_wire()


@app.get("/session")
async def get_session() -> Dict[str, Any]:
    try:
        snapshot = await state.engine.snapshot()
    except SessionUnavailableError as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc
    except PlaywrightError as exc:
        raise HTTPException(status_code=503, detail=f"Browser session failed: {exc.message}") from exc
    if snapshot is None:
        raise HTTPException(status_code=404, detail="No active browser session")
    return {
        "url": snapshot["url"],
        "title": snapshot["title"],
        "ariaSnapshot": snapshot["aria_snapshot"],
    }


@app.get("/session/debug")
async def get_session_debug() -> Dict[str, Any]:
    try:
        info = await state.engine.debug_info()
    except SessionUnavailableError as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc
    except PlaywrightError as exc:
        raise HTTPException(status_code=503, detail=f"Browser session failed: {exc.message}") from exc
    if info is None:
        raise HTTPException(status_code=404, detail="No active browser session")
    return {
        "url": info["url"],
        "contentLength": info["content_length"],
        "pageMetrics": info["page_metrics"],
    }


@app.delete("/session")
async def close_session() -> Dict[str, Any]:
    try:
        await state.engine.close()
    except SessionUnavailableError as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc
    except PlaywrightError as exc:
        raise HTTPException(status_code=503, detail=f"Browser session failed: {exc.message}") from exc
    return {"status": "closed"}
