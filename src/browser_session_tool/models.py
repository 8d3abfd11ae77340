"""Shared models used across the browser session tool."""

from __future__ import annotations

import enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CommandType(str, enum.Enum):
    """Command types understood by the dispatcher."""

    NAVIGATE = "navigate"
    NAVIGATE_BACK = "navigate_back"
    RELOAD = "reload"
    GET_URL = "get_url"
    GET_TITLE = "get_title"
    CLICK = "click"
    TYPE = "type"
    FILL = "fill"
    CLEAR = "clear"
    PRESS_KEY = "press_key"
    HOVER = "hover"
    CHECK = "check"
    UNCHECK = "uncheck"
    SELECT_OPTION = "select_option"
    DRAG = "drag"
    UPLOAD_FILE = "upload_file"
    WAIT_FOR_SELECTOR = "wait_for_selector"
    WAIT_FOR_TEXT = "wait_for_text"
    WAIT_FOR_TIMEOUT = "wait_for_timeout"
    SCREENSHOT = "screenshot"
    EVALUATE = "evaluate"
    GET_TEXT = "get_text"
    GET_ATTRIBUTE = "get_attribute"
    SCROLL = "scroll"
    CLOSE = "close"


class Command(BaseModel):
    """A single browser instruction.

    ``type`` is kept as a plain string so that unrecognised types reach the
    dispatcher, which owns the decision of what is supported.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
    )

    type: str
    description: Optional[str] = None
    selector: Optional[str] = None
    target_selector: Optional[str] = None
    value: Optional[str | list[str]] = None
    text: Optional[str] = None
    url: Optional[str] = None
    key: Optional[str] = None
    attribute: Optional[str] = None
    script: Optional[str] = None
    path: Optional[str] = None
    full_page: bool = False
    files: Optional[list[str]] = None
    x: Optional[int] = None
    y: Optional[int] = None
    button: Optional[str] = None
    click_count: Optional[int] = None
    delay: Optional[float] = Field(default=None, description="Per-key delay in milliseconds.")
    timeout: Optional[float] = Field(default=None, description="Timeout in milliseconds.")
    wait_until: Optional[str] = None

    def describe(self) -> str:
        if self.description:
            return self.description
        return f"{self.type} {self.selector or self.url or ''}".strip()


class StepOutcome(BaseModel):
    """Result of one executed command, in input order."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    step_index: int
    command_type: str
    success: bool
    payload: Optional[dict[str, Any]] = None
    error: Optional[str] = None

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class RunPolicy(str, enum.Enum):
    """What the runner does after a failing step."""

    ABORT_ON_FAILURE = "abort_on_failure"
    CONTINUE_ON_FAILURE = "continue_on_failure"


class RunStatus(str, enum.Enum):
    """Lifecycle states of a command run."""

    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    ABORTED = "aborted"


class RunResult(BaseModel):
    """Ordered result log of one run plus a summary of the final page."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    status: RunStatus
    results: list[StepOutcome] = Field(default_factory=list)
    aborted_at: Optional[int] = None
    final_url: Optional[str] = None
    final_title: Optional[str] = None

    @property
    def succeeded(self) -> int:
        return sum(1 for outcome in self.results if outcome.success)

    @property
    def failed(self) -> int:
        return len(self.results) - self.succeeded

    @property
    def ok(self) -> bool:
        return self.status == RunStatus.COMPLETED and self.failed == 0

    def to_wire(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "totalCommands": len(self.results),
            "succeeded": self.succeeded,
            "failed": self.failed,
            "abortedAt": self.aborted_at,
            "finalUrl": self.final_url,
            "finalTitle": self.final_title,
            "results": [outcome.to_wire() for outcome in self.results],
        }
