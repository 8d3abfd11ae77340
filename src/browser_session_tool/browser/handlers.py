"""Handlers for every supported command type.

Each handler receives a :class:`CommandContext` and returns the payload
recorded for the step. Handlers raise :class:`MissingParameterError` when a
parameter they need is absent and let Playwright errors propagate; the
dispatcher turns both into failed outcomes.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Awaitable, Callable, Optional

from playwright.async_api import Locator, Page

from ..config import BrowserConfig
from ..errors import MissingParameterError
from ..models import Command, CommandType
from .selectors import locate, resolve_selector
from .session import Session, SessionManager

Payload = dict[str, Any]
Handler = Callable[["CommandContext"], Awaitable[Payload]]

HANDLERS: dict[str, Handler] = {}


def register(command_type: CommandType) -> Callable[[Handler], Handler]:
    def _decorator(handler: Handler) -> Handler:
        HANDLERS[command_type.value] = handler
        return handler

    return _decorator


def registered_types() -> list[str]:
    return sorted(HANDLERS)


@dataclass
class CommandContext:
    """Everything a handler may touch while executing one command."""

    command: Command
    session: Session
    sessions: SessionManager
    config: BrowserConfig

    @property
    def page(self) -> Page:
        return self.session.page

    def require(self, parameter: str) -> Any:
        value = getattr(self.command, parameter)
        if value is None or value == "" or value == []:
            raise MissingParameterError(self.command.type, parameter)
        return value

    def locator(self, parameter: str = "selector") -> Locator:
        return locate(self.page, resolve_selector(self.require(parameter)))

    @property
    def timeout(self) -> Optional[float]:
        return self.command.timeout

    @property
    def wait_until(self) -> str:
        return self.command.wait_until or self.config.navigation_wait_until


# Navigation ------------------------------------------------------------------


@register(CommandType.NAVIGATE)
async def navigate(ctx: CommandContext) -> Payload:
    url = ctx.require("url")
    await ctx.page.goto(url, wait_until=ctx.wait_until, timeout=ctx.timeout)
    return {"url": ctx.page.url}


@register(CommandType.NAVIGATE_BACK)
async def navigate_back(ctx: CommandContext) -> Payload:
    await ctx.page.go_back(wait_until=ctx.wait_until, timeout=ctx.timeout)
    return {"url": ctx.page.url}


@register(CommandType.RELOAD)
async def reload(ctx: CommandContext) -> Payload:
    await ctx.page.reload(wait_until=ctx.wait_until, timeout=ctx.timeout)
    return {"reloaded": ctx.page.url}


@register(CommandType.GET_URL)
async def get_url(ctx: CommandContext) -> Payload:
    return {"url": ctx.page.url}


@register(CommandType.GET_TITLE)
async def get_title(ctx: CommandContext) -> Payload:
    return {"title": await ctx.page.title()}


# Interaction -----------------------------------------------------------------


@register(CommandType.CLICK)
async def click(ctx: CommandContext) -> Payload:
    locator = ctx.locator()
    kwargs: dict[str, Any] = {"timeout": ctx.timeout}
    if ctx.command.button:
        kwargs["button"] = ctx.command.button
    if ctx.command.click_count:
        kwargs["click_count"] = ctx.command.click_count
    await locator.click(**kwargs)
    return {"clicked": ctx.command.selector}


@register(CommandType.TYPE)
async def type_text(ctx: CommandContext) -> Payload:
    locator = ctx.locator()
    value = str(ctx.require("value"))
    delay = ctx.command.delay if ctx.command.delay is not None else ctx.config.type_delay_ms
    await locator.press_sequentially(value, delay=delay, timeout=ctx.timeout)
    return {"typed": f"{len(value)} characters"}


@register(CommandType.FILL)
async def fill(ctx: CommandContext) -> Payload:
    locator = ctx.locator()
    # an empty string is a legitimate fill value
    if ctx.command.value is None:
        raise MissingParameterError(ctx.command.type, "value")
    await locator.fill(str(ctx.command.value), timeout=ctx.timeout)
    return {"filled": ctx.command.selector}


@register(CommandType.CLEAR)
async def clear(ctx: CommandContext) -> Payload:
    await ctx.locator().clear(timeout=ctx.timeout)
    return {"cleared": ctx.command.selector}


@register(CommandType.PRESS_KEY)
async def press_key(ctx: CommandContext) -> Payload:
    key = ctx.require("key")
    await ctx.page.keyboard.press(key)
    return {"pressed": key}


@register(CommandType.HOVER)
async def hover(ctx: CommandContext) -> Payload:
    await ctx.locator().hover(timeout=ctx.timeout)
    return {"hovered": ctx.command.selector}


@register(CommandType.CHECK)
async def check(ctx: CommandContext) -> Payload:
    await ctx.locator().check(timeout=ctx.timeout)
    return {"checked": ctx.command.selector}


@register(CommandType.UNCHECK)
async def uncheck(ctx: CommandContext) -> Payload:
    await ctx.locator().uncheck(timeout=ctx.timeout)
    return {"unchecked": ctx.command.selector}


@register(CommandType.SELECT_OPTION)
async def select_option(ctx: CommandContext) -> Payload:
    locator = ctx.locator()
    value = ctx.require("value")
    selected = await locator.select_option(value, timeout=ctx.timeout)
    return {"selected": selected}


@register(CommandType.DRAG)
async def drag(ctx: CommandContext) -> Payload:
    source = ctx.locator()
    target = ctx.locator("target_selector")
    await source.drag_to(target, timeout=ctx.timeout)
    return {"dragged": f"{ctx.command.selector} to {ctx.command.target_selector}"}


@register(CommandType.UPLOAD_FILE)
async def upload_file(ctx: CommandContext) -> Payload:
    locator = ctx.locator()
    files = ctx.require("files")
    await locator.set_input_files(files, timeout=ctx.timeout)
    return {"uploaded": f"{len(files)} file(s)"}


# Waiting ---------------------------------------------------------------------


@register(CommandType.WAIT_FOR_SELECTOR)
async def wait_for_selector(ctx: CommandContext) -> Payload:
    await ctx.locator().first.wait_for(timeout=ctx.timeout)
    return {"found": ctx.command.selector}


@register(CommandType.WAIT_FOR_TEXT)
async def wait_for_text(ctx: CommandContext) -> Payload:
    text = ctx.require("text")
    await ctx.page.get_by_text(text).first.wait_for(timeout=ctx.timeout)
    return {"found": text}


@register(CommandType.WAIT_FOR_TIMEOUT)
async def wait_for_timeout(ctx: CommandContext) -> Payload:
    duration = ctx.timeout if ctx.timeout is not None else 1000
    await ctx.page.wait_for_timeout(duration)
    return {"waited": f"{duration:g}ms"}


# Extraction and utilities ----------------------------------------------------


@register(CommandType.SCREENSHOT)
async def screenshot(ctx: CommandContext) -> Payload:
    if ctx.command.path:
        path = Path(ctx.command.path)
    else:
        path = ctx.config.screenshot_dir / f"screenshot-{int(time.time() * 1000)}.png"
    path.parent.mkdir(parents=True, exist_ok=True)
    await ctx.page.screenshot(path=path, full_page=ctx.command.full_page, timeout=ctx.timeout)
    return {"screenshot": str(path)}


@register(CommandType.EVALUATE)
async def evaluate(ctx: CommandContext) -> Payload:
    script = ctx.require("script")
    return {"result": await ctx.page.evaluate(script)}


@register(CommandType.GET_TEXT)
async def get_text(ctx: CommandContext) -> Payload:
    return {"text": await ctx.locator().text_content(timeout=ctx.timeout)}


@register(CommandType.GET_ATTRIBUTE)
async def get_attribute(ctx: CommandContext) -> Payload:
    locator = ctx.locator()
    attribute = ctx.require("attribute")
    return {attribute: await locator.get_attribute(attribute, timeout=ctx.timeout)}


@register(CommandType.SCROLL)
async def scroll(ctx: CommandContext) -> Payload:
    x = ctx.command.x or 0
    y = ctx.command.y or 0
    await ctx.page.evaluate("([x, y]) => window.scrollTo(x, y)", [x, y])
    return {"scrolled": {"x": x, "y": y}}


@register(CommandType.CLOSE)
async def close(ctx: CommandContext) -> Payload:
    await ctx.sessions.release()
    return {"closed": True}
