"""Persistent Playwright session shared by every command run."""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, AsyncIterator, Awaitable, Callable, Optional

from playwright.async_api import Browser, BrowserContext, Error, Page, Playwright, async_playwright

from ..config import BrowserConfig
from ..errors import SessionUnavailableError

LOGGER = logging.getLogger(__name__)

# alias -> (browser type, channel)
ENGINE_ALIASES: dict[str, tuple[str, Optional[str]]] = {
    "chromium": ("chromium", None),
    "firefox": ("firefox", None),
    "webkit": ("webkit", None),
    "chrome": ("chromium", "chrome"),
    "edge": ("chromium", "msedge"),
    "msedge": ("chromium", "msedge"),
    "safari": ("webkit", None),
}

PAGE_METRICS_SCRIPT = """() => ({
    navigation: performance.getEntriesByType("navigation").map((entry) => ({
        type: entry.entryType,
        duration: entry.duration,
        loadEventEnd: entry.loadEventEnd,
    })),
    resources: performance.getEntriesByType("resource").map((entry) => ({
        name: entry.name,
        type: entry.initiatorType,
        duration: entry.duration,
    })),
})"""

PlaywrightLauncher = Callable[[], Awaitable[Playwright]]


@dataclass
class Session:
    """The browser, context and page owned by one live session."""

    playwright: Playwright
    browser: Browser
    context: BrowserContext
    page: Page


def resolve_engine(name: str) -> tuple[str, Optional[str]]:
    try:
        return ENGINE_ALIASES[name.lower()]
    except KeyError:
        supported = ", ".join(sorted(ENGINE_ALIASES))
        raise SessionUnavailableError(
            f"Unsupported browser: {name}. Supported: {supported}"
        ) from None


async def _start_playwright() -> Playwright:
    return await async_playwright().start()


class SessionManager:
    """Owns the single browser session and creates it on demand.

    ``acquire`` reuses the live session; ``release`` tears it down and the next
    ``acquire`` launches a fresh one.
    """

    def __init__(
        self,
        config: Optional[BrowserConfig] = None,
        launcher: Optional[PlaywrightLauncher] = None,
    ) -> None:
        self._config = config or BrowserConfig()
        self._browser_type, self._channel = resolve_engine(self._config.engine)
        self._launcher = launcher or _start_playwright
        self._session: Optional[Session] = None
        self._lock = asyncio.Lock()
        self._run_lock = asyncio.Lock()
        self.launch_count = 0

    @property
    def config(self) -> BrowserConfig:
        return self._config

    @property
    def current(self) -> Optional[Session]:
        return self._session

    @property
    def is_active(self) -> bool:
        return self._session is not None

    async def acquire(self) -> Session:
        """Return the live session, launching one if none exists."""

        async with self._lock:
            if self._session is not None:
                LOGGER.debug("Reusing existing browser session")
                return self._session
            self._session = await self._launch()
            return self._session

    async def release(self) -> None:
        """Close the live session, if any."""

        async with self._lock:
            session, self._session = self._session, None
            if session is None:
                return
            LOGGER.debug("Closing browser session")
            await _close_quietly(session.page)
            await _close_quietly(session.context)
            await _close_quietly(session.browser)
            await _stop_quietly(session.playwright)

    @asynccontextmanager
    async def exclusive(self) -> AsyncIterator[None]:
        """Hold the session for a whole run; concurrent runs wait their turn."""

        if self._run_lock.locked():
            LOGGER.info("Browser session busy, waiting for the running batch to finish")
        async with self._run_lock:
            yield

    async def snapshot(self) -> Optional[dict[str, Any]]:
        """Describe the current page, or return ``None`` without a live session."""

        session = self._session
        if session is None:
            return None
        page = session.page
        return {
            "url": page.url,
            "title": await page.title(),
            "aria_snapshot": await page.locator("body").aria_snapshot(),
        }

    async def debug_info(self) -> Optional[dict[str, Any]]:
        """Collect performance entries and content size of the current page."""

        session = self._session
        if session is None:
            return None
        page = session.page
        content = await page.content()
        metrics = await page.evaluate(PAGE_METRICS_SCRIPT)
        return {
            "url": page.url,
            "content_length": len(content),
            "page_metrics": metrics,
        }

    async def _launch(self) -> Session:
        label = self._channel or self._browser_type
        LOGGER.info("Launching %s (headless=%s)", label, self._config.headless)
        try:
            playwright = await self._launcher()
        except Exception as exc:
            raise SessionUnavailableError(f"Could not start Playwright: {exc}") from exc
        browser: Optional[Browser] = None
        try:
            launch_kwargs: dict[str, Any] = {"headless": self._config.headless}
            if self._channel:
                launch_kwargs["channel"] = self._channel
            browser_type = getattr(playwright, self._browser_type)
            browser = await browser_type.launch(**launch_kwargs)
            context = await browser.new_context(
                viewport={
                    "width": self._config.viewport_width,
                    "height": self._config.viewport_height,
                }
            )
            context.set_default_timeout(self._config.default_timeout_ms)
            page = await context.new_page()
        except Error as exc:
            if browser is not None:
                await _close_quietly(browser)
            await _stop_quietly(playwright)
            raise SessionUnavailableError(f"Could not launch {label}: {exc.message}") from exc
        self.launch_count += 1
        return Session(playwright=playwright, browser=browser, context=context, page=page)


async def _close_quietly(resource: Any) -> None:
    try:
        await resource.close()
    except Error as exc:
        LOGGER.warning("Failed to close %s: %s", type(resource).__name__, exc)


async def _stop_quietly(playwright: Playwright) -> None:
    try:
        await playwright.stop()
    except Error as exc:
        LOGGER.warning("Failed to stop Playwright driver: %s", exc)
