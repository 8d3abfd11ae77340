from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

import pytest
from playwright.async_api import Error, TimeoutError

from browser_session_tool.browser.dispatcher import CommandDispatcher
from browser_session_tool.browser.session import SessionManager
from browser_session_tool.config import BrowserConfig
from browser_session_tool.orchestrator.runner import CommandRunner


class FakeLocator:
    def __init__(self, page: "FakePage", target: tuple[Any, ...]) -> None:
        self._page = page
        self.target = target

    @property
    def first(self) -> "FakeLocator":
        return self

    def _record(self, method: str, *args: Any) -> None:
        if self.target in self._page.missing:
            raise TimeoutError(f"Timeout 30000ms exceeded waiting for {self.target}")
        self._page.calls.append((method, self.target, *args))

    async def click(self, **kwargs: Any) -> None:
        self._record("click", kwargs)

    async def fill(self, value: str, timeout: Optional[float] = None) -> None:
        self._record("fill", value)

    async def press_sequentially(self, value: str, delay: float = 0, timeout: Optional[float] = None) -> None:
        self._record("press_sequentially", value, delay)

    async def clear(self, timeout: Optional[float] = None) -> None:
        self._record("clear")

    async def hover(self, timeout: Optional[float] = None) -> None:
        self._record("hover")

    async def check(self, timeout: Optional[float] = None) -> None:
        self._record("check")

    async def uncheck(self, timeout: Optional[float] = None) -> None:
        self._record("uncheck")

    async def select_option(self, value: Any, timeout: Optional[float] = None) -> list[str]:
        self._record("select_option", value)
        return value if isinstance(value, list) else [value]

    async def drag_to(self, target: "FakeLocator", timeout: Optional[float] = None) -> None:
        self._record("drag_to", target.target)

    async def set_input_files(self, files: list[str], timeout: Optional[float] = None) -> None:
        self._record("set_input_files", files)

    async def text_content(self, timeout: Optional[float] = None) -> str:
        self._record("text_content")
        return self._page.texts.get(self.target, "")

    async def get_attribute(self, name: str, timeout: Optional[float] = None) -> Optional[str]:
        self._record("get_attribute", name)
        return self._page.attributes.get((self.target, name))

    async def wait_for(self, timeout: Optional[float] = None) -> None:
        self._record("wait_for")

    async def aria_snapshot(self) -> str:
        return "- heading \"Example\""


class FakeKeyboard:
    def __init__(self, page: "FakePage") -> None:
        self._page = page

    async def press(self, key: str) -> None:
        self._page.calls.append(("press", key))


class FakePage:
    def __init__(self) -> None:
        self.url = "about:blank"
        self.page_title = "Blank"
        self.calls: list[tuple[Any, ...]] = []
        self.missing: set[tuple[Any, ...]] = set()
        self.unreachable: set[str] = set()
        self.texts: dict[tuple[Any, ...], str] = {}
        self.attributes: dict[tuple[tuple[Any, ...], str], str] = {}
        self.evaluate_result: Any = None
        self.html = "<html><body><h1>Example</h1></body></html>"
        self.history: list[str] = []
        self.keyboard = FakeKeyboard(self)
        self.closed = False

    def locator(self, selector: str) -> FakeLocator:
        return FakeLocator(self, ("css", selector))

    def get_by_role(self, role: str, name: Optional[str] = None) -> FakeLocator:
        return FakeLocator(self, ("role", role, name))

    def get_by_test_id(self, test_id: str) -> FakeLocator:
        return FakeLocator(self, ("test_id", test_id))

    def get_by_placeholder(self, text: str) -> FakeLocator:
        return FakeLocator(self, ("placeholder", text))

    def get_by_label(self, text: str) -> FakeLocator:
        return FakeLocator(self, ("label", text))

    def get_by_text(self, text: str) -> FakeLocator:
        return FakeLocator(self, ("text", text))

    async def goto(self, url: str, wait_until: str = "load", timeout: Optional[float] = None) -> None:
        if url in self.unreachable:
            raise Error(f"net::ERR_NAME_NOT_RESOLVED at {url}")
        self.calls.append(("goto", url, wait_until))
        self.history.append(self.url)
        self.url = url

    async def go_back(self, wait_until: str = "load", timeout: Optional[float] = None) -> None:
        self.calls.append(("go_back",))
        if self.history:
            self.url = self.history.pop()

    async def reload(self, wait_until: str = "load", timeout: Optional[float] = None) -> None:
        self.calls.append(("reload",))

    async def title(self) -> str:
        return self.page_title

    async def content(self) -> str:
        return self.html

    async def wait_for_timeout(self, timeout: float) -> None:
        self.calls.append(("wait_for_timeout", timeout))

    async def screenshot(self, path: Path, full_page: bool = False, timeout: Optional[float] = None) -> bytes:
        self.calls.append(("screenshot", str(path), full_page))
        Path(path).write_bytes(b"png")
        return b"png"

    async def evaluate(self, script: str, arg: Any = None) -> Any:
        self.calls.append(("evaluate", script, arg))
        return self.evaluate_result

    async def close(self) -> None:
        self.closed = True


class FakeContext:
    def __init__(self) -> None:
        self.pages: list[FakePage] = []
        self.default_timeout: Optional[float] = None
        self.closed = False

    def set_default_timeout(self, timeout: float) -> None:
        self.default_timeout = timeout

    async def new_page(self) -> FakePage:
        page = FakePage()
        self.pages.append(page)
        return page

    async def close(self) -> None:
        self.closed = True


class FakeBrowser:
    def __init__(self) -> None:
        self.contexts: list[FakeContext] = []
        self.context_options: list[dict[str, Any]] = []
        self.closed = False

    async def new_context(self, **kwargs: Any) -> FakeContext:
        self.context_options.append(kwargs)
        context = FakeContext()
        self.contexts.append(context)
        return context

    async def close(self) -> None:
        self.closed = True


class FakeBrowserType:
    def __init__(self, name: str) -> None:
        self.name = name
        self.launches: list[dict[str, Any]] = []
        self.fail_with: Optional[str] = None
        self.browsers: list[FakeBrowser] = []

    async def launch(self, **kwargs: Any) -> FakeBrowser:
        if self.fail_with:
            raise Error(self.fail_with)
        self.launches.append(kwargs)
        browser = FakeBrowser()
        self.browsers.append(browser)
        return browser


class FakePlaywright:
    def __init__(self) -> None:
        self.chromium = FakeBrowserType("chromium")
        self.firefox = FakeBrowserType("firefox")
        self.webkit = FakeBrowserType("webkit")
        self.starts = 0
        self.stops = 0
        self.stop_error: Optional[str] = None

    async def launcher(self) -> "FakePlaywright":
        self.starts += 1
        return self

    async def stop(self) -> None:
        self.stops += 1
        if self.stop_error:
            raise Error(self.stop_error)

    @property
    def pages(self) -> list[FakePage]:
        return [
            page
            for browser_type in (self.chromium, self.firefox, self.webkit)
            for browser in browser_type.browsers
            for context in browser.contexts
            for page in context.pages
        ]


@pytest.fixture
def fake_playwright() -> FakePlaywright:
    return FakePlaywright()


@pytest.fixture
def browser_config(tmp_path: Path) -> BrowserConfig:
    return BrowserConfig(headless=True, screenshot_dir=tmp_path / "shots")


@pytest.fixture
def sessions(browser_config: BrowserConfig, fake_playwright: FakePlaywright) -> SessionManager:
    return SessionManager(browser_config, launcher=fake_playwright.launcher)


@pytest.fixture
def dispatcher(sessions: SessionManager) -> CommandDispatcher:
    return CommandDispatcher(sessions)


@pytest.fixture
def runner(sessions: SessionManager, dispatcher: CommandDispatcher) -> CommandRunner:
    return CommandRunner(sessions, dispatcher, {"HOST": "https://a.test", "USER": "bob"})
