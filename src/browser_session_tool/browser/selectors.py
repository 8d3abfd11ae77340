"""Selector classification and locator construction."""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass
from typing import Any, Optional

from playwright.async_api import Locator, Page

ROLE_PATTERN = re.compile(r"^role:(\w+)(?:\[(.+)\])?$")
CSS_PREFIXES = (".", "#", "[")
CSS_COMBINATORS = (">", "+")


class SelectorKind(str, enum.Enum):
    """Addressing strategies supported by the engine."""

    CSS = "css"
    ROLE = "role"
    TEST_ID = "test_id"
    PLACEHOLDER = "placeholder"
    LABEL = "label"
    TEXT = "text"


@dataclass(frozen=True)
class SelectorStrategy:
    """Resolved form of a selector string."""

    kind: SelectorKind
    argument: str
    name: Optional[str] = None


_PREFIXED_KINDS = (
    ("testid:", SelectorKind.TEST_ID),
    ("placeholder:", SelectorKind.PLACEHOLDER),
    ("label:", SelectorKind.LABEL),
)


def resolve_selector(selector: str) -> SelectorStrategy:
    """Classify *selector*; the first matching rule wins and text is the fallback."""

    if selector.startswith(CSS_PREFIXES) or any(token in selector for token in CSS_COMBINATORS):
        return SelectorStrategy(SelectorKind.CSS, selector)
    role_match = ROLE_PATTERN.match(selector)
    if role_match:
        role, name = role_match.groups()
        return SelectorStrategy(SelectorKind.ROLE, role, name)
    for prefix, kind in _PREFIXED_KINDS:
        if selector.startswith(prefix):
            return SelectorStrategy(kind, selector[len(prefix) :])
    return SelectorStrategy(SelectorKind.TEXT, selector)


def locate(page: Page, strategy: SelectorStrategy) -> Locator:
    """Build the Playwright locator described by *strategy*."""

    if strategy.kind == SelectorKind.CSS:
        return page.locator(strategy.argument)
    if strategy.kind == SelectorKind.ROLE:
        kwargs: dict[str, Any] = {}
        if strategy.name:
            kwargs["name"] = strategy.name
        return page.get_by_role(strategy.argument, **kwargs)  # type: ignore[arg-type]
    if strategy.kind == SelectorKind.TEST_ID:
        return page.get_by_test_id(strategy.argument)
    if strategy.kind == SelectorKind.PLACEHOLDER:
        return page.get_by_placeholder(strategy.argument)
    if strategy.kind == SelectorKind.LABEL:
        return page.get_by_label(strategy.argument)
    return page.get_by_text(strategy.argument)
