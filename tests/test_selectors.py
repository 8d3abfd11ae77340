import pytest

from browser_session_tool.browser.selectors import (
    SelectorKind,
    SelectorStrategy,
    locate,
    resolve_selector,
)

from conftest import FakePage


@pytest.mark.parametrize(
    "selector",
    ["#login", ".btn.primary", "[data-test=submit]", "form > button", "h1 + p", "#role:button"],
)
def test_structural_selectors_pass_through(selector):
    assert resolve_selector(selector) == SelectorStrategy(SelectorKind.CSS, selector)


def test_role_with_accessible_name():
    strategy = resolve_selector("role:button[Submit]")

    assert strategy == SelectorStrategy(SelectorKind.ROLE, "button", "Submit")


def test_role_without_name():
    assert resolve_selector("role:link") == SelectorStrategy(SelectorKind.ROLE, "link")


@pytest.mark.parametrize(
    ("selector", "kind", "argument"),
    [
        ("testid:login-btn", SelectorKind.TEST_ID, "login-btn"),
        ("placeholder:Enter email", SelectorKind.PLACEHOLDER, "Enter email"),
        ("label:Username", SelectorKind.LABEL, "Username"),
    ],
)
def test_prefixed_selectors(selector, kind, argument):
    assert resolve_selector(selector) == SelectorStrategy(kind, argument)


@pytest.mark.parametrize("selector", ["Submit", "Sign in now", "role:two words", "button.primary"])
def test_plain_strings_fall_back_to_text(selector):
    assert resolve_selector(selector) == SelectorStrategy(SelectorKind.TEXT, selector)


def test_locate_builds_matching_locators():
    page = FakePage()

    assert locate(page, resolve_selector("#go")).target == ("css", "#go")
    assert locate(page, resolve_selector("role:button[Submit]")).target == ("role", "button", "Submit")
    assert locate(page, resolve_selector("role:link")).target == ("role", "link", None)
    assert locate(page, resolve_selector("testid:x")).target == ("test_id", "x")
    assert locate(page, resolve_selector("placeholder:Email")).target == ("placeholder", "Email")
    assert locate(page, resolve_selector("label:Name")).target == ("label", "Name")
    assert locate(page, resolve_selector("Continue")).target == ("text", "Continue")
