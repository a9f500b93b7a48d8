"""Shared pytest fixtures for PagePilot tests.

This module provides a small in-memory stand-in for a Playwright page.
FakePage answers count queries from a table keyed by the locator chain that
produced them, so tests can describe a document as "which lookups match how
many elements" and assert exactly which lookups the code issued.

Locator chain keys:
- ``page.locator("div")`` -> ``div``
- ``loc.locator("span")`` -> ``<loc> >> span``
- ``get_by_role("button", name="Save")`` -> ``role=button[name=Save]``
- ``get_by_label("Close")`` -> ``label=Close``
- ``get_by_text("Hi")`` -> ``text=Hi``
- ``loc.filter(has_text="Hi")`` -> ``<loc> >> has-text=Hi``
"""

from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from playwright.async_api import Error as PlaywrightError

from pagepilot.core.browser import BrowserSession
from pagepilot.utils.config import AppConfig


class FakeLocator:
    """Lazy locator whose identity is its chain key."""

    def __init__(self, page: FakePage, key: str) -> None:
        self.page = page
        self.key = key

    def _child(self, key: str) -> FakeLocator:
        return FakeLocator(self.page, f"{self.key} >> {key}")

    def locator(self, selector: str) -> FakeLocator:
        return self._child(selector)

    def get_by_role(self, role: str, name: str | None = None) -> FakeLocator:
        return self._child(_role_key(role, name))

    def get_by_label(self, label: str) -> FakeLocator:
        return self._child(f"label={label}")

    def get_by_text(self, text: str) -> FakeLocator:
        return self._child(f"text={text}")

    def filter(self, has_text: str) -> FakeLocator:
        return self._child(f"has-text={has_text}")

    @property
    def first(self) -> FakeLocator:
        return self

    async def count(self) -> int:
        self.page.count_queries.append(self.key)
        if self.key in self.page.invalid:
            raise PlaywrightError(f"Unexpected token in selector '{self.key}'")
        return self.page.counts.get(self.key, 0)

    async def click(self, timeout: int | None = None) -> None:
        if self.page.click_error is not None:
            raise self.page.click_error
        self.page.clicks.append((self.key, timeout))


def _role_key(role: str, name: str | None) -> str:
    return f"role={role}[name={name}]" if name else f"role={role}"


class FakePage:
    """In-memory page answering count queries by locator chain key."""

    def __init__(self, counts: dict[str, int] | None = None) -> None:
        self.counts: dict[str, int] = dict(counts or {})
        self.invalid: set[str] = set()
        self.click_error: Exception | None = None
        self.count_queries: list[str] = []
        self.clicks: list[tuple[str, int | None]] = []
        self.wait_for_load_state = AsyncMock()
        self.wait_for_timeout = AsyncMock()
        self.goto = AsyncMock(return_value=MagicMock(status=200))
        self.title = AsyncMock(return_value="Example Domain")
        self.bring_to_front = AsyncMock()
        self.keyboard = MagicMock()
        self.keyboard.press = AsyncMock()

    def locator(self, selector: str) -> FakeLocator:
        return FakeLocator(self, selector)

    def get_by_role(self, role: str, name: str | None = None) -> FakeLocator:
        return FakeLocator(self, _role_key(role, name))

    def get_by_label(self, label: str) -> FakeLocator:
        return FakeLocator(self, f"label={label}")

    def get_by_text(self, text: str) -> FakeLocator:
        return FakeLocator(self, f"text={text}")


@pytest.fixture
def app_config() -> AppConfig:
    """Configuration with default timeouts.

    Stabilization waits are AsyncMocks on FakePage, so nothing actually
    sleeps.
    """
    return AppConfig()


@pytest.fixture
def fake_page() -> FakePage:
    """Empty page: every lookup matches nothing."""
    return FakePage()


@pytest.fixture
def mock_session(fake_page: FakePage) -> MagicMock:
    """Running BrowserSession mock lending out ``fake_page``."""
    return make_session(fake_page)


def make_session(page: Any) -> MagicMock:
    """Build a BrowserSession mock for an arbitrary page (or None)."""
    session = MagicMock(spec=BrowserSession)
    session.current.return_value = page
    session.is_running = page is not None
    session.start = AsyncMock()
    session.restart = AsyncMock()
    session.shutdown = AsyncMock()
    return session
