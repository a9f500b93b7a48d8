"""Fixtures for integration tests."""

import pytest
import pytest_asyncio
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import async_playwright

from pagepilot.utils.config import AppConfig

# Records which element was clicked on document.body.dataset.clicked
MARK_SCRIPT = "<script>function mark(v) { document.body.dataset.clicked = v; }</script>"


@pytest_asyncio.fixture
async def playwright_browser():
    """Real headless Chromium page; skipped if Chromium cannot launch."""
    playwright = await async_playwright().start()
    try:
        browser = await playwright.chromium.launch(headless=True)
    except PlaywrightError as e:
        await playwright.stop()
        pytest.skip(f"Chromium unavailable: {e.message.splitlines()[0]}")
    page = await browser.new_page()
    yield page
    await browser.close()
    await playwright.stop()


@pytest.fixture
def live_config() -> AppConfig:
    """Short waits so real-page tests stay fast."""
    return AppConfig(settle_delay=0, network_idle_timeout=2000, click_timeout=2000)


async def load(page, body: str) -> None:
    """Replace the page document with ``body`` plus the click recorder."""
    await page.set_content(f"<html><body>{MARK_SCRIPT}{body}</body></html>")


async def clicked(page) -> str | None:
    """Return the label recorded by the last click, if any."""
    return await page.evaluate("document.body.dataset.clicked || null")
