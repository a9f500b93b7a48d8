"""Playwright browser session lifecycle.

This module owns the single browser/context/page triple the API drives.
Request handlers borrow the page per request through ``current()``; only
``restart()`` replaces it.
"""

from __future__ import annotations

import logging

from playwright.async_api import (
    Browser,
    BrowserContext,
    Page,
    Playwright,
    async_playwright,
)
from playwright_stealth import Stealth

from pagepilot.utils.config import AppConfig
from pagepilot.utils.exceptions import SessionRestartError, SessionStartError

logger = logging.getLogger(__name__)

SYSTEM_PAGE_PREFIXES = ("chrome://", "about:", "chrome-extension://")


class BrowserSession:
    """The one Playwright session shared by all requests.

    Supports two modes:
    - Normal mode: launches Chromium with a fresh context and page (default)
    - CDP mode: connects to an existing Chrome via Chrome DevTools Protocol

    Attributes:
        headless: Whether to run the launched browser headless.
        cdp_url: URL for a CDP connection instead of a launch.
        stealth: Whether to apply playwright-stealth to the page.

    Example:
        >>> session = BrowserSession(headless=True)
        >>> await session.start()
        >>> page = session.current()
        >>> await session.shutdown()
    """

    def __init__(
        self,
        headless: bool = False,
        cdp_url: str | None = None,
        stealth: bool = False,
        cdp_timeout: int = 10000,
    ) -> None:
        self.headless = headless
        self.cdp_url = cdp_url
        self.stealth = stealth
        self.cdp_timeout = cdp_timeout
        self._created_page = False
        self._playwright: Playwright | None = None
        self._browser: Browser | None = None
        self._context: BrowserContext | None = None
        self._page: Page | None = None

    @classmethod
    def from_config(cls, config: AppConfig) -> BrowserSession:
        return cls(
            headless=config.headless,
            cdp_url=config.cdp_url,
            stealth=config.stealth,
        )

    @property
    def is_cdp_connection(self) -> bool:
        return self.cdp_url is not None

    @property
    def is_running(self) -> bool:
        return self._page is not None

    def current(self) -> Page | None:
        """Return the active page, or None if no session is running."""
        return self._page

    async def start(self) -> None:
        """Create the browser, context and page.

        Raises:
            SessionStartError: If Playwright or the browser fails to start.
        """
        logger.info("Launching browser...")
        try:
            self._playwright = await async_playwright().start()
            if self.cdp_url:
                await self._connect_cdp()
            else:
                await self._launch()
            if self.stealth:
                await Stealth().apply_stealth_async(self._page)
        except Exception as e:
            await self._discard()
            raise SessionStartError(
                "Failed to start browser session", details=str(e)
            ) from e
        logger.info("Browser launched with a blank page.")

    async def _launch(self) -> None:
        assert self._playwright is not None
        self._browser = await self._playwright.chromium.launch(headless=self.headless)
        self._context = await self._browser.new_context()
        self._page = await self._context.new_page()

    async def _connect_cdp(self) -> None:
        """Attach to an existing Chrome via CDP.

        Reuses the first page that is not a system page (chrome://, about:,
        chrome-extension://), creating one if there is none.
        """
        assert self._playwright is not None
        assert self.cdp_url is not None
        browser = await self._playwright.chromium.connect_over_cdp(
            self.cdp_url,
            timeout=self.cdp_timeout,
        )
        self._browser = browser

        for context in browser.contexts:
            for page in context.pages:
                if not page.url.startswith(SYSTEM_PAGE_PREFIXES):
                    self._context = context
                    self._page = page
                    return

        if browser.contexts:
            self._context = browser.contexts[0]
        else:
            self._context = await browser.new_context()
        self._page = await self._context.new_page()
        self._created_page = True

    async def _close(self) -> None:
        """Close everything this session owns.

        In CDP mode the external browser is left running; only a page this
        session created is closed. State is reset even if a close fails.

        Raises:
            Exception: The first error raised while closing.
        """
        try:
            if self.is_cdp_connection:
                if self._created_page and self._page:
                    await self._page.close()
            elif self._browser:
                await self._browser.close()
            elif self._context:
                await self._context.close()
        finally:
            await self._discard()

    async def _discard(self) -> None:
        """Stop Playwright and forget every handle."""
        playwright = self._playwright
        self._playwright = None
        self._browser = None
        self._context = None
        self._page = None
        self._created_page = False
        if playwright:
            await playwright.stop()

    async def restart(self) -> None:
        """Tear down the current session and start a new one.

        On failure the old session stays torn down and the caller must retry.

        Raises:
            SessionRestartError: If teardown or relaunch fails.
        """
        logger.info("Restarting browser session...")
        try:
            await self._close()
        except Exception as e:
            logger.error(f"Error closing browser during restart: {e}")
            raise SessionRestartError("Failed to close browser", details=str(e)) from e

        try:
            await self.start()
        except SessionStartError as e:
            logger.error(f"Error relaunching browser: {e.details}")
            raise SessionRestartError(
                "Failed to relaunch browser", details=e.details
            ) from e
        logger.info("Browser session restarted.")

    async def shutdown(self) -> None:
        """Close the session on process exit. Close errors are logged only."""
        if not self._playwright and not self._page:
            return
        logger.info("Shutting down browser...")
        try:
            await self._close()
            logger.info("Browser closed.")
        except Exception as e:
            logger.error(f"Error closing browser: {e}")
