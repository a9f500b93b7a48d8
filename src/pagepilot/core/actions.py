"""Browser actions behind the HTTP endpoints.

Each action borrows the current page from the session, does its work and
translates Playwright failures into PagePilot errors. Clicks always run
pre-action stabilization first and then click the first match.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, cast

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from pagepilot.core.locators import locate, xpath_selector
from pagepilot.core.protocols import LocationStrategy, NavigationResult, PageProvider
from pagepilot.core.resolver import effective_tag, resolve, text_strategy
from pagepilot.core.selectors import parse_selector
from pagepilot.core.stabilize import stabilize
from pagepilot.utils.config import AppConfig
from pagepilot.utils.exceptions import (
    ClickFailed,
    ClickTimeout,
    ElementNotFound,
    InteractionTimeout,
    InvalidSelector,
    KeyPressFailed,
    NavigationFailed,
    SessionNotReady,
)

if TYPE_CHECKING:
    from playwright.async_api import Locator, Page

logger = logging.getLogger(__name__)


async def click_first(locator: Locator, description: str, timeout: int) -> None:
    """Click the first element matched by a locator.

    Args:
        locator: Locator to count and click.
        description: How the element was located, for errors and logs.
        timeout: Click timeout in milliseconds.

    Raises:
        InvalidSelector: If the engine rejects the selector while counting.
        ElementNotFound: If nothing matches.
        ClickTimeout: If the click does not complete within ``timeout``.
        ClickFailed: For any other click error.
    """
    try:
        count = await locator.count()
    except PlaywrightError as e:
        raise InvalidSelector(
            "Invalid selector syntax", details=str(e), selector=description
        ) from e

    if count == 0:
        raise ElementNotFound("Element not found", selector=description)
    if count > 1:
        logger.info(f"{count} elements match {description}, clicking the first")

    try:
        await locator.first.click(timeout=timeout)
    except PlaywrightTimeoutError as e:
        raise ClickTimeout(
            "Element not visible or interactable within timeout",
            details=str(e),
            selector=description,
        ) from e
    except PlaywrightError as e:
        raise ClickFailed(
            "Failed to click element", details=str(e), selector=description
        ) from e
    logger.info(f"Successfully clicked element: {description}")


class BrowserActions:
    """Navigation, click and keyboard operations on the session page.

    Attributes:
        session: Lends out the current page per call.
        config: Timeouts and delays.
    """

    def __init__(self, session: PageProvider, config: AppConfig) -> None:
        self.session = session
        self.config = config

    def require_page(self) -> Page:
        """Return the current page.

        Raises:
            SessionNotReady: If no session is running.
        """
        page = self.session.current()
        if page is None:
            raise SessionNotReady("Playwright page is not initialized yet.")
        return page

    async def navigate(self, url: str) -> NavigationResult:
        """Navigate the page to ``url`` and read its title.

        Raises:
            SessionNotReady: If no session is running.
            NavigationFailed: If navigation or reading the title fails.
        """
        page = self.require_page()
        logger.info(f"Navigating to: {url}")
        try:
            response = await page.goto(
                url,
                wait_until=cast(Any, self.config.wait_until),
                timeout=self.config.navigation_timeout,
            )
            status = response.status if response else None
            logger.info(f"Navigation finished with status: {status or 'unknown'}")
            await page.bring_to_front()
            title = await page.title()
        except PlaywrightError as e:
            logger.error(f"Error navigating to {url}: {e}")
            raise NavigationFailed("Failed to navigate", details=str(e), url=url) from e
        return NavigationResult(url=url, status=status, title=title)

    async def _stabilize(self, page: Page) -> None:
        report = await stabilize(page, self.config)
        if not report.settled:
            failed = [o.label for o in report.outcomes if not o.ok]
            logger.debug(f"Page not fully settled before click: {failed}")

    async def _click(self, locator: Locator, description: str) -> None:
        logger.info(f"Attempting to click element using {description}")
        await click_first(locator, description, self.config.click_timeout)

    async def click_css(self, selector: str) -> None:
        page = self.require_page()
        await self._stabilize(page)
        await self._click(page.locator(selector), f"CSS: {selector}")

    async def click_xpath(self, xpath: str) -> None:
        page = self.require_page()
        await self._stabilize(page)
        selector = xpath_selector(xpath)
        await self._click(page.locator(selector), f"XPath: {selector}")

    async def click_text(self, text: str, tag: str | None = None) -> LocationStrategy:
        """Click the first element containing ``text``.

        With a tag, elements of that tag are tried first; the lookup falls
        back to any element containing the text.
        """
        page = self.require_page()
        await self._stabilize(page)
        strategy = await text_strategy(page, text, effective_tag(tag))
        await self._click(locate(page, strategy), strategy.describe())
        return strategy

    async def click_custom(
        self,
        selector: str,
        tag: str | None = None,
    ) -> LocationStrategy:
        """Click the element described by a custom selector.

        Args:
            selector: Custom selector in ``tag;key=value;...`` form.
            tag: Fallback tag when the selector has no leading tag.

        Returns:
            The strategy that located the clicked element.

        Raises:
            ResolutionError: If the selector yields no usable strategy.
            ElementNotFound: If the strategy matches nothing.
            ClickTimeout: If the click times out.
            ClickFailed: For any other click error.
        """
        page = self.require_page()
        await self._stabilize(page)
        parsed = parse_selector(selector)
        if parsed.unrecognized:
            logger.info(
                f"Ignoring unrecognized selector keys: {sorted(parsed.unrecognized)}"
            )
        strategy = await resolve(page, parsed, tag)
        await self._click(locate(page, strategy), strategy.describe())
        return strategy

    async def press_key(self, key: str) -> None:
        """Press a keyboard key on the page.

        Raises:
            SessionNotReady: If no session is running.
            InteractionTimeout: If the key press times out.
            KeyPressFailed: For any other keyboard error.
        """
        page = self.require_page()
        logger.info(f'Pressing key "{key}" using the keyboard.')
        try:
            await page.keyboard.press(key, delay=self.config.key_delay)
        except PlaywrightTimeoutError as e:
            raise InteractionTimeout(
                "Key press timed out", details=str(e), key=key
            ) from e
        except PlaywrightError as e:
            logger.error(f'Error pressing key "{key}": {e}')
            raise KeyPressFailed("Failed to type value", details=str(e), key=key) from e
        logger.info(f'Successfully entered value: "{key}"')
