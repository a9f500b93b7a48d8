"""Build Playwright locators from LocationStrategy values."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, cast

from pagepilot.core.protocols import LocationStrategy, StrategyKind

if TYPE_CHECKING:
    from playwright.async_api import Locator, Page

XPATH_PREFIX = "xpath="


def css_string(value: str) -> str:
    """Quote a value for use inside a CSS attribute selector."""
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def id_selector(element_id: str) -> str:
    """CSS selector matching an element id exactly, whatever its characters."""
    return f"[id={css_string(element_id)}]"


def xpath_selector(xpath: str) -> str:
    """Prefix an XPath expression so Playwright treats it as XPath."""
    return xpath if xpath.startswith(XPATH_PREFIX) else f"{XPATH_PREFIX}{xpath}"


def locate(page: Page, strategy: LocationStrategy) -> Locator:
    """Translate a strategy into a Playwright locator.

    Scoped strategies are resolved against their anchor's locator instead of
    the page, so every lookup stays inside the anchor's subtree.

    Args:
        page: The page to search.
        strategy: What to look for.

    Returns:
        A lazy Playwright locator; nothing is queried until it is used.
    """
    root: Page | Locator = (
        page if strategy.scope is None else locate(page, strategy.scope)
    )
    kind = strategy.kind

    if kind is StrategyKind.ID:
        return root.locator(id_selector(strategy.value))
    if kind is StrategyKind.ATTRIBUTE:
        tag = strategy.tag or "*"
        value = css_string(strategy.value)
        return root.locator(f"{tag}[{strategy.attribute}={value}]")
    if kind is StrategyKind.ROLE:
        # Playwright types role as a Literal; any ARIA role string is accepted
        if strategy.name:
            return root.get_by_role(cast(Any, strategy.value), name=strategy.name)
        return root.get_by_role(cast(Any, strategy.value))
    if kind is StrategyKind.LABEL:
        return root.get_by_label(strategy.value)
    if kind is StrategyKind.TAG_TEXT:
        return root.locator(strategy.tag or "*").filter(has_text=strategy.value)
    if kind is StrategyKind.TEXT:
        return root.get_by_text(strategy.value)
    if kind is StrategyKind.CSS:
        return root.locator(strategy.value)
    return root.locator("*")
