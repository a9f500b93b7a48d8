"""Locator resolution engine for custom selectors.

Turns a ParsedSelector into exactly one LocationStrategy by walking
RESOLUTION_RULES in order. The first rule that applies and builds a strategy
wins. Rules are ordered by how stable the attribute tends to be: ids and
test attributes first, ARIA and text next, raw tag/name/class last.

A ``closestId`` attribute establishes an anchor. It must exist in the
document, and every strategy produced afterwards is scoped to its subtree.

The engine only issues count queries against the page; it never clicks.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from playwright.async_api import Error as PlaywrightError

from pagepilot.core.locators import css_string, locate
from pagepilot.core.protocols import LocationStrategy, StrategyKind
from pagepilot.core.selectors import AttributeKey, ParsedSelector
from pagepilot.utils.exceptions import (
    AnchorNotFound,
    InvalidSelector,
    NoStrategy,
    UnderspecifiedWithinAnchor,
)

if TYPE_CHECKING:
    from playwright.async_api import Page

logger = logging.getLogger(__name__)

WILDCARD = "*"


@dataclass
class ResolutionContext:
    """State shared by the rules during one resolution.

    Attributes:
        page: Page that count queries run against.
        parsed: The parsed custom selector.
        tag: Effective tag name, or None for any element.
        scope: Anchor strategy from ``closestId``, if any.
    """

    page: Page
    parsed: ParsedSelector
    tag: str | None
    scope: LocationStrategy | None

    def value(self, key: AttributeKey) -> str | None:
        return self.parsed.get(key)


StrategyBuilder = Callable[[ResolutionContext], Awaitable[LocationStrategy | None]]


@dataclass(frozen=True)
class ResolutionRule:
    """One entry of the priority chain.

    Attributes:
        name: Rule name, used in logs.
        applies: Whether the rule should be tried for this context.
        build: Produces the strategy, or None when the rule cannot form one.
    """

    name: str
    applies: Callable[[ResolutionContext], bool]
    build: StrategyBuilder


def effective_tag(tag_hint: str | None, fallback_tag: str | None = None) -> str | None:
    """Pick the tag used by tag-aware rules.

    The selector's own tag wins over the request's fallback tag. Empty values
    and ``*`` mean any element and are returned as None.
    """
    for candidate in (tag_hint, fallback_tag):
        if candidate and candidate.strip():
            tag = candidate.strip()
            return None if tag == WILDCARD else tag
    return None


async def count_matches(page: Page, strategy: LocationStrategy) -> int:
    """Count live elements for a strategy.

    Raises:
        InvalidSelector: If the engine rejects the generated selector.
    """
    try:
        return await locate(page, strategy).count()
    except PlaywrightError as e:
        raise InvalidSelector(
            "Invalid selector syntax",
            details=str(e),
            strategy=strategy.describe(),
        ) from e


def _has(key: AttributeKey) -> Callable[[ResolutionContext], bool]:
    return lambda ctx: ctx.parsed.has(key)


async def _by_id(ctx: ResolutionContext) -> LocationStrategy | None:
    return LocationStrategy(
        StrategyKind.ID,
        value=ctx.value(AttributeKey.ID) or "",
        scope=ctx.scope,
    )


def _by_test_attribute(key: AttributeKey) -> StrategyBuilder:
    """Builder for ``{tag}[key="value"]`` lookups."""

    async def build(ctx: ResolutionContext) -> LocationStrategy | None:
        return LocationStrategy(
            StrategyKind.ATTRIBUTE,
            value=ctx.value(key) or "",
            tag=ctx.tag,
            attribute=key.value,
            scope=ctx.scope,
        )

    return build


async def _by_role(ctx: ResolutionContext) -> LocationStrategy | None:
    name = ctx.value(AttributeKey.TEXT) or ctx.value(AttributeKey.ARIA_LABEL)
    return LocationStrategy(
        StrategyKind.ROLE,
        value=ctx.value(AttributeKey.ROLE) or "",
        name=name,
        scope=ctx.scope,
    )


async def _by_label(ctx: ResolutionContext) -> LocationStrategy | None:
    return LocationStrategy(
        StrategyKind.LABEL,
        value=ctx.value(AttributeKey.ARIA_LABEL) or "",
        scope=ctx.scope,
    )


async def _by_text(ctx: ResolutionContext) -> LocationStrategy | None:
    text = ctx.value(AttributeKey.TEXT) or ""
    return await text_strategy(ctx.page, text, ctx.tag, ctx.scope)


async def _by_css(ctx: ResolutionContext) -> LocationStrategy | None:
    descriptor = build_css_descriptor(
        ctx.tag,
        ctx.value(AttributeKey.NAME),
        ctx.value(AttributeKey.CLASSES),
    )
    if descriptor and descriptor != WILDCARD:
        return LocationStrategy(StrategyKind.CSS, value=descriptor, scope=ctx.scope)
    if ctx.scope is not None:
        # Very broad: first element of any kind inside the anchor.
        return LocationStrategy(StrategyKind.ANY_DESCENDANT, scope=ctx.scope)
    return None


def _has_css_parts(ctx: ResolutionContext) -> bool:
    return (
        ctx.tag is not None
        or ctx.parsed.has(AttributeKey.NAME)
        or ctx.parsed.has(AttributeKey.CLASSES)
    )


RESOLUTION_RULES: tuple[ResolutionRule, ...] = (
    ResolutionRule("id", _has(AttributeKey.ID), _by_id),
    ResolutionRule(
        "data-testid",
        _has(AttributeKey.DATA_TESTID),
        _by_test_attribute(AttributeKey.DATA_TESTID),
    ),
    ResolutionRule(
        "data-cy", _has(AttributeKey.DATA_CY), _by_test_attribute(AttributeKey.DATA_CY)
    ),
    ResolutionRule(
        "data-qa", _has(AttributeKey.DATA_QA), _by_test_attribute(AttributeKey.DATA_QA)
    ),
    ResolutionRule("role", _has(AttributeKey.ROLE), _by_role),
    ResolutionRule("aria-label", _has(AttributeKey.ARIA_LABEL), _by_label),
    ResolutionRule("text", _has(AttributeKey.TEXT), _by_text),
    ResolutionRule("css", _has_css_parts, _by_css),
)


def build_css_descriptor(
    tag: str | None,
    name: str | None = None,
    classes: str | None = None,
) -> str:
    """Build a CSS selector from a tag, a name attribute and class names.

    Args:
        tag: Element tag, or None to omit it.
        name: Value for a ``[name="..."]`` constraint.
        classes: Comma-separated class names; blank entries are skipped.

    Returns:
        The selector, possibly empty.
    """
    descriptor = tag or ""
    if name:
        descriptor += f"[name={css_string(name)}]"
    if classes:
        for cls in classes.split(","):
            cls = cls.strip()
            if cls:
                descriptor += f".{cls}"
    return descriptor


async def text_strategy(
    page: Page,
    text: str,
    tag: str | None = None,
    scope: LocationStrategy | None = None,
) -> LocationStrategy:
    """Strategy for finding an element by its text content.

    With a tag, elements of that tag containing the text are preferred. When
    none exist the lookup falls back to a plain text match, still inside
    ``scope``.
    """
    if tag:
        tagged = LocationStrategy(
            StrategyKind.TAG_TEXT, value=text, tag=tag, scope=scope
        )
        if await count_matches(page, tagged) > 0:
            return tagged
        logger.info(
            f"No <{tag}> containing text '{text}', falling back to text lookup"
        )
    return LocationStrategy(StrategyKind.TEXT, value=text, scope=scope)


async def resolve(
    page: Page,
    parsed: ParsedSelector,
    fallback_tag: str | None = None,
) -> LocationStrategy:
    """Resolve a parsed custom selector to a single location strategy.

    Args:
        page: Page used for anchor and text-fallback count queries.
        parsed: The parsed selector.
        fallback_tag: Tag from the request, used when the selector has none.

    Returns:
        The strategy chosen by the first applicable rule.

    Raises:
        AnchorNotFound: If ``closestId`` matches nothing.
        UnderspecifiedWithinAnchor: If an anchor was given but no rule applies.
        NoStrategy: If no rule applies and there is no anchor,
            or the selector is empty and no tag applies.
        InvalidSelector: If the engine rejects a generated selector.
    """
    tag = effective_tag(parsed.tag_hint, fallback_tag)
    if parsed.is_empty and tag is None:
        raise NoStrategy("Custom selector is empty")

    scope = None
    anchor_id = parsed.get(AttributeKey.CLOSEST_ID)
    if anchor_id:
        scope = LocationStrategy(StrategyKind.ID, value=anchor_id)
        if await count_matches(page, scope) == 0:
            raise AnchorNotFound(
                f"No element found for closestId '{anchor_id}'",
                closestId=anchor_id,
            )

    ctx = ResolutionContext(page=page, parsed=parsed, tag=tag, scope=scope)
    for rule in RESOLUTION_RULES:
        if not rule.applies(ctx):
            continue
        strategy = await rule.build(ctx)
        if strategy is not None:
            logger.info(
                f"Resolved custom selector via '{rule.name}': {strategy.describe()}"
            )
            return strategy

    if scope is not None:
        raise UnderspecifiedWithinAnchor(
            "Custom selector has an anchor but nothing to find inside it",
            closestId=anchor_id,
        )
    raise NoStrategy("Custom selector has no usable attributes")
