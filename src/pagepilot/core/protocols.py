"""Core protocols and data types for PagePilot.

This module defines the foundational types shared by the resolution engine,
the browser actions and the HTTP layer. It includes:
- StrategyKind enum and the LocationStrategy data class
- Result types for advisory waits and navigation
- The PageProvider protocol implemented by the browser session
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from playwright.async_api import Page


class StrategyKind(Enum):
    """How a LocationStrategy finds its elements.

    Ordered roughly from most to least stable.
    """

    ID = auto()
    ATTRIBUTE = auto()
    ROLE = auto()
    LABEL = auto()
    TAG_TEXT = auto()
    TEXT = auto()
    CSS = auto()
    ANY_DESCENDANT = auto()


@dataclass(frozen=True)
class LocationStrategy:
    """Engine-agnostic description of how to find an element.

    Attributes:
        kind: The lookup variant.
        value: Primary lookup value (id, attribute value, role, label, text,
            or a CSS descriptor for CSS).
        tag: Element tag for ATTRIBUTE and TAG_TEXT lookups; None is any tag.
        attribute: Attribute name for ATTRIBUTE lookups.
        name: Accessible name filter for ROLE lookups.
        scope: Anchor strategy that confines this lookup to its descendants.
    """

    kind: StrategyKind
    value: str = ""
    tag: str | None = None
    attribute: str | None = None
    name: str | None = None
    scope: LocationStrategy | None = None

    def describe(self) -> str:
        """Return a short human-readable description.

        Returns:
            String like ``role=button name='Save' within id='form'``.
        """
        kind = self.kind
        if kind is StrategyKind.ID:
            text = f"id='{self.value}'"
        elif kind is StrategyKind.ATTRIBUTE:
            text = f"{self.tag or '*'}[{self.attribute}='{self.value}']"
        elif kind is StrategyKind.ROLE:
            text = f"role={self.value}"
            if self.name:
                text += f" name='{self.name}'"
        elif kind is StrategyKind.LABEL:
            text = f"label='{self.value}'"
        elif kind is StrategyKind.TAG_TEXT:
            text = f"{self.tag} has-text='{self.value}'"
        elif kind is StrategyKind.TEXT:
            text = f"text='{self.value}'"
        elif kind is StrategyKind.CSS:
            text = f"css='{self.value}'"
        else:
            text = "any descendant"

        if self.scope is not None:
            text += f" within {self.scope.describe()}"
        return text


@dataclass
class AdvisoryOutcome:
    """Outcome of a best-effort wait. A failure never propagates.

    Attributes:
        label: What was waited for (e.g. "network idle").
        ok: Whether the wait completed.
        error: Error text when the wait failed.
    """

    label: str
    ok: bool
    error: str | None = None


@dataclass
class StabilizationReport:
    """Outcomes of the pre-action waits, in the order they ran."""

    outcomes: list[AdvisoryOutcome]

    @property
    def settled(self) -> bool:
        return all(o.ok for o in self.outcomes)


@dataclass
class NavigationResult:
    """Result of navigating the session page.

    Attributes:
        url: The requested URL.
        status: HTTP status of the main response, if any.
        title: Document title after navigation.
    """

    url: str
    status: int | None
    title: str


class PageProvider(Protocol):
    """Anything that can lend out the current page for one request."""

    def current(self) -> Page | None:
        """Return the active page, or None if no session is running."""
        ...
