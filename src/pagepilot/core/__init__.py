"""Core module for PagePilot browser control.

This module exports the selector grammar, the resolution engine and the
browser session types used by the HTTP layer.
"""

from pagepilot.core.actions import BrowserActions, click_first
from pagepilot.core.browser import BrowserSession
from pagepilot.core.protocols import (
    AdvisoryOutcome,
    LocationStrategy,
    NavigationResult,
    PageProvider,
    StabilizationReport,
    StrategyKind,
)
from pagepilot.core.resolver import RESOLUTION_RULES, ResolutionRule, resolve
from pagepilot.core.selectors import AttributeKey, ParsedSelector, parse_selector
from pagepilot.core.stabilize import advisory, stabilize

__all__ = [
    "AdvisoryOutcome",
    "AttributeKey",
    "BrowserActions",
    "BrowserSession",
    "LocationStrategy",
    "NavigationResult",
    "PageProvider",
    "ParsedSelector",
    "RESOLUTION_RULES",
    "ResolutionRule",
    "StabilizationReport",
    "StrategyKind",
    "advisory",
    "click_first",
    "parse_selector",
    "resolve",
    "stabilize",
]
