"""Utilities module for PagePilot."""

from .config import AppConfig, ConfigLoader
from .exceptions import (
    AnchorNotFound,
    BadRequest,
    ClickFailed,
    ClickTimeout,
    ConfigurationError,
    ElementNotFound,
    EngineError,
    InteractionTimeout,
    InvalidSelector,
    KeyPressFailed,
    NavigationFailed,
    NoStrategy,
    PageNotReady,
    PagePilotError,
    ResolutionError,
    SessionNotReady,
    SessionRestartError,
    SessionStartError,
    UnderspecifiedWithinAnchor,
)

__all__ = [
    "AnchorNotFound",
    "AppConfig",
    "BadRequest",
    "ClickFailed",
    "ClickTimeout",
    "ConfigLoader",
    "ConfigurationError",
    "ElementNotFound",
    "EngineError",
    "InteractionTimeout",
    "InvalidSelector",
    "KeyPressFailed",
    "NavigationFailed",
    "NoStrategy",
    "PageNotReady",
    "PagePilotError",
    "ResolutionError",
    "SessionNotReady",
    "SessionRestartError",
    "SessionStartError",
    "UnderspecifiedWithinAnchor",
]
