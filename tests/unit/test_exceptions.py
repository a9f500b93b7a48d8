"""Tests for PagePilot exception hierarchy."""

import pytest

from pagepilot.utils.exceptions import (
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


class TestExceptionHierarchy:
    """Test the exception class hierarchy."""

    def test_base_is_exception(self):
        """PagePilotError should inherit from Exception."""
        assert issubclass(PagePilotError, Exception)

    @pytest.mark.parametrize(
        ("child", "parent"),
        [
            (ConfigurationError, PagePilotError),
            (InvalidSelector, BadRequest),
            (PageNotReady, SessionNotReady),
            (AnchorNotFound, ResolutionError),
            (UnderspecifiedWithinAnchor, ResolutionError),
            (NoStrategy, ResolutionError),
            (ClickTimeout, InteractionTimeout),
            (ClickFailed, EngineError),
            (NavigationFailed, EngineError),
            (KeyPressFailed, EngineError),
            (SessionStartError, EngineError),
            (SessionRestartError, EngineError),
        ],
    )
    def test_parent(self, child, parent):
        assert issubclass(child, parent)
        assert issubclass(child, PagePilotError)


class TestStatusCodes:
    """Each error class declares the HTTP status it maps to."""

    @pytest.mark.parametrize(
        ("exc_class", "status"),
        [
            (BadRequest, 400),
            (InvalidSelector, 400),
            (ResolutionError, 400),
            (AnchorNotFound, 400),
            (NoStrategy, 400),
            (ElementNotFound, 404),
            (InteractionTimeout, 408),
            (ClickTimeout, 408),
            (SessionNotReady, 500),
            (PageNotReady, 500),
            (ClickFailed, 500),
            (NavigationFailed, 500),
            (SessionRestartError, 500),
        ],
    )
    def test_status(self, exc_class, status):
        assert exc_class.status_code == status

    @pytest.mark.parametrize(
        "exc_class",
        [
            PagePilotError,
            ConfigurationError,
            BadRequest,
            InvalidSelector,
            SessionNotReady,
            PageNotReady,
            ResolutionError,
            AnchorNotFound,
            UnderspecifiedWithinAnchor,
            NoStrategy,
            ElementNotFound,
            InteractionTimeout,
            ClickTimeout,
            EngineError,
            ClickFailed,
            NavigationFailed,
            KeyPressFailed,
            SessionStartError,
            SessionRestartError,
        ],
    )
    def test_body_carries_no_extra_keys(self, exc_class):
        """Only error, details and context reach the response body."""
        body = exc_class("failed", details="engine text").to_dict()
        assert body == {"error": "failed", "details": "engine text"}


class TestToDict:
    """Tests for the response body rendering."""

    def test_message_only(self):
        assert ElementNotFound("Element not found").to_dict() == {
            "error": "Element not found"
        }

    def test_details_and_context(self):
        exc = NavigationFailed("Failed to navigate", details="net::ERR", url="x")
        assert exc.to_dict() == {
            "error": "Failed to navigate",
            "details": "net::ERR",
            "url": "x",
        }

    def test_none_context_dropped(self):
        exc = ClickFailed("Failed to click element", selector=None)
        assert exc.to_dict() == {"error": "Failed to click element"}

    def test_str_is_message(self):
        with pytest.raises(PagePilotError) as exc_info:
            raise AnchorNotFound("No element found for closestId 'x'")
        assert str(exc_info.value) == "No element found for closestId 'x'"
