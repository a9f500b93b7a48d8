"""Exception hierarchy for PagePilot.

All application-specific exceptions inherit from PagePilotError.
Each class carries a status_code class attribute, which the HTTP layer uses
as the response status when rendering to_dict().
"""

from typing import Any


class PagePilotError(Exception):
    """Base exception for all PagePilot errors."""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        details: str | None = None,
        **context: Any,
    ) -> None:
        """Initialize the error.

        Args:
            message: Short human-readable summary, returned as ``error``.
            details: Underlying engine error text, returned as ``details``.
            **context: Extra fields merged into the error response body.
        """
        super().__init__(message)
        self.message = message
        self.details = details
        self.context = context

    def to_dict(self) -> dict[str, Any]:
        """Render the error as a response body."""
        body: dict[str, Any] = {"error": self.message}
        if self.details:
            body["details"] = self.details
        body.update({k: v for k, v in self.context.items() if v is not None})
        return body


class ConfigurationError(PagePilotError):
    """Invalid or missing configuration. Raised at startup."""


class BadRequest(PagePilotError):
    """Request body is missing a field or has the wrong type."""

    status_code = 400


class InvalidSelector(BadRequest):
    """Selector syntax rejected by the browser engine."""


class SessionNotReady(PagePilotError):
    """No active browser page to operate on."""


class PageNotReady(SessionNotReady):
    """Stabilization was requested without a page."""


class ResolutionError(PagePilotError):
    """Custom selector produced no usable location strategy."""

    status_code = 400


class AnchorNotFound(ResolutionError):  # noqa: N818
    """The closestId anchor matched nothing in the document."""


class UnderspecifiedWithinAnchor(ResolutionError):  # noqa: N818
    """An anchor was given but nothing to look for inside it."""


class NoStrategy(ResolutionError):  # noqa: N818
    """No recognized attribute could form a strategy."""


class ElementNotFound(PagePilotError):  # noqa: N818
    """Strategy resolved but zero live elements matched."""

    status_code = 404


class InteractionTimeout(PagePilotError):
    """A bounded interaction wait was exceeded."""

    status_code = 408


class ClickTimeout(InteractionTimeout):
    """The click itself timed out."""


class EngineError(PagePilotError):
    """Browser engine failure that is not a timeout."""


class ClickFailed(EngineError):  # noqa: N818
    """Click failed for a reason other than a timeout."""


class NavigationFailed(EngineError):  # noqa: N818
    """Page navigation failed."""


class KeyPressFailed(EngineError):  # noqa: N818
    """Keyboard key press failed."""


class SessionStartError(EngineError):
    """Browser session could not be created.

    Fatal at process start; there is nothing to serve without a session.
    """


class SessionRestartError(EngineError):
    """Browser session teardown or relaunch failed during a restart."""
