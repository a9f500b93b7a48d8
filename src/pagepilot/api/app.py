"""FastAPI application exposing the browser session over HTTP.

Endpoints navigate the page, click elements located by CSS, XPath, text or a
custom selector, press keys and restart the browser. Every PagePilotError is
rendered as ``{error, details?, ...context}`` with the status code the error
class declares.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, StrictStr

from pagepilot import __version__
from pagepilot.core.actions import BrowserActions
from pagepilot.core.browser import BrowserSession
from pagepilot.utils.config import AppConfig
from pagepilot.utils.exceptions import BadRequest, PagePilotError, SessionStartError

logger = logging.getLogger(__name__)


class SetUrlRequest(BaseModel):
    """Request to navigate the page."""

    navigate_url: StrictStr | None = None


class CssClickRequest(BaseModel):
    """Request to click an element by CSS selector."""

    cssSelector: StrictStr | None = None  # noqa: N815


class XPathClickRequest(BaseModel):
    """Request to click an element by XPath."""

    xpath: StrictStr | None = None


class TextClickRequest(BaseModel):
    """Request to click an element by its text content."""

    textContent: StrictStr | None = None  # noqa: N815
    tagName: StrictStr | None = None  # noqa: N815


class CustomClickRequest(BaseModel):
    """Request to click an element described by a custom selector."""

    customSelector: StrictStr | None = None  # noqa: N815
    tagName: StrictStr | None = None  # noqa: N815


class ClickEvent(BaseModel):
    """Recorded click event; CSS is preferred over XPath."""

    cssSelector: Any = None  # noqa: N815
    xpath: Any = None
    textContent: Any = None  # noqa: N815


class LegacyClickRequest(BaseModel):
    """Request body of the legacy ``/click`` endpoint."""

    event: ClickEvent | None = None


class KeyboardRequest(BaseModel):
    """Request to press a keyboard key."""

    enter_value: StrictStr | None = None


class MessageResponse(BaseModel):
    message: str


class NavigationResponse(BaseModel):
    message: str
    page_title: str


class ClickResponse(BaseModel):
    message: str
    strategy: str | None = None


class HealthResponse(BaseModel):
    status: str
    session_ready: bool
    version: str


def _require(value: str | None, field: str) -> str:
    """Return a non-empty string field or raise BadRequest."""
    if not value:
        raise BadRequest(f"Missing or invalid {field} in request body")
    return value


def _validation_error_response(exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    # json_invalid errors carry a byte offset, not a field name, in loc[-1]
    fields = [
        e["loc"][-1]
        for e in errors
        if len(e.get("loc", ())) > 1
        and isinstance(e["loc"][-1], str)
        and e.get("type") != "json_invalid"
    ]
    if fields:
        message = f"Missing or invalid {fields[0]} in request body"
    else:
        message = "Missing or invalid request body"
    details = "; ".join(str(e.get("msg", "")) for e in errors)
    return JSONResponse(status_code=400, content={"error": message, "details": details})


def create_app(
    config: AppConfig | None = None,
    session: BrowserSession | None = None,
) -> FastAPI:
    """Create the FastAPI application.

    Args:
        config: Application configuration; defaults are used when omitted.
        session: Browser session to drive; built from ``config`` when omitted.

    Returns:
        The application. The session is started by the app's lifespan.
    """
    config = config or AppConfig()
    session = session or BrowserSession.from_config(config)
    actions = BrowserActions(session, config)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Start the browser before serving and close it on shutdown."""
        if not session.is_running:
            try:
                await session.start()
            except SessionStartError as e:
                logger.critical(f"FATAL: Failed to initialize Playwright: {e.details}")
                raise
        logger.info(f"PagePilot API ready on http://{config.host}:{config.port}")

        yield

        logger.info("Shutting down server and browser...")
        await session.shutdown()

    app = FastAPI(
        title="PagePilot",
        description="HTTP control surface for a single Playwright browser session",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.session = session
    app.state.actions = actions
    app.state.config = config

    @app.exception_handler(PagePilotError)
    async def handle_pagepilot_error(
        request: Request, exc: PagePilotError
    ) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error(f"{request.url.path} failed: {exc.message} {exc.details}")
        else:
            logger.info(f"{request.url.path} rejected: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return _validation_error_response(exc)

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        """Health check endpoint."""
        ready = session.current() is not None
        return HealthResponse(
            status="healthy" if ready else "degraded",
            session_ready=ready,
            version=__version__,
        )

    @app.post("/set-url", response_model=NavigationResponse)
    async def set_url(request: SetUrlRequest) -> NavigationResponse:
        """Navigate the page to a URL."""
        url = _require(request.navigate_url, "navigate_url")
        result = await actions.navigate(url)
        return NavigationResponse(
            message=f"Successfully navigated to {url}",
            page_title=result.title,
        )

    @app.post("/click/css", response_model=ClickResponse)
    async def click_css(request: CssClickRequest) -> ClickResponse:
        """Click the first element matching a CSS selector."""
        actions.require_page()
        selector = _require(request.cssSelector, "cssSelector")
        await actions.click_css(selector)
        return ClickResponse(message="Successfully clicked element using CSS")

    @app.post("/click/xpath", response_model=ClickResponse)
    async def click_xpath(request: XPathClickRequest) -> ClickResponse:
        """Click the first element matching an XPath expression."""
        actions.require_page()
        xpath = _require(request.xpath, "xpath")
        await actions.click_xpath(xpath)
        return ClickResponse(message="Successfully clicked element using XPath")

    @app.post("/click/text", response_model=ClickResponse)
    async def click_text(request: TextClickRequest) -> ClickResponse:
        """Click the first element containing some text."""
        actions.require_page()
        text = _require(request.textContent, "textContent")
        strategy = await actions.click_text(text, request.tagName)
        return ClickResponse(
            message=f"Successfully clicked element with text '{text}'",
            strategy=strategy.describe(),
        )

    @app.post("/click/custom", response_model=ClickResponse)
    async def click_custom(request: CustomClickRequest) -> ClickResponse:
        """Click the element described by a custom selector."""
        actions.require_page()
        selector = _require(request.customSelector, "customSelector")
        strategy = await actions.click_custom(selector, request.tagName)
        return ClickResponse(
            message="Successfully clicked element using custom selector",
            strategy=strategy.describe(),
        )

    @app.post("/click", response_model=ClickResponse)
    async def click_event(request: LegacyClickRequest) -> ClickResponse:
        """Click using a recorded event, preferring CSS over XPath."""
        event = request.event
        if event is None:
            raise BadRequest("Missing event data in request body")

        if event.textContent:
            logger.info(f"(Element text content hint: {event.textContent})")

        if event.cssSelector and isinstance(event.cssSelector, str):
            await actions.click_css(event.cssSelector)
            return ClickResponse(message="Successfully clicked element using CSS")
        if event.xpath and isinstance(event.xpath, str):
            await actions.click_xpath(event.xpath)
            return ClickResponse(message="Successfully clicked element using XPath")
        raise BadRequest("No valid cssSelector or xpath provided in the event data")

    @app.post("/enter-keyboard", response_model=MessageResponse)
    async def enter_keyboard(request: KeyboardRequest) -> MessageResponse:
        """Press a keyboard key."""
        key = _require(request.enter_value, "enter_value")
        await actions.press_key(key)
        return MessageResponse(message=f'Successfully entered value: "{key}"')

    @app.post("/restart-browser", response_model=MessageResponse)
    async def restart_browser() -> MessageResponse:
        """Tear down the browser session and launch a new one."""
        await session.restart()
        return MessageResponse(message="Browser restarted successfully")

    return app
