"""Pre-action stabilization.

Locators run against a live document that may still be updating. Before any
click the page gets a best-effort network-idle wait followed by a fixed
settle delay. Both waits are advisory: a failure is logged and reported in
the StabilizationReport, never raised.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable
from typing import TYPE_CHECKING

from pagepilot.core.protocols import AdvisoryOutcome, StabilizationReport
from pagepilot.utils.config import AppConfig
from pagepilot.utils.exceptions import PageNotReady

if TYPE_CHECKING:
    from playwright.async_api import Page

logger = logging.getLogger(__name__)


async def advisory(label: str, operation: Awaitable[object]) -> AdvisoryOutcome:
    """Await an operation whose failure must not propagate.

    Args:
        label: Name of the wait, used in logs and the outcome.
        operation: The awaitable to run.

    Returns:
        AdvisoryOutcome with ok=False and the error text on any failure.
    """
    try:
        await operation
    except Exception as e:
        logger.warning(f"Advisory wait '{label}' did not complete: {e}")
        return AdvisoryOutcome(label=label, ok=False, error=str(e))
    return AdvisoryOutcome(label=label, ok=True)


async def stabilize(page: Page | None, config: AppConfig) -> StabilizationReport:
    """Let the page settle before locating elements.

    Args:
        page: The session page.
        config: Supplies the network-idle timeout and settle delay.

    Returns:
        Outcomes of the network-idle wait and the settle delay.

    Raises:
        PageNotReady: If there is no page.
    """
    if page is None:
        raise PageNotReady("Playwright page is not initialized yet.")

    network_idle = await advisory(
        "network idle",
        page.wait_for_load_state("networkidle", timeout=config.network_idle_timeout),
    )
    settle = await advisory("settle delay", page.wait_for_timeout(config.settle_delay))
    return StabilizationReport(outcomes=[network_idle, settle])
