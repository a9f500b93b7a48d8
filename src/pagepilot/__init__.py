"""PagePilot - HTTP control surface for a single Playwright browser session."""

__version__ = "0.1.0"
