"""HTTP API for PagePilot."""

from pagepilot.api.app import create_app

__all__ = ["create_app"]
