"""Command-line interface for PagePilot."""
