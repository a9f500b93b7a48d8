"""Entry point for running PagePilot as a module."""

from pagepilot.cli.main import app

if __name__ == "__main__":
    app()
