"""Main CLI application entry point."""

import logging

import typer
import uvicorn
from rich.console import Console
from rich.table import Table

from pagepilot import __version__
from pagepilot.api.app import create_app
from pagepilot.utils.config import LOG_LEVEL_CHOICES, AppConfig, ConfigLoader
from pagepilot.utils.exceptions import ConfigurationError

console = Console()

app = typer.Typer(
    name="pagepilot",
    help="HTTP API for driving a single Playwright browser session.",
    no_args_is_help=True,
)

ENDPOINTS = [
    ("POST", "/set-url", '{"navigate_url": "..."}'),
    ("POST", "/click/css", '{"cssSelector": "..."}'),
    ("POST", "/click/xpath", '{"xpath": "..."}'),
    ("POST", "/click/text", '{"textContent": "...", "tagName": "..."}'),
    ("POST", "/click/custom", '{"customSelector": "tag;key=value", "tagName": "..."}'),
    ("POST", "/click", '{"event": {"cssSelector": "...", "xpath": "..."}}'),
    ("POST", "/enter-keyboard", '{"enter_value": "Enter"}'),
    ("POST", "/restart-browser", "-"),
    ("GET", "/health", "-"),
]


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"PagePilot v{__version__}")
        raise typer.Exit()


def show_endpoints(config: AppConfig) -> None:
    """Print the listening address and endpoint table."""
    table = Table(title=f"PagePilot API on http://{config.host}:{config.port}")
    table.add_column("Method", style="cyan")
    table.add_column("Path", style="green")
    table.add_column("Body", style="dim")
    for method, path, body in ENDPOINTS:
        table.add_row(method, path, body)
    console.print(table)


@app.callback()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """PagePilot - HTTP control surface for a Playwright browser."""
    pass


@app.command()
def serve(
    host: str | None = typer.Option(
        None, "--host", help="Interface to bind (default from PAGEPILOT_HOST)"
    ),
    port: int | None = typer.Option(
        None, "--port", "-p", help="Port to listen on (default from PAGEPILOT_PORT)"
    ),
    headless: bool | None = typer.Option(
        None,
        "--headless/--headed",
        help="Run the browser without a visible window",
    ),
    cdp_url: str | None = typer.Option(
        None,
        "--cdp-url",
        help="Connect to existing Chrome via CDP URL. Start Chrome with: "
        "chrome --remote-debugging-port=9222",
    ),
    log_level: str | None = typer.Option(
        None, "--log-level", help="Logging level (DEBUG, INFO, WARNING, ERROR)"
    ),
) -> None:
    """Launch the browser and serve the HTTP API."""
    try:
        config = ConfigLoader.load()
    except ConfigurationError as e:
        console.print(f"[red]Configuration error: {e}[/red]")
        raise typer.Exit(code=4)

    if host:
        config.host = host
    if port is not None:
        config.port = port
    if headless is not None:
        config.headless = headless
    if cdp_url:
        config.cdp_url = cdp_url
    if log_level:
        if log_level.upper() not in LOG_LEVEL_CHOICES:
            console.print(
                f"[red]Configuration error: invalid --log-level '{log_level}' "
                f"(expected one of {', '.join(LOG_LEVEL_CHOICES)})[/red]"
            )
            raise typer.Exit(code=4)
        config.log_level = log_level.upper()

    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s %(levelname)s %(name)s  %(message)s",
    )
    show_endpoints(config)

    # uvicorn exits non-zero if the browser cannot start during lifespan startup
    uvicorn.run(
        create_app(config),
        host=config.host,
        port=config.port,
        log_level=config.log_level.lower(),
    )


if __name__ == "__main__":
    app()
