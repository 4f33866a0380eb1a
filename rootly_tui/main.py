#!/usr/bin/env python3
"""
Main CLI entry point for rootly-tui
"""

import asyncio
import logging
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from rootly_tui import __version__
from rootly_tui.config import Config, get_config_path, load_config, save_config
from rootly_tui.config.constants import VALID_LAYOUTS
from rootly_tui.exceptions import ApiError, ConfigurationError
from rootly_tui.utils.datetime_utils import is_valid_timezone
from rootly_tui.utils.logging_utils import get_log_file, setup_tui_logging

app = typer.Typer(help="Terminal dashboard for Rootly incidents and alerts")
console = Console()
logger = logging.getLogger(__name__)

_state = {"debug": False}


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    debug: bool = typer.Option(False, "--debug", help="Verbose logging to the log file and log viewer"),
):
    """
    rootly-tui - browse Rootly incidents and alerts from the terminal

    [bold]Examples:[/bold]

    First run:
        [cyan]rootly-tui setup --api-key rootly_xxx[/cyan]

    Open the dashboard:
        [cyan]rootly-tui[/cyan]

    Show the saved configuration:
        [cyan]rootly-tui config[/cyan]
    """
    _state["debug"] = debug
    setup_tui_logging(debug=debug)
    if ctx.invoked_subcommand is None:
        browse()


@app.command()
def browse():
    """Open the incidents and alerts dashboard"""
    try:
        config = load_config()
    except ConfigurationError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1) from e

    if not config.is_valid():
        console.print("[yellow]No API key configured.[/yellow]")
        console.print("Run [cyan]rootly-tui setup --api-key <key>[/cyan] or set ROOTLY_API_KEY.")
        raise typer.Exit(1)

    from rootly_tui.ui.app import RootlyApp

    logger.info(f"Launching dashboard (log file: {get_log_file()})")
    try:
        RootlyApp(config).run()
    except ConfigurationError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1) from e


@app.command()
def setup(
    api_key: str = typer.Option(..., "--api-key", "-k", prompt=True, hide_input=True, help="Rootly API key"),
    endpoint: Optional[str] = typer.Option(None, "--endpoint", "-e", help="API endpoint (default api.rootly.com)"),
    timezone: Optional[str] = typer.Option(None, "--timezone", "-t", help="IANA timezone for timestamps"),
    layout: Optional[str] = typer.Option(None, "--layout", help="horizontal or vertical"),
    skip_validation: bool = typer.Option(False, "--skip-validation", help="Save without testing the key"),
):
    """Validate an API key and save it with display preferences"""
    try:
        config = load_config()
    except ConfigurationError as e:
        logger.warning(f"Ignoring unreadable config: {e}")
        config = Config()

    config.api_key = api_key.strip()
    if endpoint:
        config.endpoint = endpoint.strip()
    if timezone:
        if not is_valid_timezone(timezone):
            console.print(f"[red]Error: unknown timezone {timezone!r}[/red]")
            raise typer.Exit(1)
        config.timezone = timezone
    if layout:
        if layout not in VALID_LAYOUTS:
            console.print(f"[red]Error: layout must be one of {', '.join(VALID_LAYOUTS)}[/red]")
            raise typer.Exit(1)
        config.layout = layout

    if not skip_validation:
        console.print(f"Validating API key against {config.base_url}...")
        try:
            name = asyncio.run(_validate(config))
        except (ApiError, ConfigurationError) as e:
            console.print(f"[red]Error: {e.message}[/red]")
            raise typer.Exit(1) from e
        console.print(f"[green]✓ Authenticated as {name or 'unknown user'}[/green]")

    try:
        path = save_config(config)
    except ConfigurationError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1) from e
    console.print(f"[green]✓ Saved config to {path}[/green]")


async def _validate(config: Config) -> str:
    from rootly_tui.services.rootly_client import RootlyClient

    async with RootlyClient(config) as client:
        return await client.validate_api_key()


@app.command("config")
def show_config():
    """Show the current configuration"""
    try:
        config = load_config()
    except ConfigurationError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1) from e

    table = Table(title=f"rootly-tui config ({get_config_path()})")
    table.add_column("Setting", style="cyan", no_wrap=True)
    table.add_column("Value", style="green")

    table.add_row("API key", config.masked_api_key or "[red]not set[/red]")
    table.add_row("Endpoint", config.base_url)
    table.add_row("Timezone", config.timezone)
    table.add_row("Language", config.language)
    table.add_row("Layout", config.layout)
    table.add_row("Page size", str(config.page_size))
    table.add_row("Log file", str(get_log_file()))

    console.print(table)


@app.command()
def version():
    """Show rootly-tui version"""
    typer.echo(f"rootly-tui version {__version__}")


def run():
    """Entry point for the CLI"""
    app()


if __name__ == "__main__":
    run()
