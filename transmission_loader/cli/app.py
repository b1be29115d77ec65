"""
Defines the command-line interface for the application using Typer.
"""

import asyncio
import logging
import os
import time
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from transmission_loader import __version__
from transmission_loader.api.client import TransmissionRPCClient
from transmission_loader.api.session import SessionBootstrapper
from transmission_loader.core.submission import SubmissionPipeline
from transmission_loader.core.traversal import traverse
from transmission_loader.exceptions import TransmissionLoaderError
from transmission_loader.models.config import LoaderConfig
from transmission_loader.models.stats import SubmissionReport
from transmission_loader.storage.config_manager import ConfigManager
from transmission_loader.utils.structured_logger import (
    StructuredLogger,
    SubmissionLogger,
)

from .formatters import (
    format_error_with_suggestions,
    print_job_plan,
    print_summary_panel,
    print_validation_table,
)

console = Console()

logging.basicConfig(
    level="INFO",
    format="%(message)s",
    datefmt="[%X]",
    handlers=[
        RichHandler(
            console=console,
            rich_tracebacks=True,
            show_path=False,
            show_level=False,
            markup=True,
        )
    ],
)
log = logging.getLogger("transmission_loader")

app = typer.Typer(
    name="transmission-loader",
    help=(
        "Bulk-add torrents to a Transmission daemon, sorted into download"
        " directories by the groups declared in a YAML config."
    ),
    rich_markup_mode="rich",
    pretty_exceptions_show_locals=False,
    add_completion=False,
)

DEFAULT_CONFIG_NAME = "config.yml"
PLACEHOLDER_DOWNLOAD_DIR = "<daemon default>"


def get_config_dir() -> Path:
    if os.name == "nt":
        base_dir = Path(os.getenv("APPDATA", "~\\AppData\\Roaming"))
    else:
        base_dir = Path(os.getenv("XDG_CONFIG_HOME", "~/.config"))
    return base_dir.expanduser() / "transmission-loader"


def resolve_config_path(explicit: Optional[Path]) -> Path:
    """
    Picks the config file: an explicit path, then ./config.yml, then the
    per-user config directory.
    """
    if explicit is not None:
        return explicit
    local = Path(DEFAULT_CONFIG_NAME)
    if local.is_file():
        return local
    return get_config_dir() / DEFAULT_CONFIG_NAME


def _load_config(config_file: Optional[Path], **overrides) -> LoaderConfig:
    config_path = resolve_config_path(config_file)
    log.debug(f"Using configuration file: {config_path}")
    return ConfigManager(config_path).load_config(overrides)


def _fail(error: Exception) -> typer.Exit:
    console.print(format_error_with_suggestions(error))
    return typer.Exit(code=1)


CONFIG_OPTION = typer.Option(
    None,
    "--config",
    "-c",
    envvar="TRANSMISSION_LOADER_CONFIG",
    help="Path to the YAML config file (default: ./config.yml).",
)


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="Increase logging verbosity (-v for debug, -vv to include HTTP).",
    ),
    version: bool = typer.Option(
        False, "--version", help="Show version and exit.", is_eager=True
    ),
):
    """Transmission bulk loader"""
    if version:
        console.print(
            f"[bold]transmission-loader[/bold] version [cyan]{__version__}[/cyan]"
        )
        raise typer.Exit()

    log_level = "INFO"
    if verbose >= 1:
        log_level = "DEBUG"
    logging.getLogger("transmission_loader").setLevel(log_level)
    if verbose >= 2:
        logging.getLogger("aiohttp.client").setLevel("DEBUG")

    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())


@app.command()
def add(
    config_file: Optional[Path] = CONFIG_OPTION,
    url: Optional[str] = typer.Option(
        None, "--url", "-u", help="Override the RPC endpoint URL from the config."
    ),
    concurrency: Optional[int] = typer.Option(
        None,
        "--concurrency",
        "-j",
        help="Maximum simultaneous torrent-add requests (default 4).",
    ),
    log_dir: Optional[Path] = typer.Option(
        None,
        "--log-dir",
        help="Also write structured JSON-lines events into this directory.",
    ),
):
    """Add every torrent declared in the config to the daemon."""
    try:
        config = _load_config(config_file, url=url, concurrency=concurrency)
    except TransmissionLoaderError as e:
        raise _fail(e) from e

    async def _add_async() -> SubmissionReport:
        with StructuredLogger("transmission_loader.events", log_dir=log_dir) as logger:
            events = SubmissionLogger(logger)
            async with TransmissionRPCClient(
                config.url, config.username, config.password
            ) as client:
                context = await SessionBootstrapper(client, events).bootstrap()
                logger.set_session_context(daemon_url=config.url)

                jobs = traverse(config.root, context.download_dir)
                console.print(
                    f"[bold cyan]Submitting {len(jobs)} torrents to "
                    f"{escape(config.url)}...[/bold cyan]"
                )

                start_time = time.monotonic()
                pipeline = SubmissionPipeline(
                    client, context, config.concurrency, events
                )
                outcomes = await pipeline.submit_all(jobs)
                return SubmissionReport.from_outcomes(
                    outcomes, time.monotonic() - start_time
                )

    try:
        report = asyncio.run(_add_async())
    except TransmissionLoaderError as e:
        raise _fail(e) from e

    print_summary_panel(report)


@app.command()
def plan(
    config_file: Optional[Path] = CONFIG_OPTION,
    download_dir: Optional[str] = typer.Option(
        None,
        "--download-dir",
        "-d",
        help="Root directory to plan against instead of the daemon's default.",
    ),
    resolve: bool = typer.Option(
        False,
        "--resolve",
        help="Ask the daemon for its default download directory.",
    ),
):
    """Show the torrents a run would add, without submitting anything."""
    try:
        config = _load_config(config_file)
    except TransmissionLoaderError as e:
        raise _fail(e) from e

    async def _resolve_download_dir() -> str:
        async with TransmissionRPCClient(
            config.url, config.username, config.password
        ) as client:
            context = await SessionBootstrapper(client).bootstrap()
            return context.download_dir

    root_dir = download_dir
    if root_dir is None and resolve:
        try:
            root_dir = asyncio.run(_resolve_download_dir())
        except TransmissionLoaderError as e:
            raise _fail(e) from e

    print_job_plan(traverse(config.root, root_dir or PLACEHOLDER_DOWNLOAD_DIR))


@app.command()
def validate(config_file: Optional[Path] = CONFIG_OPTION):
    """Validate the current configuration."""
    try:
        config = _load_config(config_file)
        print_validation_table(config)
    except TransmissionLoaderError as e:
        console.print(f"[red]✗ Configuration is invalid: {escape(str(e))}[/red]")
        raise typer.Exit(code=1) from e
