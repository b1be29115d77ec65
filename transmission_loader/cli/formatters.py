"""
Functions for formatting and displaying data in the console using Rich.
"""

from collections.abc import Sequence

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from transmission_loader.core.classifier import detect_source_kind
from transmission_loader.core.traversal import count_sources
from transmission_loader.models.config import Entry, LoaderConfig
from transmission_loader.models.job import Job, SourceKind
from transmission_loader.models.stats import SubmissionReport
from transmission_loader.utils.formatting import format_duration, truncate_middle

KIND_STYLES = {
    SourceKind.URL: "[cyan]url[/cyan]",
    SourceKind.LOCAL_FILE: "[green]metainfo[/green]",
    SourceKind.OPAQUE: "[magenta]pass-through[/magenta]",
}


def format_error_with_suggestions(
    error: Exception, context: dict | None = None
) -> Panel:
    """Formats an error with actionable suggestions into a Rich Panel."""
    error_type = type(error).__name__
    error_msg = str(error)

    suggestions_map = {
        "ConfigurationError": [
            "• Check the YAML syntax of your configuration file.",
            "• 'root' is required; groups nest under 'children'.",
            "• Supply both 'username' and 'password', or neither.",
            "• Run `transmission-loader validate` to inspect the settings.",
        ],
        "ConnectivityError": [
            "• Make sure the Transmission daemon is running.",
            "• Verify the RPC 'url' (default http://localhost:9091/transmission/rpc).",
            "• Check 'rpc-whitelist' and credentials in the daemon's settings.json.",
        ],
        "ClientConnectorError": [
            "• A network connection issue occurred.",
            "• The daemon might not be listening on the configured host and port.",
        ],
        "TimeoutError": [
            "• The daemon did not answer in time.",
            "• Try lowering `--concurrency`.",
        ],
    }

    suggestions = suggestions_map.get(
        error_type, ["• Run the command with -vv for detailed logs."]
    )

    error_text = Text()
    error_text.append(f"{error_type}: ", style="bold red")
    error_text.append(error_msg)

    suggestion_text = Text("\n".join(suggestions))

    content = Table.grid(padding=(1, 0))
    content.add_row(error_text)
    content.add_row()
    content.add_row(Text("Suggestions", style="bold yellow"))
    content.add_row(suggestion_text)

    if context:
        content.add_row()
        content.add_row(Text(f"Context: {context}", style="dim"))

    return Panel(
        content,
        title="[bold red]An Error Occurred[/bold red]",
        border_style="red",
        expand=False,
    )


def _count_groups(entry: Entry) -> int:
    children = entry.children or {}
    return len(children) + sum(_count_groups(child) for child in children.values())


def print_validation_table(config: LoaderConfig):
    """Displays a summary of the current settings."""
    console = Console()
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column(style="bold cyan")
    table.add_column()

    auth_method = (
        f"Basic ({escape(config.username)})" if config.has_credentials else "None"
    )

    table.add_row("RPC URL:", escape(config.url))
    table.add_row("Auth Method:", f"[green]{auth_method}[/green]")
    table.add_row("Concurrency:", str(config.concurrency))
    table.add_row("Groups:", str(_count_groups(config.root)))
    table.add_row("Torrents:", str(count_sources(config.root)))
    if config.config_path:
        table.add_row("Config File:", f"[dim]{escape(config.config_path)}[/dim]")

    console.print(
        Panel(
            table,
            title="[bold green]✓ Validated Settings[/bold green]",
            border_style="green",
        )
    )


def print_job_plan(jobs: Sequence[Job]):
    """Displays the jobs a run would submit, with the shape each would be sent as."""
    console = Console()
    if not jobs:
        console.print("[yellow]No torrents declared in the configuration.[/yellow]")
        return

    table = Table(title=f"Planned Torrents ({len(jobs)})", box=box.ROUNDED)
    table.add_column("#", style="dim", justify="right")
    table.add_column("Source", style="white")
    table.add_column("Download Directory", style="cyan")
    table.add_column("Sent As")

    for i, job in enumerate(jobs, 1):
        kind, _ = detect_source_kind(job.source)
        table.add_row(
            str(i),
            escape(truncate_middle(job.source)),
            escape(job.download_dir),
            KIND_STYLES[kind],
        )
    console.print(table)


def print_summary_panel(report: SubmissionReport):
    """Displays a final summary of the submission session."""
    console = Console()

    stats_table = Table(show_header=False, box=None, padding=(0, 2))
    stats_table.add_column(style="bold cyan", justify="right", width=20)
    stats_table.add_column(style="white", justify="left")

    stats_table.add_row("Torrents:", f"[white]{report.total}[/white]")
    stats_table.add_row("✓ Added:", f"[bold green]{report.added}[/bold green]")
    if report.failed > 0:
        stats_table.add_row("✗ Failed:", f"[bold red]{report.failed}[/bold red]")

    stats_table.add_row("", "")  # Spacer
    stats_table.add_row("By Reference:", f"[cyan]{report.referenced}[/cyan]")
    stats_table.add_row("As Metainfo:", f"[green]{report.embedded}[/green]")
    stats_table.add_row(
        "Time Elapsed:", f"[blue]{format_duration(report.duration_seconds)}[/blue]"
    )

    if report.failed:
        title = "⚠ [bold]Finished With Failures[/bold]"
        border_color = "yellow"
    else:
        title = "✓ [bold]All Torrents Added[/bold]"
        border_color = "green"

    console.print()
    console.print(
        Panel(
            stats_table,
            title=title,
            border_style=border_color,
            box=box.DOUBLE,
            expand=False,
            padding=(1, 2),
        )
    )

    if report.failures:
        failures = Table(title="Failed Torrents", box=box.ROUNDED)
        failures.add_column("Source", style="white")
        failures.add_column("Download Directory", style="cyan")
        failures.add_column("Error", style="red")
        for outcome in report.failures:
            failures.add_row(
                escape(truncate_middle(outcome.job.source)),
                escape(outcome.job.download_dir),
                escape(outcome.detail),
            )
        console.print(failures)

    console.print()
