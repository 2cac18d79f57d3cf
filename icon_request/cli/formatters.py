"""
Functions for formatting and displaying data in the console using Rich.
"""

from pathlib import Path
from typing import Any

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from icon_request.models.config import RequestConfig
from icon_request.models.outcome import SendOutcome
from icon_request.utils.formatting import format_duration, format_size

SUGGESTIONS = {
    "EmptySelectionError": [
        "• The selection file does not list any apps.",
    ],
    "NoDeliveryTargetError": [
        "• Set 'email_recipient' or 'api_key' in the configuration file.",
        "• Or pass --recipient / --api-key on the command line.",
    ],
    "StagingUnavailableError": [
        "• Check that the 'cache_folder' path is writable.",
    ],
    "NoContentError": [
        "• None of the selected apps has a readable icon.",
        "• Check the 'icon' paths in the selection file.",
    ],
    "RemoteTransportError": [
        "• Check your internet connection.",
        "• Verify 'api_host' points to a request manager.",
        "• The server might be temporarily unavailable, try again later.",
    ],
    "RemoteApplicationError": [
        "• The request manager rejected the request.",
        "• Verify your API key, it may be invalid or out of quota.",
    ],
    "HandoffFailedError": [
        "• Check that the outbox folder is writable.",
    ],
    "ConfigurationError": [
        "• Run `icon-request init` to create a configuration file.",
        "• Run `icon-request validate` to check the current one.",
    ],
}


def format_error_with_suggestions(
    error: Exception, context: dict | None = None
) -> Panel:
    """Formats an error with actionable suggestions into a Rich Panel."""
    error_type = type(error).__name__
    error_msg = str(error)

    suggestions = SUGGESTIONS.get(
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


def print_config(config_path: Path, config_data: dict[str, Any]):
    """Displays the current configuration, hiding sensitive data."""
    console = Console()
    content = ""
    for key, value in config_data.items():
        if key == "api_key" and value:
            value = "[hidden]"
        elif value is None:
            value = ""
        content += f"{key} = {value}\n"

    console.print(
        Panel(
            content.strip(),
            title=f"Configuration ([dim]{config_path}[/dim])",
            border_style="cyan",
        )
    )


def print_validation_table(config: RequestConfig):
    """Displays a summary of the current settings."""
    console = Console()
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column(style="bold cyan")
    table.add_column()

    if config.is_remote:
        table.add_row("Delivery:", f"[green]Request manager[/green] ({config.api_host})")
    elif config.email_recipient:
        table.add_row("Delivery:", f"[green]Email[/green] ({config.email_recipient})")
    else:
        table.add_row("Delivery:", "[red]No recipient or API key[/red]")
    table.add_row("Cache Folder:", str(config.cache_folder))
    table.add_row("Subject:", config.email_subject)
    table.add_row("Device Info:", "yes" if config.include_device_info else "no")
    table.add_row("JSON Manifest:", "yes" if config.json_manifest else "no")

    console.print(
        Panel(table, title="[bold]Current Settings[/bold]", border_style="green")
    )


def print_outcome_panel(
    outcome: SendOutcome, app_count: int, channel: str, duration: float
):
    """Displays the result of a send operation."""
    console = Console()
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column(style="bold cyan")
    table.add_column()

    table.add_row("Apps Selected:", str(app_count))
    table.add_row("Channel:", channel)
    if outcome.archive is not None:
        size = outcome.archive.stat().st_size if outcome.archive.exists() else 0
        table.add_row("Archive:", f"{outcome.archive} ({format_size(size)})")
    table.add_row("Duration:", format_duration(duration))

    if outcome.success:
        title = "[bold green]✓ Request Sent[/bold green]"
        border = "green"
    else:
        table.add_row("Error:", f"[red]{outcome.kind.value}: {outcome.message}[/red]")
        title = "[bold red]✗ Request Failed[/bold red]"
        border = "red"

    console.print(Panel(table, title=title, border_style=border, expand=False))
