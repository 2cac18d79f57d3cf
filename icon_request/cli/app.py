"""
Defines the command-line interface for the application using Typer.
"""

import asyncio
import logging
import os
import time
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler

from icon_request import __version__
from icon_request.api.uploader import RemoteUploader, UploaderSettings
from icon_request.core.orchestrator import RequestOrchestrator
from icon_request.delivery.router import DeliveryRouter, select_channel
from icon_request.delivery.share import EmlDraftTarget, ShareHandoff
from icon_request.exceptions import IconRequestError
from icon_request.storage.config_manager import ConfigManager
from icon_request.storage.selection import load_selection
from icon_request.utils.structured_logger import create_structured_logger

from .formatters import (
    format_error_with_suggestions,
    print_config,
    print_outcome_panel,
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
log = logging.getLogger("icon_request")

app = typer.Typer(
    name="icon-request",
    help=(
        "Package app icon requests into an archive and send them by email or to a"
        " request manager. Use 'icon-request <command> --help' for more info."
    ),
    rich_markup_mode="rich",
    pretty_exceptions_show_locals=False,
    add_completion=False,
)


def get_config_dir() -> Path:
    if os.name == "nt":
        base_dir = Path(os.getenv("APPDATA", "~\\AppData\\Roaming"))
    else:
        base_dir = Path(os.getenv("XDG_CONFIG_HOME", "~/.config"))
    return base_dir.expanduser() / "icon-request"


CONFIG_DIR = get_config_dir()
CONFIG_FILE = CONFIG_DIR / "config.ini"


def config_option():
    return typer.Option(
        CONFIG_FILE, "--config", "-c", help="Path to the configuration file."
    )


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="Increase logging verbosity (-vv for debug).",
    ),
    version: bool = typer.Option(
        False, "--version", help="Show version and exit.", is_eager=True
    ),
    show_config: bool = typer.Option(
        False, "--show-config", help="Display the current configuration."
    ),
    config_file: Path = config_option(),
):
    """Icon Request CLI"""
    if version:
        console.print(
            f"[bold]icon-request[/bold] version [cyan]{__version__}[/cyan]"
        )
        raise typer.Exit()

    log_level = "INFO"
    if verbose >= 2:
        log_level = "DEBUG"
    logging.getLogger("icon_request").setLevel(log_level)

    if show_config:
        if not config_file.is_file():
            console.print(
                "[red]✗ Config file not found.[/] Run [cyan]icon-request init[/cyan]"
                " first."
            )
            raise typer.Exit(code=1)
        config_manager = ConfigManager(config_file)
        config_manager._parser.read(config_file, encoding="utf-8")
        print_config(config_file, config_manager._get_config_as_dict())
        raise typer.Exit()

    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())


@app.command()
def init(
    recipient: str | None = typer.Option(
        None, "--recipient", "-r", help="Email address that receives requests."
    ),
    api_key: str | None = typer.Option(
        None, "--api-key", help="Request manager API key (enables uploads)."
    ),
    api_host: str | None = typer.Option(
        None, "--api-host", help="Request manager URL that accepts uploads."
    ),
    cache_folder: Path | None = typer.Option(
        None, "--cache-folder", help="Folder used to stage icons and archives."
    ),
    force: bool = typer.Option(
        False, "--force", "-f", help="Overwrite an existing configuration."
    ),
    config_file: Path = config_option(),
):
    """Create the configuration file."""
    if not recipient and not api_key:
        console.print(
            "[red]✗ Provide an email recipient (--recipient) or an API key "
            "(--api-key).[/red]"
        )
        raise typer.Exit(code=1)

    if (
        config_file.exists()
        and not force
        and not typer.confirm("Configuration file already exists. Overwrite it?")
    ):
        raise typer.Abort()

    settings = {
        "email_recipient": recipient,
        "api_key": api_key,
        "api_host": api_host,
    }
    if cache_folder:
        settings["cache_folder"] = str(cache_folder)

    config_manager = ConfigManager(config_file)
    try:
        config_manager.save_new_config(settings)
        # Validate what was just written so mistakes surface immediately
        config_manager.load_config()
    except IconRequestError as e:
        console.print(format_error_with_suggestions(e))
        raise typer.Exit(code=1) from e
    console.print(f"\n[bold green]✓ Configuration saved to '{config_file}'[/bold green]")


@app.command(name="send")
def send_command(
    selection_file: Path = typer.Argument(  # noqa: B008
        ..., help="JSON file listing the selected apps.", exists=True, dir_okay=False
    ),
    recipient: str | None = typer.Option(
        None, "--recipient", "-r", help="Override the email recipient."
    ),
    api_key: str | None = typer.Option(
        None, "--api-key", help="Override the request manager API key."
    ),
    api_host: str | None = typer.Option(
        None, "--api-host", help="Override the request manager URL."
    ),
    subject: str | None = typer.Option(
        None, "--subject", help="Override the email subject."
    ),
    device_info: bool | None = typer.Option(
        None,
        "--device-info/--no-device-info",
        help="Include OS and device details in the email body.",
    ),
    outbox: Path | None = typer.Option(
        None,
        "--outbox",
        help="Folder that receives the email draft (default: <config dir>/outbox).",
    ),
    log_dir: Path | None = typer.Option(
        None, "--log-dir", help="Write structured JSONL logs to this folder."
    ),
    config_file: Path = config_option(),
):
    """Build the request archive and send it."""
    cli_options = {
        "email_recipient": recipient,
        "api_key": api_key,
        "api_host": api_host,
        "email_subject": subject,
        "include_device_info": device_info,
    }

    try:
        config = ConfigManager(config_file).load_config(cli_options)
        apps = load_selection(selection_file)
    except IconRequestError as e:
        console.print(format_error_with_suggestions(e))
        raise typer.Exit(code=1) from e

    target = EmlDraftTarget(outbox or config_file.parent / "outbox")
    router = DeliveryRouter(
        RemoteUploader(UploaderSettings()), ShareHandoff(target)
    )

    console.print(f"[bold cyan]Sending a request for {len(apps)} apps...[/bold cyan]")
    start_time = time.monotonic()
    base_logger, events = create_structured_logger(log_dir)
    with base_logger:
        base_logger.set_session_context(selection=str(selection_file))
        orchestrator = RequestOrchestrator(router, events=events)
        outcome = asyncio.run(orchestrator.send(apps, config))
    duration = time.monotonic() - start_time

    print_outcome_panel(outcome, len(apps), select_channel(config), duration)
    if outcome.success and target.last_draft is not None:
        console.print(f"[green]✓ Email draft ready:[/green] [dim]{target.last_draft}[/dim]")
    if not outcome.success:
        raise typer.Exit(code=1)


@app.command()
def validate(config_file: Path = config_option()):
    """Validate the current configuration."""
    try:
        config_manager = ConfigManager(config_file)
        config = config_manager.load_config()
        print_validation_table(config)
    except IconRequestError as e:
        console.print(f"[red]✗ Configuration is invalid: {e}[/red]")
        raise typer.Exit(code=1) from e
