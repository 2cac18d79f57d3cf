"""
Entry point for `icon-request` and `python -m icon_request`.

Errors that escape a command are shown as a panel. The exit code tells
scripts whether the request went out: 0 sent, 1 failed, 2 bad configuration,
130 cancelled.
"""

import logging
import sys

import typer
from rich.console import Console

from icon_request.cli.app import app
from icon_request.cli.formatters import format_error_with_suggestions
from icon_request.exceptions import ConfigurationError, IconRequestError

EXIT_FAILED = 1
EXIT_BAD_CONFIG = 2
EXIT_CANCELLED = 130


def main() -> None:
    log = logging.getLogger("icon_request")
    console = Console(stderr=True)

    try:
        app()
    except (typer.Exit, typer.Abort):
        pass
    except KeyboardInterrupt:
        console.print(
            "\n[yellow]⚠️  Request cancelled. Staged icons were removed; a finished"
            " archive stays in the cache folder.[/yellow]"
        )
        sys.exit(EXIT_CANCELLED)
    except ConfigurationError as e:
        console.print(f"\n{format_error_with_suggestions(e)}")
        console.print("[dim]Run 'icon-request init' to recreate the configuration.[/dim]")
        sys.exit(EXIT_BAD_CONFIG)
    except IconRequestError as e:
        console.print(f"\n{format_error_with_suggestions(e)}")
        sys.exit(EXIT_FAILED)
    except Exception as e:
        console.print(f"\n{format_error_with_suggestions(e, {'type': 'Unexpected'})}")
        log.debug("Full traceback:", exc_info=True)
        sys.exit(EXIT_FAILED)


if __name__ == "__main__":
    main()
