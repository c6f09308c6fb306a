"""
Entry point for the ``silk-cache`` command.

Runs the Typer app and turns library errors into a panel with suggestions
instead of a traceback.
"""

import logging
import os
import sys

import typer
from rich.console import Console

from silk_cache.cli.app import app
from silk_cache.cli.formatters import format_error_with_suggestions
from silk_cache.exceptions import SilkCacheError

log = logging.getLogger("silk_cache")


def _use_utf8_streams() -> None:
    # Status lines print check marks; the legacy Windows console code page
    # cannot encode them.
    for stream in (sys.stdout, sys.stderr):
        reconfigure = getattr(stream, "reconfigure", None)
        if reconfigure is not None:
            reconfigure(encoding="utf-8")


def run() -> int:
    """Runs the CLI and returns the process exit code."""
    console = Console(stderr=True)
    try:
        app()
    except typer.Exit as e:
        return e.exit_code
    except typer.Abort:
        return 1
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted.[/yellow]")
        return 130
    except SilkCacheError as e:
        console.print(format_error_with_suggestions(e))
        return 1
    except Exception as e:
        log.debug("Full traceback:", exc_info=True)
        console.print(format_error_with_suggestions(e, {"type": "Unexpected"}))
        return 1
    return 0


def main() -> None:
    if os.name == "nt":
        _use_utf8_streams()
    sys.exit(run())


if __name__ == "__main__":
    main()
