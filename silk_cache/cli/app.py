"""
Defines the command-line interface for inspecting and maintaining cache files
using Typer.
"""

import importlib
import logging
import os
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler

from silk_cache import __version__
from silk_cache.core.handler import ImmediateHandler
from silk_cache.exceptions import CacheLoadError
from silk_cache.models.config import CACHE_FILE_EXTENSION, CacheConfig
from silk_cache.storage.cache import CacheManager
from silk_cache.storage.config_manager import ConfigManager

from .formatters import (
    print_cache_info,
    print_caches_table,
    print_config,
    print_entries_table,
)

console = Console()

logging.basicConfig(
    level="WARNING",
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
log = logging.getLogger("silk_cache")

app = typer.Typer(
    name="silk-cache",
    help=(
        "Inspect and maintain Silk cache files. Use 'silk-cache <command> --help'"
        " for more info."
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
    return base_dir.expanduser() / "silk-cache"


CONFIG_FILE = get_config_dir() / "silk.ini"


def _open_cache(ctx: typer.Context, name: str | None) -> CacheManager:
    """Opens a cache with callbacks delivered inline, as the CLI has no event loop."""
    config: CacheConfig = ctx.obj["config"]
    if name is not None:
        # The store validates the name when it is built.
        config = config.model_copy(update={"cache_name": name})
    return CacheManager.from_config(config, handler=ImmediateHandler())


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
    config_file: Path = typer.Option(  # noqa: B008
        CONFIG_FILE, "--config", help="Path to the configuration file."
    ),
    cache_dir: Path | None = typer.Option(  # noqa: B008
        None, "--dir", "-d", help="Cache directory (overrides the configuration)."
    ),
    modules: list[str] | None = typer.Option(  # noqa: B008
        None,
        "--module",
        "-m",
        help="Import a module that defines cached item classes (repeatable).",
    ),
    show_config: bool = typer.Option(
        False, "--show-config", help="Display the effective configuration."
    ),
):
    """Silk cache CLI"""
    if version:
        console.print(f"[bold]silk-cache[/bold] version [cyan]{__version__}[/cyan]")
        raise typer.Exit()

    log_level = "WARNING"
    if verbose == 1:
        log_level = "INFO"
    elif verbose >= 2:
        log_level = "DEBUG"
    logging.getLogger("silk_cache").setLevel(log_level)

    for module_name in modules or []:
        try:
            importlib.import_module(module_name)
        except ImportError as e:
            console.print(f"[red]✗ Could not import '{module_name}': {e}[/red]")
            raise typer.Exit(code=1) from e
        log.debug(f"Imported item module '{module_name}'.")

    config = ConfigManager(config_file).load_config({"cache_dir": cache_dir})
    ctx.obj = {"config": config, "config_file": config_file}

    if show_config:
        print_config(config_file, config)
        raise typer.Exit()

    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())


@app.command()
def init(
    ctx: typer.Context,
    force: bool = typer.Option(
        False, "--force", "-f", help="Overwrite an existing configuration file."
    ),
):
    """Write a configuration file with default settings."""
    config_file: Path = ctx.obj["config_file"]
    if (
        config_file.exists()
        and not force
        and not typer.confirm("Configuration file already exists. Overwrite it?")
    ):
        raise typer.Abort()

    config: CacheConfig = ctx.obj["config"]
    ConfigManager(config_file).save_new_config(config.model_dump())
    console.print(f"[bold green]✓ Configuration saved to '{config_file}'[/bold green]")


@app.command(name="caches")
def caches_command(ctx: typer.Context):
    """List the caches in the cache directory."""
    config: CacheConfig = ctx.obj["config"]
    cache_files = []
    if config.cache_dir.is_dir():
        cache_files = sorted(config.cache_dir.glob(f"*{CACHE_FILE_EXTENSION}"))
    print_caches_table(config.cache_dir, cache_files)


@app.command()
def info(
    ctx: typer.Context,
    name: str | None = typer.Argument(None, help="Cache name (default from config)."),
):
    """Show where a cache lives and how many entries it holds."""
    cache = _open_cache(ctx, name)
    entries = cache.read()
    cache_file = cache.cache_file
    print_cache_info(
        {
            "name": cache.cache_name,
            "file": cache_file,
            "exists": cache_file.is_file(),
            "size": cache_file.stat().st_size if cache_file.is_file() else 0,
            "entries": len(entries),
            "ignored": sum(1 for entry in entries if entry.should_ignore()),
        }
    )


@app.command()
def show(
    ctx: typer.Context,
    name: str | None = typer.Argument(None, help="Cache name (default from config)."),
    limit: int | None = typer.Option(
        None, "--limit", "-n", min=1, help="Show at most this many entries."
    ),
):
    """List the entries of a cache."""
    cache = _open_cache(ctx, name)
    print_entries_table(cache.cache_name, list(cache), limit)


@app.command(name="remove")
def remove_command(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Cache name."),
    index: int = typer.Argument(..., help="Index of the entry to remove."),
):
    """Remove one entry by index and commit the cache."""
    cache = _open_cache(ctx, name)
    size = cache.size()
    if index < 0 or index >= size:
        console.print(
            f"[red]✗ Index {index} is out of range; cache '{cache.cache_name}' has "
            f"{size} entries.[/red]"
        )
        raise typer.Exit(code=1)
    cache.remove_at(index).commit()
    console.print(
        f"[green]✓ Removed entry {index} from '{cache.cache_name}' "
        f"({size - 1} left).[/green]"
    )


@app.command()
def clear(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Cache name."),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation."),
):
    """Remove every entry from a cache, deleting its file."""
    try:
        cache = _open_cache(ctx, name)
    except CacheLoadError as e:
        _discard_unreadable(ctx, name, e, yes)
        return
    if not yes and not typer.confirm(
        f"Clear all {cache.size()} entries from '{cache.cache_name}'?"
    ):
        raise typer.Abort()
    if cache.clear().commit():
        console.print(f"[green]✓ Cache '{cache.cache_name}' cleared.[/green]")
    else:
        console.print(f"[red]✗ Failed to delete '{cache.cache_file}'.[/red]")
        raise typer.Exit(code=1)


def _discard_unreadable(
    ctx: typer.Context, name: str, error: CacheLoadError, yes: bool
) -> None:
    """Deletes a cache file that cannot be loaded, without reading it."""
    config: CacheConfig = ctx.obj["config"]
    cache_file = CacheConfig(**{**config.model_dump(), "cache_name": name}).cache_file
    log.warning(f"{cache_file.name}: {error}")
    if not yes and not typer.confirm(f"'{cache_file}' cannot be read. Delete it?"):
        raise typer.Abort()
    try:
        cache_file.unlink(missing_ok=True)
    except OSError as e:
        console.print(f"[red]✗ Failed to delete '{cache_file}': {e}[/red]")
        raise typer.Exit(code=1)
    console.print(f"[green]✓ Unreadable cache '{cache_file.stem}' deleted.[/green]")
