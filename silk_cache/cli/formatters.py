"""
Functions for formatting and displaying cache data in the console using Rich.
"""

from pathlib import Path
from typing import Any

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from silk_cache.models.config import CacheConfig
from silk_cache.utils.formatting import format_mtime, format_size, truncate_repr


def format_error_with_suggestions(
    error: Exception, context: dict | None = None
) -> Panel:
    """Formats an error with actionable suggestions into a Rich Panel."""
    error_type = type(error).__name__
    error_msg = str(error)

    suggestions_map = {
        "CacheDecodeError": [
            "• The cache file may be corrupt or written by another program.",
            "• Import the module that defines the cached items with `-m MODULE`.",
            "• Run `silk-cache clear NAME` to discard the cache.",
        ],
        "CacheLoadError": [
            "• Check that the cache file is readable.",
            "• Verify the cache directory with `silk-cache --show-config`.",
        ],
        "CacheCommitError": [
            "• Check that the cache directory is writable and not full.",
            "• Cached items must be picklable.",
        ],
        "CacheArgumentError": [
            "• Cache names must be valid file names.",
        ],
        "ConfigurationError": [
            "• Check the values in your configuration file.",
            "• Run `silk-cache init --force` to write a fresh one.",
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


def print_config(config_path: Path, config: CacheConfig):
    """Displays the effective configuration."""
    console = Console()
    content = ""
    for key, value in config.model_dump().items():
        content += f"{key} = {value}\n"
    content += f"cache_file = {config.cache_file}"

    console.print(
        Panel(
            content.strip(),
            title=f"Configuration ([dim]{config_path}[/dim])",
            border_style="cyan",
        )
    )


def print_caches_table(cache_dir: Path, cache_files: list[Path]):
    """Lists the cache files found in a directory."""
    console = Console()
    if not cache_files:
        console.print(f"[yellow]No caches found in '{cache_dir}'.[/yellow]")
        return

    table = Table(title=f"Caches in {cache_dir}", box=box.ROUNDED)
    table.add_column("Name", style="cyan")
    table.add_column("Size", justify="right")
    table.add_column("Modified", style="dim")

    for cache_file in cache_files:
        stat = cache_file.stat()
        table.add_row(
            cache_file.stem, format_size(stat.st_size), format_mtime(stat.st_mtime)
        )

    console.print(table)


def print_cache_info(info: dict[str, Any]):
    """Displays a summary of a single cache."""
    console = Console()
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column(style="bold cyan")
    table.add_column()

    table.add_row("Name:", info["name"])
    table.add_row("File:", f"[dim]{info['file']}[/dim]")
    if info["exists"]:
        table.add_row("Size:", format_size(info["size"]))
    else:
        table.add_row("Size:", "[yellow]No file (empty cache)[/yellow]")
    table.add_row("Entries:", str(info["entries"]))
    table.add_row("Ignored:", str(info["ignored"]))

    console.print(
        Panel(table, title="[bold green]Cache[/bold green]", border_style="green")
    )


def print_entries_table(name: str, entries: list[Any], limit: int | None = None):
    """Displays the entries of a cache in buffer order."""
    console = Console()
    if not entries:
        console.print(f"[yellow]Cache '{name}' is empty.[/yellow]")
        return

    shown = entries if limit is None else entries[:limit]
    table = Table(title=f"{name} ({len(entries)} entries)", box=box.ROUNDED)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Type", style="cyan")
    table.add_column("Entry", overflow="fold")

    for index, entry in enumerate(shown):
        table.add_row(str(index), type(entry).__name__, Text(truncate_repr(entry)))

    console.print(table)
    if len(shown) < len(entries):
        console.print(f"[dim]... {len(entries) - len(shown)} more not shown.[/dim]")
