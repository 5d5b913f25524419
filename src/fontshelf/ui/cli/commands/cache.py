"""Implementation of the `fontshelf cache` commands."""

from __future__ import annotations

import typer

from .._options import CacheDirOption
from ..state import get_cli_state
from ..utils import format_size, open_cache


cache_app = typer.Typer(
    help="Inspect or clear the font cache.",
    context_settings={"help_option_names": ["--help"]},
)


@cache_app.command(name="info")
def cache_info(cache_dir: CacheDirOption = None) -> None:
    """Show where the cache lives and how much it holds."""
    from rich.table import Table

    cache = open_cache(cache_dir)
    count, total = cache.size()
    table = Table(show_header=False, box=None)
    table.add_column("Field", style="bold cyan")
    table.add_column("Value")
    table.add_row("Location", str(cache.root))
    table.add_row("Files", str(count))
    table.add_row("Size", format_size(total))
    get_cli_state().console.print(table)


@cache_app.command(name="clear")
def cache_clear(cache_dir: CacheDirOption = None) -> None:
    """Delete every cached catalog, stylesheet and font file."""
    cache = open_cache(cache_dir)
    console = get_cli_state().console
    if cache.clear():
        console.print(f"Cleared font cache at {cache.root}", soft_wrap=True)
    else:
        console.print(f"Font cache at {cache.root} is already empty", soft_wrap=True)
