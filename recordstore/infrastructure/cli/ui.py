"""UI helpers for CLI interaction.

Keeps Rich presentation out of the command functions.
"""

from collections.abc import Callable
import functools
from typing import Any, ParamSpec, TypeVar

from rich.console import Console
from rich.table import Table
import typer

from recordstore.config import get_logger
from recordstore.domain.entities import RecordPage, ReleaseMetadata

console = Console()
logger = get_logger(__name__)


P = ParamSpec("P")
R = TypeVar("R")


def command_error_handler(func: Callable[P, R]) -> Callable[P, R]:
    """Log command failures and turn them into a clean exit code."""

    @functools.wraps(func)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        operation = func.__name__.replace("_", " ")

        with logger.contextualize(operation=operation):
            try:
                logger.debug(f"Executing {operation}")
                return func(*args, **kwargs)

            except (typer.Exit, typer.Abort):
                raise

            except Exception as e:
                logger.exception(f"Error during {operation}")
                console.print(f"\n[bold red]✗ Error during {operation}:[/bold red] {e}")
                raise typer.Exit(code=1) from e

    return wrapper


def render_record_page(page: RecordPage) -> Table:
    """Table of one catalog page, with whatever fields the page carries."""
    columns: list[str] = []
    for document in page.records:
        for name in document:
            if name not in columns and name != "trackList":
                columns.append(name)

    table = Table(
        title=f"Records (page {page.page} of {page.total_pages}, {page.total} total)",
        show_lines=False,
    )
    for name in columns:
        table.add_column(name, style="cyan" if name == "id" else None)
    for document in page.records:
        table.add_row(*(_cell(document.get(name)) for name in columns))
    return table


def render_release(mbid: str, metadata: ReleaseMetadata) -> Table:
    """Table of a release's tracks, titled with its artist and album."""
    title = f"{metadata.artist or '?'} - {metadata.album or '?'} [dim]({mbid})[/dim]"
    table = Table(title=title)
    table.add_column("#", style="cyan")
    table.add_column("Title")
    table.add_column("Length", justify="right")
    for track in metadata.track_list or []:
        minutes, seconds = divmod(track.duration // 1000, 60)
        table.add_row(track.position, track.title, f"{minutes}:{seconds:02d}")
    return table


def _cell(value: Any) -> str:
    return "" if value is None else str(value)
