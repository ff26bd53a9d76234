"""Record store CLI - main application entry point."""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Annotated, TypeVar

from rich.console import Console
import typer

from recordstore import __version__
from recordstore.config import (
    configure_stdlib_logging,
    get_logger,
    log_startup_info,
    settings,
    setup_loguru_logger,
)
from recordstore.infrastructure.cli.ui import (
    command_error_handler,
    render_record_page,
    render_release,
)
from recordstore.infrastructure.container import ServiceContainer, build_container

console = Console(width=100)
logger = get_logger(__name__)

app = typer.Typer(
    help=f"Record Store v{__version__} - inventory and ordering API",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
    pretty_exceptions_enable=True,
    pretty_exceptions_short=True,
    pretty_exceptions_show_locals=False,
)


T = TypeVar("T")


def run_with_services(
    operation: Callable[[ServiceContainer], Awaitable[T]], seed: bool = False
) -> T:
    """Run an async operation against a fully started container."""

    async def runner() -> T:
        services = build_container()
        try:
            await services.startup(seed=seed)
            return await operation(services)
        finally:
            await services.close()

    return asyncio.run(runner())


@app.command(rich_help_panel="Server")
def serve(
    host: Annotated[str | None, typer.Option(help="Bind address")] = None,
    port: Annotated[int | None, typer.Option(help="Bind port")] = None,
    reload: Annotated[bool, typer.Option(help="Reload on code changes")] = False,
) -> None:
    """Run the HTTP API with uvicorn."""
    import uvicorn

    configure_stdlib_logging()
    log_startup_info()
    uvicorn.run(
        "recordstore.infrastructure.api.app:create_app",
        factory=True,
        host=host or settings.api.host,
        port=port or settings.api.port,
        reload=reload,
        log_config=None,
    )


@app.command(rich_help_panel="Catalog")
@command_error_handler
def seed() -> None:
    """Load the seed catalog, skipping records that already exist."""
    result = run_with_services(lambda services: services.seeder.seed())
    console.print(
        f"[green]✓[/green] Seeded {result.inserted_count} records "
        f"[dim]({result.failed_count} skipped)[/dim]"
    )


@app.command(rich_help_panel="Catalog")
@command_error_handler
def records(
    q: Annotated[str | None, typer.Option("--query", "-q", help="Free-text search")] = None,
    artist: Annotated[str | None, typer.Option(help="Artist substring")] = None,
    album: Annotated[str | None, typer.Option(help="Album substring")] = None,
    format: Annotated[str | None, typer.Option("--format", "-f", help="Exact format")] = None,
    category: Annotated[str | None, typer.Option("--category", "-c", help="Exact category")] = None,
    page: Annotated[int, typer.Option(help="Page number")] = 1,
    limit: Annotated[int, typer.Option(help="Page size")] = 20,
    fields: Annotated[str | None, typer.Option(help="Comma-separated fields")] = None,
) -> None:
    """Query the catalog."""
    result = run_with_services(
        lambda services: services.catalog.query(
            q=q,
            artist=artist,
            album=album,
            format=format,
            category=category,
            page=page,
            limit=limit,
            fields=fields,
        ),
        seed=settings.seed.enabled,
    )
    console.print(render_record_page(result))


@app.command(rich_help_panel="MusicBrainz")
@command_error_handler
def release(mbid: Annotated[str, typer.Argument(help="MusicBrainz release ID")]) -> None:
    """Look up normalized release metadata on MusicBrainz."""
    metadata = run_with_services(lambda services: services.enrichment.lookup_release(mbid))
    console.print(render_release(mbid, metadata))


@app.command(name="version", rich_help_panel="System")
def version_command() -> None:
    """Show version information."""
    console.print(f"[bold bright_blue]Record Store[/bold bright_blue] [dim]v{__version__}[/dim]")


@app.callback()
def init_cli(
    ctx: typer.Context,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose output"),
    ] = False,
) -> None:
    """Initialize the record store CLI."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    setup_loguru_logger(verbose)


def main() -> int:
    """Application entry point."""
    try:
        return app() or 0
    except Exception:
        logger.exception("Unhandled exception")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
