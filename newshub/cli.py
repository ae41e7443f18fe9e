"""
Command-line interface for NewsHub.

`newshub fetch` runs one ingestion sweep (meant to be scheduled, e.g. every
five minutes) and `newshub clear-cache` drops cached reads by type.
"""

import time
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .config import get_settings
from .core.cache_store import build_cache_store
from .core.database import SessionLocal, create_tables
from .core.logging_config import configure_logging
from .news.schemas.responses import IngestionResult
from .news.services.article_persister import ArticlePersister
from .news.services.ingestion_service import IngestionOrchestrator
from .news.services.sources.manager import NewsSourceManager
from .services.cache_service import CACHE_TYPES, CacheService

app = typer.Typer(add_completion=False, help="NewsHub ingestion and maintenance commands")
console = Console()


def _build_cache(settings) -> CacheService:
    if settings.cache_store == "memory":
        # A memory store lives and dies with this command; the API never sees the invalidation
        console.print("[yellow]Warning: CACHE_STORE=memory is local to this command.[/yellow]")
        console.print("[yellow]Set CACHE_STORE=redis so the API cache is invalidated too.[/yellow]")
    return CacheService(build_cache_store(settings), settings.cache_namespace)


@app.command()
def fetch(
    source: Optional[str] = typer.Option(
        None, "--source", "-s", help="Fetch from one source only (guardian, nytimes, newsorg)."
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Fetch and normalize without saving anything."
    ),
):
    """Fetch the newest articles from every configured provider."""
    settings = get_settings()
    configure_logging(settings)
    started = time.monotonic()

    manager = NewsSourceManager(settings)
    if not manager.get_available_sources():
        console.print("[red]No news sources are configured. Set at least one provider API key.[/red]")
        raise typer.Exit(code=1)

    if source and not manager.get_sources([source]):
        console.print(
            f"[red]Unknown or unconfigured source: {source}. "
            f"Available: {', '.join(manager.get_available_sources())}[/red]"
        )
        manager.close()
        raise typer.Exit(code=1)

    console.print("Starting news fetch process...")
    if dry_run:
        console.print("[yellow]DRY RUN MODE - no articles will be saved[/yellow]")

    create_tables()
    db = SessionLocal()
    try:
        orchestrator = IngestionOrchestrator(
            manager.get_sources(),
            ArticlePersister(db, _build_cache(settings)),
            max_workers=settings.ingestion_fetch_workers,
        )
        result = orchestrator.run_all(only=[source] if source else None, dry_run=dry_run)
    finally:
        db.close()
        manager.close()

    _print_results(result)
    _print_summary(result, time.monotonic() - started)


@app.command("clear-cache")
def clear_cache(
    type: str = typer.Option(
        "all", "--type", "-t", help=f"Cache type to clear: {', '.join(CACHE_TYPES)} or all."
    ),
):
    """Clear cached news reads."""
    settings = get_settings()
    configure_logging(settings)

    if type != "all" and type not in CACHE_TYPES:
        console.print(f"[red]Unknown cache type: {type}[/red]")
        raise typer.Exit(code=1)

    console.print(f"Clearing {type} cache...")
    for cleared in _build_cache(settings).clear_type(type):
        console.print(f"  [green]✓[/green] {cleared} cache cleared")
    console.print("Cache cleared successfully!")


def _print_results(result: IngestionResult) -> None:
    table = Table(title="Results by Source")
    table.add_column("Source")
    table.add_column("Fetched", justify="right")
    table.add_column("Saved", justify="right")
    table.add_column("Status")

    for row in result.sources:
        status = f"[red]Error: {escape(row.error)}[/red]" if row.error else "[green]Success[/green]"
        table.add_row(row.source, str(row.fetched), str(row.saved), status)

    console.print(table)


def _print_summary(result: IngestionResult, elapsed: float) -> None:
    succeeded = len(result.sources) - len(result.failed_sources)

    console.print(f"Total articles processed: {result.total_articles}")
    console.print(f"Total articles saved: {result.total_saved}")
    console.print(f"Sources processed: {succeeded}/{len(result.sources)}")
    console.print(f"Execution time: {elapsed:.2f}s")

    if result.total_saved > 0:
        console.print("[green]News fetch completed successfully![/green]")
    else:
        console.print("[yellow]No new articles were saved.[/yellow]")


if __name__ == "__main__":
    app()
