"""
Editorial CLI - Command-line interface.

Commands:
- editorial init → Create an empty store
- editorial import FILE → Bulk import articles from a JSON file
- editorial articles → List articles (filters as options)
- editorial categories → List categories
- editorial networks → List networks
- editorial notifications → Show notifications, newest first
- editorial serve → Run the HTTP API
"""

import json
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from editorial import services
from editorial.core.config import settings, setup_logging
from editorial.core.errors import EditorialError
from editorial.core.types import NotificationType
from editorial.storage.document import DocumentStore

app = typer.Typer(
    name="editorial",
    help="Editorial backend - articles, categories, networks and bulk import",
    no_args_is_help=True,
)
console = Console()


DataFileOption = typer.Option(
    None, "--data-file", "-d", help="JSON store to use (defaults to EDITORIAL_DATA_FILE)"
)


def get_store(data_file: Optional[Path]) -> DocumentStore:
    return DocumentStore(data_file or settings.data_file)


def fail(e: EditorialError) -> None:
    console.print(f"[red]Error ({e.kind}): {e.message}[/red]")
    for field, messages in e.details.items():
        console.print(f"  [dim]{field}:[/dim] {'; '.join(messages)}")
    raise typer.Exit(code=1)


@app.command()
def init(data_file: Optional[Path] = DataFileOption):
    """Create an empty store if none exists."""
    setup_logging()
    store = get_store(data_file)
    if store.initialize():
        console.print(f"[green]✓ Created {store.path}[/green]")
    else:
        console.print(f"[yellow]Store already exists at {store.path}[/yellow]")


@app.command("import")
def import_file(
    file: Path = typer.Argument(..., exists=True, dir_okay=False, help="JSON file to import"),
    data_file: Optional[Path] = DataFileOption,
):
    """Import articles from a JSON file (a list, or {"articles": [...]})."""
    setup_logging()
    store = get_store(data_file)

    try:
        payload = json.loads(file.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        console.print(f"[red]Error: {file} is not valid JSON ({e})[/red]")
        raise typer.Exit(code=1)

    try:
        result = services.import_articles(store, payload)
    except EditorialError as e:
        fail(e)

    services.create_notification(
        store,
        type=NotificationType.SUCCESS if not result.errors else NotificationType.WARNING,
        title="Article import finished",
        message=f"{result.imported} article(s) imported. {result.skipped} skipped.",
    )

    color = "green" if not result.errors else "yellow"
    console.print(Panel(
        f"[{color}]{result.imported} imported, {result.skipped} skipped "
        f"of {result.total}[/{color}]",
        title="Import",
    ))

    if result.errors:
        table = Table(title="Rejected records")
        table.add_column("Index", justify="right")
        table.add_column("Error")
        for error in result.errors:
            table.add_row(str(error.index), error.error)
        console.print(table)


@app.command()
def articles(
    search: Optional[str] = typer.Option(None, help="Text to find in title, excerpt or author"),
    status: Optional[str] = typer.Option(None, help="draft, published or archived"),
    category: Optional[list[str]] = typer.Option(None, "--category", "-c", help="Required category id (repeatable)"),
    network: Optional[str] = typer.Option(None, help="Network id"),
    featured: Optional[bool] = typer.Option(None, "--featured/--not-featured"),
    sort_by: str = typer.Option("createdAt", help="createdAt, updatedAt, publishedAt or title"),
    sort_dir: str = typer.Option("desc", help="asc or desc"),
    page: int = typer.Option(1),
    limit: int = typer.Option(10),
    data_file: Optional[Path] = DataFileOption,
):
    """List articles."""
    store = get_store(data_file)
    try:
        result = services.query_articles(store, {
            "search": search,
            "status": status,
            "category_ids": category or None,
            "network_id": network,
            "featured": featured,
            "sort_by": sort_by,
            "sort_dir": sort_dir,
            "page": page,
            "limit": limit,
        })
    except EditorialError as e:
        fail(e)

    table = Table(title=f"Articles (page {result.page}/{max(result.total_pages, 1)}, {result.total} total)")
    table.add_column("ID", style="dim")
    table.add_column("Title", style="cyan")
    table.add_column("Slug")
    table.add_column("Status")
    table.add_column("Author")
    table.add_column("Published")

    for article in result.items:
        table.add_row(
            article.id,
            article.title,
            article.slug,
            str(article.status),
            article.author_name,
            article.published_at.strftime("%Y-%m-%d") if article.published_at else "-",
        )

    console.print(table)


@app.command()
def categories(data_file: Optional[Path] = DataFileOption):
    """List categories."""
    store = get_store(data_file)
    table = Table(title="Categories")
    table.add_column("ID", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("Slug")
    table.add_column("Color")

    for category in services.list_categories(store):
        table.add_row(category.id, category.name, category.slug, category.color or "-")

    console.print(table)


@app.command()
def networks(data_file: Optional[Path] = DataFileOption):
    """List networks."""
    store = get_store(data_file)
    table = Table(title="Networks")
    table.add_column("ID", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("Slug")

    for network in services.list_networks(store):
        table.add_row(network.id, network.name, network.slug)

    console.print(table)


@app.command()
def notifications(
    limit: int = typer.Option(20, help="Number of notifications to show"),
    data_file: Optional[Path] = DataFileOption,
):
    """Show notifications, newest first."""
    store = get_store(data_file)
    items = services.list_notifications(store)[:limit]

    if not items:
        console.print("[dim]No notifications[/dim]")
        return

    for notification in items:
        console.print(
            f"[dim]{notification.created_at:%Y-%m-%d %H:%M}[/dim] "
            f"[bold]{notification.type}[/bold] {notification.title}: {notification.message}"
        )


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, help="Bind address"),
    port: Optional[int] = typer.Option(None, help="Port"),
):
    """Run the HTTP API with uvicorn."""
    import uvicorn

    setup_logging()
    uvicorn.run(
        "editorial.interface.api:app",
        host=host or settings.api_host,
        port=port or settings.api_port,
    )


if __name__ == "__main__":
    app()
