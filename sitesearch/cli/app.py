"""
CLI application: serve the API, crawl, search and manage the database
"""

from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from sitesearch.core.config import ALL_SITES, Settings
from sitesearch.core.exceptions import SiteSearchError
from sitesearch.core.logger import Logger
from sitesearch.storage.db import Database

app = typer.Typer(
    name="sitesearch",
    help="🔎 Site Search - crawl, index and search your own sites",
    rich_markup_mode="rich",
    no_args_is_help=True,
)
db_app = typer.Typer(help="Database management", no_args_is_help=True)
app.add_typer(db_app, name="db")

console = Console()


def _load(log_level: Optional[str] = None) -> Settings:
    settings = Settings.from_env()
    Logger.setup_logging(log_level or settings.log_level, settings.log_file)
    return settings


def _open_database(settings: Settings) -> Database:
    db = Database(settings.database_path)
    db.setup()
    return db


@app.command()
def serve(
    host: Optional[str] = None,
    port: Optional[int] = None,
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes"),
):
    """Run the HTTP API with uvicorn"""
    import uvicorn

    settings = _load()
    uvicorn.run(
        "sitesearch.api.app:create_app",
        factory=True,
        host=host or settings.host,
        port=port or settings.port,
        reload=reload or settings.reload,
    )


@app.command()
def crawl(log_level: str = "INFO"):
    """Crawl and index every configured site, then print a summary"""
    from sitesearch.indexing.service import IndexingService

    settings = _load(log_level)
    if not settings.sites:
        console.print("❌ No sites configured. Set SITES or SITES_FILE.", style="red")
        raise typer.Exit(1)

    db = _open_database(settings)
    service = IndexingService(settings, db)
    try:
        service.start_indexing()
        with console.status(f"Crawling {len(settings.sites)} sites..."):
            try:
                while not service.wait(timeout=1):
                    pass
            except KeyboardInterrupt:
                console.print("Stopping...", style="yellow")
                service.stop_indexing()
                service.wait()
    finally:
        db.close()

    table = Table(title="Crawl summary")
    table.add_column("Site")
    table.add_column("Indexed", justify="right")
    table.add_column("Failed", justify="right")
    table.add_column("Error")
    failed = False
    for result in service.results.values():
        failed = failed or result.error is not None
        table.add_row(result.site_url, str(result.pages_indexed), str(result.pages_failed), result.error or "")
    console.print(table)

    if failed:
        raise typer.Exit(1)


@app.command("index-page")
def index_page(url: str):
    """Refetch and reindex a single page"""
    from sitesearch.indexing.service import IndexingService

    settings = _load()
    db = _open_database(settings)
    try:
        IndexingService(settings, db).index_page(url)
    except SiteSearchError as e:
        console.print(f"❌ {e}", style="red")
        raise typer.Exit(1)
    finally:
        db.close()

    console.print(f"✅ Reindexed {url}", style="green")


@app.command()
def search(
    query: str,
    site: str = ALL_SITES,
    offset: int = 0,
    limit: Optional[int] = None,
):
    """Search the index and print ranked results"""
    from sitesearch.search.service import SearchService

    settings = _load()
    db = _open_database(settings)
    try:
        result = SearchService(settings, db).search(query, site, offset, limit)
    except SiteSearchError as e:
        console.print(f"❌ {e}", style="red")
        raise typer.Exit(1)
    finally:
        db.close()

    console.print(f"Found {result.count} pages")
    for item in result.data:
        console.print(f"[bold]{item.title}[/bold] ({item.relevance:.3f})")
        console.print(f"  {item.site}{item.uri}", style="cyan", markup=False)
        console.print(f"  {item.snippet}", markup=False, highlight=False)


@app.command()
def stats():
    """Show per-site page and lemma counters"""
    from sitesearch.storage.repositories import LemmaRepository, PageRepository, SiteRepository

    settings = _load()
    db = _open_database(settings)
    try:
        pages = PageRepository(db)
        lemmas = LemmaRepository(db)
        table = Table(title="Statistics")
        table.add_column("Site")
        table.add_column("Status")
        table.add_column("Pages", justify="right")
        table.add_column("Lemmas", justify="right")
        table.add_column("Error")
        for site in SiteRepository(db).find_all():
            table.add_row(
                site.url,
                site.status.value,
                str(pages.count_by_site(site)),
                str(lemmas.count_by_site(site)),
                site.last_error,
            )
        console.print(table)
        console.print(f"Total: {pages.count()} pages, {lemmas.count()} lemmas")
    finally:
        db.close()


@db_app.command("setup")
def db_setup():
    """Create tables and indexes"""
    settings = _load()
    _open_database(settings).close()
    console.print(f"✅ Database ready at {settings.database_path}", style="green")


@db_app.command("reset")
def db_reset(confirm: bool = typer.Option(False, "--confirm", help="Confirm database reset")):
    """Drop and recreate all tables"""
    if not confirm:
        console.print("⚠️ This deletes the whole index. Re-run with --confirm.", style="yellow")
        raise typer.Exit(1)

    settings = _load()
    db = _open_database(settings)
    try:
        db.reset()
    finally:
        db.close()
    console.print("✅ Database reset", style="green")


@db_app.command("status")
def db_status():
    """Show row counts per table"""
    settings = _load()
    db = _open_database(settings)
    try:
        counts = db.status()
    finally:
        db.close()

    table = Table(title=f"Database {settings.database_path}")
    table.add_column("Table")
    table.add_column("Rows", justify="right")
    for name, count in counts.items():
        table.add_row(name, str(count))
    console.print(table)


if __name__ == "__main__":
    app()
