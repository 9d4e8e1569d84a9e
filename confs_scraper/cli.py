"""CLI for the conference scraper."""

import asyncio
import json
import os
from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv
from rich.console import Console

from confs_scraper.errors import FetchError, StoreError
from confs_scraper.extractors.fetch import DEFAULT_CLASS_NAME, DEFAULT_LISTING_URL
from confs_scraper.pipeline import PipelineRunner, print_records, print_report
from confs_scraper.store import RecordStore, open_store

# Load environment variables (override=True to beat shell env vars)
load_dotenv(override=True)

app = typer.Typer(
    name="confs-scraper",
    help="Scrape conference listings into a deduplicated record store",
    add_completion=False,
)
console = Console()

STORE_HELP = "JSON file path or database URL (default: CONFS_STORE env var)"


def get_store(target: Optional[str]) -> RecordStore:
    """Open the configured store or exit with an error."""
    try:
        return open_store(target or os.environ.get("CONFS_STORE"))
    except StoreError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)


def load_fragments(path: Path) -> list[str]:
    """Read fragments from a file: a JSON array of strings, or one raw fragment."""
    text = path.read_text()
    if path.suffix == ".json":
        data = json.loads(text)
        if not isinstance(data, list) or not all(isinstance(f, str) for f in data):
            raise typer.BadParameter(f"{path} must hold a JSON array of HTML strings")
        return data
    return [text]


@app.command()
def run(
    files: list[Path] = typer.Argument(..., exists=True, dir_okay=False, help="Fragment files"),
    store: Optional[str] = typer.Option(None, "--store", "-s", help=STORE_HELP),
    show_candidates: bool = typer.Option(False, "--candidates", help="Print extracted candidates"),
):
    """Extract and reconcile fragments saved to local files."""
    fragments: list[str] = []
    for path in files:
        fragments.extend(load_fragments(path))

    record_store = get_store(store)
    try:
        report = PipelineRunner(record_store).run(fragments)
    finally:
        record_store.close()

    if show_candidates:
        console.print_json(json.dumps([c.to_payload() for c in report.candidates]))
    print_report(report)


@app.command()
def scrape(
    url: str = typer.Argument(DEFAULT_LISTING_URL, help="Listing page URL"),
    class_name: str = typer.Option(
        DEFAULT_CLASS_NAME, "--class-name", "-c", help="CSS class of one listing entry"
    ),
    store: Optional[str] = typer.Option(None, "--store", "-s", help=STORE_HELP),
):
    """Fetch a listing page, then extract and reconcile its entries."""
    record_store = get_store(store)
    try:
        report = asyncio.run(PipelineRunner(record_store).run_url(url, class_name))
    except FetchError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)
    finally:
        record_store.close()

    print_report(report)


@app.command(name="list")
def list_records(
    limit: int = typer.Option(20, "--limit", "-l", help="Rows to show"),
    store: Optional[str] = typer.Option(None, "--store", "-s", help=STORE_HELP),
):
    """Show stored conferences."""
    record_store = get_store(store)
    try:
        records = record_store.all()
    finally:
        record_store.close()

    if not records:
        console.print("[yellow]No conferences stored yet[/yellow]")
        raise typer.Exit(0)

    print_records(records, limit=limit)


@app.command()
def stats(
    store: Optional[str] = typer.Option(None, "--store", "-s", help=STORE_HELP),
):
    """Show record store statistics."""
    record_store = get_store(store)
    try:
        store_stats = record_store.stats()
    finally:
        record_store.close()

    console.print("\n[bold]Store Statistics[/bold]")
    console.print(f"  Total records: {store_stats['total']}")
    console.print(f"  With CFP URL: {store_stats['with_cfp']}")
    console.print(f"  Upcoming: {store_stats['upcoming']}")
    console.print(f"  Undated: {store_stats['undated']}")
    console.print(f"  Top countries: {store_stats['top_countries']}")
    console.print(f"  Top topics: {store_stats['top_topics']}")


@app.command()
def serve(
    host: str = typer.Option(None, "--host", help="Bind host (default: CONFS_API_HOST or 127.0.0.1)"),
    port: int = typer.Option(None, "--port", "-p", help="Bind port (default: CONFS_API_PORT or 8000)"),
    store: Optional[str] = typer.Option(None, "--store", "-s", help=STORE_HELP),
):
    """Serve the scrape endpoint over HTTP."""
    import uvicorn

    from confs_scraper.api import create_app

    host = host or os.environ.get("CONFS_API_HOST", "127.0.0.1")
    port = port or int(os.environ.get("CONFS_API_PORT", "8000"))

    console.print(f"[cyan]Serving on http://{host}:{port}/api/scrape[/cyan]")
    uvicorn.run(create_app(get_store(store)), host=host, port=port)


if __name__ == "__main__":
    app()
