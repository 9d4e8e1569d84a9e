"""Main pipeline orchestration."""

import asyncio
from datetime import date
from typing import Optional

from rich.console import Console
from rich.table import Table

from confs_scraper.extractors import extract_all, fetch_fragments
from confs_scraper.models import PipelineReport, StoredRecord
from confs_scraper.reconciler import reconcile
from confs_scraper.store import RecordStore

console = Console()


class PipelineRunner:
    """Extract candidates from fragments, then reconcile them into a store.

    The store is injected; its connection lifecycle belongs to the caller.
    """

    def __init__(self, store: RecordStore, reference_date: Optional[date] = None):
        self.store = store
        self.reference_date = reference_date

    def run(self, fragments: list[str]) -> PipelineReport:
        """Run the pipeline over a batch of listing fragments.

        1. Extract one candidate per fragment
        2. Reconcile candidates against the store
        """
        candidates = extract_all(fragments)
        console.print(f"[dim]Extracted {len(candidates)} candidates[/dim]")

        report = reconcile(candidates, self.store, reference_date=self.reference_date)
        console.print(
            f"[green]Created: {report.created}, Updated: {report.updated}[/green]"
            + (f" [red]Errors: {len(report.errors)}[/red]" if report.errors else "")
        )

        return PipelineReport(**report.model_dump(), candidates=candidates)

    async def run_url(self, url: str, class_name: str) -> PipelineReport:
        """Fetch a listing page and run the pipeline on its entries.

        Raises:
            FetchError: the page could not be fetched; nothing is reconciled.
        """
        fragments = await fetch_fragments(url, class_name)
        # Extraction and store writes block; keep them off the event loop
        return await asyncio.to_thread(self.run, fragments)


def print_report(report: PipelineReport) -> None:
    """Print run counts and any per-item errors."""
    console.print("\n[bold]Run Summary[/bold]")
    console.print(f"  Candidates: {len(report.candidates)}")
    console.print(f"  Created: {report.created}")
    console.print(f"  Updated: {report.updated}")
    console.print(f"  Errors: {len(report.errors)}")

    if report.errors:
        table = Table(title="Errors")
        table.add_column("Conference", style="cyan", max_width=40)
        table.add_column("Message", style="red")
        for error in report.errors:
            table.add_row(error.identifier, error.message)
        console.print(table)


def print_records(records: list[StoredRecord], limit: int = 20) -> None:
    """Print a summary table of stored records, soonest first."""
    table = Table(title=f"Conferences (showing {min(len(records), limit)} of {len(records)})")
    table.add_column("Name", style="cyan", max_width=30)
    table.add_column("Location", style="green", max_width=25)
    table.add_column("Starts", style="yellow")
    table.add_column("CFP Ends", style="red")
    table.add_column("Topics", style="blue", max_width=25)

    sorted_records = sorted(records, key=lambda r: r.start_date or date.max)

    for record in sorted_records[:limit]:
        location = ", ".join(p for p in (record.city, record.country) if p) or "?"
        table.add_row(
            record.name[:30],
            location[:25],
            record.start_date.isoformat() if record.start_date else "?",
            record.cfp_end_date.isoformat() if record.cfp_end_date else "-",
            ", ".join(record.topics[:3]) or "-",
        )

    console.print(table)
