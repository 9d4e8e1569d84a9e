"""HTTP endpoint that triggers a scrape run."""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Query
from fastapi.responses import JSONResponse
from rich.console import Console

from confs_scraper.pipeline import PipelineRunner
from confs_scraper.store import RecordStore

console = Console()


def create_app(store: RecordStore) -> FastAPI:
    """Build the API around an already opened store."""
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        store.close()

    app = FastAPI(title="Conference Scraper", lifespan=lifespan)
    runner = PipelineRunner(store)

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/api/scrape")
    async def scrape(
        url: Optional[str] = Query(default=None),
        class_name: Optional[str] = Query(default=None, alias="className"),
    ) -> JSONResponse:
        console.print(f"[dim]Scrape requested: url={url} className={class_name}[/dim]")

        if not url or not class_name:
            return JSONResponse(
                status_code=400,
                content={"error": "URL and className are required"},
            )

        try:
            report = await runner.run_url(url, class_name)
        except Exception as e:
            console.print(f"[red]Error scraping {url}: {e}[/red]")
            return JSONResponse(status_code=500, content={"error": str(e)})

        for error in report.errors:
            console.print(f"[yellow]  {error.identifier}: {error.message}[/yellow]")

        return JSONResponse(status_code=200, content=report.to_payload())

    @app.get("/api/conferences")
    async def conferences() -> list[dict]:
        return [record.to_payload() for record in store.all()]

    return app
