"""Fetch a listing page and cut it into per-entry HTML fragments.

Two-tier fetching:
1. Fast path: httpx for server-rendered pages
2. Slow path: Playwright Firefox for client-rendered listings (confs.tech)
"""

import asyncio
import random
import re
from typing import Optional

import httpx
from bs4 import BeautifulSoup
from rich.console import Console

from confs_scraper.errors import FetchError

console = Console()

USER_AGENTS = [
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:134.0) Gecko/20100101 Firefox/134.0",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 14.7; rv:134.0) Gecko/20100101 Firefox/134.0",
    "Mozilla/5.0 (X11; Linux x86_64; rv:134.0) Gecko/20100101 Firefox/134.0",
]

# confs.tech CFP listing and the CSS class of one entry on it
DEFAULT_LISTING_URL = "https://confs.tech/cfp"
DEFAULT_CLASS_NAME = "ConferenceItem_dl__dFt82"

DEFAULT_TIMEOUT = 30.0
DEFAULT_RETRIES = 3

SPA_MARKERS = [
    r'<div\s+id=["\'](?:root|app|__next|__nuxt)["\']',
    r'window\.__INITIAL_STATE__',
    r'data-reactroot',
]


def needs_javascript(html: str, class_name: str) -> bool:
    """True when the page is an SPA shell without any listing entries yet."""
    has_spa_markers = any(re.search(pattern, html, re.I) for pattern in SPA_MARKERS)
    return has_spa_markers and not select_fragments(html, class_name)


def select_fragments(html: str, class_name: str) -> list[str]:
    """Return the inner HTML of every element carrying ``class_name``."""
    soup = BeautifulSoup(html, "lxml")
    return [element.decode_contents() for element in soup.find_all(class_=class_name)]


async def fetch_with_httpx(
    url: str,
    timeout: float = DEFAULT_TIMEOUT,
    retries: int = DEFAULT_RETRIES,
    client: Optional[httpx.AsyncClient] = None,
) -> str:
    """GET a page, retrying transient failures. Raises FetchError."""
    headers = {
        "User-Agent": random.choice(USER_AGENTS),
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
        "Accept-Language": "en-US,en;q=0.9",
    }

    owns_client = client is None
    if owns_client:
        client = httpx.AsyncClient(timeout=timeout, follow_redirects=True)

    last_error = "unknown"
    try:
        for attempt in range(retries):
            try:
                response = await client.get(url, headers=headers)
                response.raise_for_status()
                return response.text
            except httpx.TimeoutException:
                last_error = "timeout"
            except httpx.HTTPStatusError as e:
                last_error = str(e.response.status_code)
                if e.response.status_code < 500 and e.response.status_code != 429:
                    break
            except httpx.RequestError as e:
                last_error = f"connection: {e}"

            if attempt < retries - 1:
                await asyncio.sleep(0.5 * (2 ** attempt))
    finally:
        if owns_client:
            await client.aclose()

    raise FetchError(url, last_error)


async def fetch_with_playwright(
    url: str,
    class_name: str,
    timeout: float = DEFAULT_TIMEOUT * 1000,
) -> Optional[str]:
    """Render the page in headless Firefox once listing entries appear."""
    try:
        from playwright.async_api import async_playwright
    except ImportError:
        console.print("[yellow]Playwright not installed, skipping JS rendering[/yellow]")
        return None

    console.print(f"[cyan]Playwright fetching: {url[:60]}...[/cyan]")

    async with async_playwright() as p:
        browser = await p.firefox.launch(headless=True)
        try:
            context = await browser.new_context(
                user_agent=random.choice(USER_AGENTS),
                viewport={"width": 1920, "height": 1080},
                locale="en-US",
            )
            page = await context.new_page()
            await page.goto(url, wait_until="networkidle", timeout=timeout)
            try:
                await page.wait_for_selector(f".{class_name}", timeout=timeout)
            except Exception as e:
                console.print(f"[yellow]No '.{class_name}' elements rendered: {e}[/yellow]")
            return await page.content()
        finally:
            await browser.close()


async def fetch_fragments(
    url: str,
    class_name: str,
    timeout: float = DEFAULT_TIMEOUT,
    retries: int = DEFAULT_RETRIES,
    force_playwright: bool = False,
    client: Optional[httpx.AsyncClient] = None,
) -> list[str]:
    """Fetch ``url`` and return the listing fragments marked by ``class_name``.

    Raises:
        FetchError: the page could not be obtained at all.
    """
    html = None
    if not force_playwright:
        html = await fetch_with_httpx(url, timeout=timeout, retries=retries, client=client)
        if needs_javascript(html, class_name):
            console.print(f"[dim]SPA detected, trying Playwright: {url[:50]}...[/dim]")
            html = None

    if html is None:
        try:
            html = await fetch_with_playwright(url, class_name, timeout=timeout * 1000)
        except Exception as e:
            raise FetchError(url, f"playwright: {e}") from e
        if html is None:
            raise FetchError(url, "page requires JavaScript rendering")

    fragments = select_fragments(html, class_name)
    console.print(f"[dim]Found {len(fragments)} '.{class_name}' elements on {url[:60]}[/dim]")
    return fragments
