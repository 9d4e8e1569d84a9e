"""URL normalizer producing stable identity keys."""

from typing import Optional
from urllib.parse import urlsplit

from confs_scraper.models import UNKNOWN


def normalize_url(raw: Optional[str]) -> Optional[str]:
    """Canonicalize a URL into ``scheme://host/path``.

    Query string, fragment, port and trailing slashes are dropped, so two
    URLs that differ only in those parts map to the same key.

    Returns None for the UNKNOWN sentinel or an empty value. Anything that
    does not parse as an absolute URL is returned unchanged (stripped); it
    still works as a literal matching key.
    """
    if raw is None:
        return None
    raw = raw.strip()
    if not raw or raw == UNKNOWN:
        return None

    try:
        parts = urlsplit(raw)
        host = parts.hostname
    except ValueError:
        return raw

    if not parts.scheme or not host:
        return raw

    path = parts.path.rstrip("/")
    return f"{parts.scheme.lower()}://{host}{path}"
