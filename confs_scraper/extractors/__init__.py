"""Listing page → candidate record extraction.

1. Fetch the listing page and split it into per-entry fragments
2. Read labeled fields out of each fragment
"""

from confs_scraper.extractors.fetch import fetch_fragments, select_fragments
from confs_scraper.extractors.listing import LABEL_RULES, extract_all, extract_fragment

__all__ = [
    "fetch_fragments",
    "select_fragments",
    "LABEL_RULES",
    "extract_all",
    "extract_fragment",
]
