"""Lenient coercion of listing date text to calendar dates."""

import re
from datetime import date, datetime
from typing import Optional

from confs_scraper.models import UNKNOWN

# Formats that carry their own year
FULL_FORMATS = [
    "%Y-%m-%d",       # 2026-05-03
    "%B %d, %Y",      # May 3, 2026
    "%b %d, %Y",      # Sep 3, 2026
    "%B %d %Y",       # May 3 2026
    "%b %d %Y",       # Sep 3 2026
    "%d %B %Y",       # 3 May 2026
    "%d %b %Y",       # 3 Sep 2026
]

# Year-less dates this far in the past are read as next year
ROLLOVER_DAYS = 183

# Listing dates ("May 3") omit the year
YEARLESS_FORMATS = [
    "%B %d",
    "%b %d",
]


def _parse_yearless(text: str, year: int) -> Optional[date]:
    for fmt in YEARLESS_FORMATS:
        try:
            # Year appended before parsing so Feb 29 resolves against the right year
            return datetime.strptime(f"{text} {year}", f"{fmt} %Y").date()
        except ValueError:
            continue
    return None


def coerce_date(text: Optional[str], reference_date: Optional[date] = None) -> Optional[date]:
    """Parse date text into a date, or None when it can't be read.

    Year-less dates take the year of ``reference_date`` (today by default).
    Listings show upcoming events, so a year-less date more than
    ``ROLLOVER_DAYS`` before the reference date is moved to the next year
    ("Jan 5" read in October means next January).
    Never raises: unknown or corrupt text means "unset".
    """
    if not text:
        return None
    text = re.sub(r"\s+", " ", text.strip().replace(".", ""))
    if not text or text == UNKNOWN:
        return None

    # strptime knows "Sep" but not "Sept"
    text = re.sub(r"\bSept\b", "Sep", text, flags=re.IGNORECASE)

    if re.match(r"^\d{4}-\d{2}-\d{2}", text):
        text = text[:10]

    for fmt in FULL_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue

    reference_date = reference_date or date.today()
    parsed = _parse_yearless(text, reference_date.year)
    if parsed is not None and (reference_date - parsed).days > ROLLOVER_DAYS:
        return _parse_yearless(text, reference_date.year + 1) or parsed
    return parsed


def next_year(value: date) -> date:
    """Same day one year later; Feb 29 lands on Feb 28."""
    try:
        return value.replace(year=value.year + 1)
    except ValueError:
        return value.replace(year=value.year + 1, day=28)
