"""Split a listing's combined "city, country・date range" text."""

import re

from pydantic import BaseModel

from confs_scraper.models import UNKNOWN

# Glyphs that join the location and date segments
SEPARATORS = ("・", "·", "•")

MONTHS = (
    r"(?:January|February|March|April|May|June|July|August|September|October|November|December"
    r"|Jan|Feb|Mar|Apr|Jun|Jul|Aug|Sept|Sep|Oct|Nov|Dec)"
)

# "May 3", "May 3 - May 5", "May 3 - 5"
DATE_RANGE_PATTERN = re.compile(
    rf"\b(?P<start_month>{MONTHS})\.?\s+(?P<start_day>\d{{1,2}})\b"
    rf"(?:\s*[-–—]\s*(?:(?P<end_month>{MONTHS})\.?\s+)?(?P<end_day>\d{{1,2}})\b)?",
    re.IGNORECASE,
)

# Single "Month Day" token, used for standalone dates like CFP deadlines
DATE_TOKEN_PATTERN = re.compile(
    rf"\b({MONTHS})\.?\s+(\d{{1,2}})\b",
    re.IGNORECASE,
)


class LocationDate(BaseModel):
    """Location and date fields pulled from one text blob."""

    city: str = UNKNOWN
    country: str = UNKNOWN
    start_date: str = UNKNOWN
    end_date: str = UNKNOWN


def _clean(value: str) -> str:
    value = value.strip()
    return value or UNKNOWN


def split_location(text: str) -> tuple[str, str]:
    """Return (city, country) from the segment before the separator."""
    for separator in SEPARATORS:
        if separator in text:
            location = text.split(separator, 1)[0]
            parts = location.split(",")
            city = _clean(parts[0])
            country = _clean(parts[1]) if len(parts) > 1 else UNKNOWN
            return city, country
    return UNKNOWN, UNKNOWN


def find_date_range(text: str) -> tuple[str, str]:
    """Return (start, end) "Month Day" strings found anywhere in the text."""
    match = DATE_RANGE_PATTERN.search(text)
    if not match:
        return UNKNOWN, UNKNOWN

    start = f"{match.group('start_month')} {match.group('start_day')}"
    if not match.group("end_day"):
        return start, start

    end_month = match.group("end_month") or match.group("start_month")
    return start, f"{end_month} {match.group('end_day')}"


def find_date_token(text: str) -> str:
    """Return the first "Month Day" token in the text, or UNKNOWN."""
    match = DATE_TOKEN_PATTERN.search(text or "")
    if not match:
        return UNKNOWN
    return f"{match.group(1)} {match.group(2)}"


def parse_location_date(text: str) -> LocationDate:
    """Parse text like "Berlin, Germany・May 3 - May 5".

    Location and dates are found in independent passes, so a missing date
    does not stop the city from being read and vice versa.
    """
    if not text or not text.strip():
        return LocationDate()

    text = text.strip()
    city, country = split_location(text)
    start_date, end_date = find_date_range(text)

    return LocationDate(
        city=city,
        country=country,
        start_date=start_date,
        end_date=end_date,
    )
