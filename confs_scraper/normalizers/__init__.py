"""Normalizers for identity keys, locations and dates."""

from confs_scraper.normalizers.url import normalize_url
from confs_scraper.normalizers.location import LocationDate, parse_location_date
from confs_scraper.normalizers.dates import coerce_date, next_year

__all__ = [
    "normalize_url",
    "LocationDate",
    "parse_location_date",
    "coerce_date",
    "next_year",
]
