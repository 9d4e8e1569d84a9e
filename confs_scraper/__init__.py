"""Conference listing scraper: extract, normalize and reconcile records."""

__version__ = "0.1.0"
