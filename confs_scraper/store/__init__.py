"""Record stores for reconciled conferences."""

from pathlib import Path
from typing import Optional

from confs_scraper.store.base import RecordStore
from confs_scraper.store.json_store import STORE_FILE, JSONRecordStore
from confs_scraper.store.sql_store import SQLRecordStore


def open_store(target: Optional[str] = None) -> RecordStore:
    """Open a store from a database URL or a JSON file path.

    ``None`` opens the default JSON file under ``.cache/``.
    """
    if not target:
        return JSONRecordStore(STORE_FILE)
    if "://" in target:
        return SQLRecordStore(target)
    return JSONRecordStore(Path(target))


__all__ = [
    "RecordStore",
    "JSONRecordStore",
    "SQLRecordStore",
    "STORE_FILE",
    "open_store",
]
