"""JSON file store for conference records."""

import json
import threading
from datetime import datetime
from pathlib import Path
from typing import Optional

from rich.console import Console

from confs_scraper.errors import DuplicateRecordError, RecordNotFoundError, StoreError
from confs_scraper.models import RecordFields, StoredRecord
from confs_scraper.store.base import RecordStore

console = Console()

STORE_DIR = Path(__file__).parent.parent.parent / ".cache"
STORE_FILE = STORE_DIR / "conferences.json"


class JSONRecordStore(RecordStore):
    """Keeps all records in memory and rewrites the JSON file on each write.

    A lock covers every check-then-write so concurrent runs in one process
    cannot both create a record for the same identity key.
    """

    def __init__(self, store_path: Optional[Path] = None):
        self.store_path = Path(store_path) if store_path else STORE_FILE
        self._records: dict[str, StoredRecord] = {}
        self._by_url: dict[str, str] = {}
        self._by_cfp_url: dict[str, str] = {}
        self._lock = threading.RLock()
        self._load()

    def _load(self) -> None:
        """Load store from disk."""
        if not self.store_path.exists():
            return
        try:
            with open(self.store_path) as f:
                data = json.load(f)
            for record_data in data.get("records", []):
                self._index(StoredRecord.model_validate(record_data))
        except (OSError, ValueError) as e:
            raise StoreError(f"Failed to load record store {self.store_path}: {e}") from e
        console.print(f"[dim]Loaded {len(self._records)} records from {self.store_path}[/dim]")

    def _save(self) -> None:
        """Save store to disk."""
        try:
            self.store_path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = self.store_path.with_suffix(".tmp")
            with open(tmp_path, "w") as f:
                json.dump({
                    "updated_at": datetime.now().timestamp(),
                    "records": [r.model_dump(mode="json") for r in self._records.values()],
                }, f, indent=2)
            tmp_path.replace(self.store_path)
        except OSError as e:
            raise StoreError(f"Failed to save record store {self.store_path}: {e}") from e

    def _index(self, record: StoredRecord) -> None:
        self._records[record.id] = record
        self._by_url[record.normalized_url] = record.id
        if record.normalized_cfp_url:
            self._by_cfp_url[record.normalized_cfp_url] = record.id

    def _unindex(self, record: StoredRecord) -> None:
        self._records.pop(record.id, None)
        self._by_url.pop(record.normalized_url, None)
        if record.normalized_cfp_url:
            self._by_cfp_url.pop(record.normalized_cfp_url, None)

    def _check_unique(self, record: RecordFields, record_id: Optional[str] = None) -> None:
        owner = self._by_url.get(record.normalized_url)
        if owner is not None and owner != record_id:
            raise DuplicateRecordError("normalized_url", record.normalized_url)
        if record.normalized_cfp_url:
            owner = self._by_cfp_url.get(record.normalized_cfp_url)
            if owner is not None and owner != record_id:
                raise DuplicateRecordError("normalized_cfp_url", record.normalized_cfp_url)

    def find_by_url(self, normalized_url: str) -> Optional[StoredRecord]:
        with self._lock:
            record_id = self._by_url.get(normalized_url)
            return self._records[record_id].model_copy(deep=True) if record_id else None

    def find_by_cfp_url(self, normalized_cfp_url: str) -> Optional[StoredRecord]:
        with self._lock:
            record_id = self._by_cfp_url.get(normalized_cfp_url)
            return self._records[record_id].model_copy(deep=True) if record_id else None

    def create(self, record: RecordFields) -> StoredRecord:
        with self._lock:
            self._check_unique(record)
            stored = StoredRecord(**record.model_dump())
            self._index(stored)
            try:
                self._save()
            except StoreError:
                self._unindex(stored)
                raise
            return stored.model_copy(deep=True)

    def update(self, record_id: str, record: RecordFields) -> StoredRecord:
        with self._lock:
            existing = self._records.get(record_id)
            if existing is None:
                raise RecordNotFoundError(record_id)
            self._check_unique(record, record_id=record_id)

            stored = StoredRecord(
                **record.model_dump(),
                id=existing.id,
                created_at=existing.created_at,
                updated_at=datetime.now(),
            )
            self._unindex(existing)
            self._index(stored)
            try:
                self._save()
            except StoreError:
                self._unindex(stored)
                self._index(existing)
                raise
            return stored.model_copy(deep=True)

    def all(self) -> list[StoredRecord]:
        with self._lock:
            return [r.model_copy(deep=True) for r in self._records.values()]

    def count(self) -> int:
        with self._lock:
            return len(self._records)
