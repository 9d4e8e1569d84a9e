"""Record store interface."""

from abc import ABC, abstractmethod
from collections import Counter
from datetime import date
from typing import Optional

from confs_scraper.models import RecordFields, StoredRecord


class RecordStore(ABC):
    """Persistence boundary for conference records.

    Implementations enforce uniqueness of ``normalized_url`` and of non-null
    ``normalized_cfp_url``, and serialize their own writes. All failures are
    raised as ``StoreError``.
    """

    @abstractmethod
    def find_by_url(self, normalized_url: str) -> Optional[StoredRecord]:
        ...

    @abstractmethod
    def find_by_cfp_url(self, normalized_cfp_url: str) -> Optional[StoredRecord]:
        ...

    @abstractmethod
    def create(self, record: RecordFields) -> StoredRecord:
        ...

    @abstractmethod
    def update(self, record_id: str, record: RecordFields) -> StoredRecord:
        ...

    @abstractmethod
    def all(self) -> list[StoredRecord]:
        ...

    def find_by_identity(
        self,
        normalized_url: Optional[str],
        normalized_cfp_url: Optional[str],
    ) -> Optional[StoredRecord]:
        """OR-match on either identity key; the URL match wins.

        A None key never matches anything.
        """
        if normalized_url:
            record = self.find_by_url(normalized_url)
            if record is not None:
                return record
        if normalized_cfp_url:
            return self.find_by_cfp_url(normalized_cfp_url)
        return None

    def count(self) -> int:
        return len(self.all())

    def stats(self) -> dict:
        """Summary counts over the stored records."""
        records = self.all()
        today = date.today()
        countries = Counter(r.country or "Unknown" for r in records)
        topics = Counter(t for r in records for t in r.topics)
        return {
            "total": len(records),
            "with_cfp": sum(1 for r in records if r.normalized_cfp_url),
            "upcoming": sum(1 for r in records if r.start_date and r.start_date >= today),
            "undated": sum(1 for r in records if not r.start_date),
            "top_countries": dict(countries.most_common(5)),
            "top_topics": dict(topics.most_common(5)),
        }

    def close(self) -> None:
        """Release connections; the default store holds none."""
