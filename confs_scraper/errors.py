"""Exception types raised across the scraper."""


class ConfsScraperError(Exception):
    """Base class for all scraper errors."""


class StoreError(ConfsScraperError):
    """A record store operation failed."""


class DuplicateRecordError(StoreError):
    """A write would break a unique identity key."""

    def __init__(self, key: str, value: str):
        self.key = key
        self.value = value
        super().__init__(f"Duplicate {key}: {value}")


class RecordNotFoundError(StoreError):
    """No record exists with the given id."""

    def __init__(self, record_id: str):
        self.record_id = record_id
        super().__init__(f"Record not found: {record_id}")


class InvalidCandidateError(ConfsScraperError):
    """A candidate cannot be stored (e.g. it has no usable URL)."""


class FetchError(ConfsScraperError):
    """The listing page could not be fetched."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Failed to fetch {url}: {reason}")
