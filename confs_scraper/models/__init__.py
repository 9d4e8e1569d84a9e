"""Data models for the conference scraper."""

from confs_scraper.models.conference import (
    UNKNOWN,
    CandidateRecord,
    RecordFields,
    StoredRecord,
    ReconcileError,
    ReconcileReport,
    PipelineReport,
)

__all__ = [
    "UNKNOWN",
    "CandidateRecord",
    "RecordFields",
    "StoredRecord",
    "ReconcileError",
    "ReconcileReport",
    "PipelineReport",
]
