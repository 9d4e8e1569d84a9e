"""Data models for scraped conference records."""

import uuid
from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field

# Placeholder for any value missing from a listing entry
UNKNOWN = "unknown"


class CandidateRecord(BaseModel):
    """A conference freshly extracted from one listing fragment.

    Every string field is always set, either to a real value or to UNKNOWN.
    """

    name: str = UNKNOWN
    url: str = UNKNOWN
    start_date: str = Field(default=UNKNOWN, alias="startDate")
    end_date: str = Field(default=UNKNOWN, alias="endDate")
    city: str = UNKNOWN
    country: str = UNKNOWN
    cfp_url: str = Field(default=UNKNOWN, alias="cfpUrl")
    cfp_end_date: str = Field(default=UNKNOWN, alias="cfpEndDate")
    twitter: str = UNKNOWN
    mastodon: str = UNKNOWN
    topics: list[str] = Field(default_factory=list)
    code_of_conduct: str = Field(default=UNKNOWN, alias="codeOfConduct")

    class Config:
        populate_by_name = True

    @property
    def identifier(self) -> str:
        """Label used when reporting errors about this candidate."""
        return self.name if self.name and self.name != UNKNOWN else UNKNOWN

    def to_payload(self) -> dict:
        """Serialize with the camelCase keys used by API responses."""
        return self.model_dump(by_alias=True)


class RecordFields(BaseModel):
    """Field values written to the store for one conference."""

    name: str
    url: str
    normalized_url: str
    cfp_url: Optional[str] = None
    normalized_cfp_url: Optional[str] = None

    # Dates are typed; unknown or unparseable text becomes None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    cfp_end_date: Optional[date] = None

    city: Optional[str] = None
    country: Optional[str] = None
    twitter: Optional[str] = None
    mastodon: Optional[str] = None
    topics: list[str] = Field(default_factory=list)
    code_of_conduct: Optional[str] = None


class StoredRecord(RecordFields):
    """A persisted conference, the unit of deduplication."""

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)

    def to_payload(self) -> dict:
        return self.model_dump(mode="json")


class ReconcileError(BaseModel):
    """One candidate that could not be reconciled."""

    identifier: str
    message: str


class ReconcileReport(BaseModel):
    """Aggregate outcome of reconciling a batch of candidates."""

    created: int = 0
    updated: int = 0
    errors: list[ReconcileError] = Field(default_factory=list)

    @property
    def processed(self) -> int:
        return self.created + self.updated + len(self.errors)


class PipelineReport(ReconcileReport):
    """Reconcile report plus the raw candidates, for caller visibility."""

    candidates: list[CandidateRecord] = Field(default_factory=list)

    def to_payload(self) -> dict:
        """Response body in the shape served by the scrape endpoint."""
        return {
            "success": True,
            "results": {
                "created": self.created,
                "updated": self.updated,
                "errors": [e.model_dump() for e in self.errors],
            },
            "parsedData": [c.to_payload() for c in self.candidates],
        }
