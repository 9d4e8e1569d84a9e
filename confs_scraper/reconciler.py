"""Reconcile extracted candidates against the record store.

For each candidate, in order:
1. Normalize both identity URLs
2. Coerce textual dates (leniently) to calendar dates
3. OR-match an existing record by URL or CFP URL
4. Update the match, or create a new record
Failures stay scoped to the candidate that caused them.
"""

from datetime import date
from typing import Optional

from rich.console import Console

from confs_scraper.errors import InvalidCandidateError
from confs_scraper.models import (
    UNKNOWN,
    CandidateRecord,
    ReconcileError,
    ReconcileReport,
    RecordFields,
    StoredRecord,
)
from confs_scraper.normalizers import coerce_date, next_year, normalize_url
from confs_scraper.store import RecordStore

console = Console()


def _optional(value: str) -> Optional[str]:
    """Map the UNKNOWN sentinel (or blank) to None."""
    if not value or value == UNKNOWN:
        return None
    return value


def build_fields(
    candidate: CandidateRecord,
    reference_date: Optional[date] = None,
) -> RecordFields:
    """Turn a candidate into the field values written to the store.

    Raises:
        InvalidCandidateError: the candidate has no usable URL.
    """
    normalized_url = normalize_url(candidate.url)
    if normalized_url is None:
        raise InvalidCandidateError("Candidate has no conference URL")

    start_date = coerce_date(candidate.start_date, reference_date)
    end_date = coerce_date(candidate.end_date, reference_date)
    # "Dec 30 - Jan 2" ends in the following year
    if start_date and end_date and end_date < start_date:
        end_date = next_year(end_date)

    return RecordFields(
        name=candidate.name,
        url=candidate.url,
        normalized_url=normalized_url,
        cfp_url=_optional(candidate.cfp_url),
        normalized_cfp_url=normalize_url(candidate.cfp_url),
        start_date=start_date,
        end_date=end_date,
        cfp_end_date=coerce_date(candidate.cfp_end_date, reference_date),
        city=_optional(candidate.city),
        country=_optional(candidate.country),
        twitter=_optional(candidate.twitter),
        mastodon=_optional(candidate.mastodon),
        topics=list(candidate.topics),
        code_of_conduct=_optional(candidate.code_of_conduct),
    )


def resolve_conflict(
    store: RecordStore,
    match: StoredRecord,
    fields: RecordFields,
    identifier: str,
) -> RecordFields:
    """Keep a URL match from taking a CFP URL owned by another record.

    When the URL key points at one record and the CFP key at another, the URL
    match wins but keeps its own CFP URL; the other record is left alone.
    """
    if not fields.normalized_cfp_url or fields.normalized_cfp_url == match.normalized_cfp_url:
        return fields

    cfp_owner = store.find_by_cfp_url(fields.normalized_cfp_url)
    if cfp_owner is None or cfp_owner.id == match.id:
        return fields

    console.print(
        f"[yellow]Identity conflict for '{identifier}': URL matches record {match.id}, "
        f"CFP URL {fields.normalized_cfp_url} belongs to record {cfp_owner.id}. "
        f"Updating the URL match only.[/yellow]"
    )
    return fields.model_copy(
        update={"cfp_url": match.cfp_url, "normalized_cfp_url": match.normalized_cfp_url}
    )


def reconcile_one(
    candidate: CandidateRecord,
    store: RecordStore,
    reference_date: Optional[date] = None,
) -> bool:
    """Create or update the record for one candidate.

    Returns True if a record was created, False if one was updated.
    """
    fields = build_fields(candidate, reference_date)
    match = store.find_by_identity(fields.normalized_url, fields.normalized_cfp_url)

    if match is None:
        store.create(fields)
        return True

    if match.normalized_url == fields.normalized_url:
        fields = resolve_conflict(store, match, fields, candidate.identifier)
    store.update(match.id, fields)
    return False


def reconcile(
    candidates: list[CandidateRecord],
    store: RecordStore,
    reference_date: Optional[date] = None,
) -> ReconcileReport:
    """Reconcile a batch of candidates against the store.

    Args:
        candidates: Extracted candidates, processed in order
        store: Record store to create/update in
        reference_date: Supplies the year for year-less dates (default: today)

    Returns:
        Counts of created and updated records, plus one error entry per
        candidate that failed.
    """
    report = ReconcileReport()

    for candidate in candidates:
        try:
            if reconcile_one(candidate, store, reference_date):
                report.created += 1
            else:
                report.updated += 1
        except Exception as e:
            report.errors.append(ReconcileError(identifier=candidate.identifier, message=str(e)))
            console.print(f"[red]Failed to save '{candidate.identifier}': {e}[/red]")

    return report
