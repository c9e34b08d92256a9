from __future__ import annotations

import logging
from typing import Any, Iterable, Sequence

from resume_analyzer.schemas.analysis import JobListing

from .providers import PROVIDER_MAPPINGS, ListingMapping, ProviderResponse

logger = logging.getLogger(__name__)

DEFAULT_RESULTS_CAP = 5


def _lookup(record: dict[str, Any], path: str) -> str:
    value: Any = record
    for key in path.split("."):
        if not isinstance(value, dict):
            return ""
        value = value.get(key)
    if value is None:
        return ""
    return str(value).strip()


def _records(payload: Any, mapping: ListingMapping) -> list[Any]:
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        records = payload.get(mapping.records_key)
        if isinstance(records, list):
            return records
    return []


def normalize_response(response: ProviderResponse) -> list[JobListing]:
    if not response.ok:
        return []
    mapping = PROVIDER_MAPPINGS.get(response.provider)
    if mapping is None:
        logger.warning("job_provider_unmapped provider=%s", response.provider)
        return []

    listings: list[JobListing] = []
    for record in _records(response.payload, mapping):
        if not isinstance(record, dict):
            continue
        listing = JobListing(
            company=_lookup(record, mapping.company),
            position=_lookup(record, mapping.position),
            apply_url=_lookup(record, mapping.apply_url),
            source=response.provider,
        )
        if not listing.position and not listing.apply_url:
            logger.debug(
                "job_listing_skipped provider=%s reason=no_title_or_link company=%s",
                response.provider,
                listing.company or "-",
            )
            continue
        listings.append(listing)
    return listings


def dedupe(listings: Iterable[JobListing]) -> list[JobListing]:
    seen: set[tuple[str, str, str]] = set()
    unique: list[JobListing] = []
    for listing in listings:
        if listing.dedup_key in seen:
            continue
        seen.add(listing.dedup_key)
        unique.append(listing)
    return unique


def aggregate(responses: Sequence[ProviderResponse], cap: int = DEFAULT_RESULTS_CAP) -> list[JobListing]:
    """Merge provider responses in call order, keep the first of each duplicate, truncate to ``cap``."""
    merged: list[JobListing] = []
    for response in responses:
        merged.extend(normalize_response(response))
    unique = dedupe(merged)
    result = unique[: max(cap, 0)]
    logger.info(
        "jobs_aggregated providers=%s listings=%s unique=%s returned=%s",
        len(responses),
        len(merged),
        len(unique),
        len(result),
    )
    return result
