from __future__ import annotations

import asyncio
import logging
from typing import Sequence

import httpx

from resume_analyzer.parsing.fields import first_list_item
from resume_analyzer.schemas.analysis import JobListing

from .aggregate import aggregate
from .providers import JobProvider, ProviderResponse, SearchQuery

logger = logging.getLogger(__name__)


def build_query(job_titles: str, *, default_title: str, location: str) -> SearchQuery:
    return SearchQuery(title=first_list_item(job_titles) or default_title, location=location)


async def _search_one(
    provider: JobProvider,
    client: httpx.AsyncClient,
    query: SearchQuery,
    timeout_s: float,
) -> ProviderResponse:
    try:
        return await asyncio.wait_for(provider.search(client, query), timeout=timeout_s)
    except asyncio.TimeoutError:
        logger.warning("job_provider_timeout provider=%s timeout_s=%s", provider.provider_id, timeout_s)
        return ProviderResponse(provider=provider.provider_id, ok=False, error="timeout")
    except Exception as exc:  # noqa: BLE001 - one provider must not fail its siblings
        logger.warning("job_provider_failed provider=%s: %s", provider.provider_id, exc)
        return ProviderResponse(provider=provider.provider_id, ok=False, error=str(exc))


async def gather_provider_responses(
    providers: Sequence[JobProvider],
    query: SearchQuery,
    *,
    timeout_s: float = 10.0,
    client: httpx.AsyncClient | None = None,
) -> list[ProviderResponse]:
    """Query every provider concurrently; results keep provider order whatever the outcome."""
    if not providers:
        return []
    if client is not None:
        return list(await asyncio.gather(*(_search_one(p, client, query, timeout_s) for p in providers)))
    async with httpx.AsyncClient(timeout=timeout_s, follow_redirects=True) as owned:
        return list(await asyncio.gather(*(_search_one(p, owned, query, timeout_s) for p in providers)))


async def search_jobs(
    providers: Sequence[JobProvider],
    query: SearchQuery,
    *,
    cap: int,
    timeout_s: float = 10.0,
    client: httpx.AsyncClient | None = None,
) -> list[JobListing]:
    logger.info("job_search_started query=%r providers=%s", query.text, [p.provider_id for p in providers])
    responses = await gather_provider_responses(providers, query, timeout_s=timeout_s, client=client)
    return aggregate(responses, cap)
