from .aggregate import aggregate, dedupe, normalize_response
from .providers import (
    AdzunaProvider,
    JobProvider,
    JSearchProvider,
    ListingMapping,
    ProviderResponse,
    SearchQuery,
    build_providers,
)
from .search import build_query, gather_provider_responses, search_jobs

__all__ = [
    "AdzunaProvider",
    "JSearchProvider",
    "JobProvider",
    "ListingMapping",
    "ProviderResponse",
    "SearchQuery",
    "aggregate",
    "build_providers",
    "build_query",
    "dedupe",
    "gather_provider_responses",
    "normalize_response",
    "search_jobs",
]
