from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

import httpx

from resume_analyzer.core.config import Settings, looks_like_placeholder
from resume_analyzer.core.errors import ConfigurationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ListingMapping:
    """Where a provider keeps its listing records and which keys map to the common shape.

    Keys may be dotted paths into nested objects (``company.display_name``).
    """

    records_key: str
    company: str
    position: str
    apply_url: str


@dataclass(frozen=True)
class ProviderResponse:
    provider: str
    ok: bool
    status_code: int | None = None
    payload: Any = None
    error: str | None = None


@dataclass(frozen=True)
class SearchQuery:
    title: str
    location: str

    @property
    def text(self) -> str:
        return f"{self.title} in {self.location}" if self.location else self.title


class JobProvider(ABC):
    provider_id = "unknown"
    mapping: ListingMapping

    @abstractmethod
    def build_request(self, query: SearchQuery) -> tuple[str, dict[str, Any], dict[str, str]]:
        """Return the URL, query params and headers for ``query``."""

    async def search(self, client: httpx.AsyncClient, query: SearchQuery) -> ProviderResponse:
        url, params, headers = self.build_request(query)
        try:
            response = await client.get(url, params=params, headers=headers)
        except httpx.HTTPError as exc:
            logger.warning("job_provider_request_failed provider=%s: %s", self.provider_id, exc)
            return ProviderResponse(provider=self.provider_id, ok=False, error=str(exc) or type(exc).__name__)

        if response.status_code >= 400:
            logger.warning(
                "job_provider_status provider=%s status=%s",
                self.provider_id,
                response.status_code,
            )
            return ProviderResponse(
                provider=self.provider_id,
                ok=False,
                status_code=response.status_code,
                error=f"HTTP {response.status_code}",
            )
        try:
            payload = response.json()
        except ValueError as exc:
            return ProviderResponse(
                provider=self.provider_id,
                ok=False,
                status_code=response.status_code,
                error=f"invalid JSON: {exc}",
            )
        return ProviderResponse(
            provider=self.provider_id,
            ok=True,
            status_code=response.status_code,
            payload=payload,
        )


@dataclass
class JSearchProvider(JobProvider):
    api_key: str
    host: str = "jsearch.p.rapidapi.com"

    provider_id = "jsearch"
    mapping = ListingMapping(
        records_key="data",
        company="employer_name",
        position="job_title",
        apply_url="job_apply_link",
    )

    def build_request(self, query: SearchQuery) -> tuple[str, dict[str, Any], dict[str, str]]:
        return (
            f"https://{self.host}/search",
            {"query": query.text, "page": 1, "num_pages": 1},
            {"X-RapidAPI-Key": self.api_key, "X-RapidAPI-Host": self.host},
        )


@dataclass
class AdzunaProvider(JobProvider):
    app_id: str
    app_key: str
    country: str = "us"
    results_per_page: int = 10
    extra_params: dict[str, Any] = field(default_factory=dict)

    provider_id = "adzuna"
    mapping = ListingMapping(
        records_key="results",
        company="company.display_name",
        position="title",
        apply_url="redirect_url",
    )

    def build_request(self, query: SearchQuery) -> tuple[str, dict[str, Any], dict[str, str]]:
        params: dict[str, Any] = {
            "app_id": self.app_id,
            "app_key": self.app_key,
            "what": query.title,
            "results_per_page": self.results_per_page,
            "content-type": "application/json",
        }
        params.update(self.extra_params)
        return (f"https://api.adzuna.com/v1/api/jobs/{self.country}/search/1", params, {})


PROVIDER_MAPPINGS: dict[str, ListingMapping] = {
    JSearchProvider.provider_id: JSearchProvider.mapping,
    AdzunaProvider.provider_id: AdzunaProvider.mapping,
}


def _require(value: str | None, env_name: str, provider: str) -> str:
    if looks_like_placeholder(value):
        raise ConfigurationError(
            f"{provider} credentials not configured. Add {env_name} to the environment.",
            code="provider_configuration",
        )
    return str(value).strip()


def build_providers(settings: Settings) -> list[JobProvider]:
    """Instantiate every configured provider, failing fast on missing credentials."""
    providers: list[JobProvider] = []
    for name in settings.job_providers:
        if name == JSearchProvider.provider_id:
            providers.append(JSearchProvider(api_key=_require(settings.rapidapi_key, "RAPIDAPI_KEY", "RapidAPI")))
        elif name == AdzunaProvider.provider_id:
            providers.append(
                AdzunaProvider(
                    app_id=_require(settings.adzuna_app_id, "ADZUNA_APP_ID", "Adzuna"),
                    app_key=_require(settings.adzuna_app_key, "ADZUNA_APP_KEY", "Adzuna"),
                    country=settings.adzuna_country,
                )
            )
        else:
            raise ConfigurationError(f"Unknown job provider '{name}'.", code="provider_configuration")
    return providers
