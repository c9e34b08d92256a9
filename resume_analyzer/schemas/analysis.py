from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class JobListing(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    company: str = ""
    position: str = ""
    apply_url: str = ""
    source: str

    @property
    def dedup_key(self) -> tuple[str, str, str]:
        return (self.company, self.position, self.apply_url)


class AnalysisResult(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    analysis_type: str
    fields: dict[str, str] = Field(default_factory=dict)
    jobs: list[JobListing] = Field(default_factory=list)
    filename: str
    full_response: str = ""
    extraction_strategy: str | None = None
    warnings: list[str] = Field(default_factory=list)

    def to_payload(self) -> dict[str, Any]:
        """Flatten parsed fields next to ``jobs``, ``filename`` and ``fullResponse``."""
        payload: dict[str, Any] = dict(self.fields)
        payload.update(
            {
                "analysisType": self.analysis_type,
                "jobs": [job.model_dump(by_alias=True) for job in self.jobs],
                "filename": self.filename,
                "fullResponse": self.full_response,
                "extractionStrategy": self.extraction_strategy,
                "warnings": list(self.warnings),
            }
        )
        return payload


class ErrorResponse(BaseModel):
    error: str
