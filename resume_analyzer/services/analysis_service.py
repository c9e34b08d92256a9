from __future__ import annotations

import asyncio
import logging
import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Sequence

import httpx

from resume_analyzer.ai.client import ModelUnavailableError
from resume_analyzer.ai.types import ChatMessage, ChatModel, ImageAttachment
from resume_analyzer.core.config import Settings
from resume_analyzer.core.errors import AnalyzerError, ClientInputError
from resume_analyzer.extraction import (
    DocumentFormat,
    ExtractionRequest,
    ExtractionResult,
    extract,
    require_text,
    resolve_format,
)
from resume_analyzer.jobs import JobProvider, build_providers, build_query, search_jobs
from resume_analyzer.parsing import AnalysisProfile, ParsedFields, get_profile, parse_fields
from resume_analyzer.schemas.analysis import AnalysisResult, JobListing

logger = logging.getLogger(__name__)

ProviderFactory = Callable[[Settings], Sequence[JobProvider]]


class PipelineStage(str, Enum):
    RECEIVED = "received"
    EXTRACTING = "extracting"
    EXTRACTED = "extracted"
    ANALYZING = "analyzing"
    ANALYZED = "analyzed"
    JOB_SEARCHING = "job_searching"
    COMPLETE = "complete"
    ERRORED = "errored"


@dataclass(frozen=True)
class UploadedResume:
    filename: str
    content: bytes
    content_type: str | None = None


class ResumeAnalysisPipeline:
    """Upload -> text extraction -> model analysis -> field parsing -> job enrichment.

    Collaborators are injected so the HTTP layer and tests decide which model
    client, provider set and HTTP client are used. Instances hold no per-request
    state and may serve concurrent requests.
    """

    def __init__(
        self,
        settings: Settings,
        chat_model: ChatModel,
        *,
        provider_factory: ProviderFactory = build_providers,
        http_client: httpx.AsyncClient | None = None,
    ):
        self._settings = settings
        self._chat_model = chat_model
        self._provider_factory = provider_factory
        self._http_client = http_client

    @property
    def max_upload_bytes(self) -> int:
        return self._settings.max_upload_bytes

    async def run(self, upload: UploadedResume | None, *, analysis_type: str | None = None) -> AnalysisResult:
        request_id = uuid.uuid4().hex[:12]
        stage = PipelineStage.RECEIVED
        self._log_stage(request_id, stage)
        try:
            profile = self._validate(upload, analysis_type)

            stage = PipelineStage.EXTRACTING
            self._log_stage(request_id, stage)
            document_format, extraction = await self._extract(upload)
            text = require_text(extraction)

            stage = PipelineStage.EXTRACTED
            self._log_stage(request_id, stage, chars=len(text), strategy=extraction.strategy_used.value)

            stage = PipelineStage.ANALYZING
            self._log_stage(request_id, stage)
            reply = await self._analyze(profile, text, upload, document_format)

            stage = PipelineStage.ANALYZED
            parsed = parse_fields(reply, profile.schema)
            self._log_stage(request_id, stage, matched=len(parsed.matched), fields=len(profile.schema))

            jobs: list[JobListing] = []
            if self._job_search_enabled():
                stage = PipelineStage.JOB_SEARCHING
                self._log_stage(request_id, stage)
                jobs = await self._search_jobs(profile, parsed)

            stage = PipelineStage.COMPLETE
            self._log_stage(request_id, stage, jobs=len(jobs))
            return AnalysisResult(
                analysis_type=profile.name,
                fields=dict(parsed.values),
                jobs=jobs,
                filename=upload.filename,
                full_response=parsed.raw_response,
                extraction_strategy=extraction.strategy_used.value,
                warnings=list(extraction.warnings),
            )
        except AnalyzerError as exc:
            exc.stage = stage.value
            logger.warning(
                "analysis_stage request_id=%s stage=%s failed_at=%s code=%s: %s",
                request_id,
                PipelineStage.ERRORED.value,
                stage.value,
                exc.code,
                exc,
            )
            raise

    def _validate(self, upload: UploadedResume | None, analysis_type: str | None) -> AnalysisProfile:
        if upload is None or (not upload.filename and not upload.content):
            raise ClientInputError("No resume file provided")
        if not upload.content:
            raise ClientInputError("Uploaded resume file is empty")
        if len(upload.content) > self._settings.max_upload_bytes:
            raise ClientInputError(
                f"File too large. Maximum allowed size is {self._settings.max_upload_bytes // (1024 * 1024)} MB."
            )
        return get_profile(analysis_type)

    async def _extract(self, upload: UploadedResume) -> tuple[DocumentFormat | None, ExtractionResult]:
        document_format = resolve_format(content_type=upload.content_type, filename=upload.filename)
        request = ExtractionRequest(
            content=upload.content,
            declared_format=document_format,
            filename=upload.filename or "resume",
        )
        result = await asyncio.to_thread(extract, request, self._settings)
        return document_format, result

    def _build_messages(
        self,
        profile: AnalysisProfile,
        text: str,
        upload: UploadedResume,
        document_format: DocumentFormat | None,
    ) -> list[ChatMessage]:
        truncated = text[: max(self._settings.model_input_max_chars, 1)]
        image = None
        if self._settings.llm_vision_enabled and document_format is not None and document_format.is_image:
            image = ImageAttachment(mime_type=document_format.mime_type, data=upload.content)
        return [ChatMessage(role="user", content=profile.build_prompt(truncated), image=image)]

    async def _analyze(
        self,
        profile: AnalysisProfile,
        text: str,
        upload: UploadedResume,
        document_format: DocumentFormat | None,
    ) -> str:
        messages = self._build_messages(profile, text, upload, document_format)
        try:
            return await asyncio.wait_for(
                self._chat_model.complete(messages),
                timeout=self._settings.llm_timeout_s,
            )
        except AnalyzerError:
            raise
        except asyncio.TimeoutError as exc:
            raise ModelUnavailableError("Language model request timed out.") from exc
        except Exception as exc:  # noqa: BLE001 - any model failure aborts the analysis
            raise ModelUnavailableError(f"Language model analysis failed: {str(exc) or type(exc).__name__}") from exc

    def _job_search_enabled(self) -> bool:
        return (
            self._settings.job_search_enabled
            and self._settings.job_results_cap > 0
            and bool(self._settings.job_providers)
        )

    async def _search_jobs(self, profile: AnalysisProfile, parsed: ParsedFields) -> list[JobListing]:
        providers = self._provider_factory(self._settings)
        query = build_query(
            parsed.values.get(profile.job_title_field, ""),
            default_title=self._settings.job_search_default_title,
            location=self._settings.job_search_location,
        )
        return await search_jobs(
            providers,
            query,
            cap=self._settings.job_results_cap,
            timeout_s=self._settings.job_provider_timeout_s,
            client=self._http_client,
        )

    @staticmethod
    def _log_stage(request_id: str, stage: PipelineStage, **details: object) -> None:
        extra = "".join(f" {key}={value}" for key, value in details.items())
        logger.info("analysis_stage request_id=%s stage=%s%s", request_id, stage.value, extra)
