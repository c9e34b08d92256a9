from __future__ import annotations

import logging
from functools import partial

from resume_analyzer.core.config import Settings
from resume_analyzer.core.errors import ExtractionFailure, ExtractionFailureReason

from .image import extract_image_text
from .models import DocumentFormat, ExtractionRequest, ExtractionResult, ExtractionStrategy
from .pdf import extract_parenthesized_runs, extract_text_layer, extract_with_remote_service
from .strategies import FormatPlan, Strategy, run_plan
from .word import extract_doc_text, extract_docx_text

logger = logging.getLogger(__name__)

SUPPORTED_FORMATS_LABEL = "PDF, DOCX, DOC, JPG, or PNG"


def build_plan(document_format: DocumentFormat, settings: Settings, *, filename: str = "resume") -> FormatPlan:
    if document_format == DocumentFormat.PDF:
        return FormatPlan(
            document_format=document_format,
            strategies=(
                Strategy(ExtractionStrategy.PDF_TEXT_LAYER, extract_text_layer),
                Strategy(ExtractionStrategy.PDF_BYTE_PATTERN, extract_parenthesized_runs),
                Strategy(
                    ExtractionStrategy.PDF_REMOTE_SERVICE,
                    partial(
                        extract_with_remote_service,
                        api_key=settings.pdf_co_api_key,
                        url=settings.pdf_co_url,
                        timeout_s=settings.pdf_service_timeout_s,
                        filename=filename,
                    ),
                ),
            ),
            failure_reason=ExtractionFailureReason.ALL_STRATEGIES_EXHAUSTED,
            failure_message="Failed to parse PDF file with all available methods",
            require_text=True,
        )
    if document_format == DocumentFormat.DOCX:
        return FormatPlan(
            document_format=document_format,
            strategies=(Strategy(ExtractionStrategy.DOCX_RAW_TEXT, extract_docx_text),),
            failure_reason=ExtractionFailureReason.FORMAT_PARSE_ERROR,
            failure_message="Failed to parse DOCX file",
        )
    if document_format == DocumentFormat.DOC:
        return FormatPlan(
            document_format=document_format,
            strategies=(Strategy(ExtractionStrategy.DOC_BINARY_TEXT, extract_doc_text),),
            failure_reason=ExtractionFailureReason.FORMAT_PARSE_ERROR,
            failure_message="Failed to parse DOC file",
        )
    if document_format.is_image:
        return FormatPlan(
            document_format=document_format,
            strategies=(
                Strategy(
                    ExtractionStrategy.IMAGE_OCR,
                    partial(extract_image_text, language=settings.ocr_language),
                ),
            ),
            failure_reason=ExtractionFailureReason.OCR_ERROR,
            failure_message="Failed to process image with OCR",
        )
    raise ExtractionFailure(
        ExtractionFailureReason.UNSUPPORTED_FORMAT,
        f"Unsupported file type. Please upload {SUPPORTED_FORMATS_LABEL}.",
    )


def extract(request: ExtractionRequest, settings: Settings) -> ExtractionResult:
    if request.declared_format is None:
        raise ExtractionFailure(
            ExtractionFailureReason.UNSUPPORTED_FORMAT,
            f"Unsupported file type. Please upload {SUPPORTED_FORMATS_LABEL}.",
        )
    plan = build_plan(request.declared_format, settings, filename=request.filename)
    logger.info(
        "extraction_started format=%s bytes=%s strategies=%s",
        request.declared_format.value,
        len(request.content),
        len(plan.strategies),
    )
    return run_plan(plan, request.content)


def require_text(result: ExtractionResult) -> str:
    """Return the trimmed text, failing when a nominally successful strategy produced nothing."""
    text = (result.text or "").strip()
    if not text:
        raise ExtractionFailure(
            ExtractionFailureReason.NO_EXTRACTABLE_TEXT,
            "No text found in the resume.",
            warnings=result.warnings,
        )
    return text
