from __future__ import annotations

from enum import Enum


class ExtractionFailureReason(str, Enum):
    UNSUPPORTED_FORMAT = "UnsupportedFormat"
    FORMAT_PARSE_ERROR = "FormatParseError"
    OCR_ERROR = "OcrError"
    ALL_STRATEGIES_EXHAUSTED = "AllStrategiesExhausted"
    NO_EXTRACTABLE_TEXT = "NoExtractableText"


class AnalyzerError(Exception):
    """Base for every failure that is reported to the caller as ``{"error": ...}``."""

    status_code = 500
    code = "internal_error"

    def __init__(self, message: str, *, code: str | None = None):
        super().__init__(message)
        if code:
            self.code = code
        self.stage: str | None = None


class ClientInputError(AnalyzerError):
    status_code = 400
    code = "client_input"


class ExtractionFailure(AnalyzerError):
    status_code = 400
    code = "extraction_failed"

    def __init__(self, reason: ExtractionFailureReason, message: str, *, warnings: list[str] | None = None):
        super().__init__(message, code=reason.value)
        self.reason = reason
        self.warnings = list(warnings or [])


class DependencyUnavailable(AnalyzerError):
    status_code = 500
    code = "dependency_unavailable"


class ConfigurationError(DependencyUnavailable):
    code = "configuration"
