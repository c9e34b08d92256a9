from .extractor import build_plan, extract, require_text
from .formats import resolve_format
from .models import DocumentFormat, ExtractionRequest, ExtractionResult, ExtractionStrategy

__all__ = [
    "DocumentFormat",
    "ExtractionRequest",
    "ExtractionResult",
    "ExtractionStrategy",
    "build_plan",
    "extract",
    "require_text",
    "resolve_format",
]
