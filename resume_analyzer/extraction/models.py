from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class DocumentFormat(str, Enum):
    PDF = "pdf"
    DOCX = "docx"
    DOC = "doc"
    JPEG = "jpeg"
    PNG = "png"

    @property
    def is_image(self) -> bool:
        return self in {DocumentFormat.JPEG, DocumentFormat.PNG}

    @property
    def mime_type(self) -> str:
        return FORMAT_MIME_TYPES[self]


FORMAT_MIME_TYPES = {
    DocumentFormat.PDF: "application/pdf",
    DocumentFormat.DOCX: "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    DocumentFormat.DOC: "application/msword",
    DocumentFormat.JPEG: "image/jpeg",
    DocumentFormat.PNG: "image/png",
}


class ExtractionStrategy(str, Enum):
    PDF_TEXT_LAYER = "pdf_text_layer"
    PDF_BYTE_PATTERN = "pdf_byte_pattern"
    PDF_REMOTE_SERVICE = "pdf_remote_service"
    DOCX_RAW_TEXT = "docx_raw_text"
    DOC_BINARY_TEXT = "doc_binary_text"
    IMAGE_OCR = "image_ocr"


@dataclass(frozen=True)
class ExtractionRequest:
    content: bytes
    declared_format: DocumentFormat | None
    filename: str = "resume"


@dataclass
class ExtractionResult:
    text: str
    strategy_used: ExtractionStrategy
    warnings: list[str] = field(default_factory=list)
