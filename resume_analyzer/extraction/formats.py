from __future__ import annotations

from .models import DocumentFormat

CONTENT_TYPE_FORMAT_HINTS = {
    "application/pdf": DocumentFormat.PDF,
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": DocumentFormat.DOCX,
    "application/msword": DocumentFormat.DOC,
    "image/jpeg": DocumentFormat.JPEG,
    "image/jpg": DocumentFormat.JPEG,
    "image/pjpeg": DocumentFormat.JPEG,
    "image/png": DocumentFormat.PNG,
}

EXTENSION_FORMAT_HINTS = {
    "pdf": DocumentFormat.PDF,
    "docx": DocumentFormat.DOCX,
    "doc": DocumentFormat.DOC,
    "jpg": DocumentFormat.JPEG,
    "jpeg": DocumentFormat.JPEG,
    "png": DocumentFormat.PNG,
}


def extension_from_filename(filename: str) -> str:
    if "." not in (filename or ""):
        return ""
    return filename.rsplit(".", 1)[-1].strip().lower()[:20]


def resolve_format(*, content_type: str | None, filename: str | None) -> DocumentFormat | None:
    """Map an upload's declared MIME type (preferred) or extension to a format.

    Returns ``None`` when neither hint names a supported format.
    """
    mime = (content_type or "").split(";")[0].strip().lower()
    explicit = CONTENT_TYPE_FORMAT_HINTS.get(mime)
    if explicit:
        return explicit
    return EXTENSION_FORMAT_HINTS.get(extension_from_filename(filename or ""))
