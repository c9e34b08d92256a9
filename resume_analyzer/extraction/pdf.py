from __future__ import annotations

import re
from io import BytesIO

import httpx
from pypdf import PdfReader

from resume_analyzer.core.config import looks_like_placeholder

from .strategies import StrategyError

PARENTHESIZED_RUN = re.compile(rb"\(([^)]+)\)")
ESCAPED_DELIMITER = re.compile(r"\\([()\\])")
ESCAPED_WHITESPACE = re.compile(r"\\[nrtbf]")
REMOTE_PLACEHOLDER_TEXT = "could not extract text from pdf"


def extract_text_layer(content: bytes) -> str:
    reader = PdfReader(BytesIO(content))
    return "\n".join((page.extract_text() or "") for page in reader.pages)


def extract_parenthesized_runs(content: bytes) -> str:
    matches = PARENTHESIZED_RUN.findall(content)
    if not matches:
        raise StrategyError("no parenthesized text runs in byte stream")
    text = " ".join(match.decode("latin-1") for match in matches)
    text = ESCAPED_WHITESPACE.sub(" ", text)
    text = ESCAPED_DELIMITER.sub(r"\1", text)
    return re.sub(r"\s+", " ", text).strip()


def extract_with_remote_service(
    content: bytes,
    *,
    api_key: str | None,
    url: str,
    timeout_s: float,
    filename: str = "resume.pdf",
) -> str:
    if looks_like_placeholder(api_key):
        raise StrategyError("PDF conversion service API key is not configured", configuration=True)

    with httpx.Client(timeout=timeout_s) as client:
        response = client.post(
            url,
            headers={"x-api-key": str(api_key).strip()},
            files={"file": (filename, content, "application/pdf")},
        )
    if response.status_code >= 400:
        raise StrategyError(f"PDF conversion service returned HTTP {response.status_code}")

    payload = response.json()
    if not isinstance(payload, dict):
        raise StrategyError("PDF conversion service returned an unexpected payload")
    if payload.get("error"):
        raise StrategyError(str(payload.get("message") or "PDF conversion service reported an error"))

    text = str(payload.get("body") or "")
    if text.strip().lower() == REMOTE_PLACEHOLDER_TEXT:
        return ""
    return text
