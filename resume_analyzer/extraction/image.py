from __future__ import annotations

import re
from io import BytesIO

import pytesseract
from PIL import Image

WORD_RUN = re.compile(r"\w{2,}")


def filter_ocr_lines(text: str) -> str:
    """Drop OCR noise: keep only lines containing a run of two or more word characters."""
    return "\n".join(line for line in (text or "").splitlines() if WORD_RUN.search(line))


def extract_image_text(content: bytes, *, language: str = "eng") -> str:
    with Image.open(BytesIO(content)) as image:
        image.load()
        raw = pytesseract.image_to_string(image, lang=language)
    return filter_ocr_lines(raw)
