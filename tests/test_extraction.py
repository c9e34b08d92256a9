import struct
import sys
import unittest
from io import BytesIO
from pathlib import Path
from unittest.mock import MagicMock, patch

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from docx import Document  # noqa: E402
from PIL import Image  # noqa: E402

from resume_analyzer.core.config import Settings  # noqa: E402
from resume_analyzer.core.errors import ExtractionFailure, ExtractionFailureReason  # noqa: E402
from resume_analyzer.extraction import (  # noqa: E402
    DocumentFormat,
    ExtractionRequest,
    ExtractionResult,
    ExtractionStrategy,
    extract,
    require_text,
    resolve_format,
)
from resume_analyzer.extraction.image import filter_ocr_lines  # noqa: E402
from resume_analyzer.extraction.pdf import extract_parenthesized_runs  # noqa: E402
from resume_analyzer.extraction.word import text_from_word_streams  # noqa: E402


def build_text_pdf(lines: list[str]) -> bytes:
    stream = ("BT /F1 12 Tf 72 720 Td 14 TL " + " ".join(f"({line}) Tj T*" for line in lines) + " ET").encode("latin-1")
    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        b"<< /Type /Pages /Kids [3 0 R] /Count 1 >>",
        b"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] /Contents 4 0 R "
        b"/Resources << /Font << /F1 5 0 R >> >> >>",
        b"<< /Length %d >>\nstream\n" % len(stream) + stream + b"\nendstream",
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
    ]
    out = bytearray(b"%PDF-1.4\n")
    offsets = []
    for number, body in enumerate(objects, start=1):
        offsets.append(len(out))
        out += b"%d 0 obj\n" % number + body + b"\nendobj\n"
    xref_offset = len(out)
    out += b"xref\n0 %d\n" % (len(objects) + 1)
    out += b"0000000000 65535 f \n"
    for offset in offsets:
        out += b"%010d 00000 n \n" % offset
    out += b"trailer\n<< /Size %d /Root 1 0 R >>\nstartxref\n%d\n%%%%EOF\n" % (len(objects) + 1, xref_offset)
    return bytes(out)


def build_docx(paragraphs: list[str]) -> bytes:
    document = Document()
    for paragraph in paragraphs:
        document.add_paragraph(paragraph)
    buffer = BytesIO()
    document.save(buffer)
    return buffer.getvalue()


def build_word97_streams(text: str, which_table: int = 1) -> tuple[bytes, bytes]:
    text_offset = 0x400
    encoded = text.encode("cp1252")
    word = bytearray(text_offset + len(encoded))
    struct.pack_into("<H", word, 0, 0xA5EC)
    struct.pack_into("<H", word, 0x000A, 0x0200 if which_table else 0)
    struct.pack_into("<i", word, 0x004C, len(text))
    word[text_offset:] = encoded

    plc = struct.pack("<II", 0, len(text)) + struct.pack("<HIH", 0, 0x40000000 | (text_offset * 2), 0)
    clx = b"\x02" + struct.pack("<I", len(plc)) + plc
    struct.pack_into("<I", word, 0x01A2, 0)
    struct.pack_into("<I", word, 0x01A6, len(clx))
    return bytes(word), clx


def build_png() -> bytes:
    buffer = BytesIO()
    Image.new("RGB", (24, 24), color="white").save(buffer, format="PNG")
    return buffer.getvalue()


class FormatResolutionTests(unittest.TestCase):
    def test_mime_type_wins_over_extension(self):
        self.assertEqual(resolve_format(content_type="application/pdf", filename="cv.docx"), DocumentFormat.PDF)

    def test_extension_used_when_mime_is_generic(self):
        self.assertEqual(
            resolve_format(content_type="application/octet-stream", filename="Resume.JPEG"),
            DocumentFormat.JPEG,
        )
        self.assertEqual(resolve_format(content_type=None, filename="legacy.doc"), DocumentFormat.DOC)

    def test_unknown_format_resolves_to_none(self):
        self.assertIsNone(resolve_format(content_type="text/plain", filename="notes.txt"))


class PdfExtractionTests(unittest.TestCase):
    def setUp(self):
        self.settings = Settings(pdf_co_api_key=None)

    def test_text_layer_extracts_every_page(self):
        content = build_text_pdf(["Jane Doe", "Senior Python Engineer"])
        result = extract(ExtractionRequest(content=content, declared_format=DocumentFormat.PDF), self.settings)
        self.assertEqual(result.strategy_used, ExtractionStrategy.PDF_TEXT_LAYER)
        self.assertIn("Jane Doe", result.text)
        self.assertIn("Senior Python Engineer", result.text)

    def test_corrupted_text_layer_falls_back_to_byte_pattern(self):
        content = b"%PDF-1.4\n1 0 obj broken BT (Jane Doe) Tj (Python\\nEngineer) Tj ET garbage"
        result = extract(ExtractionRequest(content=content, declared_format=DocumentFormat.PDF), self.settings)
        self.assertEqual(result.strategy_used, ExtractionStrategy.PDF_BYTE_PATTERN)
        self.assertEqual(result.text, "Jane Doe Python Engineer")
        self.assertTrue(result.warnings)

    def test_all_strategies_failing_reports_exhaustion(self):
        content = b"%PDF-1.4\ncorrupted stream without any text runs"
        with self.assertRaises(ExtractionFailure) as ctx:
            extract(ExtractionRequest(content=content, declared_format=DocumentFormat.PDF), self.settings)
        self.assertEqual(ctx.exception.reason, ExtractionFailureReason.ALL_STRATEGIES_EXHAUSTED)
        self.assertEqual(ctx.exception.status_code, 400)
        self.assertTrue(any("pdf_remote_service" in warning for warning in ctx.exception.warnings))

    def test_placeholder_api_key_skips_remote_service(self):
        settings = Settings(pdf_co_api_key="your-free-api-key-here")
        with patch("resume_analyzer.extraction.pdf.httpx.Client") as client_cls:
            with self.assertRaises(ExtractionFailure):
                extract(
                    ExtractionRequest(content=b"%PDF-1.4\nno runs", declared_format=DocumentFormat.PDF),
                    settings,
                )
        client_cls.assert_not_called()

    def test_remote_service_is_last_resort(self):
        settings = Settings(pdf_co_api_key="real-key")
        response = MagicMock(status_code=200)
        response.json.return_value = {"error": False, "body": "Jane Doe\nData Engineer"}
        with patch("resume_analyzer.extraction.pdf.httpx.Client") as client_cls:
            client = client_cls.return_value.__enter__.return_value
            client.post.return_value = response
            result = extract(
                ExtractionRequest(content=b"%PDF-1.4\nno runs", declared_format=DocumentFormat.PDF, filename="cv.pdf"),
                settings,
            )
        self.assertEqual(result.strategy_used, ExtractionStrategy.PDF_REMOTE_SERVICE)
        self.assertIn("Data Engineer", result.text)
        _, kwargs = client.post.call_args
        self.assertEqual(kwargs["headers"], {"x-api-key": "real-key"})

    def test_byte_pattern_collapses_escapes(self):
        text = extract_parenthesized_runs(b"(Hello\\tWorld)\n  (Senior\\nEngineer)")
        self.assertEqual(text, "Hello World Senior Engineer")


class WordExtractionTests(unittest.TestCase):
    def test_docx_raw_text(self):
        content = build_docx(["Jane Doe", "5 years experience in Go and Rust"])
        result = extract(ExtractionRequest(content=content, declared_format=DocumentFormat.DOCX), Settings())
        self.assertEqual(result.strategy_used, ExtractionStrategy.DOCX_RAW_TEXT)
        self.assertIn("5 years experience in Go and Rust", result.text)

    def test_broken_docx_is_format_parse_error(self):
        with self.assertRaises(ExtractionFailure) as ctx:
            extract(ExtractionRequest(content=b"PK\x03\x04 not a zip", declared_format=DocumentFormat.DOCX), Settings())
        self.assertEqual(ctx.exception.reason, ExtractionFailureReason.FORMAT_PARSE_ERROR)

    def test_word97_piece_table(self):
        word, table = build_word97_streams("Jane Doe\rSenior Engineer\r")
        self.assertEqual(text_from_word_streams(word, table), "Jane Doe\nSenior Engineer\n")

    def _extract_doc_from_streams(self, streams: dict[str, bytes]) -> ExtractionResult:
        with patch("resume_analyzer.extraction.word.olefile.OleFileIO") as ole_cls:
            ole = ole_cls.return_value.__enter__.return_value
            ole.exists.side_effect = lambda name: name in streams
            ole.openstream.side_effect = lambda name: BytesIO(streams[name])
            return extract(
                ExtractionRequest(content=b"\xd0\xcf\x11\xe0 ole bytes", declared_format=DocumentFormat.DOC),
                Settings(),
            )

    def test_doc_extraction_reads_1table_stream(self):
        word, table = build_word97_streams("Jane Doe\rSenior Engineer\r", which_table=1)
        result = self._extract_doc_from_streams({"WordDocument": word, "1Table": table, "0Table": b""})
        self.assertEqual(result.strategy_used, ExtractionStrategy.DOC_BINARY_TEXT)
        self.assertEqual(result.text, "Jane Doe\nSenior Engineer\n")

    def test_doc_extraction_reads_0table_stream(self):
        word, table = build_word97_streams("Jane Doe\rData Analyst\r", which_table=0)
        result = self._extract_doc_from_streams({"WordDocument": word, "0Table": table})
        self.assertEqual(result.strategy_used, ExtractionStrategy.DOC_BINARY_TEXT)
        self.assertIn("Data Analyst", result.text)

    def test_doc_without_word_stream_is_format_parse_error(self):
        with self.assertRaises(ExtractionFailure) as ctx:
            self._extract_doc_from_streams({"1Table": b""})
        self.assertEqual(ctx.exception.reason, ExtractionFailureReason.FORMAT_PARSE_ERROR)

    def test_non_ole_doc_is_format_parse_error(self):
        with self.assertRaises(ExtractionFailure) as ctx:
            extract(ExtractionRequest(content=b"plain bytes, not OLE", declared_format=DocumentFormat.DOC), Settings())
        self.assertEqual(ctx.exception.reason, ExtractionFailureReason.FORMAT_PARSE_ERROR)


class ImageExtractionTests(unittest.TestCase):
    def test_ocr_noise_lines_are_dropped(self):
        self.assertEqual(filter_ocr_lines("Jane Doe\n|| ~\n. ,\nPython Engineer\n"), "Jane Doe\nPython Engineer")

    def test_image_ocr_strategy(self):
        with patch(
            "resume_analyzer.extraction.image.pytesseract.image_to_string",
            return_value="Jane Doe\n—\nBackend Engineer",
        ) as ocr:
            result = extract(ExtractionRequest(content=build_png(), declared_format=DocumentFormat.PNG), Settings())
        self.assertEqual(result.strategy_used, ExtractionStrategy.IMAGE_OCR)
        self.assertEqual(result.text, "Jane Doe\nBackend Engineer")
        self.assertEqual(ocr.call_args.kwargs["lang"], "eng")

    def test_ocr_engine_error(self):
        with patch(
            "resume_analyzer.extraction.image.pytesseract.image_to_string",
            side_effect=RuntimeError("tesseract crashed"),
        ):
            with self.assertRaises(ExtractionFailure) as ctx:
                extract(ExtractionRequest(content=build_png(), declared_format=DocumentFormat.JPEG), Settings())
        self.assertEqual(ctx.exception.reason, ExtractionFailureReason.OCR_ERROR)


class ExtractionContractTests(unittest.TestCase):
    def test_unsupported_format_attempts_nothing(self):
        with patch("resume_analyzer.extraction.extractor.run_plan") as run_plan:
            with self.assertRaises(ExtractionFailure) as ctx:
                extract(ExtractionRequest(content=b"hello", declared_format=None), Settings())
        run_plan.assert_not_called()
        self.assertEqual(ctx.exception.reason, ExtractionFailureReason.UNSUPPORTED_FORMAT)

    def test_blank_text_is_reported_not_dropped(self):
        blank = ExtractionResult(text=" \n\t ", strategy_used=ExtractionStrategy.DOCX_RAW_TEXT)
        with self.assertRaises(ExtractionFailure) as ctx:
            require_text(blank)
        self.assertEqual(ctx.exception.reason, ExtractionFailureReason.NO_EXTRACTABLE_TEXT)

        kept = ExtractionResult(text="  Jane  ", strategy_used=ExtractionStrategy.DOCX_RAW_TEXT)
        self.assertEqual(require_text(kept), "Jane")


if __name__ == "__main__":
    unittest.main()
