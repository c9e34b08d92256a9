from __future__ import annotations

import re
import struct
from io import BytesIO

import olefile
from docx import Document

# Word 97-2003 File Information Block offsets.
FIB_IDENT = 0xA5EC
FIB_FLAGS_OFFSET = 0x000A
FIB_CCP_TEXT_OFFSET = 0x004C
FIB_FC_CLX_OFFSET = 0x01A2
FIB_LCB_CLX_OFFSET = 0x01A6
FLAG_WHICH_TABLE = 0x0200
FLAG_ENCRYPTED = 0x0100
FC_COMPRESSED = 0x40000000

FIELD_INSTRUCTION = re.compile(r"\x13[^\x13\x14\x15]*\x14")
CONTROL_CHARS = re.compile(r"[\x00-\x08\x0e-\x1f]")


def extract_docx_text(content: bytes) -> str:
    document = Document(BytesIO(content))
    lines = [paragraph.text for paragraph in document.paragraphs]
    for table in document.tables:
        for row in table.rows:
            cells = [cell.text.strip() for cell in row.cells if cell.text and cell.text.strip()]
            if cells:
                lines.append("\t".join(dict.fromkeys(cells)))
    return "\n".join(lines)


def extract_doc_text(content: bytes) -> str:
    with olefile.OleFileIO(BytesIO(content)) as ole:
        if not ole.exists("WordDocument"):
            raise ValueError("OLE container has no WordDocument stream")
        word_stream = ole.openstream("WordDocument").read()
        table_name = table_stream_name(word_stream)
        if not ole.exists(table_name):
            raise ValueError(f"OLE container has no {table_name} stream")
        table_stream = ole.openstream(table_name).read()
    return text_from_word_streams(word_stream, table_stream)


def table_stream_name(word_stream: bytes) -> str:
    if len(word_stream) < FIB_LCB_CLX_OFFSET + 4:
        raise ValueError("WordDocument stream is too short")
    ident, = struct.unpack_from("<H", word_stream, 0)
    if ident != FIB_IDENT:
        raise ValueError("WordDocument stream has an unknown signature")
    flags, = struct.unpack_from("<H", word_stream, FIB_FLAGS_OFFSET)
    if flags & FLAG_ENCRYPTED:
        raise ValueError("Encrypted Word documents are not supported")
    return "1Table" if flags & FLAG_WHICH_TABLE else "0Table"


def _piece_table(table_stream: bytes, fc_clx: int, lcb_clx: int) -> bytes:
    pos = fc_clx
    end = fc_clx + lcb_clx
    # Skip Prc (property modifier) entries preceding the piece table.
    while pos < end and table_stream[pos] == 0x01:
        cb_grpprl, = struct.unpack_from("<h", table_stream, pos + 1)
        pos += 3 + cb_grpprl
    if pos >= end or table_stream[pos] != 0x02:
        raise ValueError("Piece table not found in Word document")
    lcb, = struct.unpack_from("<I", table_stream, pos + 1)
    return table_stream[pos + 5 : pos + 5 + lcb]


def text_from_word_streams(word_stream: bytes, table_stream: bytes) -> str:
    table_stream_name(word_stream)
    ccp_text, = struct.unpack_from("<i", word_stream, FIB_CCP_TEXT_OFFSET)
    fc_clx, = struct.unpack_from("<I", word_stream, FIB_FC_CLX_OFFSET)
    lcb_clx, = struct.unpack_from("<I", word_stream, FIB_LCB_CLX_OFFSET)

    plc = _piece_table(table_stream, fc_clx, lcb_clx)
    piece_count = (len(plc) - 4) // 12
    if piece_count <= 0:
        return ""
    cps = struct.unpack_from(f"<{piece_count + 1}I", plc, 0)
    descriptors_offset = 4 * (piece_count + 1)

    parts: list[str] = []
    for index in range(piece_count):
        char_count = cps[index + 1] - cps[index]
        if char_count <= 0:
            continue
        fc_value, = struct.unpack_from("<I", plc, descriptors_offset + 8 * index + 2)
        if fc_value & FC_COMPRESSED:
            start = (fc_value & ~FC_COMPRESSED) // 2
            parts.append(word_stream[start : start + char_count].decode("cp1252", errors="replace"))
        else:
            parts.append(word_stream[fc_value : fc_value + 2 * char_count].decode("utf-16-le", errors="replace"))

    text = "".join(parts)
    if 0 < ccp_text <= len(text):
        text = text[:ccp_text]
    return _clean_word_text(text)


def _clean_word_text(text: str) -> str:
    text = FIELD_INSTRUCTION.sub("", text)
    text = text.replace("\x15", "").replace("\x13", "").replace("\x14", "")
    text = text.replace("\r", "\n").replace("\x0b", "\n").replace("\x0c", "\n").replace("\x07", "\t")
    return CONTROL_CHARS.sub("", text)
