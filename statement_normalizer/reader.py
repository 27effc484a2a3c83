"""
Statement reader: raw upload bytes -> text -> rectangular grid of cells.

Responsibilities:
- encoding detection + decoding
- delimiter detection (tab, semicolon, comma)
- quote-aware field splitting
- blank row removal and row width padding
"""

from __future__ import annotations

import re
from typing import List

from charset_normalizer import from_bytes

from .logging_setup import get_logger
from .rules import DELIMITER_PRIORITY, NORMALIZED_DELIMITER, TARGET_ENCODING

logger = get_logger(__name__)

RawGrid = List[List[str]]

_LINE_BREAK = re.compile(r"\r\n|\n")


def decode_content(raw: bytes) -> str:
    """
    Decode upload bytes to text.

    Rules:
    - Detect encoding best-effort via charset-normalizer.
    - A UTF-8 BOM is consumed, never returned as text.
    - If the detected codec fails, try UTF-8, then decode with replacement
      characters so the pipeline can continue deterministically.
    """
    if not raw:
        return ""

    match = from_bytes(raw).best()
    detected = match.encoding if match is not None else None

    decode_used = detected or TARGET_ENCODING
    if raw.startswith(b"\xef\xbb\xbf") and decode_used.lower().replace("-", "_") in ("utf_8", "utf8"):
        decode_used = "utf-8-sig"

    try:
        text = raw.decode(decode_used)
    except (UnicodeDecodeError, LookupError):
        try:
            text = raw.decode("utf-8-sig")
            decode_used = "utf-8-sig"
        except UnicodeDecodeError:
            text = raw.decode(TARGET_ENCODING, errors="replace")
            decode_used = f"{TARGET_ENCODING} (replace)"

    logger.debug("decoded %d bytes using %s (detected=%s)", len(raw), decode_used, detected)
    return text


def split_lines(text: str) -> List[str]:
    return [line for line in _LINE_BREAK.split(text) if line.strip()]


def detect_delimiter(text: str) -> str:
    """Pick the delimiter from the first non-empty line of ``text``."""
    for line in _LINE_BREAK.split(text):
        if not line.strip():
            continue
        for candidate in DELIMITER_PRIORITY:
            if candidate in line:
                return candidate
        break
    return NORMALIZED_DELIMITER


def split_fields(line: str, delimiter: str = NORMALIZED_DELIMITER) -> List[str]:
    """Split one line on ``delimiter`` outside double quotes.

    Any quote toggles the quoted state, wherever it sits in the field, and is
    dropped from the output. Inside quotes, ``""`` is one literal quote.
    """
    fields: List[str] = []
    buf: List[str] = []
    in_quotes = False
    i = 0
    while i < len(line):
        ch = line[i]
        if ch == '"':
            if in_quotes and line[i + 1:i + 2] == '"':
                buf.append('"')
                i += 2
                continue
            in_quotes = not in_quotes
        elif ch == delimiter and not in_quotes:
            fields.append("".join(buf).strip())
            buf = []
        else:
            buf.append(ch)
        i += 1
    fields.append("".join(buf).strip())
    return fields


def read_grid(text: str) -> RawGrid:
    """Turn statement text into rows of trimmed cells.

    The delimiter is detected once and applied to every line. Rows whose
    cells are all empty are dropped; short rows are padded with empty cells
    to the widest row.
    """
    lines = split_lines(text)
    if not lines:
        return []

    delimiter = detect_delimiter(lines[0])

    rows: RawGrid = []
    for line in lines:
        row = split_fields(line, delimiter)
        if not any(row):
            continue
        rows.append(row)

    width = max((len(r) for r in rows), default=0)
    padded = 0
    for i, row in enumerate(rows):
        if len(row) < width:
            rows[i] = row + [""] * (width - len(row))
            padded += 1

    logger.debug(
        "read %d rows (delimiter=%r, width=%d, padded=%d)", len(rows), delimiter, width, padded
    )
    return rows
