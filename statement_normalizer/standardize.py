"""
Standardization entry points.

reader -> section processor (format identification + field normalizers)
-> StandardizationResult with the derived output filename.

Any failure past the upload read is reported as a single
``StandardizationError``; callers only learn that standardization failed.
"""

from __future__ import annotations

import re
from contextlib import contextmanager
from typing import Any, Iterator, Optional

from .config import Settings
from .errors import StandardizationError, StatementReadError
from .logging_setup import get_logger
from .models import StandardizationResult
from .reader import decode_content, read_grid
from .sections import process_sections

logger = get_logger(__name__)

_RE_BANK_PREFIX = re.compile(r"^[A-Za-z]+")
_RE_INPUT = re.compile(r"input", re.IGNORECASE)


def bank_hint_from_filename(filename: str) -> str:
    """``"HDFC-Input-Case1.csv"`` -> ``"HDFC"``."""
    match = _RE_BANK_PREFIX.match(filename or "")
    return match.group(0).upper() if match else ""


def output_filename(filename: str) -> str:
    """``"HDFC-Input-Case1.csv"`` -> ``"HDFC-Output-Case1.csv"``."""
    return _RE_INPUT.sub("Output", filename or "", count=1)


def _run(text: str, filename: str, settings: Optional[Settings]) -> StandardizationResult:
    bank_hint = bank_hint_from_filename(filename)
    grid = read_grid(text)
    logger.debug("first rows of %s: %r", filename, grid[:5])
    rows = process_sections(grid, bank_hint, settings)
    return StandardizationResult(rows=rows, filename=output_filename(filename))


@contextmanager
def _failure_guard(filename: str) -> Iterator[None]:
    try:
        yield
    except StandardizationError:
        raise
    except Exception:
        logger.exception("error standardizing statement %s", filename)
        raise StandardizationError() from None


def standardize_text(
    text: str, filename: str, settings: Optional[Settings] = None
) -> StandardizationResult:
    with _failure_guard(filename):
        return _run(text, filename, settings)


def standardize_bytes(
    raw: bytes, filename: str, settings: Optional[Settings] = None
) -> StandardizationResult:
    with _failure_guard(filename):
        text = decode_content(raw)
        return standardize_text(text, filename, settings)


async def standardize_upload(upload: Any, settings: Optional[Settings] = None) -> StandardizationResult:
    """Read an upload (anything with ``filename`` and awaitable ``read()``)."""
    filename = getattr(upload, "filename", None) or ""
    try:
        raw = await upload.read()
    except Exception:
        logger.exception("failed to read upload %s", filename)
        raise StatementReadError() from None
    if raw is None:
        raise StatementReadError()
    return standardize_bytes(raw, filename, settings)
