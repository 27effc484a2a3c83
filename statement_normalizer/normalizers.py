"""Stateless field normalizers: dates, amounts, currency, location.

None of these raise on bad input. Unrecognized dates come back unchanged,
unparseable amounts come back as ``None``.
"""

from __future__ import annotations

import re
from datetime import date
from decimal import Decimal
from typing import Optional, Tuple

from .models import Currency, TransactionType
from .rules import (
    AMOUNT_JUNK_PATTERN,
    CURRENCY_KEYWORDS,
    DEFAULT_DOMESTIC_CURRENCY,
    DEFAULT_INTERNATIONAL_CURRENCY,
    KNOWN_CITIES,
)

# ---------------------------------------------------------------------------
# Dates
# ---------------------------------------------------------------------------

_RE_CANONICAL = re.compile(r"^\d{2}-\d{2}-\d{4}$")
_RE_SLASH_DMY = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$")
_RE_DMY = re.compile(r"^(\d{1,2})[-/.](\d{1,2})[-/.](\d{4})$")
_RE_DMY_SHORT = re.compile(r"^(\d{1,2})[-/.](\d{1,2})[-/.](\d{2})$")
_RE_YMD = re.compile(r"^(\d{4})[-/.](\d{1,2})[-/.](\d{1,2})$")
_RE_BARE_DAY = re.compile(r"^(\d{1,2})$")


def _dmy(day: str, month: str, year: str) -> str:
    return f"{day.zfill(2)}-{month.zfill(2)}-{year}"


def normalize_date(value: Optional[str], today: Optional[date] = None) -> str:
    """Normalize a free-text date to ``DD-MM-YYYY``.

    Day-first is assumed whenever day and month are both plausible, so
    month-first (US style) sources are misread. There is no per-row locale
    signal to do better.
    """
    if value is None:
        return ""
    s = value.strip()
    if not s:
        return ""

    if _RE_CANONICAL.match(s):
        return s

    m = _RE_SLASH_DMY.match(s) or _RE_DMY.match(s)
    if m:
        return _dmy(m.group(1), m.group(2), m.group(3))

    m = _RE_DMY_SHORT.match(s)
    if m:
        return _dmy(m.group(1), m.group(2), "20" + m.group(3))

    m = _RE_YMD.match(s)
    if m:
        return _dmy(m.group(3), m.group(2), m.group(1))

    m = _RE_BARE_DAY.match(s)
    if m and 1 <= int(m.group(1)) <= 31:
        ref = today or date.today()
        return _dmy(m.group(1), str(ref.month), str(ref.year))

    return value


# ---------------------------------------------------------------------------
# Amounts
# ---------------------------------------------------------------------------

_RE_AMOUNT_JUNK = re.compile(AMOUNT_JUNK_PATTERN)
# Leading number only, so "1234.50Dr" and "100CR" keep their amount.
_RE_LEADING_NUMBER = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)")


def parse_amount(value: Optional[str]) -> Optional[Decimal]:
    if value is None:
        return None
    cleaned = _RE_AMOUNT_JUNK.sub("", value)
    m = _RE_LEADING_NUMBER.match(cleaned)
    if not m:
        return None
    return Decimal(m.group(0))


# ---------------------------------------------------------------------------
# Currency
# ---------------------------------------------------------------------------


def resolve_currency(transaction_type: TransactionType | str, description: str) -> Currency:
    if TransactionType(transaction_type) is TransactionType.DOMESTIC:
        return Currency(DEFAULT_DOMESTIC_CURRENCY)

    text = (description or "").lower()
    for keywords, code in CURRENCY_KEYWORDS:
        if any(k in text for k in keywords):
            return Currency(code)
    return Currency(DEFAULT_INTERNATIONAL_CURRENCY)


# ---------------------------------------------------------------------------
# Location
# ---------------------------------------------------------------------------

# Longest alias first so "new delhi" wins over "delhi".
_CITY_ALIASES: Tuple[Tuple[str, str], ...] = tuple(
    sorted(
        ((alias, canonical) for canonical, aliases in KNOWN_CITIES.items() for alias in aliases),
        key=lambda pair: len(pair[0]),
        reverse=True,
    )
)

_TOKEN_PUNCT = ",.;:()[]-/"


def extract_location(description: Optional[str]) -> str:
    """Known city in ``description`` (canonical spelling), else its last word."""
    if not description:
        return ""

    text = description.lower()
    for alias, canonical in _CITY_ALIASES:
        if alias in text:
            return canonical

    for word in reversed(description.split()):
        word = word.strip(_TOKEN_PUNCT)
        if word and not word.isdigit():
            return word
    return ""
