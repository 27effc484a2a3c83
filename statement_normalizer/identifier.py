"""Header row -> ColumnMap.

The generic pass tries each header cell against the keyword groups in
``rules`` in a fixed order; the first group that matches claims the cell.
A bank-specific pass then adds columns named with that bank's phrasing.
"""

from __future__ import annotations

from typing import Iterable, Optional, Sequence

from .logging_setup import get_logger
from .models import ColumnMap
from .rules import (
    BANK_HEADER_RULES,
    CARD_KEYWORDS,
    CREDIT_KEYWORDS,
    DATE_KEYWORDS,
    DEBIT_KEYWORDS,
    DESCRIPTION_KEYWORDS,
    TRANSACTION_TYPE_KEYWORDS,
)

logger = get_logger(__name__)

_OPPOSITE = {"debit": "credit", "credit": "debit"}


def _contains_any(text: str, keywords: Iterable[str]) -> bool:
    return any(k in text for k in keywords)


def identify_format(
    header: Sequence[str],
    bank_hint: str = "",
    cardholders: Optional[Sequence[str]] = None,
) -> ColumnMap:
    """Map semantic fields to column indices for one header row.

    Unlocated fields stay unset; nothing here raises on an unfamiliar header.
    """
    card_keywords = tuple(c.lower() for c in (cardholders or ())) + CARD_KEYWORDS
    mapping = ColumnMap()

    for index, cell in enumerate(header):
        text = (cell or "").lower()
        if not text:
            continue
        if _contains_any(text, DATE_KEYWORDS):
            if mapping.date is None:
                mapping.date = index
        elif _contains_any(text, DESCRIPTION_KEYWORDS):
            if mapping.description is None:
                mapping.description = index
        elif _contains_any(text, DEBIT_KEYWORDS):
            mapping.debit.add(index)
        elif _contains_any(text, CREDIT_KEYWORDS):
            mapping.credit.add(index)
        elif _contains_any(text, TRANSACTION_TYPE_KEYWORDS):
            mapping.transaction_type.add(index)
        elif _contains_any(text, card_keywords):
            mapping.card_name.add(index)

    apply_bank_rules(mapping, header, bank_hint)

    logger.debug("identified format for bank=%r: %s", bank_hint, mapping)
    return mapping


def apply_bank_rules(mapping: ColumnMap, header: Sequence[str], bank_hint: str) -> ColumnMap:
    """Add columns matching the bank's own header phrasing.

    A column claimed by a bank phrase belongs to that amount field only, so
    it is dropped from the opposite amount set.
    """
    rules = BANK_HEADER_RULES.get((bank_hint or "").upper(), ())
    for index, cell in enumerate(header):
        text = (cell or "").lower()
        for phrase, field in rules:
            if phrase in text:
                getattr(mapping, field).add(index)
                getattr(mapping, _OPPOSITE[field]).discard(index)
                break
    return mapping
