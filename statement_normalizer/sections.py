"""Section-aware row processing.

Some statements stack one table per (cardholder x domestic/international)
combination in a single file. Each block opens with banner rows naming the
transaction type or cardholder, followed by its own column header row. The
processor walks the grid as a small state machine: ``step`` takes the
current ``SectionContext`` and one row, and returns the next context plus
the normalized row, if any, to emit.

Precedence for a row (first match wins):

1. blank row               -> skipped
2. Domestic/International  -> section banner, expect a column header next
3. known cardholder name   -> cardholder banner, state unchanged
4. awaiting a header       -> column header, rebuild the ColumnMap
5. consuming               -> data row
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import List, NamedTuple, Optional, Sequence, Set, Tuple

from .config import Settings, get_settings
from .identifier import identify_format
from .logging_setup import get_logger
from .models import ColumnMap, NormalizedRow, TransactionType
from .normalizers import extract_location, normalize_date, parse_amount, resolve_currency
from .rules import (
    DOMESTIC,
    INTERNATIONAL,
    SECTION_CREDIT_PATTERN,
    SECTION_DATE_PATTERN,
    SECTION_DEBIT_PATTERN,
    SECTION_DESCRIPTION_PATTERN,
)

logger = get_logger(__name__)

_RE_DATE = re.compile(SECTION_DATE_PATTERN, re.IGNORECASE)
_RE_DEBIT = re.compile(SECTION_DEBIT_PATTERN, re.IGNORECASE)
_RE_CREDIT = re.compile(SECTION_CREDIT_PATTERN, re.IGNORECASE)
_RE_DESCRIPTION = re.compile(SECTION_DESCRIPTION_PATTERN, re.IGNORECASE)


class ParserState(Enum):
    AWAITING_HEADER = "awaiting_header"
    AWAITING_COLUMN_HEADER = "awaiting_column_header"
    CONSUMING = "consuming"


class Action(str, Enum):
    SKIP = "skip"
    SECTION_BANNER = "section_banner"
    CARDHOLDER_BANNER = "cardholder_banner"
    HEADER = "header"
    EMIT = "emit"
    DROP = "drop"


@dataclass(frozen=True)
class SectionContext:
    state: ParserState = ParserState.AWAITING_COLUMN_HEADER
    transaction_type: TransactionType = TransactionType.DOMESTIC
    card_holder: str = ""
    columns: ColumnMap = field(default_factory=ColumnMap)
    bank_hint: str = ""
    cardholders: Tuple[str, ...] = ()


class Transition(NamedTuple):
    context: SectionContext
    action: Action
    row: Optional[NormalizedRow] = None


def initial_context(bank_hint: str = "", settings: Optional[Settings] = None) -> SectionContext:
    settings = settings or get_settings()
    return SectionContext(
        card_holder=settings.default_holder,
        bank_hint=bank_hint,
        cardholders=tuple(settings.cardholders),
    )


# ---------------------------------------------------------------------------
# Row classification helpers
# ---------------------------------------------------------------------------


def _cell(row: Sequence[str], index: Optional[int]) -> str:
    if index is None or index < 0 or index >= len(row):
        return ""
    return (row[index] or "").strip()


def _is_blank(row: Sequence[str]) -> bool:
    return all(not (c or "").strip() for c in row)


def _section_banner(row: Sequence[str]) -> Optional[str]:
    for cell in row:
        if DOMESTIC in cell or INTERNATIONAL in cell:
            return cell
    return None


def _cardholder_banner(row: Sequence[str], cardholders: Sequence[str]) -> Optional[str]:
    for cell in row:
        name = (cell or "").strip()
        if name and name in cardholders:
            return name
    return None


def _first_match(row: Sequence[str], pattern: re.Pattern, claimed: Set[int]) -> Optional[int]:
    for index, cell in enumerate(row):
        if index not in claimed and pattern.search(cell or ""):
            return index
    return None


def derive_columns(
    row: Sequence[str],
    bank_hint: str = "",
    cardholders: Sequence[str] = (),
) -> ColumnMap:
    """Build the ColumnMap for a column header row inside a section.

    The section regexes decide first; each cell serves one field. Amount or
    description columns they miss are taken from ``identify_format`` so bank
    phrasing like "Withdrawal Amount" still resolves.
    """
    claimed: Set[int] = set()
    columns = ColumnMap()

    columns.date = _first_match(row, _RE_DATE, claimed)
    if columns.date is not None:
        claimed.add(columns.date)

    for name, pattern in (("debit", _RE_DEBIT), ("credit", _RE_CREDIT)):
        index = _first_match(row, pattern, claimed)
        if index is not None:
            getattr(columns, name).add(index)
            claimed.add(index)

    identified = identify_format(row, bank_hint, cardholders)
    if not columns.debit:
        columns.debit = identified.debit - claimed
        claimed |= columns.debit
    if not columns.credit:
        columns.credit = identified.credit - claimed
        claimed |= columns.credit

    columns.description = _first_match(row, _RE_DESCRIPTION, claimed)
    if columns.description is None and identified.description not in claimed:
        columns.description = identified.description
    if columns.description is not None:
        claimed.add(columns.description)

    columns.transaction_type = identified.transaction_type - claimed
    columns.card_name = identified.card_name - claimed
    return columns


def _first_filled(row: Sequence[str], indices: Set[int]) -> str:
    for index in sorted(indices):
        value = _cell(row, index)
        if value:
            return value
    return ""


def _row_transaction_type(row: Sequence[str], ctx: SectionContext) -> TransactionType:
    for index in sorted(ctx.columns.transaction_type):
        value = _cell(row, index).lower()
        if "international" in value:
            return TransactionType.INTERNATIONAL
        if "domestic" in value:
            return TransactionType.DOMESTIC
    return ctx.transaction_type


def _holder_named_in(text: str, cardholders: Sequence[str]) -> Optional[str]:
    text = text.lower()
    for name in cardholders:
        if name.lower() in text:
            return name
    return None


def _row_card_holder(row: Sequence[str], ctx: SectionContext, description: str) -> str:
    """Card column first, then a name mentioned in the description."""
    for index in sorted(ctx.columns.card_name):
        name = _holder_named_in(_cell(row, index), ctx.cardholders)
        if name:
            return name
    return _holder_named_in(description, ctx.cardholders) or ctx.card_holder


def build_row(row: Sequence[str], ctx: SectionContext) -> Optional[NormalizedRow]:
    """Normalize one data row, or ``None`` when it lacks a date or amounts."""
    columns = ctx.columns
    raw_date = _cell(row, columns.date)
    raw_debit = _first_filled(row, columns.debit)
    raw_credit = _first_filled(row, columns.credit)
    if not raw_date or not (raw_debit or raw_credit):
        return None

    description = _cell(row, columns.description)
    transaction_type = _row_transaction_type(row, ctx)
    return NormalizedRow(
        date=normalize_date(raw_date),
        description=description,
        debit=parse_amount(raw_debit) if raw_debit else None,
        credit=parse_amount(raw_credit) if raw_credit else None,
        currency=resolve_currency(transaction_type, description),
        card_name=_row_card_holder(row, ctx, description),
        transaction_type=transaction_type,
        location=extract_location(description),
    )


# ---------------------------------------------------------------------------
# Transition function
# ---------------------------------------------------------------------------


def _header_transition(row: Sequence[str], ctx: SectionContext) -> Transition:
    columns = derive_columns(row, ctx.bank_hint, ctx.cardholders)
    state = ParserState.CONSUMING if columns.date is not None else ParserState.AWAITING_HEADER
    logger.debug("column header %r -> %s (%s)", list(row), columns, state.value)
    return Transition(replace(ctx, state=state, columns=columns), Action.HEADER)


def step(ctx: SectionContext, row: Sequence[str]) -> Transition:
    if _is_blank(row):
        return Transition(ctx, Action.SKIP)

    banner = _section_banner(row)
    if banner is not None:
        transaction_type = (
            TransactionType.INTERNATIONAL if INTERNATIONAL in banner else TransactionType.DOMESTIC
        )
        logger.debug("section banner %r -> %s", banner, transaction_type.value)
        return Transition(
            replace(ctx, state=ParserState.AWAITING_COLUMN_HEADER, transaction_type=transaction_type),
            Action.SECTION_BANNER,
        )

    holder = _cardholder_banner(row, ctx.cardholders)
    if holder is not None:
        logger.debug("cardholder banner -> %s", holder)
        return Transition(replace(ctx, card_holder=holder), Action.CARDHOLDER_BANNER)

    if ctx.state is not ParserState.CONSUMING:
        return _header_transition(row, ctx)

    normalized = build_row(row, ctx)
    if normalized is None:
        logger.debug("dropped row without date or amount: %r", list(row))
        return Transition(ctx, Action.DROP)
    return Transition(ctx, Action.EMIT, normalized)


def process_sections(
    grid: Sequence[Sequence[str]],
    bank_hint: str = "",
    settings: Optional[Settings] = None,
) -> List[NormalizedRow]:
    ctx = initial_context(bank_hint, settings)
    rows: List[NormalizedRow] = []
    for raw in grid:
        ctx, action, normalized = step(ctx, raw)
        if action is Action.EMIT:
            rows.append(normalized)
    logger.info("standardized %d of %d rows (bank=%r)", len(rows), len(grid), bank_hint)
    return rows
