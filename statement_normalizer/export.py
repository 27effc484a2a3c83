from __future__ import annotations

import csv
import io
from decimal import Decimal
from typing import Iterable, List, Optional

from .models import NormalizedRow, StandardizationResult
from .rules import EXPORT_COLUMNS, NORMALIZED_DELIMITER


def _amount(value: Optional[Decimal]) -> str:
    return "" if value is None else str(value)


def export_rows(rows: Iterable[NormalizedRow]) -> List[List[str]]:
    """Header plus one list of cells per row, in export column order."""
    out: List[List[str]] = [list(EXPORT_COLUMNS)]
    for row in rows:
        out.append([
            row.date,
            row.description,
            _amount(row.debit),
            _amount(row.credit),
            row.currency.value,
            row.card_name,
            row.transaction_type.value,
            row.location,
        ])
    return out


def to_csv_text(result: StandardizationResult) -> str:
    """Serialize rows for download.

    Cells containing a comma or a double quote are quoted, with inner quotes
    doubled. Rows are joined by ``\\n`` without a trailing newline.
    """
    outp = io.StringIO(newline="")
    writer = csv.writer(
        outp,
        delimiter=NORMALIZED_DELIMITER,
        quotechar='"',
        quoting=csv.QUOTE_MINIMAL,
        lineterminator="\n",
    )
    writer.writerows(export_rows(result.rows))
    text = outp.getvalue()
    return text[:-1] if text.endswith("\n") else text
