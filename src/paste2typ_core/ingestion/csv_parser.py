"""Delimited text (CSV/TSV) parsing into the canonical table model."""

import csv
import io
import logging
import re
from typing import List

from .._errors import EmptyDataError, TableDecodeError
from .._types import Alignment, CSVFormatType, ParsedTable, TableCell, TableRow

logger = logging.getLogger(__name__)

_EQUALS_FIELD_RE = re.compile(r'="[^"]*"')
_LINE_BREAK_RE = re.compile(r"\r?\n")
_TRAILING_STARS_RE = re.compile(r"\*+$")


def detect_csv_format(content: str) -> CSVFormatType:
    """Return ``EQUALS`` when fields are exported as ``="value"``."""
    if _EQUALS_FIELD_RE.search(content):
        return CSVFormatType.EQUALS
    return CSVFormatType.STANDARD


def is_csv(content: str) -> bool:
    """Heuristic: at least two non-blank lines and a comma or tab somewhere.

    The real delimiter is chosen later by :func:`parse_csv`.
    """
    lines = [line for line in _LINE_BREAK_RE.split(content.strip()) if line.strip()]
    if len(lines) < 2:
        return False
    return any("," in line or "\t" in line for line in lines)


def build_row(row: List[str], row_index: int, row_total: int) -> TableRow:
    """Build the cells of one row using the delimited-source cell rules."""
    cells = []
    for col_index, raw in enumerate(row):
        raw = "" if raw is None else str(raw)
        cells.append(TableCell(
            content=raw.strip(),
            alignment=Alignment.LEFT if col_index == 0 else Alignment.CENTER,
            has_top_border=row_index == 0,
            has_bottom_border=row_index == row_total - 1,
            has_superscript=bool(_TRAILING_STARS_RE.search(raw)),
        ))
    return TableRow(cells=tuple(cells))


def rows_to_table(data: List[List[str]]) -> ParsedTable:
    """Assemble a :class:`ParsedTable` from raw string rows (not padded)."""
    total = len(data)
    rows = tuple(build_row(row, i, total) for i, row in enumerate(data))
    return ParsedTable(
        rows=rows,
        column_count=max((len(row) for row in data), default=0),
        top_border_rows=(0,) if total else (),
        bottom_border_rows=(total - 1,) if total else (),
    )


def parse_csv(content: str) -> ParsedTable:
    """Parse comma- or tab-delimited text.

    Args:
        content: Raw delimited text, optionally in the ``="value"`` dialect.

    Returns:
        ParsedTable with one row per input line (blank lines become a row
        holding a single empty cell).

    Raises:
        TableDecodeError: If the tokenizer rejects the input.
        EmptyDataError: If the text holds no rows at all.
    """
    cleaned = content
    if detect_csv_format(content) == CSVFormatType.EQUALS:
        cleaned = content.replace('="', '"')

    delimiter = "\t" if "\t" in content else ","

    try:
        reader = csv.reader(io.StringIO(cleaned, newline=""), delimiter=delimiter)
        data = [row if row else [""] for row in reader]
    except csv.Error as exc:
        logger.error("CSV tokenizer failed: %s", exc)
        raise TableDecodeError(f"Cannot parse delimited text: {exc}") from exc

    if not data:
        raise EmptyDataError("No rows found in delimited text")

    logger.debug(
        "Parsed %d delimited rows (delimiter=%r)", len(data), delimiter
    )
    return rows_to_table(data)
