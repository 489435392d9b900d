"""Format detection and table extraction for pasted text."""

import logging
import re
from typing import List

from .._types import ExtractedTable, FormatType
from .csv_parser import is_csv
from .rtf_parser import is_rtf

logger = logging.getLogger(__name__)

_RTF_ROW_RE = re.compile(r"\\trowd[\s\S]*?(?=\\trowd|\\par\\par|\Z)")
_RTF_STUB_HEADER = "{\\rtf1\\ansi\\deff0 "

_MIN_TABLE_LINES = 3
_MIN_DELIMITERS = 2
_DELIMITER_TOLERANCE = 2


def detect_format(content: str) -> FormatType:
    """Detect whether *content* is RTF, delimited text, or neither.

    RTF has an explicit header and is checked first.
    """
    if not content or not content.strip():
        return FormatType.UNKNOWN

    normalized = content.replace("\r\n", "\n")

    if is_rtf(normalized):
        return FormatType.RTF
    if is_csv(normalized):
        return FormatType.CSV
    return FormatType.UNKNOWN


def is_table_format(content: str) -> bool:
    return detect_format(content) in (FormatType.RTF, FormatType.CSV)


def _delimiter_count(line: str) -> int:
    return max(line.count(","), line.count('="'))


def _extract_rtf_tables(content: str) -> List[ExtractedTable]:
    tables = []
    if "\\trowd" not in content:
        return tables
    for match in _RTF_ROW_RE.finditer(content):
        fragment = match.group(0)
        if not fragment.startswith("{\\rtf"):
            fragment = f"{_RTF_STUB_HEADER}{fragment}}}"
        tables.append(ExtractedTable(content=fragment, format=FormatType.RTF))
    return tables


def _extract_csv_tables(content: str) -> List[ExtractedTable]:
    tables: List[ExtractedTable] = []
    current: List[str] = []
    last_count = -1

    def flush() -> None:
        if len(current) >= _MIN_TABLE_LINES:
            table_content = "\n".join(current)
            if is_csv(table_content):
                tables.append(ExtractedTable(content=table_content, format=FormatType.CSV))
            else:
                logger.debug("Discarding %d-line run: not delimited text", len(current))

    for raw_line in content.split("\n"):
        line = raw_line.strip()

        if not line:
            flush()
            current, last_count = [], -1
            continue

        count = _delimiter_count(line)
        if count >= _MIN_DELIMITERS:
            if last_count == -1 or abs(count - last_count) <= _DELIMITER_TOLERANCE:
                current.append(line)
            else:
                # delimiter count jumped: probably a different table
                flush()
                current = [line]
            last_count = count
        else:
            flush()
            current, last_count = [], -1

    flush()
    return tables


def extract_tables(content: str) -> List[ExtractedTable]:
    """Find tables embedded in a larger pasted text.

    RTF row fragments come first, then runs of delimited lines, each in the
    order they appear.

    Returns:
        List of :class:`ExtractedTable`; empty when nothing table-like is found.
    """
    tables = _extract_rtf_tables(content) + _extract_csv_tables(content)
    logger.debug("Extracted %d tables from %d characters", len(tables), len(content))
    return tables
