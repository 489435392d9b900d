"""Workbook sheet parsing via openpyxl.

Cells are read as their displayed text (number formats applied), not their
underlying numeric value, so ``0.060`` formatted as ``0.06`` stays ``0.06``.

Number formats cover fixed and optional decimals, thousands separators,
percent, scientific notation and the negative and zero sections. Date and
time cells always render in ISO form whatever their format says, and
fractions and scaling commas are not applied.
"""

from __future__ import annotations

import logging
import re
from datetime import date, datetime, time
from pathlib import Path
from typing import Any, List, Optional, Tuple

from .._errors import EmptyDataError, SheetNotFoundError, TableDecodeError, UnsupportedFormatError
from .._types import ParsedTable
from .csv_parser import rows_to_table

logger = logging.getLogger(__name__)

_EXCEL_EXTENSIONS = {".xlsx", ".xls", ".xlsm"}
# Legacy binary workbooks openpyxl cannot open
_SKIP_EXTENSIONS = {".xls"}

# bracket codes such as [Red] or [$-409]
_BRACKET_RE = re.compile(r"\[[^\]]*\]")
# literals are kept; `_x` padding and `*x` fill are dropped
_LITERAL_RE = re.compile(r'"([^"]*)"|\\(.)|[_*].')
_NUMBER_PART_RE = re.compile(r"[0#?][0#?,.]*(?:E[+-][0#]+)?%?", re.IGNORECASE)
_EXPONENT_RE = re.compile(r"E([+-])([0#]+)", re.IGNORECASE)
_THOUSANDS_RE = re.compile(r"[0#?],[0#?]")


def is_excel_file(file_path: str) -> bool:
    """Return True for ``.xlsx``, ``.xls`` and ``.xlsm`` paths."""
    return Path(file_path).suffix.lower() in _EXCEL_EXTENSIONS


def _open_workbook(file_path: str):
    path = Path(file_path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {file_path}")

    ext = path.suffix.lower()
    if ext in _SKIP_EXTENSIONS:
        raise UnsupportedFormatError(
            f"Unsupported format: {ext} (openpyxl cannot read {ext} files)"
        )

    import openpyxl

    try:
        return openpyxl.load_workbook(file_path, read_only=True, data_only=True)
    except Exception as exc:
        logger.error("Failed to open workbook %s: %s", file_path, exc)
        raise TableDecodeError(f"{type(exc).__name__}: {exc}") from exc


def get_excel_sheet_names(file_path: str) -> List[str]:
    """Return the worksheet names of a workbook, in workbook order."""
    wb = _open_workbook(file_path)
    try:
        return list(wb.sheetnames)
    finally:
        wb.close()


def _format_general(value: float) -> str:
    if isinstance(value, int) or float(value).is_integer():
        return str(int(value))
    return f"{value:.10g}"


def _decimal_places(body: str) -> Tuple[int, int]:
    """Return the most and fewest digits shown after the decimal point."""
    digits = re.sub(r"[^0#?]", "", body.partition(".")[2])
    return len(digits), digits.count("0")


def _format_number(value: float, number_format: str) -> str:
    sections = _BRACKET_RE.sub("", number_format or "General").split(";")
    fmt, own_sign = sections[0], False
    if value < 0 and len(sections) > 1 and sections[1].strip():
        # the negative section carries its own sign or parentheses
        fmt, value, own_sign = sections[1], -value, True
    elif value == 0 and len(sections) > 2 and sections[2].strip():
        fmt, own_sign = sections[2], True
    fmt = _LITERAL_RE.sub(lambda m: m.group(1) or m.group(2) or "", fmt)

    if "General" in fmt:
        return fmt.replace("General", _format_general(value)) if own_sign else _format_general(value)
    match = _NUMBER_PART_RE.search(fmt)
    if match is None:
        return fmt if own_sign else _format_general(value)

    sign = "-" if value < 0 else ""
    value = abs(value)
    body = match.group(0)
    prefix, suffix = fmt[:match.start()], fmt[match.end():]
    if body.endswith("%"):
        body, suffix = body[:-1], "%" + suffix
    if "%" in suffix:
        value = value * 100

    exponent = _EXPONENT_RE.search(body)
    if exponent:
        places, _ = _decimal_places(body[:exponent.start()])
        mantissa, power = f"{value:.{places}E}".split("E")
        power_value = int(power)
        power_sign = "-" if power_value < 0 else exponent.group(1).replace("-", "")
        rendered = f"{mantissa}E{power_sign}{abs(power_value):0{len(exponent.group(2))}d}"
    else:
        most, fewest = _decimal_places(body)
        thousands = "," if _THOUSANDS_RE.search(body) else ""
        rendered = f"{value:{thousands}.{most}f}"
        if most > fewest:
            whole, _, fraction = rendered.partition(".")
            rendered = f"{whole}.{fraction[:fewest]}{fraction[fewest:].rstrip('0')}"
    return f"{sign}{prefix}{rendered}{suffix}"



def display_value(value: Any, number_format: str = "General") -> str:
    """Render a cell value the way a spreadsheet displays it."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, datetime):
        if value.time() == time(0, 0):
            return value.strftime("%Y-%m-%d")
        return value.strftime("%Y-%m-%d %H:%M:%S")
    if isinstance(value, (date, time)):
        return value.isoformat()
    if isinstance(value, (int, float)):
        return _format_number(value, number_format)
    return str(value)


def _read_rows(ws) -> List[List[str]]:
    rows: List[List[str]] = []
    for row in ws.iter_rows():
        rows.append([
            display_value(getattr(cell, "value", None), getattr(cell, "number_format", "General"))
            for cell in row
        ])
    return rows


def parse_excel(file_path: str, sheet_name: Optional[str] = None) -> ParsedTable:
    """Parse one worksheet into a :class:`ParsedTable`.

    Args:
        file_path: Path to an ``.xlsx``/``.xlsm`` workbook.
        sheet_name: Worksheet to read (default: the first sheet).

    Returns:
        ParsedTable with entirely empty rows removed before border rows are
        assigned.

    Raises:
        FileNotFoundError: If the workbook does not exist.
        UnsupportedFormatError: For legacy ``.xls`` workbooks.
        SheetNotFoundError: If *sheet_name* is not in the workbook.
        EmptyDataError: If no non-empty rows remain.
        TableDecodeError: If the workbook cannot be opened.
    """
    wb = _open_workbook(file_path)
    try:
        target = sheet_name or (wb.sheetnames[0] if wb.sheetnames else "")
        if target not in wb.sheetnames:
            raise SheetNotFoundError(target, wb.sheetnames)
        data = _read_rows(wb[target])
    finally:
        wb.close()

    filtered = [row for row in data if any(cell.strip() for cell in row)]
    if not filtered:
        raise EmptyDataError(f"No data found in sheet \"{target}\" of {Path(file_path).name}")

    logger.debug(
        "Read %d rows from %s [%s] (%d empty rows dropped)",
        len(filtered), file_path, target, len(data) - len(filtered),
    )
    return rows_to_table(filtered)
