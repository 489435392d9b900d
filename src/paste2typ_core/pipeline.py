"""End-to-end conversion: pasted text or table files in, Typst out.

Each table or file is converted independently. A failure is logged and
recorded on its :class:`ConversionResult`; the rest of the batch continues.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Iterable, List, Mapping, Optional, Union

from ._errors import TableConversionError, UnsupportedFormatError
from ._types import (
    DEFAULT_CONFIG,
    BatchConversionResult,
    ConversionResult,
    ConversionStatus,
    FormatType,
    ParsedTable,
    TableConfig,
)
from .converters import combine_panels, quick_convert
from .ingestion import (
    detect_format,
    extract_tables,
    get_excel_sheet_names,
    is_excel_file,
    parse_csv,
    parse_excel,
    parse_rtf,
)

logger = logging.getLogger(__name__)

ConfigLike = Union[TableConfig, Mapping[str, Any], None]


def _resolve_config(config: ConfigLike) -> TableConfig:
    if isinstance(config, TableConfig):
        return config
    return DEFAULT_CONFIG.merged(config)


def parse_text(content: str, format: FormatType) -> ParsedTable:
    """Parse *content* with the parser for *format*."""
    if format == FormatType.CSV:
        return parse_csv(content)
    if format == FormatType.RTF:
        return parse_rtf(content)
    raise UnsupportedFormatError("Content is not a supported table format")


def convert_text(content: str, format: FormatType, config: ConfigLike = None) -> str:
    """Parse *content* as *format* and render it as Typst."""
    return quick_convert(parse_text(content, format), _resolve_config(config))


def convert_clipboard_text(content: str, config: ConfigLike = None) -> List[str]:
    """Convert pasted text into zero or more Typst table blocks.

    Whole-text RTF or delimited content yields one block. Otherwise tables
    embedded in the text are extracted and converted in the order found;
    tables that fail to parse are skipped. An empty list means the text
    should be pasted unchanged, which is always the case when
    ``auto_convert`` is off.
    """
    final_config = _resolve_config(config)
    if not final_config.auto_convert:
        logger.debug("auto_convert is off; leaving pasted text unchanged")
        return []
    format = detect_format(content)

    if format != FormatType.UNKNOWN:
        block = convert_text(content, format, final_config)
        return [block] if block else []

    blocks: List[str] = []
    for index, table in enumerate(extract_tables(content)):
        try:
            block = convert_text(table.content, table.format, final_config)
        except TableConversionError as exc:
            logger.warning("Skipping extracted table %d (%s): %s", index + 1, table.format.value, exc)
            continue
        if block:
            blocks.append(block)

    logger.info("Converted %d embedded tables", len(blocks))
    return blocks


def _read_text(path: Path) -> str:
    for enc in ("utf-8-sig", "utf-8", "latin-1"):
        try:
            return path.read_text(encoding=enc)
        except UnicodeDecodeError:
            continue
    return path.read_text(encoding="latin-1", errors="replace")


def _failed(source: str, label: str, exc: Exception, sheet_name: Optional[str] = None) -> ConversionResult:
    code = exc.code.value if isinstance(exc, TableConversionError) else type(exc).__name__
    status = (
        ConversionStatus.SKIPPED if isinstance(exc, UnsupportedFormatError)
        else ConversionStatus.ERROR
    )
    logger.warning("Could not convert %s: %s", label, exc)
    return ConversionResult(
        source=source,
        label=label,
        sheet_name=sheet_name,
        status=status,
        error_code=code,
        error_message=str(exc),
    )


def _converted(source: str, label: str, table: ParsedTable, config: TableConfig,
               sheet_name: Optional[str] = None) -> ConversionResult:
    return ConversionResult(
        source=source,
        label=label,
        sheet_name=sheet_name,
        rows=len(table.rows),
        columns=table.column_count,
        typst=quick_convert(table, config),
    )


def _convert_workbook(
    path: Path,
    config: TableConfig,
    sheet_name: Optional[str],
    all_sheets: bool,
) -> List[ConversionResult]:
    source = str(path)
    try:
        sheet_names = get_excel_sheet_names(source)
    except (TableConversionError, OSError) as exc:
        return [_failed(source, path.stem, exc)]

    if all_sheets and len(sheet_names) > 1:
        targets = [(name, f"{path.stem}_{name}") for name in sheet_names]
    else:
        targets = [(sheet_name or (sheet_names[0] if sheet_names else None), path.stem)]

    results = []
    for target, label in targets:
        try:
            table = parse_excel(source, target)
        except (TableConversionError, OSError) as exc:
            results.append(_failed(source, label, exc, target))
            continue
        results.append(_converted(source, label, table, config, target))
    return results


def _convert_delimited_file(path: Path, config: TableConfig) -> ConversionResult:
    source = str(path)
    try:
        content = _read_text(path)
        format = detect_format(content)
        if format == FormatType.UNKNOWN:
            raise UnsupportedFormatError("Unsupported format")
        if format == FormatType.RTF:
            raise UnsupportedFormatError(
                "RTF files are not supported. Copy the table from the word processor and paste it directly."
            )
        table = parse_csv(content)
    except (TableConversionError, OSError) as exc:
        return _failed(source, path.stem, exc)
    return _converted(source, path.stem, table, config)


def convert_files(
    file_paths: Iterable[str],
    config: ConfigLike = None,
    sheet_name: Optional[str] = None,
    all_sheets: bool = False,
) -> BatchConversionResult:
    """Convert CSV and workbook files, combining several into titled panels.

    Args:
        file_paths: CSV/TSV or ``.xlsx``/``.xlsm`` paths.
        config: Full or partial conversion config.
        sheet_name: Worksheet to read from workbooks (default: first sheet).
        all_sheets: Convert every worksheet of each workbook.

    Returns:
        BatchConversionResult with one result per file (or sheet) and the
        combined Typst: a single table as-is, several as panels.
    """
    final_config = _resolve_config(config)
    results: List[ConversionResult] = []

    for file_path in file_paths:
        path = Path(file_path)
        if not path.is_file():
            results.append(_failed(
                str(path), path.stem, FileNotFoundError(f"File not found: {file_path}")
            ))
            continue
        if is_excel_file(str(path)):
            results.extend(_convert_workbook(path, final_config, sheet_name, all_sheets))
        else:
            results.append(_convert_delimited_file(path, final_config))

    converted = [r for r in results if r.status == ConversionStatus.OK and r.typst]
    if len(converted) == 1:
        combined = converted[0].typst
    else:
        combined = combine_panels((r.typst, r.label) for r in converted)

    logger.info(
        "Converted %d of %d tables", len(converted), len(results)
    )
    return BatchConversionResult(results=results, combined=combined)
