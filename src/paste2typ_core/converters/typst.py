"""Typst ``#table(...)`` rendering of a :class:`ParsedTable`."""

from __future__ import annotations

import logging
import re
from typing import Any, Iterable, List, Mapping, Optional, Tuple, Union

from .._types import DEFAULT_CONFIG, ParsedTable, TableConfig
from .formatting import format_cell_content, get_typst_alignment

logger = logging.getLogger(__name__)

# Tables wider than this put every cell on its own line
_CELL_PER_LINE_THRESHOLD = 5

_COLUMN_LABEL_RE = re.compile(r"\([\dIVXivx]+\)|\[[\dIVXivx]+\]")
_COLUMNS_RE = re.compile(r"columns:\s*\(([^)]+)\)")
_CONSTANT_RE = re.compile(r"^constant", re.IGNORECASE)

HLINE = "  table.hline(),"


def generate_columns(column_count: int) -> str:
    """First column ``auto``, the rest equal ``1fr`` shares."""
    cols = ["auto"] + ["1fr"] * (column_count - 1)
    return f"({', '.join(cols)})"


def _default_alignments(column_count: int) -> List[str]:
    return ["left"] + ["center"] * (column_count - 1)


def generate_alignment(table: ParsedTable, config: TableConfig) -> str:
    if not config.preserve_alignment or not table.rows:
        alignments = _default_alignments(table.column_count)
    else:
        alignments = [get_typst_alignment(cell.alignment) for cell in table.rows[0].cells]
        alignments += ["center"] * (table.column_count - len(alignments))
    return f"({', '.join(alignments)})"


def generate_stroke(table: ParsedTable, config: TableConfig) -> str:
    """Stroke directive, including its leading newline, or ''."""
    # three-line tables draw explicit table.hline() rules instead of a grid
    if config.three_line_table:
        return "\n  stroke: none,"

    if not config.preserve_borders:
        return ""

    return (
        "\n  stroke: (x, y) => (\n"
        "    top: if y == 0 { 1pt } else { 0pt },\n"
        f"    bottom: if y == {len(table.rows) - 1} {{ 1pt }} else {{ 0pt }},\n"
        "  ),"
    )


def detect_header_row(table: ParsedTable) -> int:
    """Row index of the header: 1 when row 0 only holds column labels like ``(1)``."""
    if len(table.rows) > 1:
        first_row_text = " ".join(cell.content for cell in table.rows[0].cells)
        if _COLUMN_LABEL_RE.search(first_row_text):
            return 1
    return 0


def _constant_row(table: ParsedTable) -> Optional[int]:
    for index, label in enumerate(table.first_column()):
        if _CONSTANT_RE.match(label):
            return index
    return None


def _rule_block() -> List[str]:
    return ["", HLINE, ""]


def generate_cells(table: ParsedTable, config: TableConfig) -> str:
    lines: List[str] = []
    column_count = table.column_count
    cell_per_line = column_count > _CELL_PER_LINE_THRESHOLD
    last_row = len(table.rows) - 1

    header_row = detect_header_row(table) if config.three_line_table else -1
    divider_row = _constant_row(table) if config.add_divider_after_constant else None

    if config.three_line_table:
        lines.extend([HLINE, ""])

    for row_index, row in enumerate(table.rows):
        cells = [
            "[" + format_cell_content(
                cell.content,
                config.preserve_superscript,
                row_index,
                col_index,
                table,
                config,
            ) + "]"
            for col_index, cell in enumerate(row.cells)
        ]
        cells += ["[]"] * (column_count - len(cells))

        if cell_per_line:
            lines.extend(f"  {cell}," for cell in cells)
            if row_index < last_row:
                lines.extend(["", ""])
        else:
            lines.append("  " + ", ".join(cells) + ",")
            if row_index < last_row:
                lines.append("")

        if row_index == header_row or row_index == divider_row:
            lines.extend(_rule_block())

    if config.three_line_table:
        lines.extend(["", HLINE])

    return "\n".join(lines)


def convert_to_typst(table: ParsedTable, config: TableConfig) -> str:
    """Render *table* as a Typst ``#table`` block ('' for an empty table)."""
    if table.is_empty:
        return ""

    columns = generate_columns(table.column_count)
    alignment = generate_alignment(table, config)
    stroke = generate_stroke(table, config)
    cells = generate_cells(table, config)

    logger.debug(
        "Rendering %d x %d table (three_line=%s, math=%s)",
        len(table.rows), table.column_count, config.three_line_table, config.auto_math_mode,
    )
    return (
        "#table(\n"
        f"  columns: {columns},\n"
        f"  align: {alignment},{stroke}\n"
        "\n"
        f"{cells}\n"
        ")"
    )


def quick_convert(
    table: ParsedTable,
    config: Union[TableConfig, Mapping[str, Any], None] = None,
) -> str:
    """Render with :data:`DEFAULT_CONFIG`, merging a partial *config* over it."""
    if isinstance(config, TableConfig):
        final_config = config
    else:
        final_config = DEFAULT_CONFIG.merged(config)
    return convert_to_typst(table, final_config)


def add_panel_title(typst_code: str, label: str, is_first_panel: bool = False) -> str:
    """Insert a spanning ``Panel: <label>`` row at the top ``table.hline()``.

    Only a rule above the first row counts; rules between rows (such as the
    divider after the constant row) are left alone. The first panel keeps
    its top rule; later panels replace it, so stacked panels do not get a
    doubled border. Blocks without a top rule are returned unchanged.
    """
    match = _COLUMNS_RE.search(typst_code)
    column_count = len(match.group(1).split(",")) if match else 3

    title = [f"  table.cell(colspan: {column_count})[*Panel: {label}*],", HLINE]
    result: List[str] = []
    inserted = False
    in_body = False

    for line in typst_code.split("\n"):
        stripped = line.strip()
        if stripped.startswith("["):
            in_body = True
        if not inserted and not in_body and stripped == "table.hline(),":
            if is_first_panel:
                result.append(line)
            result.extend(title)
            inserted = True
        else:
            result.append(line)

    if not inserted:
        logger.debug("No top rule in block for panel %r; left unchanged", label)
    return "\n".join(result)


def combine_panels(blocks: Iterable[Tuple[str, str]]) -> str:
    """Join ``(typst_code, label)`` pairs as titled panels separated by a blank line."""
    panels = [
        add_panel_title(code, label, is_first_panel=index == 0).strip()
        for index, (code, label) in enumerate(blocks)
    ]
    return "\n\n".join(panels)
