"""RTF table parsing into the canonical table model.

Only clipboard RTF produced by common office applications is guaranteed to
parse; hand-written or heavily nested documents may be rejected.
"""

import logging
from typing import Any, Dict, List

from .._errors import RichTextVariantError, TableDecodeError
from .._types import Alignment, ParsedTable, TableCell, TableRow
from ._rtf_reader import NodeType, RtfNode, read_rtf

logger = logging.getLogger(__name__)

_ALIGN_TOKENS = {
    "center": Alignment.CENTER,
    "c": Alignment.CENTER,
    "right": Alignment.RIGHT,
    "r": Alignment.RIGHT,
}


def is_rtf(content: str) -> bool:
    """RTF documents start with ``{\\rtf``."""
    return content.strip().startswith("{\\rtf")


def parse_rtf(content: str) -> ParsedTable:
    """Parse the table rows of an RTF document.

    Raises:
        RichTextVariantError: If the document holds no table rows or uses
            constructs the decoder does not support.
        TableDecodeError: If the document is malformed.
    """
    try:
        document = read_rtf(content)
    except (RichTextVariantError, TableDecodeError) as exc:
        logger.error("RTF decode failed: %s", exc)
        raise

    table = _extract_table(document)
    if not table.rows:
        raise RichTextVariantError("No table rows found in RTF document")
    return table


def _extract_table(document: RtfNode) -> ParsedTable:
    rows: List[TableRow] = []
    top_border_rows: List[int] = []
    bottom_border_rows: List[int] = []

    for node in document.content:
        if node.type != NodeType.TABLE_ROW:
            continue
        row = _parse_row(node)
        row_index = len(rows)
        if any(cell.has_top_border for cell in row.cells):
            top_border_rows.append(row_index)
        if any(cell.has_bottom_border for cell in row.cells):
            bottom_border_rows.append(row_index)
        rows.append(row)

    return ParsedTable(
        rows=tuple(rows),
        column_count=max((len(row.cells) for row in rows), default=0),
        top_border_rows=tuple(top_border_rows),
        bottom_border_rows=tuple(bottom_border_rows),
    )


def _parse_row(row_node: RtfNode) -> TableRow:
    cells = [
        _parse_cell(child) for child in row_node.content
        if child.type == NodeType.TABLE_CELL
    ]
    return TableRow(cells=tuple(cells))


def _parse_cell(cell_node: RtfNode) -> TableCell:
    content = _collect_text(cell_node).strip()
    return TableCell(
        content=content,
        alignment=_cell_alignment(cell_node),
        has_top_border=_has_border(cell_node.style, "top"),
        has_bottom_border=_has_border(cell_node.style, "bottom"),
        # superscript runs need not be last in rich text, so any star counts
        has_superscript="*" in content,
    )


def _collect_text(node: RtfNode) -> str:
    """Concatenate all text below *node*, dispatching on the node type."""
    if node.type == NodeType.TEXT:
        return node.value
    if node.type in (NodeType.TABLE_CELL, NodeType.PARAGRAPH, NodeType.SPAN):
        return "".join(_collect_text(child) for child in node.content)
    # rows and documents never appear inside a cell
    return ""


def _align_from_style(style: Dict[str, Any]):
    align = style.get("align")
    if not align:
        return None
    return _ALIGN_TOKENS.get(str(align).lower())


def _cell_alignment(cell_node: RtfNode) -> Alignment:
    alignment = _align_from_style(cell_node.style)
    if alignment is not None:
        return alignment
    for child in cell_node.content:
        if child.type == NodeType.PARAGRAPH:
            alignment = _align_from_style(child.style)
            if alignment is not None:
                return alignment
    return Alignment.LEFT


def _has_border(style: Dict[str, Any], position: str) -> bool:
    borders = style.get("borders") or {}
    return borders.get(position) is not None
