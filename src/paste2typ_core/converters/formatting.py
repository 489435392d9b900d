"""Per-cell Typst formatting: R-squared labels, math mode, significance
stars and escaping.

The steps in :func:`format_cell_content` run in a fixed order. Superscript
spans are built during escaping so that only spans made from significance
stars stay live markup; a literal ``#super[...]`` in the text is escaped.
"""

import re
from typing import List, Optional

from .._types import Alignment, ParsedTable, TableConfig
from .math_mode import convert_to_math_mode, should_convert_to_math_mode

_R_SQUARED_PREFIXED_RE = re.compile(r"^(Adj\.|Adjusted|Pseudo)\s*(R2|R²|R\^2)$", re.IGNORECASE)
_R_SQUARED_RE = re.compile(r"^(R2|R²|R\^2)$", re.IGNORECASE)

_SUPERSCRIPT_RE = re.compile(r"(-?\d+\.?\d*|\))(\*+)")

# Private-use code points cannot collide with pasted text or escapes
_PLACEHOLDER = "\ue000{}\ue001"
_PLACEHOLDER_RE = re.compile("\ue000(\\d+)\ue001")

_SPECIAL_CHARS = ("\\", "*", "#", "$", "<", ">", "@")

_TYPST_ALIGNMENTS = {
    Alignment.LEFT: "left",
    Alignment.CENTER: "center",
    Alignment.RIGHT: "right",
}


def normalize_r_squared(text: str) -> Optional[str]:
    """Return the Typst form of an R-squared label, or None."""
    match = _R_SQUARED_PREFIXED_RE.match(text)
    if match:
        return f"{match.group(1)} $R^2$"
    if _R_SQUARED_RE.match(text):
        return "$R^2$"
    return None


def handle_superscript(text: str) -> str:
    """Turn significance stars after a number or ``)`` into ``#super[...]``.

    ``-0.06***`` becomes ``-0.06#super[***]``; ``(14.40)`` is unchanged.
    """
    return _SUPERSCRIPT_RE.sub(lambda m: f"{m.group(1)}#super[{m.group(2)}]", text)


def escape_typst_special_chars(text: str) -> str:
    """Backslash-escape characters that are markup inside a Typst ``[...]`` block."""
    for char in _SPECIAL_CHARS:
        text = text.replace(char, "\\" + char)
    return text


def _escape_with_superscripts(text: str, preserve_superscript: bool) -> str:
    spans: List[str] = []

    def stash(match: re.Match) -> str:
        stars = escape_typst_special_chars(match.group(2))
        spans.append(f"{match.group(1)}#super[{stars}]")
        return _PLACEHOLDER.format(len(spans) - 1)

    if preserve_superscript:
        text = _SUPERSCRIPT_RE.sub(stash, text)
    text = escape_typst_special_chars(text)
    return _PLACEHOLDER_RE.sub(lambda m: spans[int(m.group(1))], text)


def format_cell_content(
    content: str,
    preserve_superscript: bool = True,
    row_index: Optional[int] = None,
    col_index: Optional[int] = None,
    table: Optional[ParsedTable] = None,
    config: Optional[TableConfig] = None,
) -> str:
    """Format one cell's text as Typst markup.

    Args:
        content: Raw cell text.
        preserve_superscript: Convert significance stars to ``#super``.
        row_index: Row position, needed for math mode.
        col_index: Column position, needed for math mode.
        table: The table being rendered, needed for math mode.
        config: Conversion config; math mode runs only if it enables it.

    Returns:
        Typst markup for the inside of the cell's ``[...]`` block.
    """
    if not content or not content.strip():
        return ""

    formatted = content.strip()

    r_squared = normalize_r_squared(formatted)
    if r_squared is not None:
        return r_squared

    if (
        config is not None
        and config.auto_math_mode
        and row_index is not None
        and col_index is not None
        and table is not None
        and should_convert_to_math_mode(formatted, row_index, col_index, table, config)
    ):
        converted = convert_to_math_mode(formatted)
        if converted != formatted:
            return converted

    return _escape_with_superscripts(formatted, preserve_superscript)


def get_typst_alignment(alignment: Alignment) -> str:
    return _TYPST_ALIGNMENTS.get(alignment, "center")
