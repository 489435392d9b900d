"""paste2typ converters -- cell formatting, math mode and Typst rendering."""

from .formatting import (
    escape_typst_special_chars,
    format_cell_content,
    get_typst_alignment,
    handle_superscript,
    normalize_r_squared,
)
from .math_mode import convert_to_math_mode, find_boundary_row, should_convert_to_math_mode
from .typst import add_panel_title, combine_panels, convert_to_typst, quick_convert

__all__ = [
    "escape_typst_special_chars",
    "format_cell_content",
    "get_typst_alignment",
    "handle_superscript",
    "normalize_r_squared",
    "convert_to_math_mode",
    "find_boundary_row",
    "should_convert_to_math_mode",
    "add_panel_title",
    "combine_panels",
    "convert_to_typst",
    "quick_convert",
]
