"""Tests for per-cell Typst formatting."""

import pytest

from paste2typ_core import (
    Alignment,
    TableConfig,
    escape_typst_special_chars,
    format_cell_content,
    handle_superscript,
    parse_csv,
)
from paste2typ_core.converters import get_typst_alignment, normalize_r_squared


class TestNormalizeRSquared:
    @pytest.mark.parametrize("label, expected", [
        ("Adj.R2", "Adj. $R^2$"),
        ("Adjusted R²", "Adjusted $R^2$"),
        ("Pseudo R^2", "Pseudo $R^2$"),
        ("R2", "$R^2$"),
        ("r²", "$R^2$"),
        ("R^2", "$R^2$"),
    ])
    def test_labels(self, label, expected):
        assert normalize_r_squared(label) == expected

    def test_other_text(self):
        assert normalize_r_squared("R2 within") is None
        assert normalize_r_squared("Size") is None


class TestHandleSuperscript:
    def test_negative_number(self):
        assert handle_superscript("-0.06***") == "-0.06#super[***]"

    def test_closing_paren(self):
        assert handle_superscript("(0.52)**") == "(0.52)#super[**]"

    def test_no_stars(self):
        assert handle_superscript("(14.40)") == "(14.40)"

    def test_non_numeric_stars_untouched(self):
        assert handle_superscript("A * B") == "A * B"


class TestEscape:
    def test_each_special_char(self):
        assert escape_typst_special_chars("#$<>@*") == "\\#\\$\\<\\>\\@\\*"

    def test_backslash_first(self):
        assert escape_typst_special_chars("a\\b*") == "a\\\\b\\*"


class TestFormatCellContent:
    def test_empty(self):
        assert format_cell_content("") == ""
        assert format_cell_content("   ") == ""

    def test_superscript_span_is_live_markup(self):
        result = format_cell_content("-0.06***")
        assert result == "-0.06#super[\\*\\*\\*]"
        assert result.count("#super[") == 1
        assert result.startswith("-0.06#")

    def test_superscript_disabled_escapes_stars(self):
        assert format_cell_content("0.5**", preserve_superscript=False) == "0.5\\*\\*"

    def test_text_around_superscript_escaped(self):
        assert format_cell_content("$1.5*** @ #2") == "\\$1.5#super[\\*\\*\\*] \\@ \\#2"

    def test_literal_super_markup_escaped(self):
        assert format_cell_content("#super[x]") == "\\#super[x]"
        assert format_cell_content("#super[x]", preserve_superscript=False) == "\\#super[x]"

    def test_literal_super_markup_next_to_stars(self):
        result = format_cell_content("#super[a] 0.5*")
        assert result == "\\#super[a] 0.5#super[\\*]"

    def test_standard_error(self):
        assert format_cell_content("(3.21)") == "(3.21)"

    def test_content_trimmed(self):
        assert format_cell_content("  0.5  ") == "0.5"

    def test_r_squared_wins_over_math_and_superscript(self):
        table = parse_csv("R2,0.5\nx,1")
        config = TableConfig(auto_math_mode=True)
        assert format_cell_content("R2", True, 0, 0, table, config) == "$R^2$"

    def test_math_mode_returns_wrapped(self):
        table = parse_csv("Variable,(1)\nSize,0.5\nConstant,1")
        config = TableConfig(auto_math_mode=True)
        assert format_cell_content("Size", True, 1, 0, table, config) == '$italic("Size")$'

    def test_math_mode_off_by_default(self):
        table = parse_csv("Variable,(1)\nSize,0.5")
        assert format_cell_content("Size", True, 1, 0, table, TableConfig()) == "Size"

    def test_math_mode_needs_position(self):
        config = TableConfig(auto_math_mode=True)
        assert format_cell_content("Size", True, config=config) == "Size"


class TestAlignment:
    def test_mapping(self):
        assert get_typst_alignment(Alignment.LEFT) == "left"
        assert get_typst_alignment(Alignment.CENTER) == "center"
        assert get_typst_alignment(Alignment.RIGHT) == "right"
