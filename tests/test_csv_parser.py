"""Tests for delimited text parsing."""

import pytest

from paste2typ_core import (
    Alignment,
    CSVFormatType,
    EmptyDataError,
    detect_csv_format,
    is_csv,
    parse_csv,
)


class TestDetectCsvFormat:
    def test_equals_dialect(self):
        assert detect_csv_format('="a",="b"\n="1",="2"') == CSVFormatType.EQUALS

    def test_standard(self):
        assert detect_csv_format("a,b\n1,2") == CSVFormatType.STANDARD


class TestIsCsv:
    def test_comma_lines(self):
        assert is_csv("a,b\n1,2")

    def test_tab_lines(self):
        assert is_csv("a\tb\r\n1\t2")

    def test_single_line(self):
        assert not is_csv("a,b,c")

    def test_blank_lines_do_not_count(self):
        assert not is_csv("a,b\n\n   \n")

    def test_no_delimiter(self):
        assert not is_csv("first line\nsecond line")


class TestParseCsv:
    def test_column_count_is_widest_row(self):
        table = parse_csv("a,b\n1,2,3\nx")
        assert table.column_count == 3
        assert [len(row.cells) for row in table.rows] == [2, 3, 1]

    def test_borders_only_on_first_and_last_row(self, regression_csv):
        table = parse_csv(regression_csv)
        last = len(table.rows) - 1

        for index, row in enumerate(table.rows):
            for cell in row.cells:
                assert cell.has_top_border == (index == 0)
                assert cell.has_bottom_border == (index == last)
        assert table.top_border_rows == (0,)
        assert table.bottom_border_rows == (last,)

    def test_alignment_first_column_left(self, regression_csv):
        table = parse_csv(regression_csv)
        row = table.rows[1]
        assert row.cells[0].alignment == Alignment.LEFT
        assert all(cell.alignment == Alignment.CENTER for cell in row.cells[1:])

    def test_superscript_flag_uses_trailing_stars(self):
        table = parse_csv("a,b\n0.5***,a*b\n1,2")
        assert table.rows[1].cells[0].has_superscript
        assert not table.rows[1].cells[1].has_superscript

    def test_content_is_trimmed(self):
        table = parse_csv("  a , b \n1,2")
        assert [cell.content for cell in table.rows[0].cells] == ["a", "b"]

    def test_tab_delimiter_wins(self):
        table = parse_csv("x, y\t1\nz\t2")
        assert [cell.content for cell in table.rows[0].cells] == ["x, y", "1"]

    def test_equals_dialect_unwrapped(self):
        table = parse_csv('="Name",="Value"\n="a",="0.10"')
        assert [cell.content for cell in table.rows[1].cells] == ["a", "0.10"]

    def test_quoted_fields_keep_commas(self):
        table = parse_csv('"Size, log",1\nx,2')
        assert table.rows[0].cells[0].content == "Size, log"

    def test_trailing_empty_fields_preserved(self):
        table = parse_csv("a,b,\n1,2,")
        assert table.column_count == 3
        assert table.rows[1].cells[2].content == ""

    def test_blank_line_is_single_empty_cell(self):
        table = parse_csv("a,b\n\n1,2")
        assert len(table.rows) == 3
        assert [cell.content for cell in table.rows[1].cells] == [""]

    def test_empty_input_raises(self):
        with pytest.raises(EmptyDataError):
            parse_csv("")

    def test_empty_data_is_value_error(self):
        with pytest.raises(ValueError):
            parse_csv("")
