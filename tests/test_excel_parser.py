"""Tests for workbook parsing."""

from datetime import datetime

import pytest

# Skip all tests if openpyxl not installed
openpyxl = pytest.importorskip("openpyxl")

from paste2typ_core import (  # noqa: E402
    EmptyDataError,
    SheetNotFoundError,
    UnsupportedFormatError,
    get_excel_sheet_names,
    is_excel_file,
    parse_excel,
)
from paste2typ_core.ingestion.excel_parser import display_value  # noqa: E402


class TestIsExcelFile:
    def test_extensions(self):
        assert is_excel_file("a.xlsx")
        assert is_excel_file("b.XLSM")
        assert is_excel_file("c.xls")
        assert not is_excel_file("d.csv")


class TestDisplayValue:
    def test_general_numbers(self):
        assert display_value(500) == "500"
        assert display_value(2.0) == "2"
        assert display_value(0.06) == "0.06"

    def test_fixed_decimals(self):
        assert display_value(0.5, "0.00") == "0.50"
        assert display_value(-0.0612, "0.000") == "-0.061"

    def test_thousands_and_percent(self):
        assert display_value(1234567, "#,##0") == "1,234,567"
        assert display_value(0.125, "0.0%") == "12.5%"

    def test_scientific(self):
        assert display_value(12345.678, "0.00E+00") == "1.23E+04"
        assert display_value(0.00042, "0.0E+0") == "4.2E-4"

    def test_negative_section(self):
        assert display_value(-1.5, "0.00_);(0.00)") == "(1.50)"
        assert display_value(1.5, "0.00_);(0.00)") == "1.50"
        assert display_value(-1234.5, "#,##0.00;[Red]-#,##0.00") == "-1,234.50"

    def test_zero_section_and_literals(self):
        assert display_value(0, '#,##0;(#,##0);"-"') == "-"
        assert display_value(-2.5, '"$"0.00') == "-$2.50"
        assert display_value(0.5, "0.0#") == "0.5"
        assert display_value(0.126, "0.0#") == "0.13"

    def test_other_values(self):
        assert display_value(None) == ""
        assert display_value(True) == "TRUE"
        assert display_value(datetime(2024, 3, 1)) == "2024-03-01"
        assert display_value("0.48**") == "0.48**"


class TestSheetNames:
    def test_order(self, workbook_file):
        assert get_excel_sheet_names(workbook_file) == ["Main", "Robustness"]

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            get_excel_sheet_names(str(tmp_path / "missing.xlsx"))


class TestParseExcel:
    def test_first_sheet_by_default(self, workbook_file):
        table = parse_excel(workbook_file)
        assert table.rows[0].cells[0].content == "Variable"
        assert table.column_count == 3

    def test_blank_rows_dropped_before_borders(self, workbook_file):
        table = parse_excel(workbook_file)

        assert [row.cells[0].content for row in table.rows] == [
            "Variable", "Size", "Share", "Observations",
        ]
        assert table.bottom_border_rows == (3,)
        assert table.rows[3].cells[0].has_bottom_border
        assert not table.rows[2].cells[0].has_bottom_border

    def test_displayed_values(self, workbook_file):
        table = parse_excel(workbook_file)
        assert [c.content for c in table.rows[1].cells] == ["Size", "0.50", "0.48**"]
        assert [c.content for c in table.rows[2].cells] == ["Share", "12.5%", "1,234,567"]
        assert table.rows[1].cells[2].has_superscript

    def test_named_sheet(self, workbook_file):
        table = parse_excel(workbook_file, "Robustness")
        assert table.column_count == 2
        assert table.rows[1].cells[1].content == "0.41*"

    def test_missing_sheet(self, workbook_file):
        with pytest.raises(SheetNotFoundError) as excinfo:
            parse_excel(workbook_file, "Appendix")
        assert "Appendix" in str(excinfo.value)
        assert excinfo.value.available == ["Main", "Robustness"]

    def test_missing_sheet_is_lookup_error(self, workbook_file):
        with pytest.raises(LookupError):
            parse_excel(workbook_file, "Appendix")

    def test_empty_sheet(self, tmp_path):
        wb = openpyxl.Workbook()
        wb.active.title = "Blank"
        path = tmp_path / "blank.xlsx"
        wb.save(path)

        with pytest.raises(EmptyDataError):
            parse_excel(str(path))

    def test_legacy_xls_unsupported(self, tmp_path):
        path = tmp_path / "old.xls"
        path.write_bytes(b"\xd0\xcf\x11\xe0")

        with pytest.raises(UnsupportedFormatError):
            parse_excel(str(path))
