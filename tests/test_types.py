"""Tests for the table model, configuration and the DataFrame bridge."""

import json

import pandas as pd
import pytest
from pydantic import ValidationError

from paste2typ_core import (
    DEFAULT_CONFIG,
    EmptyDataError,
    ErrorCode,
    SheetNotFoundError,
    TableCell,
    TableConfig,
    TableConversionError,
    UnsupportedFormatError,
    parse_csv,
    parse_dataframe,
)


class TestParsedTable:
    def test_frozen(self):
        cell = TableCell(content="a")
        with pytest.raises(ValidationError):
            cell.content = "b"

    def test_to_dataframe_pads_rows(self):
        df = parse_csv("a,b,c\n1").to_dataframe()
        assert df.shape == (2, 3)
        assert list(df.iloc[1]) == ["1", "", ""]

    def test_first_column(self, regression_csv):
        assert parse_csv(regression_csv).first_column()[:2] == ["Variable", "GDP growth"]


class TestTableConfig:
    def test_defaults(self):
        assert DEFAULT_CONFIG.auto_convert
        assert DEFAULT_CONFIG.preserve_superscript
        assert DEFAULT_CONFIG.preserve_borders
        assert DEFAULT_CONFIG.preserve_alignment
        assert not DEFAULT_CONFIG.three_line_table
        assert not DEFAULT_CONFIG.auto_math_mode
        assert "Observations" in DEFAULT_CONFIG.math_mode_exclusions
        assert "constant" in DEFAULT_CONFIG.boundary_keywords

    def test_merged_returns_new_config(self):
        merged = DEFAULT_CONFIG.merged({"auto_math_mode": True})
        assert merged.auto_math_mode
        assert not DEFAULT_CONFIG.auto_math_mode

    def test_merged_without_overrides(self):
        assert DEFAULT_CONFIG.merged(None) is DEFAULT_CONFIG

    def test_from_file(self, tmp_path):
        path = tmp_path / "paste2typ.json"
        path.write_text(json.dumps({
            "three_line_table": True,
            "math_mode_exclusions": ["Mean", "SD"],
        }))

        config = TableConfig.from_file(path)
        assert config.three_line_table
        assert config.math_mode_exclusions == ("Mean", "SD")
        assert config.preserve_borders

    def test_unknown_key(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text('{"threeLineTable": true}')
        with pytest.raises(ValidationError):
            TableConfig.from_file(path)


class TestErrors:
    def test_codes(self):
        assert UnsupportedFormatError("x").code == ErrorCode.UNSUPPORTED_FORMAT
        assert SheetNotFoundError("S").code == ErrorCode.SHEET_NOT_FOUND
        assert EmptyDataError("x").code == ErrorCode.EMPTY_DATA

    def test_base_class(self):
        assert isinstance(EmptyDataError("x"), TableConversionError)
        assert isinstance(SheetNotFoundError("S"), LookupError)

    def test_sheet_message(self):
        err = SheetNotFoundError("Appendix", ["Main"])
        assert str(err) == 'Sheet "Appendix" not found (available: Main)'

    def test_sheet_names_copied(self):
        names = ["Main", "Robustness"]
        err = SheetNotFoundError("Appendix", names)
        names.append("Extra")

        assert err.available == ["Main", "Robustness"]
        assert SheetNotFoundError("Appendix").available == []
        assert str(SheetNotFoundError("Appendix")) == 'Sheet "Appendix" not found'


class TestParseDataframe:
    def test_header_row(self):
        df = pd.DataFrame({"Variable": ["Size", "Age"], "(1)": ["0.5***", None]})
        table = parse_dataframe(df)

        assert [c.content for c in table.rows[0].cells] == ["Variable", "(1)"]
        assert table.rows[2].cells[1].content == ""
        assert table.rows[1].cells[1].has_superscript
        assert table.bottom_border_rows == (2,)

    def test_without_header(self):
        df = pd.DataFrame({"a": [1, 2]})
        table = parse_dataframe(df, include_header=False)
        assert [row.cells[0].content for row in table.rows] == ["1", "2"]

    def test_empty_frame(self):
        with pytest.raises(EmptyDataError):
            parse_dataframe(pd.DataFrame(), include_header=False)
