"""Shared test fixtures for paste2typ-core."""

import pytest

from paste2typ_core import TableConfig


REGRESSION_CSV = (
    "Variable,(1),(2)\n"
    "GDP growth,0.52***,0.48**\n"
    ",(3.21),(2.10)\n"
    "Inflation,-0.06***,-0.04\n"
    "Constant,1.20,1.15\n"
    "Observations,500,500\n"
)

REGRESSION_RTF = (
    r"{\rtf1\ansi\ansicpg1252\deff0{\fonttbl{\f0\froman Times New Roman;}}"
    "\n"
    r"{\colortbl;\red0\green0\blue0;}"
    "\n"
    r"\trowd\trgaph108\clbrdrt\brdrs\brdrw10\cellx2000\clbrdrt\brdrs\brdrw10\cellx4000"
    "\n"
    r"\pard\intbl\ql Variable\cell\pard\intbl\qc (1)\cell\row"
    "\n"
    r"\trowd\trgaph108\cellx2000\cellx4000"
    "\n"
    r"\pard\intbl\ql Size\cell\pard\intbl\qc 0.52{\super ***}\cell\row"
    "\n"
    r"\trowd\trgaph108\clbrdrb\brdrs\brdrw10\cellx2000\clbrdrb\brdrs\brdrw10\cellx4000"
    "\n"
    r"\pard\intbl\ql Observations\cell\pard\intbl\qr 500\cell\row"
    "\n"
    r"\pard\par}"
)


@pytest.fixture
def regression_csv():
    """A two-model regression table as pasted from a spreadsheet."""
    return REGRESSION_CSV


@pytest.fixture
def regression_rtf():
    """The same kind of table as clipboard RTF from a word processor."""
    return REGRESSION_RTF


@pytest.fixture
def math_config():
    return TableConfig(auto_math_mode=True)


@pytest.fixture
def csv_file(tmp_path):
    """Write the regression CSV to disk."""
    path = tmp_path / "panel_a.csv"
    path.write_text(REGRESSION_CSV, encoding="utf-8")
    return str(path)


@pytest.fixture
def second_csv_file(tmp_path):
    path = tmp_path / "panel_b.csv"
    path.write_text(
        "Variable,(1),(2)\n"
        "Leverage,0.11*,0.09\n"
        "Observations,480,480\n",
        encoding="utf-8",
    )
    return str(path)


@pytest.fixture
def workbook_file(tmp_path):
    """Create a two-sheet workbook with formatted numbers and a blank row."""
    openpyxl = pytest.importorskip("openpyxl")

    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = "Main"
    ws.append(["Variable", "(1)", "(2)"])
    ws.append(["Size", 0.5, "0.48**"])
    ws.append([None, None, None])
    ws.append(["Share", 0.125, 1234567])
    ws.append(["Observations", 500, 480])
    ws["B2"].number_format = "0.00"
    ws["B4"].number_format = "0.0%"
    ws["C4"].number_format = "#,##0"

    robustness = wb.create_sheet("Robustness")
    robustness.append(["Variable", "(1)"])
    robustness.append(["Size", "0.41*"])

    path = tmp_path / "results.xlsx"
    wb.save(path)
    return str(path)
