"""Shared types for the paste2typ-core library.

Parsers produce a frozen :class:`ParsedTable`; the renderer reads it together
with an explicit :class:`TableConfig` and never mutates either.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class Alignment(str, Enum):
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


class FormatType(str, Enum):
    """Clipboard/text formats the detector can recognize."""

    RTF = "rtf"
    CSV = "csv"
    UNKNOWN = "unknown"


class CSVFormatType(str, Enum):
    EQUALS = "equals"  # ="value" spreadsheet export dialect
    STANDARD = "standard"


# -- Canonical table model --

class TableCell(BaseModel):
    """A single cell with its row-level border hints."""
    model_config = ConfigDict(frozen=True)

    content: str = ""
    alignment: Alignment = Alignment.LEFT
    has_top_border: bool = False
    has_bottom_border: bool = False
    has_superscript: bool = False


class TableRow(BaseModel):
    model_config = ConfigDict(frozen=True)

    cells: Tuple[TableCell, ...] = ()


class ParsedTable(BaseModel):
    """Format-agnostic table produced by every parser.

    Rows may be ragged; ``column_count`` is the widest row and the renderer
    pads shorter rows.
    """
    model_config = ConfigDict(frozen=True)

    rows: Tuple[TableRow, ...] = ()
    column_count: int = Field(default=0, ge=0)
    top_border_rows: Tuple[int, ...] = ()
    bottom_border_rows: Tuple[int, ...] = ()

    @property
    def is_empty(self) -> bool:
        return len(self.rows) == 0 or self.column_count == 0

    def first_column(self) -> List[str]:
        """Content of the first cell of every row ('' for empty rows)."""
        return [row.cells[0].content if row.cells else "" for row in self.rows]

    def to_dataframe(self):
        """Return cell contents as a pandas DataFrame padded to ``column_count``."""
        import pandas as pd

        data = [
            [cell.content for cell in row.cells] + [""] * (self.column_count - len(row.cells))
            for row in self.rows
        ]
        return pd.DataFrame(data, columns=list(range(self.column_count)))


class ExtractedTable(BaseModel):
    """A table fragment found inside a larger pasted text."""
    model_config = ConfigDict(frozen=True)

    content: str
    format: FormatType


# -- Configuration --

DEFAULT_MATH_MODE_EXCLUSIONS: Tuple[str, ...] = (
    "Constant", "Controls", "Observations", "N",
    "Fixed Effects", "Year FE", "Firm FE", "Industry FE", "Country FE",
)

# First-column labels that end the variable-name section of a regression table
DEFAULT_BOUNDARY_KEYWORDS: Tuple[str, ...] = (
    "constant", "controls", "fixed effect", "observations", "n =", "n=",
    "year fe", "firm fe", "industry fe", "country fe", "time fe",
    "individual fe", "institution fe",
)


class TableConfig(BaseModel):
    """Switches for one conversion call."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    auto_convert: bool = True
    preserve_superscript: bool = True
    preserve_borders: bool = True
    preserve_alignment: bool = True
    three_line_table: bool = False
    auto_math_mode: bool = False
    add_divider_after_constant: bool = False
    math_mode_exclusions: Tuple[str, ...] = DEFAULT_MATH_MODE_EXCLUSIONS
    boundary_keywords: Tuple[str, ...] = DEFAULT_BOUNDARY_KEYWORDS

    def merged(self, overrides: Optional[Mapping[str, Any]] = None) -> "TableConfig":
        """Return a new config with *overrides* merged over this one."""
        if not overrides:
            return self
        data = self.model_dump()
        data.update(overrides)
        return type(self).model_validate(data)

    @classmethod
    def from_file(cls, path: str | Path) -> "TableConfig":
        """Load a (possibly partial) JSON config file over the defaults."""
        return cls.model_validate_json(Path(path).read_text(encoding="utf-8"))


DEFAULT_CONFIG = TableConfig()


# -- Pipeline result types --

class ConversionStatus(str, Enum):
    OK = "ok"
    ERROR = "error"
    SKIPPED = "skipped"


class ConversionResult(BaseModel):
    """Outcome of converting one file or sheet."""
    source: str = ""
    label: str = ""
    sheet_name: Optional[str] = None
    status: ConversionStatus = ConversionStatus.OK
    error_code: Optional[str] = None
    error_message: Optional[str] = None
    rows: int = 0
    columns: int = 0
    typst: str = ""


class BatchConversionResult(BaseModel):
    """Outcome of converting several files, combined into panels."""
    results: List[ConversionResult] = Field(default_factory=list)
    combined: str = ""

    @property
    def converted(self) -> List[ConversionResult]:
        return [r for r in self.results if r.status == ConversionStatus.OK]

    @property
    def errors(self) -> Dict[str, str]:
        return {
            r.label or r.source: r.error_message or ""
            for r in self.results
            if r.status != ConversionStatus.OK
        }
