"""paste2typ Core -- Turn pasted spreadsheet and document tables into Typst.

CSV/TSV text, RTF tables copied from word processors and Excel workbooks
are parsed into one table model and rendered as a Typst ``#table(...)``.

Quick start::

    from paste2typ_core import convert_clipboard_text, convert_files

    blocks = convert_clipboard_text("Variable,(1)\\nx,0.5***\\nN,100")
    print(blocks[0])

    batch = convert_files(["panel_a.csv", "panel_b.csv"], {"three_line_table": True})
    print(batch.combined)
"""

__version__ = "0.4.0"

from ._errors import (
    EmptyDataError,
    ErrorCode,
    RichTextVariantError,
    SheetNotFoundError,
    TableConversionError,
    TableDecodeError,
    UnsupportedFormatError,
)
from ._types import (
    DEFAULT_CONFIG,
    Alignment,
    BatchConversionResult,
    ConversionResult,
    ConversionStatus,
    CSVFormatType,
    ExtractedTable,
    FormatType,
    ParsedTable,
    TableCell,
    TableConfig,
    TableRow,
)

# Ingestion
from .ingestion import (
    detect_csv_format,
    detect_format,
    extract_tables,
    get_excel_sheet_names,
    is_csv,
    is_excel_file,
    is_rtf,
    is_table_format,
    parse_csv,
    parse_dataframe,
    parse_excel,
    parse_rtf,
)

# Converters
from .converters import (
    add_panel_title,
    combine_panels,
    convert_to_math_mode,
    convert_to_typst,
    escape_typst_special_chars,
    format_cell_content,
    handle_superscript,
    quick_convert,
    should_convert_to_math_mode,
)

# Pipeline
from .pipeline import convert_clipboard_text, convert_files, convert_text, parse_text

__all__ = [
    "__version__",
    # Errors
    "EmptyDataError",
    "ErrorCode",
    "RichTextVariantError",
    "SheetNotFoundError",
    "TableConversionError",
    "TableDecodeError",
    "UnsupportedFormatError",
    # Types
    "DEFAULT_CONFIG",
    "Alignment",
    "BatchConversionResult",
    "ConversionResult",
    "ConversionStatus",
    "CSVFormatType",
    "ExtractedTable",
    "FormatType",
    "ParsedTable",
    "TableCell",
    "TableConfig",
    "TableRow",
    # Ingestion
    "detect_csv_format",
    "detect_format",
    "extract_tables",
    "get_excel_sheet_names",
    "is_csv",
    "is_excel_file",
    "is_rtf",
    "is_table_format",
    "parse_csv",
    "parse_dataframe",
    "parse_excel",
    "parse_rtf",
    # Converters
    "add_panel_title",
    "combine_panels",
    "convert_to_math_mode",
    "convert_to_typst",
    "escape_typst_special_chars",
    "format_cell_content",
    "handle_superscript",
    "quick_convert",
    "should_convert_to_math_mode",
    # Pipeline
    "convert_clipboard_text",
    "convert_files",
    "convert_text",
    "parse_text",
]
