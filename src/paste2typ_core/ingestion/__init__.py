"""paste2typ ingestion -- CSV, RTF and workbook parsing plus format detection."""

from .csv_parser import detect_csv_format, is_csv, parse_csv
from .detector import detect_format, extract_tables, is_table_format
from .excel_parser import get_excel_sheet_names, is_excel_file, parse_excel
from .frame import parse_dataframe
from .rtf_parser import is_rtf, parse_rtf

__all__ = [
    "detect_csv_format",
    "is_csv",
    "parse_csv",
    "detect_format",
    "extract_tables",
    "is_table_format",
    "get_excel_sheet_names",
    "is_excel_file",
    "parse_excel",
    "parse_dataframe",
    "is_rtf",
    "parse_rtf",
]
