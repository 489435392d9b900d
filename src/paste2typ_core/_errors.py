"""Exception types raised by the parsers and the conversion pipeline.

Every error derives from :class:`TableConversionError` and from the closest
built-in exception, so ``except ValueError`` keeps working for callers that
do not import this module.
"""

from enum import Enum
from typing import List, Optional


class ErrorCode(str, Enum):
    """Machine-readable error codes, recorded on batch results."""

    UNSUPPORTED_FORMAT = "unsupported_format"
    SHEET_NOT_FOUND = "sheet_not_found"
    EMPTY_DATA = "empty_data"
    UNSUPPORTED_VARIANT = "unsupported_variant"
    DECODE_FAILED = "decode_failed"


class TableConversionError(Exception):
    """Base class for table conversion errors."""

    code: ErrorCode = ErrorCode.DECODE_FAILED

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class UnsupportedFormatError(TableConversionError, ValueError):
    """Content matches none of the known table formats."""

    code = ErrorCode.UNSUPPORTED_FORMAT


class SheetNotFoundError(TableConversionError, LookupError):
    """The requested worksheet does not exist in the workbook."""

    code = ErrorCode.SHEET_NOT_FOUND

    def __init__(self, sheet_name: str, available: Optional[List[str]] = None):
        self.sheet_name = sheet_name
        self.available = list(available or [])
        message = f'Sheet "{sheet_name}" not found'
        if self.available:
            message += f" (available: {', '.join(self.available)})"
        super().__init__(message)


class EmptyDataError(TableConversionError, ValueError):
    """The source yielded no usable rows."""

    code = ErrorCode.EMPTY_DATA


class RichTextVariantError(TableConversionError, ValueError):
    """RTF document too irregular to decode into a table."""

    code = ErrorCode.UNSUPPORTED_VARIANT


class TableDecodeError(TableConversionError, ValueError):
    """Malformed delimited text, RTF, or workbook."""

    code = ErrorCode.DECODE_FAILED
