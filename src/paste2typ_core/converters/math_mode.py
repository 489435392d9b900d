"""Heuristic math-mode detection for regression-table variable names.

Header rows and the variable-name part of the first column are typeset as
Typst math; statistics, standard errors and summary labels are not.
"""

import logging
import re
from typing import Iterable, Optional

from .._types import ParsedTable, TableConfig

logger = logging.getLogger(__name__)

_NUMERIC_START_RE = re.compile(r"^[+-]?\d")
_FUNCTION_PREFIX_RE = re.compile(r"^(log|ln|exp)\(", re.IGNORECASE)
_PAREN_NUMBER_RE = re.compile(r"^\(\s*[+-]?\d")
_ALL_STARS_RE = re.compile(r"^\*+$")
_FUNCTION_CALL_RE = re.compile(r"^(log|ln|exp)\(\s*([^()]+?)\s*\)$", re.IGNORECASE)
_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_ ]*$")
_SINGLE_LETTER_RE = re.compile(r"^[A-Za-z]$")

GREEK_LETTERS = (
    "alpha", "beta", "gamma", "delta", "epsilon", "zeta", "eta", "theta",
    "iota", "kappa", "lambda", "mu", "nu", "xi", "omicron", "pi", "rho",
    "sigma", "tau", "upsilon", "phi", "chi", "psi", "omega",
)

# Rows 0 and 1 are treated as header rows
_HEADER_ROWS = 1


def _string_literal(text: str) -> str:
    escaped = text.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def _italic(text: str) -> str:
    return f"italic({_string_literal(text)})"


def find_boundary_row(table: ParsedTable, keywords: Iterable[str]) -> Optional[int]:
    """Index of the first row whose first cell contains a boundary keyword."""
    keywords = [k.lower() for k in keywords]
    for index, label in enumerate(table.first_column()):
        lowered = label.lower()
        if any(keyword in lowered for keyword in keywords):
            return index
    return None


def should_convert_to_math_mode(
    content: str,
    row_index: int,
    col_index: int,
    table: ParsedTable,
    config: TableConfig,
) -> bool:
    """Decide whether a cell holds a variable name to typeset as math."""
    if not content:
        return False

    if any(exclusion in content for exclusion in config.math_mode_exclusions):
        return False

    # bare statistics, unless wrapped in a function like log(...)
    if _NUMERIC_START_RE.match(content) and not _FUNCTION_PREFIX_RE.match(content):
        return False

    if _PAREN_NUMBER_RE.match(content) or _ALL_STARS_RE.match(content):
        return False

    if row_index <= _HEADER_ROWS:
        return True

    if col_index == 0:
        boundary = find_boundary_row(table, config.boundary_keywords)
        if boundary is None:
            return True
        return row_index < boundary

    return False


def convert_to_math_mode(content: str) -> str:
    """Wrap *content* as a Typst math expression, or return it unchanged.

    Examples::

        "x"            -> "$x$"
        "GDP growth"   -> '$italic("GDP growth")$'
        "PJ_H * Post"  -> '$italic("PJ_H") times italic("Post")$'
        "log(Size)"    -> '$log(italic("Size"))$'
    """
    if "*" in content and not _ALL_STARS_RE.match(content):
        operands = [part.strip() for part in content.split("*") if part.strip()]
        return "$" + " times ".join(_italic(op) for op in operands) + "$"

    match = _FUNCTION_CALL_RE.match(content)
    if match:
        func, argument = match.group(1).lower(), match.group(2)
        return f"${func}({_italic(argument)})$"

    if _IDENTIFIER_RE.match(content):
        if _SINGLE_LETTER_RE.match(content):
            return f"${content}$"
        # multi-letter names would otherwise read as implicit products
        return f"${_italic(content)}$"

    lowered = content.lower()
    if any(letter in lowered for letter in GREEK_LETTERS):
        return f"${_italic(content)}$"

    return content
