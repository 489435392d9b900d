"""pandas DataFrame bridge into the canonical table model."""

from typing import List

import pandas as pd

from .._errors import EmptyDataError
from .._types import ParsedTable
from .csv_parser import rows_to_table


def parse_dataframe(df: pd.DataFrame, include_header: bool = True) -> ParsedTable:
    """Convert a DataFrame into a :class:`ParsedTable`.

    Args:
        df: Source frame. Missing values become empty cells.
        include_header: Emit the column labels as row 0.

    Raises:
        EmptyDataError: If the frame has no rows and no header is emitted.
    """
    data: List[List[str]] = []
    if include_header:
        data.append([str(col) for col in df.columns])

    for record in df.itertuples(index=False, name=None):
        data.append(["" if pd.isna(value) else str(value) for value in record])

    if not data or not any(data):
        raise EmptyDataError("DataFrame has no rows")
    return rows_to_table(data)
