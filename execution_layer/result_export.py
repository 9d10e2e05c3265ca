"""
Hand query results over to the pivot view.

The pivot view takes plain JSON, so every value is converted to a native
Python scalar first (numpy integers, timestamps and Decimals do not
serialize).
"""

import json
import pandas as pd
from decimal import Decimal


def _to_plain(value):
    if value is None or (pd.api.types.is_scalar(value) and pd.isna(value)):
        return None
    if hasattr(value, "item") and not isinstance(value, (str, bytes)):
        # numpy scalars
        value = value.item()
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (str, int, float, bool)):
        return value
    return str(value)


def select_pivot_columns(result_df, columns) -> dict:
    """
    Keep only the selected columns of a query result.

    Args:
        result_df: DataFrame returned by run_sql
        columns: Column names to send, in order

    Returns:
        dict: {"rows": [...], "columns": [...]}, JSON-serializable
    """
    if result_df is None or result_df.empty:
        raise ValueError("Run a query first to send results to Pivot.")

    selected = [col for col in columns or [] if col]
    if not selected:
        raise ValueError("Select at least one column to send to Pivot.")

    unknown = [col for col in selected if col not in result_df.columns]
    if unknown:
        raise ValueError(f"Unknown columns: {unknown}. Available columns: {list(result_df.columns)}")

    rows = [
        {col: _to_plain(value) for col, value in zip(selected, record)}
        for record in result_df[selected].itertuples(index=False, name=None)
    ]
    return {"rows": rows, "columns": selected}


def to_pivot_json(result_df, columns) -> str:
    return json.dumps(select_pivot_columns(result_df, columns))
