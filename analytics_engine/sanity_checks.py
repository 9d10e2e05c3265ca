def run_sanity_checks(df, max_null_percentage=50, large_result_rows=10000):
    """
    Warn about suspicious query results. Never raises.

    Drafted SQL is not validated before it runs, so these warnings are the
    only hint that a query may be looking at the wrong columns.

    Args:
        df: Result DataFrame
        max_null_percentage: Warn above this share of NULLs in a column
        large_result_rows: Warn when the result has more rows than this

    Returns:
        list[str]: The warnings that were printed
    """
    warnings = []

    if df.empty:
        return warnings

    for col in df.columns:
        null_pct = (df[col].isnull().sum() / len(df)) * 100
        if null_pct == 100:
            warnings.append(f"Column '{col}' is completely NULL")
        elif null_pct > max_null_percentage:
            warnings.append(f"Column '{col}' has {null_pct:.1f}% NULL values")

    # Common with BRFSS codes when a filter picked the wrong value
    for col in df.columns:
        if df[col].dtype.kind in "if" and (df[col].fillna(0) == 0).all():
            warnings.append(f"Column '{col}' contains only zeros")

    if len(df) > large_result_rows:
        warnings.append(f"Large result set ({len(df):,} rows). Consider adding filters or limits.")

    for warning in warnings:
        print(f"⚠️  Warning: {warning}")

    return warnings
