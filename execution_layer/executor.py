import duckdb
from analytics_engine.duckdb_manager import DuckDBManager
from analytics_engine.sanity_checks import run_sanity_checks


class QueryExecutionError(Exception):
    """Raised when a statement is empty or DuckDB rejects it."""


def run_sql(statement: str, db: DuckDBManager = None):
    """
    Run a (possibly drafted) SQL statement against the loaded survey tables.

    Returns:
        pandas.DataFrame with the result
    """
    statement = (statement or "").strip()
    if not statement:
        raise QueryExecutionError("Add SQL to run.")

    db = db or DuckDBManager()
    try:
        result_df = db.query(statement)
    except duckdb.Error as e:
        raise QueryExecutionError(str(e) or "Query failed.") from e

    run_sanity_checks(result_df)
    return result_df


def describe_result(result_df) -> str:
    count = len(result_df)
    return f"Query returned {count} row{'' if count == 1 else 's'}."
