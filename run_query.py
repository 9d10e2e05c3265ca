import argparse
import asyncio
import duckdb
from analytics_engine.duckdb_manager import DuckDBManager
from analytics_engine.sample_queries import SampleQueryCatalogue
from drafting_layer.drafter_client import draft_sql
from drafting_layer.errors import DraftingError
from execution_layer.executor import QueryExecutionError, describe_result, run_sql
from execution_layer.result_export import to_pivot_json


def parse_csv_args(values):
    """Turn ["2016=data/brfss16.csv", ...] into {2016: "data/brfss16.csv", ...}."""
    uploads = {}
    for value in values or []:
        year, sep, path = value.partition("=")
        if not sep or not year.strip().isdigit() or not path.strip():
            raise ValueError(f"Expected YEAR=PATH, got '{value}'")
        uploads[int(year)] = path.strip()
    return uploads


def parse_pivot_args(value):
    """Split "a, b" into ["a", "b"]; None when the option was not given."""
    if value is None:
        return None
    return [col.strip() for col in value.split(",") if col.strip()]


def load_uploads(db, uploads):
    for year, path in sorted((uploads or {}).items()):
        db.load_csv(year, path)
    return db.loaded_years()


def print_result(result, pivot_columns=None):
    print("\n" + "=" * 80)
    print(describe_result(result))
    print("=" * 80)
    print(result)

    if pivot_columns is not None:
        print("\nPIVOT:")
        print(to_pivot_json(result, pivot_columns))


async def run(question: str, uploads=None, execute=False, api_key=None, db=None, pivot_columns=None):
    """
    Draft SQL for a question and optionally run it.

    Pipeline:
    1. Load any CSVs given on the command line into brfss_{year} tables
    2. Collect loaded years and sample rows from DuckDB
    3. Draft SQL + explanation with Gemini (info files attached when present)
    4. Optionally execute the SQL, print the result and its pivot hand-off
    """
    db = db or DuckDBManager()

    loaded_years = load_uploads(db, uploads)
    sample_rows = db.sample_rows()

    print("\n" + "=" * 80)
    print("QUESTION:")
    print(question)
    print("=" * 80)
    print(f"Loaded tables: {', '.join(f'brfss_{y}' for y in loaded_years) or 'none'}")

    draft = await draft_sql(api_key, question, sample_rows=sample_rows, loaded_years=loaded_years)

    print("\nSQL:")
    print(draft.sql)
    print("\nEXPLANATION:")
    print(draft.explanation or "(none)")

    result = None
    if execute:
        result = run_sql(draft.sql, db=db)
        print_result(result, pivot_columns)

    return draft, result


def run_sample(sample_id: str, uploads=None, db=None, pivot_columns=None, catalogue=None):
    """
    Run one of the curated sample queries without asking Gemini.

    Returns None (after printing which CSVs are missing) when the sample
    needs years that are not loaded.
    """
    db = db or DuckDBManager()
    catalogue = catalogue or SampleQueryCatalogue()

    loaded_years = load_uploads(db, uploads)
    sample = catalogue.get_sample(sample_id)

    missing_message = catalogue.missing_years_message(sample_id, loaded_years)
    if missing_message:
        print(f"\n⚠️  {missing_message}")
        return None

    print("\n" + "=" * 80)
    print(f"SAMPLE: {sample['label']}")
    print(sample["prompt"])
    print("=" * 80)
    print("\nSQL:")
    print(sample["sql"].strip())

    result = run_sql(sample["sql"], db=db)
    print_result(result, pivot_columns)
    return result


def main(argv=None):
    parser = argparse.ArgumentParser(description="Draft DuckDB SQL over BRFSS survey tables with Gemini.")
    parser.add_argument("question", nargs="?", help="Plain-language question")
    parser.add_argument("--csv", action="append", default=[], metavar="YEAR=PATH",
                        help="Load a survey CSV as brfss_YEAR (repeatable)")
    parser.add_argument("--execute", action="store_true", help="Run the drafted SQL")
    parser.add_argument("--sample", default=None, metavar="ID",
                        help="Run a curated sample query instead of drafting one")
    parser.add_argument("--pivot", default=None, metavar="COL,...",
                        help="Print the selected result columns as pivot JSON")
    parser.add_argument("--api-key", default=None, help="Gemini API key (defaults to GEMINI_API_KEY)")
    parser.add_argument("--db", default=None, help="DuckDB database path")
    args = parser.parse_args(argv)

    if not args.question and not args.sample:
        parser.error("a question or --sample ID is required")

    try:
        uploads = parse_csv_args(args.csv)
        pivot_columns = parse_pivot_args(args.pivot)
        db = DuckDBManager(args.db)
        if args.sample:
            run_sample(args.sample, uploads, db, pivot_columns)
        else:
            asyncio.run(run(args.question, uploads, args.execute, args.api_key, db, pivot_columns))
    except (ValueError, DraftingError, QueryExecutionError, duckdb.Error) as e:
        print(f"\n❌ {e}")
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
