import re
import duckdb
from pathlib import Path
from analytics_engine.survey_years import DATASET_YEARS, table_name
from utils.settings import load_config

TABLE_PATTERN = re.compile(r"^brfss_(\d{4})$")


class DatasetLoadError(ValueError):
    """Raised when a survey CSV cannot be loaded into DuckDB."""


class DuckDBManager:
    def __init__(self, path=None):
        if path is None:
            path = load_config("database").get("path", "data/brfss.duckdb")
        if path != ":memory:":
            Path(path).parent.mkdir(parents=True, exist_ok=True)
        self.conn = duckdb.connect(path)

    def list_tables(self):
        return [row[0] for row in self.conn.execute("SHOW TABLES").fetchall()]

    def loaded_years(self):
        """Years with a brfss_{year} table, ascending."""
        years = []
        for name in self.list_tables():
            match = TABLE_PATTERN.match(name)
            if match and int(match.group(1)) in DATASET_YEARS:
                years.append(int(match.group(1)))
        return sorted(years)

    def load_csv(self, year: int, csv_path) -> dict:
        """
        Load one year's CSV into brfss_{year}, replacing any previous upload.

        Returns:
            dict: {"table": table name, "preview": first 5 rows as records}
        """
        if year not in DATASET_YEARS:
            raise DatasetLoadError(f"Unknown survey year {year}. Expected one of {list(DATASET_YEARS)}")

        table = table_name(year)
        path_literal = str(csv_path).replace("'", "''")
        try:
            self.conn.execute(
                f"CREATE OR REPLACE TABLE {table} AS SELECT * FROM read_csv_auto('{path_literal}')"
            )
            preview = self.conn.execute(f"SELECT * FROM {table} LIMIT 5").fetchdf()
        except duckdb.Error as e:
            raise DatasetLoadError(f"Could not load that CSV: {e}") from e

        print(f"✓ Loaded {Path(csv_path).name} into {table}")
        return {"table": table, "preview": preview.to_dict("records")}

    def sample_rows(self, limit: int = None) -> list:
        """Rows from the first loaded table, or [] if there is nothing to sample."""
        if limit is None:
            limit = load_config("sampling").get("fetch_row_limit", 5)
        years = self.loaded_years()
        if not years:
            return []
        try:
            df = self.conn.execute(f"SELECT * FROM {table_name(years[0])} LIMIT {int(limit)}").fetchdf()
        except duckdb.Error as e:
            print(f"⚠️  Could not fetch sample rows: {e}")
            return []
        return df.to_dict("records")

    def query(self, sql: str):
        return self.conn.execute(sql).fetchdf()

    def close(self):
        self.conn.close()
