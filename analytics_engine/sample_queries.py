import yaml
from pathlib import Path
from utils.settings import CONFIG_DIR

CATALOGUE_PATH = CONFIG_DIR / "sample_queries.yaml"


class SampleQueryCatalogue:
    def __init__(self, path=CATALOGUE_PATH):
        self.samples = {}
        try:
            if Path(path).exists():
                with open(path) as f:
                    config = yaml.safe_load(f)
                    for sample in (config or {}).get("samples", []):
                        self.samples[sample["id"]] = sample
        except (OSError, yaml.YAMLError, KeyError, TypeError) as e:
            # A broken catalogue only hides the samples
            print(f"⚠️  Could not load sample queries: {e}")
            self.samples = {}

    def list_samples(self):
        return list(self.samples.values())

    def get_sample(self, sample_id: str) -> dict:
        if sample_id not in self.samples:
            raise ValueError(f"Sample query '{sample_id}' is not registered")
        return self.samples[sample_id]

    def missing_years(self, sample_id: str, loaded_years) -> list:
        """Required years of the sample that are not loaded yet."""
        loaded = set(loaded_years or [])
        required = self.get_sample(sample_id).get("required_years") or []
        return [year for year in required if year not in loaded]

    def missing_years_message(self, sample_id: str, loaded_years):
        missing = self.missing_years(sample_id, loaded_years)
        if not missing:
            return None
        years = ", ".join(str(year) for year in missing)
        return f"Please upload CSVs for {years} to run this sample query."
