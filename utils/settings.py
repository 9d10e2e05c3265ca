import yaml
from pathlib import Path

CONFIG_DIR = Path(__file__).resolve().parent / "config"
CONFIG_PATH = CONFIG_DIR / "settings.yaml"

DEFAULTS = {
    "llm": {
        "model": "gemini-2.5-flash",
        "api_key_env": "GEMINI_API_KEY",
    },
    "files": {
        "list_page_size": 100,
        "default_mime_type": "text/plain",
    },
    "database": {
        "path": "data/brfss.duckdb",
    },
    "sampling": {
        "prompt_row_limit": 6,
        "fetch_row_limit": 5,
    },
}


def load_config(section: str, path=CONFIG_PATH) -> dict:
    """
    Load one section of settings.yaml, layered over the built-in defaults.

    A missing or unreadable settings file is not fatal: the defaults are
    returned and a warning is printed.
    """
    config = dict(DEFAULTS.get(section, {}))
    try:
        with open(path) as f:
            loaded = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        print(f"⚠️  Could not load settings from {path}: {e}")
        return config

    config.update(loaded.get(section) or {})
    return config
