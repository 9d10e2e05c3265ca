import os
from google import genai
from dotenv import load_dotenv
from utils.settings import load_config

# Load environment variables from .env file
load_dotenv()


def resolve_api_key(api_key=None, config=None):
    """Explicit key first, then the environment variable named in settings.yaml."""
    if api_key and api_key.strip():
        return api_key.strip()
    config = config if config is not None else load_config("llm")
    api_key_env = config.get("api_key_env", "GEMINI_API_KEY")
    return (os.getenv(api_key_env) or "").strip() or None


def create_gemini_client(api_key):
    """
    Build a Gemini client bound to one API key.

    A fresh client is created per call so concurrent requests made with
    different keys never share configuration.
    """
    return genai.Client(api_key=api_key)


def get_model_name(config=None) -> str:
    config = config if config is not None else load_config("llm")
    return config.get("model", "gemini-2.5-flash")
